"""Table-level access for users, categories, tags and dashboard counts.

Lookups by id or unique key return ``None`` when nothing matches; callers
decide whether absence is an error. Writes that would break a uniqueness
rule raise ``ConflictError`` before anything is sent to the database, and
anything the database itself rejects comes back as ``StoreError``.
"""

from functools import wraps
from typing import Any, Callable, Iterable

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .exceptions import ConflictError, StoreError, ValidationError
from .models import STATUS_DRAFT, STATUS_PUBLISHED, Article, ArticleTag, Category, Tag, User

USER_PATCH_FIELDS = ("email", "full_name", "role")
CATEGORY_PATCH_FIELDS = ("name", "description", "color")
TAG_PATCH_FIELDS = ("name",)


def handle_db_errors(function: Callable) -> Callable:
    """Roll back and re-raise database failures as StoreError.

    The wrapped function must take the SQLAlchemy session as its first argument.
    """

    @wraps(function)
    def wrapper(db: Session, *args, **kwargs):
        try:
            return function(db, *args, **kwargs)
        except IntegrityError as e:
            db.rollback()
            raise StoreError(f"Data integrity violation: {e.orig}") from e
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Database operation failed: {e}") from e

    return wrapper


def apply_patch(obj: Any, changes: dict[str, Any], allowed: Iterable[str]) -> None:
    allowed = set(allowed)
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")
    for key, value in changes.items():
        setattr(obj, key, value)


# Users


def get_user(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def list_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


@handle_db_errors
def create_user(
    db: Session,
    *,
    username: str,
    password_hash: str,
    email: str,
    full_name: str,
    role: str,
) -> User:
    if get_user_by_username(db, username):
        raise ConflictError("Username already exists")
    if get_user_by_email(db, email):
        raise ConflictError("Email already exists")

    user = User(username=username, password=password_hash, email=email, full_name=full_name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@handle_db_errors
def update_user(db: Session, user: User, changes: dict[str, Any]) -> User:
    email = changes.get("email")
    if email is not None:
        exists = db.query(User).filter(User.email == email, User.id != user.id).first()
        if exists:
            raise ConflictError("Email already exists")

    apply_patch(user, changes, USER_PATCH_FIELDS)
    db.commit()
    db.refresh(user)
    return user


@handle_db_errors
def delete_user(db: Session, user: User) -> None:
    authored = db.query(func.count(Article.id)).filter(Article.author_id == user.id).scalar()
    if authored:
        raise ConflictError(f"User still authors {authored} article(s)")

    db.delete(user)
    db.commit()


# Categories


def get_category(db: Session, category_id: str) -> Category | None:
    return db.get(Category, category_id)


def get_category_by_name(db: Session, name: str) -> Category | None:
    return db.query(Category).filter(Category.name == name).first()


def list_categories(db: Session) -> list[Category]:
    return db.query(Category).order_by(Category.name).all()


@handle_db_errors
def create_category(db: Session, *, name: str, description: str | None, color: str) -> Category:
    if get_category_by_name(db, name):
        raise ConflictError("Category name already exists")

    category = Category(name=name, description=description, color=color)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


@handle_db_errors
def update_category(db: Session, category: Category, changes: dict[str, Any]) -> Category:
    name = changes.get("name")
    if name is not None:
        exists = db.query(Category).filter(Category.name == name, Category.id != category.id).first()
        if exists:
            raise ConflictError("Category name already exists")

    apply_patch(category, changes, CATEGORY_PATCH_FIELDS)
    db.commit()
    db.refresh(category)
    return category


@handle_db_errors
def delete_category(db: Session, category: Category) -> None:
    # Articles keep existing; the foreign key sets their category_id to NULL.
    db.delete(category)
    db.commit()


# Tags


def get_tag(db: Session, tag_id: str) -> Tag | None:
    return db.get(Tag, tag_id)


def get_tag_by_name(db: Session, name: str) -> Tag | None:
    return db.query(Tag).filter(Tag.name == name).first()


def list_tags(db: Session) -> list[Tag]:
    return db.query(Tag).order_by(Tag.name).all()


@handle_db_errors
def create_tag(db: Session, *, name: str) -> Tag:
    if get_tag_by_name(db, name):
        raise ConflictError("Tag name already exists")

    tag = Tag(name=name)
    db.add(tag)
    db.commit()
    db.refresh(tag)
    return tag


@handle_db_errors
def update_tag(db: Session, tag: Tag, changes: dict[str, Any]) -> Tag:
    name = changes.get("name")
    if name is not None:
        exists = db.query(Tag).filter(Tag.name == name, Tag.id != tag.id).first()
        if exists:
            raise ConflictError("Tag name already exists")

    apply_patch(tag, changes, TAG_PATCH_FIELDS)
    db.commit()
    db.refresh(tag)
    return tag


@handle_db_errors
def delete_tag(db: Session, tag: Tag) -> None:
    db.delete(tag)
    db.commit()


def get_article(db: Session, article_id: str) -> Article | None:
    return db.get(Article, article_id)


def get_article_tags(db: Session, article_id: str) -> list[Tag]:
    return (
        db.query(Tag)
        .join(ArticleTag, ArticleTag.tag_id == Tag.id)
        .filter(ArticleTag.article_id == article_id)
        .order_by(Tag.name)
        .all()
    )


# Dashboard


def get_dashboard_stats(db: Session) -> dict[str, int]:
    total, published, draft, views = db.query(
        func.count(Article.id),
        func.coalesce(func.sum(case((Article.status == STATUS_PUBLISHED, 1), else_=0)), 0),
        func.coalesce(func.sum(case((Article.status == STATUS_DRAFT, 1), else_=0)), 0),
        func.coalesce(func.sum(Article.views), 0),
    ).one()

    return {
        "total_articles": total,
        "published_articles": published,
        "draft_articles": draft,
        "total_employees": db.query(func.count(User.id)).scalar(),
        "total_views": views,
        "total_categories": db.query(func.count(Category.id)).scalar(),
    }
