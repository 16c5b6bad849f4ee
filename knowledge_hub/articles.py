"""Article writes that span more than one row.

An article's tag membership lives in ``article_tags`` and its publish
timestamp is derived from status changes; both are kept consistent here
rather than in the request handlers.
"""

import logging
from typing import Any, Iterable

from sqlalchemy import delete, or_, update
from sqlalchemy.orm import Session, joinedload, selectinload

from .exceptions import NotFoundError
from .models import STATUS_PUBLISHED, Article, ArticleTag, utcnow
from .store import apply_patch, handle_db_errors

logger = logging.getLogger(__name__)

ARTICLE_FIELDS = ("title", "content", "excerpt", "cover_image", "status", "category_id")


def replace_article_tags(db: Session, article_id: str, tag_ids: Iterable[str]) -> None:
    """Drop every link of the article, then link it to ``tag_ids``.

    Runs inside the caller's transaction, so the delete and the inserts
    commit or roll back together.
    """
    db.execute(
        delete(ArticleTag).where(ArticleTag.article_id == article_id).execution_options(synchronize_session=False)
    )

    # Repeated ids collapse to one link; order of first appearance is kept.
    unique_ids = list(dict.fromkeys(tag_ids))
    if not unique_ids:
        return

    db.add_all([ArticleTag(article_id=article_id, tag_id=tag_id) for tag_id in unique_ids])


@handle_db_errors
def create_article(
    db: Session,
    author_id: str,
    fields: dict[str, Any],
    tag_ids: list[str] | None = None,
) -> Article:
    now = utcnow()
    article = Article(author_id=author_id, views=0, created_at=now, updated_at=now)
    apply_patch(article, fields, ARTICLE_FIELDS)
    article.published_at = now if article.status == STATUS_PUBLISHED else None

    db.add(article)
    db.flush()

    if tag_ids:
        replace_article_tags(db, article.id, tag_ids)

    db.commit()
    db.refresh(article)
    logger.info("Created article %s (%s) by user %s", article.id, article.status, author_id)
    return article


@handle_db_errors
def update_article(
    db: Session,
    article_id: str,
    changes: dict[str, Any],
    tag_ids: list[str] | None = None,
) -> Article:
    """Apply a partial update.

    ``tag_ids=None`` leaves the article's tags alone; any list, including an
    empty one, replaces them. Every update carrying ``status="published"``
    stamps ``published_at`` again, even when the article was already published.
    """
    article = db.get(Article, article_id)
    if not article:
        raise NotFoundError("Article not found")

    apply_patch(article, changes, ARTICLE_FIELDS)
    now = utcnow()
    article.updated_at = now
    if changes.get("status") == STATUS_PUBLISHED:
        article.published_at = now

    if tag_ids is not None:
        replace_article_tags(db, article.id, tag_ids)

    db.commit()
    db.refresh(article)
    logger.info("Updated article %s (fields: %s, tags replaced: %s)", article.id, sorted(changes), tag_ids is not None)
    return article


@handle_db_errors
def delete_article(db: Session, article_id: str) -> None:
    article = db.get(Article, article_id)
    if not article:
        raise NotFoundError("Article not found")

    db.delete(article)
    db.commit()
    logger.info("Deleted article %s", article_id)


@handle_db_errors
def increment_views(db: Session, article_id: str) -> None:
    # The database applies the delta, so concurrent readers never lose a count.
    result = db.execute(
        update(Article)
        .where(Article.id == article_id)
        .values(views=Article.views + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError("Article not found")
    db.commit()


def _with_relations(query):
    return query.options(
        joinedload(Article.author),
        joinedload(Article.category),
        selectinload(Article.tags),
    )


def get_article_with_relations(db: Session, article_id: str) -> Article | None:
    return _with_relations(db.query(Article)).filter(Article.id == article_id).first()


def list_articles_with_relations(
    db: Session,
    search: str | None = None,
    category_id: str | None = None,
    status: str | None = None,
) -> list[Article]:
    query = _with_relations(db.query(Article))

    term = (search or "").strip()
    if term:
        # Plain substring match: % and _ in the term are escaped. SQLite only
        # folds ASCII case, so non-ASCII searches stay case-sensitive there.
        query = query.filter(
            or_(Article.title.icontains(term, autoescape=True), Article.excerpt.icontains(term, autoescape=True))
        )
    if category_id:
        query = query.filter(Article.category_id == category_id)
    if status:
        query = query.filter(Article.status == status)

    return query.order_by(Article.created_at.desc()).all()


def list_recent_articles(db: Session, limit: int = 5) -> list[Article]:
    return _with_relations(db.query(Article)).order_by(Article.created_at.desc()).limit(limit).all()
