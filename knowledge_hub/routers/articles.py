from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from .. import articles as article_manager
from .. import store
from ..config import get_settings
from ..database import get_db
from ..exceptions import NotFoundError
from ..models import User
from ..schemas import ArticleCreate, ArticleDetailOut, ArticleOut, ArticleStatus, ArticleUpdate, MessageOut, TagOut
from ..security import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[ArticleDetailOut])
def list_articles(
    search: str | None = Query(default=None),
    category_id: str | None = Query(default=None),
    status_filter: ArticleStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    return article_manager.list_articles_with_relations(
        db, search=search, category_id=category_id, status=status_filter
    )


@router.get("/recent", response_model=list[ArticleDetailOut])
def list_recent_articles(limit: int | None = Query(default=None, ge=1, le=100), db: Session = Depends(get_db)):
    return article_manager.list_recent_articles(db, limit or get_settings().recent_articles_limit)


@router.get("/{article_id}", response_model=ArticleDetailOut)
def get_article(article_id: str, edit: bool = Query(default=False), db: Session = Depends(get_db)):
    if not store.get_article(db, article_id):
        raise NotFoundError("Article not found")

    # Opening the editor is not a read.
    if not edit:
        article_manager.increment_views(db, article_id)

    article = article_manager.get_article_with_relations(db, article_id)
    if not article:
        raise NotFoundError("Article not found")
    return article


@router.get("/{article_id}/tags", response_model=list[TagOut])
def get_article_tags(article_id: str, db: Session = Depends(get_db)):
    if not store.get_article(db, article_id):
        raise NotFoundError("Article not found")
    return store.get_article_tags(db, article_id)


@router.post("", response_model=ArticleOut, status_code=status.HTTP_201_CREATED)
def create_article(
    payload: ArticleCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    fields = payload.model_dump(exclude={"tag_ids"})
    return article_manager.create_article(db, current_user.id, fields, payload.tag_ids)


@router.patch("/{article_id}", response_model=ArticleOut)
def update_article(article_id: str, payload: ArticleUpdate, db: Session = Depends(get_db)):
    changes = payload.model_dump(exclude_unset=True, exclude={"tag_ids"})
    # An omitted (or null) tag_ids keeps the current tags; [] clears them.
    return article_manager.update_article(db, article_id, changes, payload.tag_ids)


@router.delete("/{article_id}", response_model=MessageOut)
def delete_article(article_id: str, db: Session = Depends(get_db)):
    article_manager.delete_article(db, article_id)
    return MessageOut()
