from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import store
from ..database import get_db
from ..exceptions import NotFoundError
from ..schemas import MessageOut, TagCreate, TagOut, TagUpdate
from ..security import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


def _get_or_404(db: Session, tag_id: str):
    tag = store.get_tag(db, tag_id)
    if not tag:
        raise NotFoundError("Tag not found")
    return tag


@router.get("", response_model=list[TagOut])
def list_tags(db: Session = Depends(get_db)):
    return store.list_tags(db)


@router.post("", response_model=TagOut, status_code=status.HTTP_201_CREATED)
def create_tag(payload: TagCreate, db: Session = Depends(get_db)):
    return store.create_tag(db, name=payload.name)


@router.get("/{tag_id}", response_model=TagOut)
def get_tag(tag_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, tag_id)


@router.patch("/{tag_id}", response_model=TagOut)
def update_tag(tag_id: str, payload: TagUpdate, db: Session = Depends(get_db)):
    tag = _get_or_404(db, tag_id)
    return store.update_tag(db, tag, payload.model_dump(exclude_unset=True))


@router.delete("/{tag_id}", response_model=MessageOut)
def delete_tag(tag_id: str, db: Session = Depends(get_db)):
    store.delete_tag(db, _get_or_404(db, tag_id))
    return MessageOut()
