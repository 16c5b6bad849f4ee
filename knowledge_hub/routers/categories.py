from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import store
from ..database import get_db
from ..exceptions import NotFoundError
from ..schemas import CategoryCreate, CategoryOut, CategoryUpdate, MessageOut
from ..security import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


def _get_or_404(db: Session, category_id: str):
    category = store.get_category(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    return category


@router.get("", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return store.list_categories(db)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    return store.create_category(db, name=payload.name, description=payload.description, color=payload.color)


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, category_id)


@router.patch("/{category_id}", response_model=CategoryOut)
def update_category(category_id: str, payload: CategoryUpdate, db: Session = Depends(get_db)):
    category = _get_or_404(db, category_id)
    return store.update_category(db, category, payload.model_dump(exclude_unset=True))


@router.delete("/{category_id}", response_model=MessageOut)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    store.delete_category(db, _get_or_404(db, category_id))
    return MessageOut()
