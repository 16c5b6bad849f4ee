import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from .. import store
from ..database import get_db
from ..exceptions import NotFoundError, ValidationError
from ..models import User
from ..schemas import MessageOut, UserCreate, UserOut, UserUpdate
from ..security import get_current_user, hash_password
from ..sessions import SessionStore, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[UserOut])
def list_employees(db: Session = Depends(get_db)):
    return store.list_users(db)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_employee(payload: UserCreate, db: Session = Depends(get_db)):
    employee = store.create_user(
        db,
        username=payload.username,
        password_hash=hash_password(payload.password),
        email=payload.email,
        full_name=payload.full_name,
        role=payload.role,
    )
    logger.info("Created employee %s", employee.username)
    return employee


@router.patch("/{employee_id}", response_model=UserOut)
def update_employee(employee_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    employee = store.get_user(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")
    return store.update_user(db, employee, payload.model_dump(exclude_unset=True))


@router.delete("/{employee_id}", response_model=MessageOut)
def delete_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    sessions: SessionStore = Depends(get_session_store),
):
    if employee_id == current_user.id:
        raise ValidationError("Cannot delete your own account")

    employee = store.get_user(db, employee_id)
    if not employee:
        raise NotFoundError("Employee not found")

    store.delete_user(db, employee)
    sessions.destroy_user(employee_id)
    logger.info("Deleted employee %s", employee_id)
    return MessageOut()
