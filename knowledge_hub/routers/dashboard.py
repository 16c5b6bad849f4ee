from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import store
from ..database import get_db
from ..schemas import DashboardStats
from ..security import get_current_user

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return DashboardStats(**store.get_dashboard_stats(db))
