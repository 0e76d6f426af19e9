"""Dashboard: revenue windows, stock summary and chart series."""
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from voicepos.api.deps import get_current_user, get_db
from voicepos.models.user import User
from voicepos.schemas.dashboard import ChartPoint, DashboardStats
from voicepos.services import dashboard_service

router = APIRouter()


@router.get("/stats", response_model=DashboardStats)
def stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return dashboard_service.dashboard_stats(db, current_user.id)


@router.get("/chart-data", response_model=List[ChartPoint])
def chart_data(
    period: str = Query("week", description="week | month | year"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return dashboard_service.chart_series(db, current_user.id, period)
