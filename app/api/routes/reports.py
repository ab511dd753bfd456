from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.user import Profile
from app.schemas.reports import AnalyticsSummaryOut, DailySaleOut, GstReportOut, ProfitLossOut
from app.services import reports

router = APIRouter(prefix="/reports", tags=["Reports"])


def _check_range(date_from: date | None, date_to: date | None) -> None:
    if date_from and date_to and date_from > date_to:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="date_from must not be after date_to")


@router.get("/summary", response_model=AnalyticsSummaryOut)
def get_summary(
    date_from: date | None = None,
    date_to: date | None = None,
    _: Profile = Depends(require_permission("reports:view")),
    db: Session = Depends(get_db),
):
    _check_range(date_from, date_to)
    return reports.summary(db, date_from, date_to)


@router.get("/daily-sales", response_model=list[DailySaleOut])
def get_daily_sales(
    days: int = Query(default=30, ge=1, le=366),
    _: Profile = Depends(require_permission("reports:view")),
    db: Session = Depends(get_db),
):
    return reports.daily_sales(db, days=days)


@router.get("/gst", response_model=GstReportOut)
def get_gst_report(
    date_from: date | None = None,
    date_to: date | None = None,
    _: Profile = Depends(require_permission("reports:view")),
    db: Session = Depends(get_db),
):
    _check_range(date_from, date_to)
    return reports.gst_report(db, date_from, date_to)


@router.get("/profit-loss", response_model=ProfitLossOut)
def get_profit_loss(
    date_from: date | None = None,
    date_to: date | None = None,
    _: Profile = Depends(require_permission("reports:view")),
    db: Session = Depends(get_db),
):
    _check_range(date_from, date_to)
    return reports.profit_loss(db, date_from, date_to)
