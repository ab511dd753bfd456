from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.sales import Bill, PaymentMethod
from app.models.user import Profile
from app.schemas.sales import BillDeleteOut, BillOut, BillUpdate
from app.services.sales import delete_bill, get_bill, update_bill

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.get("", response_model=list[BillOut])
def list_bills(
    date_from: date | None = None,
    date_to: date | None = None,
    search: str | None = None,
    payment_method: PaymentMethod | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Profile = Depends(require_permission("bills:view")),
    db: Session = Depends(get_db),
):
    query = select(Bill).order_by(Bill.created_at.desc(), Bill.id.desc())
    if date_from is not None:
        query = query.where(Bill.created_at >= datetime.combine(date_from, time.min))
    if date_to is not None:
        query = query.where(Bill.created_at < datetime.combine(date_to + timedelta(days=1), time.min))
    if payment_method is not None:
        query = query.where(Bill.payment_method == payment_method)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.where(
            or_(
                Bill.bill_number.ilike(pattern),
                Bill.customer_name.ilike(pattern),
                Bill.customer_phone.ilike(pattern),
            )
        )
    return list(db.scalars(query.offset(offset).limit(limit)).all())


@router.get("/{bill_id}", response_model=BillOut)
def read_bill(
    bill_id: int,
    _: Profile = Depends(require_permission("bills:view")),
    db: Session = Depends(get_db),
):
    return get_bill(db, bill_id)


@router.patch("/{bill_id}", response_model=BillOut)
def edit_bill(
    bill_id: int,
    payload: BillUpdate,
    current_user: Profile = Depends(require_permission("bills:manage")),
    db: Session = Depends(get_db),
):
    bill = get_bill(db, bill_id)
    return update_bill(db, bill, payload.model_dump(exclude_unset=True), current_user)


@router.delete("/{bill_id}", response_model=BillDeleteOut)
def remove_bill(
    bill_id: int,
    current_user: Profile = Depends(require_permission("bills:manage")),
    db: Session = Depends(get_db),
):
    bill_number = delete_bill(db, bill_id, current_user)
    return BillDeleteOut(message="Bill deleted and inventory restored", bill_number=bill_number)
