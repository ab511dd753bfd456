from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.inventory import Expense, ExpenseCategory
from app.models.user import Profile
from app.schemas.auth import MessageResponse
from app.schemas.inventory import ExpenseCreate, ExpenseOut, ExpenseUpdate

router = APIRouter(prefix="/expenses", tags=["Expenses"])


def _get_expense(db: Session, expense_id: int) -> Expense:
    expense = db.get(Expense, expense_id)
    if not expense:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Expense not found")
    return expense


@router.get("", response_model=list[ExpenseOut])
def list_expenses(
    category: ExpenseCategory | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    _: Profile = Depends(require_permission("expenses:view")),
    db: Session = Depends(get_db),
):
    query = select(Expense).order_by(Expense.expense_date.desc(), Expense.id.desc())
    if category is not None:
        query = query.where(Expense.category == category)
    if date_from is not None:
        query = query.where(Expense.expense_date >= date_from)
    if date_to is not None:
        query = query.where(Expense.expense_date <= date_to)
    return list(db.scalars(query).all())


@router.post("", response_model=ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    current_user: Profile = Depends(require_permission("expenses:manage")),
    db: Session = Depends(get_db),
):
    expense = Expense(
        category=payload.category,
        amount=payload.amount,
        description=payload.description.strip() if payload.description else None,
        created_by_id=current_user.id,
    )
    if payload.expense_date is not None:
        expense.expense_date = payload.expense_date
    db.add(expense)
    db.commit()
    db.refresh(expense)
    return expense


@router.get("/{expense_id}", response_model=ExpenseOut)
def get_expense(
    expense_id: int,
    _: Profile = Depends(require_permission("expenses:view")),
    db: Session = Depends(get_db),
):
    return _get_expense(db, expense_id)


@router.patch("/{expense_id}", response_model=ExpenseOut)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    _: Profile = Depends(require_permission("expenses:manage")),
    db: Session = Depends(get_db),
):
    expense = _get_expense(db, expense_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(expense, field, value)
    db.commit()
    db.refresh(expense)
    return expense


@router.delete("/{expense_id}", response_model=MessageResponse)
def delete_expense(
    expense_id: int,
    _: Profile = Depends(require_permission("expenses:manage")),
    db: Session = Depends(get_db),
):
    db.delete(_get_expense(db, expense_id))
    db.commit()
    return MessageResponse(message="Expense deleted")
