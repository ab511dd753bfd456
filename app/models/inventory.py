from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


def _enum_values(enum):
    return [member.value for member in enum]


class ProductStatus(str, Enum):
    AVAILABLE = "available"
    SOLD = "sold"


class ExpenseCategory(str, Enum):
    RENT = "Rent"
    SALARY = "Salary"
    ELECTRICITY = "Electricity"
    TRANSPORT = "Transport"
    PACKAGING = "Packaging"
    MISCELLANEOUS = "Miscellaneous"


class VendorBill(Base):
    __tablename__ = "vendor_bills"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    company_name: Mapped[str] = mapped_column(String(160), index=True, nullable=False)
    vendor_gst_number: Mapped[str | None] = mapped_column(String(15), index=True, nullable=True)
    bill_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    bill_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False, index=True)
    is_local_transaction: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    cgst_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    sgst_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    igst_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=Decimal("0"), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    gst_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), default=Decimal("0"), nullable=False)
    created_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    sku: Mapped[str] = mapped_column(String(32), unique=True, index=True, nullable=False)
    saree_name: Mapped[str] = mapped_column(String(160), index=True, nullable=False)
    saree_type: Mapped[str] = mapped_column(String(80), index=True, nullable=False)
    material: Mapped[str] = mapped_column(String(80), nullable=False)
    color: Mapped[str | None] = mapped_column(String(60), nullable=True)
    vendor_name: Mapped[str] = mapped_column(String(160), index=True, nullable=False)
    hsn_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    purchase_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    cost_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    cost_code: Mapped[str | None] = mapped_column(String(32), nullable=True)
    selling_price_a: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    selling_price_b: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    selling_price_c: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    rack_location: Mapped[str | None] = mapped_column(String(64), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ProductStatus] = mapped_column(
        SQLEnum(ProductStatus, values_callable=_enum_values),
        default=ProductStatus.AVAILABLE,
        nullable=False,
        index=True,
    )
    vendor_bill_id: Mapped[int | None] = mapped_column(
        ForeignKey("vendor_bills.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    created_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class Expense(Base):
    __tablename__ = "expenses"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_expenses_amount_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    category: Mapped[ExpenseCategory] = mapped_column(
        SQLEnum(ExpenseCategory, values_callable=_enum_values),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    expense_date: Mapped[date] = mapped_column(Date, default=date.today, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by_id: Mapped[int | None] = mapped_column(
        ForeignKey("profiles.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
