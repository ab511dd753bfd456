from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from app.models.inventory import ExpenseCategory, ProductStatus

GST_NUMBER_PATTERN = r"^[0-9A-Za-z]{15}$"


class ProductCreate(BaseModel):
    sku: str | None = Field(default=None, min_length=2, max_length=32)
    saree_name: str = Field(min_length=1, max_length=160)
    saree_type: str = Field(min_length=1, max_length=80)
    material: str = Field(min_length=1, max_length=80)
    color: str | None = Field(default=None, max_length=60)
    vendor_name: str = Field(min_length=1, max_length=160)
    hsn_code: str | None = Field(default=None, max_length=16)
    purchase_date: date | None = None
    cost_price: Decimal = Field(ge=0)
    cost_code: str | None = Field(default=None, max_length=32)
    selling_price_a: Decimal = Field(gt=0)
    selling_price_b: Decimal | None = Field(default=None, gt=0)
    selling_price_c: Decimal | None = Field(default=None, gt=0)
    quantity: int = Field(default=1, ge=0)
    rack_location: str | None = Field(default=None, max_length=64)
    description: str | None = None


class PurchaseProductCreate(ProductCreate):
    vendor_name: str | None = Field(default=None, max_length=160)


class ProductUpdate(BaseModel):
    saree_name: str | None = Field(default=None, min_length=1, max_length=160)
    saree_type: str | None = Field(default=None, min_length=1, max_length=80)
    material: str | None = Field(default=None, min_length=1, max_length=80)
    color: str | None = Field(default=None, max_length=60)
    vendor_name: str | None = Field(default=None, min_length=1, max_length=160)
    hsn_code: str | None = Field(default=None, max_length=16)
    purchase_date: date | None = None
    cost_price: Decimal | None = Field(default=None, ge=0)
    cost_code: str | None = Field(default=None, max_length=32)
    selling_price_a: Decimal | None = Field(default=None, gt=0)
    selling_price_b: Decimal | None = Field(default=None, gt=0)
    selling_price_c: Decimal | None = Field(default=None, gt=0)
    quantity: int | None = Field(default=None, ge=0)
    rack_location: str | None = Field(default=None, max_length=64)
    description: str | None = None


class ProductPublicOut(BaseModel):
    """Shop-floor view of a product, without purchase cost or vendor."""

    id: int
    sku: str
    saree_name: str
    saree_type: str
    material: str
    color: str | None
    selling_price_a: Decimal
    selling_price_b: Decimal
    selling_price_c: Decimal
    quantity: int
    rack_location: str | None
    status: ProductStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class ProductOut(ProductPublicOut):
    vendor_name: str
    hsn_code: str | None
    purchase_date: date
    cost_price: Decimal
    cost_code: str | None
    description: str | None
    vendor_bill_id: int | None
    updated_at: datetime


class VendorBillCreate(BaseModel):
    company_name: str = Field(min_length=1, max_length=160)
    vendor_gst_number: str | None = Field(default=None, pattern=GST_NUMBER_PATTERN)
    bill_number: str | None = Field(default=None, max_length=64)
    bill_date: date | None = None
    is_local_transaction: bool = True


class VendorPurchaseCreate(BaseModel):
    bill: VendorBillCreate
    products: list[PurchaseProductCreate] = Field(min_length=1)


class VendorBillOut(BaseModel):
    id: int
    company_name: str
    vendor_gst_number: str | None
    bill_number: str | None
    bill_date: date
    is_local_transaction: bool
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    subtotal: Decimal
    gst_amount: Decimal
    total_amount: Decimal
    created_at: datetime

    model_config = {"from_attributes": True}


class VendorBillDetailOut(VendorBillOut):
    products: list[ProductOut]


class VendorLookupOut(BaseModel):
    vendor_gst_number: str
    company_name: str


class ExpenseCreate(BaseModel):
    category: ExpenseCategory = ExpenseCategory.MISCELLANEOUS
    amount: Decimal = Field(gt=0)
    expense_date: date | None = None
    description: str | None = Field(default=None, max_length=255)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class ExpenseUpdate(BaseModel):
    category: ExpenseCategory | None = None
    amount: Decimal | None = Field(default=None, gt=0)
    expense_date: date | None = None
    description: str | None = Field(default=None, max_length=255)

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class ExpenseOut(BaseModel):
    id: int
    category: ExpenseCategory
    amount: Decimal
    expense_date: date
    description: str | None
    created_by_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
