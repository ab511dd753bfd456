from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.models.sales import PaymentMethod, PriceTier


class CartAddRequest(BaseModel):
    sku: str = Field(min_length=1, max_length=32)


class CartLineUpdate(BaseModel):
    quantity: int | None = None
    price_tier: PriceTier | None = None


class CartLineOut(BaseModel):
    sku: str
    product_id: int
    saree_name: str
    quantity: int
    available_quantity: int
    price_tier: PriceTier
    unit_price: Decimal
    line_total: Decimal


class CartOut(BaseModel):
    id: int
    lines: list[CartLineOut]
    total_quantity: int
    subtotal: Decimal
    cgst: Decimal
    sgst: Decimal
    grand_total: Decimal


class CheckoutRequest(BaseModel):
    customer_name: str | None = Field(default=None, max_length=160)
    customer_phone: str | None = Field(default=None, max_length=20)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str | None = Field(default=None, max_length=500)


class BillItemOut(BaseModel):
    id: int
    product_id: int | None
    sku: str
    saree_name: str
    quantity: int
    selling_price: Decimal
    cost_price: Decimal

    model_config = {"from_attributes": True}


class BillOut(BaseModel):
    id: int
    bill_number: str
    customer_name: str | None
    customer_phone: str | None
    salesman_id: int | None
    payment_method: PaymentMethod
    subtotal: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    total_amount: Decimal
    total_cost: Decimal
    notes: str | None
    created_at: datetime
    items: list[BillItemOut]

    model_config = {"from_attributes": True}


class BillUpdate(BaseModel):
    customer_name: str | None = Field(default=None, max_length=160)
    customer_phone: str | None = Field(default=None, max_length=20)
    payment_method: PaymentMethod | None = None
    notes: str | None = Field(default=None, max_length=500)


class BillDeleteOut(BaseModel):
    message: str
    bill_number: str
