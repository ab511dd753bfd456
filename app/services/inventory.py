import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.inventory import Product, ProductStatus, VendorBill
from app.models.user import Profile
from app.services.gst import compute_purchase_gst, round_paise


def generate_sku() -> str:
    return f"S-{uuid.uuid4().hex[:8].upper()}"


def status_for_quantity(quantity: int) -> ProductStatus:
    return ProductStatus.AVAILABLE if quantity > 0 else ProductStatus.SOLD


def unique_sku(db: Session, attempts: int = 5) -> str:
    for _ in range(attempts):
        sku = generate_sku()
        if not db.scalar(select(Product.id).where(Product.sku == sku)):
            return sku
    raise RuntimeError("Could not allocate a unique SKU")


def build_product(db: Session, data: dict, actor: Profile, vendor_bill_id: int | None = None) -> Product:
    data = dict(data)
    sku = (data.pop("sku", None) or "").strip().upper() or unique_sku(db)
    quantity = int(data.pop("quantity", 1))
    price_a = Decimal(data.pop("selling_price_a"))
    price_b = data.pop("selling_price_b", None)
    price_c = data.pop("selling_price_c", None)
    return Product(
        sku=sku,
        quantity=quantity,
        status=status_for_quantity(quantity),
        selling_price_a=price_a,
        selling_price_b=Decimal(price_b) if price_b is not None else price_a,
        selling_price_c=Decimal(price_c) if price_c is not None else price_a,
        vendor_bill_id=vendor_bill_id,
        created_by_id=actor.id,
        **data,
    )


def create_vendor_bill(db: Session, bill_data: dict, products: list[dict], actor: Profile) -> VendorBill:
    """Record a purchase bill and stock in its products; the caller commits."""
    subtotal = sum(
        (Decimal(item["cost_price"]) * int(item.get("quantity", 1)) for item in products),
        Decimal("0"),
    )
    gst = compute_purchase_gst(subtotal, is_local_transaction=bill_data.get("is_local_transaction", True))
    gst_number = (bill_data.get("vendor_gst_number") or "").strip().upper() or None
    vendor_bill = VendorBill(
        company_name=bill_data["company_name"].strip(),
        vendor_gst_number=gst_number,
        bill_number=(bill_data.get("bill_number") or "").strip() or None,
        is_local_transaction=bill_data.get("is_local_transaction", True),
        cgst_rate=gst.cgst_rate,
        sgst_rate=gst.sgst_rate,
        igst_rate=gst.igst_rate,
        subtotal=round_paise(subtotal),
        gst_amount=gst.gst_amount,
        total_amount=gst.total_amount,
        created_by_id=actor.id,
    )
    if bill_data.get("bill_date") is not None:
        vendor_bill.bill_date = bill_data["bill_date"]
    db.add(vendor_bill)
    db.flush()

    for item in products:
        item = dict(item)
        item.setdefault("vendor_name", vendor_bill.company_name)
        item.setdefault("purchase_date", vendor_bill.bill_date)
        db.add(build_product(db, item, actor, vendor_bill_id=vendor_bill.id))
    db.flush()
    return vendor_bill
