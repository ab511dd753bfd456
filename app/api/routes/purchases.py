from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.inventory import Product, VendorBill
from app.models.user import Profile
from app.schemas.inventory import (
    ProductOut,
    VendorBillDetailOut,
    VendorBillOut,
    VendorLookupOut,
    VendorPurchaseCreate,
)
from app.services.audit import log_audit
from app.services.inventory import create_vendor_bill

router = APIRouter(prefix="/purchases", tags=["Purchases"])


def _detail(db: Session, vendor_bill: VendorBill) -> VendorBillDetailOut:
    products = db.scalars(
        select(Product).where(Product.vendor_bill_id == vendor_bill.id).order_by(Product.id.asc())
    ).all()
    return VendorBillDetailOut(
        **VendorBillOut.model_validate(vendor_bill).model_dump(),
        products=[ProductOut.model_validate(product) for product in products],
    )


@router.post("/vendor-bills", response_model=VendorBillDetailOut, status_code=status.HTTP_201_CREATED)
def create_purchase(
    payload: VendorPurchaseCreate,
    current_user: Profile = Depends(require_permission("purchases:manage")),
    db: Session = Depends(get_db),
):
    try:
        vendor_bill = create_vendor_bill(
            db,
            payload.bill.model_dump(),
            [item.model_dump(exclude_none=True) for item in payload.products],
            current_user,
        )
        log_audit(
            db,
            "purchases.created",
            current_user.id,
            entity_type="vendor_bill",
            entity_id=vendor_bill.id,
            details={"company_name": vendor_bill.company_name, "products": len(payload.products)},
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product SKU already exists") from exc
    db.refresh(vendor_bill)
    return _detail(db, vendor_bill)


@router.get("/vendor-bills", response_model=list[VendorBillOut])
def list_purchases(
    company: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    _: Profile = Depends(require_permission("purchases:view")),
    db: Session = Depends(get_db),
):
    query = select(VendorBill).order_by(VendorBill.bill_date.desc(), VendorBill.id.desc())
    if company and company.strip():
        query = query.where(VendorBill.company_name.ilike(f"%{company.strip().lower()}%"))
    return list(db.scalars(query.offset(offset).limit(limit)).all())


@router.get("/vendor-bills/{vendor_bill_id}", response_model=VendorBillDetailOut)
def get_purchase(
    vendor_bill_id: int,
    _: Profile = Depends(require_permission("purchases:view")),
    db: Session = Depends(get_db),
):
    vendor_bill = db.get(VendorBill, vendor_bill_id)
    if not vendor_bill:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor bill not found")
    return _detail(db, vendor_bill)


@router.get("/vendors/{gst_number}", response_model=VendorLookupOut)
def lookup_vendor(
    gst_number: str,
    _: Profile = Depends(require_permission("purchases:view")),
    db: Session = Depends(get_db),
):
    gst_number = gst_number.strip().upper()
    company_name = db.scalar(
        select(VendorBill.company_name)
        .where(VendorBill.vendor_gst_number == gst_number)
        .order_by(VendorBill.created_at.desc(), VendorBill.id.desc())
        .limit(1)
    )
    if not company_name:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")
    return VendorLookupOut(vendor_gst_number=gst_number, company_name=company_name)
