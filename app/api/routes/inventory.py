from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import has_permission, require_permission
from app.db.database import get_db
from app.models.inventory import Product, ProductStatus
from app.models.sales import BillItem, CartLine
from app.models.user import Profile
from app.schemas.auth import MessageResponse
from app.schemas.inventory import ProductCreate, ProductOut, ProductPublicOut, ProductUpdate
from app.services.audit import log_audit
from app.services.cart import normalize_sku
from app.services.inventory import build_product, status_for_quantity

router = APIRouter(prefix="/inventory", tags=["Inventory"])

# Columns a PATCH may clear; an explicit null for any other field is ignored.
NULLABLE_PRODUCT_FIELDS = {"color", "hsn_code", "cost_code", "rack_location", "description"}


def _product_view(current_user: Profile) -> type[ProductPublicOut]:
    # Cost price and vendor stay hidden from the shop floor.
    return ProductOut if has_permission(current_user, "purchases:view") else ProductPublicOut


def _serialize(current_user: Profile, product: Product) -> dict:
    return _product_view(current_user).model_validate(product).model_dump(mode="json")


def _contains(value: str) -> str:
    return f"%{value.strip().lower()}%"


@router.get("/products", response_model=None)
def list_products(
    status_filter: ProductStatus | None = Query(default=None, alias="status"),
    search: str | None = None,
    vendor: str | None = None,
    saree_type: str | None = Query(default=None, alias="type"),
    saree_name: str | None = None,
    color: str | None = None,
    min_price: Decimal | None = Query(default=None, ge=0),
    max_price: Decimal | None = Query(default=None, ge=0),
    current_user: Profile = Depends(require_permission("inventory:view")),
    db: Session = Depends(get_db),
) -> list[dict]:
    query = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    if status_filter is not None:
        query = query.where(Product.status == status_filter)
    if vendor:
        query = query.where(Product.vendor_name.ilike(_contains(vendor)))
    if saree_type:
        query = query.where(Product.saree_type.ilike(_contains(saree_type)))
    if saree_name:
        query = query.where(Product.saree_name.ilike(_contains(saree_name)))
    if color:
        query = query.where(Product.color.ilike(_contains(color)))
    if min_price is not None:
        query = query.where(Product.selling_price_a >= min_price)
    if max_price is not None:
        query = query.where(Product.selling_price_a <= max_price)
    if search and search.strip():
        pattern = _contains(search)
        query = query.where(
            or_(
                Product.sku.ilike(pattern),
                Product.saree_type.ilike(pattern),
                Product.material.ilike(pattern),
                Product.color.ilike(pattern),
                Product.vendor_name.ilike(pattern),
                Product.saree_name.ilike(pattern),
            )
        )
    return [_serialize(current_user, product) for product in db.scalars(query).all()]


@router.get("/products/sku/{sku}", response_model=None)
def get_product_by_sku(
    sku: str,
    current_user: Profile = Depends(require_permission("inventory:view")),
    db: Session = Depends(get_db),
) -> dict:
    product = db.scalar(select(Product).where(Product.sku == normalize_sku(sku)))
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return _serialize(current_user, product)


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate,
    current_user: Profile = Depends(require_permission("inventory:manage")),
    db: Session = Depends(get_db),
):
    product = build_product(db, payload.model_dump(exclude_none=True), current_user)
    db.add(product)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product SKU already exists") from exc
    db.refresh(product)
    return product


@router.patch("/products/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    _: Profile = Depends(require_permission("inventory:manage")),
    db: Session = Depends(get_db),
):
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is None and field not in NULLABLE_PRODUCT_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        setattr(product, field, value)
    if changes.get("quantity") is not None:
        product.status = status_for_quantity(changes["quantity"])

    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Product update conflicts with stored data") from exc
    db.refresh(product)
    return product


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    current_user: Profile = Depends(require_permission("inventory:delete")),
    db: Session = Depends(get_db),
):
    product = db.get(Product, product_id)
    if not product:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")

    # Sold lines keep their snapshot; only the link to the product goes.
    db.execute(
        update(BillItem)
        .where(BillItem.product_id == product.id)
        .values(product_id=None)
        .execution_options(synchronize_session=False)
    )
    db.execute(delete(CartLine).where(CartLine.product_id == product.id).execution_options(synchronize_session=False))
    log_audit(db, "products.deleted", current_user.id, entity_type="product", entity_id=product.id, details={"sku": product.sku})
    db.delete(product)
    db.commit()
    return MessageResponse(message="Product deleted")
