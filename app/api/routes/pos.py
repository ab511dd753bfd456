from decimal import Decimal

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import require_permission
from app.db.database import get_db
from app.models.inventory import Product
from app.models.sales import Cart
from app.models.user import Profile
from app.schemas.sales import BillOut, CartAddRequest, CartLineOut, CartLineUpdate, CartOut, CheckoutRequest
from app.services import cart as cart_service
from app.services.errors import PosError
from app.services.gst import compute_sale_totals
from app.services.sales import Customer, checkout

router = APIRouter(prefix="/pos", tags=["POS"])


def _cart_out(db: Session, cart: Cart) -> CartOut:
    product_ids = [line.product_id for line in cart.lines]
    products = {
        product.id: product
        for product in db.scalars(select(Product).where(Product.id.in_(product_ids))).all()
    } if product_ids else {}

    lines: list[CartLineOut] = []
    subtotal = Decimal("0")
    for line in cart.lines:
        product = products.get(line.product_id)
        if product is None:
            continue
        price = Decimal(cart_service.unit_price(product, line.price_tier))
        line_total = price * line.quantity
        subtotal += line_total
        lines.append(
            CartLineOut(
                sku=line.sku,
                product_id=product.id,
                saree_name=product.saree_name,
                quantity=line.quantity,
                available_quantity=product.quantity,
                price_tier=line.price_tier,
                unit_price=price,
                line_total=line_total,
            )
        )

    totals = compute_sale_totals(subtotal)
    return CartOut(
        id=cart.id,
        lines=lines,
        total_quantity=sum(line.quantity for line in lines),
        subtotal=totals.subtotal,
        cgst=totals.cgst,
        sgst=totals.sgst,
        grand_total=totals.grand_total,
    )


def _save(db: Session, cart: Cart) -> CartOut:
    db.commit()
    db.refresh(cart)
    return _cart_out(db, cart)


@router.get("/cart", response_model=CartOut)
def get_cart(
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    return _save(db, cart)


@router.post("/cart/items", response_model=CartOut, status_code=status.HTTP_201_CREATED)
def add_item(
    payload: CartAddRequest,
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    try:
        cart_service.add_to_cart(db, cart, payload.sku)
    except PosError:
        db.rollback()
        raise
    return _save(db, cart)


@router.patch("/cart/items/{sku}", response_model=CartOut)
def update_item(
    sku: str,
    payload: CartLineUpdate,
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    try:
        if payload.quantity is not None:
            cart_service.update_quantity(db, cart, sku, payload.quantity)
        if payload.price_tier is not None:
            cart_service.set_price_tier(db, cart, sku, payload.price_tier)
    except PosError:
        db.rollback()
        raise
    return _save(db, cart)


@router.delete("/cart/items/{sku}", response_model=CartOut)
def remove_item(
    sku: str,
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    try:
        cart_service.remove_from_cart(db, cart, sku)
    except PosError:
        db.rollback()
        raise
    return _save(db, cart)


@router.delete("/cart", response_model=CartOut)
def clear_cart(
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    cart_service.clear_cart(db, cart)
    return _save(db, cart)


@router.post("/cart/checkout", response_model=BillOut, status_code=status.HTTP_201_CREATED)
def checkout_cart(
    payload: CheckoutRequest,
    current_user: Profile = Depends(require_permission("sales:create")),
    db: Session = Depends(get_db),
):
    cart = cart_service.get_or_create_cart(db, current_user)
    # The cart row itself must exist before checkout opens its transaction.
    db.commit()
    return checkout(
        db,
        cart,
        Customer(name=payload.customer_name, phone=payload.customer_phone),
        payload.payment_method,
        current_user,
        notes=payload.notes,
    )
