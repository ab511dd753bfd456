"""In-progress POS cart: one line per SKU, built by scan or manual entry."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.inventory import Product, ProductStatus
from app.models.sales import Cart, CartLine, PriceTier
from app.models.user import Profile
from app.services.errors import DuplicateInCart, NotFound, Unavailable


def normalize_sku(sku: str) -> str:
    return sku.strip().upper()


def get_or_create_cart(db: Session, owner: Profile) -> Cart:
    """Each profile has exactly one cart; a lost insert race reuses the winner's row."""
    cart = db.scalar(select(Cart).where(Cart.owner_id == owner.id))
    if cart:
        return cart
    try:
        with db.begin_nested():
            cart = Cart(owner_id=owner.id)
            db.add(cart)
    except IntegrityError:
        cart = db.scalar(select(Cart).where(Cart.owner_id == owner.id))
    return cart


def find_line(cart: Cart, sku: str) -> CartLine | None:
    sku = normalize_sku(sku)
    return next((line for line in cart.lines if line.sku == sku), None)


def add_to_cart(db: Session, cart: Cart, sku: str) -> CartLine:
    sku = normalize_sku(sku)
    if find_line(cart, sku) is not None:
        raise DuplicateInCart(f"{sku} is already in the cart", details={"sku": sku})

    product = db.scalar(select(Product).where(Product.sku == sku))
    if not product:
        raise NotFound(f"Product {sku} not found", details={"sku": sku})
    if product.status != ProductStatus.AVAILABLE or product.quantity <= 0:
        raise Unavailable(f"Product {sku} is already sold", details={"sku": sku})

    line = CartLine(product_id=product.id, sku=product.sku, quantity=1, price_tier=PriceTier.A)
    cart.lines.append(line)
    db.flush()
    return line


def update_quantity(db: Session, cart: Cart, sku: str, quantity: int) -> CartLine:
    line = find_line(cart, sku)
    if line is None:
        raise NotFound(f"{normalize_sku(sku)} is not in the cart", details={"sku": normalize_sku(sku)})
    # Removal is a separate action; anything below one leaves the line alone.
    if quantity < 1:
        return line

    product = db.get(Product, line.product_id)
    if not product:
        raise NotFound(f"Product {line.sku} not found", details={"sku": line.sku})
    line.quantity = max(1, min(quantity, product.quantity))
    db.flush()
    return line


def set_price_tier(db: Session, cart: Cart, sku: str, tier: PriceTier) -> CartLine:
    line = find_line(cart, sku)
    if line is None:
        raise NotFound(f"{normalize_sku(sku)} is not in the cart", details={"sku": normalize_sku(sku)})
    line.price_tier = tier
    db.flush()
    return line


def remove_from_cart(db: Session, cart: Cart, sku: str) -> None:
    line = find_line(cart, sku)
    if line is None:
        raise NotFound(f"{normalize_sku(sku)} is not in the cart", details={"sku": normalize_sku(sku)})
    cart.lines.remove(line)
    db.flush()


def clear_cart(db: Session, cart: Cart) -> None:
    cart.lines.clear()
    db.flush()


def unit_price(product: Product, tier: PriceTier):
    if tier == PriceTier.B:
        return product.selling_price_b
    if tier == PriceTier.C:
        return product.selling_price_c
    return product.selling_price_a
