"""Checkout and bill maintenance.

A checkout persists the bill, its items and every stock debit in a single
transaction. Stock is debited with a conditional UPDATE guarded by
``quantity >= n``; the database serialises concurrent debits of the same
product, so the last unit can only be sold once.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.inventory import Product, ProductStatus
from app.models.sales import Bill, BillItem, Cart, PaymentMethod
from app.models.user import Profile
from app.services.audit import log_audit
from app.services.cart import unit_price
from app.services.errors import EmptyCart, NotFound, PartialWriteFailure, PosError, SoldOut, StoreUnavailable
from app.services.gst import compute_sale_totals
from app.services.numbering import next_bill_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Customer:
    name: str | None = None
    phone: str | None = None


def debit_stock(db: Session, product_id: int, quantity: int) -> bool:
    """Take ``quantity`` units off a product; False when not enough stock is left."""
    result = db.execute(
        update(Product)
        .where(
            Product.id == product_id,
            Product.status == ProductStatus.AVAILABLE,
            Product.quantity >= quantity,
        )
        .values(quantity=Product.quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        return False
    db.execute(
        update(Product)
        .where(Product.id == product_id, Product.quantity <= 0)
        .values(status=ProductStatus.SOLD)
        .execution_options(synchronize_session=False)
    )
    return True


def restore_stock(db: Session, product_id: int, quantity: int) -> bool:
    result = db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(quantity=Product.quantity + quantity, status=ProductStatus.AVAILABLE)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def checkout(
    db: Session,
    cart: Cart,
    customer: Customer,
    payment_method: PaymentMethod,
    actor: Profile,
    notes: str | None = None,
) -> Bill:
    if not cart.lines:
        raise EmptyCart("Cart is empty")

    try:
        bill_number = next_bill_number(db)

        sold_out: list[str] = []
        items: list[BillItem] = []
        subtotal = Decimal("0")
        total_cost = Decimal("0")
        for line in cart.lines:
            product = db.get(Product, line.product_id)
            if not product:
                sold_out.append(line.sku)
                continue
            price = Decimal(unit_price(product, line.price_tier))
            cost = Decimal(product.cost_price)
            subtotal += price * line.quantity
            total_cost += cost * line.quantity
            items.append(
                BillItem(
                    product_id=product.id,
                    sku=product.sku,
                    saree_name=product.saree_name,
                    quantity=line.quantity,
                    selling_price=price,
                    cost_price=cost,
                )
            )

        totals = compute_sale_totals(subtotal)
        bill = Bill(
            bill_number=bill_number,
            customer_name=(customer.name or "").strip() or None,
            customer_phone=(customer.phone or "").strip() or None,
            salesman_id=actor.id,
            payment_method=payment_method,
            subtotal=totals.subtotal,
            cgst_amount=totals.cgst,
            sgst_amount=totals.sgst,
            total_amount=totals.grand_total,
            total_cost=total_cost,
            notes=notes,
            items=items,
        )
        db.add(bill)
        db.flush()

        for item in items:
            if not debit_stock(db, item.product_id, item.quantity):
                sold_out.append(item.sku)

        if sold_out:
            db.rollback()
            logger.info("Checkout rejected, sold out: %s", ", ".join(sold_out))
            raise SoldOut(sold_out)

        cart.lines.clear()
        log_audit(
            db,
            "bills.created",
            actor.id,
            entity_type="bill",
            entity_id=bill.id,
            details={"bill_number": bill.bill_number, "total_amount": bill.total_amount},
        )
        db.commit()
    except PosError:
        db.rollback()
        raise
    except OperationalError as exc:
        db.rollback()
        logger.error("Checkout failed, store unavailable: %s", exc)
        raise StoreUnavailable("Store unavailable, please retry") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Checkout failed: %s", exc)
        raise StoreUnavailable("Could not record the bill, please retry") from exc

    db.refresh(bill)
    logger.info("Bill %s created: total %s, %d item(s)", bill.bill_number, bill.total_amount, len(bill.items))
    return bill


def update_bill(db: Session, bill: Bill, changes: dict, actor: Profile) -> Bill:
    """Only customer details, payment method and notes may change after checkout."""
    for field in ("customer_name", "customer_phone", "notes"):
        if field in changes:
            value = changes[field]
            if isinstance(value, str):
                value = value.strip() or None
            setattr(bill, field, value)
    if changes.get("payment_method") is not None:
        bill.payment_method = changes["payment_method"]
    log_audit(db, "bills.updated", actor.id, entity_type="bill", entity_id=bill.id, details=changes)
    db.commit()
    db.refresh(bill)
    return bill


def delete_bill(db: Session, bill_id: int, actor: Profile) -> str:
    """Delete a bill and put every sold unit back into stock.

    Lines whose product was deleted since the sale cannot be restored. The
    bill is still removed, and PartialWriteFailure is raised after the commit
    naming the SKUs that need manual attention.
    """
    bill = db.get(Bill, bill_id)
    if not bill:
        raise NotFound("Bill not found", details={"bill_id": bill_id})

    bill_number = bill.bill_number
    unrestored: list[str] = []
    try:
        for item in bill.items:
            if item.product_id is None or not restore_stock(db, item.product_id, item.quantity):
                unrestored.append(item.sku)
        log_audit(
            db,
            "bills.deleted",
            actor.id,
            entity_type="bill",
            entity_id=bill.id,
            details={"bill_number": bill_number, "unrestored_skus": unrestored},
        )
        db.delete(bill)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Deleting bill %s failed: %s", bill_id, exc)
        raise StoreUnavailable("Could not delete the bill, please retry") from exc

    if unrestored:
        logger.error(
            "Bill %s (%s) deleted but stock not restored for: %s",
            bill_id,
            bill_number,
            ", ".join(unrestored),
        )
        raise PartialWriteFailure(
            "Bill deleted, but stock could not be restored for some items",
            bill_id=bill_id,
            skus=unrestored,
        )
    logger.info("Bill %s deleted, inventory restored", bill_number)
    return bill_number


def get_bill(db: Session, bill_id: int) -> Bill:
    bill = db.scalar(select(Bill).where(Bill.id == bill_id))
    if not bill:
        raise NotFound("Bill not found", details={"bill_id": bill_id})
    return bill
