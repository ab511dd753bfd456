"""Checkout and bill deletion against the store: stock debits, totals, receipts."""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.models import (
    AuditLog,
    Bill,
    BillItem,
    Cart,
    PaymentMethod,
    PriceTier,
    Product,
    ProductStatus,
    Profile,
    UserRole,
)
from app.services import numbering, sales
from app.services.cart import add_to_cart, get_or_create_cart, set_price_tier, update_quantity
from app.services.errors import BillNumberGenerationFailed, DuplicateInCart, EmptyCart, SoldOut, StoreUnavailable
from app.services.sales import Customer, checkout, delete_bill


@pytest.fixture()
def cart(db_session, salesman):
    cart = get_or_create_cart(db_session, salesman)
    db_session.commit()
    return cart


def _checkout(db_session, cart, actor, **kwargs):
    return checkout(
        db_session,
        cart,
        Customer(name=kwargs.pop("name", "Meena"), phone=kwargs.pop("phone", "9876543210")),
        kwargs.pop("payment_method", PaymentMethod.CASH),
        actor,
        **kwargs,
    )


def test_end_to_end_sale(db_session, cart, salesman, make_product):
    product = make_product(sku="S-AAA111", quantity=3, price="500")

    add_to_cart(db_session, cart, "S-AAA111")
    assert [line.quantity for line in cart.lines] == [1]
    update_quantity(db_session, cart, "S-AAA111", 2)
    assert [line.quantity for line in cart.lines] == [2]

    bill = _checkout(db_session, cart, salesman)

    assert bill.subtotal == Decimal("1000")
    assert bill.cgst_amount == Decimal("25")
    assert bill.sgst_amount == Decimal("25")
    assert bill.total_amount == Decimal("1050")
    assert product.quantity == 1
    assert product.status == ProductStatus.AVAILABLE
    assert cart.lines == []


def test_quantity_conservation_and_sold_status(db_session, cart, salesman, make_product):
    last_units = make_product(sku="S-LAST02", quantity=2, price="800")
    plenty = make_product(sku="S-MANY10", quantity=10, price="300")

    add_to_cart(db_session, cart, "S-LAST02")
    update_quantity(db_session, cart, "S-LAST02", 2)
    add_to_cart(db_session, cart, "S-MANY10")
    update_quantity(db_session, cart, "S-MANY10", 4)
    _checkout(db_session, cart, salesman)

    assert last_units.quantity == 0
    assert last_units.status == ProductStatus.SOLD
    assert plenty.quantity == 6
    assert plenty.status == ProductStatus.AVAILABLE


def test_bill_records_salesman_items_and_cost(db_session, cart, salesman, make_product):
    make_product(sku="S-COST01", quantity=1, price="1500", cost="900")
    add_to_cart(db_session, cart, "S-COST01")

    bill = _checkout(db_session, cart, salesman, payment_method=PaymentMethod.UPI, notes="gift wrap")

    assert bill.bill_number == "LSM-000001"
    assert bill.salesman_id == salesman.id
    assert bill.payment_method == PaymentMethod.UPI
    assert bill.customer_name == "Meena"
    assert bill.total_cost == Decimal("900")
    assert [(item.sku, item.quantity, item.selling_price) for item in bill.items] == [
        ("S-COST01", 1, Decimal("1500")),
    ]
    events = db_session.scalars(select(AuditLog.event_type)).all()
    assert "bills.created" in events


def test_bill_numbers_are_sequential(db_session, cart, salesman, make_product):
    make_product(sku="S-SEQ001")
    make_product(sku="S-SEQ002")

    add_to_cart(db_session, cart, "S-SEQ001")
    first = _checkout(db_session, cart, salesman)
    add_to_cart(db_session, cart, "S-SEQ002")
    second = _checkout(db_session, cart, salesman)

    assert (first.bill_number, second.bill_number) == ("LSM-000001", "LSM-000002")


def test_selected_price_tier_is_billed(db_session, cart, salesman, make_product):
    make_product(sku="S-TIERB1", price="1000", price_b="900")
    add_to_cart(db_session, cart, "S-TIERB1")
    set_price_tier(db_session, cart, "S-TIERB1", PriceTier.B)

    bill = _checkout(db_session, cart, salesman)

    assert bill.subtotal == Decimal("900")
    assert bill.total_amount == Decimal("946")


def test_empty_cart_rejected(db_session, cart, salesman):
    with pytest.raises(EmptyCart):
        _checkout(db_session, cart, salesman)
    assert db_session.scalar(select(func.count(Bill.id))) == 0


def test_last_unit_sells_once(db_session, cart, salesman, make_profile, make_product):
    product = make_product(sku="S-ONLY01", quantity=1)
    other = make_profile(UserRole.SALESMAN, "counter2")
    other_cart = get_or_create_cart(db_session, other)

    # Both counters scan the last unit before either checks out.
    add_to_cart(db_session, cart, "S-ONLY01")
    add_to_cart(db_session, other_cart, "S-ONLY01")
    db_session.commit()

    _checkout(db_session, cart, salesman)
    with pytest.raises(SoldOut) as excinfo:
        _checkout(db_session, other_cart, other)

    assert excinfo.value.skus == ["S-ONLY01"]
    assert product.quantity == 0
    assert product.status == ProductStatus.SOLD
    assert db_session.scalar(select(func.count(Bill.id))) == 1
    assert db_session.scalar(select(func.count(BillItem.id))) == 1
    # The rejected cart keeps its lines for the counter to fix up.
    assert [line.sku for line in other_cart.lines] == ["S-ONLY01"]


def test_sold_out_rolls_back_every_line(db_session, cart, salesman, make_profile, make_product):
    plenty = make_product(sku="S-PLNTY5", quantity=5)
    scarce = make_product(sku="S-SCRCE1", quantity=1)
    other = make_profile(UserRole.SALESMAN, "counter3")
    other_cart = get_or_create_cart(db_session, other)

    add_to_cart(db_session, other_cart, "S-SCRCE1")
    add_to_cart(db_session, cart, "S-PLNTY5")
    add_to_cart(db_session, cart, "S-SCRCE1")
    db_session.commit()

    _checkout(db_session, other_cart, other)
    with pytest.raises(SoldOut):
        _checkout(db_session, cart, salesman)

    assert plenty.quantity == 5
    assert scarce.quantity == 0
    assert len(cart.lines) == 2


def test_price_snapshot_survives_product_edit(db_session, cart, salesman, make_product):
    product = make_product(sku="S-SNAP01", quantity=2, price="1000")
    add_to_cart(db_session, cart, "S-SNAP01")
    bill = _checkout(db_session, cart, salesman)

    product.selling_price_a = Decimal("1800")
    db_session.commit()

    item = db_session.scalars(select(BillItem).where(BillItem.bill_id == bill.id)).one()
    assert item.selling_price == Decimal("1000")
    assert db_session.get(Bill, bill.id).total_amount == Decimal("1050")


def test_delete_bill_restores_stock(db_session, cart, salesman, founder, make_product):
    product = make_product(sku="S-BACK02", quantity=2)
    add_to_cart(db_session, cart, "S-BACK02")
    update_quantity(db_session, cart, "S-BACK02", 2)
    bill = _checkout(db_session, cart, salesman)
    assert (product.quantity, product.status) == (0, ProductStatus.SOLD)

    bill_number = delete_bill(db_session, bill.id, founder)

    assert bill_number == "LSM-000001"
    assert (product.quantity, product.status) == (2, ProductStatus.AVAILABLE)
    assert db_session.scalar(select(func.count(Bill.id))) == 0
    assert db_session.scalar(select(func.count(BillItem.id))) == 0


def test_duplicate_scan_does_not_change_cart(db_session, cart, make_product):
    make_product(sku="S-TWICE1", quantity=4)
    add_to_cart(db_session, cart, "S-TWICE1")
    with pytest.raises(DuplicateInCart):
        add_to_cart(db_session, cart, "S-TWICE1")
    assert [(line.sku, line.quantity) for line in cart.lines] == [("S-TWICE1", 1)]


def _store_down(*args, **kwargs):
    raise OperationalError("UPDATE products", {}, Exception("database is locked"))


def test_bill_number_failure_leaves_store_untouched(db_session, cart, salesman, make_product, monkeypatch):
    product = make_product(sku="S-NONUM1", quantity=2)
    add_to_cart(db_session, cart, "S-NONUM1")
    db_session.commit()
    monkeypatch.setattr(numbering, "_increment", _store_down)

    with pytest.raises(BillNumberGenerationFailed):
        _checkout(db_session, cart, salesman)

    assert db_session.scalar(select(func.count(Bill.id))) == 0
    assert (product.quantity, product.status) == (2, ProductStatus.AVAILABLE)
    assert [line.sku for line in cart.lines] == ["S-NONUM1"]


def test_store_failure_during_debit_rolls_back_bill(db_session, cart, salesman, make_product, monkeypatch):
    product = make_product(sku="S-DBDOWN", quantity=1)
    add_to_cart(db_session, cart, "S-DBDOWN")
    db_session.commit()
    monkeypatch.setattr(sales, "debit_stock", _store_down)

    with pytest.raises(StoreUnavailable):
        _checkout(db_session, cart, salesman)

    assert db_session.scalar(select(func.count(Bill.id))) == 0
    assert db_session.scalar(select(func.count(BillItem.id))) == 0
    assert (product.quantity, product.status) == (1, ProductStatus.AVAILABLE)
    assert [line.sku for line in cart.lines] == ["S-DBDOWN"]

    # The number reserved by the failed attempt is issued again.
    monkeypatch.undo()
    assert _checkout(db_session, cart, salesman).bill_number == "LSM-000001"


def test_last_unit_across_two_open_sessions(db_session, session_factory, salesman, make_profile, make_product):
    product = make_product(sku="S-RACE01", quantity=1)
    other = make_profile(UserRole.SALESMAN, "counter4")
    for owner in (salesman, other):
        add_to_cart(db_session, get_or_create_cart(db_session, owner), "S-RACE01")
    db_session.commit()
    owner_ids = (salesman.id, other.id)

    def counter(session, owner_id):
        cart = session.scalars(select(Cart).where(Cart.owner_id == owner_id)).one()
        return cart, session.get(Profile, owner_id)

    first, second = session_factory(), session_factory()
    try:
        first_cart, first_actor = counter(first, owner_ids[0])
        second_cart, second_actor = counter(second, owner_ids[1])
        # Both counters see the unit in stock before either debits it.
        assert first.get(Product, product.id).quantity == 1
        assert second.get(Product, product.id).quantity == 1

        bill = _checkout(first, first_cart, first_actor)
        with pytest.raises(SoldOut):
            _checkout(second, second_cart, second_actor)

        assert bill.items[0].sku == "S-RACE01"
        second.expire_all()
        assert second.get(Product, product.id).quantity == 0
        assert second.scalar(select(func.count(Bill.id))) == 1
    finally:
        first.close()
        second.close()
