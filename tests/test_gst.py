from decimal import Decimal

import pytest

from app.services.gst import compute_purchase_gst, compute_sale_totals, round_rupee


class TestSaleTotals:
    def test_thousand_rupee_bill(self):
        totals = compute_sale_totals(Decimal("1000"))
        assert totals.cgst == Decimal("25")
        assert totals.sgst == Decimal("25")
        assert totals.grand_total == Decimal("1050")

    @pytest.mark.parametrize(
        "subtotal,half",
        [
            ("0", "0"),
            ("19", "0"),
            ("20", "1"),
            ("499", "12"),
            ("1999", "50"),
            ("2345", "59"),
        ],
    )
    def test_each_half_rounds_to_whole_rupees(self, subtotal, half):
        totals = compute_sale_totals(Decimal(subtotal))
        assert totals.cgst == Decimal(half)
        assert totals.sgst == Decimal(half)
        assert totals.grand_total == Decimal(subtotal) + 2 * Decimal(half)

    def test_halves_rounded_independently_for_unequal_rates(self):
        totals = compute_sale_totals(Decimal("100"), cgst_rate=Decimal("0.025"), sgst_rate=Decimal("0.035"))
        assert totals.cgst == Decimal("3")
        assert totals.sgst == Decimal("4")
        assert totals.grand_total == Decimal("107")

    def test_round_rupee_is_half_up(self):
        assert round_rupee(Decimal("12.5")) == Decimal("13")
        assert round_rupee(Decimal("12.49")) == Decimal("12")


class TestPurchaseGst:
    def test_local_purchase_splits_rate(self):
        gst = compute_purchase_gst(Decimal("10000"), is_local_transaction=True)
        assert gst.cgst_rate == Decimal("2.5")
        assert gst.sgst_rate == Decimal("2.5")
        assert gst.igst_rate == Decimal("0")
        assert gst.gst_amount == Decimal("500.00")
        assert gst.total_amount == Decimal("10500.00")

    def test_interstate_purchase_pays_igst(self):
        gst = compute_purchase_gst(Decimal("1234.50"), is_local_transaction=False)
        assert gst.cgst_rate == Decimal("0")
        assert gst.sgst_rate == Decimal("0")
        assert gst.igst_rate == Decimal("5")
        assert gst.gst_amount == Decimal("61.73")
        assert gst.total_amount == Decimal("1296.23")
