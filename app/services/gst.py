"""GST arithmetic for sales bills and vendor purchases.

Sales carry 5% GST split as CGST 2.5% + SGST 2.5%. Each half is rounded to
the nearest whole rupee on its own instead of halving one combined figure,
so a bill total is always ``subtotal + cgst + sgst`` with no paise retained.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.core.config import settings

WHOLE_RUPEE = Decimal("1")
PAISE = Decimal("0.01")


@dataclass(frozen=True)
class SaleTotals:
    subtotal: Decimal
    cgst: Decimal
    sgst: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class PurchaseGst:
    cgst_rate: Decimal
    sgst_rate: Decimal
    igst_rate: Decimal
    gst_amount: Decimal
    total_amount: Decimal


def round_rupee(value: Decimal) -> Decimal:
    return value.quantize(WHOLE_RUPEE, rounding=ROUND_HALF_UP)


def round_paise(value: Decimal) -> Decimal:
    return value.quantize(PAISE, rounding=ROUND_HALF_UP)


def compute_sale_totals(
    subtotal: Decimal,
    *,
    cgst_rate: Decimal | None = None,
    sgst_rate: Decimal | None = None,
) -> SaleTotals:
    cgst_rate = settings.cgst_rate if cgst_rate is None else cgst_rate
    sgst_rate = settings.sgst_rate if sgst_rate is None else sgst_rate
    subtotal = Decimal(subtotal)
    cgst = round_rupee(subtotal * cgst_rate)
    sgst = round_rupee(subtotal * sgst_rate)
    return SaleTotals(subtotal=subtotal, cgst=cgst, sgst=sgst, grand_total=subtotal + cgst + sgst)


def compute_purchase_gst(subtotal: Decimal, *, is_local_transaction: bool) -> PurchaseGst:
    # Local purchases split the rate into CGST + SGST, interstate ones pay IGST.
    percent = settings.purchase_gst_percent
    half = percent / 2
    gst_amount = round_paise(Decimal(subtotal) * percent / 100)
    return PurchaseGst(
        cgst_rate=half if is_local_transaction else Decimal("0"),
        sgst_rate=half if is_local_transaction else Decimal("0"),
        igst_rate=Decimal("0") if is_local_transaction else percent,
        gst_amount=gst_amount,
        total_amount=round_paise(Decimal(subtotal) + gst_amount),
    )
