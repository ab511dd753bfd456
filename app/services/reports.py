"""Read-side aggregation over bills, vendor bills and expenses.

Monthly and daily buckets are built in Python from plain row selects so the
same code runs on SQLite and Postgres.
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.inventory import Expense, Product, ProductStatus, VendorBill
from app.models.sales import Bill, BillItem
from app.schemas.reports import (
    AnalyticsSummaryOut,
    DailySaleOut,
    GstMonthOut,
    GstReportOut,
    ProfitLossMonthOut,
    ProfitLossOut,
    ProfitLossTotalsOut,
)
from app.services.gst import round_paise

ZERO = Decimal("0")


def _start_of(value: date | None) -> datetime | None:
    return datetime.combine(value, time.min) if value else None


def _end_of(value: date | None) -> datetime | None:
    return datetime.combine(value + timedelta(days=1), time.min) if value else None


def _month(value: date | datetime) -> str:
    return value.strftime("%Y-%m")


def _bill_scope(query, date_from: date | None, date_to: date | None):
    if date_from is not None:
        query = query.where(Bill.created_at >= _start_of(date_from))
    if date_to is not None:
        query = query.where(Bill.created_at < _end_of(date_to))
    return query


def summary(db: Session, date_from: date | None = None, date_to: date | None = None) -> AnalyticsSummaryOut:
    sales, subtotal, cost, bill_count = db.execute(
        _bill_scope(
            select(
                func.coalesce(func.sum(Bill.total_amount), 0),
                func.coalesce(func.sum(Bill.subtotal), 0),
                func.coalesce(func.sum(Bill.total_cost), 0),
                func.count(Bill.id),
            ),
            date_from,
            date_to,
        )
    ).one()
    items_sold = db.scalar(
        _bill_scope(
            select(func.coalesce(func.sum(BillItem.quantity), 0)).join(Bill, Bill.id == BillItem.bill_id),
            date_from,
            date_to,
        )
    )
    in_stock = db.scalar(
        select(func.coalesce(func.sum(Product.quantity), 0)).where(Product.status == ProductStatus.AVAILABLE)
    )
    return AnalyticsSummaryOut(
        total_sales=Decimal(sales),
        total_cost=Decimal(cost),
        total_profit=Decimal(subtotal) - Decimal(cost),
        total_items_sold=int(items_sold or 0),
        total_items_in_stock=int(in_stock or 0),
        bill_count=int(bill_count),
    )


def daily_sales(db: Session, days: int = 30, today: date | None = None) -> list[DailySaleOut]:
    today = today or datetime.utcnow().date()
    since = today - timedelta(days=days - 1)
    rows = db.execute(
        _bill_scope(select(Bill.created_at, Bill.total_amount, Bill.subtotal, Bill.total_cost), since, today)
    ).all()

    buckets: dict[date, list] = defaultdict(lambda: [ZERO, ZERO, 0])
    for created_at, total_amount, subtotal, total_cost in rows:
        bucket = buckets[created_at.date()]
        bucket[0] += Decimal(total_amount)
        bucket[1] += Decimal(subtotal) - Decimal(total_cost)
        bucket[2] += 1
    return [
        DailySaleOut(sale_date=day, total_amount=amount, total_profit=profit, bill_count=count)
        for day, (amount, profit, count) in sorted(buckets.items())
    ]


def gst_report(db: Session, date_from: date | None = None, date_to: date | None = None) -> GstReportOut:
    months: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))

    purchases = select(VendorBill.bill_date, VendorBill.subtotal, VendorBill.gst_amount, VendorBill.is_local_transaction)
    if date_from is not None:
        purchases = purchases.where(VendorBill.bill_date >= date_from)
    if date_to is not None:
        purchases = purchases.where(VendorBill.bill_date <= date_to)
    for bill_date, subtotal, gst_amount, is_local in db.execute(purchases).all():
        row = months[_month(bill_date)]
        gst_amount = Decimal(gst_amount)
        row["purchase_total"] += Decimal(subtotal)
        if is_local:
            cgst = round_paise(gst_amount / 2)
            row["input_cgst"] += cgst
            row["input_sgst"] += gst_amount - cgst
        else:
            row["input_igst"] += gst_amount

    sales = _bill_scope(select(Bill.created_at, Bill.subtotal, Bill.cgst_amount, Bill.sgst_amount), date_from, date_to)
    for created_at, subtotal, cgst, sgst in db.execute(sales).all():
        row = months[_month(created_at)]
        row["sales_total"] += Decimal(subtotal)
        row["output_cgst"] += Decimal(cgst)
        row["output_sgst"] += Decimal(sgst)

    result: list[GstMonthOut] = []
    for month, row in sorted(months.items()):
        input_total = row["input_cgst"] + row["input_sgst"] + row["input_igst"]
        output_total = row["output_cgst"] + row["output_sgst"]
        result.append(
            GstMonthOut(
                month=month,
                purchase_total=row["purchase_total"],
                input_cgst=row["input_cgst"],
                input_sgst=row["input_sgst"],
                input_igst=row["input_igst"],
                input_total=input_total,
                sales_total=row["sales_total"],
                output_cgst=row["output_cgst"],
                output_sgst=row["output_sgst"],
                output_total=output_total,
                net_liability=output_total - input_total,
            )
        )
    return GstReportOut(
        months=result,
        input_total=sum((m.input_total for m in result), ZERO),
        output_total=sum((m.output_total for m in result), ZERO),
        net_liability=sum((m.net_liability for m in result), ZERO),
    )


def profit_loss(db: Session, date_from: date | None = None, date_to: date | None = None) -> ProfitLossOut:
    months: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))

    sales = _bill_scope(select(Bill.created_at, Bill.subtotal, Bill.total_cost), date_from, date_to)
    for created_at, subtotal, total_cost in db.execute(sales).all():
        row = months[_month(created_at)]
        row["revenue"] += Decimal(subtotal)
        row["cogs"] += Decimal(total_cost)

    expenses = select(Expense.expense_date, Expense.amount)
    if date_from is not None:
        expenses = expenses.where(Expense.expense_date >= date_from)
    if date_to is not None:
        expenses = expenses.where(Expense.expense_date <= date_to)
    for expense_date, amount in db.execute(expenses).all():
        months[_month(expense_date)]["expenses"] += Decimal(amount)

    result = []
    for month, row in sorted(months.items()):
        gross_profit = row["revenue"] - row["cogs"]
        result.append(
            ProfitLossMonthOut(
                month=month,
                revenue=row["revenue"],
                cogs=row["cogs"],
                gross_profit=gross_profit,
                expenses=row["expenses"],
                net_profit=gross_profit - row["expenses"],
            )
        )

    totals = ProfitLossTotalsOut(
        revenue=sum((m.revenue for m in result), ZERO),
        cogs=sum((m.cogs for m in result), ZERO),
        gross_profit=sum((m.gross_profit for m in result), ZERO),
        expenses=sum((m.expenses for m in result), ZERO),
        net_profit=sum((m.net_profit for m in result), ZERO),
    )
    return ProfitLossOut(period_from=date_from, period_to=date_to, months=result, totals=totals)
