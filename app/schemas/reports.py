from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class AnalyticsSummaryOut(BaseModel):
    total_sales: Decimal
    total_cost: Decimal
    total_profit: Decimal
    total_items_sold: int
    total_items_in_stock: int
    bill_count: int


class DailySaleOut(BaseModel):
    sale_date: date
    total_amount: Decimal
    total_profit: Decimal
    bill_count: int


class GstMonthOut(BaseModel):
    month: str
    purchase_total: Decimal
    input_cgst: Decimal
    input_sgst: Decimal
    input_igst: Decimal
    input_total: Decimal
    sales_total: Decimal
    output_cgst: Decimal
    output_sgst: Decimal
    output_total: Decimal
    net_liability: Decimal


class GstReportOut(BaseModel):
    months: list[GstMonthOut]
    input_total: Decimal
    output_total: Decimal
    net_liability: Decimal


class ProfitLossMonthOut(BaseModel):
    month: str
    revenue: Decimal
    cogs: Decimal
    gross_profit: Decimal
    expenses: Decimal
    net_profit: Decimal


class ProfitLossTotalsOut(BaseModel):
    revenue: Decimal
    cogs: Decimal
    gross_profit: Decimal
    expenses: Decimal
    net_profit: Decimal


class ProfitLossOut(BaseModel):
    period_from: date | None
    period_to: date | None
    months: list[ProfitLossMonthOut]
    totals: ProfitLossTotalsOut
