"""SummarizeInvoices Use Case

Invoicing dashboard figures for a tenant over a window of calendar months.
"""

from calendar import monthrange
from collections import Counter
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_aggregator import effective_status
from src.domain.line_item_calculator import money_context
from .dtos import InvoiceSummaryResponseDTO, MonthlyInvoiceTotalDTO, SummarizeInvoicesQueryDTO

ZERO = Decimal("0.00")
PENDING_STATUSES = (InvoiceStatus.ISSUED, InvoiceStatus.OVERDUE)


def _shift_month(year: int, month: int, offset: int):
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def _month_bounds(year: int, month: int):
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def _paid_total(invoices: List[Invoice]) -> Decimal:
    return sum(
        (invoice.total for invoice in invoices if invoice.status == InvoiceStatus.PAID),
        ZERO,
    )


class SummarizeInvoices:
    """
    Use Case: Invoicing summary report

    Business Rules:
    1. Works on invoice-level totals only; line math is never re-derived
    2. Window is `months` calendar months ending with the month of as_of
    3. Paid figures count status=paid; pending counts issued and overdue
       (effective status, so issued past due is pending as overdue)
    4. Average is over every invoice in the window
    """

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, query: SummarizeInvoicesQueryDTO) -> Result[InvoiceSummaryResponseDTO]:
        try:
            months = [
                _shift_month(query.as_of.year, query.as_of.month, -offset)
                for offset in range(query.months - 1, -1, -1)
            ]
            period_start = _month_bounds(*months[0])[0]
            period_end = _month_bounds(*months[-1])[1]

            invoices = await self.invoice_repo.get_for_period(
                tenant_id=query.tenant_id,
                start=period_start,
                end=period_end,
            )

            statuses = [
                effective_status(invoice.status, invoice.due_date, query.as_of)
                for invoice in invoices
            ]

            with money_context():
                monthly = []
                for year, month in months:
                    start, end = _month_bounds(year, month)
                    month_invoices = [i for i in invoices if start <= i.issue_date <= end]
                    monthly.append(
                        MonthlyInvoiceTotalDTO(
                            month=f"{year:04d}-{month:02d}",
                            paid_total=_paid_total(month_invoices),
                            invoice_count=len(month_invoices),
                        )
                    )

                total_paid = _paid_total(invoices)
                total_pending = sum(
                    (
                        invoice.total
                        for invoice, status in zip(invoices, statuses)
                        if status in PENDING_STATUSES
                    ),
                    ZERO,
                )
                grand_total = sum((invoice.total for invoice in invoices), ZERO)
                average = (
                    (grand_total / len(invoices)).quantize(ZERO, rounding=ROUND_HALF_UP)
                    if invoices
                    else ZERO
                )

            return Return.ok(
                InvoiceSummaryResponseDTO(
                    period_start=period_start,
                    period_end=period_end,
                    total_invoices=len(invoices),
                    total_paid=total_paid,
                    total_pending=total_pending,
                    current_month_total=monthly[-1].paid_total,
                    current_month_count=monthly[-1].invoice_count,
                    average_invoice_value=average,
                    status_counts=dict(Counter(status.value for status in statuses)),
                    monthly=monthly,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="SUMMARIZE_INVOICES_FAILED",
                    message="Failed to summarize invoices",
                    reason=str(e),
                )
            )
