"""Helpers shared by the invoicing use cases"""

import logging
from datetime import date
from typing import List

from libs.result import Error
from src.domain.base import as_utc
from src.domain.errors import InvoiceDomainError
from src.domain.formatting import format_money
from src.domain.invoice import Invoice
from src.domain.invoice_aggregator import (
    InvoiceStatus,
    InvoiceTotals,
    aggregate_line_items,
    effective_status,
    summarize_taxes,
)
from src.domain.invoice_line import InvoiceLine
from .dtos import (
    InvoiceDetailResponseDTO,
    InvoiceLineDTO,
    InvoiceResponseDTO,
    TaxBreakdownDTO,
)

logger = logging.getLogger(__name__)


def invoice_not_found(invoice_id: int) -> Error:
    return Error(
        code="INVOICE_NOT_FOUND",
        message=f"Invoice with ID {invoice_id} not found",
        reason="Invoice does not exist",
    )


def domain_error(exc: InvoiceDomainError) -> Error:
    return Error(code=exc.code, message=str(exc), reason=type(exc).__name__)


def recalculate_invoice(invoice: Invoice, lines: List[InvoiceLine]) -> InvoiceTotals:
    """Recompute the invoice totals from its stored lines and store the snapshot"""
    totals = aggregate_line_items(line.to_line_item() for line in lines)
    invoice.apply_totals(totals)
    return totals


def build_invoice_response(invoice: Invoice, today: date) -> InvoiceResponseDTO:
    return InvoiceResponseDTO(**_invoice_fields(invoice, today))


def build_invoice_detail(
    invoice: Invoice,
    lines: List[InvoiceLine],
    today: date,
    locale: str,
) -> InvoiceDetailResponseDTO:
    """
    Build the invoice detail from the stored lines

    The returned totals always come from recomputing the lines; a stored
    snapshot that disagrees is reported, never shown.
    """
    line_items = [line.to_line_item() for line in lines]
    totals = aggregate_line_items(line_items)
    matches = totals == invoice.snapshot_totals()
    if not matches:
        logger.warning(
            f"Invoice {invoice.invoice_number} (id={invoice.id}) stored totals "
            f"differ from recomputation: stored={invoice.total}, computed={totals.total}"
        )

    fields = _invoice_fields(invoice, today)
    fields.update(
        subtotal=totals.subtotal,
        total_discount=totals.total_discount,
        total_tax=totals.total_tax,
        total=totals.total,
    )

    return InvoiceDetailResponseDTO(
        **fields,
        line_items=[
            InvoiceLineDTO(
                id=line.id,
                item_name=line.item_name,
                description=line.description,
                product_id=line.product_id,
                quantity=line.quantity,
                unit_price=line.unit_price,
                tax_rate=line.tax_rate,
                discount_rate=line.discount_rate,
                subtotal=line.subtotal,
                discount_amount=line.discount_amount,
                tax_amount=line.tax_amount,
                total=line.total,
                display_order=line.display_order,
            )
            for line in lines
        ],
        tax_breakdown=[
            TaxBreakdownDTO(
                tax_rate=tax.tax_rate,
                taxable_amount=tax.taxable_amount,
                tax_amount=tax.tax_amount,
            )
            for tax in summarize_taxes(line_items)
        ],
        totals_match_snapshot=matches,
        formatted_total=format_money(totals.total, invoice.currency, locale),
    )


def _invoice_fields(invoice: Invoice, today: date) -> dict:
    return dict(
        invoice_id=invoice.id,
        tenant_id=invoice.tenant_id,
        branch_id=invoice.branch_id,
        customer_id=invoice.customer_id,
        invoice_number=invoice.invoice_number,
        status=InvoiceStatus(invoice.status).value,
        effective_status=effective_status(invoice.status, invoice.due_date, today).value,
        currency=invoice.currency,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        subtotal=invoice.subtotal,
        total_discount=invoice.total_discount,
        total_tax=invoice.total_tax,
        total=invoice.total,
        payment_method=invoice.payment_method,
        payment_reference=invoice.payment_reference,
        notes=invoice.notes,
        terms_conditions=invoice.terms_conditions,
        issued_at=as_utc(invoice.issued_at),
        paid_at=as_utc(invoice.paid_at),
        cancelled_at=as_utc(invoice.cancelled_at),
        created_at=as_utc(invoice.created_at),
        updated_at=as_utc(invoice.updated_at),
    )
