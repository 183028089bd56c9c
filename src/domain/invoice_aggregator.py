"""Invoice Aggregator

Folds per-line totals into invoice totals and owns the invoice status
state machine together with the item mutability rule.

Status transitions:
    draft   -> issued | cancelled
    issued  -> paid | cancelled | overdue
    paid, cancelled, overdue -> (none)

overdue is written by an external time-based job; effective_status gives the
same answer as a read for invoices the job has not reached yet.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict

from src.domain.errors import InvalidTransition, MutationAfterFreeze
from src.domain.line_item_calculator import LineItem, calculate_line_item, money_context

ZERO = Decimal("0.00")


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states"""
    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"
    OVERDUE = "overdue"


ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.ISSUED, InvoiceStatus.CANCELLED}),
    InvoiceStatus.ISSUED: frozenset(
        {InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.OVERDUE}
    ),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.CANCELLED: frozenset(),
    InvoiceStatus.OVERDUE: frozenset(),
}


class InvoiceTotals(BaseModel):
    """Invoice-level sums of the per-line totals"""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal = ZERO
    total_discount: Decimal = ZERO
    total_tax: Decimal = ZERO
    total: Decimal = ZERO


class TaxBreakdown(BaseModel):
    """Taxable base and tax collected at one rate"""

    model_config = ConfigDict(frozen=True)

    tax_rate: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal


def aggregate_line_items(items: Iterable[LineItem]) -> InvoiceTotals:
    """
    Aggregate line items into invoice totals

    Each of the four fields is summed independently over the per-line
    results; nothing is re-derived from the other sums.

    Args:
        items: Line items in any order

    Returns:
        InvoiceTotals (all zero for an empty sequence)
    """
    subtotal = ZERO
    total_discount = ZERO
    total_tax = ZERO
    total = ZERO

    with money_context():
        for item in items:
            line = calculate_line_item(item)
            subtotal += line.subtotal
            total_discount += line.discount_amount
            total_tax += line.tax_amount
            total += line.total

    return InvoiceTotals(
        subtotal=subtotal,
        total_discount=total_discount,
        total_tax=total_tax,
        total=total,
    )


def summarize_taxes(items: Iterable[LineItem]) -> List[TaxBreakdown]:
    """Group taxable base and tax amount by tax rate, ordered by rate"""
    grouped: Dict[Decimal, List[Decimal]] = {}

    with money_context():
        for item in items:
            line = calculate_line_item(item)
            # Decimal("19") and Decimal("19.00") hash alike and share a bucket
            bucket = grouped.setdefault(item.tax_rate, [ZERO, ZERO])
            bucket[0] += line.taxable_amount
            bucket[1] += line.tax_amount

    return [
        TaxBreakdown(tax_rate=rate, taxable_amount=base, tax_amount=tax)
        for rate, (base, tax) in sorted(grouped.items())
    ]


def can_transition(current: InvoiceStatus, requested: InvoiceStatus) -> bool:
    return InvoiceStatus(requested) in ALLOWED_TRANSITIONS[InvoiceStatus(current)]


def transition_status(current: InvoiceStatus, requested: InvoiceStatus) -> InvoiceStatus:
    """
    Validate a status change

    Args:
        current: Status the invoice is in now
        requested: Status the caller wants

    Returns:
        The requested status

    Raises:
        InvalidTransition: If the pair is not in ALLOWED_TRANSITIONS
    """
    if not can_transition(current, requested):
        raise InvalidTransition(current, requested)
    return InvoiceStatus(requested)


def can_modify_items(status: InvoiceStatus) -> bool:
    """Line items may only be added, edited, removed or reordered on drafts"""
    return InvoiceStatus(status) == InvoiceStatus.DRAFT


def ensure_items_mutable(status: InvoiceStatus) -> None:
    """Raise MutationAfterFreeze unless items may be modified in this status"""
    if not can_modify_items(status):
        raise MutationAfterFreeze(status)


def effective_status(
    status: InvoiceStatus, due_date: Optional[date], today: date
) -> InvoiceStatus:
    """Read-time status: an issued invoice past its due date reads as overdue"""
    status = InvoiceStatus(status)
    if status == InvoiceStatus.ISSUED and due_date is not None and due_date < today:
        return InvoiceStatus.OVERDUE
    return status
