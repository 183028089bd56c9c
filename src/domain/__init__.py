from .base import BaseModel
from .errors import InvoiceDomainError, InvalidTransition, MutationAfterFreeze
from .line_item_calculator import LineItem, LineItemTotals, calculate_line_item
from .invoice_aggregator import (
    InvoiceStatus,
    InvoiceTotals,
    TaxBreakdown,
    ALLOWED_TRANSITIONS,
    aggregate_line_items,
    summarize_taxes,
    can_transition,
    transition_status,
    can_modify_items,
    ensure_items_mutable,
    effective_status,
)
from .invoice import Invoice
from .invoice_line import InvoiceLine

__all__ = [
    "BaseModel",
    "InvoiceDomainError",
    "InvalidTransition",
    "MutationAfterFreeze",
    "LineItem",
    "LineItemTotals",
    "calculate_line_item",
    "InvoiceStatus",
    "InvoiceTotals",
    "TaxBreakdown",
    "ALLOWED_TRANSITIONS",
    "aggregate_line_items",
    "summarize_taxes",
    "can_transition",
    "transition_status",
    "can_modify_items",
    "ensure_items_mutable",
    "effective_status",
    "Invoice",
    "InvoiceLine",
]
