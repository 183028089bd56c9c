"""Invoicing domain use cases"""
from .preview_invoice_totals import PreviewInvoiceTotals
from .create_invoice import CreateInvoice
from .update_invoice import UpdateInvoice
from .delete_invoice import DeleteInvoice
from .get_invoice import GetInvoice
from .list_invoices import ListInvoices
from .add_invoice_item import AddInvoiceItem
from .update_invoice_item import UpdateInvoiceItem
from .remove_invoice_item import RemoveInvoiceItem
from .reorder_invoice_items import ReorderInvoiceItems
from .change_invoice_status import ChangeInvoiceStatus
from .mark_overdue_invoices import MarkOverdueInvoices
from .summarize_invoices import SummarizeInvoices
from .dtos import (
    LineItemInputDTO,
    InvoiceTotalsDTO,
    TaxBreakdownDTO,
    LineTotalsDTO,
    PreviewInvoiceCommandDTO,
    PreviewInvoiceResponseDTO,
    CreateInvoiceCommandDTO,
    UpdateInvoiceCommandDTO,
    DeleteInvoiceResponseDTO,
    InvoiceLineDTO,
    InvoiceResponseDTO,
    InvoiceDetailResponseDTO,
    ListInvoicesQueryDTO,
    ListInvoicesResponseDTO,
    AddInvoiceItemCommandDTO,
    UpdateInvoiceItemCommandDTO,
    RemoveInvoiceItemCommandDTO,
    ReorderInvoiceItemsCommandDTO,
    ChangeInvoiceStatusCommandDTO,
    MarkOverdueResultDTO,
    SummarizeInvoicesQueryDTO,
    MonthlyInvoiceTotalDTO,
    InvoiceSummaryResponseDTO,
)

__all__ = [
    "PreviewInvoiceTotals",
    "CreateInvoice",
    "UpdateInvoice",
    "DeleteInvoice",
    "GetInvoice",
    "ListInvoices",
    "AddInvoiceItem",
    "UpdateInvoiceItem",
    "RemoveInvoiceItem",
    "ReorderInvoiceItems",
    "ChangeInvoiceStatus",
    "MarkOverdueInvoices",
    "SummarizeInvoices",
    "LineItemInputDTO",
    "InvoiceTotalsDTO",
    "TaxBreakdownDTO",
    "LineTotalsDTO",
    "PreviewInvoiceCommandDTO",
    "PreviewInvoiceResponseDTO",
    "CreateInvoiceCommandDTO",
    "UpdateInvoiceCommandDTO",
    "DeleteInvoiceResponseDTO",
    "InvoiceLineDTO",
    "InvoiceResponseDTO",
    "InvoiceDetailResponseDTO",
    "ListInvoicesQueryDTO",
    "ListInvoicesResponseDTO",
    "AddInvoiceItemCommandDTO",
    "UpdateInvoiceItemCommandDTO",
    "RemoveInvoiceItemCommandDTO",
    "ReorderInvoiceItemsCommandDTO",
    "ChangeInvoiceStatusCommandDTO",
    "MarkOverdueResultDTO",
    "SummarizeInvoicesQueryDTO",
    "MonthlyInvoiceTotalDTO",
    "InvoiceSummaryResponseDTO",
]
