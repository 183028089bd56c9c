"""Data Transfer Objects for Invoicing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

from src.domain.invoice_aggregator import InvoiceStatus
from src.domain.line_item_calculator import MAX_DIGITS, LineItem


class LineItemInputDTO(BaseModel):
    """
    One line as entered on the invoice form

    Ranges are validated here, at the boundary, before the calculator runs.
    """

    item_name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Product or service name"
    )

    description: Optional[str] = Field(
        default=None,
        description="Free-text detail"
    )

    product_id: Optional[str] = Field(
        default=None,
        description="Catalog product reference"
    )

    quantity: Decimal = Field(
        ...,
        ge=0,
        max_digits=MAX_DIGITS,
        decimal_places=3,
        description="Units sold"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=MAX_DIGITS,
        decimal_places=2,
        description="Price per unit before tax"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        decimal_places=2,
        description="Tax percentage (e.g., 19 for IVA 19%)"
    )

    discount_rate: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=100,
        decimal_places=2,
        description="Discount percentage"
    )

    def to_line_item(self) -> LineItem:
        return LineItem(
            quantity=self.quantity,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            discount_rate=self.discount_rate,
            item_name=self.item_name,
            description=self.description,
            product_id=self.product_id,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "item_name": "Almuerzo ejecutivo",
                "quantity": "3",
                "unit_price": "10000",
                "tax_rate": "19",
                "discount_rate": "10"
            }
        }


class InvoiceTotalsDTO(BaseModel):
    """Invoice-level totals"""

    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total: Decimal


class TaxBreakdownDTO(BaseModel):
    """Taxable base and tax at one rate"""

    tax_rate: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal


class LineTotalsDTO(BaseModel):
    """A previewed line with its computed amounts"""

    item_name: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    discount_rate: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal


class PreviewInvoiceCommandDTO(BaseModel):
    """
    Command DTO for the live totals preview

    Used as input to PreviewInvoiceTotals use case.
    """

    items: List[LineItemInputDTO] = Field(
        default_factory=list,
        description="Lines currently on the form"
    )


class PreviewInvoiceResponseDTO(BaseModel):
    """Response DTO for PreviewInvoiceTotals"""

    lines: List[LineTotalsDTO]
    totals: InvoiceTotalsDTO
    tax_breakdown: List[TaxBreakdownDTO]


class CreateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating a draft invoice

    Used as input to CreateInvoice use case.
    """

    tenant_id: str = Field(
        ...,
        min_length=1,
        description="Tenant (company) identifier"
    )

    branch_id: str = Field(
        ...,
        min_length=1,
        description="Issuing branch identifier"
    )

    customer_id: Optional[str] = Field(
        default=None,
        description="Customer identifier"
    )

    issue_date: date = Field(
        default_factory=date.today,
        description="Issue date"
    )

    due_date: Optional[date] = Field(
        default=None,
        description="Payment due date (must not precede issue_date)"
    )

    currency: str = Field(
        default="COP",
        min_length=3,
        max_length=3,
        description="Currency code (ISO 4217)"
    )

    payment_method: Optional[str] = Field(
        default=None,
        description="Expected payment method"
    )

    notes: Optional[str] = None

    terms_conditions: Optional[str] = None

    items: List[LineItemInputDTO] = Field(
        default_factory=list,
        description="Initial line items (may be empty)"
    )

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v):
        return v.upper()

    @model_validator(mode="after")
    def validate_due_date(self):
        if self.due_date is not None and self.due_date < self.issue_date:
            raise ValueError("due_date cannot be before issue_date")
        return self

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "company_abc",
                "branch_id": "branch_main",
                "issue_date": "2024-01-15",
                "due_date": "2024-02-14",
                "currency": "COP",
                "items": [
                    {
                        "item_name": "Almuerzo ejecutivo",
                        "quantity": "3",
                        "unit_price": "10000",
                        "tax_rate": "19",
                        "discount_rate": "10"
                    }
                ]
            }
        }


class InvoiceLineDTO(BaseModel):
    """Stored invoice line with its amounts"""

    id: int
    item_name: str
    description: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal
    discount_rate: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total: Decimal
    display_order: int


class InvoiceResponseDTO(BaseModel):
    """
    Response DTO for invoice operations

    Returned by CreateInvoice, ChangeInvoiceStatus, ListInvoices, etc.
    """

    invoice_id: int
    tenant_id: str
    branch_id: str
    customer_id: Optional[str] = None
    invoice_number: str
    status: str = Field(
        ...,
        description="Stored status"
    )
    effective_status: str = Field(
        ...,
        description="Status as read today (issued past due reads as overdue)"
    )
    currency: str
    issue_date: date
    due_date: Optional[date] = None
    subtotal: Decimal
    total_discount: Decimal
    total_tax: Decimal
    total: Decimal
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    terms_conditions: Optional[str] = None
    issued_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class InvoiceDetailResponseDTO(InvoiceResponseDTO):
    """
    Invoice with its lines

    Totals are recomputed from the stored lines; totals_match_snapshot tells
    whether the stored snapshot agrees with the recomputation.
    """

    line_items: List[InvoiceLineDTO] = Field(default_factory=list)
    tax_breakdown: List[TaxBreakdownDTO] = Field(default_factory=list)
    totals_match_snapshot: bool = True
    formatted_total: str = Field(
        ...,
        description="Total rendered for display in the invoice currency"
    )


class ListInvoicesResponseDTO(BaseModel):
    """Response DTO for ListInvoices"""

    invoices: List[InvoiceResponseDTO]
    limit: int
    offset: int


class UpdateInvoiceCommandDTO(BaseModel):
    """
    Command DTO for UpdateInvoice

    Edits the header of a draft invoice. Only the fields that are set are
    changed; optional fields explicitly set to None are cleared.
    """

    invoice_id: int
    customer_id: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    terms_conditions: Optional[str] = None

    @field_validator("issue_date", "currency")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v):
        return v.upper()

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set if name != "invoice_id"}


class DeleteInvoiceResponseDTO(BaseModel):
    """Response DTO for DeleteInvoice"""

    invoice_id: int
    invoice_number: str
    deleted_items: int


class AddInvoiceItemCommandDTO(BaseModel):
    """Command DTO for AddInvoiceItem"""

    invoice_id: int
    item: LineItemInputDTO


class UpdateInvoiceItemCommandDTO(BaseModel):
    """
    Command DTO for UpdateInvoiceItem

    Only the fields that are set are changed.
    """

    invoice_id: int
    item_id: int
    item_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[Decimal] = Field(default=None, ge=0, max_digits=MAX_DIGITS, decimal_places=3)
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=MAX_DIGITS, decimal_places=2)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    discount_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)


class RemoveInvoiceItemCommandDTO(BaseModel):
    """Command DTO for RemoveInvoiceItem"""

    invoice_id: int
    item_id: int


class ReorderInvoiceItemsCommandDTO(BaseModel):
    """Command DTO for ReorderInvoiceItems"""

    invoice_id: int
    item_ids: List[int] = Field(
        ...,
        description="Every line ID of the invoice, in the new display order"
    )


class ChangeInvoiceStatusCommandDTO(BaseModel):
    """Command DTO for ChangeInvoiceStatus"""

    invoice_id: int
    status: InvoiceStatus
    payment_reference: Optional[str] = Field(
        default=None,
        description="Recorded when the invoice is paid"
    )


class ListInvoicesQueryDTO(BaseModel):
    """Query DTO for ListInvoices"""

    tenant_id: str = Field(..., min_length=1)
    status: Optional[InvoiceStatus] = None
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class MarkOverdueResultDTO(BaseModel):
    """Result of one MarkOverdueInvoices run"""

    as_of: date
    invoices_marked: int
    invoice_ids: List[int]
    execution_time_ms: int


class SummarizeInvoicesQueryDTO(BaseModel):
    """Query DTO for SummarizeInvoices"""

    tenant_id: str = Field(..., min_length=1)
    as_of: date = Field(default_factory=date.today)
    months: int = Field(
        default=6,
        ge=1,
        le=24,
        description="Number of calendar months in the report window, ending with as_of's month"
    )


class MonthlyInvoiceTotalDTO(BaseModel):
    """Paid total and invoice count for one calendar month"""

    month: str = Field(..., description="YYYY-MM")
    paid_total: Decimal
    invoice_count: int


class InvoiceSummaryResponseDTO(BaseModel):
    """
    Response DTO for SummarizeInvoices

    Built from invoice-level totals only; line math is never re-derived here.
    """

    period_start: date
    period_end: date
    total_invoices: int
    total_paid: Decimal
    total_pending: Decimal
    current_month_total: Decimal
    current_month_count: int
    average_invoice_value: Decimal
    status_counts: Dict[str, int]
    monthly: List[MonthlyInvoiceTotalDTO]
