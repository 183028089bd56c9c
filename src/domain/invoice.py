"""Invoice Domain Entity

Standard (non-POS) sales invoice issued by a branch.
"""

from datetime import datetime, date
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String, Date, Text, UniqueConstraint
from src.domain.base import BaseModel, IdType, TimestampType, utcnow
from src.domain.invoice_aggregator import InvoiceStatus, InvoiceTotals, transition_status

__all__ = ["Invoice", "InvoiceStatus"]


class Invoice(BaseModel, table=True):
    """
    Invoice - Sales invoice with a draft/issued/paid lifecycle

    Domain Rules:
    - invoice_number is unique per branch
    - Status transitions follow invoice_aggregator.ALLOWED_TRANSITIONS
    - subtotal/total_discount/total_tax/total are a snapshot of the aggregated
      line items, refreshed on every item change while draft and frozen on issue
    - issued_at, paid_at and cancelled_at are set when status changes
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_tenant_id', 'tenant_id'),
        Index('ix_invoices_status', 'status'),
        UniqueConstraint('branch_id', 'invoice_number', name='uq_invoices_branch_number'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Tenant (company) ID"
    )

    branch_id: str = Field(
        description="Issuing branch ID"
    )

    customer_id: Optional[str] = Field(
        default=None,
        description="Customer ID (optional for walk-in sales)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Invoice number (e.g., FE-202401-00001)"
    )

    status: InvoiceStatus = Field(
        default=InvoiceStatus.DRAFT,
        description="Invoice status (draft, issued, paid, cancelled, overdue)"
    )

    currency: str = Field(
        default="COP",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Issue date"
    )

    due_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Payment due date"
    )

    subtotal: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
        description="Sum of line subtotals"
    )

    total_discount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
        description="Sum of line discounts"
    )

    total_tax: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
        description="Sum of line taxes"
    )

    total: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
        description="subtotal - total_discount + total_tax"
    )

    payment_method: Optional[str] = Field(
        default=None,
        description="Payment method (cash, transfer, card...)"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        description="Payment reference recorded when paid"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    terms_conditions: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    issued_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TimestampType, nullable=True),
        description="Timestamp when invoice was issued"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TimestampType, nullable=True),
        description="Timestamp when invoice was paid"
    )

    cancelled_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(TimestampType, nullable=True),
        description="Timestamp when invoice was cancelled"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TimestampType, nullable=False),
        description="Invoice creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TimestampType, nullable=False),
        description="Last update timestamp"
    )

    def apply_totals(self, totals: InvoiceTotals) -> None:
        """Store an aggregated totals snapshot on the invoice"""
        self.subtotal = totals.subtotal
        self.total_discount = totals.total_discount
        self.total_tax = totals.total_tax
        self.total = totals.total

    def snapshot_totals(self) -> InvoiceTotals:
        return InvoiceTotals(
            subtotal=self.subtotal,
            total_discount=self.total_discount,
            total_tax=self.total_tax,
            total=self.total,
        )

    def change_status(self, requested: InvoiceStatus, at: Optional[datetime] = None) -> None:
        """
        Move the invoice to a new status

        Raises:
            InvalidTransition: The invoice is left untouched
        """
        new_status = transition_status(self.status, requested)
        at = at or utcnow()

        self.status = new_status
        if new_status == InvoiceStatus.ISSUED:
            self.issued_at = at
        elif new_status == InvoiceStatus.PAID:
            self.paid_at = at
        elif new_status == InvoiceStatus.CANCELLED:
            self.cancelled_at = at

