"""Invoice Line Domain Entity

Tracks individual line items within an invoice.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Numeric, String, Text
from src.domain.base import BaseModel, IdType, TimestampType, utcnow
from src.domain.line_item_calculator import LineItem, LineItemTotals


class InvoiceLine(BaseModel, table=True):
    """
    Invoice Line - Individual line item within an invoice

    Domain Rules:
    - Each line item belongs to exactly one invoice
    - quantity and unit_price are non-negative, rates are percentages in [0, 100]
    - subtotal/discount_amount/tax_amount/total are the calculator output for
      the stored inputs; they are rewritten whenever an input changes
    - Immutable once the invoice leaves draft
    - display_order affects presentation only, never totals
    """

    __tablename__ = "invoice_lines"
    __table_args__ = (
        Index('ix_invoice_lines_invoice_id', 'invoice_id'),
        CheckConstraint('quantity >= 0', name='quantity_non_negative'),
        CheckConstraint('unit_price >= 0', name='unit_price_non_negative'),
        CheckConstraint('tax_rate >= 0 AND tax_rate <= 100', name='tax_rate_percentage'),
        CheckConstraint('discount_rate >= 0 AND discount_rate <= 100', name='discount_rate_percentage'),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique invoice line identifier (auto-increment)"
    )

    invoice_id: int = Field(
        sa_column=Column(BigInteger, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Invoice"
    )

    product_id: Optional[str] = Field(
        default=None,
        description="Catalog product reference (None for free-text lines)"
    )

    item_name: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Line item name (e.g., 'Bandeja paisa')"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(18, 3), nullable=False),
        description="Quantity (units, hours, kilograms...)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Price per unit before tax"
    )

    tax_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False),
        description="Tax percentage applied to the discounted base"
    )

    discount_rate: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(5, 2), nullable=False),
        description="Discount percentage applied to the subtotal"
    )

    subtotal: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
    )

    discount_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
    )

    tax_amount: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
    )

    total: Decimal = Field(
        default=Decimal("0.00"),
        sa_column=Column(Numeric(38, 2), nullable=False),
    )

    display_order: int = Field(
        default=0,
        description="Position of the line on the invoice"
    )

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(TimestampType, nullable=False),
        description="Line item creation timestamp"
    )

    def to_line_item(self) -> LineItem:
        """Map the stored inputs back into a calculator LineItem"""
        return LineItem(
            quantity=self.quantity,
            unit_price=self.unit_price,
            tax_rate=self.tax_rate,
            discount_rate=self.discount_rate,
            item_name=self.item_name,
            description=self.description,
            product_id=self.product_id,
        )

    def apply_totals(self, totals: LineItemTotals) -> None:
        self.subtotal = totals.subtotal
        self.discount_amount = totals.discount_amount
        self.tax_amount = totals.tax_amount
        self.total = totals.total
