"""Request schemas for Invoicing API

Pydantic models for validating incoming HTTP requests whose shape differs
from the use-case command DTOs (path parameters are not repeated in the body).
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.invoice_aggregator import InvoiceStatus
from src.domain.line_item_calculator import MAX_DIGITS


class UpdateInvoiceRequestSchema(BaseModel):
    """
    Request schema for editing a draft invoice header

    Used for PATCH /invoicing/invoices/{invoice_id}.
    Omitted fields are left unchanged; optional fields sent as null are cleared.
    """

    customer_id: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = None
    terms_conditions: Optional[str] = None

    @field_validator("issue_date", "currency")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "cust_0042",
                "due_date": "2024-02-29",
                "payment_method": "transfer"
            }
        }


class UpdateInvoiceItemRequestSchema(BaseModel):
    """
    Request schema for editing one invoice line

    Used for PATCH /invoicing/invoices/{invoice_id}/items/{item_id}.
    Omitted fields are left unchanged.
    """

    item_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[Decimal] = Field(default=None, ge=0, max_digits=MAX_DIGITS, decimal_places=3)
    unit_price: Optional[Decimal] = Field(default=None, ge=0, max_digits=MAX_DIGITS, decimal_places=2)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    discount_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)

    class Config:
        json_schema_extra = {
            "example": {
                "quantity": "2",
                "discount_rate": "0"
            }
        }


class ReorderInvoiceItemsRequestSchema(BaseModel):
    """
    Request schema for reordering invoice lines

    Used for PUT /invoicing/invoices/{invoice_id}/items/order.
    """

    item_ids: List[int] = Field(
        ...,
        description="Every line ID of the invoice, in the new display order"
    )

    @field_validator("item_ids")
    @classmethod
    def validate_unique(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("item_ids must not contain duplicates")
        return v


class ChangeInvoiceStatusRequestSchema(BaseModel):
    """
    Request schema for moving an invoice through its lifecycle

    Used for POST /invoicing/invoices/{invoice_id}/status.
    """

    status: InvoiceStatus = Field(
        ...,
        description="Requested status (issued, paid, cancelled or overdue)"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Payment reference, recorded when status is paid"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "status": "paid",
                "payment_reference": "DATAFONO-88213"
            }
        }
