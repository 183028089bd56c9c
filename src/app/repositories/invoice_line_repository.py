"""Invoice Line Repository Interface

Defines the contract for invoice line persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.invoice_line import InvoiceLine


class InvoiceLineRepository(ABC):
    """
    Repository interface for InvoiceLine persistence

    Provides access to invoice line items for invoicing operations.
    """

    @abstractmethod
    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        """
        Retrieve all line items for an invoice, ordered by display_order

        Args:
            invoice_id: Invoice ID

        Returns:
            List of InvoiceLine items
        """
        pass

    @abstractmethod
    async def get_by_id(self, line_id: int) -> Optional[InvoiceLine]:
        pass

    @abstractmethod
    async def create(self, invoice_line: InvoiceLine) -> InvoiceLine:
        """
        Create a new invoice line item

        Args:
            invoice_line: InvoiceLine entity to persist

        Returns:
            Created InvoiceLine with generated ID
        """
        pass

    @abstractmethod
    async def update(self, invoice_line: InvoiceLine) -> InvoiceLine:
        pass

    @abstractmethod
    async def delete(self, invoice_line: InvoiceLine) -> None:
        pass

    @abstractmethod
    async def next_display_order(self, invoice_id: int) -> int:
        """Return max(display_order) + 1 for the invoice, or 0 when it has no lines"""
        pass
