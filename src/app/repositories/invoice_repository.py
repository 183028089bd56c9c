"""Invoice Repository Interface

Defines the contract for invoice persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from datetime import date
from src.domain.invoice import Invoice, InvoiceStatus


class DuplicateInvoiceNumber(Exception):
    """Raised by create when the branch already holds the invoice number"""

    def __init__(self, branch_id: str, invoice_number: str):
        self.branch_id = branch_id
        self.invoice_number = invoice_number
        super().__init__(f"Invoice number {invoice_number} already exists in branch {branch_id}")


class InvoiceRepository(ABC):
    """
    Repository interface for Invoice persistence

    Provides access to invoice data for invoicing operations.
    """

    @abstractmethod
    async def create(self, invoice: Invoice) -> Invoice:
        """
        Create a new invoice

        Args:
            invoice: Invoice entity to persist

        Returns:
            Created Invoice with generated ID

        Raises:
            DuplicateInvoiceNumber: If another invoice took the number first
        """
        pass

    @abstractmethod
    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """
        Retrieve invoice by ID

        Args:
            invoice_id: Invoice ID

        Returns:
            Invoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_by_tenant_id(
        self,
        tenant_id: str,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        """
        Retrieve invoices by tenant ID, newest first

        Args:
            tenant_id: Tenant identifier
            status: Optional filter by status
            limit: Maximum number of invoices to return
            offset: Offset for pagination

        Returns:
            List of invoices
        """
        pass

    @abstractmethod
    async def get_by_invoice_number(
        self, branch_id: str, invoice_number: str
    ) -> Optional[Invoice]:
        """Retrieve invoice by its number within a branch"""
        pass

    @abstractmethod
    async def update(self, invoice: Invoice) -> Invoice:
        """
        Update an existing invoice

        Args:
            invoice: Invoice entity with updated values

        Returns:
            Updated Invoice
        """
        pass

    @abstractmethod
    async def delete(self, invoice: Invoice) -> None:
        """Delete an invoice; its lines must already be deleted"""
        pass

    @abstractmethod
    async def generate_invoice_number(
        self, branch_id: str, prefix: str, issue_date: date
    ) -> str:
        """
        Generate the next invoice number for a branch

        Format: PREFIX-YYYYMM-NNNNN (e.g., FE-202401-00001), sequence
        restarting every month.

        Returns:
            Unique invoice number string
        """
        pass

    @abstractmethod
    async def get_issued_past_due(self, as_of: date) -> List[Invoice]:
        """Retrieve issued invoices whose due date is before as_of"""
        pass

    @abstractmethod
    async def get_for_period(
        self, tenant_id: str, start: date, end: date
    ) -> List[Invoice]:
        """Retrieve a tenant's invoices with issue_date in [start, end]"""
        pass
