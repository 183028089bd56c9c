"""GetInvoice Use Case

Loads an invoice with its lines for display (form, print, e-mail, reports).
"""

from datetime import date
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from .common import build_invoice_detail, invoice_not_found
from .dtos import InvoiceDetailResponseDTO


class GetInvoice:
    """
    Use Case: Retrieve invoice detail

    Business Rules:
    1. Invoice must exist
    2. Totals are recomputed from the stored lines, not read from the snapshot
    3. effective_status reports issued invoices past due as overdue
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        locale: str = "es-CO",
    ):
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.locale = locale

    async def execute(
        self, invoice_id: int, today: Optional[date] = None
    ) -> Result[InvoiceDetailResponseDTO]:
        """
        Execute invoice retrieval

        Args:
            invoice_id: Invoice ID
            today: Reference date for effective_status (defaults to today)

        Returns:
            Result[InvoiceDetailResponseDTO]: Invoice with lines or error
        """
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice_id)

            return Return.ok(
                build_invoice_detail(invoice, lines, today or date.today(), self.locale)
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="GET_INVOICE_FAILED",
                    message="Failed to retrieve invoice",
                    reason=str(e),
                )
            )
