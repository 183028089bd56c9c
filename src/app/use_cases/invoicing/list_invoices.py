"""
List Invoices Use Case

Returns a tenant's invoices, newest first, optionally filtered by status.
"""
from datetime import date
from libs.result import Result, Return, Error
from src.app.repositories.invoice_repository import InvoiceRepository
from .common import build_invoice_response
from .dtos import ListInvoicesQueryDTO, ListInvoicesResponseDTO


class ListInvoices:
    """Use case: Paginated invoice list for a tenant"""

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    async def execute(self, query: ListInvoicesQueryDTO) -> Result[ListInvoicesResponseDTO]:
        try:
            invoices = await self.invoice_repo.get_by_tenant_id(
                tenant_id=query.tenant_id,
                status=query.status,
                limit=query.limit,
                offset=query.offset,
            )
            today = date.today()

            return Return.ok(
                ListInvoicesResponseDTO(
                    invoices=[build_invoice_response(invoice, today) for invoice in invoices],
                    limit=query.limit,
                    offset=query.offset,
                )
            )

        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_INVOICES_FAILED",
                    message="Failed to list invoices",
                    reason=str(e),
                )
            )
