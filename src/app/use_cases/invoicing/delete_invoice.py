"""DeleteInvoice Use Case

Discards a draft invoice together with its line items.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from .common import domain_error, invoice_not_found
from .dtos import DeleteInvoiceResponseDTO

logger = logging.getLogger(__name__)


class DeleteInvoice:
    """
    Use Case: Delete draft invoice

    Business Rules:
    1. Invoice must exist
    2. Only drafts can be deleted; issued invoices are cancelled instead
    3. Lines are deleted before the invoice
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo

    async def execute(self, invoice_id: int) -> Result[DeleteInvoiceResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(invoice_id))

            ensure_items_mutable(invoice.status)

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            for line in lines:
                await self.invoice_line_repo.delete(line)

            invoice_number = invoice.invoice_number
            await self.invoice_repo.delete(invoice)
            await self.uow.commit()

            logger.info(f"Deleted draft invoice {invoice_number} (id={invoice_id}) with {len(lines)} items")

            return Return.ok(
                DeleteInvoiceResponseDTO(
                    invoice_id=invoice_id,
                    invoice_number=invoice_number,
                    deleted_items=len(lines),
                )
            )

        except InvoiceDomainError as e:
            logger.info(f"Rejected deletion of invoice {invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_INVOICE_FAILED",
                    message="Failed to delete invoice",
                    reason=str(e),
                )
            )
