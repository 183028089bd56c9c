"""RemoveInvoiceItem Use Case

Deletes a line item from a draft invoice.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from .common import build_invoice_detail, domain_error, invoice_not_found, recalculate_invoice
from .dtos import InvoiceDetailResponseDTO, RemoveInvoiceItemCommandDTO

logger = logging.getLogger(__name__)


class RemoveInvoiceItem:
    """
    Use Case: Remove line item

    Business Rules:
    1. Invoice must exist and be draft
    2. Line must belong to the invoice
    3. Invoice totals are recomputed from the remaining lines
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        locale: str = "es-CO",
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.locale = locale

    async def execute(self, command: RemoveInvoiceItemCommandDTO) -> Result[InvoiceDetailResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            ensure_items_mutable(invoice.status)

            line = await self.invoice_line_repo.get_by_id(command.item_id)
            if not line or line.invoice_id != invoice.id:
                return Return.err(
                    Error(
                        code="INVOICE_ITEM_NOT_FOUND",
                        message=f"Item {command.item_id} not found on invoice {command.invoice_id}",
                        reason="Invoice item does not exist",
                    )
                )

            await self.invoice_line_repo.delete(line)

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            recalculate_invoice(invoice, lines)
            invoice = await self.invoice_repo.update(invoice)

            await self.uow.commit()

            return Return.ok(build_invoice_detail(invoice, lines, date.today(), self.locale))

        except InvoiceDomainError as e:
            logger.info(f"Rejected item removal on invoice {command.invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REMOVE_INVOICE_ITEM_FAILED",
                    message="Failed to remove invoice item",
                    reason=str(e),
                )
            )
