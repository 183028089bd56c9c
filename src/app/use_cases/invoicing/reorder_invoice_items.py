"""ReorderInvoiceItems Use Case

Rewrites the display order of a draft invoice's lines. Totals do not change.
"""

from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from .common import build_invoice_detail, domain_error, invoice_not_found
from .dtos import InvoiceDetailResponseDTO, ReorderInvoiceItemsCommandDTO


class ReorderInvoiceItems:
    """
    Use Case: Reorder line items

    Business Rules:
    1. Invoice must exist and be draft
    2. item_ids must list every line of the invoice exactly once
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

    async def execute(self, command: ReorderInvoiceItemsCommandDTO) -> Result[InvoiceDetailResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            ensure_items_mutable(invoice.status)

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            lines_by_id = {line.id: line for line in lines}

            if (
                len(command.item_ids) != len(lines_by_id)
                or set(command.item_ids) != set(lines_by_id)
            ):
                return Return.err(
                    Error(
                        code="INVALID_ITEM_ORDER",
                        message="item_ids must contain every item of the invoice exactly once",
                        reason=f"Expected {sorted(lines_by_id)}, got {command.item_ids}",
                    )
                )

            ordered = []
            for position, item_id in enumerate(command.item_ids):
                line = lines_by_id[item_id]
                line.display_order = position
                ordered.append(await self.invoice_line_repo.update(line))

            await self.uow.commit()

            return Return.ok(build_invoice_detail(invoice, ordered, date.today(), self.locale))

        except InvoiceDomainError as e:
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="REORDER_INVOICE_ITEMS_FAILED",
                    message="Failed to reorder invoice items",
                    reason=str(e),
                )
            )
