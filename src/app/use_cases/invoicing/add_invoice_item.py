"""AddInvoiceItem Use Case

Appends a line item to a draft invoice.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from src.domain.invoice_line import InvoiceLine
from src.domain.line_item_calculator import calculate_line_item
from .common import build_invoice_detail, domain_error, invoice_not_found, recalculate_invoice
from .dtos import AddInvoiceItemCommandDTO, InvoiceDetailResponseDTO

logger = logging.getLogger(__name__)


class AddInvoiceItem:
    """
    Use Case: Add line item

    Business Rules:
    1. Invoice must exist
    2. Invoice must be draft (checked before anything is calculated or written)
    3. New line goes after the current last line
    4. Invoice totals snapshot is recomputed from all stored lines
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

    async def execute(self, command: AddInvoiceItemCommandDTO) -> Result[InvoiceDetailResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            ensure_items_mutable(invoice.status)

            line_item = command.item.to_line_item()
            line = InvoiceLine(
                invoice_id=invoice.id,
                product_id=command.item.product_id,
                item_name=command.item.item_name,
                description=command.item.description,
                quantity=line_item.quantity,
                unit_price=line_item.unit_price,
                tax_rate=line_item.tax_rate,
                discount_rate=line_item.discount_rate,
                display_order=await self.invoice_line_repo.next_display_order(invoice.id),
            )
            line.apply_totals(calculate_line_item(line_item))
            await self.invoice_line_repo.create(line)

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            recalculate_invoice(invoice, lines)
            invoice = await self.invoice_repo.update(invoice)

            await self.uow.commit()

            return Return.ok(build_invoice_detail(invoice, lines, date.today(), self.locale))

        except InvoiceDomainError as e:
            logger.info(f"Rejected item add on invoice {command.invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="ADD_INVOICE_ITEM_FAILED",
                    message="Failed to add invoice item",
                    reason=str(e),
                )
            )
