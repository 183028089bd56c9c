"""UpdateInvoiceItem Use Case

Changes the inputs of a line item on a draft invoice.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from src.domain.line_item_calculator import calculate_line_item
from .common import build_invoice_detail, domain_error, invoice_not_found, recalculate_invoice
from .dtos import InvoiceDetailResponseDTO, UpdateInvoiceItemCommandDTO

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "item_name",
    "description",
    "product_id",
    "quantity",
    "unit_price",
    "tax_rate",
    "discount_rate",
)
NULLABLE_FIELDS = ("description", "product_id")


class UpdateInvoiceItem:
    """
    Use Case: Edit line item

    Business Rules:
    1. Invoice must exist and be draft
    2. Line must belong to the invoice
    3. Only fields present in the command change
    4. Line amounts and invoice totals are recomputed
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

    async def execute(self, command: UpdateInvoiceItemCommandDTO) -> Result[InvoiceDetailResponseDTO]:
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

            changes = command.model_dump(include=set(EDITABLE_FIELDS), exclude_unset=True)
            for field, value in changes.items():
                # only free-text references may be cleared
                if value is None and field not in NULLABLE_FIELDS:
                    continue
                setattr(line, field, value)

            line.apply_totals(calculate_line_item(line.to_line_item()))
            await self.invoice_line_repo.update(line)

            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            recalculate_invoice(invoice, lines)
            invoice = await self.invoice_repo.update(invoice)

            await self.uow.commit()

            return Return.ok(build_invoice_detail(invoice, lines, date.today(), self.locale))

        except InvoiceDomainError as e:
            logger.info(f"Rejected item update on invoice {command.invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_ITEM_FAILED",
                    message="Failed to update invoice item",
                    reason=str(e),
                )
            )
