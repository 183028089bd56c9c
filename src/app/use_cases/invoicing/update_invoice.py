"""UpdateInvoice Use Case

Edits the header of a draft invoice: customer, dates, currency, payment
method, notes and terms. Line items have their own use cases.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice_aggregator import ensure_items_mutable
from .common import build_invoice_detail, domain_error, invoice_not_found
from .dtos import InvoiceDetailResponseDTO, UpdateInvoiceCommandDTO

logger = logging.getLogger(__name__)


class UpdateInvoice:
    """
    Use Case: Update draft invoice header

    Business Rules:
    1. Invoice must exist and be draft
    2. due_date cannot be before issue_date after the change is applied
    3. invoice_number is kept even if issue_date moves to another month
    4. Totals are untouched; they depend on the lines only
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

    async def execute(self, command: UpdateInvoiceCommandDTO) -> Result[InvoiceDetailResponseDTO]:
        try:
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            ensure_items_mutable(invoice.status)

            changes = command.changes()
            issue_date = changes.get("issue_date", invoice.issue_date)
            due_date = changes.get("due_date", invoice.due_date)
            if due_date is not None and due_date < issue_date:
                return Return.err(
                    Error(
                        code="INVALID_DUE_DATE",
                        message="due_date cannot be before issue_date",
                        reason=f"issue_date={issue_date}, due_date={due_date}",
                    )
                )

            for field, value in changes.items():
                setattr(invoice, field, value)

            invoice = await self.invoice_repo.update(invoice)
            lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
            await self.uow.commit()

            logger.info(
                f"Updated invoice {invoice.invoice_number} header fields: {sorted(changes)}"
            )

            return Return.ok(build_invoice_detail(invoice, lines, date.today(), self.locale))

        except InvoiceDomainError as e:
            logger.info(f"Rejected header update on invoice {command.invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_INVOICE_FAILED",
                    message="Failed to update invoice",
                    reason=str(e),
                )
            )
