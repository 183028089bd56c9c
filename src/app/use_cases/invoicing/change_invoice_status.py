"""ChangeInvoiceStatus Use Case

Moves an invoice through its lifecycle (issue, pay, cancel).
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.errors import InvoiceDomainError
from src.domain.invoice import InvoiceStatus
from src.domain.invoice_aggregator import can_transition, effective_status
from .common import build_invoice_response, domain_error, invoice_not_found, recalculate_invoice
from .dtos import ChangeInvoiceStatusCommandDTO, InvoiceResponseDTO

logger = logging.getLogger(__name__)


class ChangeInvoiceStatus:
    """
    Use Case: Change invoice status

    Business Rules:
    1. Invoice must exist
    2. Only transitions in ALLOWED_TRANSITIONS succeed; a rejected request
       leaves the invoice unchanged
    3. Issuing recomputes the totals from the lines one last time and freezes them
    4. payment_reference is recorded when the invoice is paid
    5. overdue is only accepted once the due date has passed

    Flow:
    1. Retrieve invoice
    2. Apply transition (raises InvalidTransition)
    3. Freeze totals on issue / record payment reference on pay
    4. Persist and commit
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

    async def execute(self, command: ChangeInvoiceStatusCommandDTO) -> Result[InvoiceResponseDTO]:
        """
        Execute status change

        Args:
            command: ChangeInvoiceStatusCommandDTO with invoice ID and requested status

        Returns:
            Result[InvoiceResponseDTO]: Updated invoice or error
        """
        try:
            # Step 1: Retrieve invoice
            invoice = await self.invoice_repo.get_by_id(command.invoice_id)
            if not invoice:
                return Return.err(invoice_not_found(command.invoice_id))

            previous = invoice.status

            if (
                command.status == InvoiceStatus.OVERDUE
                and can_transition(invoice.status, command.status)
                and effective_status(invoice.status, invoice.due_date, date.today()) != InvoiceStatus.OVERDUE
            ):
                return Return.err(
                    Error(
                        code="INVOICE_NOT_PAST_DUE",
                        message=f"Invoice {invoice.invoice_number} is not past its due date",
                        reason=f"due_date={invoice.due_date}",
                    )
                )

            # Step 2: Apply transition
            invoice.change_status(command.status)

            # Step 3: Status specific bookkeeping
            if command.status == InvoiceStatus.ISSUED:
                lines = await self.invoice_line_repo.get_by_invoice_id(invoice.id)
                recalculate_invoice(invoice, lines)
            elif command.status == InvoiceStatus.PAID and command.payment_reference:
                invoice.payment_reference = command.payment_reference

            # Step 4: Persist
            invoice = await self.invoice_repo.update(invoice)
            await self.uow.commit()

            logger.info(
                f"Invoice {invoice.invoice_number} status changed: "
                f"{InvoiceStatus(previous).value} -> {InvoiceStatus(invoice.status).value}"
            )

            return Return.ok(build_invoice_response(invoice, date.today()))

        except InvoiceDomainError as e:
            logger.info(f"Rejected status change on invoice {command.invoice_id}: {e}")
            return Return.err(domain_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CHANGE_INVOICE_STATUS_FAILED",
                    message="Failed to change invoice status",
                    reason=str(e),
                )
            )
