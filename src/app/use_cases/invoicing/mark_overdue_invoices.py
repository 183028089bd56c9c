"""MarkOverdueInvoices Use Case

Time-based job: issued invoices whose due date has passed become overdue.
"""

import logging
import time
from datetime import date
from typing import Optional
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import InvoiceStatus
from .dtos import MarkOverdueResultDTO

logger = logging.getLogger(__name__)


class MarkOverdueInvoices:
    """
    Use Case: Mark past-due invoices as overdue

    Business Rules:
    1. Only issued invoices with due_date < as_of are affected
    2. The issued -> overdue transition goes through the state machine
    3. Safe to re-run: already overdue invoices are no longer issued
    """

    def __init__(self, uow: UnitOfWork, invoice_repo: InvoiceRepository):
        self.uow = uow
        self.invoice_repo = invoice_repo

    async def execute(self, as_of: Optional[date] = None) -> Result[MarkOverdueResultDTO]:
        start_time = time.time()
        as_of = as_of or date.today()

        try:
            invoices = await self.invoice_repo.get_issued_past_due(as_of)

            marked = []
            for invoice in invoices:
                invoice.change_status(InvoiceStatus.OVERDUE)
                await self.invoice_repo.update(invoice)
                marked.append(invoice.id)
                logger.info(
                    f"Invoice {invoice.invoice_number} (tenant {invoice.tenant_id}) "
                    f"marked overdue, due {invoice.due_date}"
                )

            await self.uow.commit()

            return Return.ok(
                MarkOverdueResultDTO(
                    as_of=as_of,
                    invoices_marked=len(marked),
                    invoice_ids=marked,
                    execution_time_ms=int((time.time() - start_time) * 1000),
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="MARK_OVERDUE_FAILED",
                    message="Failed to mark overdue invoices",
                    reason=str(e),
                )
            )
