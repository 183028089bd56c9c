"""CreateInvoice Use Case

Creates a draft invoice, optionally with its first line items.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.invoice_repository import DuplicateInvoiceNumber, InvoiceRepository
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.line_item_calculator import calculate_line_item
from .common import build_invoice_detail, recalculate_invoice
from .dtos import CreateInvoiceCommandDTO, InvoiceDetailResponseDTO

logger = logging.getLogger(__name__)

# A concurrent create on the same branch can take the number between read and insert
NUMBERING_ATTEMPTS = 2


class CreateInvoice:
    """
    Use Case: Create draft invoice

    Business Rules:
    1. Invoice is created with status=draft
    2. Invoice number is generated per branch (PREFIX-YYYYMM-NNNNN); a number
       taken concurrently is retried once with a freshly generated one
    3. Each line stores the calculator output for its inputs
    4. Invoice totals are the aggregate of the stored lines

    Flow:
    1. Generate invoice number
    2. Create invoice with status=draft
    3. Create line items in the given order
    4. Store the aggregated totals snapshot
    5. Commit transaction
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        invoice_repo: InvoiceRepository,
        invoice_line_repo: InvoiceLineRepository,
        number_prefix: str = "FE",
        locale: str = "es-CO",
    ):
        self.uow = uow
        self.invoice_repo = invoice_repo
        self.invoice_line_repo = invoice_line_repo
        self.number_prefix = number_prefix
        self.locale = locale

    async def execute(self, command: CreateInvoiceCommandDTO) -> Result[InvoiceDetailResponseDTO]:
        """
        Execute invoice creation

        Args:
            command: CreateInvoiceCommandDTO with tenant, branch, dates and items

        Returns:
            Result[InvoiceDetailResponseDTO]: Success with invoice details or error
        """
        try:
            # Step 1-2: Generate invoice number and create invoice with status=draft
            invoice = await self._create_draft(command)

            # Step 3: Create line items
            lines = []
            for position, item in enumerate(command.items):
                line_item = item.to_line_item()
                line = InvoiceLine(
                    invoice_id=invoice.id,
                    product_id=item.product_id,
                    item_name=item.item_name,
                    description=item.description,
                    quantity=line_item.quantity,
                    unit_price=line_item.unit_price,
                    tax_rate=line_item.tax_rate,
                    discount_rate=line_item.discount_rate,
                    display_order=position,
                )
                line.apply_totals(calculate_line_item(line_item))
                lines.append(await self.invoice_line_repo.create(line))

            # Step 4: Store totals snapshot
            recalculate_invoice(invoice, lines)
            invoice = await self.invoice_repo.update(invoice)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created draft invoice {invoice.invoice_number} for tenant {invoice.tenant_id} "
                f"with {len(lines)} items, total={invoice.total}"
            )

            # Step 6: Build response
            return Return.ok(build_invoice_detail(invoice, lines, date.today(), self.locale))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                )
            )

    async def _create_draft(self, command: CreateInvoiceCommandDTO) -> Invoice:
        for attempt in range(1, NUMBERING_ATTEMPTS + 1):
            invoice_number = await self.invoice_repo.generate_invoice_number(
                branch_id=command.branch_id,
                prefix=self.number_prefix,
                issue_date=command.issue_date,
            )
            try:
                return await self.invoice_repo.create(
                    Invoice(
                        tenant_id=command.tenant_id,
                        branch_id=command.branch_id,
                        customer_id=command.customer_id,
                        invoice_number=invoice_number,
                        status=InvoiceStatus.DRAFT,
                        currency=command.currency,
                        issue_date=command.issue_date,
                        due_date=command.due_date,
                        payment_method=command.payment_method,
                        notes=command.notes,
                        terms_conditions=command.terms_conditions,
                    )
                )
            except DuplicateInvoiceNumber as e:
                await self.uow.rollback()
                if attempt == NUMBERING_ATTEMPTS:
                    raise
                logger.warning(f"{e}; retrying with a new number")
