"""SQLAlchemy Invoice Repository Implementation

Implements invoice persistence using SQLAlchemy async session.
"""

from typing import Optional, List
from datetime import date
from sqlalchemy.exc import IntegrityError
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_repository import DuplicateInvoiceNumber, InvoiceRepository
from src.domain.base import utcnow
from src.domain.invoice import Invoice, InvoiceStatus

# PostgreSQL reports the constraint name, SQLite the constrained columns
DUPLICATE_NUMBER_MARKERS = ("uq_invoices_branch_number", "invoices.invoice_number")


class SqlAlchemyInvoiceRepository(InvoiceRepository):
    """
    SQLAlchemy implementation of InvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, invoice: Invoice) -> Invoice:
        self.session.add(invoice)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if any(marker in str(e.orig) for marker in DUPLICATE_NUMBER_MARKERS):
                raise DuplicateInvoiceNumber(invoice.branch_id, invoice.invoice_number) from e
            raise
        await self.session.refresh(invoice)
        return invoice

    async def get_by_id(self, invoice_id: int) -> Optional[Invoice]:
        statement = select(Invoice).where(Invoice.id == invoice_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_tenant_id(
        self,
        tenant_id: str,
        status: Optional[InvoiceStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Invoice]:
        statement = select(Invoice).where(Invoice.tenant_id == tenant_id)

        if status:
            statement = statement.where(Invoice.status == status)

        statement = statement.order_by(Invoice.created_at.desc(), Invoice.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_invoice_number(
        self, branch_id: str, invoice_number: str
    ) -> Optional[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.branch_id == branch_id)
            .where(Invoice.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def update(self, invoice: Invoice) -> Invoice:
        invoice.updated_at = utcnow()
        self.session.add(invoice)
        await self.session.flush()
        await self.session.refresh(invoice)
        return invoice

    async def delete(self, invoice: Invoice) -> None:
        await self.session.delete(invoice)
        await self.session.flush()

    async def generate_invoice_number(
        self, branch_id: str, prefix: str, issue_date: date
    ) -> str:
        """
        Generate the next invoice number for a branch

        Format: PREFIX-YYYYMM-NNNNN (e.g., FE-202401-00001)

        Returns:
            Unique invoice number string
        """
        number_prefix = f"{prefix}-{issue_date.year:04d}{issue_date.month:02d}-"

        # Highest number already used by this branch in the month
        statement = (
            select(func.max(Invoice.invoice_number))
            .where(Invoice.branch_id == branch_id)
            .where(Invoice.invoice_number.like(f"{number_prefix}%"))
        )
        result = await self.session.execute(statement)
        max_number = result.scalar_one_or_none()

        if max_number:
            sequence = int(max_number.split("-")[-1]) + 1
        else:
            sequence = 1

        return f"{number_prefix}{sequence:05d}"

    async def get_issued_past_due(self, as_of: date) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.status == InvoiceStatus.ISSUED)
            .where(Invoice.due_date.is_not(None))
            .where(Invoice.due_date < as_of)
            .order_by(Invoice.due_date)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_for_period(
        self, tenant_id: str, start: date, end: date
    ) -> List[Invoice]:
        statement = (
            select(Invoice)
            .where(Invoice.tenant_id == tenant_id)
            .where(Invoice.issue_date >= start)
            .where(Invoice.issue_date <= end)
            .order_by(Invoice.issue_date)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
