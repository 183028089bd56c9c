"""SQLAlchemy Invoice Line Repository Implementation

Implements invoice line persistence using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.invoice_line_repository import InvoiceLineRepository
from src.domain.invoice_line import InvoiceLine


class SqlAlchemyInvoiceLineRepository(InvoiceLineRepository):
    """
    SQLAlchemy implementation of InvoiceLineRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_invoice_id(self, invoice_id: int) -> List[InvoiceLine]:
        statement = (
            select(InvoiceLine)
            .where(InvoiceLine.invoice_id == invoice_id)
            .order_by(InvoiceLine.display_order, InvoiceLine.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_id(self, line_id: int) -> Optional[InvoiceLine]:
        statement = select(InvoiceLine).where(InvoiceLine.id == line_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def create(self, invoice_line: InvoiceLine) -> InvoiceLine:
        self.session.add(invoice_line)
        await self.session.flush()
        await self.session.refresh(invoice_line)
        return invoice_line

    async def update(self, invoice_line: InvoiceLine) -> InvoiceLine:
        self.session.add(invoice_line)
        await self.session.flush()
        await self.session.refresh(invoice_line)
        return invoice_line

    async def delete(self, invoice_line: InvoiceLine) -> None:
        await self.session.delete(invoice_line)
        await self.session.flush()

    async def next_display_order(self, invoice_id: int) -> int:
        statement = select(func.max(InvoiceLine.display_order)).where(
            InvoiceLine.invoice_id == invoice_id
        )
        result = await self.session.execute(statement)
        current = result.scalar_one_or_none()
        return 0 if current is None else current + 1
