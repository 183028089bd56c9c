import pytest
from datetime import date
from decimal import Decimal
from itertools import count
from unittest.mock import AsyncMock, MagicMock

from src.domain.invoice import Invoice, InvoiceStatus
from src.domain.invoice_line import InvoiceLine
from src.domain.line_item_calculator import calculate_line_item


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_invoice_repo():
    """Mock invoice repository; update returns the invoice it was given"""
    repo = MagicMock()
    repo.update = AsyncMock(side_effect=lambda invoice: invoice)
    return repo


@pytest.fixture
def mock_invoice_line_repo():
    """Mock invoice line repository; create assigns IDs starting at 100"""
    repo = MagicMock()
    ids = count(100)

    async def create(line):
        line.id = next(ids)
        return line

    repo.create = AsyncMock(side_effect=create)
    repo.update = AsyncMock(side_effect=lambda line: line)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def make_invoice():
    def _make(status=InvoiceStatus.DRAFT, invoice_id=1, due_date=date(2024, 2, 14), **kwargs):
        return Invoice(
            id=invoice_id,
            tenant_id=kwargs.pop("tenant_id", "company_abc"),
            branch_id=kwargs.pop("branch_id", "branch_main"),
            invoice_number=kwargs.pop("invoice_number", f"FE-202401-{invoice_id:05d}"),
            status=status,
            issue_date=kwargs.pop("issue_date", date(2024, 1, 15)),
            due_date=due_date,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_line():
    def _make(line_id, invoice_id=1, quantity="1", unit_price="5000", tax_rate="0",
              discount_rate="0", display_order=0, item_name="Limonada"):
        line = InvoiceLine(
            id=line_id,
            invoice_id=invoice_id,
            item_name=item_name,
            quantity=Decimal(quantity),
            unit_price=Decimal(unit_price),
            tax_rate=Decimal(tax_rate),
            discount_rate=Decimal(discount_rate),
            display_order=display_order,
        )
        line.apply_totals(calculate_line_item(line.to_line_item()))
        return line

    return _make


@pytest.fixture
def lunch_line(make_line):
    """3 x 10000, 19% tax, 10% discount: total 32130.00"""
    return make_line(
        10, quantity="3", unit_price="10000", tax_rate="19", discount_rate="10",
        item_name="Almuerzo ejecutivo",
    )


@pytest.fixture
def drink_line(make_line):
    """1 x 5000, no tax or discount: total 5000.00"""
    return make_line(11, display_order=1)
