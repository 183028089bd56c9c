"""Unit tests for UpdateInvoiceItem use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.invoicing.update_invoice_item import UpdateInvoiceItem
from src.app.use_cases.invoicing.dtos import UpdateInvoiceItemCommandDTO
from src.domain.invoice import InvoiceStatus


@pytest.fixture
def update_item_use_case(mock_uow, mock_invoice_repo, mock_invoice_line_repo):
    return UpdateInvoiceItem(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        invoice_line_repo=mock_invoice_line_repo,
    )


@pytest.fixture
def draft_with_two_lines(mock_invoice_repo, mock_invoice_line_repo, make_invoice, lunch_line, drink_line):
    invoice = make_invoice()
    mock_invoice_repo.get_by_id = AsyncMock(return_value=invoice)
    mock_invoice_line_repo.get_by_invoice_id = AsyncMock(return_value=[lunch_line, drink_line])
    return invoice


@pytest.mark.asyncio
class TestUpdateInvoiceItem:

    async def test_changing_quantity_recalculates_line_and_invoice(
        self, update_item_use_case, mock_invoice_line_repo, mock_uow,
        draft_with_two_lines, lunch_line
    ):
        """
        Given: A draft invoice with the lunch line (3 units)
        When: Quantity is changed to 1
        Then: Line total is 10710.00 and invoice total is 15710.00
        """
        # Arrange
        mock_invoice_line_repo.get_by_id = AsyncMock(return_value=lunch_line)
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=10, quantity=Decimal("1"))

        # Act
        result = await update_item_use_case.execute(command)

        # Assert
        assert result.is_ok()
        assert lunch_line.quantity == Decimal("1")
        assert lunch_line.subtotal == Decimal("10000.00")
        assert lunch_line.discount_amount == Decimal("1000.00")
        assert lunch_line.tax_amount == Decimal("1710.00")
        assert lunch_line.total == Decimal("10710.00")
        assert draft_with_two_lines.total == Decimal("15710.00")
        assert result.value.total == Decimal("15710.00")
        mock_invoice_line_repo.update.assert_called_once_with(lunch_line)
        mock_uow.commit.assert_called_once()

    async def test_only_set_fields_change(
        self, update_item_use_case, mock_invoice_line_repo, draft_with_two_lines, lunch_line
    ):
        mock_invoice_line_repo.get_by_id = AsyncMock(return_value=lunch_line)
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=10, item_name="Menu del dia")

        result = await update_item_use_case.execute(command)

        assert result.is_ok()
        assert lunch_line.item_name == "Menu del dia"
        assert lunch_line.quantity == Decimal("3")
        assert lunch_line.total == Decimal("32130.00")

    async def test_description_can_be_cleared(
        self, update_item_use_case, mock_invoice_line_repo, draft_with_two_lines, lunch_line
    ):
        lunch_line.description = "Sopa, seco y jugo"
        mock_invoice_line_repo.get_by_id = AsyncMock(return_value=lunch_line)
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=10, description=None)

        result = await update_item_use_case.execute(command)

        assert result.is_ok()
        assert lunch_line.description is None

    async def test_explicit_none_for_numeric_field_is_ignored(
        self, update_item_use_case, mock_invoice_line_repo, draft_with_two_lines, lunch_line
    ):
        mock_invoice_line_repo.get_by_id = AsyncMock(return_value=lunch_line)
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=10, quantity=None)

        result = await update_item_use_case.execute(command)

        assert result.is_ok()
        assert lunch_line.quantity == Decimal("3")

    async def test_line_of_another_invoice_is_not_found(
        self, update_item_use_case, mock_invoice_line_repo, draft_with_two_lines, make_line
    ):
        mock_invoice_line_repo.get_by_id = AsyncMock(return_value=make_line(99, invoice_id=2))
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=99, quantity=Decimal("2"))

        result = await update_item_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "INVOICE_ITEM_NOT_FOUND"
        mock_invoice_line_repo.update.assert_not_called()

    async def test_rejects_edit_on_issued_invoice(
        self, update_item_use_case, mock_invoice_repo, mock_invoice_line_repo, mock_uow, make_invoice
    ):
        mock_invoice_repo.get_by_id = AsyncMock(return_value=make_invoice(status=InvoiceStatus.ISSUED))
        mock_invoice_line_repo.get_by_id = AsyncMock()
        command = UpdateInvoiceItemCommandDTO(invoice_id=1, item_id=10, quantity=Decimal("2"))

        result = await update_item_use_case.execute(command)

        assert result.is_err()
        assert result.error.code == "INVOICE_FROZEN"
        mock_invoice_line_repo.get_by_id.assert_not_called()
        mock_uow.commit.assert_not_called()
