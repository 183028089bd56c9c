"""Unit tests for CreateInvoice use case"""

import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock
from pydantic import ValidationError

from src.app.repositories.invoice_repository import DuplicateInvoiceNumber
from src.app.use_cases.invoicing.create_invoice import CreateInvoice
from src.app.use_cases.invoicing.dtos import CreateInvoiceCommandDTO, LineItemInputDTO
from src.domain.invoice import InvoiceStatus


@pytest.fixture
def create_invoice_use_case(mock_uow, mock_invoice_repo, mock_invoice_line_repo):
    """CreateInvoice use case instance with mocked dependencies"""
    return CreateInvoice(
        uow=mock_uow,
        invoice_repo=mock_invoice_repo,
        invoice_line_repo=mock_invoice_line_repo,
    )


@pytest.fixture
def sample_command():
    """Sample CreateInvoiceCommandDTO with two items"""
    return CreateInvoiceCommandDTO(
        tenant_id="company_abc",
        branch_id="branch_main",
        issue_date=date(2024, 1, 15),
        due_date=date(2024, 2, 14),
        items=[
            LineItemInputDTO(
                item_name="Almuerzo ejecutivo",
                quantity=Decimal("3"),
                unit_price=Decimal("10000"),
                tax_rate=Decimal("19"),
                discount_rate=Decimal("10"),
            ),
            LineItemInputDTO(
                item_name="Limonada",
                quantity=Decimal("1"),
                unit_price=Decimal("5000"),
            ),
        ],
    )


@pytest.fixture
def capture_created_invoice(mock_invoice_repo):
    async def create(invoice):
        invoice.id = 1
        return invoice

    mock_invoice_repo.generate_invoice_number = AsyncMock(return_value="FE-202401-00001")
    mock_invoice_repo.create = AsyncMock(side_effect=create)
    return mock_invoice_repo


@pytest.mark.asyncio
class TestCreateInvoiceSuccess:

    async def test_create_invoice_with_items(
        self, create_invoice_use_case, capture_created_invoice, mock_invoice_line_repo,
        mock_uow, sample_command
    ):
        """
        Given: A command with two items
        When: create is called
        Then: A draft invoice is stored with its lines and aggregated totals
        """
        # Act
        result = await create_invoice_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        response = result.value
        assert response.invoice_id == 1
        assert response.invoice_number == "FE-202401-00001"
        assert response.status == "draft"
        assert response.subtotal == Decimal("35000.00")
        assert response.total_discount == Decimal("3000.00")
        assert response.total_tax == Decimal("5130.00")
        assert response.total == Decimal("37130.00")
        assert response.totals_match_snapshot is True
        assert response.formatted_total == "$37.130"
        assert [line.display_order for line in response.line_items] == [0, 1]
        assert [line.total for line in response.line_items] == [Decimal("32130.00"), Decimal("5000.00")]

        assert mock_invoice_line_repo.create.call_count == 2
        stored_invoice = capture_created_invoice.update.call_args[0][0]
        assert stored_invoice.total == Decimal("37130.00")
        mock_uow.commit.assert_called_once()

    async def test_number_generated_for_branch_and_issue_date(
        self, mock_uow, capture_created_invoice, mock_invoice_line_repo, sample_command
    ):
        use_case = CreateInvoice(
            uow=mock_uow,
            invoice_repo=capture_created_invoice,
            invoice_line_repo=mock_invoice_line_repo,
            number_prefix="POS",
        )

        await use_case.execute(sample_command)

        capture_created_invoice.generate_invoice_number.assert_called_once_with(
            branch_id="branch_main", prefix="POS", issue_date=date(2024, 1, 15)
        )

    async def test_create_invoice_without_items(
        self, create_invoice_use_case, capture_created_invoice, mock_invoice_line_repo, mock_uow
    ):
        command = CreateInvoiceCommandDTO(tenant_id="company_abc", branch_id="branch_main")

        result = await create_invoice_use_case.execute(command)

        assert result.is_ok()
        assert result.value.total == Decimal("0.00")
        assert result.value.line_items == []
        assert result.value.status == InvoiceStatus.DRAFT.value
        mock_invoice_line_repo.create.assert_not_called()
        mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
class TestCreateInvoiceFailure:

    async def test_repository_error_rolls_back(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        mock_invoice_repo.generate_invoice_number = AsyncMock(return_value="FE-202401-00001")
        mock_invoice_repo.create = AsyncMock(side_effect=Exception("Database connection failed"))

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "CREATE_INVOICE_FAILED"
        assert "Database connection failed" in result.error.reason
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestCreateInvoiceNumberCollision:

    async def test_taken_number_is_retried_once(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        """
        Given: Another create took FE-202401-00001 between read and insert
        When: create is called
        Then: The number is regenerated and the invoice is stored as FE-202401-00002
        """
        # Arrange
        async def create(invoice):
            if invoice.invoice_number == "FE-202401-00001":
                raise DuplicateInvoiceNumber(invoice.branch_id, invoice.invoice_number)
            invoice.id = 2
            return invoice

        mock_invoice_repo.generate_invoice_number = AsyncMock(
            side_effect=["FE-202401-00001", "FE-202401-00002"]
        )
        mock_invoice_repo.create = AsyncMock(side_effect=create)

        # Act
        result = await create_invoice_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        assert result.value.invoice_number == "FE-202401-00002"
        assert mock_invoice_repo.generate_invoice_number.await_count == 2
        mock_uow.rollback.assert_called_once()
        mock_uow.commit.assert_called_once()

    async def test_second_collision_fails(
        self, create_invoice_use_case, mock_invoice_repo, mock_uow, sample_command
    ):
        mock_invoice_repo.generate_invoice_number = AsyncMock(return_value="FE-202401-00001")
        mock_invoice_repo.create = AsyncMock(
            side_effect=DuplicateInvoiceNumber("branch_main", "FE-202401-00001")
        )

        result = await create_invoice_use_case.execute(sample_command)

        assert result.is_err()
        assert result.error.code == "CREATE_INVOICE_FAILED"
        assert "FE-202401-00001 already exists" in result.error.reason
        assert mock_invoice_repo.create.await_count == 2
        mock_uow.commit.assert_not_called()


class TestCreateInvoiceCommandValidation:

    def test_due_date_before_issue_date_rejected(self):
        with pytest.raises(ValidationError, match="due_date cannot be before issue_date"):
            CreateInvoiceCommandDTO(
                tenant_id="company_abc",
                branch_id="branch_main",
                issue_date=date(2024, 1, 15),
                due_date=date(2024, 1, 14),
            )

    def test_currency_is_upper_cased(self):
        command = CreateInvoiceCommandDTO(
            tenant_id="company_abc", branch_id="branch_main", currency="usd"
        )

        assert command.currency == "USD"
