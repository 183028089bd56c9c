"""Invoice API Routes

FastAPI routes for invoice totals preview, draft editing and the status lifecycle.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.api.schemas.invoice_request import (
    ChangeInvoiceStatusRequestSchema,
    ReorderInvoiceItemsRequestSchema,
    UpdateInvoiceItemRequestSchema,
    UpdateInvoiceRequestSchema,
)
from src.app.use_cases.invoicing.dtos import (
    AddInvoiceItemCommandDTO,
    ChangeInvoiceStatusCommandDTO,
    CreateInvoiceCommandDTO,
    DeleteInvoiceResponseDTO,
    InvoiceDetailResponseDTO,
    InvoiceResponseDTO,
    LineItemInputDTO,
    ListInvoicesQueryDTO,
    ListInvoicesResponseDTO,
    PreviewInvoiceCommandDTO,
    PreviewInvoiceResponseDTO,
    RemoveInvoiceItemCommandDTO,
    ReorderInvoiceItemsCommandDTO,
    UpdateInvoiceItemCommandDTO,
    UpdateInvoiceCommandDTO,
)
from src.app.use_cases.invoicing.add_invoice_item import AddInvoiceItem
from src.app.use_cases.invoicing.change_invoice_status import ChangeInvoiceStatus
from src.app.use_cases.invoicing.create_invoice import CreateInvoice
from src.app.use_cases.invoicing.get_invoice import GetInvoice
from src.app.use_cases.invoicing.list_invoices import ListInvoices
from src.app.use_cases.invoicing.preview_invoice_totals import PreviewInvoiceTotals
from src.app.use_cases.invoicing.remove_invoice_item import RemoveInvoiceItem
from src.app.use_cases.invoicing.reorder_invoice_items import ReorderInvoiceItems
from src.app.use_cases.invoicing.update_invoice_item import UpdateInvoiceItem
from src.app.use_cases.invoicing.update_invoice import UpdateInvoice
from src.app.use_cases.invoicing.delete_invoice import DeleteInvoice
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.adapter.repositories.invoice_line_repository import SqlAlchemyInvoiceLineRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.domain.invoice_aggregator import InvoiceStatus
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/invoicing", tags=["Invoices"])

ERROR_STATUS_CODES = {
    "INVOICE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_ITEM_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVOICE_FROZEN": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "INVOICE_NOT_PAST_DUE": status.HTTP_409_CONFLICT,
}

NOT_FOUND_RESPONSE = {
    "description": "Invoice not found",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_NOT_FOUND",
                    "message": "Invoice with ID 123 not found"
                }
            }
        }
    }
}

FROZEN_RESPONSE = {
    "description": "Invoice is no longer a draft",
    "content": {
        "application/json": {
            "example": {
                "error": {
                    "code": "INVOICE_FROZEN",
                    "message": "Items of an invoice in status 'issued' cannot be modified"
                }
            }
        }
    }
}


def raise_client_error(error: Error):
    raise ClientError(error, status_code=ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST))


@router.post(
    "/invoices/preview",
    response_model=PreviewInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def preview_invoice_totals(request: PreviewInvoiceCommandDTO):
    """
    Compute line and invoice totals for the lines on the form, without saving.

    **Example request:**
    ```json
    {
      "items": [
        {"item_name": "Almuerzo ejecutivo", "quantity": "3", "unit_price": "10000",
         "tax_rate": "19", "discount_rate": "10"}
      ]
    }
    ```

    **Example response totals:**
    ```json
    {"subtotal": "30000.00", "total_discount": "3000.00", "total_tax": "5130.00", "total": "32130.00"}
    ```
    """
    result = await PreviewInvoiceTotals().execute(request)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/invoices",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    request: CreateInvoiceCommandDTO,
    session: AsyncSession = Depends(get_session)
):
    """
    Create a draft invoice, optionally with its first line items.

    The invoice number is generated per branch as PREFIX-YYYYMM-NNNNN.

    **Returns:**
    - 201: Draft invoice created
    - 422: Invalid request body
    """
    uow = SqlAlchemyUnitOfWork(session)
    invoice_repo = SqlAlchemyInvoiceRepository(session)
    invoice_line_repo = SqlAlchemyInvoiceLineRepository(session)

    use_case = CreateInvoice(
        uow,
        invoice_repo,
        invoice_line_repo,
        number_prefix=ApplicationConfig.INVOICE_NUMBER_PREFIX,
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(request)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/invoices",
    response_model=ListInvoicesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_invoices(
    tenant_id: str = Query(..., min_length=1, description="Tenant identifier"),
    invoice_status: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """
    List a tenant's invoices, newest first.

    **Query parameters:**
    - `tenant_id` (required): Tenant identifier
    - `status` (optional): Stored status filter
    - `limit` (optional): Page size, 1-100 (default: 20)
    - `offset` (optional): Pagination offset (default: 0)
    """
    query = ListInvoicesQueryDTO(
        tenant_id=tenant_id,
        status=invoice_status,
        limit=limit,
        offset=offset,
    )
    result = await ListInvoices(SqlAlchemyInvoiceRepository(session)).execute(query)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.get(
    "/invoices/{invoice_id}",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE},
)
async def get_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session)
):
    """
    Get an invoice with its line items and tax breakdown.

    Totals are recomputed from the stored lines.
    """
    use_case = GetInvoice(
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.patch(
    "/invoices/{invoice_id}",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def update_invoice(
    invoice_id: int,
    request: UpdateInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit the header of a draft invoice.

    Only the fields present in the body are changed.

    **Returns:**
    - 200: Invoice updated
    - 400: due_date before issue_date
    - 404: Invoice not found
    - 409: Invoice is not a draft
    """
    command = UpdateInvoiceCommandDTO(
        invoice_id=invoice_id,
        **request.model_dump(exclude_unset=True),
    )
    use_case = UpdateInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.delete(
    "/invoices/{invoice_id}",
    response_model=DeleteInvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def delete_invoice(
    invoice_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Delete a draft invoice and its line items. Issued invoices must be cancelled instead."""
    use_case = DeleteInvoice(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(invoice_id)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/invoices/{invoice_id}/items",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def add_invoice_item(
    invoice_id: int,
    request: LineItemInputDTO,
    session: AsyncSession = Depends(get_session)
):
    """
    Append a line item to a draft invoice.

    **Returns:**
    - 201: Item added, invoice totals recalculated
    - 404: Invoice not found
    - 409: Invoice is not a draft
    """
    use_case = AddInvoiceItem(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(AddInvoiceItemCommandDTO(invoice_id=invoice_id, item=request))

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.patch(
    "/invoices/{invoice_id}/items/{item_id}",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def update_invoice_item(
    invoice_id: int,
    item_id: int,
    request: UpdateInvoiceItemRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Edit fields of one line item on a draft invoice.

    Only the fields present in the body are changed.
    """
    command = UpdateInvoiceItemCommandDTO(
        invoice_id=invoice_id,
        item_id=item_id,
        **request.model_dump(exclude_unset=True),
    )
    use_case = UpdateInvoiceItem(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.delete(
    "/invoices/{invoice_id}/items/{item_id}",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def remove_invoice_item(
    invoice_id: int,
    item_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Remove one line item from a draft invoice."""
    use_case = RemoveInvoiceItem(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(
        RemoveInvoiceItemCommandDTO(invoice_id=invoice_id, item_id=item_id)
    )

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.put(
    "/invoices/{invoice_id}/items/order",
    response_model=InvoiceDetailResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: NOT_FOUND_RESPONSE, 409: FROZEN_RESPONSE},
)
async def reorder_invoice_items(
    invoice_id: int,
    request: ReorderInvoiceItemsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Set the display order of a draft invoice's lines.

    `item_ids` must list every line of the invoice exactly once.
    Totals are not affected.
    """
    use_case = ReorderInvoiceItems(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
        locale=ApplicationConfig.DEFAULT_LOCALE,
    )
    result = await use_case.execute(
        ReorderInvoiceItemsCommandDTO(invoice_id=invoice_id, item_ids=request.item_ids)
    )

    if result.is_err():
        raise_client_error(result.error)

    return result.value


@router.post(
    "/invoices/{invoice_id}/status",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: NOT_FOUND_RESPONSE,
        409: {
            "description": "Transition not allowed",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVALID_TRANSITION",
                            "message": "Cannot change invoice status from 'paid' to 'cancelled'"
                        }
                    }
                }
            }
        }
    }
)
async def change_invoice_status(
    invoice_id: int,
    request: ChangeInvoiceStatusRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Move an invoice through its lifecycle.

    Allowed transitions:
    - draft -> issued, cancelled
    - issued -> paid, cancelled, overdue

    paid, cancelled and overdue are terminal.
    """
    command = ChangeInvoiceStatusCommandDTO(
        invoice_id=invoice_id,
        status=request.status,
        payment_reference=request.payment_reference,
    )
    use_case = ChangeInvoiceStatus(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyInvoiceRepository(session),
        SqlAlchemyInvoiceLineRepository(session),
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_client_error(result.error)

    return result.value
