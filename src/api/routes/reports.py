"""Report API Routes"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.app.use_cases.invoicing.dtos import InvoiceSummaryResponseDTO, SummarizeInvoicesQueryDTO
from src.app.use_cases.invoicing.summarize_invoices import SummarizeInvoices
from src.adapter.repositories.invoice_repository import SqlAlchemyInvoiceRepository
from src.depends import get_session
from src.api.error import ClientError

router = APIRouter(prefix="/invoicing/reports", tags=["Reports"])


@router.get(
    "/summary",
    response_model=InvoiceSummaryResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_invoice_summary(
    tenant_id: str = Query(..., min_length=1, description="Tenant identifier"),
    months: Optional[int] = Query(default=None, ge=1, le=24),
    as_of: Optional[date] = Query(default=None, description="Report date (default: today)"),
    session: AsyncSession = Depends(get_session)
):
    """
    Invoicing summary for the last `months` calendar months.

    Paid and pending totals, current-month figures, average invoice value,
    counts per status (overdue as read today) and a monthly paid series.
    """
    query = SummarizeInvoicesQueryDTO(
        tenant_id=tenant_id,
        as_of=as_of or date.today(),
        months=months or ApplicationConfig.REPORT_MONTHS,
    )
    result = await SummarizeInvoices(SqlAlchemyInvoiceRepository(session)).execute(query)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
