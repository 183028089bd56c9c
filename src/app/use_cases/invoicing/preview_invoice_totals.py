"""
Preview Invoice Totals Use Case

Computes line and invoice totals for the invoice form without persisting
anything. Runs the same calculator and aggregator as every stored invoice, so
the previewed total is the total that will be stored.
"""
import logging
from libs.result import Result, Return, Error
from src.domain.invoice_aggregator import aggregate_line_items, summarize_taxes
from src.domain.line_item_calculator import calculate_line_item
from .dtos import (
    InvoiceTotalsDTO,
    LineTotalsDTO,
    PreviewInvoiceCommandDTO,
    PreviewInvoiceResponseDTO,
    TaxBreakdownDTO,
)

logger = logging.getLogger(__name__)


class PreviewInvoiceTotals:
    """
    Use case: Live invoice totals preview

    Read-only and stateless; safe to call on every keystroke.
    """

    async def execute(self, command: PreviewInvoiceCommandDTO) -> Result[PreviewInvoiceResponseDTO]:
        """
        Calculate totals for the items currently on the form.

        Args:
            command: Preview command with line items

        Returns:
            Result[PreviewInvoiceResponseDTO]: Per-line amounts, invoice totals and tax breakdown
        """
        try:
            line_items = [item.to_line_item() for item in command.items]

            lines = []
            for source, item in zip(command.items, line_items):
                line = calculate_line_item(item)
                lines.append(
                    LineTotalsDTO(
                        item_name=source.item_name,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        tax_rate=item.tax_rate,
                        discount_rate=item.discount_rate,
                        subtotal=line.subtotal,
                        discount_amount=line.discount_amount,
                        taxable_amount=line.taxable_amount,
                        tax_amount=line.tax_amount,
                        total=line.total,
                    )
                )

            totals = aggregate_line_items(line_items)

            return Return.ok(
                PreviewInvoiceResponseDTO(
                    lines=lines,
                    totals=InvoiceTotalsDTO(**totals.model_dump()),
                    tax_breakdown=[
                        TaxBreakdownDTO(**tax.model_dump()) for tax in summarize_taxes(line_items)
                    ],
                )
            )

        except Exception as e:
            logger.error(f"Invoice preview failed for {len(command.items)} items: {e}")
            return Return.err(
                Error(
                    code="PREVIEW_INVOICE_FAILED",
                    message="Failed to calculate invoice totals",
                    reason=str(e),
                )
            )
