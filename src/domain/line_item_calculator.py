"""Line Item Calculator

Turns one invoice line (quantity, unit price, tax rate, discount rate) into
its subtotal, discount, taxable base, tax and total.

Rules:
- Discount is taken from the pre-tax subtotal
- Tax is computed on the post-discount (taxable) base, never on the raw subtotal
- subtotal, discount_amount and tax_amount are each rounded half-up to MONEY_QUANTUM;
  taxable_amount and total are exact differences/sums of the rounded values, so
  total == subtotal - discount_amount + tax_amount always holds

Inputs are validated when a LineItem is built (quantity >= 0, unit_price >= 0,
rates in [0, 100], at most MAX_DIGITS digits for quantity and unit_price).
The calculation itself never clamps. It runs in money_context(), whose
precision holds the exact product of the largest allowed quantity and price.
"""

from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

MONEY_QUANTUM = Decimal("0.01")
HUNDRED = Decimal("100")

# Matches the Numeric(18, x) columns quantity and unit_price are stored in
MAX_DIGITS = 18
CALCULATION_PRECISION = 60


def to_decimal(value) -> Decimal:
    """Coerce ints, strings and floats to Decimal without binary float noise"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@contextmanager
def money_context():
    """Decimal context wide enough for any line or invoice amount"""
    with localcontext() as ctx:
        ctx.prec = CALCULATION_PRECISION
        ctx.rounding = ROUND_HALF_UP
        yield ctx


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class LineItem(BaseModel):
    """
    One product or service entry on an invoice

    Immutable input to calculate_line_item. Descriptive fields carry no
    computational weight.
    """

    model_config = ConfigDict(frozen=True)

    quantity: Decimal = Field(..., ge=0, max_digits=MAX_DIGITS, description="Units sold (integer or decimal)")
    unit_price: Decimal = Field(..., ge=0, max_digits=MAX_DIGITS, description="Price per unit before tax")
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Tax percentage")
    discount_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Discount percentage")

    item_name: Optional[str] = None
    description: Optional[str] = None
    product_id: Optional[str] = None

    @field_validator("quantity", "unit_price", "tax_rate", "discount_rate", mode="before")
    @classmethod
    def coerce_decimal(cls, v):
        if isinstance(v, float):
            return Decimal(str(v))
        return v


class LineItemTotals(BaseModel):
    """Derived amounts for one LineItem"""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    total: Decimal


def calculate_line_item(item: LineItem) -> LineItemTotals:
    """
    Calculate the totals of a single line

    Args:
        item: LineItem within its documented ranges

    Returns:
        LineItemTotals with every amount rounded to MONEY_QUANTUM
    """
    with money_context():
        subtotal = round_money(item.quantity * item.unit_price)
        discount_amount = round_money(subtotal * item.discount_rate / HUNDRED)
        taxable_amount = subtotal - discount_amount
        tax_amount = round_money(taxable_amount * item.tax_rate / HUNDRED)
        total = taxable_amount + tax_amount

    return LineItemTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        total=total,
    )


def calculate_line_items(items: Iterable[LineItem]) -> List[LineItemTotals]:
    return [calculate_line_item(item) for item in items]
