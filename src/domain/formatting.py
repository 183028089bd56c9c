"""Money display formatting

Stateless: currency and locale are always passed in explicitly. The
invoicing core returns raw Decimals; only presentation code calls this.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict

from src.domain.line_item_calculator import money_context, to_decimal

# currency code -> symbol and number of minor-unit digits shown
CURRENCIES: Dict[str, Dict] = {
    "COP": {"symbol": "$", "decimals": 0},
    "USD": {"symbol": "$", "decimals": 2},
    "EUR": {"symbol": "€", "decimals": 2},
}

# locale -> digit group and decimal separators
LOCALES: Dict[str, Dict[str, str]] = {
    "es-CO": {"group": ".", "decimal": ","},
    "en-US": {"group": ",", "decimal": "."},
}


def format_money(amount, currency: str, locale: str) -> str:
    """
    Render an amount for display

    Args:
        amount: Decimal, int, str or float amount
        currency: ISO 4217 code; unknown codes are shown as a prefix with 2 decimals
        locale: One of LOCALES

    Returns:
        Formatted string, e.g. format_money(32130, "COP", "es-CO") -> "$32.130"

    Raises:
        ValueError: If the locale is not supported
    """
    if locale not in LOCALES:
        raise ValueError(f"Unsupported locale '{locale}'")
    separators = LOCALES[locale]

    code = currency.upper()
    currency_format = CURRENCIES.get(code, {"symbol": f"{code} ", "decimals": 2})

    quantum = Decimal(1).scaleb(-currency_format["decimals"])
    with money_context():
        rounded = to_decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)

    sign = "-" if rounded < 0 else ""
    integer, _, fraction = f"{abs(rounded):f}".partition(".")
    grouped = f"{int(integer):,}".replace(",", separators["group"])

    text = f"{sign}{currency_format['symbol']}{grouped}"
    if fraction:
        text += f"{separators['decimal']}{fraction}"
    return text
