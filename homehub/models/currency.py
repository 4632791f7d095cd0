"""
Currency helpers for listing prices.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

CURRENCY_SYMBOLS: Dict[str, str] = {
    # Caribbean
    "GYD": "G$",
    "TTD": "TT$",
    "JMD": "J$",
    "BBD": "Bds$",
    # Africa
    "GHS": "GH₵",
    "NGN": "₦",
    "KES": "KSh",
    "ZAR": "R",
    "USD": "$",
}

COUNTRY_CURRENCY: Dict[str, str] = {
    "GY": "GYD",
    "TT": "TTD",
    "JM": "JMD",
    "BB": "BBD",
    "GH": "GHS",
    "NG": "NGN",
    "KE": "KES",
    "ZA": "ZAR",
    "US": "USD",
}

DEFAULT_CURRENCY = "USD"


def currency_for_country(country_code: Optional[str]) -> str:
    """Default currency for a country code, USD when unknown."""
    if not country_code:
        return DEFAULT_CURRENCY
    return COUNTRY_CURRENCY.get(country_code.upper(), DEFAULT_CURRENCY)


def currency_symbol(currency_code: Optional[str]) -> str:
    code = (currency_code or DEFAULT_CURRENCY).upper()
    # Unknown codes are shown as "XYZ " so the amount stays readable
    return CURRENCY_SYMBOLS.get(code, f"{code} ")


def format_currency(amount: Union[int, float, Decimal], currency_code: Optional[str] = None,
                    compact: bool = False) -> str:
    """
    Format an amount with its currency symbol.

    Whole amounts are shown without decimals, others with two. With compact=True,
    amounts of a thousand or more are shortened to K / M.

    Examples:
        format_currency(25000000, "GYD") -> "G$25,000,000"
        format_currency(1250.5, "USD") -> "$1,250.50"
        format_currency(2500000, "JMD", compact=True) -> "J$2.5M"
    """
    symbol = currency_symbol(currency_code)
    value = Decimal(str(amount))

    if compact and abs(value) >= 1_000_000:
        return f"{symbol}{value / 1_000_000:.1f}M"
    if compact and abs(value) >= 1_000:
        return f"{symbol}{value / 1_000:.1f}K"

    if value == value.to_integral_value():
        return f"{symbol}{int(value):,}"
    return f"{symbol}{value:,.2f}"


def parse_price(value: Any) -> Optional[int]:
    """
    Parse a submitted price.

    Accepts ints and numeric strings (thousands separators allowed). Returns the
    price as a whole number, or None when it is missing or not a positive number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None

    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None

    if not number.is_finite() or number <= 0:
        return None

    price = int(number.to_integral_value())
    return price if price > 0 else None
