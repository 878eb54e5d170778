"""
Currency formatting for tax breakdowns.

The calculation engine takes a formatter as a plain callable so callers can
swap locale or symbol without touching the tax logic. `format_currency` is the
default: two decimals, comma thousands separator, currency symbol prefix.
"""

from enum import Enum


class SupportedCurrency(str, Enum):
    NGN = "NGN"
    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"


CURRENCY_SYMBOLS: dict[str, str] = {
    SupportedCurrency.NGN.value: "₦",
    SupportedCurrency.USD.value: "$",
    SupportedCurrency.GBP.value: "£",
    SupportedCurrency.EUR.value: "€",
}


def format_currency(amount: float, currency: str = "NGN") -> str:
    symbol = CURRENCY_SYMBOLS.get(currency)
    prefix = symbol if symbol is not None else f"{currency} "
    sign = "-" if amount < 0 else ""
    return f"{sign}{prefix}{abs(amount):,.2f}"
