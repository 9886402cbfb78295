"""Shared number and label helpers."""

from datetime import date

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def safe_percentage(part: float, whole: float) -> float:
    """Return part/whole as a percentage, 0 when whole is 0."""
    if whole == 0:
        return 0.0
    return part * 100 / whole


def growth_percentage(current: float, previous: float) -> float:
    """Relative change against a previous baseline, 0 when the baseline is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) * 100 / previous


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format an amount the way insight values are displayed."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol:
        return f"{symbol}{amount:,.2f}"
    return f"{amount:,.2f} {currency.upper()}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def month_key(d: date) -> str:
    """YYYY-MM key for a date."""
    return f"{d.year}-{d.month:02d}"


def join_names(names: list[str], limit: int = 3) -> str:
    """Join up to ``limit`` names with ', ' and append '...' when more exist."""
    joined = ", ".join(names[:limit])
    if len(names) > limit:
        joined += "..."
    return joined
