"""
Formatters utility.

Utility functions for formatting data in the app layer.
"""

from decimal import Decimal


def format_etb(amount: Decimal | int | None) -> str:
    """
    Format an ETB amount without trailing zero cents.

    Examples:
        Decimal("150.00") -> "150 ETB", Decimal("12.50") -> "12.50 ETB"
    """
    value = Decimal(amount or 0)
    if value == value.to_integral_value():
        return f"{value.to_integral_value():,} ETB"
    return f"{value:,.2f} ETB"


def escape_md(text: str | None) -> str:
    """
    Escape special characters for Markdown V1.

    Escapes: _ * ` [

    Args:
        text: Input text

    Returns:
        Escaped text safe for Markdown
    """
    if not text:
        return ""
    return str(text).replace("_", "\\_").replace("*", "\\*").replace("`", "\\`").replace("[", "\\[")
