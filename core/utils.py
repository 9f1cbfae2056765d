"""Assorted presentation helpers."""


def format_currency(amount) -> str:
    """Whole-dollar currency string, e.g. ``$408,600`` or ``-$1,250``."""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        value = 0.0
    sign = "-" if round(value) < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_percent(decimal) -> str:
    """Percent with one or two decimals, e.g. ``2.15%`` or ``41.0%``."""
    try:
        value = float(decimal) * 100
    except (TypeError, ValueError):
        value = 0.0
    text = f"{value:.2f}"
    if text.endswith("0"):
        text = text[:-1]
    return f"{text}%"
