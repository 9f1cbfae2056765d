import streamlit as st

from core.utils import format_currency


def render_notes(notes):
    """Show qualification notes with severity-appropriate styling."""
    for r in notes:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")


def payment_delta(current: float, previous):
    """Change label against the previous snapshot, or ``None`` when unchanged."""
    if previous is None:
        return None
    delta = current - previous
    if abs(delta) < 0.01:
        return None
    sign = "+" if delta > 0 else "-"
    return f"{sign}{format_currency(abs(delta))}/mo"


def savings_phrase(difference: float, program: str, period: str = "/mo") -> str:
    """Describe VA against ``program`` given ``program`` cost minus VA cost."""
    if round(difference) > 0:
        return f"VA saves {format_currency(difference)}{period} vs {program}"
    if round(difference) < 0:
        return f"VA costs {format_currency(-difference)}{period} more than {program}"
    return f"VA costs the same as {program}"
