"""VA, Conventional and FHA affordability calculations.

This module also exposes the package version for runtime display."""

from .calculators import (
    calculate_all_loans,
    calculate_conventional_loan,
    calculate_fha_loan,
    calculate_max_price,
    calculate_va_loan,
    monthly_payment,
    state_defaults,
)
from .models import ComparisonResult, LoanInputs
from .rate_tables import RateTableError, RateTables, default_rate_tables, load_rate_tables

__all__ = [
    "__version__",
    "ComparisonResult",
    "LoanInputs",
    "RateTableError",
    "RateTables",
    "calculate_all_loans",
    "calculate_conventional_loan",
    "calculate_fha_loan",
    "calculate_max_price",
    "calculate_va_loan",
    "default_rate_tables",
    "load_rate_tables",
    "monthly_payment",
    "state_defaults",
]

# Keep in sync with the version declared in ``pyproject.toml``
__version__ = "0.1.0"
