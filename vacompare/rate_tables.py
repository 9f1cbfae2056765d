"""Reference rate tables and tiered lookups.

The six tables (property tax, home insurance, VA funding fee, conventional PMI,
FHA MIP and VA residual income) are shipped as JSON under ``vacompare/data``
and validated with pydantic on load.  Every banded dimension is described as an
ordered list of ``(lower_bound, key)`` pairs and resolved by :func:`resolve_tier`
so the threshold chains live in data rather than in ``if`` ladders.

Gaps in the data never abort a calculation: a missing state, region or cell
falls back to a documented default.  Only a table whose whole key space is
missing raises :class:`RateTableError`.
"""
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .presets import (
    DEFAULT_PMI_RATE,
    DEFAULT_PROPERTY_TAX_RATE,
    DEFAULT_REGION,
    DEFAULT_RESIDUAL_INCOME,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DATA_DIR_ENV = "VACOMPARE_DATA_DIR"

Tier = Tuple[float, str]

FLOOR = -math.inf

CREDIT_TIERS: List[Tier] = [
    (760, ">=760"),
    (740, "740-759"),
    (720, "720-739"),
    (700, "700-719"),
    (680, "680-699"),
    (660, "660-679"),
    (640, "640-659"),
    (620, "620-639"),
    (FLOOR, "<620"),
]
PMI_LTV_TIERS: List[Tier] = [
    (97, ">=97%"),
    (95, "95-97%"),
    (90, "90-95%"),
    (85, "85-90%"),
    (FLOOR, "80-85%"),
]
FHA_LTV_TIERS: List[Tier] = [
    (95, ">=95%"),
    (90, "90-95%"),
    (FLOOR, "<90%"),
]
FUNDING_FEE_TIERS: List[Tier] = [
    (10, ">=10%"),
    (5, "5-9.99%"),
    (FLOOR, "<5%"),
]
RESIDUAL_LOAN_TIERS: List[Tier] = [
    (80000, ">=80000"),
    (FLOOR, "<80000"),
]
MAX_FAMILY_TIER = 5


class RateTableError(ValueError):
    """Raised when a reference table is missing or malformed."""


def resolve_tier(tiers: Sequence[Tier], value: float) -> str:
    """Return the key of the first band whose lower bound ``value`` meets.

    ``tiers`` must be ordered from the highest band down.  When nothing
    matches the last (lowest) band is used.
    """

    for lower, key in tiers:
        if value >= lower:
            return key
    return tiers[-1][1]


class _Table(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = "unversioned"


class PropertyTaxTable(_Table):
    rates: Dict[str, float] = Field(min_length=1)


class StateInsurance(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    avg_annual: float = Field(alias="avgAnnual")


class HomeInsuranceTable(_Table):
    national_avg_annual: float = Field(alias="nationalAvgAnnual")
    states: Dict[str, StateInsurance] = Field(default_factory=dict)


class FundingFeeSchedule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    first_use: Dict[str, float] = Field(alias="firstUse", min_length=1)
    subsequent: Dict[str, float] = Field(min_length=1)


class FundingFeeTable(_Table):
    purchase: FundingFeeSchedule


class PMITable(_Table):
    factors: Dict[str, Dict[str, float]] = Field(min_length=1)


class FHAMIPTable(_Table):
    ufmip_rate: float = Field(0.0175, alias="ufmipRate")
    annual_mip: Dict[str, Dict[str, float]] = Field(alias="annualMip", min_length=1)


class RegionResidual(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    below: Dict[str, float] = Field(default_factory=dict, alias="<80000")
    above: Dict[str, float] = Field(default_factory=dict, alias=">=80000")
    per_dependent: float = Field(0.0, alias="+perDependent")

    def tier(self, key: str) -> Dict[str, float]:
        return self.above if key == ">=80000" else self.below


class ResidualIncomeTable(_Table):
    regions: Dict[str, RegionResidual] = Field(min_length=1)
    region_states: Dict[str, List[str]] = Field(alias="zipToRegion", min_length=1)


TABLE_FILES = {
    "property_tax": ("property_tax.json", PropertyTaxTable),
    "home_insurance": ("home_insurance.json", HomeInsuranceTable),
    "funding_fee": ("funding_fee.json", FundingFeeTable),
    "pmi": ("pmi.json", PMITable),
    "fha_mip": ("fha_mip.json", FHAMIPTable),
    "residual_income": ("residual_income.json", ResidualIncomeTable),
}


def credit_tier(score) -> str:
    """Map a numeric credit score to its PMI credit band."""
    try:
        s = float(score)
    except (TypeError, ValueError):
        return CREDIT_TIERS[-1][1]
    return resolve_tier(CREDIT_TIERS, s)


def fha_term_band(term_years) -> str:
    """Only an exact 15-year term uses the 15-year grid."""
    try:
        years = float(term_years)
    except (TypeError, ValueError):
        return "30year"
    return "15year" if years == 15 else "30year"


@dataclass(frozen=True)
class RateTables:
    """Read-only provider over the six reference tables."""

    property_tax: PropertyTaxTable
    home_insurance: HomeInsuranceTable
    funding_fee: FundingFeeTable
    pmi: PMITable
    fha_mip: FHAMIPTable
    residual_income: ResidualIncomeTable
    state_to_region: Dict[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        index: Dict[str, str] = {}
        for region, states in self.residual_income.region_states.items():
            for state in states:
                index.setdefault(state.upper(), region)
        object.__setattr__(self, "state_to_region", index)

    def versions(self) -> Dict[str, str]:
        """Data-source label of every table, keyed by table name."""
        return {name: getattr(self, name).version for name in TABLE_FILES}

    def property_tax_rate(self, state: str) -> float:
        rate = self.property_tax.rates.get(str(state).upper())
        if rate is None:
            logger.debug("No property tax rate for %r; using %.3f", state, DEFAULT_PROPERTY_TAX_RATE)
            return DEFAULT_PROPERTY_TAX_RATE
        return rate

    def home_insurance_annual(self, state: str) -> float:
        entry = self.home_insurance.states.get(str(state).upper())
        if entry is None:
            logger.debug("No insurance average for %r; using national average", state)
            return self.home_insurance.national_avg_annual
        return entry.avg_annual

    def region_for_state(self, state: str) -> str:
        return self.state_to_region.get(str(state).upper(), DEFAULT_REGION)

    def residual_income_requirement(self, region: str, family_size: int, loan_amount: float) -> float:
        """Monthly residual income VA requires for the household.

        Family sizes above five use the size-five amount plus the region's
        per-dependent increment for every additional member.
        """

        region_data = self.residual_income.regions.get(region)
        if region_data is None:
            logger.debug("No residual income table for region %r", region)
            return DEFAULT_RESIDUAL_INCOME
        size = max(int(family_size), 1)
        tier = region_data.tier(resolve_tier(RESIDUAL_LOAN_TIERS, loan_amount))
        base = tier.get(str(min(size, MAX_FAMILY_TIER)))
        if base is None:
            logger.debug("Residual income tier missing for %s, family of %s", region, size)
            return DEFAULT_RESIDUAL_INCOME
        extra = max(0, size - MAX_FAMILY_TIER)
        return base + extra * region_data.per_dependent

    def funding_fee_rate(self, first_use: bool, down_payment_pct: float) -> float:
        schedule = self.funding_fee.purchase
        fees = schedule.first_use if first_use else schedule.subsequent
        band = resolve_tier(FUNDING_FEE_TIERS, down_payment_pct)
        # Missing band falls back to the <5% rate
        return fees.get(band, fees.get(FUNDING_FEE_TIERS[-1][1], 0.0))

    def pmi_rate(self, credit_score, ltv_pct: float) -> float:
        ltv_band = resolve_tier(PMI_LTV_TIERS, ltv_pct)
        rate = self.pmi.factors.get(ltv_band, {}).get(credit_tier(credit_score))
        if rate is None:
            logger.debug("PMI cell %s/%s missing; using %.4f", ltv_band, credit_tier(credit_score), DEFAULT_PMI_RATE)
            return DEFAULT_PMI_RATE
        return rate

    def fha_mip_rate(self, ltv_pct: float, term_years) -> float:
        band = fha_term_band(term_years)
        grid = self.fha_mip.annual_mip.get(band) or self.fha_mip.annual_mip.get("30year", {})
        return grid.get(resolve_tier(FHA_LTV_TIERS, ltv_pct), 0.0)

    @property
    def ufmip_rate(self) -> float:
        return self.fha_mip.ufmip_rate


def _read_table(path: Path, model):
    if not path.exists():
        logger.error("Reference table not found: %s", path)
        raise RateTableError(f"Reference table not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return model.model_validate(json.load(f))
    except json.JSONDecodeError as exc:
        logger.error("Reference table %s is not valid JSON: %s", path.name, exc)
        raise RateTableError(f"{path.name} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        logger.error("Reference table %s failed validation", path.name)
        raise RateTableError(f"{path.name} is malformed: {exc}") from exc


def load_rate_tables(data_dir: Optional[os.PathLike] = None) -> RateTables:
    """Load and validate every reference table from ``data_dir``.

    ``data_dir`` defaults to ``$VACOMPARE_DATA_DIR`` and then to the tables
    bundled with the package.
    """

    base = Path(data_dir or os.environ.get(DATA_DIR_ENV) or DATA_DIR)
    tables = {name: _read_table(base / fname, model) for name, (fname, model) in TABLE_FILES.items()}
    logger.info("Loaded reference tables from %s", base)
    return RateTables(**tables)


@lru_cache()
def default_rate_tables() -> RateTables:
    """Process-wide tables, loaded once on first use."""
    return load_rate_tables()
