"""Calculation audit trails for the VA, Conventional and FHA results."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from vacompare.models import (
    ComparisonResult,
    ConventionalLoanResult,
    FHALoanResult,
    LoanInputs,
    VALoanResult,
)
from vacompare.presets import FHA_CANCEL_LIFE, PMI_REQUESTED_DROP_LTV, PMI_SCHEDULED_DROP_LTV
from vacompare.rate_tables import (
    FHA_LTV_TIERS,
    PMI_LTV_TIERS,
    RateTables,
    credit_tier,
    default_rate_tables,
    fha_term_band,
    resolve_tier,
)
from core.utils import format_currency, format_percent


@dataclass
class AuditEntry:
    step: str
    detail: str
    value: Any
    source: str = ""


class AuditLog:
    """Ordered list of calculation steps, suitable for display and tests."""

    def __init__(self) -> None:
        self.entries: List[AuditEntry] = []

    def record(self, step: str, detail: str, value: Any, source: str = "") -> None:
        """Record one calculation step with the table it drew on, if any."""
        self.entries.append(AuditEntry(step=step, detail=detail, value=value, source=source))

    def as_dict(self) -> List[dict]:
        """Return log entries as dictionaries for rendering or inspection."""
        return [
            {"step": e.step, "detail": e.detail, "value": e.value, "source": e.source}
            for e in self.entries
        ]


def build_va_audit(
    inputs: LoanInputs, va: VALoanResult, tables: Optional[RateTables] = None
) -> AuditLog:
    """Trace how the VA loan amount, payment, DTI and residual income were reached."""
    tables = tables or default_rate_tables()
    versions = tables.versions()
    log = AuditLog()

    log.record(
        "Down payment",
        f"{inputs.down_payment:g} ({inputs.down_payment_type})",
        va.down_payment_amount,
    )
    log.record(
        "Base loan",
        f"{format_currency(inputs.home_price)} - {format_currency(va.down_payment_amount)}",
        va.base_loan_amount,
    )
    fee = va.funding_fee
    if fee.exempt:
        fee_detail = "Waived for disability compensation"
    else:
        use = "subsequent use" if inputs.prior_va_usage else "first use"
        fee_detail = f"{format_percent(fee.rate)} ({use}) x {format_currency(va.base_loan_amount)}"
    log.record("Funding fee", fee_detail, fee.amount, versions["funding_fee"])
    log.record(
        "Loan amount",
        "Base loan + funding fee" if fee.financed else "Base loan (fee paid at closing)",
        va.loan_amount,
    )
    log.record(
        "Principal & interest",
        f"{format_currency(va.loan_amount)} at {inputs.interest_rate_pct:g}% for {inputs.term_years} years",
        va.monthly_payment.principal_interest,
    )
    log.record("Property taxes", "Monthly estimate", va.monthly_payment.property_taxes, versions["property_tax"])
    log.record("Home insurance", "Monthly estimate", va.monthly_payment.home_insurance, versions["home_insurance"])
    log.record("Total payment", "P&I + taxes + insurance + HOA", va.monthly_payment.total)
    log.record(
        "DTI",
        f"({format_currency(inputs.monthly_debts)} + {format_currency(va.monthly_payment.total)})"
        f" / {format_currency(inputs.gross_monthly_income)}",
        va.dti,
    )
    ri = va.residual_income
    required_detail = f"{ri.region} region, family of {inputs.family_size}"
    if ri.enhanced:
        required_detail += f", {format_currency(ri.base_required)} x 1.2 for DTI above 41%"
    log.record("Residual income required", required_detail, ri.required, versions["residual_income"])
    log.record("Residual income actual", "Income - debts - payment - 40% living expenses", ri.actual)
    return log


def _payment_and_dti(log: AuditLog, inputs: LoanInputs, loan_amount: float, payment, dti: float, extra: str) -> None:
    log.record(
        "Principal & interest",
        f"{format_currency(loan_amount)} at {inputs.interest_rate_pct:g}% for {inputs.term_years} years",
        payment.principal_interest,
    )
    log.record("Total payment", f"P&I + taxes + insurance + HOA{extra}", payment.total)
    log.record(
        "DTI",
        f"({format_currency(inputs.monthly_debts)} + {format_currency(payment.total)})"
        f" / {format_currency(inputs.gross_monthly_income)}",
        dti,
    )


def build_conventional_audit(
    inputs: LoanInputs, conv: ConventionalLoanResult, tables: Optional[RateTables] = None
) -> AuditLog:
    """Trace the Conventional PMI tier, monthly PMI and drop-off estimate."""
    tables = tables or default_rate_tables()
    pmi_source = tables.versions()["pmi"]
    log = AuditLog()

    log.record(
        "Loan amount",
        f"{format_currency(inputs.home_price)} - {format_currency(conv.down_payment_amount)}",
        conv.loan_amount,
    )
    log.record("LTV", f"{format_currency(conv.loan_amount)} / {format_currency(inputs.home_price)}", conv.ltv)
    pmi = conv.pmi
    if pmi.can_drop:
        log.record(
            "PMI rate",
            f"Credit {inputs.credit_score} ({credit_tier(inputs.credit_score)}), "
            f"LTV {format_percent(conv.ltv / 100)} ({resolve_tier(PMI_LTV_TIERS, conv.ltv)})",
            pmi.annual_rate,
            pmi_source,
        )
        log.record(
            "Monthly PMI",
            f"{format_currency(conv.loan_amount)} x {format_percent(pmi.annual_rate)} / 12",
            pmi.monthly_amount,
        )
        log.record(
            "PMI drops",
            f"{PMI_SCHEDULED_DROP_LTV:.0%} LTV scheduled (month {pmi.scheduled_drop_month}), "
            f"{PMI_REQUESTED_DROP_LTV:.0%} LTV on request (month {pmi.drop_month})",
            pmi.scheduled_drop_month,
        )
    else:
        log.record("PMI rate", "Not required at 80% LTV or below", 0.0, pmi_source)
    _payment_and_dti(log, inputs, conv.loan_amount, conv.monthly_payment, conv.dti, " + PMI")
    return log


def build_fha_audit(
    inputs: LoanInputs, fha: FHALoanResult, tables: Optional[RateTables] = None
) -> AuditLog:
    """Trace the FHA upfront premium, annual MIP tier and MIP duration."""
    tables = tables or default_rate_tables()
    mip_source = tables.versions()["fha_mip"]
    log = AuditLog()

    log.record(
        "Base loan",
        f"{format_currency(inputs.home_price)} - {format_currency(fha.down_payment_amount)}",
        fha.base_loan_amount,
    )
    log.record(
        "Upfront MIP",
        f"{format_percent(fha.ufmip.rate)} x {format_currency(fha.base_loan_amount)}",
        fha.ufmip.amount,
        mip_source,
    )
    log.record("Loan amount", "Base loan + upfront MIP", fha.loan_amount)
    band = "15-year" if fha_term_band(inputs.term_years) == "15year" else "30-year"
    log.record(
        "Annual MIP rate",
        f"LTV {format_percent(fha.ltv / 100)} ({resolve_tier(FHA_LTV_TIERS, fha.ltv)}), {band} grid",
        fha.mip.annual_rate,
        mip_source,
    )
    log.record(
        "Monthly MIP",
        f"{format_currency(fha.loan_amount)} x {format_percent(fha.mip.annual_rate)} / 12",
        fha.mip.monthly_amount,
    )
    rule = fha.mip.cancellation_rule
    months = int(inputs.term_years) * 12 if rule == FHA_CANCEL_LIFE else 11 * 12
    log.record("MIP duration", f"{rule} (months)", months)
    _payment_and_dti(log, inputs, fha.loan_amount, fha.monthly_payment, fha.dti, " + MIP")
    return log


def build_comparison_audit(
    inputs: LoanInputs, result: ComparisonResult, tables: Optional[RateTables] = None
) -> Dict[str, AuditLog]:
    """Audit trails for all three programs, keyed by display name."""
    tables = tables or default_rate_tables()
    return {
        "VA": build_va_audit(inputs, result.va, tables),
        "Conventional": build_conventional_audit(inputs, result.conventional, tables),
        "FHA": build_fha_audit(inputs, result.fha, tables),
    }
