from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from vacompare.models import ComparisonResult, LoanInputs
from vacompare.presets import FHA_CANCEL_LIFE, VA_DTI_GUIDELINE


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(inputs: LoanInputs, result: ComparisonResult) -> List[RuleResult]:
    res: List[RuleResult] = []
    va = result.va
    conv = result.conventional
    fha = result.fha

    if inputs.gross_monthly_income <= 0:
        res.append(
            RuleResult(
                code="NO_INCOME",
                severity="critical",
                message="No income entered; DTI and residual income are not meaningful.",
            )
        )

    if va.dti > VA_DTI_GUIDELINE:
        res.append(
            RuleResult(
                code="VA_DTI_ABOVE_GUIDELINE",
                severity="warn",
                message="DTI is above 41%; VA requires 20% more residual income.",
                context={"actual": va.dti, "limit": VA_DTI_GUIDELINE},
            )
        )

    ri = va.residual_income
    if not ri.passes:
        res.append(
            RuleResult(
                code="VA_RESIDUAL_SHORTFALL",
                severity="warn",
                message=f"Residual income is below the {ri.region} region requirement.",
                context={
                    "actual": ri.actual,
                    "required": ri.required,
                    "shortfall": ri.required - ri.actual,
                },
            )
        )

    if va.eligibility.financially_qualified == "not-yet":
        res.append(
            RuleResult(
                code="VA_NOT_YET_QUALIFIED",
                severity="critical",
                message="Payment is not yet supported by DTI and residual income; consider a lower price or paying down debts.",
            )
        )

    if va.eligibility.needs_coe:
        res.append(
            RuleResult(
                code="COE_NEEDED",
                severity="info",
                message="Request a Certificate of Eligibility before making an offer.",
            )
        )

    if va.funding_fee.exempt:
        res.append(
            RuleResult(
                code="FUNDING_FEE_WAIVED",
                severity="info",
                message="VA funding fee is waived for veterans receiving disability compensation.",
            )
        )

    if conv.pmi.can_drop:
        res.append(
            RuleResult(
                code="CONV_PMI_REQUIRED",
                severity="info",
                message="Conventional loan carries PMI until the balance reaches 78% of the price.",
                context={
                    "monthly_pmi": conv.pmi.monthly_amount,
                    "scheduled_drop_month": conv.pmi.scheduled_drop_month,
                    "requested_drop_month": conv.pmi.drop_month,
                },
            )
        )

    if fha.mip.cancellation_rule == FHA_CANCEL_LIFE:
        res.append(
            RuleResult(
                code="FHA_MIP_LIFE_OF_LOAN",
                severity="warn",
                message="FHA annual MIP stays for the life of the loan at this LTV and term.",
                context={"monthly_mip": fha.mip.monthly_amount},
            )
        )

    return res


def has_blocking(res: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in res)
