from typing import Literal

from pydantic import BaseModel, ConfigDict

ServiceStatus = Literal["veteran", "active-duty", "national-guard", "reserve", "surviving-spouse"]
COEStatus = Literal["yes", "no", "not-sure"]
DownPaymentType = Literal["dollar", "percent"]
Qualification = Literal["likely", "maybe", "not-yet"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class LoanInputs(_Frozen):
    # Eligibility
    service_status: ServiceStatus = "veteran"
    prior_va_usage: bool = False
    state: str = "TX"
    family_size: int = 2
    coe_status: COEStatus = "not-sure"

    # Affordability
    home_price: float = 400000.0
    down_payment: float = 0.0
    down_payment_type: DownPaymentType = "percent"
    property_taxes_monthly: float = 600.0
    home_insurance_monthly: float = 238.0
    hoa_monthly: float = 0.0
    gross_monthly_income: float = 8000.0
    monthly_debts: float = 800.0
    credit_score: int = 720
    interest_rate_pct: float = 6.5
    term_years: int = 30

    # VA specific
    is_disabled_veteran: bool = False
    finance_funding_fee: bool = True


class MonthlyPayment(_Frozen):
    principal_interest: float
    property_taxes: float
    home_insurance: float
    hoa: float
    pmi: float = 0.0
    mip: float = 0.0
    total: float

    @property
    def mortgage_insurance(self) -> float:
        return self.pmi + self.mip


class FundingFee(_Frozen):
    rate: float
    amount: float
    financed: bool
    exempt: bool


class ResidualIncome(_Frozen):
    required: float
    base_required: float
    actual: float
    passes: bool
    enhanced: bool
    region: str


class Eligibility(_Frozen):
    va_eligible: bool
    financially_qualified: Qualification
    needs_coe: bool


class VALoanResult(_Frozen):
    loan_amount: float
    base_loan_amount: float
    down_payment_amount: float
    funding_fee: FundingFee
    monthly_payment: MonthlyPayment
    dti: float
    residual_income: ResidualIncome
    eligibility: Eligibility


class PMIDetails(_Frozen):
    monthly_amount: float
    annual_rate: float
    can_drop: bool
    drop_month: int
    scheduled_drop_month: int


class ConventionalLoanResult(_Frozen):
    loan_amount: float
    down_payment_amount: float
    ltv: float
    monthly_payment: MonthlyPayment
    pmi: PMIDetails
    dti: float


class UpfrontMIP(_Frozen):
    rate: float
    amount: float
    financed: bool = True


class MIPDetails(_Frozen):
    monthly_amount: float
    annual_rate: float
    cancellation_rule: str


class FHALoanResult(_Frozen):
    loan_amount: float
    base_loan_amount: float
    down_payment_amount: float
    ltv: float
    ufmip: UpfrontMIP
    monthly_payment: MonthlyPayment
    mip: MIPDetails
    dti: float


class ComparisonResult(_Frozen):
    va: VALoanResult
    conventional: ConventionalLoanResult
    fha: FHALoanResult


class StateDefaults(_Frozen):
    property_tax_rate: float
    property_tax_monthly: float
    home_insurance_annual: float
    home_insurance_monthly: float


class SavingsSummary(_Frozen):
    monthly_vs_conventional: float
    monthly_vs_fha: float
    lifetime_vs_conventional: float
    lifetime_vs_fha: float
    annual_pmi_avoided: float
