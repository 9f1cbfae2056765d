from __future__ import annotations

import math
from typing import Optional

import pandas as pd

from .models import (
    ComparisonResult,
    ConventionalLoanResult,
    Eligibility,
    FHALoanResult,
    FundingFee,
    LoanInputs,
    MIPDetails,
    MonthlyPayment,
    PMIDetails,
    ResidualIncome,
    SavingsSummary,
    StateDefaults,
    UpfrontMIP,
    VALoanResult,
)
from .presets import (
    ELIGIBLE_SERVICE_STATUSES,
    FHA_CANCEL_11_YEARS,
    FHA_CANCEL_LIFE,
    FHA_LIFE_OF_LOAN_LTV,
    FHA_LIFE_OF_LOAN_TERM,
    LIVING_EXPENSE_SHARE,
    MAX_PRICE_HIGH,
    MAX_PRICE_ITERATIONS,
    MAX_PRICE_LOW,
    PMI_LTV_THRESHOLD,
    PMI_MAX_MONTHS,
    PMI_PRINCIPAL_SHARE,
    PMI_REQUESTED_DROP_LTV,
    PMI_SCHEDULED_DROP_LTV,
    RESIDUAL_ENHANCEMENT,
    VA_DTI_GUIDELINE,
)
from .rate_tables import RateTables, default_rate_tables


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Form fields arrive as ``None``, ``NaN`` or stray text when a borrower
    clears an input.  Coercing them here keeps the math total instead of
    raising halfway through a comparison.
    """

    try:
        if x is None or (isinstance(x, float) and math.isnan(x)):
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def monthly_payment(principal, annual_rate_pct, term_years):
    """Calculate the fully amortizing monthly payment for a loan.

    ``principal`` is the starting loan amount, ``annual_rate_pct`` is the
    nominal yearly interest rate (e.g. ``6.5`` for 6.5%), and ``term_years`` is
    the amortization period in years.  A zero rate spreads the principal evenly
    over the term.
    """

    L = nz(principal)
    r = nz(annual_rate_pct) / 100 / 12
    n = int(nz(term_years) * 12)
    if n <= 0:
        return 0.0
    if abs(r) < 1e-9:
        return L / n
    return (r * L) / (1 - (1 + r) ** (-n))


def compute_ltv(purchase_price, loan_amount):
    """Compute loan-to-value percentage."""

    if nz(purchase_price) == 0:
        return 0.0
    return 100.0 * nz(loan_amount) / nz(purchase_price)


def down_payment_amount(inputs: LoanInputs) -> float:
    """Dollar down payment from either a percent of price or a flat amount."""

    if inputs.down_payment_type == "percent":
        return nz(inputs.home_price) * nz(inputs.down_payment) / 100
    return nz(inputs.down_payment)


def debt_to_income(monthly_debts, housing_payment, gross_income):
    """Back-end DTI: all monthly obligations over gross monthly income."""

    inc = nz(gross_income)
    if inc == 0:
        return 0.0
    return (nz(monthly_debts) + nz(housing_payment)) / inc


def pmi_drop_month(loan_amount, home_price, monthly_pi, target_ltv):
    """Estimate the month the balance reaches ``target_ltv`` of the price.

    Each month is assumed to retire a fixed 30% of the P&I payment, which is a
    rough stand-in for a real amortization split.  Capped at 360 months.
    """

    target_balance = nz(home_price) * target_ltv
    balance = nz(loan_amount)
    principal_paid = nz(monthly_pi) * PMI_PRINCIPAL_SHARE
    month = 0
    while balance > target_balance and month < PMI_MAX_MONTHS:
        balance -= principal_paid
        month += 1
    return month


def _monthly_breakdown(inputs: LoanInputs, pi: float, pmi: float = 0.0, mip: float = 0.0) -> MonthlyPayment:
    taxes = nz(inputs.property_taxes_monthly)
    hoi = nz(inputs.home_insurance_monthly)
    hoa = nz(inputs.hoa_monthly)
    return MonthlyPayment(
        principal_interest=pi,
        property_taxes=taxes,
        home_insurance=hoi,
        hoa=hoa,
        pmi=pmi,
        mip=mip,
        total=pi + taxes + hoi + hoa + pmi + mip,
    )


def classify_va_qualification(dti: float, residual_passes: bool, enhanced_passes: bool) -> str:
    """Three-way VA outlook from DTI and the two residual income checks."""

    if dti <= VA_DTI_GUIDELINE and residual_passes:
        return "likely"
    if dti > VA_DTI_GUIDELINE and enhanced_passes:
        return "maybe"
    if residual_passes:
        return "maybe"
    return "not-yet"


def calculate_va_loan(inputs: LoanInputs, tables: Optional[RateTables] = None) -> VALoanResult:
    """Size a VA purchase loan and judge DTI and residual income."""

    tables = tables or default_rate_tables()
    price = nz(inputs.home_price)
    dp_amt = down_payment_amount(inputs)
    base_loan = price - dp_amt
    down_pct = compute_ltv(price, dp_amt)

    if inputs.is_disabled_veteran:
        fee_rate = 0.0
    else:
        fee_rate = tables.funding_fee_rate(not inputs.prior_va_usage, down_pct)
    fee_amt = base_loan * fee_rate
    loan = base_loan + fee_amt if inputs.finance_funding_fee else base_loan

    pi = monthly_payment(loan, inputs.interest_rate_pct, inputs.term_years)
    # VA loans never carry mortgage insurance
    payment = _monthly_breakdown(inputs, pi)
    ratio = debt_to_income(inputs.monthly_debts, payment.total, inputs.gross_monthly_income)

    income = nz(inputs.gross_monthly_income)
    region = tables.region_for_state(inputs.state)
    base_required = tables.residual_income_requirement(region, inputs.family_size, loan)
    living_expenses = income * LIVING_EXPENSE_SHARE
    actual = income - nz(inputs.monthly_debts) - payment.total - living_expenses
    residual_passes = actual >= base_required

    enhanced = ratio > VA_DTI_GUIDELINE
    required = base_required * RESIDUAL_ENHANCEMENT if enhanced else base_required
    enhanced_passes = actual >= required

    return VALoanResult(
        loan_amount=loan,
        base_loan_amount=base_loan,
        down_payment_amount=dp_amt,
        funding_fee=FundingFee(
            rate=fee_rate,
            amount=fee_amt,
            financed=inputs.finance_funding_fee,
            exempt=inputs.is_disabled_veteran,
        ),
        monthly_payment=payment,
        dti=ratio,
        residual_income=ResidualIncome(
            required=required,
            base_required=base_required,
            actual=actual,
            passes=enhanced_passes,
            enhanced=enhanced,
            region=region,
        ),
        eligibility=Eligibility(
            va_eligible=inputs.service_status in ELIGIBLE_SERVICE_STATUSES,
            financially_qualified=classify_va_qualification(ratio, residual_passes, enhanced_passes),
            needs_coe=inputs.coe_status != "yes",
        ),
    )


def calculate_conventional_loan(
    inputs: LoanInputs, tables: Optional[RateTables] = None
) -> ConventionalLoanResult:
    """Conventional loan with credit and LTV tiered PMI above 80% LTV."""

    tables = tables or default_rate_tables()
    price = nz(inputs.home_price)
    dp_amt = down_payment_amount(inputs)
    loan = price - dp_amt
    ltv = compute_ltv(price, loan)
    pi = monthly_payment(loan, inputs.interest_rate_pct, inputs.term_years)

    needs_pmi = ltv > PMI_LTV_THRESHOLD
    pmi_rate = tables.pmi_rate(inputs.credit_score, ltv) if needs_pmi else 0.0
    pmi_monthly = loan * pmi_rate / 12 if needs_pmi else 0.0

    payment = _monthly_breakdown(inputs, pi, pmi=pmi_monthly)
    return ConventionalLoanResult(
        loan_amount=loan,
        down_payment_amount=dp_amt,
        ltv=ltv,
        monthly_payment=payment,
        pmi=PMIDetails(
            monthly_amount=pmi_monthly,
            annual_rate=pmi_rate,
            can_drop=needs_pmi,
            drop_month=pmi_drop_month(loan, price, pi, PMI_REQUESTED_DROP_LTV),
            scheduled_drop_month=pmi_drop_month(loan, price, pi, PMI_SCHEDULED_DROP_LTV),
        ),
        dti=debt_to_income(inputs.monthly_debts, payment.total, inputs.gross_monthly_income),
    )


def fha_cancellation_rule(term_years, ltv_pct) -> str:
    if nz(term_years) == FHA_LIFE_OF_LOAN_TERM and ltv_pct >= FHA_LIFE_OF_LOAN_LTV:
        return FHA_CANCEL_LIFE
    return FHA_CANCEL_11_YEARS


def calculate_fha_loan(inputs: LoanInputs, tables: Optional[RateTables] = None) -> FHALoanResult:
    """FHA loan with financed upfront MIP and tiered annual MIP."""

    tables = tables or default_rate_tables()
    price = nz(inputs.home_price)
    dp_amt = down_payment_amount(inputs)
    base_loan = price - dp_amt
    # MIP tiers use the LTV before the upfront premium is added
    ltv = compute_ltv(price, base_loan)

    uf_rate = tables.ufmip_rate
    upfront = base_loan * uf_rate
    loan = base_loan + upfront
    pi = monthly_payment(loan, inputs.interest_rate_pct, inputs.term_years)

    mip_rate = tables.fha_mip_rate(ltv, inputs.term_years)
    mip_monthly = loan * mip_rate / 12
    payment = _monthly_breakdown(inputs, pi, mip=mip_monthly)

    return FHALoanResult(
        loan_amount=loan,
        base_loan_amount=base_loan,
        down_payment_amount=dp_amt,
        ltv=ltv,
        ufmip=UpfrontMIP(rate=uf_rate, amount=upfront, financed=True),
        monthly_payment=payment,
        mip=MIPDetails(
            monthly_amount=mip_monthly,
            annual_rate=mip_rate,
            cancellation_rule=fha_cancellation_rule(inputs.term_years, ltv),
        ),
        dti=debt_to_income(inputs.monthly_debts, payment.total, inputs.gross_monthly_income),
    )


def calculate_all_loans(inputs: LoanInputs, tables: Optional[RateTables] = None) -> ComparisonResult:
    """Run every program over the same inputs."""

    tables = tables or default_rate_tables()
    return ComparisonResult(
        va=calculate_va_loan(inputs, tables),
        conventional=calculate_conventional_loan(inputs, tables),
        fha=calculate_fha_loan(inputs, tables),
    )


def calculate_max_price(target_payment, inputs: LoanInputs, tables: Optional[RateTables] = None) -> int:
    """Largest home price whose VA monthly payment stays under ``target_payment``.

    Binary search over whole-dollar prices between $100k and $2M.  Taxes and
    insurance are held at the monthly figures on ``inputs`` so the payment is
    non-decreasing in price.
    """

    tables = tables or default_rate_tables()
    target = nz(target_payment)
    low, high = MAX_PRICE_LOW, MAX_PRICE_HIGH
    iterations = 0
    while low < high and iterations < MAX_PRICE_ITERATIONS:
        mid = (low + high) // 2
        trial = inputs.model_copy(update={"home_price": float(mid)})
        if calculate_va_loan(trial, tables).monthly_payment.total < target:
            low = mid + 1
        else:
            high = mid
        iterations += 1
    return max(low - 1, 0)


def state_defaults(state: str, home_price, tables: Optional[RateTables] = None) -> StateDefaults:
    """Monthly property tax and insurance estimates for a state."""

    tables = tables or default_rate_tables()
    tax_rate = tables.property_tax_rate(state)
    hoi_annual = tables.home_insurance_annual(state)
    return StateDefaults(
        property_tax_rate=tax_rate,
        property_tax_monthly=nz(home_price) * tax_rate / 12,
        home_insurance_annual=hoi_annual,
        home_insurance_monthly=hoi_annual / 12,
    )


def savings_summary(result: ComparisonResult, term_years) -> SavingsSummary:
    """How much VA saves per month and over the term versus the other programs."""

    months = nz(term_years) * 12
    va_total = result.va.monthly_payment.total
    vs_conv = result.conventional.monthly_payment.total - va_total
    vs_fha = result.fha.monthly_payment.total - va_total
    return SavingsSummary(
        monthly_vs_conventional=vs_conv,
        monthly_vs_fha=vs_fha,
        lifetime_vs_conventional=vs_conv * months,
        lifetime_vs_fha=vs_fha * months,
        annual_pmi_avoided=result.conventional.monthly_payment.pmi * 12,
    )


COMPONENT_ROWS = [
    ("Principal & Interest", "principal_interest"),
    ("Property Taxes", "property_taxes"),
    ("Home Insurance", "home_insurance"),
    ("HOA", "hoa"),
    ("PMI / MIP", "mortgage_insurance"),
    ("Total", "total"),
]


def comparison_frame(result: ComparisonResult) -> pd.DataFrame:
    """Monthly payment components side by side, one column per program."""

    programs = {
        "VA": result.va.monthly_payment,
        "Conventional": result.conventional.monthly_payment,
        "FHA": result.fha.monthly_payment,
    }
    rows = []
    for label, attr in COMPONENT_ROWS:
        row = {"Component": label}
        for name, payment in programs.items():
            row[name] = getattr(payment, attr)
        rows.append(row)
    out = pd.DataFrame(rows).set_index("Component")
    out["Conventional vs VA"] = out["Conventional"] - out["VA"]
    out["FHA vs VA"] = out["FHA"] - out["VA"]
    return out
