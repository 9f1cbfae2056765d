import math

import pytest

from vacompare.calculators import (
    calculate_all_loans,
    calculate_conventional_loan,
    calculate_fha_loan,
    calculate_max_price,
    calculate_va_loan,
    classify_va_qualification,
    comparison_frame,
    compute_ltv,
    debt_to_income,
    down_payment_amount,
    monthly_payment,
    nz,
    pmi_drop_month,
    savings_summary,
    state_defaults,
)
from vacompare.models import LoanInputs
from vacompare.rate_tables import default_rate_tables


def _inputs(**kw):
    base = dict(
        home_price=400000.0,
        down_payment=0.0,
        down_payment_type="percent",
        property_taxes_monthly=600.0,
        home_insurance_monthly=238.0,
        gross_monthly_income=15000.0,
        monthly_debts=800.0,
        interest_rate_pct=6.5,
        term_years=30,
    )
    base.update(kw)
    return LoanInputs(**base)


def test_nz_handles_missing_values():
    assert nz(None) == 0.0
    assert nz(float("nan"), 5.0) == 5.0
    assert nz("abc", 1.0) == 1.0
    assert nz("12.5") == 12.5


def test_zero_rate_splits_principal_evenly():
    assert monthly_payment(360000, 0, 30) == 360000 / 360
    assert monthly_payment(12000, 0, 1) == 1000


def test_payment_increases_with_loan_and_rate():
    assert monthly_payment(300000, 6.5, 30) < monthly_payment(300001, 6.5, 30)
    assert monthly_payment(300000, 6.5, 30) < monthly_payment(300000, 6.625, 30)


def test_non_positive_loan_is_not_an_error():
    assert monthly_payment(0, 6.5, 30) == 0.0
    assert monthly_payment(-1000, 6.5, 30) < 0
    assert monthly_payment(100000, 6.5, 0) == 0.0


def test_down_payment_units():
    assert down_payment_amount(_inputs(down_payment=5, down_payment_type="percent")) == 20000
    assert down_payment_amount(_inputs(down_payment=15000, down_payment_type="dollar")) == 15000
    assert compute_ltv(0, 1000) == 0.0


def test_debt_to_income_zero_income():
    assert debt_to_income(500, 2000, 0) == 0.0
    assert debt_to_income(500, 2000, 10000) == 0.25


def test_va_first_use_financed_scenario():
    va = calculate_va_loan(_inputs())
    assert va.funding_fee.rate == 0.0215
    assert va.funding_fee.amount == pytest.approx(8600)
    assert va.loan_amount == pytest.approx(408600)
    assert abs(va.monthly_payment.principal_interest - 2583) < 1
    assert va.monthly_payment.pmi == 0.0
    assert va.monthly_payment.total == pytest.approx(
        va.monthly_payment.principal_interest + 600 + 238
    )


def test_va_fee_paid_at_closing_not_financed():
    va = calculate_va_loan(_inputs(finance_funding_fee=False))
    assert va.funding_fee.amount == pytest.approx(8600)
    assert va.loan_amount == pytest.approx(400000)
    assert va.funding_fee.financed is False


@pytest.mark.parametrize("prior", [True, False])
@pytest.mark.parametrize("down", [0, 5, 10, 20])
def test_disabled_veteran_pays_no_funding_fee(prior, down):
    va = calculate_va_loan(_inputs(is_disabled_veteran=True, prior_va_usage=prior, down_payment=down))
    assert va.funding_fee.rate == 0.0
    assert va.funding_fee.amount == 0.0
    assert va.funding_fee.exempt is True


def test_subsequent_use_fee_tiers():
    assert calculate_va_loan(_inputs(prior_va_usage=True)).funding_fee.rate == 0.033
    assert calculate_va_loan(_inputs(prior_va_usage=True, down_payment=5)).funding_fee.rate == 0.015
    assert calculate_va_loan(_inputs(prior_va_usage=True, down_payment=10)).funding_fee.rate == 0.0125


def test_va_pmi_always_zero():
    for kw in ({}, {"down_payment": 3}, {"credit_score": 580}, {"term_years": 15}):
        assert calculate_va_loan(_inputs(**kw)).monthly_payment.pmi == 0.0


def test_residual_requirement_enhanced_above_dti_guideline():
    tables = default_rate_tables()
    va = calculate_va_loan(_inputs(gross_monthly_income=8000.0), tables)
    assert va.dti > 0.41
    table_value = tables.residual_income_requirement("South", 2, va.loan_amount)
    assert va.residual_income.base_required == table_value
    assert va.residual_income.required == pytest.approx(table_value * 1.2)
    assert va.residual_income.enhanced is True


def test_residual_requirement_plain_within_guideline():
    va = calculate_va_loan(_inputs())
    assert va.dti <= 0.41
    assert va.residual_income.required == va.residual_income.base_required
    assert va.residual_income.region == "South"


def test_residual_actual_uses_living_expense_allowance():
    va = calculate_va_loan(_inputs())
    expected = 15000 - 800 - va.monthly_payment.total - 15000 * 0.40
    assert va.residual_income.actual == pytest.approx(expected)


def test_va_outlook_likely_and_not_yet():
    assert calculate_va_loan(_inputs()).eligibility.financially_qualified == "likely"
    assert calculate_va_loan(_inputs(gross_monthly_income=5000.0)).eligibility.financially_qualified == "not-yet"


def test_classify_va_qualification_branches():
    assert classify_va_qualification(0.35, True, True) == "likely"
    assert classify_va_qualification(0.45, True, True) == "maybe"
    assert classify_va_qualification(0.45, True, False) == "maybe"
    assert classify_va_qualification(0.45, False, False) == "not-yet"
    assert classify_va_qualification(0.35, False, False) == "not-yet"


def test_needs_coe_unless_yes():
    assert calculate_va_loan(_inputs(coe_status="yes")).eligibility.needs_coe is False
    assert calculate_va_loan(_inputs(coe_status="no")).eligibility.needs_coe is True
    assert calculate_va_loan(_inputs(coe_status="not-sure")).eligibility.needs_coe is True


def test_every_service_status_is_va_eligible():
    for status in ("veteran", "active-duty", "national-guard", "reserve", "surviving-spouse"):
        assert calculate_va_loan(_inputs(service_status=status)).eligibility.va_eligible


def test_conventional_pmi_reads_grid_cell():
    tables = default_rate_tables()
    conv = calculate_conventional_loan(_inputs(credit_score=700, down_payment=5), tables)
    assert conv.ltv == pytest.approx(95.0)
    rate = tables.pmi.factors["95-97%"]["700-719"]
    assert conv.pmi.annual_rate == rate
    assert conv.pmi.monthly_amount == pytest.approx(380000 * rate / 12)
    assert conv.monthly_payment.pmi == conv.pmi.monthly_amount
    assert conv.pmi.can_drop is True


def test_conventional_no_pmi_at_or_below_80_ltv():
    for down in (20, 25, 50):
        conv = calculate_conventional_loan(_inputs(down_payment=down))
        assert conv.monthly_payment.pmi == 0.0
        assert conv.pmi.can_drop is False


def test_conventional_pmi_positive_above_80_ltv():
    for down in (0, 3, 10, 19):
        assert calculate_conventional_loan(_inputs(down_payment=down)).monthly_payment.pmi > 0


def test_pmi_drop_month_heuristic():
    # 30% of a $10 payment retires $3 a month; $100 falls to $50 after 17 months
    assert pmi_drop_month(100, 100, 10, 0.5) == 17
    assert pmi_drop_month(100000, 100000, 0, 0.78) == 360
    assert pmi_drop_month(70000, 100000, 500, 0.78) == 0


def test_conventional_drop_months_order():
    conv = calculate_conventional_loan(_inputs(down_payment=5))
    assert 0 < conv.pmi.drop_month < conv.pmi.scheduled_drop_month <= 360


def test_fha_ufmip_always_financed():
    fha = calculate_fha_loan(_inputs(down_payment=3.5))
    assert fha.ufmip.rate == 0.0175
    assert fha.ufmip.financed is True
    assert fha.base_loan_amount == pytest.approx(386000)
    assert fha.ufmip.amount == pytest.approx(386000 * 0.0175)
    assert fha.loan_amount > fha.base_loan_amount
    assert fha.mip.annual_rate == 0.0055
    assert fha.mip.monthly_amount == pytest.approx(fha.loan_amount * 0.0055 / 12)
    assert fha.mip.cancellation_rule == "Life of loan"


def test_fha_mip_tier_uses_base_ltv():
    # 89.5% base LTV, above 90% once the upfront premium is financed
    fha = calculate_fha_loan(_inputs(down_payment=42000, down_payment_type="dollar", term_years=15))
    assert fha.ltv == pytest.approx(89.5)
    assert compute_ltv(400000, fha.loan_amount) > 90
    assert fha.mip.annual_rate == 0.0015


def test_fha_cancellation_rule_branches():
    assert calculate_fha_loan(_inputs(down_payment=10)).mip.cancellation_rule == "Life of loan"
    assert calculate_fha_loan(_inputs(down_payment=10.01)).mip.cancellation_rule == "11 years"
    assert calculate_fha_loan(_inputs(down_payment=3.5, term_years=15)).mip.cancellation_rule == "11 years"


def test_dti_includes_mortgage_insurance():
    res = calculate_all_loans(_inputs(down_payment=5))
    conv = res.conventional
    fha = res.fha
    assert conv.dti == pytest.approx((800 + conv.monthly_payment.total) / 15000)
    assert conv.monthly_payment.total == pytest.approx(
        conv.monthly_payment.principal_interest + 600 + 238 + conv.monthly_payment.pmi
    )
    assert fha.monthly_payment.total == pytest.approx(
        fha.monthly_payment.principal_interest + 600 + 238 + fha.monthly_payment.mip
    )


def test_calculate_all_loans_matches_individual_calculators():
    inputs = _inputs(down_payment=5, credit_score=760)
    res = calculate_all_loans(inputs)
    assert res.va == calculate_va_loan(inputs)
    assert res.conventional == calculate_conventional_loan(inputs)
    assert res.fha == calculate_fha_loan(inputs)


def test_results_are_immutable():
    res = calculate_all_loans(_inputs())
    with pytest.raises(Exception):
        res.va.loan_amount = 0


def test_max_price_boundary():
    inputs = _inputs()
    target = 2500.0
    price = calculate_max_price(target, inputs)
    assert 100000 <= price < 2000000
    at_price = calculate_va_loan(inputs.model_copy(update={"home_price": float(price)}))
    above = calculate_va_loan(inputs.model_copy(update={"home_price": float(price + 1000)}))
    assert at_price.monthly_payment.total <= target
    assert above.monthly_payment.total > target


def test_max_price_below_search_floor():
    assert calculate_max_price(0, _inputs()) == 99999


def test_state_defaults():
    d = state_defaults("TX", 400000)
    assert d.property_tax_monthly == pytest.approx(400000 * 0.0168 / 12)
    assert d.home_insurance_monthly == pytest.approx(2856 / 12)
    unknown = state_defaults("ZZ", 120000)
    assert unknown.property_tax_rate == 0.01
    assert unknown.home_insurance_annual == default_rate_tables().home_insurance.national_avg_annual


def test_savings_summary():
    res = calculate_all_loans(_inputs())
    s = savings_summary(res, 30)
    diff = res.conventional.monthly_payment.total - res.va.monthly_payment.total
    assert s.monthly_vs_conventional == pytest.approx(diff)
    assert s.lifetime_vs_conventional == pytest.approx(diff * 360)
    assert s.annual_pmi_avoided == pytest.approx(res.conventional.monthly_payment.pmi * 12)


def test_comparison_frame_columns():
    res = calculate_all_loans(_inputs(down_payment=5))
    frame = comparison_frame(res)
    assert list(frame.columns[:3]) == ["VA", "Conventional", "FHA"]
    assert frame.loc["PMI / MIP", "VA"] == 0.0
    assert frame.loc["PMI / MIP", "FHA"] == pytest.approx(res.fha.monthly_payment.mip)
    assert math.isclose(frame.loc["Total", "Conventional vs VA"],
                        res.conventional.monthly_payment.total - res.va.monthly_payment.total)


def test_ten_year_fha_uses_thirty_year_mip_grid():
    fha = calculate_fha_loan(_inputs(down_payment=3.5, term_years=10))
    assert fha.mip.annual_rate == 0.0055
