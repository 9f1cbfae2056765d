from core.rules import evaluate_rules, has_blocking
from vacompare.calculators import calculate_all_loans
from vacompare.models import LoanInputs


def _codes(**kw):
    inputs = LoanInputs(**kw)
    return {r.code for r in evaluate_rules(inputs, calculate_all_loans(inputs))}


def test_stretched_borrower_notes():
    codes = _codes(gross_monthly_income=8000.0)
    assert "VA_DTI_ABOVE_GUIDELINE" in codes
    assert "VA_RESIDUAL_SHORTFALL" in codes
    assert "VA_NOT_YET_QUALIFIED" in codes
    assert "COE_NEEDED" in codes
    assert "CONV_PMI_REQUIRED" in codes
    assert "FHA_MIP_LIFE_OF_LOAN" in codes


def test_comfortable_borrower_notes():
    inputs = LoanInputs(
        gross_monthly_income=15000.0,
        coe_status="yes",
        is_disabled_veteran=True,
        down_payment=20,
        term_years=15,
    )
    notes = evaluate_rules(inputs, calculate_all_loans(inputs))
    codes = {r.code for r in notes}
    assert codes == {"FUNDING_FEE_WAIVED"}
    assert not has_blocking(notes)


def test_no_income_is_blocking():
    inputs = LoanInputs(gross_monthly_income=0.0)
    notes = evaluate_rules(inputs, calculate_all_loans(inputs))
    assert "NO_INCOME" in {r.code for r in notes}
    assert has_blocking(notes)


def test_residual_shortfall_context():
    inputs = LoanInputs(gross_monthly_income=8000.0)
    note = next(
        r for r in evaluate_rules(inputs, calculate_all_loans(inputs)) if r.code == "VA_RESIDUAL_SHORTFALL"
    )
    assert note.context["shortfall"] > 0
    assert note.severity == "warn"
