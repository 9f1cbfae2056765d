import streamlit as st

from core.state import apply_state_defaults, current_inputs, init_state, update_inputs
from core.utils import format_currency, format_percent
from vacompare.calculators import down_payment_amount
from vacompare.rate_tables import default_rate_tables


def render_affordability_step():
    """Step 2: home, income and loan terms."""
    init_state()
    d = st.session_state["inputs"]
    st.header("Step 2: Affordability Snapshot")

    price = st.number_input(
        "Target Home Price", min_value=0.0, value=float(d.get("home_price", 0.0)), step=5000.0
    )
    dp_type = st.radio(
        "Down Payment Type",
        ["percent", "dollar"],
        index=0 if d.get("down_payment_type", "percent") == "percent" else 1,
        format_func=lambda x: "Percent" if x == "percent" else "Dollar",
        horizontal=True,
    )
    dp = st.number_input(
        "Down Payment", min_value=0.0, value=float(d.get("down_payment", 0.0))
    )
    update_inputs(home_price=price, down_payment_type=dp_type, down_payment=dp)

    auto = st.checkbox(
        "Estimate taxes and insurance from state averages",
        value=bool(st.session_state.get("auto_costs", True)),
    )
    st.session_state["auto_costs"] = auto
    if auto:
        apply_state_defaults()
        tables = default_rate_tables()
        state = d.get("state", "TX")
        st.caption(
            f"Property Taxes: {format_currency(d['property_taxes_monthly'])}/mo "
            f"({format_percent(tables.property_tax_rate(state))} of price in {state})"
        )
        st.caption(f"Home Insurance: {format_currency(d['home_insurance_monthly'])}/mo")
    else:
        taxes = st.number_input(
            "Property Taxes (monthly)", min_value=0.0, value=float(d.get("property_taxes_monthly", 0.0))
        )
        hoi = st.number_input(
            "Home Insurance (monthly)", min_value=0.0, value=float(d.get("home_insurance_monthly", 0.0))
        )
        update_inputs(property_taxes_monthly=taxes, home_insurance_monthly=hoi)

    hoa = st.number_input("HOA (monthly)", min_value=0.0, value=float(d.get("hoa_monthly", 0.0)))
    income = st.number_input(
        "Gross Monthly Income", min_value=0.0, value=float(d.get("gross_monthly_income", 0.0))
    )
    debts = st.number_input(
        "Monthly Debts",
        min_value=0.0,
        value=float(d.get("monthly_debts", 0.0)),
        help="Car, student loan, credit card and other minimum payments. Exclude rent.",
    )
    score = st.slider("Credit Score", 300, 850, int(d.get("credit_score", 720)))
    rate = st.number_input("Interest Rate %", min_value=0.0, value=float(d.get("interest_rate_pct", 6.5)), step=0.125)
    terms = [30, 15]
    term = st.selectbox("Loan Term (years)", terms, index=terms.index(d["term_years"]) if d.get("term_years") in terms else 0)
    finance_fee = st.checkbox(
        "Finance the VA funding fee", value=bool(d.get("finance_funding_fee", True))
    )
    update_inputs(
        hoa_monthly=hoa,
        gross_monthly_income=income,
        monthly_debts=debts,
        credit_score=int(score),
        interest_rate_pct=rate,
        term_years=int(term),
        finance_funding_fee=finance_fee,
    )

    st.caption(f"Down payment: {format_currency(down_payment_amount(current_inputs()))}")
