import streamlit as st

from core.utils import format_percent
from vacompare.presets import LIVING_EXPENSE_SHARE, RESIDUAL_ENHANCEMENT, VA_DTI_GUIDELINE
from vacompare.rate_tables import FUNDING_FEE_TIERS, default_rate_tables

QUALIFICATION_STEPS = [
    ("Confirm eligibility", "Verify your military service qualifies you for VA benefits."),
    ("Get your Certificate of Eligibility (COE)", "Obtain proof of your VA loan entitlement."),
    ("Find a VA-approved lender", "Choose a lender experienced with VA loans."),
    ("Get pre-approved", "The lender reviews your finances and issues a pre-approval."),
    ("Shop for a home", "Search for homes within your budget."),
    ("VA appraisal", "The VA confirms the home meets minimum property requirements."),
    ("Close", "Finalize the loan and get your keys."),
]


def funding_fee_rows(tables=None):
    """Funding fee schedule as display rows, one per down payment band."""
    tables = tables or default_rate_tables()
    schedule = tables.funding_fee.purchase
    return [
        {
            "Down payment": band,
            "First use": format_percent(schedule.first_use.get(band, 0.0)),
            "Subsequent use": format_percent(schedule.subsequent.get(band, 0.0)),
        }
        for _, band in reversed(FUNDING_FEE_TIERS)
    ]


def render_explainers():
    """Background on the funding fee, DTI versus residual income and the approval process."""
    with st.expander("VA Funding Fee"):
        st.markdown(
            "A one-time fee that replaces monthly mortgage insurance. It can be financed "
            "into the loan and is waived for veterans receiving disability compensation."
        )
        st.table(funding_fee_rows())

    with st.expander("DTI vs Residual Income"):
        st.markdown(
            f"VA's DTI guideline is {format_percent(VA_DTI_GUIDELINE)}: "
            "(monthly debts + housing payment) / gross income."
        )
        st.markdown(
            "Residual income is what is left each month after debts, the housing payment "
            f"and living expenses (estimated at {LIVING_EXPENSE_SHARE:.0%} of gross income). "
            f"Above the DTI guideline the required residual income rises by "
            f"{RESIDUAL_ENHANCEMENT - 1:.0%}."
        )

    with st.expander("VA Qualification Process"):
        for i, (title, detail) in enumerate(QUALIFICATION_STEPS, start=1):
            st.markdown(f"{i}. **{title}**: {detail}")
