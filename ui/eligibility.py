import streamlit as st

from core.state import init_state, update_inputs
from vacompare.rate_tables import default_rate_tables

SERVICE_LABELS = {
    "veteran": "Veteran",
    "active-duty": "Active Duty",
    "national-guard": "National Guard",
    "reserve": "Reserve",
    "surviving-spouse": "Surviving Spouse",
}
COE_LABELS = {"yes": "Yes, I have it", "no": "No", "not-sure": "Not sure"}


def _index(options, value):
    return options.index(value) if value in options else 0


def render_eligibility_step():
    """Step 1: service and household details."""
    init_state()
    d = st.session_state["inputs"]
    st.header("Step 1: Eligibility")

    statuses = list(SERVICE_LABELS)
    status = st.radio(
        "Service Status",
        statuses,
        index=_index(statuses, d.get("service_status")),
        format_func=SERVICE_LABELS.get,
    )
    use = st.radio(
        "Have you used your VA loan benefit before?",
        ["First time", "Used before"],
        index=1 if d.get("prior_va_usage") else 0,
        help="Subsequent use carries a higher funding fee when putting less than 5% down.",
    )
    states = sorted(default_rate_tables().property_tax.rates)
    state = st.selectbox("State", states, index=_index(states, d.get("state", "TX")))
    family = st.number_input(
        "Family Size", min_value=1, value=max(int(d.get("family_size", 2)), 1), step=1
    )
    coes = list(COE_LABELS)
    coe = st.radio(
        "Do you have your Certificate of Eligibility (COE)?",
        coes,
        index=_index(coes, d.get("coe_status")),
        format_func=COE_LABELS.get,
    )
    disabled = st.checkbox(
        "I receive VA disability compensation",
        value=bool(d.get("is_disabled_veteran", False)),
        help="Veterans receiving disability compensation are exempt from the funding fee.",
    )
    update_inputs(
        service_status=status,
        prior_va_usage=use == "Used before",
        state=state,
        family_size=int(family),
        coe_status=coe,
        is_disabled_veteran=disabled,
    )
    st.caption(f"Residual income region: {default_rate_tables().region_for_state(state)}")
