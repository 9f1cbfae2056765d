import streamlit as st

from core.audit import build_comparison_audit
from core.checklist import build_next_steps
from core.rules import evaluate_rules
from core.state import current_inputs, init_state
from core.utils import format_currency, format_percent
from export.pdf_export import build_comparison_pdf
from ui.components import payment_delta, render_notes, savings_phrase
from ui.explainers import render_explainers
from vacompare.calculators import (
    calculate_all_loans,
    calculate_max_price,
    comparison_frame,
    savings_summary,
)
from vacompare.presets import VA_DTI_GUIDELINE
from vacompare.rate_tables import default_rate_tables

PROGRAMS = ("va", "conventional", "fha")


def render_results_step():
    """Step 3: VA buying power and the side-by-side comparison."""
    init_state()
    inputs = current_inputs()
    result = calculate_all_loans(inputs)
    va = result.va
    conv = result.conventional
    fha = result.fha

    # Deltas compare against the snapshot from the previous rerun
    previous = st.session_state.get("result_snapshot") or {}
    st.session_state["result_snapshot"] = {
        p: getattr(result, p).monthly_payment.total for p in PROGRAMS
    }

    st.header("Your VA Buying Power")
    cols = st.columns(3)
    cols[0].metric(
        "Estimated Monthly Payment",
        format_currency(va.monthly_payment.total),
        delta=payment_delta(va.monthly_payment.total, previous.get("va")),
        delta_color="inverse",
    )
    cols[1].metric("Debt-to-Income Ratio", format_percent(va.dti))
    cols[2].metric("Monthly PMI", format_currency(va.monthly_payment.pmi))
    if inputs.gross_monthly_income > 0:
        st.caption(
            "DTI within guidelines"
            if va.dti <= VA_DTI_GUIDELINE
            else "DTI above 41% - residual income matters"
        )
    st.caption(f"VA outlook: {va.eligibility.financially_qualified}")
    ri = va.residual_income
    st.caption(
        f"Residual income: {format_currency(ri.actual)} "
        f"({'passes' if ri.passes else 'needs improvement'}; "
        f"{format_currency(ri.required)} required in the {ri.region} region)"
    )
    fee = va.funding_fee
    if fee.exempt:
        st.caption("Funding fee: waived")
    else:
        st.caption(
            f"Funding fee: {format_currency(fee.amount)} ({format_percent(fee.rate)}, "
            f"{'financed' if fee.financed else 'paid at closing'})"
        )

    st.subheader("Side-by-Side Comparison")
    st.dataframe(comparison_frame(result).round(2))
    s = savings_summary(result, inputs.term_years)
    st.caption(
        f"{savings_phrase(s.monthly_vs_conventional, 'Conventional')}; "
        f"{savings_phrase(s.monthly_vs_fha, 'FHA')}"
    )
    term = f" over {inputs.term_years} years"
    st.caption(
        f"{savings_phrase(s.lifetime_vs_conventional, 'Conventional', term)}; "
        f"{savings_phrase(s.lifetime_vs_fha, 'FHA', term)}"
    )
    if conv.pmi.can_drop:
        st.caption(
            f"Conventional PMI {format_currency(conv.pmi.monthly_amount)}/mo drops around "
            f"year {round(conv.pmi.scheduled_drop_month / 12)}"
        )
    st.caption(f"FHA MIP {format_currency(fha.mip.monthly_amount)}/mo: {fha.mip.cancellation_rule}")

    notes = evaluate_rules(inputs, result)
    render_notes(notes)

    steps = build_next_steps(inputs.service_status, va.eligibility.needs_coe)
    with st.expander("Next Steps"):
        for item in steps:
            st.markdown(f"- {item}")

    with st.expander("How We Calculated This"):
        for program, log in build_comparison_audit(inputs, result).items():
            st.markdown(f"**{program} Loan**")
            st.table(log.as_dict())
        for name, version in default_rate_tables().versions().items():
            st.caption(f"{name}: {version}")

    render_explainers()

    st.subheader("What Can I Afford?")
    target = st.number_input(
        "Target Monthly Payment",
        min_value=0.0,
        value=float(round(va.monthly_payment.total)),
        step=50.0,
    )
    max_price = calculate_max_price(target, inputs)
    st.session_state["max_price"] = max_price
    st.caption(f"Max home price for target: {format_currency(max_price)}")

    if st.button("Build PDF Summary"):
        st.session_state["pdf_bytes"] = build_comparison_pdf(inputs, result, notes, steps)
    if st.session_state.get("pdf_bytes"):
        st.download_button(
            "Download PDF",
            data=st.session_state["pdf_bytes"],
            file_name="va_loan_comparison.pdf",
            mime="application/pdf",
        )
    return result
