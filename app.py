import logging

import streamlit as st

from core.state import init_state
from core.version import __version__
from ui.affordability import render_affordability_step
from ui.eligibility import render_eligibility_step
from ui.results import render_results_step
from vacompare.presets import DISCLAIMER

STEPS = ["Eligibility", "Affordability", "Results"]
RENDERERS = {
    "Eligibility": render_eligibility_step,
    "Affordability": render_affordability_step,
    "Results": render_results_step,
}


def step_complete(name: str) -> bool:
    d = st.session_state.get("inputs", {})
    if name == "Eligibility":
        return bool(d.get("service_status") and d.get("state") and d.get("family_size", 0) > 0)
    if name == "Affordability":
        return d.get("home_price", 0) > 0 and d.get("gross_monthly_income", 0) > 0
    return False


def render_step_buttons(current: str) -> None:
    idx = STEPS.index(current)
    prev_col, next_col = st.columns(2)
    if idx > 0 and prev_col.button("Back"):
        st.session_state["step"] = idx
        st.rerun()
    if idx < len(STEPS) - 1 and next_col.button("Continue", disabled=not step_complete(current)):
        st.session_state["step"] = idx + 2
        st.rerun()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    st.set_page_config(page_title="VA Loan Comparison Calculator", layout="wide")
    init_state()

    st.title("VA LOAN COMPARISON CALCULATOR")
    st.caption(f"v{__version__} • VA vs Conventional vs FHA • Estimates only")

    nav = st.sidebar.radio(
        "Navigate",
        STEPS,
        index=st.session_state["step"] - 1,
        format_func=lambda x: ("✅ " if step_complete(x) else "") + x,
    )
    st.session_state["step"] = STEPS.index(nav) + 1
    st.progress(st.session_state["step"] / len(STEPS))

    RENDERERS[nav]()
    render_step_buttons(nav)
    st.caption(DISCLAIMER)


if __name__ == "__main__":
    main()
