from typing import Any, Dict

import streamlit as st

from vacompare.calculators import state_defaults
from vacompare.models import LoanInputs

# The wizard keeps a single ``inputs`` dict in ``st.session_state``.  Streamlit
# widgets inject their own keys into ``session_state`` as well, so the engine
# only ever sees the fields below, copied into an immutable ``LoanInputs``.
INPUT_KEYS = tuple(LoanInputs.model_fields)


def default_inputs() -> Dict[str, Any]:
    return LoanInputs().model_dump()


def init_state() -> None:
    """Seed the wizard's session keys on first run."""
    st.session_state.setdefault("step", 1)
    st.session_state.setdefault("inputs", default_inputs())
    st.session_state.setdefault("auto_costs", True)


def update_inputs(**updates: Any) -> None:
    data = st.session_state.setdefault("inputs", default_inputs())
    for key, val in updates.items():
        if key in INPUT_KEYS:
            data[key] = val


def apply_state_defaults() -> None:
    """Refresh tax and insurance from the state tables when auto costs are on."""
    if not st.session_state.get("auto_costs", True):
        return
    data = st.session_state["inputs"]
    d = state_defaults(data.get("state", "TX"), data.get("home_price", 0.0))
    data["property_taxes_monthly"] = d.property_tax_monthly
    data["home_insurance_monthly"] = d.home_insurance_monthly


def current_inputs() -> LoanInputs:
    """Snapshot the session inputs as an immutable ``LoanInputs``."""
    data = st.session_state.get("inputs", default_inputs())
    return LoanInputs(**{k: v for k, v in data.items() if k in INPUT_KEYS})
