"""Next-step document checklist helpers."""
from __future__ import annotations
from typing import List, Dict

# Proof of service VA asks for with a COE request, by service status
DOCS_BY_STATUS: Dict[str, List[str]] = {
    "veteran": ["DD Form 214"],
    "active-duty": ["Statement of service signed by your commander"],
    "national-guard": ["NGB Form 22", "Retirement points statement"],
    "reserve": ["Retirement points statement", "Proof of honorable service"],
    "surviving-spouse": [
        "Veteran's DD Form 214",
        "Marriage certificate",
        "Veteran's death certificate",
        "VA Form 26-1817",
    ],
}

COE_REQUEST = "Request a Certificate of Eligibility (VA Form 26-1880)"
INCOME_DOCS = ["Last two pay stubs", "Last two years of W-2s"]


def build_next_steps(service_status: str, needs_coe: bool) -> List[str]:
    """Return a de-duplicated list of documents to gather before applying."""
    docs: List[str] = []
    candidates = list(DOCS_BY_STATUS.get(service_status, []))
    if needs_coe:
        candidates.insert(0, COE_REQUEST)
    candidates.extend(INCOME_DOCS)
    for doc in candidates:
        if doc not in docs:
            docs.append(doc)
    return docs
