"""PDF export of a loan comparison."""
from __future__ import annotations

import io
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.rules import RuleResult
from core.utils import format_currency, format_percent
from vacompare.calculators import comparison_frame, savings_summary
from vacompare.models import ComparisonResult, LoanInputs
from vacompare.presets import DISCLAIMER

GRID = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _table(rows, col_widths=None) -> Table:
    t = Table(rows, hAlign="LEFT", colWidths=col_widths)
    t.setStyle(GRID)
    return t


def build_comparison_pdf(
    inputs: LoanInputs,
    result: ComparisonResult,
    notes: Optional[List[RuleResult]] = None,
    checklist: Optional[List[str]] = None,
    title: str = "VA Home Loan Comparison",
) -> bytes:
    """Render the comparison, qualification notes and next steps to PDF bytes."""
    buf = io.BytesIO()
    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(buf, pagesize=LETTER, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = [Paragraph(f"<b>{title}</b>", styles["Title"]), Spacer(1, 6)]

    va = result.va
    snapshot = [
        ["Deal Snapshot", ""],
        ["Home price", format_currency(inputs.home_price)],
        ["Interest rate / term", f"{inputs.interest_rate_pct:g}% / {inputs.term_years} years"],
        ["Gross monthly income", format_currency(inputs.gross_monthly_income)],
        ["VA loan amount", format_currency(va.loan_amount)],
        ["VA DTI", format_percent(va.dti)],
        ["Residual income", f"{format_currency(va.residual_income.actual)} of {format_currency(va.residual_income.required)} required"],
        ["VA outlook", va.eligibility.financially_qualified],
    ]
    story += [_table(snapshot, col_widths=[200, 320]), Spacer(1, 12)]

    frame = comparison_frame(result)
    rows = [["Monthly", "VA", "Conventional", "FHA"]]
    for label, r in frame.iterrows():
        rows.append([label, format_currency(r["VA"]), format_currency(r["Conventional"]), format_currency(r["FHA"])])
    story += [Paragraph("<b>Monthly Payment Comparison</b>", styles["Heading3"]), Spacer(1, 6), _table(rows), Spacer(1, 12)]

    s = savings_summary(result, inputs.term_years)
    savings = [
        ["VA Savings", "Monthly", "Over term"],
        ["vs Conventional", format_currency(s.monthly_vs_conventional), format_currency(s.lifetime_vs_conventional)],
        ["vs FHA", format_currency(s.monthly_vs_fha), format_currency(s.lifetime_vs_fha)],
    ]
    story += [_table(savings), Spacer(1, 12)]

    if notes:
        n_rows = [["Code", "Severity", "Message"]] + [[n.code, n.severity, Paragraph(n.message, styles["Normal"])] for n in notes]
        story += [Paragraph("<b>Qualification Notes</b>", styles["Heading3"]), Spacer(1, 6), _table(n_rows, col_widths=[150, 60, 310]), Spacer(1, 12)]
    if checklist:
        c_rows = [["Next Steps"]] + [[item] for item in checklist]
        story += [_table(c_rows, col_widths=[520]), Spacer(1, 12)]

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles["Normal"])]
    doc.build(story)
    return buf.getvalue()
