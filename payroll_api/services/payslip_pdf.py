"""
Payslip PDF rendering.

build_payslip_document() turns a stored payslip into a plain layout
description; render_payslip_pdf() draws that layout with ReportLab. Neither
touches the database: callers load and authorise the payslip first.
"""
from __future__ import annotations

import io
from functools import partial
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from payroll_api.common.money import CURRENCY_PREFIX, Amount, format_currency, period_label

DEFAULT_ORG_NAME = "HR Payroll"
NO_DEDUCTIONS_NOTE = "No deductions were applied for this period."
FOOTER_NOTE = ("This is a system-generated payslip and does not require a signature. "
               "Please contact HR for any discrepancies.")

EARNING_ROWS = (
    ("Basic", "basic"),
    ("HRA", "hra"),
    ("Other Allowances", "allowances"),
)

Row = Tuple[str, str]


@dataclass
class PayslipDocument:
    org_name: str
    period: str
    identity: List[Row] = field(default_factory=list)
    summary: List[Row] = field(default_factory=list)
    earnings: List[Row] = field(default_factory=list)
    deductions: List[Row] = field(default_factory=list)
    no_deductions_note: Optional[str] = None
    footer: str = FOOTER_NOTE


def payslip_filename(payslip) -> str:
    return f"payslip-{int(payslip.year)}-{int(payslip.month):02d}.pdf"


def build_payslip_document(payslip, user, org_name: Optional[str] = None,
                           currency_prefix: Optional[str] = None) -> PayslipDocument:
    """One currency prefix is used for every amount in the document."""
    money = partial(format_currency, prefix=currency_prefix or CURRENCY_PREFIX)
    period = period_label(payslip.month, payslip.year)
    doc = PayslipDocument(org_name=org_name or DEFAULT_ORG_NAME, period=period)

    doc.identity.append(("Name", payslip.full_name or user.full_name or "-"))
    for label, value in (
        ("Employee Code", payslip.employee_code),
        ("Department", payslip.department),
        ("Designation", payslip.designation),
    ):
        if value:
            doc.identity.append((label, value))
    doc.identity.append(("Email", user.email or "-"))
    doc.identity.append(("Pay Period", period))

    doc.summary = [
        ("CTC", money(payslip.ctc)),
        ("Gross", money(payslip.gross)),
        ("Net Pay", money(payslip.net_pay)),
    ]

    for label, attr in EARNING_ROWS:
        amt = Amount.of(getattr(payslip, attr, None))
        if amt.present:
            doc.earnings.append((label, money(amt)))

    deductions = Amount.of(payslip.deductions)
    if deductions.present:
        doc.deductions.append(("Total Deductions", money(deductions)))
    else:
        doc.no_deductions_note = NO_DEDUCTIONS_NOTE
    return doc


# ---------- drawing ----------
_BRAND = colors.HexColor("#1e3a8a")
_MUTED = colors.HexColor("#6b7280")
_BOX_BG = colors.HexColor("#f3f4f6")


def _styles():
    styles = getSampleStyleSheet()
    return {
        "org": ParagraphStyle("PayslipOrg", parent=styles["Heading1"], fontName="Helvetica-Bold",
                              fontSize=16, textColor=colors.white, spaceAfter=0),
        "band": ParagraphStyle("PayslipBand", parent=styles["Normal"], fontName="Helvetica",
                               fontSize=10, textColor=colors.white),
        "section": ParagraphStyle("PayslipSection", parent=styles["Heading3"], fontName="Helvetica-Bold",
                                  fontSize=11, spaceBefore=6, spaceAfter=4),
        "box_label": ParagraphStyle("PayslipBoxLabel", parent=styles["Normal"], fontSize=8,
                                    textColor=_MUTED, alignment=TA_CENTER),
        "box_value": ParagraphStyle("PayslipBoxValue", parent=styles["Normal"], fontName="Helvetica-Bold",
                                    fontSize=12, alignment=TA_CENTER),
        "note": ParagraphStyle("PayslipNote", parent=styles["Normal"], fontSize=9, textColor=_MUTED),
        "footer": ParagraphStyle("PayslipFooter", parent=styles["Normal"], fontSize=8,
                                 textColor=_MUTED, alignment=TA_CENTER),
    }


def _header(doc: PayslipDocument, st, width):
    band = Table(
        [[Paragraph(escape(doc.org_name), st["org"])],
         [Paragraph(f"Payslip for {escape(doc.period)}", st["band"])]],
        colWidths=[width],
    )
    band.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, -1), _BRAND),
        ("LEFTPADDING", (0, 0), (-1, -1), 10),
        ("TOPPADDING", (0, 0), (-1, 0), 10),
        ("BOTTOMPADDING", (0, -1), (-1, -1), 10),
    ]))
    return band


def _identity(doc: PayslipDocument, width):
    t = Table([[f"{label}:", value] for label, value in doc.identity],
              colWidths=[35 * mm, width - 35 * mm])
    t.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("FONTNAME", (1, 0), (1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]))
    return t


def _summary(doc: PayslipDocument, st, width):
    cells = [[Paragraph(escape(label), st["box_label"]), Paragraph(escape(value), st["box_value"])]
             for label, value in doc.summary]
    boxes = []
    for label_p, value_p in cells:
        box = Table([[label_p], [value_p]], colWidths=[width / 3 - 4 * mm])
        box.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, -1), _BOX_BG),
            ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]))
        boxes.append(box)
    row = Table([boxes], colWidths=[width / 3] * 3)
    row.setStyle(TableStyle([("ALIGN", (0, 0), (-1, -1), "CENTER")]))
    return row


def _amount_table(rows: List[Row], width, header: str):
    t = Table([[header, "Amount"]] + [list(r) for r in rows], colWidths=[width * 0.65, width * 0.35])
    t.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), _BOX_BG),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
    ]))
    return t


def render_document(doc: PayslipDocument) -> bytes:
    buf = io.BytesIO()
    pdf = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Payslip - {doc.period}",
        author=doc.org_name,
        invariant=1,
    )
    width = pdf.width
    st = _styles()

    story = [_header(doc, st, width), Spacer(1, 8 * mm),
             Paragraph("Employee Details", st["section"]), _identity(doc, width), Spacer(1, 6 * mm),
             _summary(doc, st, width), Spacer(1, 6 * mm),
             Paragraph("Earnings", st["section"])]
    if doc.earnings:
        story.append(_amount_table(doc.earnings, width, "Component"))
    else:
        story.append(Paragraph("No earning components recorded.", st["note"]))
    story += [Spacer(1, 4 * mm), Paragraph("Deductions", st["section"])]
    if doc.deductions:
        story.append(_amount_table(doc.deductions, width, "Component"))
    else:
        story.append(Paragraph(escape(doc.no_deductions_note or NO_DEDUCTIONS_NOTE), st["note"]))
    story += [Spacer(1, 12 * mm), Paragraph(escape(doc.footer), st["footer"])]

    pdf.build(story)
    return buf.getvalue()


def render_payslip_pdf(payslip, user, org_name: Optional[str] = None,
                       currency_prefix: Optional[str] = None) -> bytes:
    return render_document(build_payslip_document(payslip, user, org_name, currency_prefix))
