"""
PDF version of the internal report, attached to the admin email.

Uses fpdf2 (pure Python, no system dependencies). Takes the same context
dict the HTML/text templates render from.
"""
from __future__ import annotations

from fpdf import FPDF

# Brand colors
NAVY = (26, 35, 126)
DARK = (31, 41, 55)
GRAY = (107, 114, 128)
LIGHT_GRAY = (243, 244, 246)
WHITE = (255, 255, 255)

BAND_COLORS = {
    "Strong": (22, 163, 74),
    "Stable": (37, 99, 235),
    "Develop": (245, 158, 11),
    "Risk": (220, 38, 38),
}

# Core PDF fonts only cover latin-1
_REPLACEMENTS = {
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "…": "...",
    "·": "|",
    "•": "-",
}


def pdf_safe(text) -> str:
    text = str(text)
    for char, replacement in _REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


class LeadershipReport(FPDF):
    """Full internal assessment report."""

    def __init__(self, brand_name: str):
        super().__init__(format="A4")
        self.brand_name = pdf_safe(brand_name)
        self.set_auto_page_break(auto=True, margin=20)
        self.set_title(f"{self.brand_name} Report")
        self.set_author(self.brand_name)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "", 8)
        self.set_text_color(*GRAY)
        self.cell(
            0, 5,
            f"Page {self.page_no()} of {{nb}}  |  {self.brand_name}  |  Confidential",
            align="C",
        )

    def cover(self, org: str, email: str, submitted_label: str):
        self.add_page()
        self.set_fill_color(*NAVY)
        self.rect(0, 0, 210, 40, "F")
        self.set_xy(15, 12)
        self.set_font("Helvetica", "B", 22)
        self.set_text_color(*WHITE)
        self.cell(0, 10, self.brand_name, new_x="LMARGIN", new_y="NEXT")
        self.set_x(15)
        self.set_font("Helvetica", "", 12)
        self.cell(0, 8, "Full Assessment Report", new_x="LMARGIN", new_y="NEXT")

        self.set_y(50)
        self.set_text_color(*DARK)
        self.set_font("Helvetica", "", 11)
        for label, value in (("Organization", org), ("Submitted by", email), ("Date", submitted_label)):
            self.set_font("Helvetica", "B", 11)
            self.cell(40, 7, f"{label}:")
            self.set_font("Helvetica", "", 11)
            self.multi_cell(0, 7, pdf_safe(value), new_x="LMARGIN", new_y="NEXT")
        self.ln(4)

    def section_title(self, title: str):
        self.ln(4)
        self.set_font("Helvetica", "B", 14)
        self.set_text_color(*NAVY)
        self.cell(0, 9, title, new_x="LMARGIN", new_y="NEXT")
        self.set_draw_color(*NAVY)
        self.set_line_width(0.5)
        self.line(10, self.get_y(), 200, self.get_y())
        self.ln(3)
        self.set_text_color(*DARK)
        self.set_font("Helvetica", "", 10)

    def overall(self, score: str, band_label: str):
        self.set_font("Helvetica", "B", 28)
        self.set_text_color(*DARK)
        self.cell(45, 14, score)
        self.set_font("Helvetica", "B", 14)
        self.set_text_color(*BAND_COLORS.get(band_label, GRAY))
        self.cell(0, 14, band_label, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(*DARK)

    def score_table(self, rows: list[dict]):
        self.set_font("Helvetica", "B", 10)
        self.set_fill_color(*LIGHT_GRAY)
        self.cell(120, 8, "Dimension", border="B", fill=True)
        self.cell(30, 8, "Score", border="B", fill=True, align="R")
        self.cell(0, 8, "Band", border="B", fill=True, new_x="LMARGIN", new_y="NEXT")
        for row in rows:
            label = row["band"].value
            self.set_font("Helvetica", "", 10)
            self.set_text_color(*DARK)
            self.cell(120, 7, pdf_safe(row["title"]))
            self.cell(30, 7, f"{row['score']:.2f}", align="R")
            self.set_font("Helvetica", "B", 10)
            self.set_text_color(*BAND_COLORS.get(label, GRAY))
            self.cell(0, 7, f"  {label}", new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(*DARK)

    def ranked_list(self, title: str, items: list[dict]):
        self.set_font("Helvetica", "B", 11)
        self.cell(0, 7, title, new_x="LMARGIN", new_y="NEXT")
        self.set_font("Helvetica", "", 10)
        for position, item in enumerate(items, start=1):
            self.cell(0, 6, f"{position}. {pdf_safe(item['title'])} ({item['score']:.2f})",
                      new_x="LMARGIN", new_y="NEXT")
        self.ln(2)

    def answer(self, label: str, text: str):
        self.set_font("Helvetica", "B", 10)
        self.set_text_color(*NAVY)
        self.multi_cell(0, 5.5, pdf_safe(label), new_x="LMARGIN", new_y="NEXT")
        self.set_font("Helvetica", "", 10)
        self.set_text_color(*DARK)
        self.multi_cell(0, 5.5, pdf_safe(text), new_x="LMARGIN", new_y="NEXT")
        self.ln(3)

    def rating_rows(self, entries: list[dict]):
        self.set_font("Helvetica", "", 8)
        for entry in entries:
            self.cell(30, 5, pdf_safe(entry["field"]))
            self.cell(130, 5, pdf_safe(_truncate(entry["text"], 90)))
            self.cell(0, 5, pdf_safe(entry["value"]), new_x="LMARGIN", new_y="NEXT")


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 3] + "..."


def render_internal_pdf(context: dict) -> bytes:
    results = context["results"]
    pdf = LeadershipReport(context["brand_name"])
    pdf.cover(context["org"], context["email"], context["submitted_label"])

    pdf.section_title("Overall Assessment")
    pdf.overall(f"{results.overall:.2f}", context["overall_band"].value)

    pdf.section_title("Dimension Scores")
    pdf.score_table(context["rows"])

    pdf.section_title("Strengths & Opportunities")
    pdf.ranked_list("Top strengths", context["top"])
    pdf.ranked_list("Lowest scores", context["low"])

    pdf.section_title("Qualitative Responses")
    if context["qualitative"]:
        for entry in context["qualitative"]:
            pdf.answer(entry["label"], entry["text"])
    else:
        pdf.cell(0, 6, "No qualitative responses were provided.", new_x="LMARGIN", new_y="NEXT")

    pdf.add_page()
    pdf.section_title("Detailed Rating Data")
    pdf.rating_rows(context["ratings"])

    return bytes(pdf.output())
