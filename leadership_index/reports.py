"""
Report rendering for the Leadership Team Index.

Turns a ScoreResult plus the respondent's answers into the respondent
summary (HTML and text) and the internal report (HTML, text and PDF).
Everything here is pure formatting; nothing is sent or stored.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from leadership_index.dimensions import DIMENSIONS, dimension_title, item_labels, prompt_labels
from leadership_index.pdf_report import render_internal_pdf
from leadership_index.scoring import BAND_LEGEND, ScoreResult, band, parse_rating

TEMPLATES_DIR = Path(__file__).parent / "templates"

env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def format_score(value: float) -> str:
    return f"{value:.2f}"


env.filters["score"] = format_score


@dataclass(frozen=True)
class ReportBundle:
    summary_html: str
    summary_text: str
    internal_html: str
    internal_text: str
    pdf: bytes | None = None
    pdf_filename: str | None = None


# =========================
# Context Builders
# =========================


def dimension_rows(results: ScoreResult) -> list[dict]:
    rows = []
    for dimension in DIMENSIONS:
        value = results.dim_scores.get(dimension.key, 0.0)
        rows.append(
            {
                "key": dimension.key,
                "title": dimension.title,
                "score": value,
                "band": band(value),
            }
        )
    return rows


def ranked_rows(pairs: list[tuple[str, float]]) -> list[dict]:
    return [{"key": key, "title": dimension_title(key), "score": value} for key, value in pairs]


def qualitative_entries(answers: Mapping[str, Any] | None) -> list[dict]:
    """
    Non-blank answers paired with their question text.

    Known prompts come first in form order, then anything else the client
    sent, in the order it was sent.
    """
    answers = answers or {}
    labels = prompt_labels()
    entries = []

    def add(prompt_id, label):
        value = answers.get(prompt_id)
        if value is None:
            return
        text = str(value).strip()
        if text:
            entries.append({"id": prompt_id, "label": label, "text": text})

    for prompt_id, label in labels.items():
        add(prompt_id, label)
    for prompt_id in answers:
        if prompt_id not in labels:
            add(prompt_id, str(prompt_id))
    return entries


def rating_entries(ratings: Mapping[str, Any] | None) -> list[dict]:
    """Every catalog item with its raw answer, plus any unrecognised fields."""
    ratings = ratings if isinstance(ratings, Mapping) else {}
    entries = []
    items = item_labels()
    for field, (dimension, number, text) in items.items():
        raw = ratings.get(field)
        entries.append(
            {
                "field": field,
                "dimension": dimension.title,
                "number": number,
                "text": text,
                "value": display_rating(raw),
                "answered": parse_rating(raw) is not None,
            }
        )
    for field, raw in ratings.items():
        if field not in items:
            entries.append(
                {
                    "field": str(field),
                    "dimension": "Unrecognised field",
                    "number": None,
                    "text": str(field),
                    "value": display_rating(raw),
                    "answered": False,
                }
            )
    return entries


def display_rating(raw: Any) -> str:
    value = parse_rating(raw)
    if value is None:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return "not answered"
        return f"invalid ({raw})"
    return f"{value:g}"


def build_context(
    org: str,
    email: str,
    results: ScoreResult,
    ratings: Mapping[str, Any] | None = None,
    qualitative: Mapping[str, Any] | None = None,
    brand_name: str = "Augment Leadership Survey",
    submitted_at: datetime | None = None,
) -> dict:
    submitted_at = submitted_at or datetime.now(timezone.utc)
    return {
        "brand_name": brand_name,
        "org": org,
        "email": email,
        "results": results,
        "overall_band": results.band,
        "rows": dimension_rows(results),
        "top": ranked_rows(results.top),
        "low": ranked_rows(results.low),
        "qualitative": qualitative_entries(qualitative),
        "ratings": rating_entries(ratings),
        "band_legend": BAND_LEGEND,
        "submitted_at": submitted_at,
        "submitted_label": submitted_at.strftime("%Y-%m-%d %H:%M UTC"),
    }


# =========================
# Renderers
# =========================


def render_summary_html(context: dict) -> str:
    return env.get_template("email/summary.html").render(**context)


def render_summary_text(context: dict) -> str:
    return env.get_template("email/summary.txt").render(**context)


def render_internal_html(context: dict) -> str:
    return env.get_template("email/internal_report.html").render(**context)


def render_internal_text(context: dict) -> str:
    return env.get_template("email/internal_report.txt").render(**context)


def report_filename(org: str, submitted_at: datetime) -> str:
    safe_org = re.sub(r"[^a-z0-9]+", "_", org.lower()).strip("_") or "organization"
    return f"leadership-report-{safe_org}-{submitted_at:%Y-%m-%d}.pdf"


def build_reports(
    org: str,
    email: str,
    results: ScoreResult,
    ratings: Mapping[str, Any] | None = None,
    qualitative: Mapping[str, Any] | None = None,
    brand_name: str = "Augment Leadership Survey",
    include_pdf: bool = True,
    submitted_at: datetime | None = None,
) -> ReportBundle:
    context = build_context(org, email, results, ratings, qualitative, brand_name, submitted_at)

    pdf = None
    pdf_filename = None
    if include_pdf:
        pdf = render_internal_pdf(context)
        pdf_filename = report_filename(org, context["submitted_at"])

    return ReportBundle(
        summary_html=render_summary_html(context),
        summary_text=render_summary_text(context),
        internal_html=render_internal_html(context),
        internal_text=render_internal_text(context),
        pdf=pdf,
        pdf_filename=pdf_filename,
    )
