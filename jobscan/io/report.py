# file: jobscan/io/report.py
"""
Report generation and export helpers.

Reports are plain dictionaries (JSON-serializable) so the CLI, the HTTP adapter
and any saved-reports store can share one shape. The caller assigns the report
id and timestamp.

PDF generation is optional and requires extra dependencies.
"""

from __future__ import annotations

import csv
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

from jobscan import __version__
from jobscan.core.rules import RULESET_VERSION
from jobscan.core.score import AnalysisInput, AnalysisResult
from jobscan.lookup.adapter import DomainAge

DISCLAIMER = (
    "This score is a heuristic based on common job-scam patterns. A low score does not "
    "prove a posting is genuine and a high score does not prove it is a scam."
)


def utc_now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def new_report_id() -> str:
    return uuid.uuid4().hex


def build_report(
    data: AnalysisInput,
    result: AnalysisResult,
    *,
    explanation: str,
    report_id: str,
    generated_at: str,
    source: str = "text",
    domain_age: DomainAge | None = None,
    screenshot: str | None = None,
) -> dict[str, Any]:
    """Assemble a saved-report dictionary for one analysis."""

    return {
        "id": report_id,
        "metadata": {
            "tool": "jobscan",
            "version": __version__,
            "ruleset": RULESET_VERSION,
            "generated_at": generated_at,
        },
        "input": {
            "source": source,
            "url": data.url,
            "domain_age_days": data.domain_age_days,
            "prior_risk": data.prior_risk,
            "text": data.text,
            "screenshot": screenshot,
        },
        "domain_age": domain_age.to_dict() if domain_age is not None else None,
        "result": result.to_dict(),
        "summary": {
            "explanation": explanation,
            "disclaimer": DISCLAIMER,
        },
    }


def export_json(report: Mapping[str, Any], path: Path) -> None:
    """Write a report to disk as pretty-printed JSON."""

    path.write_text(json.dumps(report, indent=2, sort_keys=True), encoding="utf-8")


def _safe_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float, bool)):
        return str(value)
    return json.dumps(value, ensure_ascii=True)


_FIELDNAMES = ["row_index", "row_type", "section", "key", "value", "category", "weight"]


def _row(row_type: str, section: str, key: str, value: Any, **extra: str) -> dict[str, str]:
    row = {name: "" for name in _FIELDNAMES}
    row.update(row_type=row_type, section=section, key=key, value=_safe_str(value), **extra)
    return row


def _iter_kv_rows(section: str, data: Any, *, skip: Iterable[str] = ()) -> list[dict[str, str]]:
    if not isinstance(data, dict):
        return []
    skipped = set(skip)
    return [
        _row("kv", section, _safe_str(key), data.get(key))
        for key in sorted(data.keys())
        if key not in skipped
    ]


def export_csv(report: Mapping[str, Any], path: Path) -> None:
    """
    Export a report as a flat CSV.

    Contains key/value rows per section, one row per flag, and one row per
    score breakdown entry. The posting text itself is left out.
    """

    rows: list[dict[str, str]] = [_row("kv", "report", "id", report.get("id"))]
    rows.extend(_iter_kv_rows("metadata", report.get("metadata")))
    rows.extend(_iter_kv_rows("input", report.get("input"), skip=("text",)))
    rows.extend(_iter_kv_rows("domain_age", report.get("domain_age")))

    result = report.get("result")
    if isinstance(result, dict):
        for key in ("score", "verdict", "raw_score"):
            rows.append(_row("kv", "result", key, result.get(key)))
        flags = result.get("flags")
        if isinstance(flags, list):
            for flag in flags:
                rows.append(_row("flag", "result", "flag", flag))
        breakdown = result.get("breakdown")
        if isinstance(breakdown, list):
            for item in breakdown:
                if not isinstance(item, dict):
                    continue
                rows.append(
                    _row(
                        "breakdown",
                        "result",
                        _safe_str(item.get("rule_id")),
                        item.get("label"),
                        category=_safe_str(item.get("category")),
                        weight=_safe_str(item.get("weight")),
                    )
                )

    summary = report.get("summary")
    if isinstance(summary, dict):
        rows.extend(_iter_kv_rows("summary", summary))
    else:
        rows.append(_row("kv", "summary", "disclaimer", DISCLAIMER))

    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=_FIELDNAMES)
        writer.writeheader()
        for idx, row in enumerate(rows, start=1):
            row["row_index"] = str(idx)
            writer.writerow(row)


def generate_pdf(report: Mapping[str, Any], path: Path) -> None:
    """
    Generate a simple PDF report.

    Requires:
        `reportlab` (install with `pip install 'jobscan[pdf]'`)
    """

    try:
        from reportlab.lib.pagesizes import LETTER
        from reportlab.lib.units import inch
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfgen import canvas
    except ImportError as exc:  # pragma: no cover (optional dependency)
        raise RuntimeError(
            "PDF generation requires `reportlab`. Install with `pip install 'jobscan[pdf]'`."
        ) from exc

    c = canvas.Canvas(str(path), pagesize=LETTER)
    width, height = LETTER
    x = 0.75 * inch
    y = height - 0.75 * inch
    max_width = width - (1.5 * inch)

    def _draw_lines(lines: list[str], *, font: str, size: int, leading: float) -> None:
        nonlocal y
        c.setFont(font, size)
        for txt in lines:
            if y < 0.75 * inch:
                c.showPage()
                y = height - 0.75 * inch
                c.setFont(font, size)
            c.drawString(x, y, txt)
            y -= leading

    def _wrap_text(text: str, *, font: str, size: int) -> list[str]:
        words = text.split()
        if not words:
            return [""]
        lines: list[str] = []
        current = words[0]
        for word in words[1:]:
            candidate = f"{current} {word}"
            if pdfmetrics.stringWidth(candidate, font, size) <= max_width:
                current = candidate
            else:
                lines.append(current)
                current = word
        lines.append(current)
        return lines

    def heading(text: str) -> None:
        _draw_lines(["", text], font="Helvetica-Bold", size=12, leading=16)

    def paragraph(text: str) -> None:
        _draw_lines(_wrap_text(text, font="Helvetica", size=10), font="Helvetica", size=10, leading=13)

    heading("jobscan report")
    paragraph(f"Report id: {_safe_str(report.get('id'))}")
    meta = report.get("metadata", {})
    if isinstance(meta, dict):
        paragraph(f"Generated at: {_safe_str(meta.get('generated_at'))}")
        paragraph(f"Version: {_safe_str(meta.get('version'))} (rules {_safe_str(meta.get('ruleset'))})")

    result = report.get("result", {})
    if isinstance(result, dict):
        heading("Risk score")
        paragraph(f"Score: {_safe_str(result.get('score'))}/100 ({_safe_str(result.get('verdict'))})")
        flags = result.get("flags") or []
        heading("Flags")
        if isinstance(flags, list) and flags:
            for flag in flags:
                paragraph(f"- {_safe_str(flag)}")
        else:
            paragraph("No flags.")

    summary = report.get("summary", {})
    if isinstance(summary, dict):
        heading("Explanation")
        paragraph(_safe_str(summary.get("explanation")))

    data = report.get("input", {})
    if isinstance(data, dict):
        heading("Input")
        for key in ("source", "url", "domain_age_days", "prior_risk"):
            paragraph(f"{key}: {_safe_str(data.get(key))}")
        if data.get("text"):
            paragraph("")
            paragraph(_safe_str(data.get("text")))

    heading("Disclaimer")
    paragraph(DISCLAIMER)

    c.save()
