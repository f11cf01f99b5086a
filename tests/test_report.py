# file: tests/test_report.py
from __future__ import annotations

import csv
import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from jobscan.core import AnalysisInput, analyze, explain
from jobscan.io.report import DISCLAIMER, build_report, export_csv, export_json, generate_pdf
from jobscan.lookup.adapter import DomainAge

TEXT = "Pay via gift card and contact us on WhatsApp, training fee required"


def _report() -> dict:
    data = AnalysisInput(text=TEXT, url="http://job-offer123.xyz/apply", domain_age_days=12)
    result = analyze(data)
    return build_report(
        data,
        result,
        explanation=explain(result),
        report_id="r-1",
        generated_at="2026-01-01T00:00:00+00:00",
        source="text",
        domain_age=DomainAge(
            domain="job-offer123.xyz",
            created=datetime(2025, 12, 20, tzinfo=timezone.utc),
            age_days=12,
        ),
    )


def test_build_report_shape() -> None:
    report = _report()
    assert report["id"] == "r-1"
    assert report["metadata"]["tool"] == "jobscan"
    assert report["metadata"]["generated_at"] == "2026-01-01T00:00:00+00:00"
    assert report["input"]["text"] == TEXT
    assert report["domain_age"]["age_days"] == 12
    assert report["result"]["score"] == 100
    assert report["result"]["verdict"] == "High"
    assert "suspicious tld .xyz" in report["result"]["flags"]
    assert report["summary"]["disclaimer"] == DISCLAIMER
    json.dumps(report)


def test_export_json_roundtrip(tmp_path: Path) -> None:
    report = _report()
    out = tmp_path / "report.json"
    export_json(report, out)
    assert json.loads(out.read_text(encoding="utf-8")) == report


def test_export_csv_rows(tmp_path: Path) -> None:
    report = _report()
    out = tmp_path / "report.csv"
    export_csv(report, out)

    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))

    assert [r["row_index"] for r in rows] == [str(i) for i in range(1, len(rows) + 1)]
    flags = [r["value"] for r in rows if r["row_type"] == "flag"]
    assert flags == report["result"]["flags"]

    breakdown = {r["key"]: r for r in rows if r["row_type"] == "breakdown"}
    assert breakdown["gift_card"]["weight"] == "35"
    assert breakdown["gift_card"]["category"] == "payment"
    assert breakdown["tld_xyz"]["value"] == "suspicious tld .xyz"

    input_keys = {r["key"] for r in rows if r["section"] == "input"}
    assert "text" not in input_keys
    assert "url" in input_keys

    score = next(r for r in rows if r["section"] == "result" and r["key"] == "score")
    assert score["value"] == "100"


def test_generate_pdf(tmp_path: Path) -> None:
    pytest.importorskip("reportlab")
    out = tmp_path / "report.pdf"
    generate_pdf(_report(), out)
    assert out.read_bytes().startswith(b"%PDF")
