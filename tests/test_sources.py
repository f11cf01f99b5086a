# file: tests/test_sources.py
from __future__ import annotations

import httpx
import pytest

from jobscan.core import AnalysisInput, analyze
from jobscan.net.http import HttpClientConfig, build_async_client
from jobscan.sources import fetch_page_text, html_to_text, ocr_result_from_raw
from jobscan.sources.ocr import OcrResult

PAGE = """
<html>
  <head>
    <title>Remote Assistant</title>
    <style>body { color: red; }</style>
    <script>var track = "gift card";</script>
  </head>
  <body>
    <!-- hidden note -->
    <h1>Remote&nbsp;Assistant</h1>
    <p>Contact us on <b>WhatsApp</b> &amp; start today.</p>
    <ul><li>No experience needed</li></ul>
  </body>
</html>
"""


def test_html_to_text_strips_markup() -> None:
    text = html_to_text(PAGE)
    assert "gift card" not in text
    assert "color" not in text
    assert "hidden note" not in text
    assert "<" not in text
    assert "Contact us on WhatsApp & start today." in text
    assert "No experience needed" in text
    assert "  " not in text


def test_html_to_text_keeps_text_after_stray_angle_bracket() -> None:
    text = html_to_text("<p>Teams of 5<10 people. Get paid via Zelle</p><p>Apply now</p>")
    assert "Get paid via Zelle" in text
    assert text.endswith("Apply now")
    assert "peer-to-peer payment app" in analyze(AnalysisInput(text=text)).flags


def test_html_to_text_empty() -> None:
    assert html_to_text("") == ""


async def test_fetch_page_text_returns_visible_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["User-Agent"].startswith("jobscan/")
        return httpx.Response(200, text=PAGE, headers={"Content-Type": "text/html"})

    config = HttpClientConfig(max_retries=0, rate_limit_per_host_per_second=0)
    async with build_async_client(config, transport=httpx.MockTransport(handler)) as client:
        text = await fetch_page_text(client, "https://jobs.example.com/1", config=config)
    assert "WhatsApp" in text


async def test_fetch_page_text_propagates_http_errors() -> None:
    config = HttpClientConfig(max_retries=0, rate_limit_per_host_per_second=0)
    transport = httpx.MockTransport(lambda request: httpx.Response(403))
    async with build_async_client(config, transport=transport) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await fetch_page_text(client, "https://jobs.example.com/1", config=config)


async def test_fetch_page_text_retries_server_errors() -> None:
    statuses = [503, 200]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(statuses.pop(0), text="<p>ok</p>")

    config = HttpClientConfig(
        max_retries=1,
        backoff_base_seconds=0,
        backoff_max_seconds=0,
        rate_limit_per_host_per_second=0,
    )
    async with build_async_client(config, transport=httpx.MockTransport(handler)) as client:
        assert await fetch_page_text(client, "https://jobs.example.com/1", config=config) == "ok"
    assert statuses == []


def test_ocr_result_from_raw_plain() -> None:
    res = ocr_result_from_raw({"text": "  Pay via Zelle \n", "confidence": 88})
    assert res == OcrResult(text="Pay via Zelle", confidence=88.0, warning=None)


def test_ocr_result_from_raw_averages_word_confidence() -> None:
    raw = {
        "data": {
            "text": "start today",
            "words": [{"confidence": 90}, {"confidence": 81}, {"confidence": "n/a"}, "junk"],
        }
    }
    res = ocr_result_from_raw(raw)
    assert res.text == "start today"
    assert res.confidence == 85.5


def test_ocr_result_from_raw_reports_engine_error() -> None:
    res = ocr_result_from_raw({"text": None, "error": "image too small"})
    assert res.text == ""
    assert res.confidence is None
    assert res.warning == "image too small"
