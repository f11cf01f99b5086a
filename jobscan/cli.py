# file: jobscan/cli.py
"""
jobscan CLI.

Commands:
  - analyze: score a job posting (text, file, stdin, or fetched URL)
  - whois: look up a domain's registration age over RDAP
  - report: export an existing JSON report into CSV/PDF
  - serve: run the HTTP adapter (optional dependencies)
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import click
import httpx

from jobscan import __version__
from jobscan.cache import CachedDomainAgeLookup, SQLiteTTLCache
from jobscan.config import JobscanSettings, load_settings
from jobscan.core import AnalysisInput, analyze, explain, normalize
from jobscan.io.report import (
    DISCLAIMER,
    build_report,
    export_csv,
    export_json,
    generate_pdf,
    new_report_id,
    utc_now_iso,
)
from jobscan.logging_config import configure_logging
from jobscan.lookup.adapter import DomainAge, DomainAgeLookup
from jobscan.lookup.rdap import RdapDomainAgeLookup
from jobscan.net.http import PerHostRateLimiter, build_async_client
from jobscan.sources.page import fetch_page_text

logger = logging.getLogger(__name__)


def _domain_age_lookup(
    client: httpx.AsyncClient,
    settings: JobscanSettings,
    *,
    rate_limiter: PerHostRateLimiter,
    no_cache: bool,
) -> DomainAgeLookup:
    lookup: DomainAgeLookup = RdapDomainAgeLookup(
        client=client,
        http_config=settings.http_config(),
        base_url=settings.rdap_base_url,
        rate_limiter=rate_limiter,
    )
    if settings.cache_enabled and not no_cache:
        cache = SQLiteTTLCache(settings.cache_path)
        lookup = CachedDomainAgeLookup(lookup, cache=cache, ttl_seconds=settings.cache_ttl_seconds)
    return lookup


async def analyze_async(
    text: str,
    *,
    settings: JobscanSettings,
    url: str | None = None,
    fetch: bool = False,
    domain_age_days: float | None = None,
    lookup_age: bool = False,
    prior_risk: str | None = None,
    no_cache: bool = False,
) -> dict[str, Any]:
    """Gather inputs from the collaborators, score them, and build a report."""

    source = "text"
    domain_age: DomainAge | None = None
    http_config = settings.http_config()
    rate_limiter = PerHostRateLimiter(rate_per_second=http_config.rate_limit_per_host_per_second)

    needs_network = (fetch and url) or (lookup_age and domain_age_days is None)
    if needs_network:
        async with build_async_client(http_config) as client:
            if fetch and url:
                page_text = await fetch_page_text(
                    client, url, config=http_config, rate_limiter=rate_limiter
                )
                text = f"{text}\n{page_text}" if text.strip() else page_text
                source = "url"

            if lookup_age and domain_age_days is None:
                target = url or next(iter(normalize(text).urls), None)
                if target:
                    lookup = _domain_age_lookup(
                        client, settings, rate_limiter=rate_limiter, no_cache=no_cache
                    )
                    domain_age = await lookup.lookup(target)
                    domain_age_days = domain_age.age_days
                else:
                    logger.info("No URL available for a domain-age lookup")

    data = AnalysisInput(
        text=text, url=url, domain_age_days=domain_age_days, prior_risk=prior_risk
    )
    result = analyze(data)
    return build_report(
        data,
        result,
        explanation=explain(result),
        report_id=new_report_id(),
        generated_at=utc_now_iso(),
        source=source,
        domain_age=domain_age,
    )


def _human_text(report: dict[str, Any]) -> str:
    result = report.get("result", {}) or {}
    summary = report.get("summary", {}) or {}
    lines: list[str] = []
    lines.append(f"Risk score: {result.get('score', '')}/100 ({result.get('verdict', '')})")

    domain_age = report.get("domain_age")
    if isinstance(domain_age, dict):
        age = domain_age.get("age_days")
        shown = f"{age} days" if age is not None else "unknown"
        lines.append(f"Domain age ({domain_age.get('domain', '')}): {shown}")

    flags = result.get("flags") or []
    if flags:
        lines.append("")
        lines.append("Flags:")
        for flag in flags:
            lines.append(f"  - {flag}")

    lines.append("")
    lines.append(str(summary.get("explanation", "")))
    lines.append("")
    lines.append(DISCLAIMER)
    return "\n".join(lines) + "\n"


def _read_text(text: str | None, file_path: Path | None) -> str:
    if file_path is not None:
        return file_path.read_text(encoding="utf-8")
    if text == "-":
        return click.get_text_stream("stdin").read()
    return text or ""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__)
def main() -> None:
    """Heuristic scam-risk scoring for job postings."""


@main.command("analyze")
@click.argument("text", required=False, default=None)
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read posting text from a file.",
)
@click.option("--url", default=None, help="URL of the posting (checked for risky domains).")
@click.option("--fetch", is_flag=True, help="Download --url and score its page text.")
@click.option(
    "--domain-age-days",
    type=click.FloatRange(min=0),
    default=None,
    help="Known registration age of the posting's domain.",
)
@click.option("--lookup-age", is_flag=True, help="Look up the domain age over RDAP.")
@click.option(
    "--risk",
    "prior_risk",
    type=click.Choice(["low", "medium", "high"], case_sensitive=False),
    default=None,
    help="Prior manual risk label.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the JSON report.")
@click.option(
    "--report",
    "report_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the full JSON report to a file.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
@click.option("--no-cache", is_flag=True, help="Disable the SQLite cache.")
def analyze_cmd(
    text: str | None,
    file_path: Path | None,
    url: str | None,
    fetch: bool,
    domain_age_days: float | None,
    lookup_age: bool,
    prior_risk: str | None,
    as_json: bool,
    report_path: Path | None,
    config_path: Path | None,
    no_cache: bool,
) -> None:
    """
    Score a job posting. TEXT may be `-` to read from stdin.
    """

    settings = load_settings(yaml_path=config_path)
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)

    body = _read_text(text, file_path)
    if not body.strip() and not url:
        raise click.UsageError("Provide posting TEXT, --file, or --url.")
    if fetch and not url:
        raise click.UsageError("--fetch requires --url.")

    try:
        report = asyncio.run(
            analyze_async(
                body,
                settings=settings,
                url=url,
                fetch=fetch,
                domain_age_days=domain_age_days,
                lookup_age=lookup_age,
                prior_risk=prior_risk.lower() if prior_risk else None,
                no_cache=no_cache,
            )
        )
    except Exception as exc:
        raise click.ClickException(f"{type(exc).__name__}: {exc}") from exc

    if report_path is not None:
        export_json(report, report_path)

    if as_json:
        click.echo(json.dumps(report, indent=2, sort_keys=True))
    else:
        click.echo(_human_text(report), nl=False)


async def _whois_async(domain: str, *, settings: JobscanSettings, no_cache: bool) -> DomainAge:
    http_config = settings.http_config()
    rate_limiter = PerHostRateLimiter(rate_per_second=http_config.rate_limit_per_host_per_second)
    async with build_async_client(http_config) as client:
        lookup = _domain_age_lookup(client, settings, rate_limiter=rate_limiter, no_cache=no_cache)
        return await lookup.lookup(domain)


@main.command("whois")
@click.argument("domain")
@click.option("--json", "as_json", is_flag=True, help="Print JSON.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
@click.option("--no-cache", is_flag=True, help="Disable the SQLite cache.")
def whois_cmd(domain: str, as_json: bool, config_path: Path | None, no_cache: bool) -> None:
    """Look up a domain's registration date and age."""

    settings = load_settings(yaml_path=config_path)
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)

    age = asyncio.run(_whois_async(domain, settings=settings, no_cache=no_cache))
    if as_json:
        click.echo(json.dumps(age.to_dict(), indent=2, sort_keys=True))
        return

    click.echo(f"Domain: {age.domain}")
    if not age.known:
        click.echo("Registration date: unknown")
        return
    click.echo(f"Registered: {age.created.isoformat() if age.created else ''}")
    click.echo(f"Age: {age.age_days} days")
    if age.registrar:
        click.echo(f"Registrar: {age.registrar}")


@main.command("report")
@click.argument("input_report", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "csv", "pdf"], case_sensitive=False),
    default="csv",
)
@click.option("--output", "output_path", type=click.Path(path_type=Path), default=None)
def report_cmd(input_report: Path, fmt: str, output_path: Path | None) -> None:
    """
    Export an existing JSON report into CSV/PDF (or re-write JSON).
    """

    report = json.loads(input_report.read_text(encoding="utf-8"))
    if not isinstance(report, dict):
        raise click.ClickException("Input report must be a JSON object.")

    fmt = fmt.lower()
    if output_path is None:
        output_path = input_report.with_suffix(f".{fmt}")

    if fmt == "json":
        export_json(report, output_path)
    elif fmt == "csv":
        export_csv(report, output_path)
    else:
        try:
            generate_pdf(report, output_path)
        except RuntimeError as exc:
            raise click.ClickException(str(exc)) from exc

    click.echo(str(output_path))


@main.command("serve")
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", type=int, default=None, help="Port (default from settings).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML config path.",
)
def serve_cmd(host: str | None, port: int | None, config_path: Path | None) -> None:
    """Run the HTTP adapter (POST /verify, GET /whois)."""

    settings = load_settings(yaml_path=config_path)
    configure_logging(level=settings.log_level, json_logging=settings.json_logging)

    try:
        import uvicorn

        from jobscan.server import create_app
    except ImportError as exc:
        raise click.ClickException(
            "Server dependencies not installed. Install with `pip install 'jobscan[server]'`."
        ) from exc

    uvicorn.run(
        create_app(settings),
        host=host or settings.server_host,
        port=port or settings.server_port,
        log_config=None,
    )
