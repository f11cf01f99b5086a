# file: jobscan/server.py
"""
HTTP adapter for the scoring engine.

Endpoints:
  - POST /verify: score posting text (optionally resolving the URL's domain age)
  - GET /whois: domain registration age over RDAP
  - POST /ocr: text from a base64 image, via an injected OCR adapter
  - GET /health

Requires the `server` extra (`pip install 'jobscan[server]'`).
"""

from __future__ import annotations

import base64
import binascii
import logging
import math
import re
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, ConfigDict, Field, model_validator

from jobscan import __version__
from jobscan.cache import CachedDomainAgeLookup, CachedOcrAdapter, MemoryTTLCache, SQLiteTTLCache
from jobscan.config import JobscanSettings, load_settings
from jobscan.core import AnalysisInput, analyze, explain, normalize
from jobscan.lookup.adapter import DomainAgeLookup
from jobscan.lookup.rdap import RdapDomainAgeLookup, normalize_domain
from jobscan.net.http import PerHostRateLimiter, build_async_client
from jobscan.sources.ocr import OcrAdapter

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 100_000
MAX_IMAGE_BASE64_LENGTH = 10_000_000

_DATA_URL_PREFIX = re.compile(r"^data:[^,]*;base64,", re.IGNORECASE)


class VerifyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(default="", max_length=MAX_TEXT_LENGTH)
    url: str | None = Field(default=None, max_length=2000)
    domain_age_days: float | None = Field(default=None, alias="domainAgeDays")
    risk: str | None = Field(default=None, max_length=20)
    lookup_domain_age: bool = Field(default=False, alias="lookupDomainAge")

    @model_validator(mode="after")
    def _require_text_or_url(self) -> "VerifyRequest":
        if not self.text.strip() and not (self.url or "").strip():
            raise ValueError("At least one of text or url is required")
        return self


class VerifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: int
    verdict: str
    flags: list[str]
    explanation: str
    domain_age_days: int | None = Field(default=None, alias="domainAgeDays")


class OcrRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(
        ..., min_length=1, max_length=MAX_IMAGE_BASE64_LENGTH, alias="imageBase64"
    )


class OcrResponse(BaseModel):
    text: str
    confidence: float | None = None
    warning: str | None = None


class WhoisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    domain: str
    created_at: str | None = Field(default=None, alias="createdAt")
    age_days: int | None = Field(default=None, alias="ageDays")
    registrar: str | None = None


def _finite_age(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value >= 0


def _lookup_from(request: Request) -> DomainAgeLookup:
    lookup = getattr(request.app.state, "domain_age_lookup", None)
    if lookup is None:
        raise HTTPException(status_code=503, detail="domain-age lookup unavailable")
    return lookup


def _decode_image(payload: str) -> bytes:
    raw = _DATA_URL_PREFIX.sub("", payload.strip())
    try:
        image = base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="imageBase64 is not valid base64") from None
    if not image:
        raise HTTPException(status_code=400, detail="empty image")
    return image


def create_app(
    settings: JobscanSettings | None = None,
    *,
    domain_age_lookup: DomainAgeLookup | None = None,
    ocr_adapter: OcrAdapter | None = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    When `domain_age_lookup` is not given, an RDAP lookup (cached in SQLite if
    enabled) is created for the app's lifetime.

    `POST /ocr` is served only when an `ocr_adapter` is given; its results are
    kept in a bounded in-memory cache sized by the `ocr_cache_*` settings.
    """

    settings = settings or load_settings()
    cached_ocr: OcrAdapter | None = None
    if ocr_adapter is not None:
        cached_ocr = CachedOcrAdapter(
            ocr_adapter,
            cache=MemoryTTLCache(max_entries=settings.ocr_cache_max_entries),
            ttl_seconds=settings.ocr_cache_ttl_seconds,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            if domain_age_lookup is not None:
                app.state.domain_age_lookup = domain_age_lookup
            else:
                http_config = settings.http_config()
                client = await stack.enter_async_context(build_async_client(http_config))
                lookup: DomainAgeLookup = RdapDomainAgeLookup(
                    client=client,
                    http_config=http_config,
                    base_url=settings.rdap_base_url,
                    rate_limiter=PerHostRateLimiter(
                        rate_per_second=http_config.rate_limit_per_host_per_second
                    ),
                )
                if settings.cache_enabled:
                    lookup = CachedDomainAgeLookup(
                        lookup,
                        cache=SQLiteTTLCache(settings.cache_path),
                        ttl_seconds=settings.cache_ttl_seconds,
                    )
                app.state.domain_age_lookup = lookup
            logger.info("jobscan server started")
            yield
        logger.info("jobscan server stopped")

    app = FastAPI(title="jobscan", version=__version__, lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "version": __version__}

    @app.post("/verify", response_model=VerifyResponse, response_model_by_alias=True)
    async def verify(body: VerifyRequest, request: Request) -> VerifyResponse:
        domain_age_days = body.domain_age_days
        if body.lookup_domain_age and domain_age_days is None:
            target = body.url or next(iter(normalize(body.text).urls), None)
            if target:
                age = await _lookup_from(request).lookup(target)
                domain_age_days = age.age_days

        result = analyze(
            AnalysisInput(
                text=body.text,
                url=body.url,
                domain_age_days=domain_age_days,
                prior_risk=body.risk,
            )
        )
        logger.info(
            "verify scored",
            extra={"score": result.score, "verdict": result.verdict, "flag_count": len(result.flags)},
        )
        known_age = domain_age_days if _finite_age(domain_age_days) else None
        return VerifyResponse(
            score=result.score,
            verdict=result.verdict.lower(),
            flags=list(result.flags),
            explanation=explain(result),
            domain_age_days=int(known_age) if known_age is not None else None,
        )

    @app.get("/whois", response_model=WhoisResponse, response_model_by_alias=True)
    async def whois(
        request: Request, domain: str = Query(..., min_length=1, max_length=253)
    ) -> WhoisResponse:
        normalized = normalize_domain(domain)
        if normalized is None:
            raise HTTPException(status_code=400, detail="invalid domain")
        age = await _lookup_from(request).lookup(normalized)
        return WhoisResponse(
            domain=age.domain,
            created_at=age.created.isoformat() if age.created else None,
            age_days=age.age_days,
            registrar=age.registrar,
        )

    @app.post("/ocr", response_model=OcrResponse)
    async def ocr(body: OcrRequest) -> OcrResponse:
        if cached_ocr is None:
            raise HTTPException(status_code=503, detail="OCR adapter not configured")
        image = _decode_image(body.image_base64)
        result = await cached_ocr.extract(image)
        logger.info(
            "OCR completed", extra={"text_length": len(result.text), "confidence": result.confidence}
        )
        return OcrResponse(text=result.text, confidence=result.confidence, warning=result.warning)

    return app
