# file: jobscan/config.py
"""
Configuration loader.

The scoring engine itself takes no configuration: its rules, weights and
thresholds are fixed so that scores stay comparable. Settings here cover the
collaborators around it (HTTP, RDAP, caches, logging, the HTTP server).

Precedence (highest to lowest):
1. OS environment variables
2. `.env` values
3. YAML config file values
4. Code defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, Field
from pydantic import ConfigDict as PydanticConfigDict

from jobscan.lookup.rdap import DEFAULT_RDAP_BASE_URL
from jobscan.net.http import HttpClientConfig


class JobscanSettings(BaseModel):
    model_config = PydanticConfigDict(extra="ignore")

    # General
    log_level: str = "INFO"
    json_logging: bool = False

    # HTTP
    http_timeout_seconds: float = Field(default=12.0, gt=0)
    http_max_retries: int = Field(default=1, ge=0)
    http_backoff_base_seconds: float = 0.5
    http_backoff_max_seconds: float = 4.0
    http_rate_limit_per_host_per_second: float = 2.0
    http_user_agent: str = "jobscan/0.1 (+https://example.invalid; job-scam checker)"

    # Domain-age lookups
    rdap_base_url: str = DEFAULT_RDAP_BASE_URL

    # Cache
    cache_enabled: bool = True
    cache_path: Path = Path(".cache/jobscan.sqlite3")
    cache_ttl_seconds: int = 86400
    ocr_cache_ttl_seconds: int = 86400
    ocr_cache_max_entries: int = Field(default=256, gt=0)

    # HTTP server
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    def http_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            timeout_seconds=self.http_timeout_seconds,
            max_retries=self.http_max_retries,
            backoff_base_seconds=self.http_backoff_base_seconds,
            backoff_max_seconds=self.http_backoff_max_seconds,
            rate_limit_per_host_per_second=self.http_rate_limit_per_host_per_second,
            user_agent=self.http_user_agent,
        )


_ENV_MAP: dict[str, str] = {
    "JOBSCAN_LOG_LEVEL": "log_level",
    "JOBSCAN_JSON_LOGGING": "json_logging",
    "JOBSCAN_HTTP_TIMEOUT_SECONDS": "http_timeout_seconds",
    "JOBSCAN_HTTP_MAX_RETRIES": "http_max_retries",
    "JOBSCAN_HTTP_BACKOFF_BASE_SECONDS": "http_backoff_base_seconds",
    "JOBSCAN_HTTP_BACKOFF_MAX_SECONDS": "http_backoff_max_seconds",
    "JOBSCAN_HTTP_RATE_LIMIT_PER_HOST_PER_SECOND": "http_rate_limit_per_host_per_second",
    "JOBSCAN_HTTP_USER_AGENT": "http_user_agent",
    "JOBSCAN_RDAP_BASE_URL": "rdap_base_url",
    "JOBSCAN_CACHE_ENABLED": "cache_enabled",
    "JOBSCAN_CACHE_PATH": "cache_path",
    "JOBSCAN_CACHE_TTL_SECONDS": "cache_ttl_seconds",
    "JOBSCAN_OCR_CACHE_TTL_SECONDS": "ocr_cache_ttl_seconds",
    "JOBSCAN_OCR_CACHE_MAX_ENTRIES": "ocr_cache_max_entries",
    "JOBSCAN_SERVER_HOST": "server_host",
    "JOBSCAN_SERVER_PORT": "server_port",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    return raw if isinstance(raw, dict) else {}


def _read_dotenv(path: Path) -> dict[str, str]:
    # dotenv_values does not mutate os.environ; it just parses the file.
    values = dotenv_values(path)
    return {k: v for k, v in values.items() if isinstance(k, str) and isinstance(v, str)}


def _overlay_env(target: dict[str, Any], env: dict[str, str]) -> None:
    for env_key, field_name in _ENV_MAP.items():
        if env_key in env:
            target[field_name] = env[env_key]


def load_settings(
    *, yaml_path: Path | None = None, env_path: Path | None = None
) -> JobscanSettings:
    """
    Load settings from YAML and .env, with OS env overrides.

    Args:
        yaml_path: Optional YAML config path (else `JOBSCAN_CONFIG`).
        env_path: Optional .env path (default: `.env` if present).
    """

    data: dict[str, Any] = {}

    if env_path is None:
        maybe = Path(".env")
        env_path = maybe if maybe.exists() else None

    dotenv = _read_dotenv(env_path) if env_path is not None and env_path.exists() else {}

    if yaml_path is None:
        cfg = os.environ.get("JOBSCAN_CONFIG") or dotenv.get("JOBSCAN_CONFIG")
        if cfg:
            yaml_path = Path(cfg)

    if yaml_path is not None and yaml_path.exists():
        data.update(_read_yaml(yaml_path))

    if dotenv:
        _overlay_env(data, dotenv)

    os_env = {k: v for k, v in os.environ.items() if k in _ENV_MAP}
    _overlay_env(data, os_env)

    return JobscanSettings.model_validate(data)
