"""Configuration loading and validation."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from sheetstream.errors import ConfigurationError

DEFAULT_BASE_URL = "https://docs.google.com/spreadsheets/d"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class AdapterConfig:
    """Process-level adapter configuration, read-only once created."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    # Static extra request headers; the only form of authentication supported
    headers: dict[str, str] = field(default_factory=dict)
    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        if not self.base_url:
            object.__setattr__(self, "base_url", DEFAULT_BASE_URL)
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")


@dataclass(frozen=True)
class ScanOptions:
    """Per-scan parameters; they live only as long as the scan."""

    spread_sheet_id: str
    sheet_id: str | None = None

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> ScanOptions:
        """Build scan options from a host-supplied option mapping.

        Raises ConfigurationError when spread_sheet_id is missing or empty.
        """
        spread_sheet_id = options.get("spread_sheet_id")
        if spread_sheet_id is None or str(spread_sheet_id).strip() == "":
            raise ConfigurationError("required option 'spread_sheet_id' is not specified")

        sheet_id = options.get("sheet_id")
        if sheet_id is not None and str(sheet_id).strip() == "":
            sheet_id = None

        return cls(
            spread_sheet_id=str(spread_sheet_id).strip(),
            sheet_id=None if sheet_id is None else str(sheet_id).strip(),
        )


def parse_headers(raw: str, source: str = "SHEETSTREAM_HEADERS") -> dict[str, str]:
    """Parse a JSON object of header name -> value."""
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{source} must be a JSON object: {e}") from e

    if not isinstance(parsed, dict):
        raise ConfigurationError(f"{source} must be a JSON object, got {type(parsed).__name__}")

    return {str(name): str(value) for name, value in parsed.items()}


def load_config(env_path: str | Path | None = None) -> AdapterConfig:
    """Load adapter configuration from environment variables.

    Loads a .env file if present (for local development). Every variable is
    optional; unset values fall back to the defaults.
    """
    load_dotenv(dotenv_path=env_path)

    raw_timeout = os.environ.get("SHEETSTREAM_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError as e:
        raise ConfigurationError(
            f"SHEETSTREAM_TIMEOUT must be a number, got '{raw_timeout}'"
        ) from e

    raw_headers = os.environ.get("SHEETSTREAM_HEADERS")
    headers = parse_headers(raw_headers) if raw_headers else {}

    return AdapterConfig(
        base_url=os.environ.get("SHEETSTREAM_BASE_URL", DEFAULT_BASE_URL),
        timeout=timeout,
        headers=headers,
        log_level=os.environ.get("SHEETSTREAM_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
