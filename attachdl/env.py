from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, TypeVar
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import AnyHttpUrl

from .constants import ENV_FILE, LOGGER

_TRUTHY = frozenset({"1", "true", "yes", "on"})

_Number = TypeVar("_Number", int, float)


@dataclass
class Settings:
    api_base_url: str
    storage_path: str
    download_dir: str
    timeout: float
    debug: bool
    host: str
    port: int


def is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def _debug_requested() -> bool:
    # Debug logging stays on unless ATTACHDL_DEBUG turns it off.
    return is_truthy(os.getenv("ATTACHDL_DEBUG", "1"))


def _env_number(
    key: str, default: _Number, cast: Callable[[str], _Number], kind: str
) -> _Number:
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as error:
        raise RuntimeError(f"{key} must be {kind}.") from error


def load_env() -> None:
    """Overlay variables from the project ``.env`` file, when one exists."""
    if ENV_FILE.is_file():
        load_dotenv(ENV_FILE, override=True)


def validate_env() -> None:
    api_base_url = os.getenv("ATTACHDL_API_BASE_URL", "").strip()
    if not api_base_url:
        raise RuntimeError("Missing required environment variable: ATTACHDL_API_BASE_URL")

    parsed = urlparse(api_base_url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise RuntimeError(
            "ATTACHDL_API_BASE_URL must be a valid HTTP(S) URL (for example: "
            "https://api.example.com)."
        )
    if parsed.scheme == "http" and parsed.hostname not in {"localhost", "127.0.0.1"}:
        LOGGER.warning(
            "ATTACHDL_API_BASE_URL uses plain http; bearer tokens will be sent unencrypted."
        )

    timeout = _env_number("ATTACHDL_HTTP_TIMEOUT", 30.0, float, "a number")
    if timeout <= 0:
        raise RuntimeError("ATTACHDL_HTTP_TIMEOUT must be greater than zero.")


def load_settings() -> Settings:
    api_base_url = str(AnyHttpUrl(os.getenv("ATTACHDL_API_BASE_URL", "").strip()))
    return Settings(
        api_base_url=api_base_url.rstrip("/"),
        storage_path=os.getenv("ATTACHDL_STORAGE_PATH", ".attachdl-storage.json"),
        download_dir=os.getenv("ATTACHDL_DOWNLOAD_DIR", "downloads"),
        timeout=_env_number("ATTACHDL_HTTP_TIMEOUT", 30.0, float, "a number"),
        debug=_debug_requested(),
        host=os.getenv("ATTACHDL_HOST", "127.0.0.1"),
        port=_env_number("ATTACHDL_PORT", 8000, int, "an integer"),
    )


def setup_logging() -> bool:
    enabled = _debug_requested()
    if enabled:
        logging.basicConfig(level=logging.INFO)
        LOGGER.setLevel(logging.INFO)
    return enabled
