from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from loguru import logger
from dotenv import load_dotenv

from .constants import API_VERSION


DEFAULT_API_URL = "https://api.sensay.io"


# Load env from common locations early to pick up SENSAY_API_KEY_SECRET during import
here = Path(__file__).resolve().parents[1]
for env_path in (here / ".env", Path.cwd() / ".env"):
    if env_path.is_file():
        load_dotenv(dotenv_path=str(env_path), override=False)
        break


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    api_url: str
    api_version: str
    request_timeout: Optional[float]
    log_level: str


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid SENSAY_REQUEST_TIMEOUT={raw!r}")
        return None
    if value <= 0:
        logger.warning(f"Ignoring non-positive SENSAY_REQUEST_TIMEOUT={raw!r}")
        return None
    return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return settings read from the environment.

    Env vars:
      - SENSAY_API_KEY_SECRET (optional; pre-fills the UI credential)
      - SENSAY_API_URL (default: https://api.sensay.io)
      - SENSAY_API_VERSION (default: 2025-03-25)
      - SENSAY_REQUEST_TIMEOUT (optional; seconds, no timeout when unset)
      - LOG_LEVEL (default: INFO)
    """
    api_key = (os.getenv("SENSAY_API_KEY_SECRET") or "").strip() or None
    settings = Settings(
        api_key=api_key,
        api_url=(os.getenv("SENSAY_API_URL") or DEFAULT_API_URL).rstrip("/"),
        api_version=os.getenv("SENSAY_API_VERSION") or API_VERSION,
        request_timeout=_parse_timeout(os.getenv("SENSAY_REQUEST_TIMEOUT")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
    logger.debug(
        f"settings_loaded | api_url={settings.api_url} api_version={settings.api_version} "
        f"api_key_set={settings.api_key is not None} timeout={settings.request_timeout}"
    )
    return settings
