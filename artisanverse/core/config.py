"""
Configuration helpers for the Artisanverse backend.

Exposes a frozen Settings object that reads environment variables (data
directory, client origin, paging and rate limits) so routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    client_url: str
    default_page_limit: int
    max_page_limit: int
    rate_limit_window_seconds: int
    rate_limit_max_requests: int
    log_level: str
    tax_rate: float
    trust_proxy: bool


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str | None, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    window_ms = _int(os.getenv("RATE_LIMIT_WINDOW_MS"), 15 * 60 * 1000)
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("DATA_DIR") or DEFAULT_DATA_DIR),
        client_url=os.getenv("CLIENT_URL", "http://localhost:3000").rstrip("/"),
        default_page_limit=max(1, _int(os.getenv("DEFAULT_PAGE_LIMIT"), 20)),
        max_page_limit=max(1, _int(os.getenv("MAX_PAGE_LIMIT"), 100)),
        rate_limit_window_seconds=max(1, window_ms // 1000),
        rate_limit_max_requests=_int(os.getenv("RATE_LIMIT_MAX_REQUESTS"), 100),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        tax_rate=_float(os.getenv("TAX_RATE"), 0.08),
        trust_proxy=(os.getenv("TRUST_PROXY") or "").lower() in {"1", "true", "yes"},
    )
