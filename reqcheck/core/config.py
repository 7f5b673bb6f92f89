"""Application configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_SECRET_HEADER = "Secret"
DEFAULT_EXEMPT_PATHS = ("/health",)
DEFAULT_LOG_LEVEL = "INFO"


def _get_tuple_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def redact_secret(secret: str) -> str:
    """Return a non-recoverable placeholder for sensitive values."""
    if not secret:
        return "<empty>"
    return "<redacted>"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the request layer, read-only once loaded."""

    access_secret: str = ""
    secret_header: str = DEFAULT_SECRET_HEADER
    exempt_paths: tuple[str, ...] = DEFAULT_EXEMPT_PATHS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def access_control_enabled(self) -> bool:
        return bool(self.access_secret)

    def safe_for_logging(self) -> dict[str, str | bool | tuple[str, ...]]:
        """Return settings safe for logs."""
        return {
            "access_secret": redact_secret(self.access_secret),
            "secret_header": self.secret_header,
            "exempt_paths": self.exempt_paths,
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings(
        access_secret=os.getenv("REQCHECK_ACCESS_SECRET", ""),
        secret_header=os.getenv("REQCHECK_SECRET_HEADER", DEFAULT_SECRET_HEADER),
        exempt_paths=_get_tuple_env("REQCHECK_EXEMPT_PATHS", DEFAULT_EXEMPT_PATHS),
        log_level=os.getenv("REQCHECK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
