"""Runtime settings for the Streamlit front-end, read from the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-integer %s=%r", name, raw)
        return default


@dataclass
class AppConfig:
    log_level: str = "INFO"
    max_upload_mb: int = 10
    cache_ttl: int = 60
    allowed_extensions: tuple = ("xlsx", "xls", "csv")

    @classmethod
    def from_env(cls) -> "AppConfig":
        return cls(
            log_level=os.environ.get("FIN_EVAL_LOG_LEVEL", cls.log_level).strip().upper() or cls.log_level,
            max_upload_mb=_env_int("FIN_EVAL_MAX_UPLOAD_MB", cls.max_upload_mb),
            cache_ttl=_env_int("FIN_EVAL_CACHE_TTL", cls.cache_ttl),
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024
