"""
Runtime configuration read from environment variables.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return int(value)


@dataclass
class AccessSettings:
    min_duration_minutes: int = 5
    max_duration_minutes: int = 480
    default_duration_minutes: int = 60
    min_reason_length: int = 10
    max_reason_length: int = 500
    enforce_single_active_grant: bool = False
    cache_ttl_seconds: int = 60
    store_path: Optional[str] = None

    openfga_api_url: str = "http://localhost:8080"
    openfga_store_id: str = ""
    anthropic_api_key: str = ""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AccessSettings":
        return cls(
            min_duration_minutes=_env_int("TECHNICIAN_ACCESS_MIN_MINUTES", 5),
            max_duration_minutes=_env_int("TECHNICIAN_ACCESS_MAX_MINUTES", 480),
            default_duration_minutes=_env_int("TECHNICIAN_ACCESS_DEFAULT_MINUTES", 60),
            enforce_single_active_grant=_env_bool("TECHNICIAN_ACCESS_ENFORCE_SINGLE_ACTIVE", False),
            cache_ttl_seconds=_env_int("TECHNICIAN_ACCESS_CACHE_TTL_SECONDS", 60),
            store_path=os.getenv("TECHNICIAN_ACCESS_STORE_PATH") or None,
            openfga_api_url=os.getenv("OPENFGA_API_URL", "http://localhost:8080"),
            openfga_store_id=os.getenv("OPENFGA_STORE_ID", ""),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def configure_logging(settings: AccessSettings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
