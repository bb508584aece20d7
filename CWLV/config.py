"""
Configuration Module - Environment-driven settings

Values come from the process environment, with a .env file in the working
directory loaded first.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Invalid integer for {name}: {raw!r}, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Invalid number for {name}: {raw!r}, using {default}")
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    logger.warning(f"Invalid boolean for {name}: {raw!r}, using {default}")
    return default


@dataclass
class Settings:
    api_url: str = "http://127.0.0.1:8000"
    request_timeout: float = 30.0
    debounce_seconds: float = 0.3
    overscan: int = 5
    page_size: int = 50
    aggregate_groups: bool = True
    search_limit: int = 100
    log_dir: Path = Path("app_log")
    log_level: str = "INFO"
    catalog_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CWLV_* environment variables"""
        catalog = os.getenv("CWLV_CATALOG")
        return cls(
            api_url=os.getenv("CWLV_API_URL", cls.api_url),
            request_timeout=_env_float("CWLV_REQUEST_TIMEOUT", cls.request_timeout),
            debounce_seconds=_env_float("CWLV_DEBOUNCE_SECONDS", cls.debounce_seconds),
            overscan=_env_int("CWLV_OVERSCAN", cls.overscan),
            page_size=_env_int("CWLV_PAGE_SIZE", cls.page_size),
            aggregate_groups=_env_bool("CWLV_AGGREGATE_GROUPS", cls.aggregate_groups),
            search_limit=_env_int("CWLV_SEARCH_LIMIT", cls.search_limit),
            log_dir=Path(os.getenv("CWLV_LOG_DIR", str(cls.log_dir))),
            log_level=os.getenv("CWLV_LOG_LEVEL", cls.log_level).upper(),
            catalog_path=Path(catalog) if catalog else None,
        )
