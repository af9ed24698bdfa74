"""
Environment configuration

Values come from the process environment, with a .env file loaded first via
python-dotenv. Invalid values fall back to defaults with a warning rather than
failing the run.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class IngestConfig:
    database_path: str
    request_timeout_seconds: int
    render_timeout_ms: int
    min_html_length: int
    browser_headless: bool
    daily_run_hour: int
    user_agent: str
    adzuna_app_id: str | None
    adzuna_app_key: str | None
    adzuna_country: str
    adzuna_query: str
    adzuna_where: str
    adzuna_max_days_old: int
    adzuna_results_per_page: int
    remotive_category: str
    remotive_limit: int

    @property
    def adzuna_configured(self) -> bool:
        return bool(self.adzuna_app_id and self.adzuna_app_key)


def _parse_int_with_floor(env_name: str, *, default_value: int, minimum_floor: int) -> int:
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        value = default_value
    else:
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("%s=%r is invalid. Using default %s.", env_name, raw, default_value)
            value = default_value

    if value < minimum_floor:
        logger.warning(
            "%s=%s below minimum (%s). Using %s.", env_name, value, minimum_floor, minimum_floor
        )
        value = minimum_floor

    return value


def _parse_bool(env_name: str, *, default_value: bool) -> bool:
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        return default_value

    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False

    logger.warning("%s=%r is invalid boolean. Using default %s.", env_name, raw, default_value)
    return default_value


def _parse_str(env_name: str, default_value: str | None = None) -> str | None:
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        return default_value
    return raw.strip()


@lru_cache(maxsize=1)
def get_config() -> IngestConfig:
    """Load configuration once per process (call get_config.cache_clear() to reload)"""
    load_dotenv()

    daily_run_hour = _parse_int_with_floor("DAILY_RUN_HOUR", default_value=9, minimum_floor=0)
    if daily_run_hour > 23:
        logger.warning("DAILY_RUN_HOUR=%s out of range. Using 9.", daily_run_hour)
        daily_run_hour = 9

    config = IngestConfig(
        database_path=_parse_str("DATABASE_PATH", "data/jobs.db") or "data/jobs.db",
        request_timeout_seconds=_parse_int_with_floor(
            "REQUEST_TIMEOUT_SECONDS", default_value=15, minimum_floor=1
        ),
        render_timeout_ms=_parse_int_with_floor(
            "RENDER_TIMEOUT_MS", default_value=60000, minimum_floor=1000
        ),
        min_html_length=_parse_int_with_floor(
            "MIN_HTML_LENGTH", default_value=2000, minimum_floor=1
        ),
        browser_headless=_parse_bool("BROWSER_HEADLESS", default_value=True),
        daily_run_hour=daily_run_hour,
        user_agent=_parse_str("USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT,
        adzuna_app_id=_parse_str("ADZUNA_APP_ID"),
        adzuna_app_key=_parse_str("ADZUNA_APP_KEY"),
        adzuna_country=_parse_str("ADZUNA_COUNTRY", "br") or "br",
        adzuna_query=_parse_str("ADZUNA_QUERY", "desenvolvedor programador software") or "",
        adzuna_where=_parse_str("ADZUNA_WHERE", "brasil") or "",
        adzuna_max_days_old=_parse_int_with_floor(
            "ADZUNA_MAX_DAYS_OLD", default_value=15, minimum_floor=1
        ),
        adzuna_results_per_page=_parse_int_with_floor(
            "ADZUNA_RESULTS_PER_PAGE", default_value=50, minimum_floor=1
        ),
        remotive_category=_parse_str("REMOTIVE_CATEGORY", "software-dev") or "software-dev",
        remotive_limit=_parse_int_with_floor("REMOTIVE_LIMIT", default_value=100, minimum_floor=1),
    )

    logger.debug(
        "Effective config: DATABASE_PATH=%s REQUEST_TIMEOUT_SECONDS=%s MIN_HTML_LENGTH=%s "
        "ADZUNA configured=%s",
        config.database_path,
        config.request_timeout_seconds,
        config.min_html_length,
        config.adzuna_configured,
    )
    return config
