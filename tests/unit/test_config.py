"""
Tests for environment configuration parsing
"""

import logging

import pytest

from job_ingest.config import DEFAULT_USER_AGENT, get_config

CONFIG_VARS = [
    "DATABASE_PATH",
    "REQUEST_TIMEOUT_SECONDS",
    "RENDER_TIMEOUT_MS",
    "MIN_HTML_LENGTH",
    "BROWSER_HEADLESS",
    "DAILY_RUN_HOUR",
    "USER_AGENT",
    "ADZUNA_APP_ID",
    "ADZUNA_APP_KEY",
    "ADZUNA_COUNTRY",
    "ADZUNA_QUERY",
    "ADZUNA_WHERE",
    "ADZUNA_MAX_DAYS_OLD",
    "ADZUNA_RESULTS_PER_PAGE",
    "REMOTIVE_CATEGORY",
    "REMOTIVE_LIMIT",
]


@pytest.fixture
def clean_env(monkeypatch, mocker):
    """No config variables set and no .env file read"""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    mocker.patch("job_ingest.config.load_dotenv")
    get_config.cache_clear()
    yield monkeypatch
    get_config.cache_clear()


class TestDefaults:
    def test_defaults(self, clean_env):
        config = get_config()

        assert config.database_path == "data/jobs.db"
        assert config.request_timeout_seconds == 15
        assert config.render_timeout_ms == 60000
        assert config.min_html_length == 2000
        assert config.browser_headless is True
        assert config.daily_run_hour == 9
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.adzuna_country == "br"
        assert config.adzuna_max_days_old == 15
        assert config.adzuna_results_per_page == 50
        assert config.remotive_category == "software-dev"
        assert config.remotive_limit == 100
        assert config.adzuna_configured is False

    def test_cached_until_cleared(self, clean_env):
        first = get_config()
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "30")

        assert get_config() is first
        get_config.cache_clear()
        assert get_config().request_timeout_seconds == 30


class TestOverrides:
    def test_values_are_stripped(self, clean_env):
        clean_env.setenv("DATABASE_PATH", "  /tmp/jobs.db  ")
        clean_env.setenv("MIN_HTML_LENGTH", " 500 ")

        config = get_config()

        assert config.database_path == "/tmp/jobs.db"
        assert config.min_html_length == 500

    def test_adzuna_needs_both_credentials(self, clean_env):
        clean_env.setenv("ADZUNA_APP_ID", "id")
        assert get_config().adzuna_configured is False

        get_config.cache_clear()
        clean_env.setenv("ADZUNA_APP_KEY", "key")
        assert get_config().adzuna_configured is True

    @pytest.mark.parametrize("raw,expected", [("false", False), ("0", False), ("Yes", True)])
    def test_headless_flag(self, clean_env, raw, expected):
        clean_env.setenv("BROWSER_HEADLESS", raw)
        assert get_config().browser_headless is expected


class TestInvalidValues:
    def test_non_integer_falls_back_to_default(self, clean_env, caplog):
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "fast")

        with caplog.at_level(logging.WARNING, logger="job_ingest.config"):
            config = get_config()

        assert config.request_timeout_seconds == 15
        assert "REQUEST_TIMEOUT_SECONDS" in caplog.text

    def test_below_floor_is_raised_to_floor(self, clean_env):
        clean_env.setenv("REQUEST_TIMEOUT_SECONDS", "0")
        clean_env.setenv("RENDER_TIMEOUT_MS", "10")

        config = get_config()

        assert config.request_timeout_seconds == 1
        assert config.render_timeout_ms == 1000

    def test_invalid_boolean_uses_default(self, clean_env):
        clean_env.setenv("BROWSER_HEADLESS", "sometimes")
        assert get_config().browser_headless is True

    @pytest.mark.parametrize("raw,expected", [("24", 9), ("-3", 0), ("23", 23), ("0", 0)])
    def test_daily_run_hour_range(self, clean_env, raw, expected):
        clean_env.setenv("DAILY_RUN_HOUR", raw)
        assert get_config().daily_run_hour == expected
