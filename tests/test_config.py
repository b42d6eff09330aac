import pytest

from config import DEFAULT_DATABASE_URL, load_settings, parse_admin_ids

ENV_VARS = (
    "BOT_TOKEN",
    "ADMIN_IDS",
    "DATABASE_URL",
    "LOCATION_ADDRESS_REQUIRED",
    "PAYMENT_DETAILS_ENABLED",
    "REJECT_REQUESTS_WHEN_FULL",
    "WIZARD_TTL_SECONDS",
    "LOG_DIR",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_parse_admin_ids_skips_garbage():
    assert parse_admin_ids("123, 456,abc,, 789 ") == frozenset({123, 456, 789})
    assert parse_admin_ids("") == frozenset()
    assert parse_admin_ids(None) == frozenset()


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.bot_token == ""
    assert settings.admin_ids == frozenset()
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.location_address_required is False
    assert settings.payment_details_enabled is True
    assert settings.reject_requests_when_full is False
    assert settings.wizard_ttl_seconds == 1800
    assert settings.log_dir == "logs"


def test_values_from_environment(clean_env):
    clean_env.setenv("BOT_TOKEN", "123:abc")
    clean_env.setenv("ADMIN_IDS", "1,2")
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///tmp/x.db")
    clean_env.setenv("LOCATION_ADDRESS_REQUIRED", "true")
    clean_env.setenv("PAYMENT_DETAILS_ENABLED", "0")
    clean_env.setenv("REJECT_REQUESTS_WHEN_FULL", "yes")
    clean_env.setenv("WIZARD_TTL_SECONDS", "60")

    settings = load_settings()

    assert settings.bot_token == "123:abc"
    assert settings.admin_ids == frozenset({1, 2})
    assert settings.database_url == "sqlite+aiosqlite:///tmp/x.db"
    assert settings.location_address_required is True
    assert settings.payment_details_enabled is False
    assert settings.reject_requests_when_full is True
    assert settings.wizard_ttl_seconds == 60
