import pytest

from partyintel.config import DEFAULT_API_URL, load_service_env

_VARS = (
    "PARTYINTEL_API_URL",
    "PARTYINTEL_DOMAIN_ID",
    "PARTYINTEL_CACHE_TTL_S",
    "PARTYINTEL_UPSTREAM_TIMEOUT_S",
    "PARTYINTEL_VALIDATOR_LIMIT",
    "PARTYINTEL_SERVE_STALE",
    "PARTYINTEL_CORS_ORIGINS",
    "PARTYINTEL_LOG_LEVEL",
    "TESTING",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_load_service_env_defaults():
    cfg = load_service_env()
    assert cfg.api_url == DEFAULT_API_URL
    assert cfg.domain_id.startswith("global-domain::")
    assert cfg.cache_ttl_s == 300
    assert cfg.upstream_timeout_s == pytest.approx(10.0)
    assert cfg.validator_limit is None
    assert cfg.serve_stale_on_error is False
    assert cfg.cors_origins == ["*"]
    assert cfg.log_level == "INFO"


def test_load_service_env_overrides(monkeypatch):
    monkeypatch.setenv("PARTYINTEL_API_URL", "http://localhost:9000/")
    monkeypatch.setenv("PARTYINTEL_CACHE_TTL_S", "60")
    monkeypatch.setenv("PARTYINTEL_UPSTREAM_TIMEOUT_S", "999")
    monkeypatch.setenv("PARTYINTEL_VALIDATOR_LIMIT", "500")
    monkeypatch.setenv("PARTYINTEL_SERVE_STALE", "yes")
    monkeypatch.setenv("PARTYINTEL_CORS_ORIGINS", "http://a.io, http://b.io")
    monkeypatch.setenv("PARTYINTEL_LOG_LEVEL", "debug")

    cfg = load_service_env()
    assert cfg.api_url == "http://localhost:9000"
    assert cfg.cache_ttl_s == 60
    assert cfg.upstream_timeout_s == pytest.approx(60.0)
    assert cfg.validator_limit == 500
    assert cfg.serve_stale_on_error is True
    assert cfg.cors_origins == ["http://a.io", "http://b.io"]
    assert cfg.log_level == "DEBUG"


def test_testing_mode_prefers_test_prefixed_vars(monkeypatch):
    monkeypatch.setenv("TESTING", "true")
    monkeypatch.setenv("PARTYINTEL_CACHE_TTL_S", "60")
    monkeypatch.setenv("TEST_PARTYINTEL_CACHE_TTL_S", "5")
    assert load_service_env().cache_ttl_s == 5


def test_testing_mode_falls_back_without_test_prefixed_var(monkeypatch):
    monkeypatch.setenv("TESTING", "true")
    monkeypatch.setenv("PARTYINTEL_UPSTREAM_TIMEOUT_S", "2.5")
    monkeypatch.setenv("TEST_PARTYINTEL_UPSTREAM_TIMEOUT_S", "")
    assert load_service_env().upstream_timeout_s == pytest.approx(2.5)


def test_test_prefixed_vars_ignored_outside_testing_mode(monkeypatch):
    monkeypatch.setenv("PARTYINTEL_CACHE_TTL_S", "60")
    monkeypatch.setenv("TEST_PARTYINTEL_CACHE_TTL_S", "5")
    assert load_service_env().cache_ttl_s == 60


@pytest.mark.parametrize(
    "name, value",
    [
        ("PARTYINTEL_API_URL", "ftp://example"),
        ("PARTYINTEL_DOMAIN_ID", "no-separator"),
        ("PARTYINTEL_CACHE_TTL_S", "five"),
        ("PARTYINTEL_VALIDATOR_LIMIT", "-1"),
        ("PARTYINTEL_LOG_LEVEL", "LOUD"),
    ],
)
def test_load_service_env_rejects_invalid(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(SystemExit):
        load_service_env()
