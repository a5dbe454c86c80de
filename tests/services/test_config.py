from __future__ import annotations

from pathlib import Path

import pytest

from src.services.config import DEFAULT_EXCLUDED_KEYWORDS, ConfigurationError, ScraperConfig, load_config

ENV_VARS = (
    "NEWS_BASE_URL",
    "NEWS_LISTING_URL",
    "NEWS_REQUEST_TIMEOUT",
    "NEWS_MAX_WORKERS",
    "NEWS_FAVORITES_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_base_url_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        load_config()


def test_relative_base_url_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        load_config(base_url="mediapool.bg")


def test_environment_supplies_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_BASE_URL", "https://www.mediapool.bg/")
    monkeypatch.setenv("NEWS_MAX_WORKERS", "4")
    monkeypatch.setenv("NEWS_FAVORITES_PATH", "/tmp/favs.json")
    config = load_config()
    assert config.base_url == "https://www.mediapool.bg/"
    assert config.start_url == "https://www.mediapool.bg/"
    assert config.max_workers == 4
    assert config.favorites_path == Path("/tmp/favs.json")
    assert config.excluded_keywords == DEFAULT_EXCLUDED_KEYWORDS


def test_explicit_values_override_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_BASE_URL", "https://www.mediapool.bg/")
    monkeypatch.setenv("NEWS_MAX_WORKERS", "4")
    config = load_config(
        listing_url="https://www.mediapool.bg/bulgaria-cat2.html",
        max_workers=2,
        fetch_details=False,
    )
    assert config.start_url == "https://www.mediapool.bg/bulgaria-cat2.html"
    assert config.max_workers == 2
    assert config.fetch_details is False


def test_non_integer_env_value_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_BASE_URL", "https://www.mediapool.bg/")
    monkeypatch.setenv("NEWS_MAX_WORKERS", "many")
    with pytest.raises(ConfigurationError):
        load_config()


def test_worker_and_timeout_bounds() -> None:
    with pytest.raises(ConfigurationError):
        ScraperConfig(base_url="https://www.mediapool.bg/", max_workers=0).validate()
    with pytest.raises(ConfigurationError):
        ScraperConfig(base_url="https://www.mediapool.bg/", request_timeout=0).validate()


def test_fractional_timeout_env_value_is_accepted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_BASE_URL", "https://www.mediapool.bg/")
    monkeypatch.setenv("NEWS_REQUEST_TIMEOUT", "7.5")
    assert load_config().request_timeout == 7.5


def test_non_numeric_timeout_env_value_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEWS_BASE_URL", "https://www.mediapool.bg/")
    monkeypatch.setenv("NEWS_REQUEST_TIMEOUT", "soon")
    with pytest.raises(ConfigurationError):
        load_config()
