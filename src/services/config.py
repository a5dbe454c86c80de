"""Runtime settings for the news scraper, merged from explicit values and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from src.services.favorites import DEFAULT_FAVORITES_PATH

DEFAULT_OUTPUT_DIR = Path("datasets/news_scraper")

DEFAULT_EXCLUDED_KEYWORDS = [
    "covid-19",
    "covid",
    "коронавирус",
    "пандемия",
    "ковид",
]


class ConfigurationError(ValueError):
    pass


@dataclass
class ScraperConfig:
    base_url: str
    listing_url: str | None = None
    fetch_details: bool = True
    request_timeout: float = 15
    max_retries: int = 3
    max_workers: int = 1
    favorites_path: Path = DEFAULT_FAVORITES_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    excluded_keywords: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_KEYWORDS))
    title_patterns_path: Path | None = None
    language: str = "bg"

    @property
    def start_url(self) -> str:
        return self.listing_url or self.base_url

    def validate(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ConfigurationError("News base URL is not configured (set NEWS_BASE_URL or pass --base-url).")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"News base URL must be an absolute http(s) URL, got {self.base_url!r}.")
        if self.max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {self.max_workers}.")
        if self.request_timeout <= 0:
            raise ConfigurationError(f"request_timeout must be positive, got {self.request_timeout}.")


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}.") from exc


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}.") from exc


def load_config(**overrides: Any) -> ScraperConfig:
    """Build a validated config; explicit non-None overrides win over environment variables."""
    env_values: dict[str, Any] = {
        "base_url": os.getenv("NEWS_BASE_URL"),
        "listing_url": os.getenv("NEWS_LISTING_URL"),
        "request_timeout": _env_float("NEWS_REQUEST_TIMEOUT"),
        "max_workers": _env_int("NEWS_MAX_WORKERS"),
        "favorites_path": Path(os.environ["NEWS_FAVORITES_PATH"]) if os.getenv("NEWS_FAVORITES_PATH") else None,
    }
    values = {key: value for key, value in env_values.items() if value is not None}
    values.update({key: value for key, value in overrides.items() if value is not None})
    base_url = values.pop("base_url", "") or ""
    config = ScraperConfig(base_url=base_url.strip(), **values)
    config.validate()
    return config
