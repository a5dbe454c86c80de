"""Turn scraped date/time strings into display-ready date and time components."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import dateparser
from dateutil import parser as dateutil_parser

LOGGER = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

BULGARIAN_MONTHS = (
    "януари",
    "февруари",
    "март",
    "април",
    "май",
    "юни",
    "юли",
    "август",
    "септември",
    "октомври",
    "ноември",
    "декември",
)


@dataclass
class ParsedDate:
    formatted_date: str
    formatted_time: str
    value: datetime | None = None


def format_long_date(value: datetime) -> str:
    return f"{value.day:02d} {BULGARIAN_MONTHS[value.month - 1]} {value.year}"


class DateParser:
    """Two-profile parser: language-aware `dateparser` first, then locale-neutral `dateutil`."""

    def __init__(self, language: str = "bg", relative_base: datetime | None = None) -> None:
        self.language = language
        self.relative_base = relative_base

    def parse(self, raw: str | None) -> ParsedDate:
        text = (raw or "").strip()
        if not text:
            return ParsedDate(NOT_AVAILABLE, NOT_AVAILABLE)
        value = self._parse_localized(text) or self._parse_neutral(text)
        if value is None:
            LOGGER.warning("Could not parse date/time string: %s", raw)
            return ParsedDate(raw or text, NOT_AVAILABLE)
        return ParsedDate(format_long_date(value), value.strftime("%H:%M"), value)

    def _parse_localized(self, text: str) -> datetime | None:
        settings: dict[str, Any] = {"DATE_ORDER": "DMY", "PREFER_DATES_FROM": "past"}
        if self.relative_base is not None:
            settings["RELATIVE_BASE"] = self.relative_base
        try:
            return dateparser.parse(text, languages=[self.language], settings=settings)
        except Exception:  # noqa: BLE001
            LOGGER.debug("dateparser failed on %r", text, exc_info=True)
            return None

    @staticmethod
    def _parse_neutral(text: str) -> datetime | None:
        try:
            return dateutil_parser.parse(text, dayfirst=True)
        except (ValueError, OverflowError):
            LOGGER.debug("dateutil failed on %r", text, exc_info=True)
            return None
