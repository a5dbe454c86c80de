"""
Headline cleanup for listing-page titles.

Listing anchors frequently carry the publication timestamp ("Вчера 18:45",
"25.02.2024 18:45", "3 март 2024") glued to the headline text. The patterns
below are applied repeatedly until a full pass changes nothing, because
removing one match can expose a neighbouring match for an earlier pattern.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Pattern, Sequence

LOGGER = logging.getLogger(__name__)

RELATIVE_DAY_PATTERN = r"(?:вчера|днес|yesterday|today)"
TIME_PATTERN = r"\d{1,2}:\d{2}"
NUMERIC_DATE_PATTERN = r"\d{1,2}\.\d{1,2}\.\d{4}"
MONTH_NAME_PATTERN = (
    r"(?:януари|февруари|март|април|май|юни|юли|август|септември|октомври|ноември|декември|"
    r"january|february|march|april|may|june|july|august|september|october|november|december)"
)
TAIL = r"(?:\s+|$)"

DEFAULT_TITLE_PATTERNS: list[str] = [
    rf"\s+{RELATIVE_DAY_PATTERN}\s+{TIME_PATTERN}{TAIL}",
    rf"\s+{NUMERIC_DATE_PATTERN}\s+{TIME_PATTERN}{TAIL}",
    rf"\s+{NUMERIC_DATE_PATTERN}{TAIL}",
    rf"\s+{TIME_PATTERN}{TAIL}",
    rf"\s+{RELATIVE_DAY_PATTERN}{TAIL}",
    rf"\s+(?:\d{{1,2}}\s+)?{MONTH_NAME_PATTERN}\s+\d{{4}}(?:\s*г\.)?{TAIL}",
]

# Trailing run of two or more capitalised Cyrillic words, e.g. "... Иван Петров".
AUTHOR_SUFFIX_PATTERN = re.compile(r"(?:\s+|^)([А-Я][а-я]+\s+[А-Я][а-я]+(?:\s+[А-Я][а-я]+)*)\s*$")
MIN_TITLE_UPPERCASE = 4


def compile_title_patterns(patterns: Sequence[str]) -> List[Pattern[str]]:
    compiled: List[Pattern[str]] = []
    for raw in patterns:
        try:
            compiled.append(re.compile(raw, re.IGNORECASE))
        except re.error as exc:
            LOGGER.warning("Skipping invalid title pattern %r: %s", raw, exc)
    return compiled


def load_title_patterns(path: Path | None) -> List[Pattern[str]]:
    """Read one regex per line (blank lines and '#' comments ignored).

    Falls back to the built-in patterns when the file is absent or yields nothing usable.
    """
    if path is None:
        return compile_title_patterns(DEFAULT_TITLE_PATTERNS)
    if not path.exists():
        LOGGER.warning("Title pattern file %s not found; using built-in patterns.", path)
        return compile_title_patterns(DEFAULT_TITLE_PATTERNS)
    with path.open("r", encoding="utf-8") as handle:
        lines = [line.strip() for line in handle]
    compiled = compile_title_patterns([line for line in lines if line and not line.startswith("#")])
    if not compiled:
        LOGGER.warning("Title pattern file %s had no usable patterns; using built-in patterns.", path)
        return compile_title_patterns(DEFAULT_TITLE_PATTERNS)
    return compiled


def count_words(title: str | None) -> int:
    if not title:
        return 0
    return len(title.split())


def split_author(title: str) -> tuple[str, str | None]:
    """Best-effort split of a trailing author name off a headline.

    Known to misfire on short headlines made only of capitalised words; the
    whole title can be taken as the author in that case.
    """
    match = AUTHOR_SUFFIX_PATTERN.search(title)
    if not match:
        return title, None
    if sum(1 for char in title if char.isupper()) < MIN_TITLE_UPPERCASE:
        return title, None
    candidate = match.group(1).strip()
    words = candidate.split()
    if len(words) >= 2 and all(word[0].isupper() and word[1:].islower() for word in words):
        return title[: match.start()].strip(), candidate
    return title, None


@dataclass
class NormalizedTitle:
    title: str
    word_count: int
    author: str | None = None


class TitleNormalizer:
    def __init__(
        self,
        patterns: Sequence[Pattern[str]] | None = None,
        detect_author: bool = True,
    ) -> None:
        self.patterns = list(patterns) if patterns is not None else compile_title_patterns(DEFAULT_TITLE_PATTERNS)
        self.detect_author = detect_author

    def clean(self, title: str | None) -> str:
        """Strip timestamp noise until a full pass over all patterns is a no-op."""
        cleaned = (title or "").strip()
        while True:
            previous = cleaned
            for pattern in self.patterns:
                cleaned = pattern.sub(" ", cleaned)
            cleaned = cleaned.strip()
            if cleaned == previous:
                return cleaned

    def normalize(self, title: str | None) -> NormalizedTitle:
        cleaned = self.clean(title)
        author = None
        if self.detect_author:
            cleaned, author = split_author(cleaned)
        return NormalizedTitle(title=cleaned, word_count=count_words(cleaned), author=author)
