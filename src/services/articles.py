from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.services.categories import DEFAULT_CATEGORY, category_symbol
from src.services.date_parsing import NOT_AVAILABLE
from src.services.title_cleaning import count_words


@dataclass
class RawArticle:
    """Fields as found on the listing page and, optionally, the detail page."""

    title: str
    url: str
    raw_date_time: str
    category_hint: str = ""
    author: str = ""
    from_detail: bool = False


@dataclass(eq=False)
class Article:
    title: str
    url: str
    raw_date_time: str = ""
    formatted_date: str = NOT_AVAILABLE
    formatted_time: str = NOT_AVAILABLE
    category: str = DEFAULT_CATEGORY
    author: str | None = None
    is_favorite: bool = False

    @property
    def word_count(self) -> int:
        return count_words(self.title)

    @property
    def category_symbol(self) -> str:
        return category_symbol(self.category)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Article):
            return NotImplemented
        return bool(self.url) and self.url == other.url

    def __hash__(self) -> int:
        return hash(self.url)

    def to_serializable(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "raw_date_time": self.raw_date_time,
            "formatted_date": self.formatted_date,
            "formatted_time": self.formatted_time,
            "category": self.category,
            "category_symbol": self.category_symbol,
            "author": self.author,
            "word_count": self.word_count,
            "is_favorite": self.is_favorite,
        }
