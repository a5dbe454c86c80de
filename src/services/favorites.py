"""
Durable favorites list keyed by article URL.

The whole collection lives in one JSON document that is read once on startup and
rewritten in full after every add/remove, so a later reader never sees the
in-memory list and the file disagree.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from src.services.articles import Article
from src.services.date_parsing import NOT_AVAILABLE

LOGGER = logging.getLogger(__name__)

DEFAULT_FAVORITES_PATH = Path("datasets/news_scraper/favorites.json")


class FavoritesStoreError(RuntimeError):
    pass


@dataclass
class FavoriteEntry:
    title: str
    url: str
    formatted_date: str = NOT_AVAILABLE
    formatted_time: str = NOT_AVAILABLE

    @classmethod
    def from_article(cls, article: Article) -> "FavoriteEntry":
        return cls(
            title=article.title,
            url=article.url,
            formatted_date=article.formatted_date,
            formatted_time=article.formatted_time,
        )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "FavoriteEntry":
        return cls(
            title=str(payload.get("title") or ""),
            url=str(payload["url"]),
            formatted_date=str(payload.get("formatted_date") or NOT_AVAILABLE),
            formatted_time=str(payload.get("formatted_time") or NOT_AVAILABLE),
        )

    def to_serializable(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "formatted_date": self.formatted_date,
            "formatted_time": self.formatted_time,
        }


class FavoritesStore:
    def __init__(self, path: Path = DEFAULT_FAVORITES_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._entries: dict[str, FavoriteEntry] = self._load()
        LOGGER.debug("Loaded %s favorites from %s", len(self._entries), self.path)

    def __len__(self) -> int:
        return len(self._entries)

    def contains(self, url: str) -> bool:
        with self._lock:
            return url in self._entries

    def add(self, article: Article | FavoriteEntry) -> bool:
        """Persist a favorite; returns False when the URL is already stored."""
        entry = article if isinstance(article, FavoriteEntry) else FavoriteEntry.from_article(article)
        with self._lock:
            if entry.url in self._entries:
                LOGGER.info("Article already in favorites: %s", entry.title)
                return False
            self._entries[entry.url] = entry
            try:
                self._save()
            except OSError as exc:
                del self._entries[entry.url]
                raise FavoritesStoreError(f"Failed to persist favorites to {self.path}: {exc}") from exc
        if isinstance(article, Article):
            article.is_favorite = True
        LOGGER.info("Article added to favorites: %s", entry.title)
        return True

    def remove(self, url: str) -> bool:
        with self._lock:
            entries = dict(self._entries)
            removed = self._entries.pop(url, None)
            if removed is None:
                LOGGER.info("Article not found in favorites for removal: %s", url)
                return False
            try:
                self._save()
            except OSError as exc:
                self._entries = entries
                raise FavoritesStoreError(f"Failed to persist favorites to {self.path}: {exc}") from exc
        LOGGER.info("Article removed from favorites: %s", removed.title)
        return True

    def list_favorites(self) -> list[FavoriteEntry]:
        with self._lock:
            return list(self._entries.values())

    def _load(self) -> dict[str, FavoriteEntry]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except Exception:  # noqa: BLE001
            LOGGER.warning("Failed to read favorites at %s; starting fresh.", self.path, exc_info=True)
            return {}
        if not isinstance(payload, list):
            LOGGER.warning("Favorites file %s is not a JSON list; starting fresh.", self.path)
            return {}
        entries: dict[str, FavoriteEntry] = {}
        for item in payload:
            if not isinstance(item, dict) or not item.get("url"):
                LOGGER.debug("Skipping malformed favorite entry: %s", item)
                continue
            entry = FavoriteEntry.from_dict(item)
            entries.setdefault(entry.url, entry)
        return entries

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.to_serializable() for entry in self._entries.values()]
        with tempfile.NamedTemporaryFile("w", delete=False, dir=self.path.parent, encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)
            temp_name = handle.name
        os.replace(temp_name, self.path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect and edit saved favorite articles.")
    parser.add_argument(
        "--favorites-path",
        type=Path,
        default=Path(os.getenv("NEWS_FAVORITES_PATH", str(DEFAULT_FAVORITES_PATH))),
        help=f"JSON file holding favorites (default: {DEFAULT_FAVORITES_PATH}).",
    )
    parser.add_argument("--log-level", default="INFO", help="Python logging level (default: INFO).")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="Print every saved favorite.")
    add_parser = subparsers.add_parser("add", help="Save an article as favorite.")
    add_parser.add_argument("--url", required=True)
    add_parser.add_argument("--title", required=True)
    add_parser.add_argument("--date", default=NOT_AVAILABLE, help="Formatted publication date.")
    add_parser.add_argument("--time", default=NOT_AVAILABLE, help="Formatted publication time.")
    remove_parser = subparsers.add_parser("remove", help="Drop a favorite by URL.")
    remove_parser.add_argument("--url", required=True)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        force=True,
    )

    store = FavoritesStore(args.favorites_path)
    if args.command == "list":
        favorites = store.list_favorites()
        if not favorites:
            print("No favorite articles saved.")
        for idx, entry in enumerate(favorites, start=1):
            print(f"{idx}. {entry.title}")
            print(f"   {entry.formatted_date} {entry.formatted_time}")
            print(f"   {entry.url}")
        return 0
    try:
        if args.command == "add":
            store.add(FavoriteEntry(args.title, args.url, args.date, args.time))
        else:
            if not store.remove(args.url):
                return 1
    except FavoritesStoreError:
        LOGGER.exception("Favorites update failed.")
        return 1
    return 0
