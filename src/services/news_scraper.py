"""
Scrape the article listing of a single news site into classified, de-duplicated
article records. The module exposes a reusable `NewsScraper` plus the pieces it is
built from (candidate locator, field extractor, content filter, report writer) so
CLI scripts and tests can drive them independently.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional, Sequence
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag
from dotenv import load_dotenv

from src.services.articles import Article, RawArticle
from src.services.categories import category_symbol, classify
from src.services.config import DEFAULT_EXCLUDED_KEYWORDS, ConfigurationError, ScraperConfig, load_config
from src.services.date_parsing import DateParser
from src.services.favorites import FavoritesStore
from src.services.fetching import FetchError, HttpFetcher
from src.services.title_cleaning import TitleNormalizer, load_title_patterns

LOGGER = logging.getLogger(__name__)

# Candidate groups, tried in order; the first group with any match wins.
CANDIDATE_SELECTOR_GROUPS: list[tuple[str, str]] = [
    (
        "sections",
        "div[class*='leading-news'] article, "
        "div[class*='regular-news'] article, "
        "div[class*='latest-news'] article",
    ),
    ("any-article", "article"),
]

LINK_SELECTORS = ("h2 > a", "h3 > a", "a[class*='title']", "a")
UNTITLED = "Untitled"
LIST_DATE_FALLBACK_FORMAT = "%Y-%m-%d %H:%M"

FieldStrategy = Callable[[Tag], Optional[str]]


def text_of(selector: str) -> FieldStrategy:
    def extract(node: Tag) -> str | None:
        found = node.select_one(selector)
        if found is None:
            return None
        return found.get_text(" ", strip=True) or None

    return extract


def attr_of(selector: str, attr: str) -> FieldStrategy:
    def extract(node: Tag) -> str | None:
        found = node.select_one(selector)
        if found is None:
            return None
        value = found.get(attr)
        if isinstance(value, list):
            value = " ".join(value)
        return value.strip() if value and value.strip() else None

    return extract


def nth_text(selector: str, index: int) -> FieldStrategy:
    def extract(node: Tag) -> str | None:
        found = node.select(selector)
        if len(found) <= index:
            return None
        return found[index].get_text(" ", strip=True) or None

    return extract


def first_present(node: Tag, strategies: Sequence[FieldStrategy]) -> str | None:
    for strategy in strategies:
        value = strategy(node)
        if value:
            return value
    return None


LIST_DATE_STRATEGIES: list[FieldStrategy] = [
    attr_of("time[datetime]", "datetime"),
    text_of("[class*='date']"),
]
LIST_CATEGORY_STRATEGIES: list[FieldStrategy] = [
    text_of("a[class*='category']"),
]
DETAIL_TITLE_STRATEGIES: list[FieldStrategy] = [
    text_of("h1[class*='c-heading']"),
    text_of("h1"),
]
DETAIL_CATEGORY_STRATEGIES: list[FieldStrategy] = [
    nth_text("nav[class*='breadcrumb'] a", 1),
    text_of("a[class*='article-category']"),
]
DETAIL_DATE_STRATEGIES: list[FieldStrategy] = [
    attr_of("time[datetime]", "datetime"),
    text_of("[class*='article__timestamp']"),
    text_of("[class*='article__date']"),
    text_of("[class*='u-highlight-insignificant']"),
]
DETAIL_AUTHOR_STRATEGIES: list[FieldStrategy] = [
    text_of("[class*='c-article__author']"),
    text_of("a[rel*='author']"),
]


def locate_candidates(soup: BeautifulSoup) -> List[Tag]:
    """Return listing entries from the first selector group that matches anything."""
    for name, selector in CANDIDATE_SELECTOR_GROUPS:
        nodes = soup.select(selector)
        if nodes:
            if name != CANDIDATE_SELECTOR_GROUPS[0][0]:
                LOGGER.warning("Primary selectors failed, using fallback %r selector.", name)
            LOGGER.debug("Selector group %s matched %s nodes", name, len(nodes))
            return list(nodes)
    return []


def describe_page(soup: BeautifulSoup) -> tuple[str | None, int]:
    title = soup.title.get_text(strip=True) if soup.title else None
    return title, len(soup.find_all("article"))


def find_link(node: Tag) -> Tag | None:
    for selector in LINK_SELECTORS:
        link = node.select_one(selector)
        if link is not None:
            return link
    return None


@dataclass
class Extraction:
    record: RawArticle | None
    error: str | None = None


class ArticleExtractor:
    """Build a `RawArticle` from one listing node, optionally enriched from its detail page."""

    def __init__(
        self,
        base_url: str,
        fetcher: HttpFetcher,
        fetch_details: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.base_url = base_url
        self.fetcher = fetcher
        self.fetch_details = fetch_details
        self.clock = clock

    def extract(self, node: Tag) -> Extraction:
        try:
            return Extraction(self._extract(node))
        except FetchError as exc:
            LOGGER.warning("Skipping article %s: %s", exc.url, exc)
            return Extraction(None, str(exc))
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Unexpected error processing article node: %s", exc, exc_info=True)
            return Extraction(None, f"{exc.__class__.__name__}: {exc}")

    def _extract(self, node: Tag) -> RawArticle | None:
        link = find_link(node)
        if link is None:
            LOGGER.debug("Candidate without link skipped")
            return None
        href = (link.get("href") or "").strip()
        if not href:
            LOGGER.debug("Candidate with empty href skipped")
            return None
        url = urljoin(self.base_url, href)

        list_title = link.get_text(" ", strip=True) or UNTITLED
        list_date = first_present(node, LIST_DATE_STRATEGIES) or self.clock().strftime(LIST_DATE_FALLBACK_FORMAT)
        list_category = first_present(node, LIST_CATEGORY_STRATEGIES) or ""
        if not self.fetch_details:
            return RawArticle(title=list_title, url=url, raw_date_time=list_date, category_hint=list_category)

        document = BeautifulSoup(self.fetcher.fetch(url), "html.parser")
        return RawArticle(
            title=first_present(document, DETAIL_TITLE_STRATEGIES) or list_title,
            url=url,
            raw_date_time=first_present(document, DETAIL_DATE_STRATEGIES) or list_date,
            category_hint=first_present(document, DETAIL_CATEGORY_STRATEGIES) or list_category,
            author=first_present(document, DETAIL_AUTHOR_STRATEGIES) or "",
            from_detail=True,
        )


class ArticleFilter:
    """Drop repeated URLs and topic-excluded headlines, keeping counts of both."""

    def __init__(self, excluded_keywords: Sequence[str] = DEFAULT_EXCLUDED_KEYWORDS) -> None:
        self.excluded_keywords = [kw.strip().lower() for kw in excluded_keywords if kw.strip()]
        self.seen_urls: set[str] = set()
        self.duplicates = 0
        self.excluded = 0
        self._lock = threading.Lock()

    def is_excluded(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.excluded_keywords)

    def accept(self, article: Article) -> bool:
        with self._lock:
            if article.url in self.seen_urls:
                self.duplicates += 1
                LOGGER.debug("Duplicate article skipped: %s", article.url)
                return False
            self.seen_urls.add(article.url)
            if self.is_excluded(article.title):
                self.excluded += 1
                LOGGER.debug("Excluded article skipped: %s", article.title)
                return False
            return True


@dataclass
class ScrapeResult:
    articles: list[Article] = field(default_factory=list)
    located: int = 0
    skipped: int = 0
    failed: int = 0
    excluded: int = 0
    duplicates: int = 0

    @property
    def processed(self) -> int:
        return self.located


class NewsScraper:
    """Fetch a listing page and turn its entries into favorite-tagged `Article`s."""

    def __init__(
        self,
        config: ScraperConfig,
        fetcher: HttpFetcher,
        favorites: FavoritesStore | None = None,
        title_normalizer: TitleNormalizer | None = None,
        date_parser: DateParser | None = None,
    ) -> None:
        config.validate()
        self.config = config
        self.fetcher = fetcher
        self.favorites = favorites
        self.title_normalizer = title_normalizer or TitleNormalizer(load_title_patterns(config.title_patterns_path))
        self.date_parser = date_parser or DateParser(language=config.language)
        self.extractor = ArticleExtractor(config.base_url, fetcher, fetch_details=config.fetch_details)

    def run(self) -> ScrapeResult:
        start_url = self.config.start_url
        LOGGER.info(
            "Starting scrape of %s (fetch_details=%s, max_workers=%s)",
            start_url,
            self.config.fetch_details,
            self.config.max_workers,
        )
        html = self.fetcher.fetch(start_url)
        LOGGER.info("Successfully loaded the listing page.")
        soup = self._parse_listing(html)
        nodes = locate_candidates(soup) if soup is not None else []
        result = ScrapeResult(located=len(nodes))
        if not nodes:
            page_title, article_tags = describe_page(soup) if soup is not None else (None, 0)
            LOGGER.warning(
                "No article nodes found on %s. Website structure might have changed "
                "(page title: %r, <article> tags: %s).",
                start_url,
                page_title,
                article_tags,
            )
            return result

        article_filter = ArticleFilter(self.config.excluded_keywords)
        for extraction in self._extract_all(nodes):
            if extraction.error:
                result.failed += 1
                continue
            if extraction.record is None:
                result.skipped += 1
                continue
            article = self.build_article(extraction.record)
            if not article_filter.accept(article):
                continue
            article.is_favorite = bool(self.favorites and self.favorites.contains(article.url))
            LOGGER.debug(
                "Added article [%s] from %s page: %s",
                article.category,
                "detail" if extraction.record.from_detail else "listing",
                article.title,
            )
            result.articles.append(article)
        result.excluded = article_filter.excluded
        result.duplicates = article_filter.duplicates

        LOGGER.info(
            "Scraping finished. Processed: %s, Added: %s, Skipped (excluded): %s, "
            "Skipped (duplicate): %s, Skipped (no link): %s, Failed: %s.",
            result.processed,
            len(result.articles),
            result.excluded,
            result.duplicates,
            result.skipped,
            result.failed,
        )
        if not result.articles:
            LOGGER.warning(
                "Processed %s article nodes but extracted 0 valid news items. "
                "Website structure might have changed.",
                result.processed,
            )
        return result

    def build_article(self, record: RawArticle) -> Article:
        normalized = self.title_normalizer.normalize(record.title)
        parsed = self.date_parser.parse(record.raw_date_time)
        category, _ = classify(record.category_hint, record.url)
        return Article(
            title=normalized.title,
            url=record.url,
            raw_date_time=record.raw_date_time,
            formatted_date=parsed.formatted_date,
            formatted_time=parsed.formatted_time,
            category=category,
            author=record.author or normalized.author or None,
        )

    @staticmethod
    def _parse_listing(html: str) -> BeautifulSoup | None:
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception:  # noqa: BLE001
            LOGGER.warning("Failed to parse listing page; treating as empty.", exc_info=True)
            return None

    def _extract_all(self, nodes: Sequence[Tag]) -> list[Extraction]:
        workers = self.config.max_workers
        if workers > 1 and self.config.fetch_details and len(nodes) > 1:
            LOGGER.info("Fetching %s detail pages with %s workers", len(nodes), workers)
            # map() yields in submission order, so document order survives out-of-order completion.
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(self.extractor.extract, nodes))
        return [self.extractor.extract(node) for node in nodes]


class JsonlReportWriter:
    """Persist the final article list as JSON lines for downstream rendering."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def render(self, articles: Sequence[Article]) -> Path | None:
        if not articles:
            LOGGER.info("No articles to store in report file.")
            return None
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"news_articles_{timestamp}.jsonl"
        with output_path.open("w", encoding="utf-8") as handle:
            for article in articles:
                handle.write(json.dumps(article.to_serializable(), ensure_ascii=False) + "\n")
        LOGGER.info("Wrote %s articles to %s", len(articles), output_path)
        return output_path


def summarize_categories(articles: Sequence[Article]) -> list[tuple[str, str, int]]:
    counts = Counter(article.category for article in articles)
    return [(category, category_symbol(category), count) for category, count in counts.most_common()]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Scrape, classify and de-duplicate news articles.")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Site origin used to resolve relative links (default: $NEWS_BASE_URL).",
    )
    parser.add_argument(
        "--listing-url",
        default=None,
        help="Listing page to scrape (default: the base URL).",
    )
    parser.add_argument(
        "--list-only",
        action="store_true",
        help="Use listing-page fields only; skip fetching each article's detail page.",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Concurrent detail-page fetches (default: 1, sequential).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 15).",
    )
    parser.add_argument(
        "--favorites-path",
        type=Path,
        default=None,
        help="JSON file holding favorite articles.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory to store JSONL output (default: datasets/news_scraper).",
    )
    parser.add_argument(
        "--exclude-keyword",
        action="append",
        default=[],
        help="Extra headline keyword to exclude (repeatable).",
    )
    parser.add_argument(
        "--title-patterns",
        type=Path,
        default=None,
        help="File with one title-cleaning regex per line (replaces the built-in set).",
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Do not write the JSONL report.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO).",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
        force=True,
    )
    LOGGER.info("Starting news scraper with args: %s", args)

    dotenv_loaded = load_dotenv(dotenv_path=Path(__file__).resolve().parents[2] / ".env")
    if dotenv_loaded:
        LOGGER.debug("Loaded environment variables from .env file.")

    try:
        config = load_config(
            base_url=args.base_url,
            listing_url=args.listing_url,
            fetch_details=False if args.list_only else None,
            max_workers=args.max_workers,
            request_timeout=args.timeout,
            favorites_path=args.favorites_path,
            output_dir=args.output_dir,
            excluded_keywords=[*DEFAULT_EXCLUDED_KEYWORDS, *args.exclude_keyword] if args.exclude_keyword else None,
            title_patterns_path=args.title_patterns,
        )
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    fetcher = HttpFetcher(timeout=config.request_timeout, max_retries=config.max_retries)
    favorites = FavoritesStore(config.favorites_path)
    scraper = NewsScraper(config, fetcher, favorites)
    try:
        result = scraper.run()
    except FetchError as exc:
        LOGGER.error("Failed to load listing page %s: %s", config.start_url, exc)
        return 1

    if not args.no_report:
        JsonlReportWriter(config.output_dir).render(result.articles)
    for category, symbol, count in summarize_categories(result.articles):
        LOGGER.info("%s %s: %s articles", symbol, category, count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
