#!/usr/bin/env python3
"""
Entry point used to scrape the configured news listing page.

Usage:
    python3 scripts/scrape_news.py --base-url https://www.mediapool.bg/ --max-workers 4
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.services.news_scraper import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
