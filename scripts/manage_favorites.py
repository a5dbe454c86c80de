#!/usr/bin/env python3
"""
List, add or remove saved favorite articles.

Usage:
    python3 scripts/manage_favorites.py list
    python3 scripts/manage_favorites.py remove --url https://www.mediapool.bg/example.html
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from src.services.favorites import main  # noqa: E402


if __name__ == "__main__":
    raise SystemExit(main())
