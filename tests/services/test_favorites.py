from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.services import favorites
from src.services.articles import Article
from src.services.favorites import FavoriteEntry, FavoritesStore, FavoritesStoreError


def make_article(url: str = "https://www.mediapool.bg/a.html", title: str = "Заглавие") -> Article:
    return Article(
        title=title,
        url=url,
        raw_date_time="25.02.2024 18:45",
        formatted_date="25 февруари 2024",
        formatted_time="18:45",
    )


def test_add_then_contains(tmp_path: Path) -> None:
    store = FavoritesStore(tmp_path / "favorites.json")
    article = make_article()
    assert store.add(article) is True
    assert store.contains(article.url)
    assert article.is_favorite is True


def test_add_remove_then_not_contains(tmp_path: Path) -> None:
    store = FavoritesStore(tmp_path / "favorites.json")
    article = make_article()
    store.add(article)
    assert store.remove(article.url) is True
    assert not store.contains(article.url)
    assert store.remove(article.url) is False


def test_duplicate_add_is_ignored(tmp_path: Path) -> None:
    store = FavoritesStore(tmp_path / "favorites.json")
    store.add(make_article())
    assert store.add(make_article(title="Друго заглавие")) is False
    assert [entry.title for entry in store.list_favorites()] == ["Заглавие"]


def test_every_mutation_is_persisted(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "favorites.json"
    store = FavoritesStore(path)
    store.add(make_article("https://www.mediapool.bg/a.html", "Първа"))
    store.add(make_article("https://www.mediapool.bg/b.html", "Втора"))
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert [item["url"] for item in payload] == [
        "https://www.mediapool.bg/a.html",
        "https://www.mediapool.bg/b.html",
    ]
    assert payload[0] == {
        "title": "Първа",
        "url": "https://www.mediapool.bg/a.html",
        "formatted_date": "25 февруари 2024",
        "formatted_time": "18:45",
    }

    store.remove("https://www.mediapool.bg/a.html")
    reloaded = FavoritesStore(path)
    assert [entry.url for entry in reloaded.list_favorites()] == ["https://www.mediapool.bg/b.html"]


def test_corrupt_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "favorites.json"
    path.write_text("{not json", encoding="utf-8")
    store = FavoritesStore(path)
    assert len(store) == 0


def test_failed_write_rolls_back_memory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = FavoritesStore(tmp_path / "favorites.json")

    def boom() -> None:
        raise OSError("disk full")

    monkeypatch.setattr(store, "_save", boom)
    with pytest.raises(FavoritesStoreError):
        store.add(make_article())
    assert not store.contains("https://www.mediapool.bg/a.html")


def test_cli_add_list_remove(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "favorites.json"
    base = ["--favorites-path", str(path)]
    assert favorites.main([*base, "add", "--url", "https://www.mediapool.bg/a.html", "--title", "Първа"]) == 0
    assert favorites.main([*base, "list"]) == 0
    assert "Първа" in capsys.readouterr().out
    assert favorites.main([*base, "remove", "--url", "https://www.mediapool.bg/a.html"]) == 0
    assert favorites.main([*base, "remove", "--url", "https://www.mediapool.bg/a.html"]) == 1
    assert FavoritesStore(path).list_favorites() == []


def test_entry_from_article_keeps_projection() -> None:
    entry = FavoriteEntry.from_article(make_article())
    assert entry.to_serializable() == FavoriteEntry.from_dict(entry.to_serializable()).to_serializable()
