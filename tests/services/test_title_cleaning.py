from __future__ import annotations

import re
from pathlib import Path

from src.services import title_cleaning
from src.services.title_cleaning import TitleNormalizer, count_words, split_author


def test_relative_day_and_time_are_stripped() -> None:
    normalized = TitleNormalizer().normalize("Election results announced Yesterday 18:45")
    assert normalized.title == "Election results announced"
    assert normalized.word_count == 3


def test_bulgarian_timestamps_are_stripped() -> None:
    normalizer = TitleNormalizer()
    assert normalizer.clean("Парламентът прие бюджета Вчера 18:45") == "Парламентът прие бюджета"
    assert normalizer.clean("Парламентът прие бюджета 25.02.2024 18:45") == "Парламентът прие бюджета"
    assert normalizer.clean("Парламентът прие бюджета 25.02.2024") == "Парламентът прие бюджета"
    assert normalizer.clean("Парламентът прие бюджета 3 март 2024") == "Парламентът прие бюджета"


def test_cleaning_repeats_until_nothing_changes() -> None:
    # Adjacent matches share the separating space, so one pass leaves the second time behind.
    normalizer = TitleNormalizer()
    single_pass = "Новини 18:45 12:30"
    for pattern in normalizer.patterns:
        single_pass = pattern.sub(" ", single_pass).strip()
    assert single_pass == "Новини 12:30"
    assert normalizer.clean("Новини 18:45 12:30") == "Новини"


def test_clean_title_is_left_untouched() -> None:
    normalizer = TitleNormalizer()
    title = "Правителството обсъжда нов закон за медиите"
    assert normalizer.clean(title) == title
    assert normalizer.clean(normalizer.clean(title)) == title


def test_word_count_tracks_cleaned_title() -> None:
    normalized = TitleNormalizer().normalize("  Кратко заглавие   днес  ")
    assert normalized.title == "Кратко заглавие"
    assert normalized.word_count == count_words(normalized.title) == 2
    assert count_words("") == 0
    assert count_words(None) == 0


def test_author_suffix_split_when_title_has_enough_capitals() -> None:
    title, author = split_author("Бюджетът на НС е приет Иван Петров")
    assert title == "Бюджетът на НС е приет"
    assert author == "Иван Петров"


def test_author_suffix_ignored_with_too_few_capitals() -> None:
    title, author = split_author("Бюджетът е приет Иван Петров")
    assert title == "Бюджетът е приет Иван Петров"
    assert author is None


def test_load_title_patterns_reads_file_and_skips_comments(tmp_path: Path) -> None:
    path = tmp_path / "patterns.txt"
    path.write_text("# site-specific noise\n\n\\s+EXCLUSIVE$\n([\n", encoding="utf-8")
    patterns = title_cleaning.load_title_patterns(path)
    assert [p.pattern for p in patterns] == [r"\s+EXCLUSIVE$"]
    assert patterns[0].flags & re.IGNORECASE
    assert TitleNormalizer(patterns).clean("Big story exclusive") == "Big story"


def test_load_title_patterns_falls_back_to_defaults(tmp_path: Path) -> None:
    patterns = title_cleaning.load_title_patterns(tmp_path / "missing.txt")
    assert [p.pattern for p in patterns] == title_cleaning.DEFAULT_TITLE_PATTERNS
