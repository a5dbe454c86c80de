"""
Ordered classification table that maps a section label and/or article URL to a
(category, symbol) pair. Rules are evaluated top to bottom and the first match
wins, so narrower topics (elections, wars, named series) sit above the broad
sections that would otherwise swallow them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

DEFAULT_CATEGORY = "Други"

CATEGORY_SYMBOLS: dict[str, str] = {
    "Евроизбори 2024": "🇪🇺",
    "Парламентарни избори": "🗳️",
    "Война в Украйна": "⚔️",
    "Израел срещу Хамас": "🕊️",
    "Дело срещу Mediapool": "⚖️",
    "Еврокомпас": "🧭",
    "Greenpool": "🌿",
    "НАТО": "🛡️",
    "Европейски съюз": "🇪🇺",
    "САЩ": "🇺🇸",
    "Русия": "🇷🇺",
    "Украйна": "🇺🇦",
    "Свят": "🌍",
    "България": "🇧🇬",
    "Спорт": "⚽",
    "Бизнес": "💼",
    "Култура": "🎭",
    "Общество": "👥",
    "Политика": "🏛️",
    "Технологии": "💻",
    "Здраве": "🏥",
    DEFAULT_CATEGORY: "📰",
}


@dataclass(frozen=True)
class CategoryRule:
    category: str
    needles: tuple[str, ...]

    def matches(self, label: str, url: str) -> bool:
        if label and label == self.category.lower():
            return True
        return any(needle in url for needle in self.needles)


CATEGORY_RULES: list[CategoryRule] = [
    # "evroizbori" contains "izbori", keep it above the parliamentary rule.
    CategoryRule("Евроизбори 2024", ("evroizbori", "euro-election", "european-election")),
    CategoryRule("Парламентарни избори", ("izbori", "-izbor", "/election", "-election", "election-")),
    CategoryRule("Война в Украйна", ("voyna-v-ukrayna", "war-in-ukraine", "ukraine-war")),
    CategoryRule("Израел срещу Хамас", ("hamas", "izrael-sreshtu")),
    CategoryRule("Дело срещу Mediapool", ("delo-sreshtu-mediapool",)),
    CategoryRule("Еврокомпас", ("evrokompas",)),
    CategoryRule("Greenpool", ("greenpool",)),
    CategoryRule("НАТО", ("/nato", "-nato-", "nato-")),
    CategoryRule("Европейски съюз", ("evropeyski-sayuz", "european-union", "/eu-")),
    CategoryRule("САЩ", ("/sasht", "-sasht", "usa-")),
    CategoryRule("Русия", ("rusiya", "russia")),
    CategoryRule("Украйна", ("ukrayna", "ukraine")),
    CategoryRule("Свят", ("/svyat", "/world", "world-", "-world", "international")),
    CategoryRule("България", ("/bulgaria", "bulgaria-", "-bulgaria", "/bg/", "-bg-")),
    CategoryRule("Спорт", ("/sport", "sport-", "-sport", "football", "olympics")),
    CategoryRule(
        "Бизнес",
        ("/business", "business-", "-business", "economy", "finance", "-byudzhet", "byudzhet-", "/pari"),
    ),
    CategoryRule(
        "Култура",
        ("/culture", "culture-", "-culture", "music", "cinema", "theatre", "kultura"),
    ),
    CategoryRule("Общество", ("/obshtestvo", "obshtestvo-", "society")),
    CategoryRule("Политика", ("politik", "parliament", "government")),
    CategoryRule("Технологии", ("tech", "digital", "software", "hardware", "-ai-")),
    CategoryRule("Здраве", ("health", "medicine", "covid", "hospital", "zdrave")),
]


def category_symbol(category: str) -> str:
    return CATEGORY_SYMBOLS.get(category, CATEGORY_SYMBOLS[DEFAULT_CATEGORY])


def classify(
    label: str | None,
    url: str | None,
    rules: Sequence[CategoryRule] = CATEGORY_RULES,
) -> tuple[str, str]:
    """Return the (category, symbol) pair of the first rule matching the label or URL."""
    label_norm = (label or "").strip().lower()
    url_norm = (url or "").lower()
    for rule in rules:
        if rule.matches(label_norm, url_norm):
            return rule.category, category_symbol(rule.category)
    return DEFAULT_CATEGORY, category_symbol(DEFAULT_CATEGORY)
