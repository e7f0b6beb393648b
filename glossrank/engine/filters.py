"""Filter configuration for the ranking engine.

A filter is a list of tiers, most significant first. Each tier holds
filter items that either name a literal definition flag or one of the
predicates defined here.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from .kana import as_hiragana, is_kana
from .models import Context, Definition, DictionaryEntry, SourceKind

# JMdict usage/register flags
ARCHAIC = "&arch;"
OBSOLETE = "&obs;"
RARE = "&rare;"
OBSCURE = "&obsc;"
USUALLY_KANA = "&uk;"


class Predicate(ABC):
    """Test whether a definition is relevant to a word occurrence."""

    name: str = ""

    @abstractmethod
    def matches(
        self,
        definition: Definition,
        entry: DictionaryEntry,
        context: Context
    ) -> bool:
        """Return True when the definition matches."""

    def to_dict(self) -> dict[str, Any]:
        return {"predicate": self.name}

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(self.to_dict().items()))))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PartOfSpeechMatch(Predicate):
    """The word's part of speech is one the definition is listed under."""

    name = "pos_match"

    def matches(self, definition, entry, context):
        return context.pos in definition.pos


class UsuallyKana(Predicate):
    """The word is written in kana and the sense is usually written in kana."""

    name = "usually_kana"

    def matches(self, definition, entry, context):
        return USUALLY_KANA in definition.flags and is_kana(context.word)


class ReadingMatch(Predicate):
    """The analyzer's reading is one of the entry's readings."""

    name = "reading_match"

    def matches(self, definition, entry, context):
        reading = as_hiragana(context.reading)
        return any(as_hiragana(r) == reading for r in entry.readings)


class FormMatch(Predicate):
    """The surface word is one of the entry's spellings."""

    name = "form_match"

    def matches(self, definition, entry, context):
        return context.word in entry.forms


class SourceIs(Predicate):
    """The entry comes from the given dictionary."""

    name = "source"

    def __init__(self, kind: SourceKind):
        self.kind = kind

    def matches(self, definition, entry, context):
        return entry.source.kind == self.kind

    def to_dict(self) -> dict[str, Any]:
        return {"predicate": self.name, "value": self.kind.value}

    def __repr__(self) -> str:
        return f"SourceIs({self.kind.value!r})"


PREDICATES: dict[str, type[Predicate]] = {
    PartOfSpeechMatch.name: PartOfSpeechMatch,
    UsuallyKana.name: UsuallyKana,
    ReadingMatch.name: ReadingMatch,
    FormMatch.name: FormMatch,
    SourceIs.name: SourceIs,
}


@dataclass(frozen=True)
class FilterItem:
    """A weighted test applied to an entry's definitions."""
    tag: str | Predicate
    weight: int

    def matches(
        self,
        definition: Definition,
        entry: DictionaryEntry,
        context: Context
    ) -> bool:
        if isinstance(self.tag, str):
            return self.tag in definition.flags
        return self.tag.matches(definition, entry, context)

    def describe(self) -> str:
        """Short label for score breakdowns."""
        if isinstance(self.tag, str):
            return self.tag
        return self.tag.name


FilterTier = list[FilterItem]
Filter = list[FilterTier]


class FilterProfile(Enum):
    """Predefined filters for common reading situations."""
    DEFAULT = "default"      # Part of speech first, then penalize dated senses
    KANA = "kana"            # Prefer usually-kana senses for kana words
    WANIKANI = "wanikani"    # Prefer WaniKani entries over JMdict
    READING = "reading"      # Prefer entries whose reading the analyzer agrees with


def _default_tiers() -> Filter:
    return [
        [FilterItem(PartOfSpeechMatch(), 1)],
        [
            FilterItem(ARCHAIC, -1),
            FilterItem(OBSOLETE, -1),
            FilterItem(RARE, -1),
            FilterItem(OBSCURE, -1),
        ],
    ]


def get_profile_filter(profile: FilterProfile = FilterProfile.DEFAULT) -> Filter:
    """Build a fresh filter for a predefined profile."""
    if profile == FilterProfile.KANA:
        return [[FilterItem(UsuallyKana(), 1)]] + _default_tiers()
    if profile == FilterProfile.WANIKANI:
        return [[FilterItem(SourceIs(SourceKind.WANIKANI), 1)]] + _default_tiers()
    if profile == FilterProfile.READING:
        return [[FilterItem(ReadingMatch(), 1)]] + _default_tiers()
    return _default_tiers()


def _item_from_dict(data: Any, location: str) -> FilterItem:
    if not isinstance(data, dict):
        raise ValueError(f"{location}: filter item must be an object")

    weight = data.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise ValueError(f"{location}: 'weight' must be an integer")

    if "tag" in data and "predicate" in data:
        raise ValueError(f"{location}: use either 'tag' or 'predicate', not both")

    if "tag" in data:
        tag = data["tag"]
        if not isinstance(tag, str) or not tag:
            raise ValueError(f"{location}: 'tag' must be a non-empty string")
        return FilterItem(tag, weight)

    name = data.get("predicate")
    if not isinstance(name, str) or name not in PREDICATES:
        valid = ", ".join(sorted(PREDICATES))
        raise ValueError(f"{location}: unknown predicate {name!r}. Valid predicates: {valid}")

    if name == SourceIs.name:
        value = data.get("value")
        kinds = {k.value.lower(): k for k in SourceKind}
        if not isinstance(value, str) or value.lower() not in kinds:
            raise ValueError(
                f"{location}: 'source' predicate needs 'value' of "
                f"{', '.join(k.value for k in SourceKind)}"
            )
        return FilterItem(SourceIs(kinds[value.lower()]), weight)

    return FilterItem(PREDICATES[name](), weight)


def filter_from_dict(data: Any) -> Filter:
    """Build a filter from its JSON form.

    Args:
        data: Mapping with a ``tiers`` list; each tier is a list of items
              such as ``{"tag": "&arch;", "weight": -1}`` or
              ``{"predicate": "pos_match", "weight": 1}``

    Returns:
        Filter with tiers in the given order

    Raises:
        ValueError: If the structure, a predicate name or a weight is invalid
    """
    if not isinstance(data, dict) or not isinstance(data.get("tiers"), list):
        raise ValueError("filter must be an object with a 'tiers' list")

    result: Filter = []
    for t, tier in enumerate(data["tiers"]):
        if not isinstance(tier, list):
            raise ValueError(f"tier {t}: must be a list of filter items")
        result.append([
            _item_from_dict(item, f"tier {t}, item {i}")
            for i, item in enumerate(tier)
        ])
    return result


def filter_to_dict(filter_: Filter) -> dict[str, Any]:
    """Convert a filter back to its JSON form."""
    tiers = []
    for tier in filter_:
        items = []
        for item in tier:
            if isinstance(item.tag, str):
                entry: dict[str, Any] = {"tag": item.tag}
            else:
                entry = item.tag.to_dict()
            entry["weight"] = item.weight
            items.append(entry)
        tiers.append(items)
    return {"tiers": tiers}


def load_filter(path: str | Path) -> Filter:
    """Load a filter from a JSON file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Filter file {path} is not valid JSON: {e}") from e
    return filter_from_dict(data)
