"""Definition ranking engine.

Scores candidate dictionary entries against a word occurrence using a
tiered filter, then picks definitions, audio and readings from the best
scoring entries with per-field fallback to lower tiers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any

from .filters import Filter, FilterProfile, get_profile_filter
from .models import Context, Definition, DictionaryEntry, Example

logger = logging.getLogger(__name__)


@dataclass
class Selection:
    """Best definitions, examples, audio and readings for one word."""
    definitions: list[Definition] = field(default_factory=list)
    examples: list[Example] = field(default_factory=list)
    audio: list[str] = field(default_factory=list)
    readings: set[str] = field(default_factory=set)


def score(entry: DictionaryEntry, filter_: Filter, context: Context) -> tuple[int, ...]:
    """Score an entry against every tier of a filter.

    Each filter item contributes its weight at most once, on the first
    definition it matches.

    Returns:
        One score per tier, most significant first
    """
    scores = []
    for tier in filter_:
        total = 0
        for item in tier:
            for definition in entry.definitions:
                if item.matches(definition, entry, context):
                    total += item.weight
                    break
        scores.append(total)
    return tuple(scores)


def compare(a: tuple[int, ...], b: tuple[int, ...]) -> int:
    """Compare two score vectors lexicographically.

    Returns:
        Negative if a ranks below b, zero if equal, positive if a ranks above b
    """
    # Vectors from one filter always share a length
    if len(a) != len(b):
        return len(a) - len(b)
    for x, y in zip(a, b):
        if x != y:
            return x - y
    return 0


def rank_entries(
    context: Context,
    filter_: Filter
) -> list[tuple[DictionaryEntry, tuple[int, ...]]]:
    """Score all candidate entries and sort them best first.

    Entries with equal scores keep their input order.
    """
    scored = [(entry, score(entry, filter_, context)) for entry in context.dict_info]
    key = cmp_to_key(compare)
    scored.sort(key=lambda pair: key(pair[1]), reverse=True)
    return scored


def select(context: Context, filter_: Filter) -> Selection:
    """Select definitions, examples, audio and readings for a word.

    Entries are walked best first in groups of equal score. Each field is
    filled from the first group that has anything for it, so audio may come
    from a lower group than the definitions.

    Args:
        context: Analyzed word with its candidate entries
        filter_: Tiered filter to score entries with

    Returns:
        Fresh Selection; readings fall back to the analyzer's reading
    """
    result = Selection()
    ranked = rank_entries(context, filter_)

    if ranked:
        current = ranked[0][1]
        need_definitions = True
        need_audio = True
        need_readings = True

        for entry, weight in ranked:
            if compare(current, weight) > 0:
                # Entering a lower group: fields already filled stop here
                current = weight
                if result.definitions:
                    need_definitions = False
                if result.audio:
                    need_audio = False
                if result.readings:
                    need_readings = False

            if need_definitions:
                result.definitions.extend(entry.definitions)
                result.examples.extend(entry.examples)
            if need_audio and entry.audio:
                result.audio.extend(entry.audio)
            if need_readings:
                result.readings.update(entry.readings)

    if not result.readings:
        result.readings.add(context.reading)

    # A reading identical to the word itself wins over the rest.
    # e.g. そした also lists しかした, which belongs to another homograph.
    if context.word in result.readings:
        result.readings = {context.word}

    logger.debug(
        "Selected %d definitions, %d audio, %d readings for %r",
        len(result.definitions), len(result.audio), len(result.readings), context.word
    )
    return result


class Ranker:
    """Picks the best dictionary information for analyzed words."""

    def __init__(
        self,
        profile: FilterProfile = FilterProfile.DEFAULT,
        custom_filter: Filter | None = None
    ):
        """Initialize ranker with a filter.

        Args:
            profile: Predefined filter profile to use
            custom_filter: Optional filter (overrides profile)
        """
        self.profile = profile
        self.filter = custom_filter if custom_filter is not None else get_profile_filter(profile)

    def select(self, context: Context) -> Selection:
        """Select the best dictionary information for one word."""
        return select(context, self.filter)

    def select_all(self, contexts: list[Context]) -> list[tuple[Context, Selection]]:
        """Select dictionary information for every word, keeping input order."""
        return [(ctx, self.select(ctx)) for ctx in contexts]

    def rank(self, context: Context) -> list[DictionaryEntry]:
        """Return the candidate entries of a word, best first."""
        return [entry for entry, _ in rank_entries(context, self.filter)]

    def get_score(self, entry: DictionaryEntry, context: Context) -> tuple[int, ...]:
        """Get the tier scores of a single entry."""
        return score(entry, self.filter, context)

    def get_score_breakdown(self, context: Context) -> list[dict[str, Any]]:
        """Get the scores of every entry with the items that matched.

        Args:
            context: Analyzed word to explain

        Returns:
            One dictionary per entry, best first, with the entry source,
            its tier scores and the labels of matched items per tier
        """
        breakdown = []
        for entry, weight in rank_entries(context, self.filter):
            matched = []
            for tier in self.filter:
                labels = []
                for item in tier:
                    if any(item.matches(d, entry, context) for d in entry.definitions):
                        labels.append(f"{item.describe()} ({item.weight:+d})")
                matched.append(labels)
            breakdown.append({
                "source": str(entry.source),
                "forms": list(entry.forms),
                "scores": list(weight),
                "matched": matched,
            })
        return breakdown


def select_best(
    context: Context,
    profile: FilterProfile = FilterProfile.DEFAULT
) -> Selection:
    """Convenience function to select with a predefined profile.

    Args:
        context: Analyzed word
        profile: Filter profile to use

    Returns:
        Selection for the word
    """
    ranker = Ranker(profile=profile)
    return ranker.select(context)
