"""JSON output formatter for ranked selections.

Generates structured JSON for programmatic use (e.g. flashcard builders).
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from .. import __version__
from ..engine.filters import filter_to_dict
from ..engine.models import Context
from ..engine.ranker import Ranker, Selection


class JSONOutput:
    """JSON output formatter."""

    def __init__(self, ranker: Ranker | None = None, profile: str | None = None):
        """Initialize JSON output.

        Args:
            ranker: Ranker whose filter is reported and used for score breakdowns
            profile: Label for the active filter (defaults to the ranker's profile)
        """
        self.ranker = ranker or Ranker()
        self.profile = profile or self.ranker.profile.value

    def generate(
        self,
        results: list[tuple[Context, Selection]],
        include_scores: bool = False
    ) -> dict:
        """Generate JSON-serializable dictionary.

        Args:
            results: Pairs of analyzed word and its selection
            include_scores: Whether to include per-entry score breakdowns

        Returns:
            Dictionary ready for JSON serialization
        """
        result: dict[str, Any] = {
            "metadata": {
                "generated_at": datetime.now().isoformat(),
                "tool": "glossrank",
                "version": __version__,
                "profile": self.profile,
                "total_words": len(results),
            },
            "filter": filter_to_dict(self.ranker.filter),
            "words": [
                self._word_to_dict(context, selection, include_scores)
                for context, selection in results
            ],
        }
        return result

    def to_json(
        self,
        results: list[tuple[Context, Selection]],
        indent: int = 2,
        **kwargs
    ) -> str:
        """Generate JSON string.

        Args:
            results: Pairs of analyzed word and its selection
            indent: JSON indentation level
            **kwargs: Additional arguments passed to generate()

        Returns:
            JSON formatted string
        """
        data = self.generate(results, **kwargs)
        return json.dumps(data, indent=indent, ensure_ascii=False, default=str)

    def save(
        self,
        results: list[tuple[Context, Selection]],
        output_path: str | Path,
        **kwargs
    ) -> None:
        """Save JSON report to file."""
        content = self.to_json(results, **kwargs)
        Path(output_path).write_text(content, encoding='utf-8')

    def _word_to_dict(
        self,
        context: Context,
        selection: Selection,
        include_scores: bool
    ) -> dict:
        """Convert a word and its selection to a dictionary."""
        result: dict[str, Any] = {
            "word": context.word,
            "reading": context.reading,
            "pos": context.pos.value,
            "count": context.count,
            "candidates": len(context.dict_info),
            "selection": {
                "readings": sorted(selection.readings),
                "definitions": [
                    {
                        "text": d.text,
                        "pos": [p.value for p in d.pos],
                        "flags": list(d.flags),
                    }
                    for d in selection.definitions
                ],
                "examples": [
                    {
                        "for_definition": ex.for_definition,
                        "ja": ex.foreign_text,
                        "en": ex.native_text,
                    }
                    for ex in selection.examples
                ],
                "audio": list(selection.audio),
            },
        }

        if include_scores:
            result["score_breakdown"] = self.ranker.get_score_breakdown(context)

        return result
