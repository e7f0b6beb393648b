"""Markdown output formatter for ranked selections.

Generates a word table suitable for study notes.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from ..engine.models import Context
from ..engine.ranker import Selection

_MD_SPECIAL = re.compile(r'([\\`*_\{\}\[\]()#+\-.!|])')


def _escape_md(text: str) -> str:
    """Escape markdown special characters in dictionary-derived text."""
    return _MD_SPECIAL.sub(r'\\\1', text)


def _escape_url(url: str) -> str:
    """Percent-encode characters that end a link target or a table cell."""
    return url.replace("|", "%7C").replace("(", "%28").replace(")", "%29").replace(" ", "%20")


class MarkdownOutput:
    """Markdown output formatter."""

    def generate(
        self,
        results: list[tuple[Context, Selection]],
        profile: str = "default",
        source: str | None = None,
        include_examples: bool = True
    ) -> str:
        """Generate a markdown report.

        Args:
            results: Pairs of analyzed word and its selection
            profile: Active filter profile name
            source: Input file name or 'stdin'
            include_examples: Whether to include the examples column

        Returns:
            Markdown formatted string
        """
        sections = [self._generate_header(profile, source, len(results))]
        sections.append(self._generate_table(results, include_examples))
        return "\n\n".join(sections) + "\n"

    def save(
        self,
        results: list[tuple[Context, Selection]],
        output_path: str | Path,
        **kwargs
    ) -> None:
        """Save markdown report to file.

        Args:
            results: Pairs of analyzed word and its selection
            output_path: Path to save the report
            **kwargs: Additional arguments passed to generate()
        """
        content = self.generate(results, **kwargs)
        Path(output_path).write_text(content, encoding='utf-8')

    def _generate_header(self, profile: str, source: str | None, count: int) -> str:
        lines = [
            "# Vocabulary",
            "",
            f"**Generated:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Profile:** {profile}",
            f"**Words:** {count}",
        ]
        if source:
            lines.append(f"**Source:** {_escape_md(source)}")
        return "\n".join(lines)

    def _generate_table(
        self,
        results: list[tuple[Context, Selection]],
        include_examples: bool
    ) -> str:
        columns = ["Word", "Count", "Reading", "Part of Speech", "Definition"]
        if include_examples:
            columns.append("Examples")
        columns.append("Audio")

        lines = [
            "| " + " | ".join(columns) + " |",
            "|" + "|".join("---" for _ in columns) + "|",
        ]

        for context, selection in results:
            definitions = "<br>".join(_escape_md(d.text) for d in selection.definitions)
            cells = [
                _escape_md(context.word),
                str(context.count),
                _escape_md(", ".join(sorted(selection.readings))),
                context.pos.value,
                definitions,
            ]
            if include_examples:
                cells.append("<br><br>".join(
                    f"{_escape_md(ex.foreign_text)}<br>{_escape_md(ex.native_text)}"
                    for ex in selection.examples
                ))
            cells.append(" ".join(f"[audio]({_escape_url(url)})" for url in selection.audio) or "none")
            lines.append("| " + " | ".join(cells) + " |")

        return "\n".join(lines)
