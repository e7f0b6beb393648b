"""Analyzer output parser.

Turns the analyzer's JSON output (one record per analyzed word, each with
its candidate dictionary entries) into engine Context objects.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..engine.models import (
    Context,
    Definition,
    DictionaryEntry,
    Example,
    PartOfSpeech,
    Source,
    SourceKind,
)

logger = logging.getLogger(__name__)

_SOURCE_KINDS = {k.value.lower(): k for k in SourceKind}

MAX_FILE_SIZE = 100 * 1024 * 1024  # 100 MB


def read_analysis_file(path: str | Path) -> str:
    """Read an analyzer output file as text.

    Tries UTF-8 (with or without BOM), then UTF-16, then UTF-8 with
    replacement characters.

    Raises:
        ValueError: If the file exceeds MAX_FILE_SIZE
    """
    path = Path(path)
    file_size = path.stat().st_size
    if file_size > MAX_FILE_SIZE:
        raise ValueError(
            f"File exceeds {MAX_FILE_SIZE // (1024 * 1024)}MB limit ({file_size // (1024 * 1024)}MB)"
        )

    for encoding in ['utf-8-sig', 'utf-16']:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeError:
            continue

    return path.read_bytes().decode('utf-8', errors='replace')


def detect_input_format(content: str) -> str:
    """Auto-detect the layout of analyzer output.

    Args:
        content: File content to inspect

    Returns:
        One of: 'json' (array or single object), 'jsonl', 'unknown'
    """
    stripped = content.lstrip("\ufeff \t\r\n")
    if stripped.startswith("["):
        return "json"
    if stripped.startswith("{"):
        # Several top-level objects on separate lines means JSON Lines
        lines = [line for line in stripped.splitlines() if line.strip()]
        if len(lines) > 1 and all(line.lstrip().startswith("{") for line in lines):
            try:
                json.loads(lines[0])
                return "jsonl"
            except json.JSONDecodeError:
                pass
        return "json"
    return "unknown"


def _str_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


class AnalyzerResultsParser:
    """Parser for analyzer JSON output."""

    def __init__(self):
        self.skipped_records = 0
        self.skipped_entries = 0

    def parse(self, content: str, input_format: str | None = None) -> list[Context]:
        """Parse analyzer output and return one Context per word.

        Args:
            content: Raw analyzer output
            input_format: 'json' or 'jsonl' (auto-detected if None or 'auto')

        Returns:
            Contexts in input order; malformed records are skipped

        Raises:
            ValueError: If the content is not JSON in either layout
        """
        self.skipped_records = 0
        self.skipped_entries = 0

        if input_format is None or input_format == "auto":
            input_format = detect_input_format(content)

        if not content.strip():
            return []

        if input_format == "jsonl":
            records = []
            for lineno, line in enumerate(content.splitlines(), 1):
                if not line.strip():
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as e:
                    raise ValueError(f"Invalid JSON on line {lineno}: {e.msg}") from e
        elif input_format == "json":
            try:
                data = json.loads(content.lstrip("\ufeff"))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON at line {e.lineno}: {e.msg}") from e
            records = data if isinstance(data, list) else [data]
        else:
            raise ValueError("Input is not analyzer JSON output")

        contexts = []
        for index, record in enumerate(records):
            context = self._parse_record(record, index)
            if context is not None:
                contexts.append(context)
        return contexts

    def parse_file(self, path: str | Path, input_format: str | None = None) -> list[Context]:
        """Parse analyzer output from a file.

        Args:
            path: Path to the analyzer output file
            input_format: 'json' or 'jsonl' (auto-detected if None)

        Returns:
            Contexts in file order

        Raises:
            ValueError: If file exceeds 100MB size limit or is not JSON
        """
        return self.parse(read_analysis_file(path), input_format)

    def _parse_record(self, record: Any, index: int) -> Context | None:
        """Build a Context from one analyzer record, or None if malformed."""
        if not isinstance(record, dict):
            logger.warning("Record %d is not an object - skipping", index)
            self.skipped_records += 1
            return None

        word = record.get("word")
        if not isinstance(word, str) or not word:
            logger.warning("Record %d has no 'word' - skipping", index)
            self.skipped_records += 1
            return None

        reading = record.get("reading")
        if not isinstance(reading, str):
            reading = ""

        count = record.get("count", 1)
        if isinstance(count, bool) or not isinstance(count, int):
            logger.warning("Record %d (%r) has invalid count %r - using 1", index, word, count)
            count = 1

        entries = []
        raw_entries = record.get("dict_info") or []
        if not isinstance(raw_entries, list):
            logger.warning("Record %d (%r) has malformed 'dict_info' - ignoring", index, word)
            raw_entries = []

        for raw in raw_entries:
            try:
                entries.append(self._parse_entry(raw))
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning("Record %d (%r): skipping malformed entry: %s", index, word, e)
                self.skipped_entries += 1

        return Context(
            word=word,
            reading=reading,
            pos=PartOfSpeech.parse(str(record.get("pos", "Other"))),
            count=count,
            dict_info=tuple(entries),
        )

    def _parse_entry(self, raw: dict) -> DictionaryEntry:
        """Build a DictionaryEntry from its JSON form.

        Raises:
            ValueError: If the source is missing or unknown
        """
        source = self._parse_source(raw.get("source"))

        definitions = tuple(
            Definition(
                text=str(d.get("text", "")),
                pos=tuple(PartOfSpeech.parse(str(p)) for p in d.get("pos") or ()),
                flags=_str_list(d.get("flags")),
            )
            for d in raw.get("definitions") or ()
        )

        examples = tuple(
            Example(
                foreign_text=str(ex.get("ja", "")),
                native_text=str(ex.get("en", "")),
                for_definition=ex.get("for_definition", ex.get("definition")),
            )
            for ex in raw.get("examples") or ()
        )

        return DictionaryEntry(
            forms=_str_list(raw.get("forms")),
            source=source,
            definitions=definitions,
            audio=_str_list(raw.get("audio")),
            readings=_str_list(raw.get("readings")),
            examples=examples,
        )

    def _parse_source(self, raw: Any) -> Source:
        """Parse a source tag such as ``{"JMDict": 1000220}``."""
        if not isinstance(raw, dict) or len(raw) != 1:
            raise ValueError(f"invalid source {raw!r}")
        (name, ident), = raw.items()
        kind = _SOURCE_KINDS.get(str(name).lower())
        if kind is None:
            raise ValueError(f"unknown source {name!r}")
        return Source(kind=kind, id=int(ident))
