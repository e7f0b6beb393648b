"""Data model shared by the analyzer adapter, the ranking engine and the presenters.

Every record here is built once by the results parser and treated as
read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PartOfSpeech(Enum):
    """Part-of-speech tags produced by the analyzer."""
    NOUN = "Noun"
    PREFIX = "Prefix"
    VERB = "Verb"
    ADJECTIVE = "Adjective"
    ADVERB = "Adverb"
    ADNOMINAL = "Adnominal"
    CONJUNCTION = "Conjunction"
    PARTICLE = "Particle"
    AUXILIARY_VERB = "AuxiliaryVerb"
    EXCLAMATION = "Exclamation"
    SYMBOL = "Symbol"
    FILLER = "Filler"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> PartOfSpeech:
        """Look up a tag by its analyzer spelling.

        Unknown tags map to OTHER.
        """
        value = _POS_ALIASES.get(value, value)
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


# Older analyzer builds misspell this tag
_POS_ALIASES = {
    "Conjuction": "Conjunction",
}


class SourceKind(Enum):
    """Dictionaries an entry can originate from."""
    WANIKANI = "WaniKani"
    JMDICT = "JMDict"


@dataclass(frozen=True)
class Source:
    """Provenance of a dictionary entry."""
    kind: SourceKind
    id: int

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class Definition:
    """A single gloss of a dictionary entry."""
    text: str
    pos: tuple[PartOfSpeech, ...] = ()
    flags: tuple[str, ...] = ()  # JMdict entity tags, e.g. "&arch;"


@dataclass(frozen=True)
class Example:
    """Example sentence pair.

    ``foreign_text`` is the Japanese sentence, ``native_text`` its
    translation. ``for_definition`` indexes into the owning entry's
    definitions when the example illustrates one sense.
    """
    foreign_text: str
    native_text: str
    for_definition: int | None = None


@dataclass(frozen=True)
class DictionaryEntry:
    """Candidate dictionary entry for a word occurrence."""
    forms: tuple[str, ...]
    source: Source
    definitions: tuple[Definition, ...] = ()
    audio: tuple[str, ...] = ()
    readings: tuple[str, ...] = ()
    examples: tuple[Example, ...] = ()


@dataclass(frozen=True)
class Context:
    """One analyzed word occurrence and its candidate entries."""
    word: str
    reading: str  # katakana, as produced by the analyzer
    pos: PartOfSpeech = PartOfSpeech.OTHER
    count: int = 1
    dict_info: tuple[DictionaryEntry, ...] = field(default_factory=tuple)
