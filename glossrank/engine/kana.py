"""Kana classification and folding helpers used by filter predicates."""

from __future__ import annotations

import re

KATAKANA_REGEX = r"[ァ-ヺヽヾー]"
HIRAGANA_REGEX = r"[ぁ-ゔゝゞー]"
KANA_REGEX = f"({KATAKANA_REGEX}|{HIRAGANA_REGEX})"

_KANA_WORD_PATTERN = re.compile(f"^{KANA_REGEX}+$")

# Offset between the katakana and hiragana blocks
_KANA_OFFSET = ord("ァ") - ord("ぁ")


def is_kana(word: str) -> bool:
    """Check if word consists entirely of kana (hiragana or katakana)."""
    return bool(_KANA_WORD_PATTERN.match(word))


def as_hiragana(text: str) -> str:
    """Convert katakana in text to hiragana, leaving everything else alone."""
    chars = []
    for char in text:
        code = ord(char)
        if ord("ァ") <= code <= ord("ヶ"):
            chars.append(chr(code - _KANA_OFFSET))
        elif char in "ヽヾ":
            chars.append(chr(code - _KANA_OFFSET))
        else:
            chars.append(char)
    return "".join(chars)
