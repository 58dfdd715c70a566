"""
Pinyin transliteration for CJK-aware fuzzy matching.

Conversion rules (per code point):
1. CJK Unified Ideograph (U+4E00..U+9FFF) -> tone-less lowercase pinyin syllable
2. ASCII letter or digit -> itself, lowercased, as a one-character token
3. Anything else (punctuation, whitespace, symbols) -> dropped

Ideographs without pinyin data are dropped as well, so a field can transliterate
to an empty token list. Such a field simply cannot match through the pinyin
fallback.

Pinyin data comes from pypinyin. Characters are converted one at a time, so
heteronyms resolve to the library's default reading for the single character.
"""

from functools import lru_cache
from typing import List, Sequence

from pypinyin import Style, lazy_pinyin

CJK_START = 0x4E00
CJK_END = 0x9FFF


def _is_cjk(char: str) -> bool:
    return CJK_START <= ord(char) <= CJK_END


@lru_cache(maxsize=8192)
def _syllable(char: str) -> str:
    # errors="ignore" drops characters pypinyin has no reading for
    syllables = lazy_pinyin(char, style=Style.NORMAL, errors="ignore")
    return syllables[0].lower() if syllables else ""


def detects_cjk(text: str) -> bool:
    """Return True if any code point of text is a CJK Unified Ideograph."""
    return any(_is_cjk(char) for char in text)


def transliterate(text: str) -> List[str]:
    """
    Convert text to a list of Latin tokens.

    Args:
        text: Input text (any mix of CJK, Latin and symbols)

    Returns:
        One token per CJK character or ASCII alphanumeric, in input order

    Examples:
        >>> transliterate("前端")
        ['qian', 'duan']

        >>> transliterate("前端React")
        ['qian', 'duan', 'r', 'e', 'a', 'c', 't']

        >>> transliterate("v1.0!")
        ['v', '1', '0']
    """
    tokens = []

    # str iteration is per code point
    for char in text:
        if _is_cjk(char):
            syllable = _syllable(char)
            if syllable:
                tokens.append(syllable)
        elif char.isascii() and char.isalnum():
            tokens.append(char.lower())

    return tokens


def initials(tokens: Sequence[str]) -> str:
    """
    First letter of every token, e.g. ['qian', 'duan'] -> 'qd'.
    """
    return "".join(token[0] for token in tokens if token).lower()
