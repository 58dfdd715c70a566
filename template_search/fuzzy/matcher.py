"""
Ordered-subsequence fuzzy matcher.

Every query character must appear in the text in order (case-insensitive).
Matches are ranked in tiers so that a tighter match always beats a looser one:

    exact            100
    prefix           [80, 90)    more of the text covered = higher
    substring        [40, 70)    +10 at a word boundary, small position penalty
    scattered        [1, 40]     alignment quality via dynamic programming

Scattered alignment (Smith-Waterman style, linear gap penalty):
    each matched char        +1
    char after a separator   +2   (start of a word)
    consecutive with prev    +3
    each skipped char        -0.1 (between matched chars)
    first match position     -0.2 per char, capped at 10 chars

The raw alignment is normalized by the best possible alignment for the query
length, so scores are comparable across fields of different length.

All valid matches score > 0. No match is reported as None by fuzzy_match()
and as NO_MATCH (-inf) by FieldMatcher.score().
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .transliterator import detects_cjk, initials, transliterate

NO_MATCH = float("-inf")

EXACT_SCORE = 100.0
PREFIX_BASE = 80.0
SUBSTRING_BASE = 45.0
BOUNDARY_BONUS = 10.0
COVERAGE_SPAN = 10.0
POSITION_PENALTY = 0.5
POSITION_CAP = 10
FUZZY_FLOOR = 1.0
FUZZY_SPAN = 39.0

CHAR_SCORE = 1.0
WORD_START_BONUS = 2.0
CONSECUTIVE_BONUS = 3.0
GAP_PENALTY = 0.1
LEADING_PENALTY = 0.2
LEADING_CAP = 10


@dataclass(frozen=True)
class FuzzyMatch:
    score: float
    indexes: Tuple[int, ...]  # Matched character positions in the target text


def _fold(text: str) -> str:
    # Keep one char per char so match positions stay valid for the original text
    return "".join(c.lower() if len(c.lower()) == 1 else c for c in text)


def _is_word_start(text: str, pos: int) -> bool:
    return pos == 0 or not text[pos - 1].isalnum()


def _substring_match(query: str, text: str) -> Optional[FuzzyMatch]:
    best = None
    coverage = COVERAGE_SPAN * len(query) / len(text)
    pos = text.find(query)

    while pos != -1:
        if pos == 0:
            return FuzzyMatch(PREFIX_BASE + coverage, tuple(range(len(query))))

        score = SUBSTRING_BASE + coverage - POSITION_PENALTY * min(pos, POSITION_CAP)
        if _is_word_start(text, pos):
            score += BOUNDARY_BONUS

        if best is None or score > best.score:
            best = FuzzyMatch(score, tuple(range(pos, pos + len(query))))

        pos = text.find(query, pos + 1)

    return best


def _align(query: str, text: str) -> Optional[FuzzyMatch]:
    """Best scattered alignment of query within text, or None."""
    n, m = len(query), len(text)
    bonus = [
        CHAR_SCORE + (WORD_START_BONUS if _is_word_start(text, j) else 0.0)
        for j in range(m)
    ]

    prev: List[float] = []
    parents: List[List[int]] = []

    for i in range(n):
        cur = [NO_MATCH] * m
        parent = [-1] * m
        gapped, gapped_k = NO_MATCH, -1

        for j in range(m):
            # Pool of predecessors k <= j-2, each paying GAP_PENALTY per skipped char
            if i > 0 and j >= 2:
                gapped -= GAP_PENALTY
                candidate = prev[j - 2] - GAP_PENALTY
                if candidate > gapped:
                    gapped, gapped_k = candidate, j - 2

            if text[j] != query[i]:
                continue

            if i == 0:
                cur[j] = bonus[j] - LEADING_PENALTY * min(j, LEADING_CAP)
                continue

            best, best_k = NO_MATCH, -1
            if j >= 1 and prev[j - 1] > NO_MATCH:
                best, best_k = prev[j - 1] + CONSECUTIVE_BONUS, j - 1
            if gapped > best:
                best, best_k = gapped, gapped_k

            if best > NO_MATCH:
                cur[j] = best + bonus[j]
                parent[j] = best_k

        parents.append(parent)
        prev = cur

    end = max(range(m), key=lambda j: prev[j])
    if prev[end] == NO_MATCH:
        return None

    indexes = [end]
    for i in range(n - 1, 0, -1):
        indexes.append(parents[i][indexes[-1]])
    indexes.reverse()

    ceiling = n * (CHAR_SCORE + WORD_START_BONUS) + (n - 1) * CONSECUTIVE_BONUS
    ratio = max(prev[end], 0.0) / ceiling
    return FuzzyMatch(FUZZY_FLOOR + FUZZY_SPAN * ratio, tuple(indexes))


def fuzzy_match(query: str, text: str) -> Optional[FuzzyMatch]:
    """
    Match query against text as an ordered subsequence.

    Args:
        query: Search query (surrounding whitespace ignored)
        text: Target text

    Returns:
        FuzzyMatch with a positive score and matched positions, or None

    Examples:
        >>> fuzzy_match("react", "react").score
        100.0
        >>> fuzzy_match("fe", "frontend") is not None
        True
        >>> fuzzy_match("xyz", "frontend") is None
        True
    """
    query = _fold(query.strip())
    text = _fold(text)

    if not query or len(query) > len(text):
        return None

    if query == text:
        return FuzzyMatch(EXACT_SCORE, tuple(range(len(text))))

    substring = _substring_match(query, text)
    if substring is not None:
        return substring

    return _align(query, text)


class FieldMatcher:
    """
    Best-of scorer for one field.

    Candidates (all computed, maximum wins):
    1. direct match on the field text
    2. pinyin tokens joined with spaces     "qian duan"
    3. pinyin tokens concatenated           "qianduan"
    4. pinyin initials                      "qd"

    Candidates 2-4 only run when transliteration is enabled and the field
    contains CJK text. Weights are applied by the caller.
    """

    def score(self, field_text: str, query: str, enable_transliteration: bool = True) -> float:
        candidates = [fuzzy_match(query, field_text)]

        if enable_transliteration and detects_cjk(field_text):
            tokens = transliterate(field_text)
            if tokens:
                candidates.append(fuzzy_match(query, " ".join(tokens)))
                candidates.append(fuzzy_match(query, "".join(tokens)))
                candidates.append(fuzzy_match(query, initials(tokens)))

        scores = [match.score for match in candidates if match is not None]
        return max(scores) if scores else NO_MATCH

    def highlight(self, field_text: str, query: str, open_tag: str = "<mark>", close_tag: str = "</mark>") -> Optional[str]:
        """
        Wrap directly matched characters in tags; None if the text does not match.

        Runs of adjacent matched characters share one tag pair.
        """
        match = fuzzy_match(query, field_text)
        if match is None:
            return None

        matched = set(match.indexes)
        parts = []
        inside = False

        for pos, char in enumerate(field_text):
            if pos in matched and not inside:
                parts.append(open_tag)
                inside = True
            elif pos not in matched and inside:
                parts.append(close_tag)
                inside = False
            parts.append(char)

        if inside:
            parts.append(close_tag)

        return "".join(parts)
