"""
Weighted fuzzy search with pinyin fallback.

Components:
- transliterator: CJK -> pinyin tokens, initials, CJK detection
- matcher: ordered-subsequence fuzzy scoring, best-of field matching
- scorer: per-field weighted document scoring
- engine: ranking, browse mode, highlighting and suggestions

Scores are positive for every match and unbounded above after weighting;
higher is better. "No match" is -inf internally and never reaches results.
"""

from .transliterator import detects_cjk, initials, transliterate
from .matcher import NO_MATCH, FieldMatcher, FuzzyMatch, fuzzy_match
from .scorer import DEFAULT_SEARCH_FIELDS, SearchField, WeightedScorer
from .engine import RankingEngine

__all__ = [
    "detects_cjk",
    "initials",
    "transliterate",
    "NO_MATCH",
    "FieldMatcher",
    "FuzzyMatch",
    "fuzzy_match",
    "DEFAULT_SEARCH_FIELDS",
    "SearchField",
    "WeightedScorer",
    "RankingEngine",
]
