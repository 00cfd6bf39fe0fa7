# answer_search/infrastructure/scorer.py

from collections import Counter
from typing import List, NamedTuple, Set

from answer_search.domain.models import MatchSpan
from answer_search.infrastructure.normalizer import fold_case, normalize
from answer_search.infrastructure.string_metrics import (
    edit_distance,
    longest_common_substring,
)


# ── Scoring constants ────────────────────────────────────────────────────────
EXACT_SCORE = 1.0

# Candidate contains query: 0.90 plus up to 0.05 for relative coverage.
CONTAINMENT_BASE = 0.9
CONTAINMENT_COVERAGE_BONUS = 0.05
CONTAINMENT_CEILING = 0.95

# Query contains candidate (OCR over-captured the field).
EMBEDDED_SCORE = 0.95

# No shared words: trust edit distance only, and only partially.
EDIT_ONLY_THRESHOLD = 0.3
EDIT_ONLY_WEIGHT = 0.6

# Shared words: weighted blend of three sub-similarities.
EDIT_WEIGHT = 0.2
KEYWORD_WEIGHT = 0.5
CHAR_WEIGHT = 0.3
MIN_BLENDED_SIMILARITY = 0.1


class ScoreResult(NamedTuple):
    score: float
    span: MatchSpan


NO_MATCH = ScoreResult(0.0, [])


def _span(start: int, length: int) -> MatchSpan:
    return list(range(start, start + length))


def score(query: str, candidate: str) -> ScoreResult:
    """
    Score a normalized, case-folded query against a normalized, case-folded
    candidate. The span is expressed in candidate coordinates.

    Tiers, first match wins:
      1. equal                      -> 1.0
      2. candidate contains query   -> [0.90, 0.95] by coverage
      3. query contains candidate   -> 0.95
      4. smart similarity
    """
    if not query or not candidate:
        return NO_MATCH

    if query == candidate:
        return ScoreResult(EXACT_SCORE, _span(0, len(candidate)))

    start = candidate.find(query)
    if start != -1:
        coverage = len(query) / len(candidate)
        value = CONTAINMENT_BASE + CONTAINMENT_COVERAGE_BONUS * coverage
        return ScoreResult(min(value, CONTAINMENT_CEILING), _span(start, len(query)))

    if candidate in query:
        return ScoreResult(EMBEDDED_SCORE, _span(0, len(candidate)))

    return smart_similarity(query, candidate)


# ─── Smart similarity ────────────────────────────────────────────────────────

def extract_words(text: str) -> List[str]:
    """Whitespace tokens longer than one character, case-folded."""
    return [
        fold_case(word)
        for word in normalize(text).split()
        if len(word) > 1
    ]


def find_common_words(a: str, b: str) -> Set[str]:
    return set(extract_words(a)) & set(extract_words(b))


def edit_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return 1.0 - edit_distance(a, b) / longest


def keyword_similarity(a: str, b: str) -> float:
    """
    Jaccard overlap of the two word sets, averaged with the mean coverage
    of the shared words on each side.
    """
    words_a = set(extract_words(a))
    words_b = set(extract_words(b))
    if not words_a or not words_b:
        return 0.0

    common = len(words_a & words_b)
    union = len(words_a) + len(words_b) - common
    if union == 0:
        return 0.0

    similarity = common / union
    if common > 0:
        coverage = (common / len(words_a) + common / len(words_b)) / 2.0
        similarity = min((similarity + coverage) / 2.0, 1.0)

    return similarity


def char_similarity(a: str, b: str) -> float:
    """Dice coefficient over character multisets."""
    total = len(a) + len(b)
    if total == 0:
        return 0.0

    shared = Counter(a) & Counter(b)
    return 2 * sum(shared.values()) / total


def smart_similarity(query: str, candidate: str) -> ScoreResult:
    if not find_common_words(query, candidate):
        similarity = edit_similarity(query, candidate)
        if similarity > EDIT_ONLY_THRESHOLD:
            return ScoreResult(
                similarity * EDIT_ONLY_WEIGHT,
                simple_matches(query, candidate),
            )
        return NO_MATCH

    similarity = (
        EDIT_WEIGHT * edit_similarity(query, candidate)
        + KEYWORD_WEIGHT * keyword_similarity(query, candidate)
        + CHAR_WEIGHT * char_similarity(query, candidate)
    )

    if similarity < MIN_BLENDED_SIMILARITY:
        return NO_MATCH

    return ScoreResult(min(similarity, 1.0), simple_matches(query, candidate))


def simple_matches(query: str, candidate: str) -> MatchSpan:
    """
    Best-effort span in the candidate for a similarity match: the query
    itself, the whole candidate, or failing both the longest run they share.
    """
    start = candidate.find(query)
    if start != -1:
        return _span(start, len(query))

    if candidate in query:
        return _span(0, len(candidate))

    common = longest_common_substring(query, candidate)
    if not common:
        return []
    return _span(candidate.find(common), len(common))
