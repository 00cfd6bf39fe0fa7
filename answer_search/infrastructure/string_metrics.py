# answer_search/infrastructure/string_metrics.py

import numpy as np
from rapidfuzz.distance import Levenshtein


def _code_points(text: str) -> np.ndarray:
    """Characters as an int array so rows of the DP table compare in one shot."""
    return np.fromiter((ord(char) for char in text), dtype=np.int64, count=len(text))


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance over characters (insert, delete, substitute cost 1)."""
    return Levenshtein.distance(a, b)


def longest_common_substring(a: str, b: str) -> str:
    """
    Longest contiguous run shared by `a` and `b`, taken from `a`.

    Ties resolve to the first run found in row-major order, i.e. the one
    ending earliest in `a`. Returns "" when nothing is shared.
    """
    if not a or not b:
        return ""

    table = np.zeros((len(a) + 1, len(b) + 1), dtype=np.int64)
    b_codes = _code_points(b)

    best_length = 0
    best_end = 0

    for i, char in enumerate(a, start=1):
        same = b_codes == ord(char)
        table[i, 1:] = np.where(same, table[i - 1, :-1] + 1, 0)

        row_best = int(table[i].max())
        if row_best > best_length:
            best_length = row_best
            best_end = i

    if best_length == 0:
        return ""
    return a[best_end - best_length:best_end]
