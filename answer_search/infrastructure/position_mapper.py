# answer_search/infrastructure/position_mapper.py

from typing import Dict, List, Optional

from answer_search.domain.models import MatchSpan
from answer_search.infrastructure.normalizer import normalize_with_offsets


def build_position_table(original: str, normalized: Optional[str] = None) -> List[int]:
    """
    Map each character index of normalize(original) to its index in original.

    Characters dropped during normalization have no entry. When `normalized`
    is given it must be normalize(original); a mismatch means the caller mixed
    up texts, so it is rejected rather than producing wrong highlights.
    """
    rebuilt, offsets = normalize_with_offsets(original)
    if normalized is not None and normalized != rebuilt:
        raise ValueError(
            "Normalized text does not derive from the original text: "
            f"{normalized!r} vs {rebuilt!r}"
        )
    return offsets


def map_to_original(
    original: str,
    normalized: str,
    start: int,
    length: int,
) -> MatchSpan:
    """
    Translate the normalized range [start, start+length) into original
    character indices. Parts of the range outside the normalized text are
    dropped.
    """
    table = build_position_table(original, normalized)
    return _slice(table, start, length)


def _slice(table: List[int], start: int, length: int) -> MatchSpan:
    begin = max(start, 0)
    end = min(start + length, len(table))
    if end <= begin:
        return []
    return table[begin:end]


class PositionMapper:
    """
    Caches one position table per original text, so fields repeated across
    many records (e.g. "True"/"False" options) are only walked once.
    """

    def __init__(self):
        self._tables: Dict[str, List[int]] = {}

    def table_for(self, original: str) -> List[int]:
        table = self._tables.get(original)
        if table is None:
            table = build_position_table(original)
            self._tables[original] = table
        return table

    def to_original(self, original: str, span: MatchSpan) -> MatchSpan:
        if not span:
            return []
        table = self.table_for(original)
        return [table[i] for i in span if 0 <= i < len(table)]

    def cached_count(self) -> int:
        return len(self._tables)
