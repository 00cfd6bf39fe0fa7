# answer_search/application/search_service.py

from typing import Dict, List, Optional, Sequence, Tuple

from answer_search.domain.interfaces import RecordSupplierPort
from answer_search.domain.models import (
    AccuracyFilter,
    FieldMatch,
    MatchField,
    MatchSpan,
    Record,
    SearchResult,
)
from answer_search.infrastructure.normalizer import prepare
from answer_search.infrastructure.position_mapper import PositionMapper
from answer_search.infrastructure.scorer import score


# Options are weighted below question/answer text.
DEFAULT_OPTION_WEIGHT = 0.8

EMPTY_QUERY_SCORE = 0.5
EMPTY_QUERY_LABEL = "all results"
MAX_SCORE = 1.0


class AnswerSearchService:
    """
    Core use case: rank a caller-supplied record set against a noisy query.

    Every call is independent. The service keeps no record set of its own;
    records, query and filter are read-only inputs, and the per-call
    PositionMapper cache is discarded when the call returns.

    Ordering: descending score. The sort is stable, so records with equal
    scores keep the order in which they were supplied.
    """

    def __init__(self, option_weight: float = DEFAULT_OPTION_WEIGHT):
        if not 0.0 <= option_weight <= 1.0:
            raise ValueError(f"option_weight must be within [0, 1], got {option_weight}")
        self._option_weight = option_weight

    def search(
        self,
        records: Sequence[Record],
        query: str,
        accuracy_filter: Optional[AccuracyFilter] = None,
    ) -> List[SearchResult]:
        accuracy_filter = accuracy_filter or AccuracyFilter()
        prepared_query = prepare(query)

        if not prepared_query:
            print(f"[SearchService] Empty query — returning all {len(records)} records.")
            return [
                SearchResult(
                    record=record,
                    score=EMPTY_QUERY_SCORE,
                    matched_label=EMPTY_QUERY_LABEL,
                )
                for record in records
            ]

        if not records:
            print("[SearchService] Record set is empty — nothing to search.")
            return []

        mapper = PositionMapper()
        results: List[SearchResult] = []

        for record in records:
            result = self._rank_record(record, prepared_query, mapper)
            if accuracy_filter.selects(result.score):
                results.append(result)

        results.sort(key=lambda r: r.score, reverse=True)

        print(
            f"[SearchService] Query '{prepared_query}': "
            f"{len(results)}/{len(records)} records kept."
        )
        return results

    def search_all(
        self,
        supplier: RecordSupplierPort,
        query: str,
        accuracy_filter: Optional[AccuracyFilter] = None,
    ) -> List[SearchResult]:
        """Search one snapshot of whatever record set the supplier holds."""
        return self.search(supplier.get_records(), query, accuracy_filter)

    # ─── Per-record scoring ──────────────────────────────────────────────────

    def _rank_record(
        self,
        record: Record,
        query: str,
        mapper: PositionMapper,
    ) -> SearchResult:
        matches = [
            self._match_question(record, query, mapper),
            self._match_answers(record, query, mapper),
            self._match_options(record, query, mapper),
        ]
        return self._aggregate(record, query, matches)

    def _match_text(
        self,
        query: str,
        text: str,
        mapper: PositionMapper,
    ) -> Tuple[float, MatchSpan]:
        field_score, span = score(query, prepare(text))
        return field_score, mapper.to_original(text, span)

    def _match_question(self, record: Record, query: str, mapper: PositionMapper) -> FieldMatch:
        field_score, span = self._match_text(query, record.question, mapper)
        return FieldMatch(source=MatchField.QUESTION, score=field_score, span=span)

    def _match_answers(self, record: Record, query: str, mapper: PositionMapper) -> FieldMatch:
        best = 0.0
        spans: MatchSpan = []
        for answer in record.answer:
            answer_score, span = self._match_text(query, answer, mapper)
            best = max(best, answer_score)
            # Highlights from every answer are kept, not just the best one.
            spans.extend(span)
        return FieldMatch(source=MatchField.ANSWER, score=best, span=spans)

    def _match_options(self, record: Record, query: str, mapper: PositionMapper) -> FieldMatch:
        best = 0.0
        spans_by_option: Dict[str, MatchSpan] = {}
        for option in record.options:
            option_score, span = self._match_text(query, option, mapper)
            best = max(best, option_score * self._option_weight)
            spans_by_option[option] = span
        return FieldMatch(
            source=MatchField.OPTION,
            score=best,
            spans_by_option=spans_by_option,
        )

    def _aggregate(
        self,
        record: Record,
        query: str,
        matches: List[FieldMatch],
    ) -> SearchResult:
        """Record score is the best field score; the first field to reach it names the label."""
        best_score = 0.0
        label = ""
        question_matches: MatchSpan = []
        answer_matches: MatchSpan = []
        option_matches: Dict[str, MatchSpan] = {}

        for match in matches:
            if match.score > best_score:
                best_score = match.score
                label = f"{match.source.value}: {query}"

            if match.source is MatchField.QUESTION:
                question_matches = match.span
            elif match.source is MatchField.ANSWER:
                answer_matches = match.span
            else:
                option_matches = match.spans_by_option or {}

        return SearchResult(
            record=record,
            score=min(best_score, MAX_SCORE),
            matched_label=label,
            question_matches=question_matches,
            option_matches=option_matches,
            answer_matches=answer_matches,
        )
