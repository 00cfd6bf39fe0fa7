# tests/test_search_service.py

import pytest
from unittest.mock import MagicMock

from answer_search.application import search_service as search_service_module
from answer_search.application.search_service import AnswerSearchService
from answer_search.domain.models import AccuracyFilter, Record
from answer_search.infrastructure.scorer import ScoreResult


PLANETS = Record(
    kind="单选题",
    question="太阳系有几大行星",
    options=["8", "9"],
    answer=["8"],
)


def _make_record(question: str, options=(), answer=(), kind: str = "") -> Record:
    return Record(kind=kind, question=question, options=options, answer=answer)


@pytest.fixture
def service() -> AnswerSearchService:
    return AnswerSearchService()


@pytest.fixture
def fixed_scores(monkeypatch):
    """Replace the scorer so each question text maps to a known score."""
    table = {"high": 0.95, "medium": 0.6, "low": 0.3}

    def fake_score(query, candidate):
        return ScoreResult(table.get(candidate, 0.0), [])

    monkeypatch.setattr(search_service_module, "score", fake_score)
    return [_make_record(name) for name in ("low", "high", "medium")]


# ── Scenarios ─────────────────────────────────────────────────────────────────

def test_exact_question_match(service):
    results = service.search([PLANETS], "太阳系有几大行星", AccuracyFilter())

    assert len(results) == 1
    result = results[0]
    assert result.score == 1.0
    assert result.question_matches == list(range(len(PLANETS.question)))
    assert result.matched_label.startswith("question")


def test_partial_query_highlights_its_position(service):
    result = service.search([PLANETS], "行星")[0]

    assert 0.90 <= result.score <= 0.95
    assert result.question_matches == [6, 7]


def test_noisy_over_captured_query_still_matches(service):
    result = service.search([PLANETS], "1. 太阳系有几大行星？( )")[0]

    assert result.score == 0.95
    assert result.question_matches == list(range(8))


def test_spans_are_in_original_coordinates(service):
    record = _make_record("【单选题】太阳系有几大行星？")

    result = service.search([record], "行星")[0]

    assert result.question_matches == [11, 12]
    assert "".join(record.question[i] for i in result.question_matches) == "行星"


def test_option_scores_are_discounted(service):
    record = _make_record(
        "Which planet in the solar system is the largest",
        options=["Jupiter", "Saturn"],
    )

    result = service.search([record], "JUPITER")[0]

    assert result.score == pytest.approx(0.8)
    assert result.matched_label.startswith("option")
    assert result.option_matches["Jupiter"] == list(range(7))
    assert result.option_matches["Saturn"] == []


def test_answer_spans_from_every_answer_are_kept(service):
    record = _make_record("Capital of France?", answer=["Paris", "Paris, France"])

    result = service.search([record], "paris")[0]

    assert result.score == 1.0
    assert result.matched_label.startswith("answer")
    assert result.answer_matches == [0, 1, 2, 3, 4, 0, 1, 2, 3, 4]


def test_every_span_index_is_valid_for_its_field(service):
    records = [
        PLANETS,
        _make_record("【单选题】太阳系有几大行星？（　）", options=["A. 8", "B. 9"], answer=["A"]),
        _make_record("What is   Vue.js?", options=["A framework", "A   library!"], answer=["framework"]),
    ]

    for query in ["行星", "vue js framework", "library", "大行星 8", "xyz"]:
        for result in service.search(records, query):
            record = result.record
            assert 0.0 <= result.score <= 1.0
            assert all(0 <= i < len(record.question) for i in result.question_matches)
            for option, span in result.option_matches.items():
                assert all(0 <= i < len(option) for i in span)
            longest_answer = max((len(a) for a in record.answer), default=0)
            assert all(0 <= i < longest_answer for i in result.answer_matches)


# ── Short-circuits ────────────────────────────────────────────────────────────

def test_empty_record_set_returns_nothing(service):
    assert service.search([], "anything", AccuracyFilter()) == []


@pytest.mark.parametrize("query", ["", "   ", "？！。", "( )"])
def test_empty_query_returns_everything_at_half_score(service, query):
    records = [PLANETS, _make_record("other")]

    results = service.search(records, query, AccuracyFilter(high=True))

    assert [r.record for r in results] == records
    for result in results:
        assert result.score == 0.5
        assert result.matched_label == "all results"
        assert result.question_matches == []
        assert result.option_matches == {}
        assert result.answer_matches == []


# ── Filtering and ordering ────────────────────────────────────────────────────

def test_high_filter_keeps_only_high_bucket(service, fixed_scores):
    results = service.search(fixed_scores, "q", AccuracyFilter(high=True))
    assert [r.score for r in results] == [0.95]


def test_medium_and_low_filter(service, fixed_scores):
    results = service.search(fixed_scores, "q", AccuracyFilter(medium=True, low=True))
    assert [r.score for r in results] == [0.6, 0.3]


def test_no_bucket_selected_keeps_everything_sorted(service, fixed_scores):
    results = service.search(fixed_scores, "q", AccuracyFilter())
    assert [r.score for r in results] == [0.95, 0.6, 0.3]


def test_missing_filter_means_unrestricted(service, fixed_scores):
    assert len(service.search(fixed_scores, "q")) == 3


def test_results_sorted_descending(service):
    records = [
        _make_record("completely unrelated text"),
        _make_record("太阳系有几大行星"),
        _make_record("太阳系有几颗卫星"),
        _make_record("行星"),
    ]

    results = service.search(records, "太阳系有几大行星")

    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)
    assert results[0].record.question == "太阳系有几大行星"


# ── Collaborators ─────────────────────────────────────────────────────────────

def test_search_all_reads_one_snapshot_from_supplier(service):
    supplier = MagicMock()
    supplier.get_records.return_value = (PLANETS,)

    results = service.search_all(supplier, "行星")

    supplier.get_records.assert_called_once()
    assert results[0].record is PLANETS


def test_option_weight_must_be_a_fraction():
    with pytest.raises(ValueError, match="option_weight"):
        AnswerSearchService(option_weight=1.5)


def test_result_serializes_every_field(service):
    result = service.search([PLANETS], "太阳系有几大行星")[0]

    payload = result.to_dict()

    assert payload["item"] == {
        "type": "单选题",
        "question": "太阳系有几大行星",
        "options": ["8", "9"],
        "answer": ["8"],
    }
    assert payload["score"] == 1.0
    assert payload["questionMatches"] == list(range(8))
    assert payload["optionMatches"] == {"8": [], "9": []}
    assert payload["answerMatches"] == []
