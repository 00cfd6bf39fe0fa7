# answer_search/domain/models.py

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


HIGH_ACCURACY_THRESHOLD = 0.8
MEDIUM_ACCURACY_THRESHOLD = 0.5

# Ordered character offsets into the original (un-normalized) field text.
MatchSpan = List[int]


def _as_text_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(item) for item in value]


@dataclass(frozen=True)
class Record:
    """
    A single question/answer unit the caller wants to search.
    """
    kind: str
    question: str
    options: Tuple[str, ...] = ()
    answer: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept any sequence, store tuples so a record stays immutable.
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "answer", tuple(self.answer))

    @classmethod
    def from_dict(cls, data: dict) -> "Record":
        """
        Build a record from the transport/import shape:
        {"type": ..., "question": ..., "options": [...], "answer": [...]}.
        """
        if "question" not in data or data["question"] is None:
            raise ValueError(f"Record is missing a question: {data!r}")

        return cls(
            kind=str(data.get("type", data.get("kind", "")) or ""),
            question=str(data["question"]),
            options=_as_text_list(data.get("options")),
            answer=_as_text_list(data.get("answer")),
        )

    def to_dict(self) -> dict:
        return {
            "type": self.kind,
            "question": self.question,
            "options": list(self.options),
            "answer": list(self.answer),
        }


class AccuracyBucket(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def classify(cls, score: float) -> "AccuracyBucket":
        if score >= HIGH_ACCURACY_THRESHOLD:
            return cls.HIGH
        if score >= MEDIUM_ACCURACY_THRESHOLD:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class AccuracyFilter:
    """
    Which accuracy buckets a caller wants back.
    Selecting no bucket at all means "no restriction".
    """
    high: bool = False
    medium: bool = False
    low: bool = False

    @property
    def is_unrestricted(self) -> bool:
        return not (self.high or self.medium or self.low)

    def selects(self, score: float) -> bool:
        if self.is_unrestricted:
            return True

        bucket = AccuracyBucket.classify(score)
        if bucket is AccuracyBucket.HIGH:
            return self.high
        if bucket is AccuracyBucket.MEDIUM:
            return self.medium
        return self.low

    @classmethod
    def from_buckets(cls, buckets) -> "AccuracyFilter":
        names = {AccuracyBucket(b).value for b in buckets}
        return cls(
            high="high" in names,
            medium="medium" in names,
            low="low" in names,
        )


class MatchField(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"
    OPTION = "option"


@dataclass
class FieldMatch:
    """
    Score of one record field against the query.

    Question and answer matches carry a single span; option matches carry
    one span per option text, keyed by that text.
    """
    source: MatchField
    score: float
    span: MatchSpan = field(default_factory=list)
    spans_by_option: Optional[Dict[str, MatchSpan]] = None


@dataclass(frozen=True)
class SearchResult:
    """
    Represents a ranked record returned to the caller.
    """
    record: Record
    score: float
    matched_label: str
    question_matches: MatchSpan = field(default_factory=list)
    option_matches: Dict[str, MatchSpan] = field(default_factory=dict)
    answer_matches: MatchSpan = field(default_factory=list)

    @property
    def bucket(self) -> AccuracyBucket:
        return AccuracyBucket.classify(self.score)

    def to_dict(self) -> dict:
        """Transport shape; empty spans stay present as [] / {}."""
        return {
            "item": self.record.to_dict(),
            "score": self.score,
            "matched": self.matched_label,
            "questionMatches": list(self.question_matches),
            "optionMatches": {
                option: list(span) for option, span in self.option_matches.items()
            },
            "answerMatches": list(self.answer_matches),
        }

    def __repr__(self) -> str:
        preview = self.record.question[:80].replace("\n", " ")
        return (
            f"SearchResult(score={self.score:.4f}, "
            f"bucket='{self.bucket.value}', "
            f"preview='{preview}...')"
        )
