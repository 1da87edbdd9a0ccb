"""
Evaluation scoring.

Turns the ten criterion sub-scores of an evaluation into a total, a
percentage and a letter grade. Every code path that stores scores
(create, edit, bulk import) goes through ``calculate_score``; the
unpersisted draft preview uses ``preview_score``.

Formula:
    total_score = sum of the ten sub-scores             (0-500)
    percentage  = total_score / (10 x 50) x 100         (0-100, stored to 2 dp)
    grade       = A >= 90, B >= 80, C >= 70, D >= 60, otherwise F,
                  applied to the unrounded percentage

Sub-scores carry at most two decimal places, the precision they are stored at.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Tuple

SCORE_FIELDS: Tuple[str, ...] = (
    "work_quality",
    "work_quantity",
    "knowledge",
    "initiative",
    "teamwork",
    "communication",
    "punctuality",
    "management",
    "reliability",
    "other_factors",
)

MIN_SUB_SCORE = Decimal("0")
MAX_SUB_SCORE = Decimal("50")
MAX_TOTAL_SCORE = MAX_SUB_SCORE * len(SCORE_FIELDS)

# Checked top-down, first match wins
GRADE_THRESHOLDS: Tuple[Tuple[Decimal, str], ...] = (
    (Decimal("90"), "A"),
    (Decimal("80"), "B"),
    (Decimal("70"), "C"),
    (Decimal("60"), "D"),
)
FAILING_GRADE = "F"

_CENTS = Decimal("0.01")


class ScoreValidationError(ValueError):
    """A sub-score is not a number, lies outside 0-50 or has more than two decimals."""

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__(
            f"Invalid score values for fields: {', '.join(fields)}. Values must be between 0 and 50 with at most two decimal places."
        )


class MissingScoreError(ValueError):
    """One or more required sub-scores were not supplied."""

    def __init__(self, fields: List[str]):
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


@dataclass(frozen=True)
class ScoreResult:
    total_score: Decimal
    percentage: Decimal
    grade: str
    # Validated sub-scores, exactly as they must be stored
    scores: Dict[str, Decimal]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "percentage": self.percentage,
            "grade": self.grade,
        }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidOperation
    if isinstance(value, float):
        # Go through str so 8.1 stays 8.1 rather than its binary expansion
        value = str(value)
    result = Decimal(value)
    if not result.is_finite():
        raise InvalidOperation
    return result


def grade_for_percentage(percentage: Any) -> str:
    """Map a percentage to its letter grade."""
    value = _to_decimal(percentage)
    for threshold, grade in GRADE_THRESHOLDS:
        if value >= threshold:
            return grade
    return FAILING_GRADE


def _normalise(scores: Mapping[str, Any], default_missing: bool) -> Dict[str, Decimal]:
    missing = [field for field in SCORE_FIELDS if _is_blank(scores.get(field))]
    if missing and not default_missing:
        raise MissingScoreError(missing)

    values: Dict[str, Decimal] = {}
    invalid: List[str] = []
    for field in SCORE_FIELDS:
        raw = scores.get(field)
        if _is_blank(raw):
            values[field] = MIN_SUB_SCORE
            continue
        try:
            value = _to_decimal(raw)
        except (InvalidOperation, TypeError, ValueError):
            invalid.append(field)
            continue
        # Stored as NUMERIC(5,2); anything finer would be rounded away on save
        if value < MIN_SUB_SCORE or value > MAX_SUB_SCORE or value != value.quantize(_CENTS):
            invalid.append(field)
            continue
        values[field] = value

    if invalid:
        raise ScoreValidationError(invalid)
    return values


def _score(values: Mapping[str, Decimal]) -> ScoreResult:
    total = sum(values.values(), Decimal("0"))
    exact_percentage = total / MAX_TOTAL_SCORE * 100
    # Graded on the exact value; only the stored percentage is rounded
    return ScoreResult(
        total_score=total.quantize(_CENTS, rounding=ROUND_HALF_UP),
        percentage=exact_percentage.quantize(_CENTS, rounding=ROUND_HALF_UP),
        grade=grade_for_percentage(exact_percentage),
        scores=dict(values),
    )


def calculate_score(scores: Mapping[str, Any]) -> ScoreResult:
    """
    Score a complete set of sub-scores.

    Args:
        scores: Mapping containing every name in SCORE_FIELDS. Extra keys
            (employee ids, comments, ...) are ignored, so a request payload
            can be passed as-is.

    Raises:
        MissingScoreError: a sub-score is absent, None or an empty string
        ScoreValidationError: a sub-score is non-numeric or outside 0-50
    """
    return _score(_normalise(scores, default_missing=False))


def preview_score(scores: Mapping[str, Any]) -> ScoreResult:
    """
    Score a partially filled form. Absent sub-scores count as 0.

    Only for draft display; never persist its result.
    """
    return _score(_normalise(scores, default_missing=True))


def extract_scores(source: Any) -> Dict[str, Any]:
    """Pull the sub-score attributes off a model or schema instance."""
    return {field: getattr(source, field) for field in SCORE_FIELDS}
