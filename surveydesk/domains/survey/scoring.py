"""Survey scoring - turns the three answers into a single 1-5 global score."""

from decimal import ROUND_HALF_UP, Decimal

from surveydesk.core.exceptions import IncompleteAnswersError
from surveydesk.domains.survey.models import TIMING_DELAYED

EXPECTED_MORE_MARKER = "esperaba más"
UNSATISFIED_MARKER = "No estoy"


def round_one(value: float) -> float:
    """Round half-up to one decimal place, on the exact binary value of the float."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def time_score(tiempo: str) -> int:
    """Delivery timing is binary: any delay scores 1, early or on time scores 5."""
    return 1 if tiempo == TIMING_DELAYED else 5


def quality_score(calidad: str) -> int:
    """Score the quality answer by substring, so copy edits to the options keep matching."""
    score = 5
    if EXPECTED_MORE_MARKER in calidad:
        score = 3
    if UNSATISFIED_MARKER in calidad:
        score = 1
    return score


def check_answers(tiempo: str | None, presentacion: int | None, calidad: str | None) -> None:
    """
    Ensure every scored question has been answered.

    Raises:
        IncompleteAnswersError: If any answer is missing or the rating is outside 1-5
    """
    missing = []
    if not tiempo:
        missing.append("tiempo")
    if not presentacion or not 1 <= presentacion <= 5:
        missing.append("presentacion")
    if not calidad:
        missing.append("calidad")
    if missing:
        raise IncompleteAnswersError(missing)


def calculate_global_score(tiempo: str, presentacion: int, calidad: str) -> float:
    """
    Calculate the global satisfaction score.

    Average of (timing score + presentation stars + quality score), rounded to one
    decimal. The result is always within [1.0, 5.0].
    """
    check_answers(tiempo, presentacion, calidad)
    total = time_score(tiempo) + presentacion + quality_score(calidad)
    return round_one(total / 3)
