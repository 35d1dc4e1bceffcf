"""Tests for survey scoring."""

import itertools

import pytest

from surveydesk.core.exceptions import IncompleteAnswersError
from surveydesk.domains.survey.models import QUALITY_OPTIONS, TIMING_OPTIONS
from surveydesk.domains.survey.scoring import (
    calculate_global_score,
    quality_score,
    round_one,
    time_score,
)


@pytest.mark.parametrize(
    "tiempo,expected",
    [("Antes de la fecha", 5), ("Justo a tiempo", 5), ("Hubo demora", 1)],
)
def test_time_score_is_binary(tiempo, expected):
    assert time_score(tiempo) == expected


@pytest.mark.parametrize(
    "calidad,expected",
    [
        ("Uniforme y renovado", 5),
        ("Cumple, pero esperaba más", 3),
        ("No estoy satisfecho", 1),
        # Matching is by substring, so reworded options keep their score
        ("Bien, aunque esperaba más brillo", 3),
        ("No estoy conforme", 1),
        ("Excelente", 5),
    ],
)
def test_quality_score_matches_substrings(calidad, expected):
    assert quality_score(calidad) == expected


def test_delayed_expected_more_example():
    assert calculate_global_score("Hubo demora", 4, "Cumple, pero esperaba más") == 2.7


def test_best_and_worst_scores():
    assert calculate_global_score("Antes de la fecha", 5, "Uniforme y renovado") == 5.0
    assert calculate_global_score("Hubo demora", 1, "No estoy satisfecho") == 1.0


def test_global_score_in_range_for_every_answer_combination():
    for tiempo, stars, calidad in itertools.product(TIMING_OPTIONS, range(1, 6), QUALITY_OPTIONS):
        score = calculate_global_score(tiempo, stars, calidad)
        expected = round_one((time_score(tiempo) + stars + quality_score(calidad)) / 3)
        assert score == expected
        assert 1.0 <= score <= 5.0


def test_round_one_rounds_half_up():
    assert round_one(4.25) == 4.3
    assert round_one(8 / 3) == 2.7
    assert round_one(4 / 3) == 1.3


def test_round_one_uses_the_stored_float_value():
    # 4.35 is stored as 4.3499999..., so it rounds down
    assert round_one((4.0 + 4.7) / 2) == 4.3
    assert round_one((2.7 + 5.0) / 2) == 3.9


@pytest.mark.parametrize(
    "tiempo,stars,calidad,missing",
    [
        ("", 4, "Uniforme y renovado", ["tiempo"]),
        ("Justo a tiempo", 0, "Uniforme y renovado", ["presentacion"]),
        ("Justo a tiempo", 4, "", ["calidad"]),
        ("", 0, "", ["tiempo", "presentacion", "calidad"]),
    ],
)
def test_unanswered_questions_are_rejected(tiempo, stars, calidad, missing):
    with pytest.raises(IncompleteAnswersError) as exc_info:
        calculate_global_score(tiempo, stars, calidad)
    assert exc_info.value.details["missing"] == missing
