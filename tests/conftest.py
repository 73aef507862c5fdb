"""Shared builders for cupping records."""

from datetime import datetime, timezone

import pytest

from cupping_compass.schema import CupEvaluation, Defects, Evaluation, PhaseScores, ScoreSet


def build_cup(
    *,
    aroma: float = 8.5,
    flavor: float = 8.25,
    aftertaste: float = 8.0,
    acidity: float = 8.5,
    body: float = 8.0,
    balance: float = 8.25,
    warm: ScoreSet | None = None,
    cold: ScoreSet | None = None,
    defects: tuple[int, int] = (0, 0),
    **overrides,
) -> CupEvaluation:
    hot = ScoreSet(
        flavor=flavor,
        aftertaste=aftertaste,
        acidity=acidity,
        body=body,
        balance=balance,
        acidity_intensity="high",
        body_intensity="low",
    )
    return CupEvaluation(
        aroma=aroma,
        scores=PhaseScores(hot=hot, warm=warm, cold=cold),
        defects=Defects(cups_affected=defects[0], intensity=defects[1]),
        **overrides,
    )


def build_evaluation(*cups: CupEvaluation, **overrides) -> Evaluation:
    values = {
        "owner_id": "user-1",
        "coffee_name": "Ethiopia Yirgacheffe",
        "roast_level": "medium",
        "water_temperature": "hot",
        "cups": list(cups) or [build_cup()],
        "created_at": datetime(2024, 5, 17, 9, 30, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return Evaluation(**values)


@pytest.fixture
def make_cup():
    return build_cup


@pytest.fixture
def make_evaluation():
    return build_evaluation
