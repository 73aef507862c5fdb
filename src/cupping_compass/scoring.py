"""SCA score primitives and aggregation.

All functions here are pure: they read the data model and return new values
without touching storage or shared state.

Phase handling: a ScoreSet attribute contributes the arithmetic mean of the
values recorded across phases (hot, plus warm and cold when tasted). A cup
scored only hot therefore contributes its hot values unchanged.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass

from cupping_compass.exceptions import ComputationError, ValidationError
from cupping_compass.schema import (
    CONSISTENCY_ATTRIBUTES,
    CUPS_PER_CHECK,
    PHASE_ATTRIBUTES,
    CupEvaluation,
    Evaluation,
    ScoreSet,
)

SLIDER_MIN = 6.0
SLIDER_MAX = 10.0
SLIDER_STEP = 0.25
MAX_DEFECTIVE_CUPS = 5
DEFECT_INTENSITIES = (0, 2, 4)
POINTS_PER_MATCHED_CUP = 2


@dataclass(frozen=True)
class ScoreBreakdown:
    """Named contributions to a cup total. Defects are stored as a positive penalty."""

    aroma: float
    flavor: float
    aftertaste: float
    acidity: float
    body: float
    balance: float
    uniformity: int
    clean_cup: int
    sweetness: int
    defects: int

    def subtotal(self) -> float:
        return (
            self.aroma
            + self.flavor
            + self.aftertaste
            + self.acidity
            + self.body
            + self.balance
            + self.uniformity
            + self.clean_cup
            + self.sweetness
        )

    def as_dict(self) -> dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class CupScore:
    total_score: float
    cupper_score: float
    breakdown: ScoreBreakdown


def clamp_slider_score(value: float, field: str = "score") -> float:
    """Validate a 6-10 slider value in quarter-point steps and return it as float.

    Raises:
        ValidationError: If the value is not numeric, out of range or off-step.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(field, f"expected a number, got {value!r}")
    number = float(value)
    if math.isnan(number) or number < SLIDER_MIN or number > SLIDER_MAX:
        raise ValidationError(field, f"must be between {SLIDER_MIN:g} and {SLIDER_MAX:g}, got {value!r}")
    steps = number / SLIDER_STEP
    if not math.isclose(steps, round(steps), abs_tol=1e-9):
        raise ValidationError(field, f"must be a multiple of {SLIDER_STEP}, got {value!r}")
    return number


def consistency_points(checks: Sequence[bool], field: str = "checks") -> int:
    """Return 2 points per matching cup for a five-cup consistency check."""
    if len(checks) != CUPS_PER_CHECK:
        raise ValidationError(field, f"expected {CUPS_PER_CHECK} cup checks, got {len(checks)}")
    for index, check in enumerate(checks):
        if not isinstance(check, bool):
            raise ValidationError(f"{field}[{index}]", f"expected a boolean, got {check!r}")
    return sum(1 for check in checks if check) * POINTS_PER_MATCHED_CUP


def defect_points(cups_affected: int, intensity: int) -> int:
    """Return the defect penalty: defective cups times intensity."""
    if isinstance(cups_affected, bool) or not isinstance(cups_affected, int):
        raise ValidationError("defects.cups_affected", f"expected an integer, got {cups_affected!r}")
    if not 0 <= cups_affected <= MAX_DEFECTIVE_CUPS:
        raise ValidationError(
            "defects.cups_affected",
            f"must be between 0 and {MAX_DEFECTIVE_CUPS}, got {cups_affected}",
        )
    if isinstance(intensity, bool) or intensity not in DEFECT_INTENSITIES:
        raise ValidationError("defects.intensity", f"must be one of {DEFECT_INTENSITIES}, got {intensity!r}")
    return cups_affected * intensity


def phase_score(score_set: ScoreSet, field: str) -> dict[str, float]:
    """Validate every slider of one phase and return them by attribute."""
    return {
        attribute: clamp_slider_score(getattr(score_set, attribute), f"{field}.{attribute}")
        for attribute in PHASE_ATTRIBUTES
    }


def averaged_phase_scores(cup: CupEvaluation, field: str = "cup") -> dict[str, float]:
    """Mean of each phase attribute over the phases recorded for the cup."""
    recorded = [
        phase_score(score_set, f"{field}.scores.{phase}") for phase, score_set in cup.scores.recorded()
    ]
    return {
        attribute: sum(values[attribute] for values in recorded) / len(recorded)
        for attribute in PHASE_ATTRIBUTES
    }


def aggregate_cup(cup: CupEvaluation, field: str = "cup") -> CupScore:
    """Score one cup.

    Args:
        cup: Cup to score. Derived fields on it are ignored.
        field: Prefix used in validation error field names.

    Returns:
        CupScore with the total, the cupper score (mean of the six sliders,
        informational only) and the breakdown of every contribution.

    Raises:
        ValidationError: If any input is out of range.
        ComputationError: If defects push the total below zero.
    """
    aroma = clamp_slider_score(cup.aroma, f"{field}.aroma")
    phases = averaged_phase_scores(cup, field)
    consistency = {
        attribute: consistency_points(getattr(cup, attribute), f"{field}.{attribute}")
        for attribute in CONSISTENCY_ATTRIBUTES
    }
    try:
        penalty = defect_points(cup.defects.cups_affected, cup.defects.intensity)
    except ValidationError as e:
        raise ValidationError(f"{field}.{e.field}", e.message) from e

    breakdown = ScoreBreakdown(aroma=aroma, defects=penalty, **phases, **consistency)
    total = breakdown.subtotal() - penalty
    if total < 0:
        raise ComputationError(f"{field}: defect points ({penalty}) exceed the attribute sum")

    sliders = [aroma, *phases.values()]
    return CupScore(
        total_score=total,
        cupper_score=round(sum(sliders) / len(sliders), 2),
        breakdown=breakdown,
    )


def normalize_coffee_name(name: str) -> str:
    """Key used for the per-owner name uniqueness check."""
    return name.strip().casefold()


def duplicate_name_error(name: str) -> ValidationError:
    return ValidationError("coffee_name", f"an evaluation named {name.strip()!r} already exists")


def validate_evaluation(evaluation: Evaluation, existing_names: Iterable[str] = ()) -> None:
    """Creation-time checks that run before any score is computed."""
    if not evaluation.coffee_name or not evaluation.coffee_name.strip():
        raise ValidationError("coffee_name", "must not be blank")
    wanted = normalize_coffee_name(evaluation.coffee_name)
    if any(normalize_coffee_name(name) == wanted for name in existing_names):
        raise duplicate_name_error(evaluation.coffee_name)
    if not evaluation.cups:
        raise ValidationError("cups", "at least one cup is required")


def overall_score(evaluation: Evaluation) -> float:
    """Mean of cup totals, rounded to 2 decimals."""
    if not evaluation.cups:
        raise ValidationError("cups", "at least one cup is required")
    totals = [aggregate_cup(cup, f"cups[{index}]").total_score for index, cup in enumerate(evaluation.cups)]
    return round(sum(totals) / len(totals), 2)


def aggregate_evaluation(evaluation: Evaluation, existing_names: Iterable[str] = ()) -> float:
    """Validate a new evaluation against the owner's existing names and score it."""
    validate_evaluation(evaluation, existing_names)
    return overall_score(evaluation)


def score_evaluation(evaluation: Evaluation, existing_names: Iterable[str] = ()) -> Evaluation:
    """Return a copy of the evaluation with all derived scores filled in."""
    validate_evaluation(evaluation, existing_names)
    cups = []
    for index, cup in enumerate(evaluation.cups):
        result = aggregate_cup(cup, f"cups[{index}]")
        cups.append(
            cup.model_copy(update={"total_score": result.total_score, "cupper_score": result.cupper_score})
        )
    totals = [cup.total_score for cup in cups]
    return evaluation.model_copy(
        update={
            "coffee_name": evaluation.coffee_name.strip(),
            "cups": cups,
            "overall_score": round(sum(totals) / len(totals), 2),
        }
    )
