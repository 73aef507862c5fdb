"""Data models for cupping-compass."""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

Phase = Literal["hot", "warm", "cold"]
Intensity = Literal["low", "medium", "high"]
RoastLevel = Literal["light", "medium", "medium-dark", "dark"]
AromaCategory = Literal[
    "floral",
    "fruity",
    "spicy",
    "nutty_cocoa",
    "caramelized",
    "herbal",
    "earthy",
    "other",
]

PHASES: tuple[Phase, ...] = ("hot", "warm", "cold")
PHASE_ATTRIBUTES = ("flavor", "aftertaste", "acidity", "body", "balance")
CONSISTENCY_ATTRIBUTES = ("uniformity", "clean_cup", "sweetness")
CUPS_PER_CHECK = 5


def _new_id() -> str:
    return uuid.uuid4().hex


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _all_matched() -> list[bool]:
    return [True] * CUPS_PER_CHECK


class ScoreSet(BaseModel):
    """Slider scores recorded at one serving temperature."""

    flavor: float
    aftertaste: float
    acidity: float
    body: float
    balance: float
    acidity_intensity: Intensity = "medium"
    body_intensity: Intensity = "medium"


class PhaseScores(BaseModel):
    """Score sets per phase. Warm and cold are only present once tasted."""

    hot: ScoreSet
    warm: ScoreSet | None = None
    cold: ScoreSet | None = None

    def recorded(self) -> list[tuple[Phase, ScoreSet]]:
        """Return (phase, score set) pairs in serving order, skipping gaps."""
        return [(phase, getattr(self, phase)) for phase in PHASES if getattr(self, phase) is not None]


class Defects(BaseModel):
    """Defective cups and their intensity (2 = taint, 4 = fault)."""

    cups_affected: int = 0
    intensity: int = 0


class CupEvaluation(BaseModel):
    """One scored cup."""

    id: str = Field(default_factory=_new_id)
    aroma_category: AromaCategory | None = None
    dry_fragrance: Intensity = "medium"
    wet_aroma: Intensity = "medium"
    uniformity: list[bool] = Field(default_factory=_all_matched)
    clean_cup: list[bool] = Field(default_factory=_all_matched)
    sweetness: list[bool] = Field(default_factory=_all_matched)
    aroma: float
    scores: PhaseScores
    defects: Defects = Field(default_factory=Defects)
    cupper_score: float | None = None
    total_score: float | None = None


class Evaluation(BaseModel):
    """A complete tasting record owned by one user."""

    id: str = Field(default_factory=_new_id)
    owner_id: str
    coffee_name: str
    roast_level: RoastLevel = "medium"
    water_temperature: str | None = None
    cups: list[CupEvaluation] = Field(default_factory=list)
    overall_score: float | None = None
    notes: str = ""
    created_at: datetime = Field(default_factory=_utc_now)
    is_favorite: bool = False
