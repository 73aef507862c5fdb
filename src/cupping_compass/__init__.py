"""cupping-compass: SCA cupping scores, reports and narrative summaries."""

from cupping_compass.core import create_evaluation, generate_narrative
from cupping_compass.reporting import to_pdf_line_items, to_radar_series, to_report_document
from cupping_compass.schema import CupEvaluation, Defects, Evaluation, PhaseScores, ScoreSet
from cupping_compass.scoring import (
    aggregate_cup,
    aggregate_evaluation,
    clamp_slider_score,
    consistency_points,
    defect_points,
    score_evaluation,
)

__version__ = "0.1.0"

__all__ = [
    "aggregate_cup",
    "aggregate_evaluation",
    "clamp_slider_score",
    "consistency_points",
    "create_evaluation",
    "defect_points",
    "generate_narrative",
    "score_evaluation",
    "to_pdf_line_items",
    "to_radar_series",
    "to_report_document",
    "CupEvaluation",
    "Defects",
    "Evaluation",
    "PhaseScores",
    "ScoreSet",
    "__version__",
]
