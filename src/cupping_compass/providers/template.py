"""Offline narrative provider built from the report document."""

from __future__ import annotations

from cupping_compass.exceptions import NarrativeError
from cupping_compass.i18n import get_translator
from cupping_compass.providers.base import BaseNarrativeProvider
from cupping_compass.reporting import to_report_document
from cupping_compass.schema import Evaluation

_SCA_BANDS = (
    (90.0, "outstanding"),
    (85.0, "excellent"),
    (80.0, "very good"),
)


def sca_grade(score: float) -> str:
    for threshold, grade in _SCA_BANDS:
        if score >= threshold:
            return grade
    return "below specialty grade"


class TemplateNarrativeProvider(BaseNarrativeProvider):
    """Deterministic summary that needs no network access."""

    def __init__(self, language: str = "en"):
        self.language = language
        self.translate = get_translator(language)

    def generate(self, cupping_data: str) -> str:
        try:
            evaluation = Evaluation.model_validate_json(cupping_data)
        except ValueError as e:
            raise NarrativeError(f"Invalid cupping data: {e}") from e

        report = to_report_document(evaluation, self.translate)
        averages = report.summary.averages
        sliders = {
            name: averages[name] for name in ("aroma", "flavor", "aftertaste", "acidity", "body", "balance")
        }
        strongest = max(sliders, key=sliders.get)
        weakest = min(sliders, key=sliders.get)

        lines = [
            f"{report.header.coffee_name} ({report.header.roast_level}), "
            f"evaluated on {report.header.evaluation_date}.",
            f"Overall score: {report.summary.overall_score:.2f} ({sca_grade(report.summary.overall_score)}) "
            f"across {len(report.cups)} cup(s).",
            f"Strongest attribute: {self.translate(strongest)} ({sliders[strongest]:.2f}). "
            f"Weakest attribute: {self.translate(weakest)} ({sliders[weakest]:.2f}).",
        ]
        if report.header.water_temperature:
            lines.append(f"Water temperature: {report.header.water_temperature}.")
        if averages["defects"]:
            lines.append(f"Average defect penalty: {averages['defects']:.2f} points.")
        if report.notes:
            lines.append(f"Notes: {report.notes}")
        return "\n".join(lines)

    def get_generation_metadata(self) -> dict[str, str]:
        return {"provider": "template", "language": self.language}
