"""Projection of scored evaluations into chart series, report documents and PDF line items."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from cupping_compass.exceptions import ValidationError
from cupping_compass.i18n import Translator, identity, roast_level_key
from cupping_compass.schema import (
    CONSISTENCY_ATTRIBUTES,
    PHASE_ATTRIBUTES,
    PHASES,
    CupEvaluation,
    Evaluation,
    Phase,
)
from cupping_compass.scoring import (
    CupScore,
    aggregate_cup,
    averaged_phase_scores,
    clamp_slider_score,
    consistency_points,
    overall_score,
    phase_score,
)

RADAR_ATTRIBUTES = ("aroma", *PHASE_ATTRIBUTES)
SUMMARY_ATTRIBUTES = ("aroma", *PHASE_ATTRIBUTES, *CONSISTENCY_ATTRIBUTES, "defects", "cupper_score")


class RadarSeries(BaseModel):
    aroma: float
    flavor: float
    aftertaste: float
    acidity: float
    body: float
    balance: float
    sweetness: float | None = None

    def points(self) -> list[tuple[str, float]]:
        """Return (attribute, value) pairs in chart axis order."""
        names = RADAR_ATTRIBUTES if self.sweetness is None else (*RADAR_ATTRIBUTES, "sweetness")
        return [(name, getattr(self, name)) for name in names]


class ReportHeader(BaseModel):
    coffee_name: str
    roast_level: str
    evaluation_date: str
    water_temperature: str | None = None


class ReportSummary(BaseModel):
    overall_score: float
    averages: dict[str, float]


class PhaseValues(BaseModel):
    hot: float
    warm: float | None = None
    cold: float | None = None


class IntensityScore(BaseModel):
    """Phase-averaged score with the intensity noted at the hot tasting."""

    score: float
    intensity: str


class AdditionalEvaluations(BaseModel):
    acidity: IntensityScore
    body: IntensityScore
    aroma: float
    uniformity: int
    clean_cup: int
    sweetness: int
    defects: int
    cupper_score: float


class CupReport(BaseModel):
    number: int
    total_score: float
    phases: dict[str, PhaseValues]
    additional: AdditionalEvaluations
    radar: dict[str, RadarSeries]


class ReportDocument(BaseModel):
    header: ReportHeader
    summary: ReportSummary
    cups: list[CupReport] = Field(default_factory=list)
    notes: str = ""


class LineItem(BaseModel):
    """One draw instruction for a PDF renderer.

    `kind` hints at the layout: titles are centered, headings start a block,
    rows are label/value pairs and `table_row` carries one value per column.
    """

    page: int
    kind: Literal["title", "subtitle", "heading", "row", "table_header", "table_row", "chart"]
    label: str
    value: str = ""
    columns: list[str] = Field(default_factory=list)
    chart: RadarSeries | None = None


def _round(value: float) -> float:
    return round(value, 2)


def _cup_radar(cup: CupEvaluation, phase: Phase | None, include_sweetness: bool, field: str) -> RadarSeries:
    if phase is None:
        values = averaged_phase_scores(cup, field)
    else:
        score_set = getattr(cup.scores, phase)
        if score_set is None:
            raise ValidationError(f"{field}.scores.{phase}", "phase was not recorded")
        values = phase_score(score_set, f"{field}.scores.{phase}")
    sweetness = consistency_points(cup.sweetness, f"{field}.sweetness") if include_sweetness else None
    return RadarSeries(
        aroma=clamp_slider_score(cup.aroma, f"{field}.aroma"),
        sweetness=sweetness,
        **values,
    )


def to_radar_series(
    target: CupEvaluation | Evaluation,
    phase: Phase | None = None,
    include_sweetness: bool = False,
) -> RadarSeries:
    """Build the radar chart series for a cup or a whole evaluation.

    Args:
        target: A single cup, or an evaluation whose cups are averaged.
        phase: Use only this phase. None averages the recorded phases.
        include_sweetness: Add sweetness consistency points as a seventh axis.

    Raises:
        ValidationError: If the phase was not recorded or an evaluation has no cups.
    """
    if isinstance(target, CupEvaluation):
        return _cup_radar(target, phase, include_sweetness, "cup")

    if not target.cups:
        raise ValidationError("cups", "at least one cup is required")
    series = [
        _cup_radar(cup, phase, include_sweetness, f"cups[{index}]") for index, cup in enumerate(target.cups)
    ]
    averaged = {
        name: sum(getattr(item, name) for item in series) / len(series) for name in RADAR_ATTRIBUTES
    }
    if include_sweetness:
        averaged["sweetness"] = sum(item.sweetness for item in series) / len(series)
    return RadarSeries(**averaged)


def _cup_report(cup: CupEvaluation, number: int, result: CupScore, translate: Translator) -> CupReport:
    field = f"cups[{number - 1}]"
    breakdown = result.breakdown

    phases: dict[str, PhaseValues] = {}
    for attribute in PHASE_ATTRIBUTES:
        phases[attribute] = PhaseValues(
            **{
                phase: getattr(score_set, attribute)
                for phase, score_set in cup.scores.recorded()
            }
        )

    hot = cup.scores.hot
    additional = AdditionalEvaluations(
        acidity=IntensityScore(score=breakdown.acidity, intensity=translate(hot.acidity_intensity)),
        body=IntensityScore(score=breakdown.body, intensity=translate(hot.body_intensity)),
        aroma=breakdown.aroma,
        uniformity=breakdown.uniformity,
        clean_cup=breakdown.clean_cup,
        sweetness=breakdown.sweetness,
        defects=breakdown.defects,
        cupper_score=result.cupper_score,
    )

    radar = {
        phase: _cup_radar(cup, phase, True, field)
        for phase, _ in cup.scores.recorded()
    }
    radar["combined"] = _cup_radar(cup, None, True, field)

    return CupReport(
        number=number,
        total_score=_round(result.total_score),
        phases=phases,
        additional=additional,
        radar=radar,
    )


def to_report_document(evaluation: Evaluation, translate: Translator) -> ReportDocument:
    """Build the serializable report for an evaluation.

    `overall_score` is recomputed from the cups so that it always matches
    the aggregator, even for records stored before scoring changed.
    """
    score = overall_score(evaluation)
    results = [aggregate_cup(cup, f"cups[{index}]") for index, cup in enumerate(evaluation.cups)]
    cups = [
        _cup_report(cup, index + 1, result, translate)
        for index, (cup, result) in enumerate(zip(evaluation.cups, results))
    ]

    averages: dict[str, float] = {}
    for attribute in SUMMARY_ATTRIBUTES:
        if attribute == "cupper_score":
            values = [result.cupper_score for result in results]
        else:
            values = [result.breakdown.as_dict()[attribute] for result in results]
        averages[attribute] = _round(sum(values) / len(values))

    return ReportDocument(
        header=ReportHeader(
            coffee_name=evaluation.coffee_name,
            roast_level=translate(roast_level_key(evaluation.roast_level)),
            evaluation_date=evaluation.created_at.date().isoformat(),
            water_temperature=evaluation.water_temperature,
        ),
        summary=ReportSummary(overall_score=score, averages=averages),
        cups=cups,
        notes=evaluation.notes,
    )


def _fmt(value: float | None) -> str:
    return "-" if value is None else f"{value:.2f}"


def to_pdf_line_items(evaluation: Evaluation, translate: Translator = identity) -> list[LineItem]:
    """Lay out the report as ordered draw instructions.

    Page 1 holds the summary; every cup gets its own page with the phase
    table, additional evaluations and one radar reference per phase.
    """
    report = to_report_document(evaluation, translate)
    items = [
        LineItem(page=1, kind="title", label=report.header.coffee_name),
        LineItem(page=1, kind="row", label=translate("roast_level"), value=report.header.roast_level),
        LineItem(page=1, kind="row", label=translate("evaluation_date"), value=report.header.evaluation_date),
    ]
    if report.header.water_temperature:
        items.append(
            LineItem(
                page=1,
                kind="row",
                label=translate("water_temperature"),
                value=report.header.water_temperature,
            )
        )
    items.append(
        LineItem(page=1, kind="heading", label=translate("overall_score"), value=_fmt(report.summary.overall_score))
    )
    items.append(
        LineItem(
            page=1,
            kind="table_header",
            label=translate("attribute"),
            columns=[translate("attribute"), translate("score")],
        )
    )
    for attribute, value in report.summary.averages.items():
        label = translate("fragrance_aroma" if attribute == "aroma" else attribute)
        items.append(LineItem(page=1, kind="table_row", label=label, value=_fmt(value), columns=[label, _fmt(value)]))
    if report.notes:
        items.append(LineItem(page=1, kind="row", label=translate("notes"), value=report.notes))

    for cup in report.cups:
        page = cup.number + 1
        items.append(
            LineItem(
                page=page,
                kind="subtitle",
                label=f"{translate('cup')} #{cup.number}",
                value=_fmt(cup.total_score),
            )
        )
        items.append(LineItem(page=page, kind="heading", label=translate("scores")))
        header = [translate("attribute"), *(translate(phase) for phase in PHASES)]
        items.append(LineItem(page=page, kind="table_header", label=translate("attribute"), columns=header))
        for attribute, values in cup.phases.items():
            row = [translate(attribute), _fmt(values.hot), _fmt(values.warm), _fmt(values.cold)]
            items.append(LineItem(page=page, kind="table_row", label=row[0], value=row[1], columns=row))

        items.append(LineItem(page=page, kind="heading", label=translate("additional_evaluations")))
        extra = cup.additional
        rows = [
            (translate("acidity"), f"{_fmt(extra.acidity.score)} ({extra.acidity.intensity})"),
            (translate("body"), f"{_fmt(extra.body.score)} ({extra.body.intensity})"),
            (translate("fragrance_aroma"), _fmt(extra.aroma)),
            (translate("uniformity"), _fmt(extra.uniformity)),
            (translate("clean_cup"), _fmt(extra.clean_cup)),
            (translate("sweetness"), _fmt(extra.sweetness)),
            (translate("defects"), _fmt(extra.defects)),
            (translate("cupper_score"), _fmt(extra.cupper_score)),
        ]
        for label, value in rows:
            items.append(LineItem(page=page, kind="row", label=label, value=value))

        items.append(LineItem(page=page, kind="heading", label=translate("flavor_profile")))
        for name, series in cup.radar.items():
            if name == "combined":
                continue
            items.append(LineItem(page=page, kind="chart", label=translate(name), chart=series))
    return items
