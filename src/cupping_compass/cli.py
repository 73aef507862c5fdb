"""Command-line interface for cupping-compass."""

import argparse
import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from cupping_compass import __version__
from cupping_compass.core import select_provider, serialize_for_narrative
from cupping_compass.exceptions import CuppingCompassError
from cupping_compass.i18n import LABELS, get_translator
from cupping_compass.reporting import to_pdf_line_items, to_radar_series, to_report_document
from cupping_compass.rendering import render_pdf, render_radar_png
from cupping_compass.schema import Evaluation
from cupping_compass.scoring import score_evaluation


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cupping-compass",
        description="Score an SCA cupping evaluation and export its report",
    )
    parser.add_argument("evaluation", help="Path to an evaluation JSON file")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output the report document as JSON",
    )
    parser.add_argument(
        "--lang",
        default="es",
        choices=sorted(LABELS),
        help="Report language (default: es)",
    )
    parser.add_argument("--pdf", help="Write the PDF report to this path")
    parser.add_argument("--radar", help="Write the combined radar chart PNG to this path")
    parser.add_argument(
        "--narrative",
        action="store_true",
        help="Append a narrative report",
    )
    parser.add_argument(
        "--provider",
        help="Narrative provider: gemini or template (default: CUPPING_COMPASS_PROVIDER env var)",
    )
    parser.add_argument(
        "--api-key",
        help="Gemini API key (default: GEMINI_API_KEY env var)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"cupping-compass {__version__}",
    )

    args = parser.parse_args(argv)
    translate = get_translator(args.lang)

    try:
        raw = Path(args.evaluation).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        evaluation = Evaluation.model_validate_json(raw)
    except PydanticValidationError as e:
        print(f"Error: invalid evaluation file: {e}", file=sys.stderr)
        return 1

    try:
        evaluation = score_evaluation(evaluation)
        report = to_report_document(evaluation, translate)
        if args.pdf:
            Path(args.pdf).write_bytes(render_pdf(to_pdf_line_items(evaluation, translate), translate))
        if args.radar:
            series = to_radar_series(evaluation, include_sweetness=True)
            Path(args.radar).write_bytes(render_radar_png(series, translate))
        narrative = None
        if args.narrative:
            engine = select_provider(args.provider, args.api_key, language=args.lang)
            narrative = engine.generate(serialize_for_narrative(evaluation))
    except (CuppingCompassError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        _print_formatted(report, translate)
    if narrative:
        print(narrative)

    return 0


def _print_formatted(report, translate) -> None:
    """Print report in human-readable format."""
    print()
    print("  cupping-compass")
    print()

    fields = [
        (translate("overall_score"), f"{report.summary.overall_score:.2f}"),
        (translate("roast_level"), report.header.roast_level),
        (translate("evaluation_date"), report.header.evaluation_date),
        (translate("water_temperature"), report.header.water_temperature),
    ]
    fields.extend(
        (translate(name), f"{value:.2f}") for name, value in report.summary.averages.items()
    )

    for label, value in fields:
        display = value if value else "-"
        print(f"  {label + ':':<24} {display}")

    print()
    for cup in report.cups:
        print(f"  {translate('cup')} #{cup.number:<3} {cup.total_score:.2f}")
    print()


if __name__ == "__main__":
    sys.exit(main())
