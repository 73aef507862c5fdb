"""Core entry points: recording evaluations and generating narratives."""

import logging
import os

from cupping_compass.i18n import DEFAULT_LANGUAGE
from cupping_compass.providers.base import BaseNarrativeProvider
from cupping_compass.schema import Evaluation
from cupping_compass.scoring import score_evaluation
from cupping_compass.storage.base import EvaluationStore

logger = logging.getLogger(__name__)


def create_evaluation(store: EvaluationStore, evaluation: Evaluation) -> Evaluation:
    """Validate, score and persist a newly submitted evaluation.

    The coffee name is checked against the owner's existing evaluations
    before any score is computed.

    Raises:
        ValidationError: If the name is blank or taken, or any score is invalid.
    """
    existing = store.coffee_names(evaluation.owner_id)
    scored = score_evaluation(evaluation, existing)
    logger.info(
        "created evaluation id=%s cups=%d overall=%.2f",
        scored.id,
        len(scored.cups),
        scored.overall_score,
    )
    return store.add(scored)


def toggle_favorite(store: EvaluationStore, owner_id: str, evaluation_id: str) -> Evaluation:
    current = store.get(owner_id, evaluation_id)
    return store.set_favorite(owner_id, evaluation_id, not current.is_favorite)


def _build_gemini_provider(api_key: str | None, model: str | None) -> BaseNarrativeProvider:
    from cupping_compass.providers.gemini import GeminiNarrativeProvider

    if model:
        return GeminiNarrativeProvider(api_key=api_key, model=model)
    return GeminiNarrativeProvider(api_key=api_key)


def _build_template_provider(language: str) -> BaseNarrativeProvider:
    from cupping_compass.providers.template import TemplateNarrativeProvider

    return TemplateNarrativeProvider(language=language)


def select_provider(
    provider: str | None,
    api_key: str | None = None,
    *,
    model: str | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> BaseNarrativeProvider:
    provider_name = (provider or os.getenv("CUPPING_COMPASS_PROVIDER", "gemini")).strip().lower()
    if provider_name in {"gemini", "llm"}:
        return _build_gemini_provider(api_key, model)
    if provider_name in {"template", "offline"}:
        return _build_template_provider(language)
    raise ValueError(f"Unsupported provider: {provider_name}")


def serialize_for_narrative(evaluation: Evaluation) -> str:
    """Serialize the evaluation as the JSON document handed to narrative providers."""
    return evaluation.model_dump_json(indent=2)


def generate_narrative(
    evaluation: Evaluation,
    *,
    api_key: str | None = None,
    provider: str | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> str:
    """Generate a free-text cupping report for an evaluation.

    Args:
        evaluation: Scored evaluation.
        api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
        provider: Provider name (`gemini` or `template`). Defaults to
            `CUPPING_COMPASS_PROVIDER` env var, then `gemini`.
        language: Label language for the template provider.

    Returns:
        Report text.
    """
    engine = select_provider(provider, api_key, language=language)
    return engine.generate(serialize_for_narrative(evaluation))
