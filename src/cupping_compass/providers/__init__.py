"""Narrative providers for cupping-compass."""

from cupping_compass.providers.base import BaseNarrativeProvider
from cupping_compass.providers.gemini import GeminiNarrativeProvider
from cupping_compass.providers.template import TemplateNarrativeProvider

__all__ = ["BaseNarrativeProvider", "GeminiNarrativeProvider", "TemplateNarrativeProvider"]
