"""Gemini narrative provider implementation."""

import os

from google import genai
from google.genai import types
from pydantic import BaseModel

from cupping_compass.exceptions import AuthenticationError, NarrativeError, RateLimitError
from cupping_compass.providers.base import BaseNarrativeProvider

NARRATIVE_PROMPT = """You are an expert coffee cupping evaluator. Write a comprehensive report
based on the cupping data below, which follows SCA cupping conventions.

Cupping data:
{cupping_data}

Pay special attention to the "water_temperature" field. Describe how the water
temperature (cold, warm or hot) may have influenced the flavor profile, acidity,
body and overall perception of the coffee.

Summarize the key findings, highlight the strengths and weaknesses of the coffee
and state an overall score based on SCA standards. The report should be suitable
for sharing with coffee professionals and enthusiasts.

Return a JSON object with a single "report" field holding the report text."""


class NarrativeReport(BaseModel):
    report: str


class GeminiNarrativeProvider(BaseNarrativeProvider):
    """Gemini text generation provider."""

    def __init__(self, api_key: str | None = None, model: str = "gemini-2.0-flash", client=None):
        """Initialize Gemini provider.

        Args:
            api_key: Gemini API key. Falls back to GEMINI_API_KEY env var.
            model: Model name to use.
            client: Preconfigured genai client, mainly for tests.

        Raises:
            AuthenticationError: If no API key is provided or found.
        """
        self.model = model
        if client is not None:
            self.api_key = api_key
            self.client = client
            return

        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        if not self.api_key:
            raise AuthenticationError(
                "No API key provided. Set GEMINI_API_KEY environment variable "
                "or pass api_key parameter."
            )
        self.client = genai.Client(api_key=self.api_key)

    def generate(self, cupping_data: str) -> str:
        """Generate a narrative report with Gemini.

        Raises:
            RateLimitError: If API rate limit is exceeded
            AuthenticationError: If API key is invalid
            NarrativeError: If the model response cannot be used
        """
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=[NARRATIVE_PROMPT.format(cupping_data=cupping_data)],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=NarrativeReport,
                ),
            )
            return NarrativeReport.model_validate_json(response.text).report

        except genai.errors.ClientError as e:
            if "rate" in str(e).lower() or "quota" in str(e).lower():
                raise RateLimitError(f"API rate limit exceeded: {e}") from e
            if "auth" in str(e).lower() or "key" in str(e).lower():
                raise AuthenticationError(f"Invalid API key: {e}") from e
            raise NarrativeError(f"Gemini request failed: {e}") from e
        except Exception as e:
            raise NarrativeError(f"Failed to generate report: {e}") from e

    def get_generation_metadata(self) -> dict[str, str]:
        return {"provider": "gemini", "model": self.model}
