"""Base narrative provider interface."""

from abc import ABC, abstractmethod


class BaseNarrativeProvider(ABC):
    """Abstract base class for narrative report providers."""

    @abstractmethod
    def generate(self, cupping_data: str) -> str:
        """Write a narrative cupping report.

        Args:
            cupping_data: The evaluation serialized as JSON.

        Returns:
            Free-text report.
        """
        pass

    def get_generation_metadata(self) -> dict[str, str]:
        """Return provider-specific generation metadata."""
        return {}
