"""Evaluation store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cupping_compass.schema import Evaluation


class EvaluationStore(ABC):
    """Owner-scoped persistence for scored evaluations.

    Every method takes the owner id; an evaluation that exists under another
    owner is reported as missing.
    """

    @abstractmethod
    def add(self, evaluation: Evaluation) -> Evaluation:
        """Store a new evaluation.

        The name check and the insert are atomic: raises ValidationError if
        the owner already has an evaluation with the same coffee name.
        """
        pass

    @abstractmethod
    def get(self, owner_id: str, evaluation_id: str) -> Evaluation:
        """Raises EvaluationNotFoundError if absent."""
        pass

    @abstractmethod
    def list(
        self,
        owner_id: str,
        *,
        favorites_only: bool = False,
        min_score: float | None = None,
        search: str | None = None,
    ) -> list[Evaluation]:
        """Return the owner's evaluations, newest first."""
        pass

    @abstractmethod
    def delete(self, owner_id: str, evaluation_id: str) -> None:
        pass

    @abstractmethod
    def set_favorite(self, owner_id: str, evaluation_id: str, is_favorite: bool) -> Evaluation:
        pass

    def coffee_names(self, owner_id: str) -> list[str]:
        return [evaluation.coffee_name for evaluation in self.list(owner_id)]


def matches_filters(
    evaluation: Evaluation,
    *,
    favorites_only: bool,
    min_score: float | None,
    search: str | None,
) -> bool:
    if favorites_only and not evaluation.is_favorite:
        return False
    if min_score is not None and (evaluation.overall_score or 0.0) < min_score:
        return False
    if search and search.strip().casefold() not in evaluation.coffee_name.casefold():
        return False
    return True
