"""In-memory evaluation store."""

from __future__ import annotations

import logging
import threading

from cupping_compass.exceptions import EvaluationNotFoundError
from cupping_compass.schema import Evaluation
from cupping_compass.scoring import duplicate_name_error, normalize_coffee_name
from cupping_compass.storage.base import EvaluationStore, matches_filters

logger = logging.getLogger(__name__)


class InMemoryEvaluationStore(EvaluationStore):
    """Process-local store keyed by (owner, evaluation id)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: dict[tuple[str, str], Evaluation] = {}

    def add(self, evaluation: Evaluation) -> Evaluation:
        wanted = normalize_coffee_name(evaluation.coffee_name)
        with self._lock:
            for (owner, _), item in self._items.items():
                if owner == evaluation.owner_id and normalize_coffee_name(item.coffee_name) == wanted:
                    raise duplicate_name_error(evaluation.coffee_name)
            self._items[(evaluation.owner_id, evaluation.id)] = evaluation
        logger.info("stored evaluation id=%s owner=%s", evaluation.id, evaluation.owner_id)
        return evaluation

    def get(self, owner_id: str, evaluation_id: str) -> Evaluation:
        with self._lock:
            evaluation = self._items.get((owner_id, evaluation_id))
        if evaluation is None:
            raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
        return evaluation

    def list(
        self,
        owner_id: str,
        *,
        favorites_only: bool = False,
        min_score: float | None = None,
        search: str | None = None,
    ) -> list[Evaluation]:
        with self._lock:
            owned = [item for (owner, _), item in self._items.items() if owner == owner_id]
        owned = [
            item
            for item in owned
            if matches_filters(item, favorites_only=favorites_only, min_score=min_score, search=search)
        ]
        owned.sort(key=lambda item: item.created_at, reverse=True)
        return owned

    def delete(self, owner_id: str, evaluation_id: str) -> None:
        with self._lock:
            removed = self._items.pop((owner_id, evaluation_id), None)
        if removed is None:
            raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
        logger.info("deleted evaluation id=%s owner=%s", evaluation_id, owner_id)

    def set_favorite(self, owner_id: str, evaluation_id: str, is_favorite: bool) -> Evaluation:
        with self._lock:
            current = self._items.get((owner_id, evaluation_id))
            if current is None:
                raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
            updated = current.model_copy(update={"is_favorite": is_favorite})
            self._items[(owner_id, evaluation_id)] = updated
        return updated
