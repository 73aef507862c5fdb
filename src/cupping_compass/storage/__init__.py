"""Evaluation stores for cupping-compass."""

from cupping_compass.storage.base import EvaluationStore
from cupping_compass.storage.memory import InMemoryEvaluationStore

__all__ = ["EvaluationStore", "InMemoryEvaluationStore", "build_store"]


def build_store(database_url: str | None) -> EvaluationStore:
    """Return a PostgreSQL store when a database URL is configured, else an in-memory one."""
    if database_url:
        from cupping_compass.storage.postgres import PostgresEvaluationStore

        return PostgresEvaluationStore(database_url)
    return InMemoryEvaluationStore()
