"""PostgreSQL evaluation store.

Each evaluation is kept as a JSONB document next to the columns used for
filtering and ordering. Favorite toggling updates both.
"""

from __future__ import annotations

import logging

import psycopg
from psycopg import errors
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from cupping_compass.exceptions import EvaluationNotFoundError
from cupping_compass.schema import Evaluation
from cupping_compass.scoring import duplicate_name_error
from cupping_compass.storage.base import EvaluationStore

logger = logging.getLogger(__name__)


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so `%` and `_` match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresEvaluationStore(EvaluationStore):
    def __init__(self, database_url: str, *, connect=psycopg.connect):
        self.database_url = database_url
        self._connect = connect
        self._init_db()

    def _conn(self) -> psycopg.Connection:
        return self._connect(self.database_url, row_factory=dict_row)

    def _init_db(self) -> None:
        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    create table if not exists evaluations (
                      id text primary key,
                      owner_id text not null,
                      coffee_name text not null,
                      overall_score double precision,
                      is_favorite boolean not null default false,
                      created_at timestamptz not null,
                      payload jsonb not null
                    )
                    """
                )
                cur.execute(
                    "create index if not exists idx_evaluations_owner_created on evaluations(owner_id, created_at desc)"
                )
                cur.execute(
                    "create unique index if not exists uq_evaluations_owner_name "
                    "on evaluations(owner_id, lower(btrim(coffee_name)))"
                )
            conn.commit()
        logger.info("evaluation table ready")

    def add(self, evaluation: Evaluation) -> Evaluation:
        try:
            with self._conn() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        insert into evaluations (
                          id, owner_id, coffee_name, overall_score, is_favorite, created_at, payload
                        ) values (%s, %s, %s, %s, %s, %s, %s)
                        """,
                        (
                            evaluation.id,
                            evaluation.owner_id,
                            evaluation.coffee_name,
                            evaluation.overall_score,
                            evaluation.is_favorite,
                            evaluation.created_at,
                            Jsonb(evaluation.model_dump(mode="json")),
                        ),
                    )
                conn.commit()
        except errors.UniqueViolation as e:
            raise duplicate_name_error(evaluation.coffee_name) from e
        logger.info("stored evaluation id=%s owner=%s", evaluation.id, evaluation.owner_id)
        return evaluation

    def get(self, owner_id: str, evaluation_id: str) -> Evaluation:
        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "select payload from evaluations where owner_id = %s and id = %s",
                    (owner_id, evaluation_id),
                )
                row = cur.fetchone()
        if not row:
            raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
        return Evaluation.model_validate(row["payload"])

    def list(
        self,
        owner_id: str,
        *,
        favorites_only: bool = False,
        min_score: float | None = None,
        search: str | None = None,
    ) -> list[Evaluation]:
        clauses = ["owner_id = %s"]
        params: list[object] = [owner_id]
        if favorites_only:
            clauses.append("is_favorite")
        if min_score is not None:
            clauses.append("coalesce(overall_score, 0) >= %s")
            params.append(min_score)
        if search and search.strip():
            clauses.append("coffee_name ilike %s escape '\\'")
            params.append(f"%{_escape_like(search.strip())}%")

        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"select payload from evaluations where {' and '.join(clauses)} order by created_at desc",
                    params,
                )
                rows = cur.fetchall()
        return [Evaluation.model_validate(row["payload"]) for row in rows]

    def delete(self, owner_id: str, evaluation_id: str) -> None:
        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "delete from evaluations where owner_id = %s and id = %s",
                    (owner_id, evaluation_id),
                )
                deleted = cur.rowcount
            conn.commit()
        if not deleted:
            raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
        logger.info("deleted evaluation id=%s owner=%s", evaluation_id, owner_id)

    def set_favorite(self, owner_id: str, evaluation_id: str, is_favorite: bool) -> Evaluation:
        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    update evaluations
                    set is_favorite = %s,
                        payload = jsonb_set(payload, '{is_favorite}', to_jsonb(%s::boolean))
                    where owner_id = %s and id = %s
                    returning payload
                    """,
                    (is_favorite, is_favorite, owner_id, evaluation_id),
                )
                row = cur.fetchone()
            conn.commit()
        if not row:
            raise EvaluationNotFoundError(f"Evaluation not found: {evaluation_id}")
        return Evaluation.model_validate(row["payload"])

    def coffee_names(self, owner_id: str) -> list[str]:
        with self._conn() as conn:
            with conn.cursor() as cur:
                cur.execute("select coffee_name from evaluations where owner_id = %s", (owner_id,))
                rows = cur.fetchall()
        return [row["coffee_name"] for row in rows]
