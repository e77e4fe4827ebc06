"""Database read/write queries for all tables (psycopg2)."""

from __future__ import annotations

from datetime import date
from typing import Any

from psycopg2.extras import Json, RealDictCursor

from app.db.connection import get_connection, put_connection
from app.db.schema import INDEXES_SQL, SCHEMA_SQL


def _execute(sql: str, params: list[Any] | None = None, *, fetch: str | None = None):
    conn = get_connection()
    try:
        with conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, params or [])
            if fetch == "one":
                row = cur.fetchone()
                conn.commit()
                return row
            if fetch == "all":
                rows = cur.fetchall()
                conn.commit()
                return rows
            conn.commit()
            return None
    except Exception:
        conn.rollback()
        raise
    finally:
        put_connection(conn)


def init_schema() -> None:
    """Create tables, enum type and indexes when missing."""
    _execute(SCHEMA_SQL)
    _execute(INDEXES_SQL)


# --------------- users ---------------

_USER_COLUMNS = (
    "id::text AS id, email, name, password_hash, total_tokens_used, "
    "daily_tokens_used, last_token_reset, created_at, updated_at"
)


def create_user(email: str, name: str, password_hash: str) -> dict[str, Any]:
    """Insert a user and return the stored row."""
    return _execute(
        f"INSERT INTO users (email, name, password_hash) VALUES (%s, %s, %s) "
        f"RETURNING {_USER_COLUMNS}",
        [email, name, password_hash],
        fetch="one",
    )


def get_user_by_email(email: str) -> dict[str, Any] | None:
    return _execute(
        f"SELECT {_USER_COLUMNS} FROM users WHERE lower(email) = lower(%s)",
        [email],
        fetch="one",
    )


def get_user_by_id(user_id: str) -> dict[str, Any] | None:
    return _execute(
        f"SELECT {_USER_COLUMNS} FROM users WHERE id = %s",
        [user_id],
        fetch="one",
    )


def add_user_tokens(user_id: str, tokens: int, today: date) -> dict[str, Any] | None:
    """Add ``tokens`` to both counters in one statement.

    The daily counter restarts at ``tokens`` when the last reset is not
    ``today``. Returns the new counters, or None for an unknown user.
    """
    return _execute(
        "UPDATE users SET total_tokens_used = total_tokens_used + %s, "
        "daily_tokens_used = CASE WHEN last_token_reset = %s "
        "THEN daily_tokens_used + %s ELSE %s END, "
        "last_token_reset = %s, updated_at = now() WHERE id = %s "
        "RETURNING total_tokens_used, daily_tokens_used, last_token_reset",
        [tokens, today, tokens, tokens, today, user_id],
        fetch="one",
    )


def reset_daily_tokens(user_id: str, today: date) -> None:
    """Zero the daily counter unless it was already reset ``today``.

    The total is never touched here.
    """
    _execute(
        "UPDATE users SET daily_tokens_used = 0, last_token_reset = %s, updated_at = now() "
        "WHERE id = %s AND last_token_reset IS DISTINCT FROM %s",
        [today, user_id, today],
    )


# --------------- study_plans ---------------

_PLAN_COLUMNS = (
    "id::text AS id, title, description, prompt, level, selected_topics, schedule, "
    "user_id::text AS user_id, created_at, updated_at"
)

# Columns a plan update may touch, and whether the value is stored as jsonb.
_PLAN_UPDATABLE = {
    "title": False,
    "description": False,
    "selected_topics": True,
    "schedule": True,
}


def insert_study_plan(
    title: str,
    description: str | None,
    prompt: str,
    level: str,
    selected_topics: list[str],
    schedule: list[dict[str, Any]],
    user_id: str,
) -> dict[str, Any]:
    """Insert a plan with its schedule in one statement and return the row."""
    return _execute(
        "INSERT INTO study_plans "
        "(title, description, prompt, level, selected_topics, schedule, user_id) "
        f"VALUES (%s, %s, %s, %s, %s, %s, %s) RETURNING {_PLAN_COLUMNS}",
        [title, description, prompt, level, Json(selected_topics), Json(schedule), user_id],
        fetch="one",
    )


def count_study_plans(user_id: str) -> int:
    row = _execute(
        "SELECT COUNT(*) AS total FROM study_plans WHERE user_id = %s",
        [user_id],
        fetch="one",
    )
    return int(row["total"]) if row else 0


def list_study_plans(user_id: str, limit: int, offset: int) -> list[dict[str, Any]]:
    """Fetch one page of a user's plans, newest first."""
    return _execute(
        f"SELECT {_PLAN_COLUMNS} FROM study_plans WHERE user_id = %s "
        "ORDER BY created_at DESC, id LIMIT %s OFFSET %s",
        [user_id, limit, offset],
        fetch="all",
    )


def get_study_plan(plan_id: str) -> dict[str, Any] | None:
    return _execute(
        f"SELECT {_PLAN_COLUMNS} FROM study_plans WHERE id = %s",
        [plan_id],
        fetch="one",
    )


def update_study_plan(plan_id: str, fields: dict[str, Any]) -> dict[str, Any] | None:
    """Apply ``fields`` to a plan, bump updated_at and return the full row."""
    assignments: list[str] = []
    params: list[Any] = []
    for column, value in fields.items():
        if column not in _PLAN_UPDATABLE:
            raise ValueError(f"Column {column!r} cannot be updated")
        assignments.append(f"{column} = %s")
        params.append(Json(value) if _PLAN_UPDATABLE[column] else value)
    assignments.append("updated_at = now()")
    return _execute(
        f"UPDATE study_plans SET {', '.join(assignments)} WHERE id = %s "
        f"RETURNING {_PLAN_COLUMNS}",
        [*params, plan_id],
        fetch="one",
    )


def delete_study_plan(plan_id: str) -> None:
    _execute("DELETE FROM study_plans WHERE id = %s", [plan_id])


# --------------- ai_requests ---------------

def insert_ai_request(
    request_type: str,
    prompt: str,
    level: str,
    tokens_used: int,
    user_id: str | None,
    metadata: dict[str, Any] | None,
) -> None:
    """Append one audit row."""
    _execute(
        "INSERT INTO ai_requests (request_type, prompt, level, tokens_used, user_id, metadata) "
        "VALUES (%s, %s, %s, %s, %s, %s)",
        [request_type, prompt, level, tokens_used, user_id, Json(metadata) if metadata is not None else None],
    )


def list_ai_requests(user_id: str, limit: int) -> list[dict[str, Any]]:
    return _execute(
        "SELECT id::text AS id, request_type::text AS request_type, prompt, level, tokens_used, "
        "user_id::text AS user_id, metadata, created_at "
        "FROM ai_requests WHERE user_id = %s ORDER BY created_at DESC LIMIT %s",
        [user_id, limit],
        fetch="all",
    )


def ai_request_totals(user_id: str) -> list[dict[str, Any]]:
    """Return request count and token sum per request type for one user."""
    return _execute(
        "SELECT request_type::text AS request_type, COUNT(*) AS requests, "
        "COALESCE(SUM(tokens_used), 0) AS tokens "
        "FROM ai_requests WHERE user_id = %s GROUP BY request_type",
        [user_id],
        fetch="all",
    )
