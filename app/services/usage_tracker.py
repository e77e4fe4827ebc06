"""Per-user token counters and the generation audit log."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Callable

from app.db import repository
from app.schemas.usage import AuditEntry, AuditRecord, TokenUsage, UsageStats
from app.services.background import BackgroundWriter
from app.utils.constants import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


class UsageTracker:
    """Token counters live on the user row; audit rows go to ``ai_requests``.

    Daily counters roll over on the first write or read of a new UTC day:
    a write starts the day at the increment, a read starts it at zero.
    """

    def __init__(
        self,
        repo=repository,
        writer: BackgroundWriter | None = None,
        today: Callable[[], date] = utc_today,
    ) -> None:
        self._repo = repo
        self._writer = writer or BackgroundWriter()
        self._today = today

    def increment(self, user_id: str, tokens: int) -> None:
        if not self._repo.add_user_tokens(user_id, tokens, self._today()):
            logger.warning("Token increment skipped, user %s not found", user_id)

    def get_usage(self, user_id: str) -> TokenUsage | None:
        user = self._repo.get_user_by_id(user_id)
        if not user:
            return None
        return self.usage_for(user)

    def usage_for(self, user: dict[str, Any]) -> TokenUsage:
        """Counters for an already loaded user row, persisting a day rollover."""
        today = self._today()
        total = int(user.get("total_tokens_used") or 0)
        daily = int(user.get("daily_tokens_used") or 0)
        if _as_date(user.get("last_token_reset")) != today:
            daily = 0
            self._repo.reset_daily_tokens(user["id"], today)
            user["daily_tokens_used"] = daily
            user["last_token_reset"] = today
        return TokenUsage(total_tokens_used=total, daily_tokens_used=daily)

    def record_audit(self, entry: AuditEntry) -> None:
        """Queue an audit insert. Never raises; the caller does not wait."""
        try:
            self._writer.submit(f"audit {entry.request_type}", self._insert_audit, entry)
        except Exception:
            logger.exception("Could not queue audit record for %s", entry.request_type)

    def _insert_audit(self, entry: AuditEntry) -> None:
        self._repo.insert_ai_request(
            request_type=entry.request_type,
            prompt=entry.prompt,
            level=entry.level,
            tokens_used=entry.tokens_used,
            user_id=entry.user_id,
            metadata=entry.metadata.model_dump(by_alias=True),
        )

    def request_history(self, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT) -> list[AuditRecord]:
        rows = self._repo.list_ai_requests(user_id, limit)
        return [AuditRecord.model_validate(row) for row in rows]

    def request_stats(self, user_id: str) -> UsageStats:
        rows = self._repo.ai_request_totals(user_id)
        by_type = {row["request_type"]: int(row["requests"]) for row in rows}
        return UsageStats(
            total_requests=sum(by_type.values()),
            total_tokens=sum(int(row["tokens"]) for row in rows),
            requests_by_type=by_type,
        )
