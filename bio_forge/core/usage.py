"""Usage logger — append-only record of every completion call."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import AI_REQUEST_LOGS, Role, UsageLogRow
from bio_forge.utils.validation import summarise

logger = structlog.get_logger()

OUTCOME_SUCCESS = "success"
OUTCOME_FAILURE = "failure"


class UsageLogger:
    """Appends and summarises ai_request_logs rows. Rows are never updated."""

    def __init__(self, db: SupabaseClient) -> None:
        self.db = db

    def log(
        self,
        user_id: str,
        action: str,
        outcome: str,
        prompt: str,
        response: str = "",
        tokens_used: int = 0,
        profile_id: str | None = None,
    ) -> UsageLogRow:
        row = self.db.insert(
            AI_REQUEST_LOGS,
            {
                "user_id": user_id,
                "profile_id": profile_id,
                "action": action,
                "outcome": outcome,
                "tokens_used": tokens_used,
                "raw_prompt": prompt,
                "response_summary": summarise(response),
            },
        )
        logger.info("usage.logged", action=action, outcome=outcome, tokens=tokens_used)
        return UsageLogRow(**row)

    def summary(self, caller: CallerContext) -> dict[str, Any]:
        """Totals for the caller's own requests."""
        rows = self.db.select(AI_REQUEST_LOGS, filters={"user_id": caller.user_id})

        by_action: dict[str, int] = {}
        for entry in rows:
            by_action[entry["action"]] = by_action.get(entry["action"], 0) + 1

        successes = sum(1 for entry in rows if entry.get("outcome") == OUTCOME_SUCCESS)
        return {
            "total_requests": len(rows),
            "successful_requests": successes,
            "failed_requests": len(rows) - successes,
            "total_tokens": sum(entry.get("tokens_used") or 0 for entry in rows),
            "by_action": by_action,
        }

    def recent(self, caller: CallerContext, limit: int = 50) -> list[UsageLogRow]:
        """Latest requests across all users. Administrators only."""
        caller.require_role(Role.ADMINISTRATOR)
        rows = self.db.select(AI_REQUEST_LOGS, order_by="created_at", ascending=False, limit=limit)
        return [UsageLogRow(**row) for row in rows]


@lru_cache
def get_usage_logger() -> UsageLogger:
    """Get cached usage logger instance."""
    return UsageLogger(get_supabase_client())
