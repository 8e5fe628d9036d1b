"""Account settings and administrative account management."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.core.errors import ResourceNotFound
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import (
    ACCOUNTS,
    AI_REQUEST_LOGS,
    BIO_PROFILES,
    PLAN_PROFILE_LIMITS,
    USER_ROLES,
    AccountRow,
    Plan,
    Role,
)

logger = structlog.get_logger()


class AccountService:
    """Account reads/writes. Admin operations check the caller's role first."""

    def __init__(self, db: SupabaseClient) -> None:
        self.db = db

    def _get(self, account_id: str) -> dict[str, Any]:
        rows = self.db.select(ACCOUNTS, filters={"id": account_id}, limit=1)
        if not rows:
            raise ResourceNotFound(f"Account '{account_id}' not found")
        return rows[0]

    def update_settings(
        self,
        caller: CallerContext,
        display_name: str | None = None,
        company_name: str | None = None,
    ) -> AccountRow:
        """Update the caller's own display and company name."""
        changes = {
            key: value
            for key, value in {"display_name": display_name, "company_name": company_name}.items()
            if value is not None
        }
        if not changes:
            return caller.account
        row = self.db.update(ACCOUNTS, caller.user_id, changes)
        logger.info("account.updated", user_id=caller.user_id, fields=list(changes))
        return AccountRow(**row)

    # --- Administration ---

    def list_accounts(self, caller: CallerContext) -> list[AccountRow]:
        caller.require_role(Role.ADMINISTRATOR)
        rows = self.db.select(ACCOUNTS, order_by="created_at", ascending=False)
        return [AccountRow(**row) for row in rows]

    def change_plan(self, caller: CallerContext, account_id: str, plan: Plan) -> AccountRow:
        """Move an account to ``plan`` and apply that plan's profile limit."""
        caller.require_role(Role.ADMINISTRATOR)
        self._get(account_id)
        row = self.db.update(
            ACCOUNTS,
            account_id,
            {"subscription_plan": plan.value, "profile_limit": PLAN_PROFILE_LIMITS[plan]},
        )
        logger.info("account.plan_changed", account_id=account_id, plan=plan.value, actor=caller.user_id)
        return AccountRow(**row)

    def set_role(self, caller: CallerContext, account_id: str, role: Role) -> Role:
        caller.require_role(Role.ADMINISTRATOR)
        self._get(account_id)
        self.db.upsert(USER_ROLES, {"user_id": account_id, "role": role.value}, on_conflict="user_id")
        logger.info("account.role_changed", account_id=account_id, role=role.value, actor=caller.user_id)
        return role

    def platform_stats(self, caller: CallerContext) -> dict[str, int]:
        caller.require_role(Role.ADMINISTRATOR)
        return {
            "total_users": self.db.count(ACCOUNTS),
            "total_profiles": self.db.count(BIO_PROFILES),
            "total_ai_requests": self.db.count(AI_REQUEST_LOGS),
        }


@lru_cache
def get_account_service() -> AccountService:
    """Get cached account service instance."""
    return AccountService(get_supabase_client())
