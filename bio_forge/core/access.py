"""Access control — caller identity, role resolution and plan-limit checks."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import structlog

from bio_forge.core.errors import AuthenticationRequired, AuthorizationDenied
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import (
    ACCOUNTS,
    PLAN_PROFILE_LIMITS,
    USER_ROLES,
    AccountRow,
    BioProfileRow,
    Plan,
    Role,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class Identity:
    """Authenticated identity as issued by the auth provider."""

    user_id: str
    email: str | None = None


@dataclass(frozen=True)
class CallerContext:
    """Explicit per-request caller state passed into every operation."""

    identity: Identity
    role: Role
    account: AccountRow

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    def can_access(self, required_role: Role) -> bool:
        """True iff the caller holds ``required_role`` or is an administrator."""
        return self.role == required_role or self.is_admin

    def can_create_profile(self) -> bool:
        """Advisory plan-limit check; the create path re-checks atomically."""
        return self.account.profile_count < self.account.profile_limit

    def require_role(self, required_role: Role) -> None:
        if not self.can_access(required_role):
            raise AuthorizationDenied(f"Requires the '{required_role.value}' role")

    def owns(self, profile: BioProfileRow) -> bool:
        return str(profile.owner_id) == self.user_id

    def require_owner(self, profile: BioProfileRow) -> None:
        if not (self.owns(profile) or self.is_admin):
            raise AuthorizationDenied("You do not have access to this profile")


class AccessControl:
    """Resolves identities into caller contexts."""

    def __init__(self, db: SupabaseClient) -> None:
        self.db = db

    def authenticate(self, token: str | None) -> Identity:
        """Verify a bearer credential. Fails closed."""
        if not token:
            raise AuthenticationRequired("No authorization header")
        user = self.db.get_user(token)
        if not user:
            raise AuthenticationRequired("Unauthorized")
        return Identity(user_id=user["id"], email=user.get("email"))

    def get_role(self, user_id: str) -> Role:
        """Role for a user, defaulting to standard when unassigned."""
        rows = self.db.select(USER_ROLES, filters={"user_id": user_id}, limit=1)
        if not rows:
            return Role.STANDARD
        return Role(rows[0]["role"])

    def get_account(self, identity: Identity) -> AccountRow:
        """Load the caller's account, provisioning a free one on first sight."""
        rows = self.db.select(ACCOUNTS, filters={"id": identity.user_id}, limit=1)
        if rows:
            return AccountRow(**rows[0])
        row = self.db.insert(ACCOUNTS, self._new_account(identity))
        logger.info("account.provisioned", user_id=identity.user_id)
        return AccountRow(**row)

    def resolve(self, identity: Identity) -> CallerContext:
        return CallerContext(
            identity=identity,
            role=self.get_role(identity.user_id),
            account=self.get_account(identity),
        )

    def context_for_token(self, token: str | None) -> CallerContext:
        return self.resolve(self.authenticate(token))

    @staticmethod
    def _new_account(identity: Identity) -> dict[str, Any]:
        return {
            "id": identity.user_id,
            "display_name": identity.email.split("@")[0] if identity.email else None,
            "company_name": None,
            "subscription_plan": Plan.FREE.value,
            "profile_count": 0,
            "profile_limit": PLAN_PROFILE_LIMITS[Plan.FREE],
        }


@lru_cache
def get_access_control() -> AccessControl:
    """Get cached access control instance."""
    return AccessControl(get_supabase_client())
