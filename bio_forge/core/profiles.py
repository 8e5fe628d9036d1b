"""Profile registry — CRUD for biography profiles and their artifacts."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.core.errors import ResourceNotFound, ValidationFailure
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import (
    ACCOUNTS,
    BIO_PROFILES,
    BIOGRAPHIES,
    PROFILE_ANALYTICS,
    BioProfileRow,
    BiographyRow,
    ProfileAnalyticsRow,
    ProfileType,
)
from bio_forge.utils.validation import make_profile_slug, normalise_social_links

logger = structlog.get_logger()

DEFAULT_PROFILE_NAME = "Untitled Profile"
SLOT_CLAIM_ATTEMPTS = 3
SLUG_ATTEMPTS = 5
EDITABLE_FIELDS = ("name", "type", "job_title", "website", "bio_notes", "social_links", "main_image")


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Validate user-supplied profile fields into their stored form."""
    cleaned = dict(fields)
    if "name" in cleaned:
        name = (cleaned["name"] or "").strip()
        if not name:
            raise ValidationFailure("Profile name is required")
        cleaned["name"] = name
    if "type" in cleaned:
        try:
            cleaned["type"] = ProfileType(cleaned["type"]).value
        except ValueError as e:
            raise ValidationFailure(f"Unknown profile type: {cleaned['type']!r}") from e
    if "social_links" in cleaned:
        try:
            cleaned["social_links"] = normalise_social_links(cleaned["social_links"])
        except ValueError as e:
            raise ValidationFailure(str(e)) from e
    return cleaned


class ProfileRegistry:
    """Manages biography profiles — create, read, update, delete."""

    def __init__(self, db: SupabaseClient) -> None:
        self.db = db

    # --- Plan limit ---

    def _claim_slot(self, caller: CallerContext) -> None:
        """Increment the owner's profile_count if it is still below the limit.

        Compare-and-set on the observed count, so two concurrent creates cannot
        both take the last slot.
        """
        for _ in range(SLOT_CLAIM_ATTEMPTS):
            rows = self.db.select(ACCOUNTS, filters={"id": caller.user_id}, limit=1)
            if not rows:
                raise ResourceNotFound("Account not found")
            count, limit = rows[0]["profile_count"], rows[0]["profile_limit"]
            if count >= limit:
                raise ValidationFailure(
                    "Profile limit reached. Please upgrade your plan to create more profiles."
                )
            claimed = self.db.update_where(
                ACCOUNTS,
                {"id": caller.user_id, "profile_count": count},
                {"profile_count": count + 1},
            )
            if claimed:
                return
            logger.info("profile.slot_contended", user_id=caller.user_id)
        raise ValidationFailure("Profile limit check conflicted with another request; retry")

    def _release_slot(self, caller: CallerContext) -> None:
        rows = self.db.select(ACCOUNTS, filters={"id": caller.user_id}, limit=1)
        if rows and rows[0]["profile_count"] > 0:
            self.db.update(ACCOUNTS, caller.user_id, {"profile_count": rows[0]["profile_count"] - 1})

    def _unique_slug(self, name: str) -> str:
        for _ in range(SLUG_ATTEMPTS):
            slug = make_profile_slug(name)
            if not self.db.select(BIO_PROFILES, filters={"slug": slug}, limit=1):
                return slug
        raise ValidationFailure("Could not allocate a unique slug")

    # --- CRUD ---

    def create_profile(
        self,
        caller: CallerContext,
        name: str = DEFAULT_PROFILE_NAME,
        **fields: Any,
    ) -> BioProfileRow:
        """Create a profile owned by the caller, subject to the plan limit."""
        data = _clean_fields({"name": name, **fields})
        if not caller.can_create_profile():
            raise ValidationFailure(
                "Profile limit reached. Please upgrade your plan to create more profiles."
            )

        self._claim_slot(caller)
        try:
            row = self.db.insert(
                BIO_PROFILES,
                {
                    "owner_id": caller.user_id,
                    "type": ProfileType.PERSON.value,
                    "social_links": [],
                    "published": False,
                    **data,
                    "slug": self._unique_slug(data["name"]),
                },
            )
        except Exception:
            self._release_slot(caller)
            raise

        logger.info("profile.created", profile_id=row["id"], owner_id=caller.user_id)
        return BioProfileRow(**row)

    def get_profile(self, caller: CallerContext, profile_id: str) -> BioProfileRow:
        """Load a profile the caller owns (or any profile, for administrators)."""
        rows = self.db.select(BIO_PROFILES, filters={"id": str(profile_id)}, limit=1)
        if not rows:
            raise ResourceNotFound(f"Profile '{profile_id}' not found")
        profile = BioProfileRow(**rows[0])
        caller.require_owner(profile)
        return profile

    def list_profiles(self, caller: CallerContext) -> list[BioProfileRow]:
        rows = self.db.select(
            BIO_PROFILES,
            filters={"owner_id": caller.user_id},
            order_by="updated_at",
            ascending=False,
        )
        return [BioProfileRow(**row) for row in rows]

    def update_profile(self, caller: CallerContext, profile_id: str, **changes: Any) -> BioProfileRow:
        """Update editable profile fields. Unknown fields are rejected."""
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailure(f"Fields not editable: {', '.join(sorted(unknown))}")
        profile = self.get_profile(caller, profile_id)
        data = _clean_fields(changes)
        if not data:
            return profile
        row = self.db.update(BIO_PROFILES, str(profile.id), data)
        logger.info("profile.updated", profile_id=str(profile.id), fields=list(data))
        return BioProfileRow(**row)

    def delete_profile(self, caller: CallerContext, profile_id: str) -> None:
        """Delete a profile with its biographies, schema snippet and press kit.

        The cascade runs inside the ``delete_bio_profile`` stored function, in
        one transaction, together with the owner's profile_count decrement.
        """
        profile = self.get_profile(caller, profile_id)
        self.db.rpc("delete_bio_profile", {"p_profile_id": str(profile.id)})
        logger.info("profile.deleted", profile_id=str(profile.id), actor=caller.user_id)

    # --- Artifacts ---

    def list_biographies(self, caller: CallerContext, profile_id: str) -> list[BiographyRow]:
        profile = self.get_profile(caller, profile_id)
        rows = self.db.select(
            BIOGRAPHIES,
            filters={"profile_id": str(profile.id)},
            order_by="created_at",
            ascending=False,
        )
        return [BiographyRow(**row) for row in rows]

    def profile_analytics(self, caller: CallerContext, profile_id: str) -> list[ProfileAnalyticsRow]:
        """Per-day public view counts, oldest first."""
        profile = self.get_profile(caller, profile_id)
        rows = self.db.select(
            PROFILE_ANALYTICS,
            filters={"profile_id": str(profile.id)},
            order_by="view_date",
        )
        return [ProfileAnalyticsRow(**row) for row in rows]


@lru_cache
def get_profile_registry() -> ProfileRegistry:
    """Get cached profile registry instance."""
    return ProfileRegistry(get_supabase_client())
