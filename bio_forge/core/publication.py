"""Publication surface — visibility toggles and the public read paths.

Public lookups never distinguish "no such slug" from "exists but unpublished";
both raise the same ResourceNotFound message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.core.errors import ResourceNotFound
from bio_forge.core.profiles import ProfileRegistry, get_profile_registry
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import (
    BIO_PROFILES,
    BIOGRAPHIES,
    PRESS_KITS,
    SCHEMA_SNIPPETS,
    BioProfileRow,
    BiographyRow,
    BioType,
    PressKitRow,
    SchemaSnippetRow,
)

logger = structlog.get_logger()

PROFILE_NOT_FOUND = "This profile doesn't exist or is not published."
PRESS_KIT_NOT_FOUND = "This press kit doesn't exist or is not published."


@dataclass(frozen=True)
class PressKitSettings:
    include_short_bio: bool = True
    include_long_bio: bool = True
    include_images: bool = True
    include_contacts: bool = True


@dataclass
class PublicProfile:
    profile: BioProfileRow
    biographies: list[BiographyRow] = field(default_factory=list)
    schema: SchemaSnippetRow | None = None


@dataclass
class PublicPressKit:
    press_kit: PressKitRow
    profile: BioProfileRow
    biographies: list[BiographyRow] = field(default_factory=list)


@dataclass(frozen=True)
class PressKitDownload:
    filename: str
    content: str


def press_kit_slug(profile: BioProfileRow) -> str:
    return f"{profile.slug}-kit"


def press_kit_filename(profile: BioProfileRow) -> str:
    base = re.sub(r"\s+", "-", profile.name).lower()
    return f"{base}-press-kit.txt"


def _bio_text(biographies: list[BiographyRow], bio_type: BioType) -> str:
    for bio in biographies:
        if bio.bio_type == bio_type:
            return bio.content or ""
    return ""


def render_press_kit_text(
    profile: BioProfileRow, press_kit: PressKitRow, biographies: list[BiographyRow]
) -> str:
    """Plain-text press kit: header, short bio, full bio, contact information.

    A section is omitted entirely when its flag is off or it has no source text.
    """
    lines = ["PRESS KIT", "=" * 50, "", profile.name]
    if profile.job_title:
        lines.append(profile.job_title)
    lines.append("")

    short_bio = _bio_text(biographies, BioType.SHORT)
    if press_kit.include_short_bio and short_bio:
        lines += ["SHORT BIOGRAPHY", "-" * 30, short_bio, ""]

    long_bio = _bio_text(biographies, BioType.LONG)
    if press_kit.include_long_bio and long_bio:
        lines += ["FULL BIOGRAPHY", "-" * 30, long_bio, ""]

    contacts = [f"Website: {profile.website}"] if profile.website else []
    contacts += list(profile.social_links)
    if press_kit.include_contacts and contacts:
        lines += ["CONTACT INFORMATION", "-" * 30, *contacts]

    return "\n".join(lines) + "\n"


class PublicationService:
    """Publishes profiles and press kits and serves them to anonymous readers."""

    def __init__(self, db: SupabaseClient, profiles: ProfileRegistry) -> None:
        self.db = db
        self.profiles = profiles

    # --- Owner operations ---

    def set_profile_published(
        self, caller: CallerContext, profile_id: str, published: bool
    ) -> BioProfileRow:
        profile = self.profiles.get_profile(caller, profile_id)
        if profile.published == published:
            return profile
        row = self.db.update(BIO_PROFILES, str(profile.id), {"published": published})
        logger.info("profile.published" if published else "profile.unpublished", profile_id=str(profile.id))
        return BioProfileRow(**row)

    def publish_press_kit(
        self, caller: CallerContext, profile_id: str, settings: PressKitSettings
    ) -> PressKitRow:
        """Create or update the profile's press kit and mark it published."""
        profile = self.profiles.get_profile(caller, profile_id)
        data = {
            "include_short_bio": settings.include_short_bio,
            "include_long_bio": settings.include_long_bio,
            "include_images": settings.include_images,
            "include_contacts": settings.include_contacts,
            "is_published": True,
            "slug": press_kit_slug(profile),
        }
        existing = self.db.select(PRESS_KITS, filters={"profile_id": str(profile.id)}, limit=1)
        if existing:
            row = self.db.update(PRESS_KITS, existing[0]["id"], data)
        else:
            row = self.db.insert(
                PRESS_KITS,
                {"profile_id": str(profile.id), "views_count": 0, "downloads_count": 0, **data},
            )
        logger.info("presskit.published", profile_id=str(profile.id), slug=data["slug"])
        return PressKitRow(**row)

    def get_press_kit(self, caller: CallerContext, profile_id: str) -> PressKitRow:
        profile = self.profiles.get_profile(caller, profile_id)
        rows = self.db.select(PRESS_KITS, filters={"profile_id": str(profile.id)}, limit=1)
        if not rows:
            raise ResourceNotFound("No press kit for this profile")
        return PressKitRow(**rows[0])

    # --- Public read paths ---

    def _biographies(self, profile_id: str) -> list[BiographyRow]:
        rows = self.db.select(
            BIOGRAPHIES, filters={"profile_id": profile_id}, order_by="created_at", ascending=False
        )
        return [BiographyRow(**row) for row in rows]

    def get_public_profile(self, slug: str) -> PublicProfile:
        rows = self.db.select(BIO_PROFILES, filters={"slug": slug, "published": True}, limit=1)
        if not rows:
            raise ResourceNotFound(PROFILE_NOT_FOUND)
        profile = BioProfileRow(**rows[0])
        profile_id = str(profile.id)

        self.db.rpc("increment_profile_view", {"p_profile_id": profile_id})

        schema_rows = self.db.select(SCHEMA_SNIPPETS, filters={"profile_id": profile_id}, limit=1)
        return PublicProfile(
            profile=profile,
            biographies=self._biographies(profile_id),
            schema=SchemaSnippetRow(**schema_rows[0]) if schema_rows else None,
        )

    def _published_kit(self, slug: str) -> tuple[PressKitRow, BioProfileRow]:
        rows = self.db.select(PRESS_KITS, filters={"slug": slug, "is_published": True}, limit=1)
        if not rows:
            raise ResourceNotFound(PRESS_KIT_NOT_FOUND)
        press_kit = PressKitRow(**rows[0])
        profile_rows = self.db.select(BIO_PROFILES, filters={"id": str(press_kit.profile_id)}, limit=1)
        if not profile_rows:
            raise ResourceNotFound(PRESS_KIT_NOT_FOUND)
        return press_kit, BioProfileRow(**profile_rows[0])

    def get_public_press_kit(self, slug: str) -> PublicPressKit:
        press_kit, profile = self._published_kit(slug)
        # read-increment-write: concurrent views may lose an increment
        press_kit = PressKitRow(
            **self.db.update(PRESS_KITS, str(press_kit.id), {"views_count": press_kit.views_count + 1})
        )
        return PublicPressKit(
            press_kit=press_kit,
            profile=profile,
            biographies=self._biographies(str(profile.id)),
        )

    def download_press_kit(self, slug: str) -> PressKitDownload:
        press_kit, profile = self._published_kit(slug)
        self.db.update(PRESS_KITS, str(press_kit.id), {"downloads_count": press_kit.downloads_count + 1})
        logger.info("presskit.downloaded", slug=slug)
        return PressKitDownload(
            filename=press_kit_filename(profile),
            content=render_press_kit_text(profile, press_kit, self._biographies(str(profile.id))),
        )


@lru_cache
def get_publication_service() -> PublicationService:
    """Get cached publication service instance."""
    return PublicationService(get_supabase_client(), get_profile_registry())
