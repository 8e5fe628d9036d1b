"""JSON-LD structured data for biography profiles."""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.core.errors import ResourceNotFound
from bio_forge.core.profiles import ProfileRegistry, get_profile_registry
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import SCHEMA_SNIPPETS, BioProfileRow, ProfileType, SchemaSnippetRow

logger = structlog.get_logger()

SCHEMA_CONTEXT = "https://schema.org"
VALIDATION_MESSAGE = "Valid JSON-LD"


def schema_type_for(profile: BioProfileRow) -> str:
    return "Organization" if profile.type == ProfileType.ORGANIZATION else "Person"


def build_schema_document(profile: BioProfileRow) -> dict[str, Any]:
    """Structured-data document for a profile.

    Optional properties are left out entirely when they have no value, never
    emitted as null.
    """
    document: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": schema_type_for(profile),
        "name": profile.name,
    }
    if profile.job_title:
        document["jobTitle"] = profile.job_title
    if profile.website:
        document["url"] = profile.website
    if profile.social_links:
        document["sameAs"] = list(profile.social_links)
    return document


def render_schema(profile: BioProfileRow) -> str:
    return json.dumps(build_schema_document(profile), indent=2, ensure_ascii=False)


class SchemaGenerator:
    """Derives and stores the single schema snippet of a profile."""

    def __init__(self, db: SupabaseClient, profiles: ProfileRegistry) -> None:
        self.db = db
        self.profiles = profiles

    def generate_schema(self, caller: CallerContext, profile_id: str) -> SchemaSnippetRow:
        """Regenerate the snippet from current profile fields and upsert it.

        ``validated`` is always set: the document is built from known keys, no
        external validator is consulted.
        """
        profile = self.profiles.get_profile(caller, profile_id)
        row = self.db.upsert(
            SCHEMA_SNIPPETS,
            {
                "profile_id": str(profile.id),
                "schema_type": schema_type_for(profile),
                "schema_text": render_schema(profile),
                "validated": True,
                "validation_message": VALIDATION_MESSAGE,
            },
            on_conflict="profile_id",
        )
        logger.info("schema.generated", profile_id=str(profile.id), schema_type=row["schema_type"])
        return SchemaSnippetRow(**row)

    def get_schema(self, caller: CallerContext, profile_id: str) -> SchemaSnippetRow:
        profile = self.profiles.get_profile(caller, profile_id)
        return self.find_for_profile(str(profile.id))

    def find_for_profile(self, profile_id: str) -> SchemaSnippetRow:
        rows = self.db.select(SCHEMA_SNIPPETS, filters={"profile_id": profile_id}, limit=1)
        if not rows:
            raise ResourceNotFound("No schema generated for this profile")
        return SchemaSnippetRow(**rows[0])


@lru_cache
def get_schema_generator() -> SchemaGenerator:
    """Get cached schema generator instance."""
    return SchemaGenerator(get_supabase_client(), get_profile_registry())
