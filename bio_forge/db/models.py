"""Database models / type definitions.

These mirror the Supabase tables (see ``sql/schema.sql``) for type safety in
Python code.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, field_validator

from bio_forge.utils.validation import normalise_social_links

ACCOUNTS = "accounts"
USER_ROLES = "user_roles"
BIO_PROFILES = "bio_profiles"
BIOGRAPHIES = "biographies"
SCHEMA_SNIPPETS = "schema_snippets"
PRESS_KITS = "press_kits"
TEMPLATES = "templates"
AI_REQUEST_LOGS = "ai_request_logs"
BILLING_HISTORY = "billing_history"
PROFILE_ANALYTICS = "profile_analytics"


class Plan(str, Enum):
    FREE = "free"
    PRO = "pro"
    AGENCY = "agency"


PLAN_PROFILE_LIMITS: dict[Plan, int] = {
    Plan.FREE: 1,
    Plan.PRO: 10,
    Plan.AGENCY: 999,
}


class Role(str, Enum):
    STANDARD = "standard"
    PRO = "pro"
    AGENCY = "agency"
    ADMINISTRATOR = "administrator"


class ProfileType(str, Enum):
    PERSON = "person"
    ORGANIZATION = "organization"
    BRAND = "brand"


class BioType(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    LINKEDIN = "linkedin"
    SPEAKER = "speaker"
    PRESS = "press"
    X_BIO = "x_bio"
    FACEBOOK_BIO = "facebook_bio"


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    FRIENDLY = "friendly"
    FORMAL = "formal"
    CASUAL = "casual"
    ACADEMIC = "academic"
    STORYTELLING = "storytelling"


class AccountRow(BaseModel):
    """Row from the accounts table (one per authenticated user)."""

    id: UUID
    display_name: str | None = None
    company_name: str | None = None
    subscription_plan: Plan = Plan.FREE
    profile_count: int = 0
    profile_limit: int = 1
    created_at: datetime
    updated_at: datetime


class RoleRow(BaseModel):
    """Row from the user_roles table."""

    id: UUID
    user_id: UUID
    role: Role
    created_at: datetime


class BioProfileRow(BaseModel):
    """Row from the bio_profiles table."""

    id: UUID
    owner_id: UUID
    type: ProfileType = ProfileType.PERSON
    name: str
    job_title: str | None = None
    website: str | None = None
    bio_notes: str | None = None
    social_links: list[str] = []
    slug: str
    main_image: str | None = None
    published: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("social_links", mode="before")
    @classmethod
    def parse_social_links(cls, value):
        return normalise_social_links(value)


class BiographyRow(BaseModel):
    """Row from the biographies table, unique per (profile_id, bio_type)."""

    id: UUID
    profile_id: UUID
    bio_type: BioType
    tone: Tone
    content: str
    is_locked: bool = False
    generated_at: datetime
    created_at: datetime
    updated_at: datetime


class SchemaSnippetRow(BaseModel):
    """Row from the schema_snippets table (at most one per profile)."""

    id: UUID
    profile_id: UUID
    schema_type: str
    schema_text: str
    validated: bool
    validation_message: str | None = None
    created_at: datetime
    updated_at: datetime


class PressKitRow(BaseModel):
    """Row from the press_kits table (at most one per profile)."""

    id: UUID
    profile_id: UUID
    slug: str
    include_short_bio: bool = True
    include_long_bio: bool = True
    include_images: bool = True
    include_contacts: bool = True
    is_published: bool = False
    views_count: int = 0
    downloads_count: int = 0
    created_at: datetime
    updated_at: datetime


class TemplateRow(BaseModel):
    """Row from the read-only templates catalog."""

    id: UUID
    template_type: str
    name: str
    content: str | None = None
    tone: Tone | None = None
    premium: bool = False
    created_at: datetime


class UsageLogRow(BaseModel):
    """Row from the append-only ai_request_logs table."""

    id: UUID
    user_id: UUID
    profile_id: UUID | None = None
    action: str
    outcome: str
    tokens_used: int = 0
    raw_prompt: str | None = None
    response_summary: str | None = None
    created_at: datetime


class BillingRow(BaseModel):
    """Row from the append-only billing_history table."""

    id: UUID
    user_id: UUID
    amount: float | None = None
    currency: str = "USD"
    description: str | None = None
    transaction_id: str | None = None
    status: str = "pending"
    created_at: datetime


class ProfileAnalyticsRow(BaseModel):
    """Row from the profile_analytics table (one per profile per day)."""

    id: UUID
    profile_id: UUID
    view_date: date
    views_count: int = 0
