"""Pydantic request/response models for the API.

Stored rows are returned as the row models from ``bio_forge.db.models``; the
models here cover request bodies and composite responses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from bio_forge.db.models import (
    AccountRow,
    BiographyRow,
    BioProfileRow,
    BioType,
    Plan,
    PressKitRow,
    ProfileType,
    Role,
    SchemaSnippetRow,
    Tone,
)
from bio_forge.utils.validation import normalise_social_links


def _social_links(value: Any) -> Any:
    return normalise_social_links(value) if value is not None else None


# --- Profiles ---


class ProfileCreate(BaseModel):
    """Create a biography profile."""

    name: str = Field(default="Untitled Profile", max_length=200)
    type: ProfileType = ProfileType.PERSON
    job_title: str | None = None
    website: str | None = None
    bio_notes: str | None = None
    social_links: list[str] = Field(default_factory=list)
    main_image: str | None = None

    @field_validator("social_links")
    @classmethod
    def check_social_links(cls, value):
        return _social_links(value)


class ProfileUpdate(BaseModel):
    """Update a profile's editable fields."""

    name: str | None = Field(default=None, max_length=200)
    type: ProfileType | None = None
    job_title: str | None = None
    website: str | None = None
    bio_notes: str | None = None
    social_links: list[str] | None = None
    main_image: str | None = None

    @field_validator("social_links")
    @classmethod
    def check_social_links(cls, value):
        return _social_links(value)


class PublishRequest(BaseModel):
    published: bool


class PressKitPublishRequest(BaseModel):
    include_short_bio: bool = True
    include_long_bio: bool = True
    include_images: bool = True
    include_contacts: bool = True


# --- Generation ---


class ProfileData(BaseModel):
    """Profile facts from the editor form, used as generation input."""

    name: str
    job_title: str | None = None
    website: str | None = None
    bio_notes: str | None = None
    social_links: list[str] = Field(default_factory=list)

    @field_validator("social_links")
    @classmethod
    def check_social_links(cls, value):
        return _social_links(value)


class GenerateRequest(BaseModel):
    bio_types: list[BioType]
    tone: Tone = Tone.PROFESSIONAL
    profile_data: ProfileData | None = None


class GenerationFailureResponse(BaseModel):
    bio_type: BioType
    error: str


class GenerateResponse(BaseModel):
    biographies: list[BiographyRow]
    failures: list[GenerationFailureResponse] = Field(default_factory=list)


# --- Public ---


class PublicProfileResponse(BaseModel):
    profile: BioProfileRow
    biographies: list[BiographyRow]
    schema_snippet: SchemaSnippetRow | None = None


class PublicPressKitResponse(BaseModel):
    press_kit: PressKitRow
    profile: BioProfileRow
    biographies: list[BiographyRow]


# --- Accounts ---


class AccountResponse(BaseModel):
    account: AccountRow
    role: Role
    email: str | None = None
    can_create_profile: bool


class AccountSettingsUpdate(BaseModel):
    display_name: str | None = Field(default=None, max_length=200)
    company_name: str | None = Field(default=None, max_length=200)


class PlanChangeRequest(BaseModel):
    plan: Plan


class RoleChangeRequest(BaseModel):
    role: Role


class PlatformStatsResponse(BaseModel):
    total_users: int
    total_profiles: int
    total_ai_requests: int


class UsageSummaryResponse(BaseModel):
    total_requests: int
    successful_requests: int
    failed_requests: int
    total_tokens: int
    by_action: dict[str, int]


# --- Billing ---


class CheckoutRequest(BaseModel):
    plan: Plan


class CheckoutResponse(BaseModel):
    checkout_url: str | None
    configured: bool
    message: str = ""


class PaymentCreate(BaseModel):
    account_id: str
    amount: float = Field(..., ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str | None = None
    transaction_id: str | None = None
    status: str = "completed"
