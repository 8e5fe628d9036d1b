"""Biography prompt construction.

Prompts are a pure function of the profile snapshot, the variant kind and the
tone, so the same request always sends the same text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bio_forge.db.models import BioProfileRow, BioType, Tone

BIO_SYSTEM_PROMPT = (
    "You are an experienced biography writer. Write professional, engaging biographies "
    "based on the provided information only. Do not hallucinate or add fictional details."
)

LENGTH_CONSTRAINTS: dict[BioType, str] = {
    BioType.SHORT: "max 120 words",
    BioType.MEDIUM: "about 300 words",
    BioType.LONG: "500-700 words",
    BioType.LINKEDIN: "max 300 words, suitable for LinkedIn summary",
    BioType.SPEAKER: "max 200 words, suitable for conference introductions",
    BioType.PRESS: "max 400 words, suitable for press releases",
    BioType.X_BIO: "max 160 characters",
    BioType.FACEBOOK_BIO: "max 200 words",
}

NOT_SPECIFIED = "Not specified"


@dataclass(frozen=True)
class ProfileSnapshot:
    """The profile facts a generation request is built from."""

    name: str
    job_title: str | None = None
    website: str | None = None
    bio_notes: str | None = None
    social_links: list[str] = field(default_factory=list)

    @classmethod
    def from_profile(cls, profile: BioProfileRow) -> ProfileSnapshot:
        return cls(
            name=profile.name,
            job_title=profile.job_title,
            website=profile.website,
            bio_notes=profile.bio_notes,
            social_links=list(profile.social_links),
        )


def build_prompt(bio_type: BioType, tone: Tone, snapshot: ProfileSnapshot) -> str:
    """Render the user prompt for one biography variant."""
    socials = ", ".join(snapshot.social_links) if snapshot.social_links else "None"
    return (
        f"Write a {bio_type.value} biography ({LENGTH_CONSTRAINTS[bio_type]}) "
        f"with a {tone.value} tone.\n"
        "\n"
        f"Name: {snapshot.name}\n"
        f"Title: {snapshot.job_title or NOT_SPECIFIED}\n"
        f"Website: {snapshot.website or NOT_SPECIFIED}\n"
        f"Notes: {snapshot.bio_notes or 'No additional notes'}\n"
        f"Social Links: {socials}\n"
        "\n"
        "Return only the biography text, no headers or labels."
    )
