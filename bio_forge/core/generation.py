"""Biography generation — one completion call per requested variant.

Variants run one at a time in request order. A failure on one variant is
recorded and the batch moves on; each attempt leaves exactly one usage log row,
whatever its outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache

import structlog

from bio_forge.core.access import CallerContext
from bio_forge.core.completion import CompletionClient, get_completion_client
from bio_forge.core.errors import BioForgeError, ValidationFailure
from bio_forge.core.profiles import ProfileRegistry, get_profile_registry
from bio_forge.core.prompts import BIO_SYSTEM_PROMPT, ProfileSnapshot, build_prompt
from bio_forge.core.usage import OUTCOME_FAILURE, OUTCOME_SUCCESS, UsageLogger, get_usage_logger
from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import BIOGRAPHIES, BiographyRow, BioType, Tone

logger = structlog.get_logger()


@dataclass
class GenerationFailure:
    bio_type: BioType
    error: str


@dataclass
class GenerationResult:
    """Stored biographies for the variants that succeeded, plus the ones that did not."""

    biographies: list[BiographyRow] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)


def _ordered_unique(bio_types: list[BioType]) -> list[BioType]:
    seen: list[BioType] = []
    for bio_type in bio_types:
        if bio_type not in seen:
            seen.append(bio_type)
    return seen


class BioGenerator:
    """Orchestrates prompt → completion → upsert → usage log for each variant."""

    def __init__(
        self,
        db: SupabaseClient,
        profiles: ProfileRegistry,
        completions: CompletionClient,
        usage: UsageLogger,
    ) -> None:
        self.db = db
        self.profiles = profiles
        self.completions = completions
        self.usage = usage

    async def generate_biographies(
        self,
        caller: CallerContext,
        profile_id: str,
        bio_types: list[BioType],
        tone: Tone,
        snapshot: ProfileSnapshot | None = None,
    ) -> GenerationResult:
        """Generate and store the requested biography variants for a profile.

        ``snapshot`` carries the facts from the editor form; when omitted the
        stored profile fields are used.
        """
        requested = _ordered_unique(list(bio_types))
        if not requested:
            raise ValidationFailure("Select at least one biography type")

        profile = self.profiles.get_profile(caller, profile_id)
        snapshot = snapshot or ProfileSnapshot.from_profile(profile)
        if not snapshot.name.strip():
            raise ValidationFailure("Profile name is required")

        result = GenerationResult()
        for bio_type in requested:
            prompt = build_prompt(bio_type, tone, snapshot)
            action = f"generate_{bio_type.value}_bio"
            try:
                completion = await self.completions.complete(BIO_SYSTEM_PROMPT, prompt)
                biography = self._store(str(profile.id), bio_type, tone, completion.text)
            except BioForgeError as e:
                logger.warning(
                    "bio.generation_failed",
                    profile_id=str(profile.id),
                    bio_type=bio_type.value,
                    error=e.message,
                )
                result.failures.append(GenerationFailure(bio_type=bio_type, error=e.message))
                self._log_usage(caller, str(profile.id), action, OUTCOME_FAILURE, prompt, e.message, 0)
                continue

            result.biographies.append(biography)
            logger.info(
                "bio.generated",
                profile_id=str(profile.id),
                bio_type=bio_type.value,
                tokens=completion.tokens_used,
            )
            self._log_usage(
                caller,
                str(profile.id),
                action,
                OUTCOME_SUCCESS,
                prompt,
                completion.text,
                completion.tokens_used,
            )

        return result

    def _store(self, profile_id: str, bio_type: BioType, tone: Tone, content: str) -> BiographyRow:
        """Upsert keyed by (profile_id, bio_type); the full text or nothing."""
        row = self.db.upsert(
            BIOGRAPHIES,
            {
                "profile_id": profile_id,
                "bio_type": bio_type.value,
                "tone": tone.value,
                "content": content,
                "generated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="profile_id,bio_type",
        )
        return BiographyRow(**row)

    def _log_usage(
        self,
        caller: CallerContext,
        profile_id: str,
        action: str,
        outcome: str,
        prompt: str,
        response: str,
        tokens_used: int,
    ) -> None:
        try:
            self.usage.log(
                user_id=caller.user_id,
                profile_id=profile_id,
                action=action,
                outcome=outcome,
                prompt=prompt,
                response=response,
                tokens_used=tokens_used,
            )
        except BioForgeError as e:
            # the biography row is already committed at this point
            logger.error("usage.log_failed", action=action, error=e.message)


@lru_cache
def get_bio_generator() -> BioGenerator:
    """Get cached generator instance."""
    return BioGenerator(
        get_supabase_client(),
        get_profile_registry(),
        get_completion_client(),
        get_usage_logger(),
    )
