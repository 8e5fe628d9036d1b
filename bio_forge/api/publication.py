"""Publishing endpoints — owner toggles and the anonymous public read paths."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from bio_forge.api.deps import get_caller
from bio_forge.api.models import (
    PressKitPublishRequest,
    PublicPressKitResponse,
    PublicProfileResponse,
    PublishRequest,
)
from bio_forge.core.access import CallerContext
from bio_forge.core.publication import (
    PressKitSettings,
    PublicationService,
    get_publication_service,
)
from bio_forge.db.models import BioProfileRow, PressKitRow

router = APIRouter()
public_router = APIRouter()


@router.put("/{profile_id}/publish", response_model=BioProfileRow)
async def set_profile_published(
    profile_id: UUID,
    data: PublishRequest,
    caller: CallerContext = Depends(get_caller),
    publication: PublicationService = Depends(get_publication_service),
) -> BioProfileRow:
    """Publish or unpublish a profile's public page."""
    return publication.set_profile_published(caller, str(profile_id), data.published)


@router.put("/{profile_id}/press-kit", response_model=PressKitRow)
async def publish_press_kit(
    profile_id: UUID,
    data: PressKitPublishRequest,
    caller: CallerContext = Depends(get_caller),
    publication: PublicationService = Depends(get_publication_service),
) -> PressKitRow:
    """Save press kit settings and publish it at ``{profile slug}-kit``."""
    return publication.publish_press_kit(
        caller, str(profile_id), PressKitSettings(**data.model_dump())
    )


@router.get("/{profile_id}/press-kit", response_model=PressKitRow)
async def get_press_kit(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    publication: PublicationService = Depends(get_publication_service),
) -> PressKitRow:
    return publication.get_press_kit(caller, str(profile_id))


# --- Anonymous ---


@public_router.get("/profiles/{slug}", response_model=PublicProfileResponse)
async def public_profile(
    slug: str,
    publication: PublicationService = Depends(get_publication_service),
) -> PublicProfileResponse:
    result = publication.get_public_profile(slug)
    return PublicProfileResponse(
        profile=result.profile,
        biographies=result.biographies,
        schema_snippet=result.schema,
    )


@public_router.get("/press-kits/{slug}", response_model=PublicPressKitResponse)
async def public_press_kit(
    slug: str,
    publication: PublicationService = Depends(get_publication_service),
) -> PublicPressKitResponse:
    result = publication.get_public_press_kit(slug)
    return PublicPressKitResponse(
        press_kit=result.press_kit,
        profile=result.profile,
        biographies=result.biographies,
    )


@public_router.get("/press-kits/{slug}/download", response_class=PlainTextResponse)
async def download_press_kit(
    slug: str,
    publication: PublicationService = Depends(get_publication_service),
) -> PlainTextResponse:
    download = publication.download_press_kit(slug)
    return PlainTextResponse(
        download.content,
        headers={"Content-Disposition": f'attachment; filename="{download.filename}"'},
    )
