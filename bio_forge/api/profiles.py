"""Profile CRUD endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from bio_forge.api.deps import get_caller
from bio_forge.api.models import ProfileCreate, ProfileUpdate
from bio_forge.core.access import CallerContext
from bio_forge.core.profiles import ProfileRegistry, get_profile_registry
from bio_forge.db.models import BiographyRow, BioProfileRow, ProfileAnalyticsRow

router = APIRouter()


@router.post("", response_model=BioProfileRow, status_code=201)
async def create_profile(
    data: ProfileCreate,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> BioProfileRow:
    """Create a profile, subject to the caller's plan limit."""
    fields = data.model_dump(exclude={"name"}, exclude_none=True, mode="json")
    return registry.create_profile(caller, name=data.name, **fields)


@router.get("", response_model=list[BioProfileRow])
async def list_profiles(
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> list[BioProfileRow]:
    """List the caller's profiles, most recently updated first."""
    return registry.list_profiles(caller)


@router.get("/{profile_id}", response_model=BioProfileRow)
async def get_profile(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> BioProfileRow:
    return registry.get_profile(caller, str(profile_id))


@router.put("/{profile_id}", response_model=BioProfileRow)
async def update_profile(
    profile_id: UUID,
    data: ProfileUpdate,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> BioProfileRow:
    """Update a profile's editable fields."""
    return registry.update_profile(
        caller, str(profile_id), **data.model_dump(exclude_unset=True, mode="json")
    )


@router.delete("/{profile_id}", status_code=204)
async def delete_profile(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> None:
    """Delete a profile and everything generated for it."""
    registry.delete_profile(caller, str(profile_id))


@router.get("/{profile_id}/biographies", response_model=list[BiographyRow])
async def list_biographies(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> list[BiographyRow]:
    return registry.list_biographies(caller, str(profile_id))


@router.get("/{profile_id}/analytics", response_model=list[ProfileAnalyticsRow])
async def profile_analytics(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    registry: ProfileRegistry = Depends(get_profile_registry),
) -> list[ProfileAnalyticsRow]:
    """Daily public view counts for a profile."""
    return registry.profile_analytics(caller, str(profile_id))
