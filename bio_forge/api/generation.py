"""Biography generation and schema snippet endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from bio_forge.api.deps import get_caller
from bio_forge.api.models import GenerateRequest, GenerateResponse, GenerationFailureResponse
from bio_forge.core.access import CallerContext
from bio_forge.core.generation import BioGenerator, get_bio_generator
from bio_forge.core.prompts import ProfileSnapshot
from bio_forge.core.schema_markup import SchemaGenerator, get_schema_generator
from bio_forge.db.models import SchemaSnippetRow

router = APIRouter()


@router.post("/{profile_id}/biographies/generate", response_model=GenerateResponse)
async def generate_biographies(
    profile_id: UUID,
    data: GenerateRequest,
    caller: CallerContext = Depends(get_caller),
    generator: BioGenerator = Depends(get_bio_generator),
) -> GenerateResponse:
    """Generate the requested biography variants for a profile.

    Variants that failed are listed under ``failures``; the others are stored
    and returned under ``biographies``.
    """
    snapshot = ProfileSnapshot(**data.profile_data.model_dump()) if data.profile_data else None
    result = await generator.generate_biographies(
        caller, str(profile_id), data.bio_types, data.tone, snapshot
    )
    return GenerateResponse(
        biographies=result.biographies,
        failures=[
            GenerationFailureResponse(bio_type=f.bio_type, error=f.error) for f in result.failures
        ],
    )


@router.post("/{profile_id}/schema", response_model=SchemaSnippetRow)
async def generate_schema(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    schemas: SchemaGenerator = Depends(get_schema_generator),
) -> SchemaSnippetRow:
    """(Re)generate the JSON-LD snippet from the profile's current fields."""
    return schemas.generate_schema(caller, str(profile_id))


@router.get("/{profile_id}/schema", response_model=SchemaSnippetRow)
async def get_schema(
    profile_id: UUID,
    caller: CallerContext = Depends(get_caller),
    schemas: SchemaGenerator = Depends(get_schema_generator),
) -> SchemaSnippetRow:
    return schemas.get_schema(caller, str(profile_id))
