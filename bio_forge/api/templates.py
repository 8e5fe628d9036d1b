"""Template catalog endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from bio_forge.core.templates import TemplateCatalog, get_template_catalog
from bio_forge.db.models import TemplateRow

router = APIRouter()


@router.get("", response_model=list[TemplateRow])
async def list_templates(
    type: str | None = None,
    premium: bool = True,
    catalog: TemplateCatalog = Depends(get_template_catalog),
) -> list[TemplateRow]:
    """Browse templates, optionally by type and without premium entries."""
    return catalog.list_templates(template_type=type, include_premium=premium)
