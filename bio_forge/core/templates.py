"""Read-only template catalog."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from bio_forge.db.client import SupabaseClient, get_supabase_client
from bio_forge.db.models import TEMPLATES, TemplateRow


class TemplateCatalog:
    def __init__(self, db: SupabaseClient) -> None:
        self.db = db

    def list_templates(
        self, template_type: str | None = None, include_premium: bool = True
    ) -> list[TemplateRow]:
        """Catalog entries in creation order, optionally filtered."""
        filters: dict[str, Any] = {}
        if template_type:
            filters["template_type"] = template_type
        if not include_premium:
            filters["premium"] = False
        rows = self.db.select(TEMPLATES, filters=filters or None, order_by="created_at")
        return [TemplateRow(**row) for row in rows]


@lru_cache
def get_template_catalog() -> TemplateCatalog:
    """Get cached template catalog instance."""
    return TemplateCatalog(get_supabase_client())
