"""Main API router — aggregates all endpoint modules."""

from fastapi import APIRouter

from bio_forge.api.accounts import router as accounts_router
from bio_forge.api.admin import router as admin_router
from bio_forge.api.generation import router as generation_router
from bio_forge.api.profiles import router as profiles_router
from bio_forge.api.publication import public_router
from bio_forge.api.publication import router as publication_router
from bio_forge.api.templates import router as templates_router

api_router = APIRouter()

api_router.include_router(profiles_router, prefix="/profiles", tags=["profiles"])
api_router.include_router(generation_router, prefix="/profiles", tags=["generation"])
api_router.include_router(publication_router, prefix="/profiles", tags=["publication"])
api_router.include_router(public_router, prefix="/public", tags=["public"])
api_router.include_router(accounts_router, tags=["account"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
api_router.include_router(templates_router, prefix="/templates", tags=["templates"])
