"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bio_forge.api.router import api_router
from bio_forge.config import get_settings
from bio_forge.core.errors import BioForgeError
from bio_forge.db.client import get_supabase_client
from bio_forge.utils.logging import bind_request_context, setup_logging

logger = structlog.get_logger()

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("bioforge.starting", port=settings.port)

    # Initialize Supabase client
    get_supabase_client()
    logger.info("bioforge.supabase_connected")

    if not settings.openai_api_key:
        logger.warning("bioforge.completion_unconfigured")
    if not settings.checkout_configured:
        logger.info("bioforge.checkout_demo_mode")

    yield

    logger.info("bioforge.shutdown")


app = FastAPI(
    title="BioForge",
    description="AI-generated professional biographies, JSON-LD snippets and hosted press kits",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = bind_request_context(request.url.path, request.headers.get("x-request-id"))
    response = await call_next(request)
    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(BioForgeError)
async def bioforge_error_handler(request: Request, exc: BioForgeError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.failed", kind=exc.kind, error=exc.message)
    else:
        logger.info("request.rejected", kind=exc.kind, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
async def root():
    """Service info endpoint."""
    return {"service": "bioforge", "version": VERSION}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service": "bioforge", "version": VERSION}


def run() -> None:
    uvicorn.run("bio_forge.main:app", host="0.0.0.0", port=get_settings().port)


if __name__ == "__main__":
    run()
