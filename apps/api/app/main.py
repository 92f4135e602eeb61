"""FastAPI application for the property listings site."""
from __future__ import annotations

import base64
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from .core.config import settings
from .routers import admin as admin_router
from .routers import properties as properties_router
from .routers import tour as tour_router
from .services.session_store import SESSION_HEADER

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Property Listings API", version="0.1.0")

if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[SESSION_HEADER],
    )

app.include_router(properties_router.router, prefix="/api", tags=["catalog"])
app.include_router(admin_router.router, prefix="/api/admin", tags=["admin"])
app.include_router(tour_router.router, prefix="/api/admin/tour", tags=["tour"])

FAVICON_BYTES = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGMAAQAABQABDQottAAAAABJRU5ErkJggg=="
)


@app.get("/api/health", tags=["meta"])
async def health() -> dict[str, str]:
    """Simple liveness probe."""

    return {"status": "ok", "env": settings.app_env}


@app.head("/api/health", tags=["meta"])
async def health_head() -> Response:
    """Allow HEAD for uptime monitors that only need the status code."""

    return Response(status_code=200)


@app.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
async def robots() -> PlainTextResponse:
    """Keep crawlers on the public catalog and out of the back-office API."""

    return PlainTextResponse("User-agent: *\nDisallow: /api/admin/")


@app.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    """Return a tiny placeholder favicon."""

    return Response(content=FAVICON_BYTES, media_type="image/png")


logger.info("Property listings API configured for %s", settings.app_env)
