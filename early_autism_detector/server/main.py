"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request tracing), error handlers and rate limits, and includes all API routers.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from early_autism_detector.core.database import dispose_db, init_db
from early_autism_detector.core.logging_config import get_logger, setup_logging
from early_autism_detector.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    assessments,
    auth,
    autism_centers,
    center_portal,
    chat,
    children,
    geocoding,
    health,
    questionnaire,
    saved_locations,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.rate_limit import rate_limit

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates missing tables on startup; a database failure is logged and the
    server keeps running so that ``/health`` can report it.
    """
    try:
        logger.info("Starting up Early Autism Detector Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down Early Autism Detector Server...")
    await dispose_db()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Early Autism Detector API

    Backend services for the Early Autism Detector: M-CHAT-R screening of
    toddlers, child profiles, an AI chat assistant, a treatment-center locator,
    and the center and admin portals.
    """,
    version="0.1.0",
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)


def _routes(tier: str) -> dict:
    return {"dependencies": [Depends(rate_limit(tier))]}


app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"], **_routes("auth"))
app.include_router(children.router, prefix=f"{constant.API_V1_STR}/children", **_routes("data"))
app.include_router(assessments.router, prefix=f"{constant.API_V1_STR}/assessments", **_routes("data"))
app.include_router(questionnaire.router, prefix=f"{constant.API_V1_STR}/questionnaire", **_routes("data"))
app.include_router(chat.router, prefix=f"{constant.API_V1_STR}/chat", **_routes("chat"))
app.include_router(autism_centers.router, prefix=f"{constant.API_V1_STR}/autism-centers", **_routes("api"))
app.include_router(saved_locations.router, prefix=f"{constant.API_V1_STR}/saved-locations", **_routes("data"))
app.include_router(geocoding.router, prefix=f"{constant.API_V1_STR}/geocoding", **_routes("external"))
app.include_router(center_portal.router, prefix=f"{constant.API_V1_STR}/center-portal", **_routes("api"))
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", **_routes("api"))
