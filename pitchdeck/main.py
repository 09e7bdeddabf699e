from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from pitchdeck.core.config import settings
from pitchdeck.core.database import check_database, dispose_engine
from pitchdeck.core.errors import (
    global_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from pitchdeck.middleware.security import (
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

import pitchdeck.models  # noqa: F401  register all models at startup

from pitchdeck.auth.router import router as auth_router
from pitchdeck.modules.analytics.router import router as analytics_router
from pitchdeck.modules.decks.router import router as decks_router
from pitchdeck.modules.investors.router import router as investors_router
from pitchdeck.modules.templates.router import router as templates_router
from pitchdeck.modules.users.router import router as users_router
from pitchdeck.core.sentry import init_sentry
from pitchdeck.services.content_generator import OpenAIContentGenerator

# ── Sentry: must be initialised BEFORE the FastAPI app is created ─────────────
init_sentry(settings.SENTRY_DSN, settings.SENTRY_ENVIRONMENT, settings.APP_VERSION)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info("pitchdeck_api_starting", env=settings.APP_ENV, model=settings.OPENAI_MODEL)
    generator = OpenAIContentGenerator.from_settings()
    app.state.content_generator = generator
    try:
        yield
    finally:
        await generator.aclose()
        await dispose_engine()
        logger.info("pitchdeck_api_stopped")


_is_prod = settings.APP_ENV == "production"

app = FastAPI(
    title="Pitch Deck API",
    description="Pitch deck authoring, viewer analytics and investor matching.",
    version="0.1.0",
    docs_url=None if _is_prod else "/docs",
    redoc_url=None if _is_prod else "/redoc",
    openapi_url=None if _is_prod else "/openapi.json",
    lifespan=lifespan,
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(Exception, global_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Request-ID"],
)
# Security middleware (added last = outermost)
app.add_middleware(
    RequestBodySizeLimitMiddleware,  # type: ignore[arg-type]
    max_bytes=settings.MAX_REQUEST_BODY_BYTES,
    path_limits={"/api/analytics/track": settings.TRACK_MAX_BODY_BYTES},
)
app.add_middleware(
    SecurityHeadersMiddleware,  # type: ignore[arg-type]
    is_production=_is_prod,
)


# ── X-API-Version response header ─────────────────────────────────────────────


@app.middleware("http")
async def add_version_header(request: Request, call_next) -> Response:
    response = await call_next(request)
    response.headers["X-API-Version"] = "v1"
    return response


# ── Health check (root-level, not under /api) ─────────────────────────────────


@app.get("/health")
async def health_check() -> dict:
    """Probes the database. The LLM endpoint is not checked."""
    checks: dict[str, dict] = {"database": await check_database()}
    overall = (
        "healthy"
        if all(c["status"] == "healthy" for c in checks.values())
        else "degraded"
    )
    return {"status": overall, "service": "pitchdeck-api", "checks": checks}


# ── /api router ───────────────────────────────────────────────────────────────

api = APIRouter(prefix="/api")

api.include_router(auth_router)
api.include_router(users_router)
api.include_router(decks_router)
api.include_router(analytics_router)
api.include_router(investors_router)
api.include_router(templates_router)

app.include_router(api)
