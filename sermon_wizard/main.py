"""
Sermon Wizard FastAPI application entry point.

Pipeline: topic → audience → sermon type → duration → LLM sermon draft
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from sermon_wizard import __version__
from sermon_wizard.config import get_settings
from sermon_wizard.llm.errors import ConfigurationError
from sermon_wizard.llm.router import get_llm_provider
from sermon_wizard.services.access import access_zone
from sermon_wizard.services.rate_limit import FixedWindowRateLimiter
from sermon_wizard.services.wizard import SermonWizard, SessionStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

_STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    settings = get_settings()
    logger.info("Sermon Wizard starting")
    try:
        if settings.access_gate_enabled and not settings.secret_key:
            logger.critical("SECRET_KEY is required when MONTHLY_PASSWORDS is set")
            raise ConfigurationError("SECRET_KEY is required when MONTHLY_PASSWORDS is set")
        if not settings.access_gate_enabled:
            logger.warning("MONTHLY_PASSWORDS not set: access gate disabled")
        else:
            # Fails startup on an unknown ACCESS_TIMEZONE
            logger.info("Access gate enabled (timezone=%s)", access_zone().key)

        # A missing key does not stop the app; generation returns 500 until it is set.
        try:
            get_llm_provider(settings)
            logger.info("LLM provider configured: %s model=%s", settings.llm_provider, settings.llm_model)
        except ConfigurationError as e:
            logger.error("LLM provider not available, sermon generation will fail: %s", e)

        yield
    finally:
        logger.info(
            "Sermon Wizard shutting down (%d conversations in memory)",
            len(app.state.session_store),
        )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors (400) in the wizard protocol."""
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Requisição inválida."})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Erro interno."})


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.session_store = SessionStore(
        ttl_seconds=settings.session_ttl_seconds,
        max_entries=settings.session_max_entries,
    )
    app.state.wizard = SermonWizard(
        provider_factory=get_llm_provider,
        timeout_ms=settings.llm_timeout_ms,
    )
    app.state.rate_limiter = FixedWindowRateLimiter(limit=settings.rate_limit_per_minute)

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    # Mount API routes
    from sermon_wizard.api.auth import router as auth_router
    from sermon_wizard.api.verses import router as verses_router
    from sermon_wizard.api.views import router as views_router
    from sermon_wizard.api.wizard import router as wizard_router

    app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
    app.include_router(wizard_router, prefix="/api", tags=["wizard"])
    app.include_router(verses_router, prefix="/api/verses", tags=["verses"])

    # Mount HTML-serving view routes (no prefix: serves / and /login)
    app.include_router(views_router, tags=["views"])
    app.mount("/static", StaticFiles(directory=str(_STATIC_DIR)), name="static")

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
