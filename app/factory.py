"""
app/factory.py

Purpose: Application factory

- Builds the carrier pool, repository and dispatcher from settings
- Creates the FastAPI app and registers API routes
- Nothing is built at import time; callers pass the settings to use
"""

from fastapi import FastAPI, Request
from contextlib import asynccontextmanager
from typing import Optional
import time

from app.core.config import Settings, get_settings, validate_settings
from app.core.errors import add_exception_handlers
from app.core.logging import get_logger, LogContext
from app.flow.dispatcher import VerificationDispatcher
from app.services.ledger_service import VerificationKeeper
from app.services.provider_service import build_providers
from app.api import verification
from utils.constants import SERVICE_NAME, SERVICE_VERSION

logger = get_logger(__name__)


def build_dispatcher(app_settings: Settings) -> VerificationDispatcher:
    """
    Builds the dispatcher from settings.

    Raises:
        ConfigurationError: invalid carrier or weight configuration
        UnsupportedStrategyError: balancer strategy not implemented
    """
    validate_settings(app_settings)
    with LogContext(balancer=app_settings.BALANCER):
        carriers = build_providers(app_settings.CARRIERS)
        repo = VerificationKeeper(app_settings.STEP_WEIGHTS)
        dispatcher = VerificationDispatcher(
            app_settings.BALANCER,
            carriers,
            repo,
            token_prefix=app_settings.TOKEN_PREFIX,
        )
        logger.info(f"Dispatcher ready with {dispatcher.pool_size} carrier(s), weights {repo.step_weights.as_list()}")
    return dispatcher


def create_app(
    app_settings: Optional[Settings] = None,
    dispatcher: Optional[VerificationDispatcher] = None,
) -> FastAPI:
    """
    Creates the FastAPI app. The dispatcher is built eagerly so configuration
    errors abort startup instead of the first request.
    """
    app_settings = app_settings or get_settings()
    dispatcher = dispatcher or build_dispatcher(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Starting {SERVICE_NAME}...")
        logger.info(f"Environment: {app_settings.ENVIRONMENT}")
        logger.info(f"Balancer: {dispatcher.balancer_type.value}")
        yield
        logger.info(f"🛑 Shutting down {SERVICE_NAME}")

    app = FastAPI(
        title="Telecom Verification Service",
        description="Dispatches phone verification attempts across telecom carriers and ranks them",
        version=SERVICE_VERSION,
        lifespan=lifespan,
        debug=app_settings.DEBUG,
        docs_url="/docs" if app_settings.is_development else None,
        redoc_url="/redoc" if app_settings.is_development else None,
    )
    app.state.settings = app_settings
    app.state.dispatcher = dispatcher

    add_exception_handlers(app)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to all responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if process_time > 5.0:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra={"process_time": process_time}
            )

        return response

    app.include_router(verification.router, tags=["Verification"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Service and carrier pool status."""
        return {
            "status": "healthy" if dispatcher.pool_size else "degraded",
            "environment": app_settings.ENVIRONMENT,
            "version": SERVICE_VERSION,
            "balancer": dispatcher.balancer_type.value,
            "carriers": [c.name for c in dispatcher.carriers],
        }

    @app.get("/live", tags=["Health"])
    async def liveness_check():
        """
        Liveness probe - indicates if app is alive.
        """
        return {"status": "alive"}

    return app


