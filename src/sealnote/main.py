"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (database engine).
Middleware, CORS, the domain error handler and routers are all
registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sealnote import __version__
from sealnote.api import build_api_router
from sealnote.config import Settings, settings
from sealnote.errors import DomainError
from sealnote.logging_config import configure_logging
from sealnote.middleware.request_id import RequestIdMiddleware
from sealnote.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info(
        "sealnote.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
        storage_path=settings.storage_path,
    )

    yield

    logger.info("sealnote.shutdown")

    from sealnote.db.engine import engine
    await engine.dispose()


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Render service/guard failures as {"detail": ...} with their status."""
    if exc.status_code >= 500:
        logger.error("http.domain_error", error=exc.detail, path=request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=headers,
    )


def create_app(config: Settings = settings) -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(config)

    app = FastAPI(
        title="SealNote",
        description="Password-gated project messages",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_credentials,
        allow_methods=config.cors_methods,
        allow_headers=["*"],
    )
    app.add_middleware(
        SecurityHeadersMiddleware,
        no_store_prefixes=("/api/v1/message",),
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)

    app.include_router(
        build_api_router(include_dev=config.environment == "development")
    )

    return app


# Default app instance (used by uvicorn: sealnote.main:app)
app = create_app()
