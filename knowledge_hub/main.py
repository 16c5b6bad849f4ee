"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import Base, engine
from .exceptions import KnowledgeHubError, StoreError
from .logging_utils import configure_logging
from .routers import api_router
from .sessions import SessionStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.environment)
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Shutting down, dropping %d live session(s)", len(app.state.sessions))


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    app.state.sessions = SessionStore(settings.session_ttl_seconds)

    @app.exception_handler(KnowledgeHubError)
    async def handle_knowledge_hub_error(request: Request, exc: KnowledgeHubError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
