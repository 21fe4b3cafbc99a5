# app/main.py
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.domain.exceptions import LexiconNotFound, NotationError
from app.shared.config import AppEnv, settings
from app.shared.container import container
from utils.logging_setup import init_logging

from app.adapters.api.routers import determiners, health, render

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application Lifecycle Manager."""
    init_logging()
    logger.info("app_starting", app=settings.APP_NAME, env=settings.APP_ENV.value)

    # Load the lexicon eagerly so a missing data directory fails at boot
    lexicon = container.lexicon()
    logger.info("lexicon_ready", lang=lexicon.lang_code, **lexicon.counts())

    yield

    logger.info("app_stopping")


def create_app() -> FastAPI:
    """Factory function to create the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="English sentence compiler with derivation tracking",
        docs_url="/docs" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        redoc_url="/redoc" if settings.APP_ENV != AppEnv.PRODUCTION else None,
        lifespan=lifespan,
    )

    # 1. Dependency Injection
    container.wire(modules=[
        "app.adapters.api.routers.render",
        "app.adapters.api.routers.determiners",
        "app.adapters.api.routers.health",
        "app.adapters.api.dependencies",
    ])
    app.state.container = container

    # 2. CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.DEBUG else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 3. Global Exception Handlers
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"status": "error", "code": exc.status_code, "message": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"status": "error", "code": 422, "message": "Invalid request", "errors": exc.errors()},
        )

    @app.exception_handler(NotationError)
    async def notation_exception_handler(request: Request, exc: NotationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"status": "error", "code": 422, "message": str(exc), "position": exc.position},
        )

    @app.exception_handler(LexiconNotFound)
    async def lexicon_exception_handler(request: Request, exc: LexiconNotFound):
        logger.error("lexicon_missing", lang=exc.lang_code, path=exc.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "code": 503, "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error("unhandled_exception", error=str(exc), exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "code": 500, "message": "Internal Server Error" if not settings.DEBUG else str(exc)},
        )

    # 4. Mount Routes
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(render.router, prefix="/api/v1")
    app.include_router(determiners.router, prefix="/api/v1")

    return app


def serve() -> None:
    """Run the API under uvicorn (the `grammar-lens-api` script)."""
    logger.info("server_starting", host=settings.API_HOST, port=settings.API_PORT)
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


# Entry point for Uvicorn
app = create_app()

if __name__ == "__main__":
    serve()
