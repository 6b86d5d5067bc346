from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from hostel_occupancy.api.v1.router import router as api_v1_router
from hostel_occupancy.config.database import init_db
from hostel_occupancy.config.logging import setup_logging
from hostel_occupancy.config.settings import settings
from hostel_occupancy.core.error_handling import request_validation_handler
from hostel_occupancy.core.middleware import register_middlewares


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema creation is for development; production databases are migrated
    if not settings.is_production():
        init_db()
    yield


def create_app(create_schema: bool = True) -> FastAPI:
    """
    Application factory for the FastAPI app.

    - Configures title, version, debug mode from Settings.
    - Registers CORS, core middleware and the global exception handler.
    - Includes the versioned API router under API_V1_STR.
    """
    setup_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        debug=settings.DEBUG,
        version=settings.API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan if create_schema else None,
    )

    register_middlewares(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=settings.CORS_ORIGINS != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_v1_router, prefix=settings.API_V1_STR)

    return app


app = create_app()
