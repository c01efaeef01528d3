"""
FastAPI application factory following kkb_fastapi pattern.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import activities_router, calculations_router, factors_router
from app.core.config import get_config
from app.database.base import get_db_url, get_engine_kw
from app.database.session_manager.db_session import Database
from app.utils.exceptions import (
    EmissionCalculationError,
    InvalidActivityDataError,
    InvalidReportingPeriodError,
    ReportingPeriodNotFoundError,
)

logging.basicConfig(
    level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def register_routers(app: FastAPI):
    """Register all API routers."""
    app.include_router(factors_router)
    app.include_router(activities_router)
    app.include_router(calculations_router)


def register_health_routes(app: FastAPI):
    """Register service root and health check endpoints."""

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": app.title,
            "version": app.version,
            "docs": "/docs",
            "redoc": "/redoc",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "ghg-accounting-engine"}


def register_exception_handlers(app: FastAPI):
    """Map HTTP, validation and calculation engine errors to HTTP responses."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logging.error(f"HTTPException occurred: {exc.detail}")
        return JSONResponse(
            status_code=exc.status_code, content={"detail": str(exc.detail)}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": jsonable_encoder(exc.errors()),
                "message": "Validation error",
            },
        )

    @app.exception_handler(ReportingPeriodNotFoundError)
    async def reporting_period_not_found_handler(
        request: Request, exc: ReportingPeriodNotFoundError
    ):
        logging.warning(f"ReportingPeriodNotFoundError occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(InvalidActivityDataError)
    async def invalid_activity_data_handler(
        request: Request, exc: InvalidActivityDataError
    ):
        logging.warning(f"InvalidActivityDataError occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": str(exc),
                "category": exc.category,
                "entry_id": str(exc.entry_id) if exc.entry_id else None,
                "field": exc.field,
            },
        )

    @app.exception_handler(InvalidReportingPeriodError)
    async def invalid_reporting_period_handler(
        request: Request, exc: InvalidReportingPeriodError
    ):
        logging.warning(f"InvalidReportingPeriodError occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(EmissionCalculationError)
    async def emission_calculation_error_handler(
        request: Request, exc: EmissionCalculationError
    ):
        logging.error(f"EmissionCalculationError occurred: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": exc.message},
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    Handles database initialization and cleanup.
    """
    logging.info("Application startup")
    async_db_url = get_db_url(app.state.config)

    Database.init(async_db_url, engine_kw=get_engine_kw(async_db_url))
    logging.info("Initialized database")

    try:
        yield
    finally:
        await Database.dispose()
        logging.info("Application shutdown")


def get_app(config_file: str) -> FastAPI:
    """
    Application factory function.

    Args:
        config_file: Configuration file name (e.g., "production.toml")

    Returns:
        Configured FastAPI application instance
    """
    config = get_config(config_file)
    api_config = config.section("api")

    app = FastAPI(
        title=api_config.get("title", "GHG Accounting Emissions Engine"),
        description=api_config.get(
            "description", "Scope 1/2/3 greenhouse-gas calculation engine"
        ),
        version=api_config.get("version", "1.0.0"),
        debug=api_config.get("debug", False),
        lifespan=lifespan,
        # Generate better OpenAPI schema for enums
        generate_unique_id_function=lambda route: (
            f"{route.tags[0]}-{route.name}" if route.tags else route.name
        ),
    )

    app.state.config = config

    register_routers(app)
    register_health_routes(app)
    register_exception_handlers(app)

    origins = [
        "http://localhost:3000",  # For local development
        "http://127.0.0.1:3000",
    ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    return app
