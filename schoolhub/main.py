"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from schoolhub.api.v1.router import api_router
from schoolhub.core.config import settings
from schoolhub.core.database import create_tables, engine
from schoolhub.core.exceptions import AppException
from schoolhub.middleware.logging import RequestLoggingMiddleware

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    if settings.AUTO_CREATE_TABLES:
        create_tables()
        logger.info("Database tables ensured")
    yield
    logger.info("Shutting down application")
    engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
SchoolHub academic backend: grades, attendance and class reports.

## Features

- **Grades**: Record scores; percentage and letter grade are computed on save
- **Academic Summary**: Latest term average with its trend against the previous term
- **Attendance**: Single and bulk marking, per-student and per-class statistics
- **Class Reports**: Ranked Final Exam reports as JSON, CSV or Excel

## Error Handling

All errors follow a standard format:
```json
{
  "success": false,
  "error": {
    "code": "ERROR_CODE",
    "message": "Human readable message",
    "details": {}
  }
}
```
        """,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=422,
            content={
                "success": False,
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {"errors": jsonable_errors(exc)},
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal server error occurred",
                    "details": {},
                },
            },
        )

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw ``ctx`` objects, which may not serialize."""
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "schoolhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
