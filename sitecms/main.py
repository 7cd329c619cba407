"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitecms.api import auth, settings as settings_api, uploads
from sitecms.config import get_settings
from sitecms.database import Database
from sitecms.services.bootstrap import initialize_database
from sitecms.services.errors import ServiceError

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open, migrate and bootstrap the store; dispose it at shutdown."""
    # Tests inject their own database through app.state
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        app.state.database = Database(settings.database_url)

    initialize_database(app.state.database, settings)
    yield

    if owns_database:
        app.state.database.dispose()
        app.state.database = None


app = FastAPI(
    title="Site CMS API",
    description="Admin backend for site settings and media",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS: any origin in development, the configured frontend otherwise
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=".*",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
elif settings.frontend_url:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "validation_error"},
    )


# Register routers
app.include_router(auth.router)
app.include_router(settings_api.router)
app.include_router(uploads.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
