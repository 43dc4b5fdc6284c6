"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from farmarea.config import settings
from farmarea.api.models.responses import HealthResponse
from farmarea.api.dependencies import resolve_session_user
from farmarea.api.routers import areas, notes, tasks, users
from farmarea.infrastructure.database import SessionLocal, init_db
from farmarea.infrastructure.repository import FarmRepository
from farmarea.middleware.error_handler import ErrorHandlerMiddleware, request_validation_handler

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates the database schema and pins the session user on startup.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Session user: {settings.session_user_email}")
    if settings.rate_limit_enabled:
        logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")
    init_db()

    db = SessionLocal()
    try:
        app.state.session_user_id = resolve_session_user(
            FarmRepository(db, default_farm_name=settings.default_farm_name)
        )
    finally:
        db.close()
    logger.info(f"Session user id: {app.state.session_user_id}")

    yield

    # Shutdown
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Farm management API for map-drawn areas

    Users outline areas of their farm on an aerial image, attach crop
    metadata and keep tasks and notes per area.

    ## Resources

    - **Areas**: 4-point polygons in percentage coordinates (0-100 of the
      image width and height) with name, crop type, hectares and color
    - **Tasks**: per-area work items with a pending / in-progress /
      completed status
    - **Notes**: append-only per-area observations
    - **User / Farm settings**: profile and farm display name

    Deleting an area deletes its tasks and notes.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(users.router, prefix="/api")
app.include_router(areas.router, prefix="/api")
app.include_router(tasks.router, prefix="/api")
app.include_router(notes.router, prefix="/api")


@app.get("/", tags=["health"], response_model=HealthResponse)
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"], response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
