"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from aoi_insights.config import settings
from aoi_insights.middleware.error_handler import ErrorHandlerMiddleware, request_validation_handler
from aoi_insights.api.v1.routers import drawing, insights, map_state, regions

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
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Insights provider: {settings.insights_api_base_url} "
                f"(retry attempts per strategy={settings.max_retry_attempts})")
    logger.info(f"Live update debounce: {settings.live_debounce_seconds}s")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    from aoi_insights.infrastructure.insights_client import get_api_client
    from aoi_insights.services.application.map_workspace import get_workspace
    logger.info("Shutting down application...")
    await get_workspace().live.aclose()
    client = get_api_client()
    await client.close()
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Area-of-interest environmental insights API

    Draw a region on a map, or drop a marker, and retrieve environmental
    index data for it.

    ## Features

    - **Drawing**: Lines and polygons finished on demand, rectangles from
      two opposite corners
    - **Regions**: Finished regions as GeoJSON (coordinates in [lon, lat])
    - **Insights**: Point or boundary queries with graceful degradation when
      the provider is unreachable or answers with synthetic data
    - **Live updates**: Debounced refresh after map moves
    - **Rate Limiting**: Protects the API from abuse
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
app.include_router(drawing.router, prefix="/api/v1")
app.include_router(regions.router, prefix="/api/v1")
app.include_router(map_state.router, prefix="/api/v1")
app.include_router(insights.router, prefix="/api/v1")


@app.get("/", tags=["health"])
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


@app.get("/health", tags=["health"])
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
