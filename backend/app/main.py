# backend/app/main.py
"""
FastAPI application for the booking service.

Bookings are served at /bookings and, versioned, at /api/v1/bookings.
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import (
    ALLOWED_ORIGINS,
    API_DESCRIPTION,
    API_TITLE,
    API_VERSION,
    BRAND_NAME,
    ROOT_STATUS_MESSAGE,
)
from .database import init_db
from .errors import register_error_handlers
from .routes import prometheus
from .routes.v1 import bookings as bookings_v1
from .schemas.main_responses import RootResponse

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    init_db()
    logger.info(
        f"Schedule {settings.schedule_day_start:%H:%M}-{settings.schedule_day_end:%H:%M} "
        f"in {settings.schedule_slot_minutes}-minute slots; availability cache "
        f"{settings.availability_cache_max_entries} entries, "
        f"{settings.availability_cache_ttl_seconds:.0f}s TTL"
    )

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(bookings_v1.router, prefix="/bookings")

app.include_router(api_v1)
# Unversioned mount kept for existing clients
app.include_router(bookings_v1.router, prefix="/bookings")
app.include_router(prometheus.router)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - service status"""
    return RootResponse(
        message=ROOT_STATUS_MESSAGE,
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )
