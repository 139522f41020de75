"""collective - household coordination analytics service."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from collective.core.config import Constants, settings
from collective.core.logging import configure_logfire, instrument_fastapi
from collective.interface.analytics_router import router as analytics_router
from collective.services.repository import load_fixture


logger = logging.getLogger(__name__)


def seed_store(app: FastAPI) -> None:
    """Load the configured fixture into the application state.

    Raises:
        FileNotFoundError: If the fixture file does not exist
        InvalidItemError: If any fixture item is malformed
    """
    path = settings.resolve_fixture_path()
    app.state.store = load_fixture(path)
    logger.info("startup_fixture_loaded", extra={"path": str(path)})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so startup logs are captured
    configure_logfire()

    if settings.seed_fixture_on_startup:
        seed_store(app)
    else:
        logger.info("startup_fixture_skipped")
    yield


app = FastAPI(
    title="collective",
    description="Household coordination analytics",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(analytics_router)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    loaded = getattr(app.state, "store", None) is not None
    return JSONResponse(content={"status": "healthy", "data_loaded": loaded}, status_code=Constants.HTTP_OK)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("collective.main:app", host="0.0.0.0", port=8000)
