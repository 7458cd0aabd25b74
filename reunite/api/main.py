"""FastAPI application entry point for Reunite."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from structlog import get_logger

from reunite.api.middleware.logging_middleware import LoggingMiddleware
from reunite.api.routes.health import router as health_router
from reunite.api.routes.metrics import router as metrics_router
from reunite.api.routes.verification import router as verification_router
from reunite.bootstrap.database import close_database_engine
from reunite.bootstrap.logging import configure_logging

load_dotenv()
ENVIRONMENT = configure_logging()

logger = get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("application_started", environment=ENVIRONMENT)
    yield
    await close_database_engine()
    logger.info("application_stopped")


app = FastAPI(
    title="Reunite Verification API",
    description="Pet ownership verification and dispute resolution",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(verification_router)
