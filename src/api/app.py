"""FastAPI application for the Trakt chat agent.

Logging: Uses structured JSON logging for Grafana Loki.
Set LOG_FORMAT=pretty for development-friendly output.
"""

from contextlib import asynccontextmanager

# Configure structured logging BEFORE importing anything else
from src.utils.logging import configure_logging, get_logger, log  # noqa: E402

configure_logging()

MODULE = "api"
logger = get_logger()

from fastapi import FastAPI  # noqa: E402

from src.api.routes.health import router as health_router  # noqa: E402
from src.api.routes.chat import router as chat_router  # noqa: E402
from src.api.routes.contracts import router as contracts_router  # noqa: E402
from src.db.session import engine  # noqa: E402
from src.db.models import Base  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info(logger, MODULE, "db_ready", "Database tables ready")

    yield

    await engine.dispose()
    log.info(logger, MODULE, "shutdown", "Application shutdown complete")


app = FastAPI(
    title="Trakt",
    description="Chat-driven escrow contract builder",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(chat_router, prefix="/chat", tags=["chat"])
app.include_router(contracts_router, prefix="/contracts", tags=["contracts"])
