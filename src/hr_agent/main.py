"""Main FastAPI application for the HR agent API.

This module sets up the FastAPI application with lifespan management,
health check endpoint, and API routing.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from qdrant_client import QdrantClient
from sqlalchemy import create_engine, text

from hr_agent_config import get_settings

from .routers import chat
from .services.models import init_checkpoint_tables

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events.

    Startup: create checkpoint tables when the postgres backend is configured
    Shutdown: log only

    Args:
        app: FastAPI application instance

    Yields:
        None
    """
    # Startup
    logger.info("Starting HR Agent API")

    settings = get_settings()
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Checkpoint backend: {settings.checkpoint.backend}")

    if settings.checkpoint.backend == "postgres":
        try:
            engine = create_engine(settings.database.connection_string)
            init_checkpoint_tables(engine)
            engine.dispose()
        except Exception as e:
            logger.error(f"Checkpoint table initialization failed: {e}", exc_info=True)
            # Don't fail startup - health check will report unhealthy

    yield

    # Shutdown
    logger.info("Shutting down HR Agent API")


# Create FastAPI app
app = FastAPI(
    title="HR Agent API",
    description="Conversational HR agent with employee vector search",
    version="0.1.0",
    lifespan=lifespan
)

# Include routers
app.include_router(chat.router, prefix="/api/v1", tags=["chat"])


@app.get("/health", status_code=status.HTTP_200_OK, tags=["health"])
def health_check():
    """Health check endpoint.

    Checks the checkpoint database (postgres backend only) and the vector
    store. Returns 200 if healthy, 503 if any component is unhealthy.

    Returns:
        JSON response with health status and component checks
    """
    settings = get_settings()

    checks = {
        "checkpoint_store": "unknown",
        "vector_store": "unknown"
    }

    # Check checkpoint database
    if settings.checkpoint.backend == "memory":
        checks["checkpoint_store"] = "healthy"
    else:
        engine = None
        try:
            engine = create_engine(settings.database.connection_string)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            checks["checkpoint_store"] = "healthy"
            logger.debug("Checkpoint database health check: healthy")
        except Exception as e:
            logger.error(f"Checkpoint database health check failed: {e}")
            checks["checkpoint_store"] = "unhealthy"
        finally:
            if engine is not None:
                engine.dispose()

    # Check vector store
    try:
        qdrant = QdrantClient(url=settings.qdrant.url)
        qdrant.get_collections()
        checks["vector_store"] = "healthy"
        logger.debug("Vector store health check: healthy")
    except Exception as e:
        logger.error(f"Vector store health check failed: {e}")
        checks["vector_store"] = "unhealthy"

    # Determine overall status
    overall_status = "healthy" if all(v == "healthy" for v in checks.values()) else "unhealthy"

    response_code = status.HTTP_200_OK if overall_status == "healthy" else status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=response_code,
        content={
            "status": overall_status,
            "service": "api",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "checks": checks
        }
    )


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information.

    Returns:
        Dict with API service information and available endpoints
    """
    return {
        "service": "HR Agent API",
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/health"
    }
