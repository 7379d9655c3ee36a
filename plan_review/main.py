"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from pydantic import BaseModel, Field

from plan_review.api.main import api_router
from plan_review.api.routes import health
from plan_review.config import settings
from plan_review.database.base import init_models
from plan_review.dependencies import build_service_container
from plan_review.utils.logging import configure_logging, get_logger

configure_logging(settings.log_level)
LOGGER = get_logger(__name__)


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build service handles on startup and release them on shutdown."""
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "llm_provider": settings.llm_provider,
        },
    )

    services = build_service_container(settings)
    if services.engine is not None:
        LOGGER.info("Initializing submission bookkeeping tables")
        await init_models(services.engine)
    else:
        LOGGER.info("DATABASE_URL not set, submission bookkeeping disabled")

    app.state.services = services

    yield

    LOGGER.info("Shutting down application")
    await services.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Automated compliance review of architectural plan submissions",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health="/health",
    )


app.include_router(health.router, tags=["Health"])
app.include_router(api_router, prefix=settings.api_v1_prefix)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "plan_review.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
