"""Health check API endpoints."""

from fastapi import APIRouter, Request

from plan_review.config import settings
from plan_review.models.response.review import HealthCheckResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    description="Check if the service is running and its handles are built",
    operation_id="get_service_health_status",
)
async def health_check(request: Request) -> HealthCheckResponse:
    services = getattr(request.app.state, "services", None)
    return HealthCheckResponse(
        status="healthy" if services is not None else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        llm_provider=settings.llm_provider,
        bookkeeping=bool(services is not None and services.engine is not None),
    )
