"""Plan review API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status

from plan_review.core.exceptions import AppError
from plan_review.dependencies import get_submission_service
from plan_review.models.request.review import ReviewRequest
from plan_review.models.response.review import ReviewAcceptedResponse
from plan_review.services.submission_service import SubmissionService
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


async def run_review(service: SubmissionService, payload: ReviewRequest, request_id: str) -> None:
    """Background task running the submission workflow for one request."""
    log_context = {"request_id": request_id, "submission_id": payload.submission_id}
    try:
        outcome = await service.process(payload)
    except AppError as e:
        LOGGER.error(f"Plan review failed: {e}", exc_info=True, extra=log_context)
        return

    LOGGER.info(
        "Plan review finished",
        extra={
            **log_context,
            "recipient_role": outcome.decision.recipient_role.value,
            "dispatched": outcome.dispatch.success,
        }
    )


@router.post(
    "",
    response_model=ReviewAcceptedResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Schedule a plan review",
    description="Accept a plan submission and review it in the background",
    operation_id="create_plan_review",
)
async def create_review(
    payload: ReviewRequest,
    background_tasks: BackgroundTasks,
    service: Annotated[SubmissionService, Depends(get_submission_service)],
) -> ReviewAcceptedResponse:
    """Schedule the review and answer immediately.

    Returns:
        ReviewAcceptedResponse: Acknowledgement with a request id for tracing
    """
    request_id = str(uuid.uuid4())
    LOGGER.info(
        "Plan review accepted",
        extra={"request_id": request_id, "submission_id": payload.submission_id}
    )
    background_tasks.add_task(run_review, service, payload, request_id)
    return ReviewAcceptedResponse(
        message="Plan review started. Results will be emailed when complete.",
        request_id=request_id,
    )
