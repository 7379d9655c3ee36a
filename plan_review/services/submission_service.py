"""Submission workflow: fetch, review, persist and route one plan submission."""

import asyncio
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from plan_review.core.exceptions import DocumentFetchError, InvalidStatusTransitionError
from plan_review.core.storage_client import DocumentStorageClient, file_name_from_url
from plan_review.models.request.review import ReviewRequest
from plan_review.models.routing import MailAttachment
from plan_review.models.submission import SubmissionOutcome, SubmissionStatus, is_terminal
from plan_review.repositories.submission_repository import SubmissionRepository
from plan_review.services.base_service import BaseService
from plan_review.services.pipeline.review_pipeline import ReviewPipeline
from plan_review.services.routing.routing_service import RoutingService, decide_route


class SubmissionService(BaseService):
    """Runs the full review workflow for one submission.

    1. Fetch the document under a single deadline
    2. Mark the submission ``Processing``
    3. Review the document
    4. Store the findings and mark ``Analysis Complete``
    5. Route the judgment and send it with the plan attached
    6. Mark ``Findings Report Emailed`` once delivery succeeded

    Bookkeeping is skipped when the request has no submission id or no
    database is configured. A submission already at its terminal status is
    not reviewed or mailed again; that raises InvalidStatusTransitionError.
    Fetch and parse failures propagate.
    """

    def __init__(
        self,
        storage_client: DocumentStorageClient,
        pipeline: ReviewPipeline,
        routing_service: RoutingService,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        fetch_timeout_seconds: float = 300,
    ):
        super().__init__()
        self.storage_client = storage_client
        self.pipeline = pipeline
        self.routing_service = routing_service
        self.session_factory = session_factory
        self.fetch_timeout_seconds = fetch_timeout_seconds

    async def process(self, request: ReviewRequest) -> SubmissionOutcome:
        return await self.execute(request)

    def validate(self, request: ReviewRequest):
        if not isinstance(request, ReviewRequest):
            raise TypeError(f"Expected ReviewRequest, got {type(request).__name__}")

    async def run(self, request: ReviewRequest) -> SubmissionOutcome:
        submission_id = request.submission_id
        project = request.project_details()

        current = await self._current_status(submission_id)
        if current is not None and is_terminal(current):
            raise InvalidStatusTransitionError(
                f"Submission {submission_id} is already '{current.value}', not reprocessing"
            )

        document = await self._fetch(request.document_url)

        await self._set_status(submission_id, SubmissionStatus.PROCESSING)

        result = await self.pipeline.review(document, project)

        await self._set_status(
            submission_id,
            SubmissionStatus.ANALYSIS_COMPLETE,
            findings=result.to_wire(),
        )

        decision = decide_route(result, request.city_planner_email, request.submitter_email)
        self.logger.info(
            f"Routing decision: {decision.recipient_role.value}",
            extra={
                "submission_id": submission_id,
                "is_compliant": result.is_compliant,
                "is_fallback": result.is_fallback,
                "total_findings": result.total_findings,
            }
        )

        attachment = MailAttachment(
            filename=request.file_name or file_name_from_url(request.document_url),
            content=document,
        )
        dispatch = await self.routing_service.dispatch(decision, [attachment])

        final_status = SubmissionStatus.ANALYSIS_COMPLETE
        if dispatch.success:
            await self._set_status(submission_id, SubmissionStatus.FINDINGS_REPORT_EMAILED)
            final_status = SubmissionStatus.FINDINGS_REPORT_EMAILED

        return SubmissionOutcome(
            submission_id=submission_id,
            result=result,
            decision=decision,
            dispatch=dispatch,
            final_status=final_status if self._bookkeeping_enabled(submission_id) else None,
        )

    async def _fetch(self, url: str) -> bytes:
        try:
            return await asyncio.wait_for(
                self.storage_client.fetch(url),
                timeout=self.fetch_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise DocumentFetchError(
                f"Document fetch exceeded {self.fetch_timeout_seconds}s deadline", e
            ) from e

    def _bookkeeping_enabled(self, submission_id: Optional[str]) -> bool:
        return bool(submission_id) and self.session_factory is not None

    async def _current_status(self, submission_id: Optional[str]) -> Optional[SubmissionStatus]:
        if not self._bookkeeping_enabled(submission_id):
            return None

        try:
            async with self.session_factory() as session:
                return await SubmissionRepository(session).get_status(submission_id)
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to read status for submission {submission_id}: {e}",
                exc_info=True,
                extra={"submission_id": submission_id}
            )
            return None

    async def _set_status(
        self,
        submission_id: Optional[str],
        status: SubmissionStatus,
        findings: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not self._bookkeeping_enabled(submission_id):
            return

        try:
            async with self.session_factory() as session:
                repository = SubmissionRepository(session)
                await repository.update_status(submission_id, status, findings=findings)
        except (SQLAlchemyError, InvalidStatusTransitionError) as e:
            # Bookkeeping failures do not block delivery
            self.logger.error(
                f"Failed to record status '{status.value}' for submission {submission_id}: {e}",
                exc_info=True,
                extra={"submission_id": submission_id}
            )
