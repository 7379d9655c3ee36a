from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from plan_review.database.models import Submission
from plan_review.models.submission import SubmissionStatus, ensure_transition
from plan_review.repositories.base_repository import BaseRepository


class SubmissionRepository(BaseRepository[Submission]):
    """Repository for submission status and findings."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Submission)

    async def get_status(self, submission_id: str) -> Optional[SubmissionStatus]:
        submission = await self.get_by_id(submission_id)
        if submission is None or submission.status is None:
            return None
        return SubmissionStatus(submission.status)

    async def update_status(
        self,
        submission_id: str,
        status: SubmissionStatus,
        findings: Optional[Dict[str, Any]] = None,
    ) -> Submission:
        """Move a submission to a new status, optionally storing findings.

        Unknown submissions are created on their first transition.

        Args:
            submission_id: Submission record ID
            status: Target status
            findings: Review judgment in its wire form

        Returns:
            Updated Submission instance

        Raises:
            InvalidStatusTransitionError: If the status change is not allowed
        """
        submission = await self.get_by_id(submission_id)
        current = SubmissionStatus(submission.status) if submission and submission.status else None
        ensure_transition(current, status)

        changes: Dict[str, Any] = {"status": status.value}
        if findings is not None:
            changes["findings"] = findings

        if submission is None:
            submission = await self.create(
                id=submission_id,
                updated_at=datetime.now(timezone.utc),
                **changes,
            )
        else:
            submission = await self.update(submission, **changes)

        self.logger.info(
            f"Submission {submission_id} status: {current.value if current else None} -> {status.value}",
            extra={"submission_id": submission_id, "has_findings": findings is not None}
        )
        return submission
