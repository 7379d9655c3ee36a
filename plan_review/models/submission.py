"""Submission status lifecycle as observed by the review pipeline."""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel

from plan_review.core.exceptions import InvalidStatusTransitionError
from plan_review.models.review import ReviewResult
from plan_review.models.routing import DispatchOutcome, RoutingDecision


class SubmissionStatus(str, Enum):
    """Persisted submission status values."""
    PROCESSING = "Processing"
    ANALYSIS_COMPLETE = "Analysis Complete"
    FINDINGS_REPORT_EMAILED = "Findings Report Emailed"


_ALLOWED_TRANSITIONS: Dict[SubmissionStatus, FrozenSet[SubmissionStatus]] = {
    SubmissionStatus.PROCESSING: frozenset({SubmissionStatus.ANALYSIS_COMPLETE}),
    SubmissionStatus.ANALYSIS_COMPLETE: frozenset({SubmissionStatus.FINDINGS_REPORT_EMAILED}),
    SubmissionStatus.FINDINGS_REPORT_EMAILED: frozenset(),
}


def is_terminal(status: SubmissionStatus) -> bool:
    return not _ALLOWED_TRANSITIONS[status]


def ensure_transition(current: SubmissionStatus | None, target: SubmissionStatus) -> None:
    """Validate a status change.

    A record without a status may only enter ``Processing``. Re-entering the
    current status is allowed so repeated invocations stay idempotent.

    Raises:
        InvalidStatusTransitionError: If the change is not allowed
    """
    if current is None:
        if target != SubmissionStatus.PROCESSING:
            raise InvalidStatusTransitionError(
                f"New submissions must start in '{SubmissionStatus.PROCESSING.value}', got '{target.value}'"
            )
        return

    if current == target:
        return

    if target not in _ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransitionError(
            f"Cannot move submission from '{current.value}' to '{target.value}'"
        )


class SubmissionOutcome(BaseModel):
    """What one run of the submission workflow produced."""

    submission_id: Optional[str] = None
    result: ReviewResult
    decision: RoutingDecision
    dispatch: DispatchOutcome
    final_status: Optional[SubmissionStatus] = None
