"""Repository layer modules."""

from plan_review.repositories.submission_repository import SubmissionRepository

__all__ = [
    "SubmissionRepository",
]
