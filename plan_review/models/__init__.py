"""Pydantic models for plan review."""

from plan_review.models.document import Chunk, ChunkMetadata, ProjectDetails
from plan_review.models.review import Finding, MissingItem, ReviewResult, SearchResult, Severity
from plan_review.models.routing import (
    DispatchOutcome,
    MailAttachment,
    MailMessage,
    RecipientRole,
    RoutingDecision,
)
from plan_review.models.submission import SubmissionStatus

__all__ = [
    "Chunk",
    "ChunkMetadata",
    "ProjectDetails",
    "Finding",
    "MissingItem",
    "ReviewResult",
    "SearchResult",
    "Severity",
    "DispatchOutcome",
    "MailAttachment",
    "MailMessage",
    "RecipientRole",
    "RoutingDecision",
    "SubmissionStatus",
]
