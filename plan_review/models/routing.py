"""Models for routing decisions and outbound mail."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class RecipientRole(str, Enum):
    """Who receives the findings report."""
    PLANNER = "planner"
    SUBMITTER = "submitter"


class RoutingDecision(BaseModel):
    """Recipient and message variant chosen for a review result."""

    model_config = {"frozen": True}

    recipient: str = Field(..., description="Destination email address")
    recipient_role: RecipientRole
    subject: str
    html_body: str


class MailAttachment(BaseModel):
    """File attached to an outbound message."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


class MailMessage(BaseModel):
    """Outbound message handed to the mail collaborator."""

    to: str
    subject: str
    html: str
    attachments: List[MailAttachment] = Field(default_factory=list)


class DispatchOutcome(BaseModel):
    """Result of delivering a routed findings report."""

    success: bool
    attempts: int
    recipient: str
    error: Optional[str] = None
