"""Routing of review judgments to the planner or the submitter."""

import asyncio
from typing import Awaitable, Callable, List, Optional

from plan_review.core.exceptions import AppError
from plan_review.core.mail_client import SmtpMailClient
from plan_review.models.review import ReviewResult
from plan_review.models.routing import (
    DispatchOutcome,
    MailAttachment,
    MailMessage,
    RecipientRole,
    RoutingDecision,
)
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

COMPLIANT_SUBJECT = "Compliant Architectural Plan for Review"
ACTION_REQUIRED_SUBJECT = "Architectural Plan Review Results - Action Required"


def decide_route(result: ReviewResult, planner_email: str, submitter_email: str) -> RoutingDecision:
    """Pick exactly one recipient for a judgment.

    Compliant plans go to the planner with the planner narrative; all others
    go back to the submitter with the submitter narrative.
    """
    if result.is_compliant:
        return RoutingDecision(
            recipient=planner_email,
            recipient_role=RecipientRole.PLANNER,
            subject=COMPLIANT_SUBJECT,
            html_body=result.city_planner_email_body,
        )
    return RoutingDecision(
        recipient=submitter_email,
        recipient_role=RecipientRole.SUBMITTER,
        subject=ACTION_REQUIRED_SUBJECT,
        html_body=result.submitter_email_body,
    )


class RoutingService:
    """Delivers routing decisions through the mail collaborator."""

    def __init__(
        self,
        mail_client: SmtpMailClient,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.mail_client = mail_client
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep

    async def dispatch(
        self,
        decision: RoutingDecision,
        attachments: Optional[List[MailAttachment]] = None,
    ) -> DispatchOutcome:
        """Send the chosen message, retrying transport failures.

        The decision itself is never changed by the dispatch result.

        Returns:
            DispatchOutcome describing the delivery
        """
        message = MailMessage(
            to=decision.recipient,
            subject=decision.subject,
            html=decision.html_body,
            attachments=attachments or [],
        )

        LOGGER.info(
            f"Dispatching findings report to {decision.recipient_role.value}",
            extra={"recipient": decision.recipient, "subject": decision.subject}
        )

        last_error = None
        for attempt in range(1, self.max_retries + 1):
            try:
                accepted = await self.mail_client.send(message)
            except AppError as e:
                last_error = str(e)
                LOGGER.warning(
                    f"Mail dispatch attempt {attempt}/{self.max_retries} failed: {e}",
                    extra={"recipient": decision.recipient}
                )
            else:
                if accepted:
                    return DispatchOutcome(success=True, attempts=attempt, recipient=decision.recipient)
                last_error = "Mail transport rejected the message"
                LOGGER.warning(f"Mail dispatch attempt {attempt}/{self.max_retries} was rejected")

            if attempt < self.max_retries:
                await self.sleep(attempt * self.backoff_seconds)

        LOGGER.error(
            "Findings report could not be delivered",
            extra={"recipient": decision.recipient, "error": last_error}
        )
        return DispatchOutcome(
            success=False,
            attempts=self.max_retries,
            recipient=decision.recipient,
            error=last_error,
        )
