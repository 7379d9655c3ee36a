"""SQLAlchemy models for submission bookkeeping."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, String, TIMESTAMP
from sqlalchemy.orm import Mapped, mapped_column

from plan_review.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Submission(Base):
    """Plan submission record observed by the review pipeline."""

    __tablename__ = "submissions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    status: Mapped[str | None] = mapped_column(
        String, nullable=True
    )  # Processing | Analysis Complete | Findings Report Emailed
    findings: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), default=_utcnow, onupdate=_utcnow
    )
