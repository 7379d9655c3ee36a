"""Unit tests for submission status bookkeeping."""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from plan_review.core.exceptions import InvalidStatusTransitionError
from plan_review.database.models import Submission
from plan_review.models.submission import SubmissionStatus, ensure_transition, is_terminal
from plan_review.repositories.submission_repository import SubmissionRepository


def mock_session(existing=None):
    """AsyncSession double whose ``execute`` returns ``existing``."""
    session = MagicMock()
    result = Mock()
    result.scalar_one_or_none.return_value = existing
    session.execute = AsyncMock(return_value=result)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = Mock()
    return session


class TestEnsureTransition:

    @pytest.mark.parametrize(
        "current,target",
        [
            (None, SubmissionStatus.PROCESSING),
            (SubmissionStatus.PROCESSING, SubmissionStatus.ANALYSIS_COMPLETE),
            (SubmissionStatus.ANALYSIS_COMPLETE, SubmissionStatus.FINDINGS_REPORT_EMAILED),
            (SubmissionStatus.PROCESSING, SubmissionStatus.PROCESSING),
        ],
    )
    def test_allowed(self, current, target):
        ensure_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (None, SubmissionStatus.ANALYSIS_COMPLETE),
            (SubmissionStatus.PROCESSING, SubmissionStatus.FINDINGS_REPORT_EMAILED),
            (SubmissionStatus.ANALYSIS_COMPLETE, SubmissionStatus.PROCESSING),
            (SubmissionStatus.FINDINGS_REPORT_EMAILED, SubmissionStatus.ANALYSIS_COMPLETE),
        ],
    )
    def test_rejected(self, current, target):
        with pytest.raises(InvalidStatusTransitionError):
            ensure_transition(current, target)

    def test_emailed_is_terminal(self):
        assert is_terminal(SubmissionStatus.FINDINGS_REPORT_EMAILED) is True
        assert is_terminal(SubmissionStatus.PROCESSING) is False


class TestSubmissionRepository:

    @pytest.mark.asyncio
    async def test_first_transition_creates_record(self):
        session = mock_session(existing=None)
        repository = SubmissionRepository(session)

        submission = await repository.update_status("sub-1", SubmissionStatus.PROCESSING)

        assert submission.id == "sub-1"
        assert submission.status == "Processing"
        session.add.assert_called_once_with(submission)
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stores_findings_with_status(self):
        existing = Submission(id="sub-1", status=SubmissionStatus.PROCESSING.value)
        session = mock_session(existing=existing)
        repository = SubmissionRepository(session)
        findings = {"summary": "ok", "totalFindings": 0}

        submission = await repository.update_status(
            "sub-1", SubmissionStatus.ANALYSIS_COMPLETE, findings=findings
        )

        assert submission is existing
        assert existing.status == "Analysis Complete"
        assert existing.findings == findings
        assert existing.updated_at is not None
        session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_illegal_transition_is_not_written(self):
        existing = Submission(id="sub-1", status=SubmissionStatus.FINDINGS_REPORT_EMAILED.value)
        session = mock_session(existing=existing)
        repository = SubmissionRepository(session)

        with pytest.raises(InvalidStatusTransitionError):
            await repository.update_status("sub-1", SubmissionStatus.PROCESSING)

        session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_get_status(self):
        existing = Submission(id="sub-1", status="Analysis Complete")
        repository = SubmissionRepository(mock_session(existing=existing))

        assert await repository.get_status("sub-1") == SubmissionStatus.ANALYSIS_COMPLETE

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self):
        session = mock_session(existing=None)
        session.commit.side_effect = SQLAlchemyError("connection lost")
        repository = SubmissionRepository(session)

        with pytest.raises(SQLAlchemyError):
            await repository.update_status("sub-1", SubmissionStatus.PROCESSING)

        session.rollback.assert_awaited_once()
