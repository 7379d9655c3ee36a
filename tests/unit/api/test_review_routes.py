"""API tests for the review and health endpoints."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from plan_review.core.exceptions import DocumentFetchError
from plan_review.dependencies import get_submission_service
from plan_review.main import app

REQUEST_BODY = {
    "documentUrl": "https://storage.example.com/plans/site-plan.pdf",
    "submissionId": "sub-123",
    "submitterEmail": "owner@example.com",
    "cityPlannerEmail": "planning@city.example.gov",
    "address": "123 Main St",
    "parcelNumber": "1234567890",
    "city": "Bellevue",
    "county": "King",
}


@pytest.fixture
def submission_service():
    service = Mock()
    service.process = AsyncMock()
    return service


@pytest.fixture
def client(submission_service):
    # Built without the lifespan so no external clients are configured
    app.dependency_overrides[get_submission_service] = lambda: submission_service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestReviewRoutes:

    def test_schedules_review_and_returns_202(self, client, submission_service):
        response = client.post("/api/v1/reviews", json=REQUEST_BODY)

        assert response.status_code == 202
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Plan review started. Results will be emailed when complete."
        assert body["requestId"]

        submission_service.process.assert_awaited_once()
        payload = submission_service.process.await_args.args[0]
        assert payload.submission_id == "sub-123"
        assert payload.project_details().city == "Bellevue"

    def test_background_failure_does_not_change_response(self, client, submission_service):
        submission_service.process.side_effect = DocumentFetchError("HTTP 404")

        response = client.post("/api/v1/reviews", json=REQUEST_BODY)

        assert response.status_code == 202

    @pytest.mark.parametrize(
        "field,value",
        [
            ("documentUrl", "ftp://storage.example.com/plan.pdf"),
            ("submitterEmail", "not-an-email"),
            ("city", ""),
        ],
    )
    def test_rejects_invalid_request(self, client, submission_service, field, value):
        body = {**REQUEST_BODY, field: value}

        response = client.post("/api/v1/reviews", json=body)

        assert response.status_code == 422
        submission_service.process.assert_not_awaited()

    def test_missing_address_rejected(self, client):
        body = {key: value for key, value in REQUEST_BODY.items() if key != "address"}

        assert client.post("/api/v1/reviews", json=body).status_code == 422


class TestHealthRoutes:

    def test_health_without_services_is_degraded(self, client):
        if hasattr(app.state, "services"):
            del app.state.services

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["health"] == "/health"
