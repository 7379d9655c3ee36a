"""Pytest configuration and shared fixtures."""

import json
from io import BytesIO
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock

import pypdfium2 as pdfium
import pytest

from plan_review.models.document import ProjectDetails
from plan_review.models.review import Finding, ReviewResult, Severity


def make_pdf(page_count: int, width: float = 612, height: float = 792) -> bytes:
    """Build an in-memory PDF with ``page_count`` blank pages."""
    pdf = pdfium.PdfDocument.new()
    try:
        for _ in range(page_count):
            pdf.new_page(width, height)
        buffer = BytesIO()
        pdf.save(buffer)
        return buffer.getvalue()
    finally:
        pdf.close()


def finding_payload(description: str, severity: str, confidence: float = 0.9) -> Dict[str, Any]:
    return {
        "description": description,
        "codeSection": "IRC R302.1",
        "remedialAction": f"Resolve: {description}",
        "confidenceScore": confidence,
        "severity": severity,
    }


def review_payload(
    critical: int = 0,
    major: int = 0,
    minor: int = 0,
    is_compliant: Optional[bool] = None,
    total: Optional[int] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """Decoded consolidated-review response with the requested finding counts."""
    payload = {
        "summary": "Plan set reviewed.",
        "missingPlans": [],
        "missingPermits": [],
        "missingDocumentation": [],
        "missingInspectionCertificates": [],
        "criticalFindings": [finding_payload(f"critical {i}", "critical") for i in range(critical)],
        "majorFindings": [finding_payload(f"major {i}", "major") for i in range(major)],
        "minorFindings": [finding_payload(f"minor {i}", "minor") for i in range(minor)],
        "totalFindings": critical + major + minor if total is None else total,
        "isCompliant": (critical == 0 and major == 0) if is_compliant is None else is_compliant,
        "cityPlannerEmailBody": "<p>Planner body</p>",
        "submitterEmailBody": "<p>Submitter body</p>",
    }
    payload.update(overrides)
    return payload


def metadata_payload(title: str = "A1.0 Floor Plan") -> Dict[str, Any]:
    return {
        "chunkId": "chunk-from-service",
        "drawingTitle": title,
        "drawingType": "floor plan",
        "scale": "1/4\" = 1'-0\"",
        "keyElements": ["2x6 exterior walls", "egress windows"],
        "codeReferences": ["IRC R310"],
        "rawText": "FLOOR PLAN",
    }


def build_review(
    summary: str = "Partial review",
    is_compliant: bool = True,
    critical: int = 0,
    major: int = 0,
    minor: int = 0,
    is_fallback: bool = False,
) -> ReviewResult:
    def findings(count: int, severity: Severity) -> List[Finding]:
        return [
            Finding(description=f"{severity.value} {i}", severity=severity, confidence_score=0.8)
            for i in range(count)
        ]

    return ReviewResult(
        summary=summary,
        critical_findings=findings(critical, Severity.CRITICAL),
        major_findings=findings(major, Severity.MAJOR),
        minor_findings=findings(minor, Severity.MINOR),
        total_findings=critical + major + minor,
        is_compliant=is_compliant,
        city_planner_email_body=f"<p>planner: {summary}</p>",
        submitter_email_body=f"<p>submitter: {summary}</p>",
        is_fallback=is_fallback,
    )


@pytest.fixture
def project() -> ProjectDetails:
    """Sample project details."""
    return ProjectDetails(
        address="123 Main St",
        parcel_number="1234567890",
        city="Bellevue",
        county="King",
        project_summary="New two-story single family residence",
    )


@pytest.fixture
def mock_llm_client() -> Mock:
    """Reasoning service client with an async ``generate_content``."""
    client = Mock()
    client.generate_content = AsyncMock()
    return client


@pytest.fixture
def mock_search_client() -> Mock:
    """Search collaborator returning no citations."""
    client = Mock()
    client.search = AsyncMock(return_value=[])
    return client


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Injectable sleep that returns immediately."""
    return AsyncMock(return_value=None)


@pytest.fixture
def review_json():
    """Factory returning a consolidated-review response as JSON text."""
    def _factory(**kwargs: Any) -> str:
        return json.dumps(review_payload(**kwargs))
    return _factory


@pytest.fixture
def pdf_factory():
    """Factory building in-memory PDFs with blank pages."""
    return make_pdf


@pytest.fixture
def review_payload_factory():
    """Factory building decoded consolidated-review responses."""
    return review_payload


@pytest.fixture
def metadata_payload_factory():
    """Factory building decoded metadata-extraction responses."""
    return metadata_payload


@pytest.fixture
def review_factory():
    """Factory building ReviewResult instances."""
    return build_review
