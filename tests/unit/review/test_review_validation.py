"""Unit tests for consolidated review payload validation."""

import pytest

from plan_review.core.exceptions import ResponseValidationError
from plan_review.models.review import Severity
from plan_review.services.review.validation import validate_review_payload


class TestValidateReviewPayload:

    def test_accepts_complete_payload(self, review_payload_factory):
        result = validate_review_payload(review_payload_factory(critical=2, major=1))

        assert result.total_findings == 3
        assert result.is_compliant is False
        assert [f.severity for f in result.critical_findings] == [Severity.CRITICAL, Severity.CRITICAL]
        assert result.major_findings[0].code_section == "IRC R302.1"
        assert result.is_fallback is False

    def test_missing_item_arrays_default_to_empty(self, review_payload_factory):
        payload = review_payload_factory()
        del payload["missingPermits"]
        del payload["missingInspectionCertificates"]

        result = validate_review_payload(payload)

        assert result.missing_permits == []
        assert result.missing_inspection_certificates == []

    @pytest.mark.parametrize(
        "field,value",
        [
            ("summary", ""),
            ("criticalFindings", None),
            ("majorFindings", "none"),
            ("totalFindings", "3"),
            ("totalFindings", True),
            ("isCompliant", "yes"),
            ("cityPlannerEmailBody", "   "),
            ("submitterEmailBody", None),
        ],
    )
    def test_rejects_bad_required_field(self, review_payload_factory, field, value):
        payload = review_payload_factory()
        payload[field] = value

        with pytest.raises(ResponseValidationError) as exc_info:
            validate_review_payload(payload)

        assert field in str(exc_info.value)

    def test_corrects_mismatched_total(self, review_payload_factory):
        result = validate_review_payload(review_payload_factory(major=2, minor=1, total=7))

        assert result.total_findings == 3

    def test_string_items_become_descriptions(self, review_payload_factory):
        payload = review_payload_factory(missingPlans=["Site plan", "Drainage plan"])

        result = validate_review_payload(payload)

        assert [item.description for item in result.missing_plans] == ["Site plan", "Drainage plan"]

    def test_unknown_severity_takes_array_severity(self, review_payload_factory):
        payload = review_payload_factory(minor=1)
        payload["minorFindings"][0]["severity"] = "cosmetic"

        result = validate_review_payload(payload)

        assert result.minor_findings[0].severity == Severity.MINOR

    def test_non_object_item_rejected(self, review_payload_factory):
        payload = review_payload_factory(criticalFindings=[42], totalFindings=1)

        with pytest.raises(ResponseValidationError):
            validate_review_payload(payload)

    def test_percentage_confidence_is_scaled(self, review_payload_factory):
        payload = review_payload_factory(major=1)
        payload["majorFindings"][0]["confidenceScore"] = 85

        result = validate_review_payload(payload)

        assert result.major_findings[0].confidence_score == pytest.approx(0.85)

    def test_wire_form_uses_camel_case(self, review_payload_factory):
        wire = validate_review_payload(review_payload_factory(critical=1)).to_wire()

        assert wire["totalFindings"] == 1
        assert wire["criticalFindings"][0]["remedialAction"] == "Resolve: critical 0"
        assert "isFallback" not in wire and "is_fallback" not in wire

    @pytest.mark.parametrize("total", [float("nan"), float("inf"), float("-inf")])
    def test_rejects_non_finite_total(self, review_payload_factory, total):
        with pytest.raises(ResponseValidationError, match="totalFindings"):
            validate_review_payload(review_payload_factory(major=1, total=total))

    def test_invalid_item_field_raises_validation_error(self, review_payload_factory):
        payload = review_payload_factory(major=1)
        payload["majorFindings"][0]["description"] = {"nested": "object"}

        with pytest.raises(ResponseValidationError):
            validate_review_payload(payload)
