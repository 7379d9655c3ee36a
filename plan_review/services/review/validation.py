"""Structural validation of consolidated review payloads."""

import math
from numbers import Real
from typing import Any, Dict, List, Type, TypeVar

from pydantic import ValidationError

from plan_review.core.exceptions import ResponseValidationError
from plan_review.models.review import Finding, MissingItem, ReviewResult, Severity
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

FINDING_ARRAYS = {
    "criticalFindings": Severity.CRITICAL,
    "majorFindings": Severity.MAJOR,
    "minorFindings": Severity.MINOR,
}
MISSING_ARRAYS = (
    "missingPlans",
    "missingPermits",
    "missingDocumentation",
    "missingInspectionCertificates",
)

ItemT = TypeVar("ItemT", bound=Finding)

_SEVERITY_VALUES = {severity.value for severity in Severity}


def _is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _coerce_items(
    raw_items: List[Any],
    model: Type[ItemT],
    default_severity: Severity,
    field_name: str,
) -> List[ItemT]:
    items = []
    for position, raw in enumerate(raw_items):
        if isinstance(raw, str):
            raw = {"description": raw}
        if not isinstance(raw, dict):
            raise ResponseValidationError(
                f"{field_name}[{position}] must be an object, got {type(raw).__name__}"
            )

        data = dict(raw)
        severity = data.get("severity")
        if not isinstance(severity, str) or severity.strip().lower() not in _SEVERITY_VALUES:
            data["severity"] = default_severity.value

        try:
            items.append(model.model_validate(data))
        except ValidationError as e:
            raise ResponseValidationError(f"{field_name}[{position}] is invalid: {e}", e) from e
    return items


def validate_review_payload(payload: Dict[str, Any]) -> ReviewResult:
    """Validate a decoded review response and build the ReviewResult.

    Required: non-empty ``summary``; ``criticalFindings``, ``majorFindings``
    and ``minorFindings`` arrays; numeric ``totalFindings``; boolean
    ``isCompliant``; non-empty ``cityPlannerEmailBody`` and
    ``submitterEmailBody``. Missing-item arrays default to empty.

    A ``totalFindings`` that disagrees with the finding arrays is replaced by
    the actual count.

    Args:
        payload: Decoded JSON object

    Returns:
        ReviewResult: The accepted judgment

    Raises:
        ResponseValidationError: If a required field is absent or mistyped
    """
    problems = []
    if not _is_non_empty_text(payload.get("summary")):
        problems.append("summary must be non-empty text")
    for name in FINDING_ARRAYS:
        if not isinstance(payload.get(name), list):
            problems.append(f"{name} must be an array")
    total = payload.get("totalFindings")
    if isinstance(total, bool) or not isinstance(total, Real):
        problems.append("totalFindings must be a number")
    elif not math.isfinite(total):
        problems.append("totalFindings must be a finite number")
    if not isinstance(payload.get("isCompliant"), bool):
        problems.append("isCompliant must be a boolean")
    for name in ("cityPlannerEmailBody", "submitterEmailBody"):
        if not _is_non_empty_text(payload.get(name)):
            problems.append(f"{name} must be non-empty text")

    if problems:
        raise ResponseValidationError(f"Invalid review response: {'; '.join(problems)}")

    fields: Dict[str, Any] = {}
    for name, severity in FINDING_ARRAYS.items():
        fields[name] = _coerce_items(payload[name], Finding, severity, name)
    for name in MISSING_ARRAYS:
        raw_items = payload.get(name)
        if not isinstance(raw_items, list):
            raw_items = []
        fields[name] = _coerce_items(raw_items, MissingItem, Severity.MAJOR, name)

    try:
        result = ReviewResult.model_validate({
            **fields,
            "summary": payload["summary"].strip(),
            "totalFindings": int(total),
            "isCompliant": payload["isCompliant"],
            "cityPlannerEmailBody": payload["cityPlannerEmailBody"],
            "submitterEmailBody": payload["submitterEmailBody"],
        })
    except ValidationError as e:
        raise ResponseValidationError(f"Invalid review response: {e}", e) from e

    actual = result.findings_count()
    if result.total_findings != actual:
        LOGGER.warning(
            f"Reported totalFindings {result.total_findings} does not match {actual} findings; correcting",
            extra={"reported_total": result.total_findings, "actual_total": actual}
        )
        result.total_findings = actual

    return result
