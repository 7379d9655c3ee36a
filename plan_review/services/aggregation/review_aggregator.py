"""Merge partial judgments of an oversized document into one ReviewResult.

The merge is deliberately simple: narratives are concatenated in batch order
and may repeat each other.
"""

from typing import List

from plan_review.models.review import ReviewResult
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

SECTION_SEPARATOR = "\n<hr>\n"

_ARRAY_FIELDS = (
    "missing_plans",
    "missing_permits",
    "missing_documentation",
    "missing_inspection_certificates",
    "critical_findings",
    "major_findings",
    "minor_findings",
)


def aggregate_reviews(results: List[ReviewResult]) -> ReviewResult:
    """Combine per-batch judgments.

    - summaries joined in batch order, blank-line separated
    - the seven finding and missing-item arrays flattened in order
    - ``total_findings`` summed
    - ``is_compliant`` is the AND of all partials
    - email bodies concatenated in order, separated by ``<hr>``
    - ``is_fallback`` set when any partial was a fallback

    Raises:
        ValueError: If results is empty
    """
    if not results:
        raise ValueError("Cannot aggregate an empty list of review results")
    if len(results) == 1:
        return results[0]

    merged = {name: [item for result in results for item in getattr(result, name)] for name in _ARRAY_FIELDS}

    aggregated = ReviewResult(
        summary="\n\n".join(result.summary for result in results),
        total_findings=sum(result.total_findings for result in results),
        is_compliant=all(result.is_compliant for result in results),
        city_planner_email_body=SECTION_SEPARATOR.join(result.city_planner_email_body for result in results),
        submitter_email_body=SECTION_SEPARATOR.join(result.submitter_email_body for result in results),
        is_fallback=any(result.is_fallback for result in results),
        **merged,
    )

    LOGGER.info(
        f"Aggregated {len(results)} partial reviews",
        extra={
            "batch_count": len(results),
            "total_findings": aggregated.total_findings,
            "is_compliant": aggregated.is_compliant,
            "fallback_batches": sum(1 for result in results if result.is_fallback),
        }
    )
    return aggregated
