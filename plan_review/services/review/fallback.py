"""Canonical manual-review judgment used when every review attempt failed."""

from plan_review.models.review import ReviewResult

FALLBACK_SUMMARY = (
    "Our system was able to process your plan but couldn't perform a detailed review at this time."
)

_FINDING_COUNTS_BOX = """
<div style="background-color: #e6f3ff; padding: 15px; border-radius: 5px;">
  <h4 style="color: #0066cc; margin-top: 0;">Finding Counts</h4>
  <ul>
    <li>Critical Findings: 0</li>
    <li>Major Findings: 0</li>
    <li>Minor Findings: 0</li>
    <li>Total Findings: 0</li>
  </ul>
</div>"""

_FOOTER = (
    '<div style="font-size: 12px; color: #666; margin-top: 20px;">'
    "This email was automatically generated by CivicStream. {detail}"
    "</div>"
)

FALLBACK_PLANNER_BODY = f"""<div style="color: #0066cc; font-size: 24px; font-weight: bold;">Plan Review Process Completed</div>
<hr>
<p>Dear City Planner,</p>
<p>The architectural plans were received and processed, but an automated code compliance review could not be completed.</p>
{_FINDING_COUNTS_BOX}
<h3>Review Status</h3>
<p>This plan is marked for manual review. Please have a building code specialist review the attached plans.</p>
{_FOOTER.format(detail="This plan requires manual review by city planning staff.")}"""

FALLBACK_SUBMITTER_BODY = f"""<div style="color: #cc0000; font-size: 24px; font-weight: bold;">Plan Review Complete - Manual Review Required</div>
<hr>
<p>Dear Plan Submitter,</p>
<p>Your architectural plans were received and processed, but an automated code compliance review could not be completed.</p>
{_FINDING_COUNTS_BOX}
<h3>Next Steps</h3>
<ol>
  <li>Your plans have been forwarded for manual review by city planning staff</li>
  <li>You may be contacted for additional information</li>
  <li>Please allow 3-5 business days for the manual review</li>
</ol>
{_FOOTER.format(detail="Your plan requires manual review by city planning staff.")}"""


def build_fallback_review() -> ReviewResult:
    """Return a fresh copy of the canonical fallback judgment."""
    return ReviewResult(
        summary=FALLBACK_SUMMARY,
        total_findings=0,
        is_compliant=False,
        city_planner_email_body=FALLBACK_PLANNER_BODY,
        submitter_email_body=FALLBACK_SUBMITTER_BODY,
        is_fallback=True,
    )
