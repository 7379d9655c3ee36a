"""Pydantic models for compliance findings and the consolidated review judgment."""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Finding severity levels."""
    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"


class Finding(BaseModel):
    """A specific compliance issue reported by the reasoning service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    description: str = ""
    code_section: str = ""
    severity: Severity = Severity.MAJOR
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    remedial_action: str = ""

    @field_validator("confidence_score", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> float:
        try:
            score = float(value)
        except (TypeError, ValueError):
            return 0.0
        # Some responses report percentages
        if score > 1.0 and score <= 100.0:
            score = score / 100.0
        return min(max(score, 0.0), 1.0)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class MissingItem(Finding):
    """A required artifact absent from the submission.

    The category (plan, permit, documentation, inspection certificate) is
    carried by the ReviewResult array the item lives in.
    """


class SearchResult(BaseModel):
    """One regulation search hit used as citation text."""

    title: str = ""
    snippet: str = ""
    url: str = ""


class ReviewResult(BaseModel):
    """The complete structured outcome of a consolidated review.

    Attributes:
        summary: Narrative summary of the review
        missing_plans: Required plans absent from the submission
        missing_permits: Required permits and applications absent
        missing_documentation: Required supporting documentation absent
        missing_inspection_certificates: Required inspection certificates absent
        critical_findings: Critical compliance issues
        major_findings: Major compliance issues
        minor_findings: Minor compliance issues
        total_findings: Number of findings across the three severity arrays
        is_compliant: Overall compliance judgment
        city_planner_email_body: HTML narrative addressed to the planner
        submitter_email_body: HTML narrative addressed to the submitter
        is_fallback: True for the canonical manual-review result (not serialized)
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    missing_plans: List[MissingItem] = Field(default_factory=list)
    missing_permits: List[MissingItem] = Field(default_factory=list)
    missing_documentation: List[MissingItem] = Field(default_factory=list)
    missing_inspection_certificates: List[MissingItem] = Field(default_factory=list)
    critical_findings: List[Finding] = Field(default_factory=list)
    major_findings: List[Finding] = Field(default_factory=list)
    minor_findings: List[Finding] = Field(default_factory=list)
    total_findings: int = 0
    is_compliant: bool = False
    city_planner_email_body: str = ""
    submitter_email_body: str = ""
    is_fallback: bool = Field(default=False, exclude=True)

    def findings_count(self) -> int:
        """Count findings across the three severity arrays."""
        return len(self.critical_findings) + len(self.major_findings) + len(self.minor_findings)

    def missing_items_count(self) -> int:
        return (
            len(self.missing_plans)
            + len(self.missing_permits)
            + len(self.missing_documentation)
            + len(self.missing_inspection_certificates)
        )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names of the review wire contract."""
        return self.model_dump(by_alias=True, mode="json")
