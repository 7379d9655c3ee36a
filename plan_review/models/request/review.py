"""Pydantic request models for review API endpoints."""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from plan_review.models.document import ProjectDetails

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ReviewRequest(BaseModel):
    """Request model for scheduling a plan review.

    Attributes:
        document_url: URL of the submitted plan document in object storage
        file_name: Attachment name for the findings report
        submission_id: Submission record to keep in step with the review
        submitter_email: Address that receives action-required reports
        city_planner_email: Address that receives compliant plans
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "documentUrl": "https://storage.example.com/plans/site-plan.pdf",
                    "fileName": "site-plan.pdf",
                    "submissionId": "sub-123",
                    "submitterEmail": "owner@example.com",
                    "cityPlannerEmail": "planning@city.example.gov",
                    "address": "123 Main St",
                    "parcelNumber": "1234567890",
                    "city": "Bellevue",
                    "county": "King",
                    "projectSummary": "New two-story single family residence",
                }
            ]
        },
    )

    document_url: str = Field(..., description="URL of the plan document to review")
    file_name: Optional[str] = Field(default=None, description="Attachment file name")
    submission_id: Optional[str] = Field(default=None, description="Submission record ID")
    submitter_email: str = Field(..., description="Plan submitter email address")
    city_planner_email: str = Field(..., description="City planner email address")
    address: str = Field(..., min_length=1)
    parcel_number: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    county: str = Field(..., min_length=1)
    project_summary: Optional[str] = None
    project_type: str = "single family residence"

    @field_validator("document_url")
    @classmethod
    def validate_document_url(cls, v: str) -> str:
        """Validate that the URL is an http(s) URL.

        Raises:
            ValueError: If URL is invalid
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("submitter_email", "city_planner_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v

    def project_details(self) -> ProjectDetails:
        return ProjectDetails(
            address=self.address,
            parcel_number=self.parcel_number,
            city=self.city,
            county=self.county,
            project_summary=self.project_summary,
            project_type=self.project_type,
        )
