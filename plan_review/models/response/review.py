"""Pydantic response models for review API endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReviewAcceptedResponse(BaseModel):
    """Acknowledgement returned before the review runs in the background."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    message: str = Field(..., description="Human-readable status message")
    request_id: str = Field(..., description="Identifier for tracing this review in the logs")


class HealthCheckResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service status
        version: Application version
        service: Service name
        llm_provider: Configured reasoning service provider
        bookkeeping: Whether submission bookkeeping is enabled
    """

    status: str = Field(default="healthy", examples=["healthy", "degraded"])
    version: str = Field(..., examples=["0.1.0"])
    service: str
    llm_provider: str
    bookkeeping: bool = False
