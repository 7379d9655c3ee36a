"""Pydantic models for submitted documents, chunks and extracted chunk metadata."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ProjectDetails(BaseModel):
    """Immutable project context threaded through every external call.

    Attributes:
        address: Site address of the project
        parcel_number: Assessor parcel number
        city: Municipality the project is located in
        county: County the project is located in
        project_summary: Optional free-text description supplied by the submitter
        project_type: Application type used to scope regulation lookups
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    address: str = Field(..., min_length=1, description="Project site address")
    parcel_number: str = Field(..., min_length=1, description="Parcel number")
    city: str = Field(..., min_length=1, description="City / municipality")
    county: str = Field(..., min_length=1, description="County")
    project_summary: Optional[str] = Field(
        default=None,
        description="Optional free-text project summary",
    )
    project_type: str = Field(
        default="single family residence",
        description="Application type, used in the regulation search query",
    )

    def as_prompt_block(self) -> str:
        """Render the project details the way every reasoning request presents them."""
        lines = [
            "Project Details:",
            f"Address: {self.address}",
            f"Parcel Number: {self.parcel_number}",
            f"City: {self.city}",
            f"County: {self.county}",
        ]
        if self.project_summary:
            lines.append(f"Project Summary: {self.project_summary}")
        return "\n".join(lines)


class Chunk(BaseModel):
    """Page-range-bounded, independently serialized piece of a source document.

    Attributes:
        index: Zero-based position of the chunk in the document
        start_page: First page covered (1-based, inclusive)
        end_page: Last page covered (1-based, inclusive)
        content: Text extracted from the covered pages
        document_base64: Base64 transport encoding of the standalone sub-document
        byte_size: Size of the serialized sub-document in bytes
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0)
    start_page: int = Field(..., ge=1)
    end_page: int = Field(..., ge=1)
    content: str = ""
    document_base64: str = ""
    byte_size: int = 0

    @property
    def pages(self) -> List[int]:
        return list(range(self.start_page, self.end_page + 1))

    @property
    def page_range(self) -> str:
        return f"{self.start_page}-{self.end_page}"


class ChunkMetadata(BaseModel):
    """Neutral structural facts extracted from one chunk.

    Serializes with the camelCase field names of the extraction wire contract.
    Stub records produced for chunks whose extraction failed carry
    ``is_stub=True``; the flag is not part of the wire form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    chunk_id: str
    drawing_title: str = "Unknown Drawing"
    drawing_type: str = "Unknown"
    scale: str = "Unknown"
    key_elements: List[str] = Field(default_factory=list)
    code_references: List[str] = Field(default_factory=list)
    raw_text: str = ""
    is_stub: bool = Field(default=False, exclude=True)
