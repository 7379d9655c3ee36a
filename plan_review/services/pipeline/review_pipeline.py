"""End-to-end review of one document: chunk, extract, review, aggregate."""

import asyncio
from typing import List

from plan_review.models.document import ChunkMetadata, ProjectDetails
from plan_review.models.review import ReviewResult
from plan_review.services.aggregation.review_aggregator import aggregate_reviews
from plan_review.services.chunking.document_chunker import DocumentChunker, extract_location_info
from plan_review.services.extraction.metadata_extractor import MetadataExtractor
from plan_review.services.pipeline.batch_processor import BatchProcessor
from plan_review.services.review.consolidated_reviewer import ConsolidatedReviewer
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ReviewPipeline:
    """Turns document bytes and project details into one ReviewResult.

    Small documents are reviewed directly from their text. Larger documents
    are chunked, their chunks' metadata extracted in bounded batches, and the
    metadata reviewed in one consolidated call, or in several sequential
    review batches merged by the aggregator when there are too many chunks.
    """

    def __init__(
        self,
        chunker: DocumentChunker,
        extractor: MetadataExtractor,
        reviewer: ConsolidatedReviewer,
        direct_review_max_pages: int = 5,
        direct_review_max_bytes: int = 5 * 1024 * 1024,
        max_chunks_per_review: int = 20,
    ):
        if max_chunks_per_review < 1:
            raise ValueError("max_chunks_per_review must be positive")
        self.chunker = chunker
        self.extractor = extractor
        self.reviewer = reviewer
        self.direct_review_max_pages = direct_review_max_pages
        self.direct_review_max_bytes = direct_review_max_bytes
        self.max_chunks_per_review = max_chunks_per_review

    def is_small_document(self, page_count: int, size_bytes: int) -> bool:
        return page_count <= self.direct_review_max_pages and size_bytes <= self.direct_review_max_bytes

    async def review(self, document: bytes, project: ProjectDetails) -> ReviewResult:
        """Review one document.

        Raises:
            DocumentParseError: If the document is not a readable PDF
            ChunkSerializationError: If a page range cannot be serialized
        """
        page_count = await asyncio.to_thread(self.chunker.page_count, document)

        if self.is_small_document(page_count, len(document)):
            LOGGER.info(
                "Reviewing small document directly",
                extra={"page_count": page_count, "size_bytes": len(document)}
            )
            text = await asyncio.to_thread(self.chunker.extract_text, document)
            self._check_location(text, project)
            return await self.reviewer.review_text(text, project)

        chunks = await asyncio.to_thread(self.chunker.chunk, document)
        LOGGER.info(
            "Reviewing chunked document",
            extra={"page_count": page_count, "chunk_count": len(chunks)}
        )
        if chunks:
            self._check_location(chunks[0].content, project)

        metadata = await self.extractor.extract_all(chunks, project)
        return await self._review_metadata(metadata, project)

    async def _review_metadata(self, metadata: List[ChunkMetadata], project: ProjectDetails) -> ReviewResult:
        if len(metadata) <= self.max_chunks_per_review:
            return await self.reviewer.review_metadata(metadata, project)

        review_batches = BatchProcessor.create_batches(metadata, self.max_chunks_per_review)
        LOGGER.info(
            f"Document too large for one review call, reviewing {len(review_batches)} batches",
            extra={"chunk_count": len(metadata), "review_batches": len(review_batches)}
        )

        partials = []
        for batch in review_batches:
            partials.append(await self.reviewer.review_metadata(batch, project))
        return aggregate_reviews(partials)

    def _check_location(self, text: str, project: ProjectDetails) -> None:
        location = extract_location_info(text)
        if location is None:
            return
        if location.parcel_number.strip().lower() != project.parcel_number.strip().lower():
            LOGGER.warning(
                "Parcel number on the plans does not match the submitted project",
                extra={
                    "plan_parcel_number": location.parcel_number,
                    "submitted_parcel_number": project.parcel_number,
                }
            )
