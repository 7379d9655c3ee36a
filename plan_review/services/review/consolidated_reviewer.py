"""Consolidated compliance review (review phase 2).

Produces exactly one ReviewResult from either the extracted metadata of every
chunk or, for small documents, the whole document text. Each attempt runs a
regulation lookup, sends one request to the reasoning service and validates
the decoded response; failed attempts are retried and finally replaced by
the canonical fallback judgment.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional

from plan_review.core.exceptions import AppError
from plan_review.core.search_client import RegulationSearchClient
from plan_review.core.unified_llm import UnifiedLLMClient
from plan_review.models.document import ChunkMetadata, ProjectDetails
from plan_review.models.review import ReviewResult, SearchResult
from plan_review.prompts.system_prompts import COMPLIANCE_REVIEW_PROMPT
from plan_review.services.review.fallback import build_fallback_review
from plan_review.services.review.retry import retry_with_fallback
from plan_review.services.review.validation import validate_review_payload
from plan_review.utils.json_parser import decode_json_object
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

TRUNCATION_MARKER = "\n\n[Content truncated due to length limits]"


def truncate_text(text: str, budget: int) -> str:
    """Cut text to ``budget`` characters, appending the truncation marker when cut."""
    if len(text) <= budget:
        return text
    return text[:budget] + TRUNCATION_MARKER


def format_metadata_sections(metadata_list: List[ChunkMetadata]) -> str:
    """Render chunk metadata as numbered plan sections for the review request."""
    sections = []
    for number, metadata in enumerate(metadata_list, start=1):
        sections.append(
            "\n".join([
                f"--- PLAN SECTION {number} ---",
                f"Drawing Title: {metadata.drawing_title or 'Not specified'}",
                f"Drawing Type: {metadata.drawing_type or 'Not specified'}",
                f"Scale: {metadata.scale or 'Not specified'}",
                f"Key Elements: {', '.join(metadata.key_elements) or 'None specified'}",
                f"Code References: {', '.join(metadata.code_references) or 'None specified'}",
                f"Raw Text: {metadata.raw_text or 'No text extracted'}",
            ])
        )
    return "\n\n".join(sections)


def format_citations(results: List[SearchResult]) -> str:
    if not results:
        return "No search results available. Rely on current state and local code knowledge."
    return "\n\n".join(
        f"Title: {result.title}\nURL: {result.url}\nSnippet: {result.snippet}"
        for result in results
    )


class ConsolidatedReviewer:
    """Issues the single judgment-producing review call."""

    def __init__(
        self,
        llm_client: UnifiedLLMClient,
        search_client: RegulationSearchClient,
        jurisdiction_state: str = "Washington state",
        max_search_results: int = 5,
        text_char_budget: int = 50000,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        generation_config: Optional[Dict[str, Any]] = None,
    ):
        self.llm_client = llm_client
        self.search_client = search_client
        self.jurisdiction_state = jurisdiction_state
        self.max_search_results = max_search_results
        self.text_char_budget = text_char_budget
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.sleep = sleep
        self.generation_config = generation_config or {"temperature": 0.0}

    def build_search_query(self, project: ProjectDetails) -> str:
        return (
            f"building codes regulations {project.city} {project.county} "
            f"{self.jurisdiction_state} zoning requirements {project.project_type}"
        )

    async def _search_citations(self, project: ProjectDetails) -> str:
        query = self.build_search_query(project)
        try:
            results = await self.search_client.search(query, self.max_search_results)
        except AppError as e:
            LOGGER.warning(f"Regulation search failed, reviewing without citations: {e}")
            results = []
        return format_citations(results[:self.max_search_results])

    async def _run(self, project: ProjectDetails, material_heading: str, material: str, mode: str) -> ReviewResult:
        async def attempt() -> str:
            citations = await self._search_citations(project)
            message = "\n\n".join([
                project.as_prompt_block(),
                f"{material_heading}:\n{material}",
                f"BUILDING CODES AND REGULATIONS SEARCH RESULTS:\n{citations}",
                "Review the submission against the codes and regulations above and "
                "respond with the required JSON object only.",
            ])
            return await self.llm_client.generate_content(
                contents=message,
                system_instruction=COMPLIANCE_REVIEW_PROMPT,
                generation_config=self.generation_config,
            )

        def validate(raw: str) -> ReviewResult:
            return validate_review_payload(decode_json_object(raw))

        result = await retry_with_fallback(
            call=attempt,
            validator=validate,
            fallback=build_fallback_review,
            max_retries=self.max_retries,
            backoff_seconds=self.backoff_seconds,
            sleep=self.sleep,
            operation=f"consolidated review ({mode})",
        )

        LOGGER.info(
            "Consolidated review finished",
            extra={
                "mode": mode,
                "is_fallback": result.is_fallback,
                "is_compliant": result.is_compliant,
                "total_findings": result.total_findings,
                "missing_items": result.missing_items_count(),
            }
        )
        return result

    async def review_metadata(
        self,
        metadata_list: List[ChunkMetadata],
        project: ProjectDetails,
    ) -> ReviewResult:
        """Review the consolidated metadata of a chunked document."""
        LOGGER.info(
            f"Starting consolidated review over {len(metadata_list)} plan sections",
            extra={"section_count": len(metadata_list)}
        )
        return await self._run(
            project,
            "CONSOLIDATED PLAN METADATA",
            format_metadata_sections(metadata_list),
            mode="metadata",
        )

    async def review_text(self, text: str, project: ProjectDetails) -> ReviewResult:
        """Review a small document directly from its extracted text."""
        LOGGER.info("Starting direct text review", extra={"text_length": len(text)})
        return await self._run(
            project,
            "EXTRACTED PLAN TEXT",
            truncate_text(text, self.text_char_budget),
            mode="text",
        )
