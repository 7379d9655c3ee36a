"""Per-chunk metadata extraction (review phase 1).

Pulls neutral structural facts from one chunk with a narrow "extract, do not
judge" instruction. A chunk whose extraction fails degrades to a stub record
so that one bad chunk never aborts the batch.
"""

import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from plan_review.core.exceptions import AppError, ChunkExtractionError
from plan_review.core.unified_llm import UnifiedLLMClient
from plan_review.models.document import Chunk, ChunkMetadata, ProjectDetails
from plan_review.prompts.system_prompts import METADATA_EXTRACTION_PROMPT
from plan_review.services.pipeline.batch_processor import BatchProcessor
from plan_review.utils.json_parser import decode_json_object
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

STUB_RAW_TEXT = "Error extracting text from document"
REQUIRED_FIELDS = ("drawingTitle", "drawingType")


def new_chunk_id() -> str:
    return f"chunk-{uuid.uuid4().hex[:12]}"


def build_stub_metadata() -> ChunkMetadata:
    """Minimal placeholder record for a chunk whose extraction failed."""
    return ChunkMetadata(
        chunk_id=new_chunk_id(),
        drawing_title="Unknown Drawing",
        drawing_type="Unknown",
        scale="Unknown",
        key_elements=[],
        code_references=[],
        raw_text=STUB_RAW_TEXT,
        is_stub=True,
    )


def _as_string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]
    return [str(value)]


def metadata_from_payload(payload: Dict[str, Any]) -> ChunkMetadata:
    """Build a ChunkMetadata record from a decoded extraction response.

    Raises:
        ChunkExtractionError: If a required field is absent or malformed
    """
    missing = [name for name in REQUIRED_FIELDS if not isinstance(payload.get(name), str)]
    if missing:
        raise ChunkExtractionError(f"Extraction response missing fields: {', '.join(missing)}")

    chunk_id = payload.get("chunkId")
    if not isinstance(chunk_id, str) or not chunk_id.strip():
        chunk_id = new_chunk_id()

    try:
        return ChunkMetadata(
            chunk_id=chunk_id,
            drawing_title=payload["drawingTitle"] or "Unknown Drawing",
            drawing_type=payload["drawingType"] or "Unknown",
            scale=str(payload.get("scale") or "Unknown"),
            key_elements=_as_string_list(payload.get("keyElements")),
            code_references=_as_string_list(payload.get("codeReferences")),
            raw_text=str(payload.get("rawText") or ""),
        )
    except ValidationError as e:
        raise ChunkExtractionError(f"Invalid extraction response: {e}", e) from e


class MetadataExtractor:
    """Extracts ChunkMetadata from chunks through the reasoning service."""

    def __init__(
        self,
        llm_client: UnifiedLLMClient,
        batch_size: int = 3,
        generation_config: Optional[Dict[str, Any]] = None,
    ):
        self.llm_client = llm_client
        self.batch_size = batch_size
        self.generation_config = generation_config or {"temperature": 0.0}

    def _build_contents(self, chunk: Chunk, project: ProjectDetails) -> List[Dict[str, Any]]:
        message = (
            f"{project.as_prompt_block()}\n\n"
            f"Plan excerpt: pages {chunk.page_range}.\n"
            "Extract the key information from this excerpt. "
            "Do not perform a compliance review.\n\n"
            f"Extracted page text:\n{chunk.content or '(no extractable text)'}"
        )
        contents: List[Dict[str, Any]] = [{"text": message}]
        if chunk.document_base64:
            contents.append({"document_base64": chunk.document_base64, "media_type": "application/pdf"})
        return contents

    async def extract(self, chunk: Chunk, project: ProjectDetails) -> ChunkMetadata:
        """Extract metadata for one chunk.

        Never raises: decode, validation and transport failures return a stub.
        """
        try:
            response = await self.llm_client.generate_content(
                contents=self._build_contents(chunk, project),
                system_instruction=METADATA_EXTRACTION_PROMPT,
                generation_config=self.generation_config,
            )
            metadata = metadata_from_payload(decode_json_object(response))
        except AppError as e:
            LOGGER.warning(
                f"Metadata extraction failed for pages {chunk.page_range}, using stub: {e}",
                extra={"chunk_index": chunk.index, "error_type": type(e).__name__}
            )
            return build_stub_metadata()
        except Exception as e:
            LOGGER.error(
                f"Unexpected error extracting pages {chunk.page_range}, using stub: {e}",
                exc_info=True,
                extra={"chunk_index": chunk.index, "error_type": type(e).__name__}
            )
            return build_stub_metadata()

        LOGGER.info(
            f"Extracted metadata for pages {chunk.page_range}",
            extra={"chunk_index": chunk.index, "chunk_id": metadata.chunk_id}
        )
        return metadata

    async def extract_all(self, chunks: List[Chunk], project: ProjectDetails) -> List[ChunkMetadata]:
        """Extract metadata for every chunk in bounded batches, preserving chunk order."""

        async def worker(chunk: Chunk) -> ChunkMetadata:
            return await self.extract(chunk, project)

        results = await BatchProcessor.run_batches(chunks, worker, self.batch_size)

        stubs = sum(1 for metadata in results if metadata.is_stub)
        if stubs:
            LOGGER.warning(
                f"{stubs}/{len(results)} chunks degraded to stub metadata",
                extra={"stub_count": stubs, "chunk_count": len(results)}
            )
        return results
