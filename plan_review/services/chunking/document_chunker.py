"""Page-range chunking of submitted plan documents.

Splits a PDF into consecutive ranges of at most ``pages_per_chunk`` pages.
Each range is re-serialized as a standalone PDF with pypdfium2 so it can be
sent to the reasoning service as its own document, and its page text is
extracted with pdfplumber.
"""

import base64
import re
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Tuple

import pdfplumber
import pypdfium2 as pdfium

from plan_review.core.exceptions import ChunkSerializationError, DocumentParseError
from plan_review.models.document import Chunk
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

PAGE_HEADER = "--- Page {page} ---\n"

_ADDRESS_PATTERNS = (
    re.compile(r"Site Address:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"Address:\s*([^\n]+)", re.IGNORECASE),
    re.compile(r"Location:\s*([^\n]+)", re.IGNORECASE),
)
_PARCEL_PATTERNS = (
    re.compile(r"Parcel Number:\s*([^\s]+)", re.IGNORECASE),
    re.compile(r"Parcel ID:\s*([^\s]+)", re.IGNORECASE),
    re.compile(r"Parcel\s*#?:\s*([^\s]+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class LocationInfo:
    """Site address and parcel number read from a title block."""
    address: str
    parcel_number: str


def extract_location_info(text: str) -> Optional[LocationInfo]:
    """Find a site address and parcel number in page text.

    Returns:
        LocationInfo when both values are present, otherwise None
    """
    address = _first_match(_ADDRESS_PATTERNS, text)
    parcel = _first_match(_PARCEL_PATTERNS, text)
    if address and parcel:
        return LocationInfo(address=address, parcel_number=parcel)
    return None


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def plan_page_ranges(page_count: int, pages_per_chunk: int) -> List[Tuple[int, int]]:
    """Compute the 1-based inclusive page ranges for a document.

    Example:
        >>> plan_page_ranges(12, 5)
        [(1, 5), (6, 10), (11, 12)]
    """
    if pages_per_chunk < 1:
        raise ValueError("pages_per_chunk must be positive")

    ranges = []
    for start in range(1, page_count + 1, pages_per_chunk):
        ranges.append((start, min(start + pages_per_chunk - 1, page_count)))
    return ranges


class DocumentChunker:
    """Splits PDF documents into page-range chunks."""

    def __init__(self, pages_per_chunk: int = 5):
        if pages_per_chunk < 1:
            raise ValueError("pages_per_chunk must be positive")
        self.pages_per_chunk = pages_per_chunk

    def _open(self, data: bytes) -> pdfium.PdfDocument:
        if not data:
            raise DocumentParseError("Document is empty")
        try:
            pdf = pdfium.PdfDocument(data)
        except pdfium.PdfiumError as e:
            raise DocumentParseError(f"Document is not a readable PDF: {e}", e) from e

        if len(pdf) == 0:
            pdf.close()
            raise DocumentParseError("Document has no pages")
        return pdf

    def page_count(self, data: bytes) -> int:
        """Return the number of pages.

        Raises:
            DocumentParseError: If the bytes are not a readable PDF
        """
        pdf = self._open(data)
        try:
            return len(pdf)
        finally:
            pdf.close()

    def _page_texts(self, data: bytes) -> List[str]:
        try:
            with pdfplumber.open(BytesIO(data)) as pdf:
                return [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            # Text is supplementary to the serialized pages
            LOGGER.warning(f"Page text extraction failed, continuing without text: {e}")
            return []

    def extract_text(self, data: bytes) -> str:
        """Extract whole-document text with page-break markers.

        Raises:
            DocumentParseError: If the bytes are not a readable PDF
        """
        count = self.page_count(data)
        texts = self._page_texts(data)
        parts = []
        for page in range(1, count + 1):
            text = texts[page - 1] if page - 1 < len(texts) else ""
            parts.append(PAGE_HEADER.format(page=page) + text)
        return "\n\n".join(parts)

    def chunk(self, data: bytes) -> List[Chunk]:
        """Split a document into standalone page-range chunks.

        Args:
            data: Raw PDF bytes

        Returns:
            Chunks in page order; ``ceil(pages / pages_per_chunk)`` of them

        Raises:
            DocumentParseError: If the bytes are not a readable PDF
            ChunkSerializationError: If a page range cannot be written out
        """
        pdf = self._open(data)
        try:
            total_pages = len(pdf)
            ranges = plan_page_ranges(total_pages, self.pages_per_chunk)
            texts = self._page_texts(data)

            LOGGER.info(
                f"Chunking document: {total_pages} pages into {len(ranges)} chunks",
                extra={
                    "total_pages": total_pages,
                    "pages_per_chunk": self.pages_per_chunk,
                    "size_bytes": len(data),
                }
            )

            chunks = []
            for index, (start, end) in enumerate(ranges):
                serialized = self._serialize_range(pdf, start, end)
                content = "\n\n".join(texts[start - 1:end]).strip()
                chunks.append(
                    Chunk(
                        index=index,
                        start_page=start,
                        end_page=end,
                        content=content,
                        document_base64=base64.b64encode(serialized).decode("ascii"),
                        byte_size=len(serialized),
                    )
                )
                LOGGER.debug(
                    f"Serialized chunk {index} (pages {start}-{end})",
                    extra={"chunk_index": index, "size_bytes": len(serialized)}
                )
        finally:
            pdf.close()

        return chunks

    def _serialize_range(self, pdf: pdfium.PdfDocument, start: int, end: int) -> bytes:
        sub_document = pdfium.PdfDocument.new()
        try:
            sub_document.import_pages(pdf, pages=list(range(start - 1, end)))
            buffer = BytesIO()
            sub_document.save(buffer)
            return buffer.getvalue()
        except pdfium.PdfiumError as e:
            LOGGER.error(f"Failed to serialize pages {start}-{end}: {e}")
            raise ChunkSerializationError(start, end, e) from e
        finally:
            sub_document.close()
