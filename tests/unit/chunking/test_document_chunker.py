"""Unit tests for page-range chunking of plan documents."""

import base64
import math

import pypdfium2 as pdfium
import pytest

from plan_review.core.exceptions import DocumentParseError
from plan_review.services.chunking.document_chunker import (
    PAGE_HEADER,
    DocumentChunker,
    extract_location_info,
    plan_page_ranges,
)


class TestPlanPageRanges:
    """Test suite for page range planning."""

    def test_twelve_pages_in_fives(self):
        assert plan_page_ranges(12, 5) == [(1, 5), (6, 10), (11, 12)]

    def test_exact_multiple(self):
        assert plan_page_ranges(10, 5) == [(1, 5), (6, 10)]

    def test_single_page_per_chunk(self):
        assert plan_page_ranges(3, 1) == [(1, 1), (2, 2), (3, 3)]

    @pytest.mark.parametrize("page_count,pages_per_chunk", [(1, 5), (7, 3), (23, 5), (40, 7)])
    def test_ranges_partition_the_document(self, page_count, pages_per_chunk):
        ranges = plan_page_ranges(page_count, pages_per_chunk)

        assert len(ranges) == math.ceil(page_count / pages_per_chunk)
        covered = [page for start, end in ranges for page in range(start, end + 1)]
        assert covered == list(range(1, page_count + 1))
        assert all(end - start + 1 <= pages_per_chunk for start, end in ranges)

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError):
            plan_page_ranges(10, 0)


class TestDocumentChunker:
    """Test suite for DocumentChunker."""

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError):
            DocumentChunker(pages_per_chunk=0)

    def test_page_count(self, pdf_factory):
        chunker = DocumentChunker()
        assert chunker.page_count(pdf_factory(7)) == 7

    def test_invalid_bytes_raise_parse_error(self):
        chunker = DocumentChunker()
        with pytest.raises(DocumentParseError):
            chunker.chunk(b"this is not a pdf")

    def test_empty_bytes_raise_parse_error(self):
        chunker = DocumentChunker()
        with pytest.raises(DocumentParseError):
            chunker.page_count(b"")

    def test_chunks_twelve_page_document(self, pdf_factory):
        chunker = DocumentChunker(pages_per_chunk=5)

        chunks = chunker.chunk(pdf_factory(12))

        assert [(c.start_page, c.end_page) for c in chunks] == [(1, 5), (6, 10), (11, 12)]
        assert [c.index for c in chunks] == [0, 1, 2]
        assert chunks[2].pages == [11, 12]
        assert chunks[0].page_range == "1-5"

    def test_chunks_are_standalone_documents(self, pdf_factory):
        chunker = DocumentChunker(pages_per_chunk=4)

        chunks = chunker.chunk(pdf_factory(10))

        for chunk in chunks:
            data = base64.b64decode(chunk.document_base64)
            assert len(data) == chunk.byte_size
            sub_document = pdfium.PdfDocument(data)
            try:
                assert len(sub_document) == chunk.end_page - chunk.start_page + 1
            finally:
                sub_document.close()

    def test_extract_text_marks_every_page(self, pdf_factory):
        chunker = DocumentChunker()

        text = chunker.extract_text(pdf_factory(3))

        for page in (1, 2, 3):
            assert PAGE_HEADER.format(page=page) in text
        assert text.index("--- Page 1 ---") < text.index("--- Page 3 ---")


class TestExtractLocationInfo:
    """Test suite for title block location parsing."""

    def test_reads_address_and_parcel(self):
        text = "SHEET A1.0\nSite Address: 123 Main St, Bellevue\nParcel Number: 1234567890\n"

        location = extract_location_info(text)

        assert location is not None
        assert location.address == "123 Main St, Bellevue"
        assert location.parcel_number == "1234567890"

    def test_accepts_parcel_id_label(self):
        location = extract_location_info("Location: Lot 4\nParcel ID: 98-765")

        assert location.address == "Lot 4"
        assert location.parcel_number == "98-765"

    def test_returns_none_without_parcel(self):
        assert extract_location_info("Address: 123 Main St") is None
