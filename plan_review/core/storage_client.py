"""Object-storage collaborator for submitted documents."""

from urllib.parse import unquote, urlparse

import httpx

from plan_review.core.exceptions import DocumentFetchError
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

DEFAULT_FILE_NAME = "plan.pdf"


def file_name_from_url(url: str, default: str = DEFAULT_FILE_NAME) -> str:
    """Derive an attachment file name from the last path segment of a URL."""
    path = urlparse(url).path
    name = unquote(path.rsplit("/", 1)[-1]) if path else ""
    return name or default


class DocumentStorageClient:
    """Retrieves document bytes by URL (pre-signed object-storage links)."""

    def __init__(self, timeout: int = 300):
        self.timeout = timeout

    async def fetch(self, url: str) -> bytes:
        """Download a document.

        Args:
            url: Document URL

        Returns:
            Raw document bytes

        Raises:
            DocumentFetchError: If the document cannot be retrieved or is empty
        """
        LOGGER.info("Fetching document", extra={"url": url.split("?", 1)[0]})
        try:
            async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DocumentFetchError(
                f"Failed to fetch document: HTTP {e.response.status_code}", e
            ) from e
        except httpx.HTTPError as e:
            raise DocumentFetchError(f"Failed to fetch document: {e}", e) from e

        if not response.content:
            raise DocumentFetchError("Fetched document is empty")

        LOGGER.info("Document fetched", extra={"size_bytes": len(response.content)})
        return response.content
