"""Regulation search collaborator.

Looks up building codes for a jurisdiction through Perplexity, falling back
to SerpAPI. Search is advisory: every failure degrades to fewer citations.
"""

from typing import Any, List, Optional

from plan_review.core.base_llm_client import BaseLLMClient
from plan_review.core.exceptions import APIClientError
from plan_review.models.review import SearchResult
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

SEARCH_SYSTEM_PROMPT = (
    "You search for building codes and land-use regulations. "
    "Return only the most relevant and current information."
)


class RegulationSearchClient:
    """Search collaborator returning ordered ``{title, snippet, url}`` results."""

    def __init__(
        self,
        perplexity_api_key: str = "",
        perplexity_api_url: str = "https://api.perplexity.ai/chat/completions",
        perplexity_model: str = "llama-3.1-sonar-small-128k-online",
        serpapi_api_key: str = "",
        serpapi_api_url: str = "https://serpapi.com/search.json",
        timeout: int = 60,
    ):
        self.perplexity_model = perplexity_model
        self.serpapi_api_key = serpapi_api_key

        self.perplexity: Optional[BaseLLMClient] = None
        if perplexity_api_key:
            self.perplexity = BaseLLMClient(
                api_key=perplexity_api_key,
                base_url=perplexity_api_url,
                timeout=timeout,
                max_retries=1,
            )

        self.serpapi: Optional[BaseLLMClient] = None
        if serpapi_api_key:
            # SerpAPI authenticates through a query parameter
            self.serpapi = BaseLLMClient(
                api_key="",
                base_url=serpapi_api_url,
                timeout=timeout,
                max_retries=1,
            )

    @property
    def is_configured(self) -> bool:
        return self.perplexity is not None or self.serpapi is not None

    async def search(self, query: str, max_results: int = 5) -> List[SearchResult]:
        """Run a regulation lookup.

        Args:
            query: Search query
            max_results: Cap on the number of results returned

        Returns:
            Up to ``max_results`` results; empty when no provider is
            configured or every provider failed
        """
        if self.perplexity is not None:
            try:
                results = await self._search_perplexity(query, max_results)
                LOGGER.info(
                    f"Perplexity search returned {len(results)} results",
                    extra={"query": query}
                )
                return results
            except APIClientError as e:
                LOGGER.warning(f"Perplexity search failed, falling back to SerpAPI: {e}")

        if self.serpapi is None:
            if not self.is_configured:
                LOGGER.error("Neither Perplexity nor SerpAPI is configured; continuing without citations")
            return []

        try:
            results = await self._search_serpapi(query, max_results)
        except APIClientError as e:
            LOGGER.error(f"Regulation search failed: {e}", extra={"query": query})
            return []

        LOGGER.info(f"SerpAPI search returned {len(results)} results", extra={"query": query})
        return results

    async def _search_perplexity(self, query: str, max_results: int) -> List[SearchResult]:
        payload = {
            "model": self.perplexity_model,
            "messages": [
                {"role": "system", "content": SEARCH_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": (
                        f"Search for: {query}. Provide specific building codes, "
                        "regulations, and official government sources."
                    ),
                },
            ],
            "max_tokens": 10000,
            "temperature": 0.2,
            "return_citations": True,
        }
        response = await self.perplexity.call_api(method="POST", payload=payload)

        choices = response.get("choices") or [{}]
        content = choices[0].get("message", {}).get("content") or ""
        snippet = f"{content[:200]}..."

        results = []
        for index, citation in enumerate((response.get("citations") or [])[:max_results]):
            results.append(_citation_to_result(citation, index, snippet))
        return results

    async def _search_serpapi(self, query: str, max_results: int) -> List[SearchResult]:
        params = {"engine": "google", "q": query, "api_key": self.serpapi_api_key}
        response = await self.serpapi.call_api(method="GET", payload=params)

        return [
            SearchResult(
                title=item.get("title") or "",
                snippet=item.get("snippet") or "",
                url=item.get("link") or "",
            )
            for item in (response.get("organic_results") or [])[:max_results]
        ]


def _citation_to_result(citation: Any, index: int, snippet: str) -> SearchResult:
    fallback_title = f"Building Code Reference {index + 1}"
    if isinstance(citation, str):
        return SearchResult(title=fallback_title, snippet=snippet, url=citation)
    if isinstance(citation, dict):
        return SearchResult(
            title=citation.get("title") or fallback_title,
            snippet=snippet,
            url=citation.get("url") or "#",
        )
    return SearchResult(title=fallback_title, snippet=snippet, url="#")
