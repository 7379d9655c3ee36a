"""Service construction and FastAPI dependency providers.

Every collaborator (reasoning service, search, storage, mail, record store)
is built once from settings by ``build_service_container`` and handed down
explicitly; nothing in the pipeline reaches for module-level clients.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from plan_review.config import Settings
from plan_review.core.mail_client import SmtpMailClient
from plan_review.core.search_client import RegulationSearchClient
from plan_review.core.storage_client import DocumentStorageClient
from plan_review.core.unified_llm import create_llm_client_from_settings
from plan_review.database.base import create_engine, create_session_factory
from plan_review.services.chunking.document_chunker import DocumentChunker
from plan_review.services.extraction.metadata_extractor import MetadataExtractor
from plan_review.services.pipeline.review_pipeline import ReviewPipeline
from plan_review.services.review.consolidated_reviewer import ConsolidatedReviewer
from plan_review.services.routing.routing_service import RoutingService
from plan_review.services.submission_service import SubmissionService


@dataclass
class ServiceContainer:
    """Service handles owned by the running application."""

    submission_service: SubmissionService
    engine: Optional[AsyncEngine] = None

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def build_review_pipeline(settings: Settings) -> ReviewPipeline:
    """Build the review pipeline and its reasoning/search collaborators."""
    llm_client = create_llm_client_from_settings(
        provider=settings.llm_provider,
        anthropic_api_key=settings.anthropic_api_key,
        anthropic_api_url=settings.anthropic_api_url,
        anthropic_model=settings.anthropic_model,
        anthropic_max_tokens=settings.anthropic_max_tokens,
        openrouter_api_key=settings.openrouter_api_key,
        openrouter_api_url=settings.openrouter_api_url,
        openrouter_model=settings.openrouter_model,
        timeout=settings.llm_timeout_seconds,
        max_retries=settings.llm_transport_retries,
    )
    search_client = RegulationSearchClient(
        perplexity_api_key=settings.perplexity_api_key,
        perplexity_api_url=settings.perplexity_api_url,
        perplexity_model=settings.perplexity_model,
        serpapi_api_key=settings.serpapi_api_key,
        serpapi_api_url=settings.serpapi_api_url,
        timeout=settings.search_timeout_seconds,
    )

    return ReviewPipeline(
        chunker=DocumentChunker(pages_per_chunk=settings.pages_per_chunk),
        extractor=MetadataExtractor(llm_client, batch_size=settings.extraction_batch_size),
        reviewer=ConsolidatedReviewer(
            llm_client,
            search_client,
            jurisdiction_state=settings.jurisdiction_state,
            max_search_results=settings.search_max_results,
            text_char_budget=settings.review_text_char_budget,
            max_retries=settings.review_max_retries,
            backoff_seconds=settings.review_backoff_seconds,
        ),
        direct_review_max_pages=settings.direct_review_max_pages,
        direct_review_max_bytes=settings.direct_review_max_bytes,
        max_chunks_per_review=settings.max_chunks_per_review,
    )


def build_service_container(settings: Settings) -> ServiceContainer:
    """Construct every service handle from settings.

    Raises:
        ConfigurationError: If the reasoning service is not configured
    """
    mail_client = SmtpMailClient(
        host=settings.email_host,
        port=settings.smtp_port,
        username=settings.email_user,
        password=settings.email_password,
        from_address=settings.email_from,
        use_ssl=settings.email_secure,
    )

    engine: Optional[AsyncEngine] = None
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    if settings.database_url:
        engine = create_engine(settings.database_url, echo=settings.debug)
        session_factory = create_session_factory(engine)

    submission_service = SubmissionService(
        storage_client=DocumentStorageClient(timeout=settings.document_fetch_timeout_seconds),
        pipeline=build_review_pipeline(settings),
        routing_service=RoutingService(
            mail_client,
            max_retries=settings.mail_max_retries,
            backoff_seconds=settings.mail_backoff_seconds,
        ),
        session_factory=session_factory,
        fetch_timeout_seconds=settings.document_fetch_timeout_seconds,
    )
    return ServiceContainer(submission_service=submission_service, engine=engine)


def get_submission_service(request: Request) -> SubmissionService:
    """Get the submission service built at startup."""
    return request.app.state.services.submission_service
