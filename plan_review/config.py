"""Application configuration management."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application Settings
    app_name: str = "Plan Review - Automated Plan Compliance Review"
    app_version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Settings
    api_v1_prefix: str = "/api/v1"
    host: str = "0.0.0.0"
    port: int = 8000

    # Reasoning Service Configuration
    llm_provider: str = Field(
        default="anthropic",
        description="Reasoning service provider: 'anthropic' or 'openrouter'"
    )
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key (required if llm_provider='anthropic')"
    )
    anthropic_api_url: str = Field(
        default="https://api.anthropic.com/v1/messages",
        description="Anthropic Messages API URL"
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Anthropic model name"
    )
    anthropic_max_tokens: int = Field(
        default=20000,
        description="Maximum output tokens per reasoning call"
    )
    openrouter_api_key: str = Field(
        default="",
        description="OpenRouter API key (required if llm_provider='openrouter')"
    )
    openrouter_api_url: str = Field(
        default="https://openrouter.ai/api/v1/chat/completions",
        description="OpenRouter API base URL"
    )
    openrouter_model: str = Field(
        default="anthropic/claude-sonnet-4",
        description="OpenRouter model name"
    )
    llm_timeout_seconds: int = Field(
        default=300,
        description="Timeout for a single reasoning service request in seconds"
    )
    llm_transport_retries: int = Field(
        default=2,
        description="HTTP-level attempts per reasoning request (5xx, 429, timeouts)"
    )

    # Regulation Search Configuration
    perplexity_api_key: str = Field(default="", description="Perplexity API key")
    perplexity_api_url: str = "https://api.perplexity.ai/chat/completions"
    perplexity_model: str = "llama-3.1-sonar-small-128k-online"
    serpapi_api_key: str = Field(default="", description="SerpAPI key used when Perplexity is unavailable")
    serpapi_api_url: str = "https://serpapi.com/search.json"
    search_max_results: int = Field(
        default=5,
        description="Maximum number of regulation search results cited per review"
    )
    search_timeout_seconds: int = 60
    jurisdiction_state: str = Field(
        default="Washington state",
        description="State appended to regulation search queries"
    )

    # Review Pipeline Configuration
    pages_per_chunk: int = Field(
        default=5,
        description="Maximum pages per chunk"
    )
    extraction_batch_size: int = Field(
        default=3,
        description="Number of metadata extraction calls in flight per batch"
    )
    review_max_retries: int = Field(
        default=3,
        description="Attempts for the consolidated review before falling back"
    )
    review_backoff_seconds: float = Field(
        default=1.0,
        description="Linear backoff unit between review attempts"
    )
    review_text_char_budget: int = Field(
        default=50000,
        description="Maximum characters of raw document text sent in one review"
    )
    direct_review_max_pages: int = Field(
        default=5,
        description="Documents up to this page count are reviewed without chunking"
    )
    direct_review_max_bytes: int = Field(
        default=5 * 1024 * 1024,
        description="Documents up to this size are reviewed without chunking"
    )
    max_chunks_per_review: int = Field(
        default=20,
        description="Chunk metadata records per consolidated review call"
    )

    # Object Storage
    document_fetch_timeout_seconds: int = Field(
        default=300,
        description="Deadline for retrieving the submitted document"
    )

    # Mail Transport
    email_host: str = "smtp.gmail.com"
    email_port: int = 0
    email_secure: bool = False
    email_user: str = ""
    email_password: str = ""
    email_from: str = "noreply@civicstream.com"
    mail_max_retries: int = Field(
        default=3,
        description="Attempts for sending the findings report"
    )
    mail_backoff_seconds: float = 1.0

    # Submission Bookkeeping
    database_url: str = Field(
        default="",
        description="Async SQLAlchemy URL for submission records; empty disables bookkeeping"
    )

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def smtp_port(self) -> int:
        """SMTP port, derived from the secure flag unless set explicitly."""
        if self.email_port:
            return self.email_port
        return 465 if self.email_secure else 587


settings = Settings()
