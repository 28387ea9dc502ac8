"""Configuration management for the portfolio concierge."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")

    # OpenAI configuration (required for embeddings)
    OPENAI_API_KEY: str = Field(..., description="OpenAI API key")

    # Anthropic configuration (layout orchestrator)
    ANTHROPIC_API_KEY: str = Field(default="", description="Anthropic API key")

    # Environment
    CONCIERGE_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Embedding configuration
    EMBEDDING_MODEL: str = Field(
        default="text-embedding-3-small", description="OpenAI embedding model"
    )
    EMBEDDING_DIM: int = Field(default=1536, description="Embedding vector dimension")
    EMBEDDING_MAX_INPUT_CHARS: int = Field(
        default=8000, description="Text is truncated to this many characters before embedding"
    )
    EMBEDDING_MAX_ATTEMPTS: int = Field(default=3, description="Attempts per embedding call")

    # Layout orchestrator
    ORCHESTRATOR_MODEL: str = Field(
        default="claude-sonnet-4-20250514", description="Model for layout orchestration"
    )
    ORCHESTRATOR_MAX_TOKENS: int = Field(default=4096, description="Max tokens per layout plan")

    # Chunking
    CHUNK_MAX_CHARS: int = Field(default=1500, description="Max characters per chunk")
    CHUNK_MIN_CHARS: int = Field(default=50, description="Chunks shorter than this are dropped")

    # Text extraction
    EXTRACTION_TIMEOUT_SECONDS: int = Field(
        default=60, description="Time budget for each extraction backend"
    )
    EXTRACTION_MAX_OUTPUT_BYTES: int = Field(
        default=10 * 1024 * 1024, description="Output ceiling for each extraction backend"
    )
    EXTRACTION_MIN_CHARS: int = Field(
        default=100, description="Extracted text shorter than this counts as a failure"
    )

    # Batch pacing
    INGEST_DELAY_SECONDS: float = Field(default=0.3, description="Pause between documents")
    UPLOAD_DELAY_SECONDS: float = Field(default=0.1, description="Pause between uploads")

    # Storage
    CASE_STUDY_BUCKET: str = Field(default="case-study-pdfs", description="Case study PDF bucket")
    ARTICLE_BUCKET: str = Field(default="article-pdfs", description="Article PDF bucket")
    BUCKET_FILE_SIZE_LIMIT: int = Field(default=50 * 1024 * 1024, description="Bucket file limit")

    # Retrieval
    RETRIEVAL_MAX_CHUNKS: int = Field(default=10, description="Chunks returned per query")
    RETRIEVAL_MAX_ASSETS: int = Field(default=5, description="Visual assets returned per query")
    SIGNED_URL_TTL_SECONDS: int = Field(default=3600, description="Visual asset URL lifetime")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
