"""OpenAI embeddings generation with validation."""

import time

from openai import OpenAI

from concierge.core.config import get_settings
from concierge.core.errors import EmbeddingError
from concierge.core.logging import get_logger

logger = get_logger(__name__)


def _get_client() -> OpenAI:
    """Get OpenAI client instance."""
    settings = get_settings()
    return OpenAI(api_key=settings.OPENAI_API_KEY)


def embed_text(text: str) -> list[float]:
    """
    Generate one embedding vector for a piece of text.

    The text is truncated to EMBEDDING_MAX_INPUT_CHARS before submission.
    Transient API failures are retried with a linear backoff.

    Args:
        text: Text to embed

    Returns:
        Embedding vector of EMBEDDING_DIM floats

    Raises:
        ValueError: If text is empty or the dimension doesn't match EMBEDDING_DIM
        EmbeddingError: If every attempt failed
    """
    if not text or not text.strip():
        raise ValueError("Cannot embed empty text")

    settings = get_settings()
    client = _get_client()
    payload = text[: settings.EMBEDDING_MAX_INPUT_CHARS]
    attempts = max(1, settings.EMBEDDING_MAX_ATTEMPTS)

    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            response = client.embeddings.create(
                model=settings.EMBEDDING_MODEL,
                input=payload,
            )
        except Exception as e:
            last_error = e
            if attempt < attempts:
                logger.warning(f"Embedding attempt {attempt}/{attempts} failed: {e}")
                time.sleep(1.0 * attempt)
            continue

        embedding = response.data[0].embedding
        if len(embedding) != settings.EMBEDDING_DIM:
            raise ValueError(
                f"Embedding dimension mismatch: "
                f"expected {settings.EMBEDDING_DIM}, got {len(embedding)}"
            )
        return embedding

    logger.error(f"Failed to generate embedding after {attempts} attempts: {last_error}")
    raise EmbeddingError(f"Embedding failed after {attempts} attempts: {last_error}") from last_error

