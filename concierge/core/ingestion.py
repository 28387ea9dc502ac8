"""Document indexing: PDF -> cleaned text -> document, topics and embedded chunks.

Ingestion is idempotent on the document slug. A file whose slug already exists
is reported as a successful no-op and nothing is written.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path
from uuid import uuid4

from concierge.core.config import get_settings
from concierge.core.document_processing.chunker import (
    DEFAULT_MAX_CHARS,
    DEFAULT_MIN_CHARS,
    chunk_content,
)
from concierge.core.document_processing.classifier import SUMMARY_MAX_CHARS, classify_document
from concierge.core.document_processing.normalizer import normalize_content
from concierge.core.document_processing.pdf_extractor import (
    PdfTextExtractor,
    TextExtractionResult,
    default_text_backends,
)
from concierge.core.embeddings import embed_text
from concierge.core.errors import InputPathError
from concierge.core.logging import get_logger, log_with_context
from concierge.core.schemas_documents import BatchSummary, DocumentOverrides, IngestionResult
from concierge.db.documents import DocumentStore

logger = get_logger(__name__)

DEFAULT_DELAY_SECONDS = 0.3


class DocumentIndexer:
    """Ingests PDFs into the content index.

    Args:
        store: Table access for documents, topics and chunks
        embed: Text -> embedding vector
        extractor: PDF path -> TextExtractionResult. One extractor is kept for
            the indexer's lifetime so backend discovery happens once per batch.
        chunk_max_chars: Soft chunk size limit
        chunk_min_chars: Shorter chunks are dropped
        delay_seconds: Pause between documents in ingest_directory
    """

    def __init__(
        self,
        store: DocumentStore,
        embed: Callable[[str], list[float]] = embed_text,
        extractor: Callable[[Path], TextExtractionResult] | None = None,
        chunk_max_chars: int = DEFAULT_MAX_CHARS,
        chunk_min_chars: int = DEFAULT_MIN_CHARS,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ):
        self.store = store
        self.embed = embed
        self.extractor = extractor or PdfTextExtractor()
        self.chunk_max_chars = chunk_max_chars
        self.chunk_min_chars = chunk_min_chars
        self.delay_seconds = delay_seconds

    @classmethod
    def from_settings(cls, supabase) -> "DocumentIndexer":
        """Indexer configured from environment settings."""
        settings = get_settings()
        extractor = PdfTextExtractor(
            backends=default_text_backends(
                timeout=settings.EXTRACTION_TIMEOUT_SECONDS,
                max_output_bytes=settings.EXTRACTION_MAX_OUTPUT_BYTES,
            ),
            min_chars=settings.EXTRACTION_MIN_CHARS,
        )
        return cls(
            DocumentStore(supabase),
            extractor=extractor,
            chunk_max_chars=settings.CHUNK_MAX_CHARS,
            chunk_min_chars=settings.CHUNK_MIN_CHARS,
            delay_seconds=settings.INGEST_DELAY_SECONDS,
        )

    def ingest_file(
        self,
        path: str | Path,
        overrides: DocumentOverrides | None = None,
        source_label: str | None = None,
        run_id: str | None = None,
    ) -> IngestionResult:
        """
        Ingest a single PDF.

        Args:
            path: PDF file
            overrides: Metadata to use instead of classification
            source_label: Value stored as source_file_path (defaults to file name)
            run_id: Batch run the file belongs to, added to log lines

        Returns:
            IngestionResult; failures are reported, not raised

        Raises:
            NoExtractionBackendError: If no text extraction backend is installed
        """
        path = Path(path)
        source = source_label or path.name

        extraction = self.extractor(path)
        if not extraction.ok:
            logger.warning(f"Skipping {source}: {extraction.error}")
            return IngestionResult(success=False, source=source, error=extraction.error)

        try:
            return self._index(path, source, extraction, overrides, run_id)
        except Exception as e:
            logger.error(f"Failed to ingest {source}: {e}", exc_info=True)
            return IngestionResult(success=False, source=source, error=str(e))

    def _index(
        self,
        path: Path,
        source: str,
        extraction: TextExtractionResult,
        overrides: DocumentOverrides | None,
        run_id: str | None,
    ) -> IngestionResult:
        content = normalize_content(extraction.text)
        if not content:
            return IngestionResult(success=False, source=source, error="no text after cleaning")

        if overrides:
            title = overrides.title
            slug = overrides.slug
            summary = content[:SUMMARY_MAX_CHARS]
            topics = overrides.topic_slugs
            record = {
                "doc_type": overrides.doc_type,
                "client_name": overrides.client_name,
                "capability_slugs": overrides.capability_slugs,
                "industry_slugs": overrides.industry_slugs,
            }
        else:
            classification = classify_document(path.name, content)
            title = classification.title
            slug = classification.slug
            summary = classification.summary
            topics = classification.topics
            record = {"doc_type": "article"}

        if not slug:
            return IngestionResult(success=False, source=source, error="empty slug")

        existing = self.store.get_by_slug(slug)
        if existing:
            logger.info(f"Already ingested: {slug}")
            return IngestionResult(
                success=True,
                source=source,
                slug=slug,
                document_id=existing["id"],
                already_ingested=True,
            )

        topic_ids = self.store.ensure_topics(topics)

        try:
            document = self.store.create_document(
                {
                    "title": title,
                    "slug": slug,
                    "summary": summary,
                    "source_file_path": source,
                    **record,
                }
            )
        except Exception as e:
            logger.error(f"Failed to create document {slug}: {e}")
            return IngestionResult(success=False, source=source, slug=slug, error=str(e))

        document_id = document["id"]
        self.store.link_topics(document_id, list(topic_ids.values()))

        chunks = chunk_content(content, self.chunk_max_chars, self.chunk_min_chars)
        created = 0
        for chunk in chunks:
            try:
                embedding = self.embed(chunk.content)
                self.store.insert_chunk(
                    document_id=document_id,
                    chunk_index=chunk.chunk_index,
                    content=chunk.content,
                    embedding=embedding,
                    metadata={"source": record["doc_type"], "char_count": chunk.char_count},
                )
                created += 1
            except Exception as e:
                logger.warning(f"Chunk {chunk.chunk_index} of {slug} skipped: {e}")

        context = {"document_id": document_id, "backend": extraction.backend}
        if run_id:
            context["run_id"] = run_id
        log_with_context(logger, logging.INFO, f"Ingested {slug}: {created}/{len(chunks)} chunks", **context)
        return IngestionResult(
            success=True,
            source=source,
            slug=slug,
            document_id=document_id,
            chunks_created=created,
            chunks_total=len(chunks),
        )

    def ingest_directory(self, directory: str | Path) -> BatchSummary:
        """
        Ingest every PDF in a directory, in file-name order.

        A failure on one file is counted and the batch moves on to the next.

        Raises:
            InputPathError: If the directory does not exist
            NoExtractionBackendError: If no text extraction backend is installed
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise InputPathError(f"Directory not found: {directory}")

        files = sorted(p for p in directory.iterdir() if p.suffix.lower() == ".pdf")
        run_id = uuid4().hex[:12]
        log_with_context(logger, logging.INFO, f"Found {len(files)} PDFs in {directory}", run_id=run_id)

        summary = BatchSummary()
        for i, path in enumerate(files):
            if i and self.delay_seconds:
                time.sleep(self.delay_seconds)
            summary.record(self.ingest_file(path, run_id=run_id))

        log_with_context(
            logger,
            logging.INFO,
            f"Batch done: {summary.successful} ingested, {summary.skipped} skipped, {summary.failed} failed",
            run_id=run_id,
        )
        return summary
