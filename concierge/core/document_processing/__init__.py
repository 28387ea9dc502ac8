"""Document processing package for turning source PDFs into indexable text.

This package provides:
- A fallback chain of PDF text extraction backends
- Content normalization (boilerplate and page-number removal)
- Title, summary, topic and slug classification
- Paragraph-packing chunking
- Splitting a combined PDF into single-page files

Usage:
    from concierge.core.document_processing import (
        extract_pdf_text,
        normalize_content,
        classify_document,
        chunk_content,
        split_pdf,
    )
"""

from concierge.core.document_processing.base import (
    BackendUnavailable,
    ExtractionError,
    TextBackend,
)

from concierge.core.document_processing.pdf_extractor import (
    PdfTextExtractor,
    TextExtractionResult,
    default_text_backends,
    extract_pdf_text,
)

from concierge.core.document_processing.normalizer import (
    normalize_content,
)

from concierge.core.document_processing.classifier import (
    TOPIC_RULES,
    ClassificationResult,
    case_study_slug,
    classify_document,
    classify_topics,
    derive_title,
    extract_summary,
    generate_slug,
)

from concierge.core.document_processing.chunker import (
    TextChunk,
    chunk_content,
)

from concierge.core.document_processing.splitter import (
    SplitBackend,
    select_split_backend,
    split_pdf,
)

__all__ = [
    # Backends
    "BackendUnavailable",
    "ExtractionError",
    "TextBackend",
    # Extraction
    "PdfTextExtractor",
    "TextExtractionResult",
    "default_text_backends",
    "extract_pdf_text",
    # Normalization
    "normalize_content",
    # Classification
    "TOPIC_RULES",
    "ClassificationResult",
    "case_study_slug",
    "classify_document",
    "classify_topics",
    "derive_title",
    "extract_summary",
    "generate_slug",
    # Chunking
    "TextChunk",
    "chunk_content",
    # Splitting
    "SplitBackend",
    "select_split_backend",
    "split_pdf",
]
