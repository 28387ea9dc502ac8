"""Exception types shared across the ingestion and retrieval pipeline.

Per-item problems (a PDF with no text, one chunk failing to embed, a filename
with no client match) are logged and counted by the batch that hit them and
never raise. The exceptions here are the ones that abort a whole run.
"""


class ConciergeError(Exception):
    """Base class for pipeline errors."""


class InputPathError(ConciergeError):
    """Raised when a required input file or directory does not exist."""


class NoExtractionBackendError(ConciergeError):
    """Raised when no text-extraction backend is installed at all."""


class NoSplitBackendError(ConciergeError):
    """Raised when no PDF splitting tool is available."""


class PageRangeError(ConciergeError):
    """Raised when case-study descriptors reference pages the source PDF lacks."""

    def __init__(self, page_count: int, out_of_range: list[tuple[int, str]]):
        self.page_count = page_count
        self.out_of_range = out_of_range
        rows = ", ".join(f"page {page} ({label})" for page, label in out_of_range)
        super().__init__(f"Source PDF has {page_count} pages; descriptors out of range: {rows}")


class EmbeddingError(ConciergeError):
    """Raised when an embedding could not be generated after all retries."""


class StorageError(ConciergeError):
    """Raised when a storage upload or bucket operation fails."""
