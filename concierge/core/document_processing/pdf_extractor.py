"""PDF text extraction with a fallback chain of backends.

Backends are tried in priority order:

1. PyMuPDF, run inside a separate Python interpreter so a pathological PDF
   cannot hang or exhaust the batch process
2. poppler's ``pdftotext``
3. pypdf, in-process

The first backend that produces text wins. A backend that is not installed is
skipped silently; one that fails on the file is logged and skipped.
"""

import sys
from dataclasses import dataclass
from pathlib import Path

from concierge.core.document_processing.base import (
    DEFAULT_MAX_OUTPUT_BYTES,
    DEFAULT_TIMEOUT_SECONDS,
    BackendUnavailable,
    ExtractionError,
    TextBackend,
    run_tool,
    which,
)
from concierge.core.errors import NoExtractionBackendError
from concierge.core.logging import get_logger

logger = get_logger(__name__)

MIN_TEXT_CHARS = 100

# Exit code the helper script uses when PyMuPDF is not importable
_MISSING_FITZ_EXIT = 3

_PYMUPDF_SCRIPT = f"""
import sys
try:
    import fitz
except ImportError:
    sys.exit({_MISSING_FITZ_EXIT})
doc = fitz.open(sys.argv[1])
parts = [page.get_text() for page in doc]
doc.close()
sys.stdout.buffer.write("\\n\\n".join(parts).encode("utf-8"))
"""

INTERPRETER_CANDIDATES = (sys.executable, "python3", "python")


class PyMuPDFInterpreterBackend(TextBackend):
    """PyMuPDF extraction in a child interpreter.

    The first candidate interpreter that can import ``fitz`` is remembered for
    the lifetime of this backend, so a batch only probes once.
    """

    name = "pymupdf"

    def __init__(
        self,
        candidates: tuple[str, ...] = INTERPRETER_CANDIDATES,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        self.candidates = tuple(c for c in candidates if c)
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        self._interpreter: str | None = None

    def _discover_interpreter(self) -> str:
        if self._interpreter:
            return self._interpreter

        for candidate in self.candidates:
            try:
                run_tool([candidate, "-c", "import fitz"], backend=self.name, timeout=15)
            except (BackendUnavailable, ExtractionError):
                continue
            logger.debug(f"Using {candidate} for PyMuPDF extraction")
            self._interpreter = candidate
            return candidate

        raise BackendUnavailable("No Python interpreter with PyMuPDF installed")

    def extract(self, path: Path) -> str:
        interpreter = self._discover_interpreter()
        try:
            return run_tool(
                [interpreter, "-c", _PYMUPDF_SCRIPT, str(path)],
                backend=self.name,
                timeout=self.timeout,
                max_output_bytes=self.max_output_bytes,
            )
        except ExtractionError as e:
            if f"exited with {_MISSING_FITZ_EXIT}" in str(e):
                self._interpreter = None
                raise BackendUnavailable("PyMuPDF disappeared from interpreter") from e
            raise


class PdftotextBackend(TextBackend):
    """poppler-utils ``pdftotext``."""

    name = "pdftotext"

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
        max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    ):
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes

    def extract(self, path: Path) -> str:
        executable = which("pdftotext")
        if not executable:
            raise BackendUnavailable("pdftotext not on PATH")
        return run_tool(
            [executable, "-layout", "-enc", "UTF-8", str(path), "-"],
            backend=self.name,
            timeout=self.timeout,
            max_output_bytes=self.max_output_bytes,
        )


class PypdfBackend(TextBackend):
    """In-process extraction with pypdf (last resort, no time budget)."""

    name = "pypdf"

    def __init__(self, max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES):
        self.max_output_bytes = max_output_bytes

    def extract(self, path: Path) -> str:
        try:
            from pypdf import PdfReader
        except ImportError as e:
            raise BackendUnavailable("pypdf not installed") from e

        try:
            reader = PdfReader(str(path))
            parts = [page.extract_text() or "" for page in reader.pages]
        except Exception as e:
            raise ExtractionError(f"pypdf failed: {e}", backend=self.name) from e

        text = "\n\n".join(parts)
        if len(text.encode("utf-8")) > self.max_output_bytes:
            raise ExtractionError(
                f"pypdf output exceeds {self.max_output_bytes} bytes", backend=self.name
            )
        return text


def default_text_backends(
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> list[TextBackend]:
    """Build the standard backend chain in priority order."""
    return [
        PyMuPDFInterpreterBackend(timeout=timeout, max_output_bytes=max_output_bytes),
        PdftotextBackend(timeout=timeout, max_output_bytes=max_output_bytes),
        PypdfBackend(max_output_bytes=max_output_bytes),
    ]


@dataclass
class TextExtractionResult:
    """Outcome of extracting one PDF."""

    text: str
    backend: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PdfTextExtractor:
    """Tries each backend in order and returns the first usable text.

    Keep one instance per batch so backend discovery is reused.
    """

    def __init__(
        self,
        backends: list[TextBackend] | None = None,
        min_chars: int = MIN_TEXT_CHARS,
    ):
        self.backends = backends if backends is not None else default_text_backends()
        self.min_chars = min_chars

    def __call__(self, path: str | Path) -> TextExtractionResult:
        return self.extract(path)

    def extract(self, path: str | Path) -> TextExtractionResult:
        """Extract text from a PDF.

        Returns:
            TextExtractionResult; ``ok`` is False when every backend failed or
            the text is shorter than ``min_chars``

        Raises:
            NoExtractionBackendError: If no backend is installed at all
        """
        path = Path(path)
        unavailable = 0
        errors: list[str] = []

        for backend in self.backends:
            try:
                text = backend.extract(path)
            except BackendUnavailable as e:
                unavailable += 1
                logger.debug(f"Backend {backend.name} unavailable: {e}")
                continue
            except ExtractionError as e:
                errors.append(f"{backend.name}: {e}")
                logger.warning(f"Backend {backend.name} failed on {path.name}: {e}")
                continue

            if len(text.strip()) < self.min_chars:
                errors.append(f"{backend.name}: only {len(text.strip())} chars")
                logger.info(f"Backend {backend.name} found too little text in {path.name}")
                continue

            logger.info(f"Extracted {len(text)} chars from {path.name} with {backend.name}")
            return TextExtractionResult(text=text, backend=backend.name)

        if self.backends and unavailable == len(self.backends):
            raise NoExtractionBackendError(
                "No PDF text extraction backend available. "
                "Install PyMuPDF (pip install pymupdf), poppler-utils, or pypdf."
            )

        return TextExtractionResult(
            text="",
            error="; ".join(errors) or "no text extracted",
        )


def extract_pdf_text(
    path: str | Path,
    backends: list[TextBackend] | None = None,
) -> TextExtractionResult:
    """Convenience wrapper around PdfTextExtractor for one-off extraction."""
    return PdfTextExtractor(backends=backends).extract(path)
