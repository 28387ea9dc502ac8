"""Splitting a multi-page PDF into one file per page.

Splitting backends are probed in order (pdftk, qpdf, PyMuPDF, pypdf) and the
first usable one is used for the whole run. Every backend writes
``page_<n>.pdf`` files (1-based) into the output directory.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path

from concierge.core.document_processing.base import (
    BackendUnavailable,
    ExtractionError,
    run_tool,
    which,
)
from concierge.core.errors import NoSplitBackendError
from concierge.core.logging import get_logger

logger = get_logger(__name__)

_PAGE_FILE_RE = re.compile(r"page_(\d+)\.pdf")
_PDFTK_PAGES_RE = re.compile(r"NumberOfPages:\s*(\d+)")


class SplitBackend(ABC):
    """A way of bursting a PDF into single-page files."""

    name: str = "split"

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool or library is installed."""

    @abstractmethod
    def page_count(self, path: Path) -> int:
        """Number of physical pages in the PDF."""

    @abstractmethod
    def split(self, path: Path, out_dir: Path) -> None:
        """Write page_<n>.pdf for every page of ``path`` into ``out_dir``."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class PdftkBackend(SplitBackend):
    name = "pdftk"

    def is_available(self) -> bool:
        return which("pdftk") is not None

    def page_count(self, path: Path) -> int:
        output = run_tool(["pdftk", str(path), "dump_data"], backend=self.name)
        match = _PDFTK_PAGES_RE.search(output)
        if not match:
            raise ExtractionError("pdftk dump_data reported no page count", backend=self.name)
        return int(match.group(1))

    def split(self, path: Path, out_dir: Path) -> None:
        run_tool(
            ["pdftk", str(path), "burst", "output", str(out_dir / "page_%d.pdf")],
            backend=self.name,
        )


class QpdfBackend(SplitBackend):
    name = "qpdf"

    def is_available(self) -> bool:
        return which("qpdf") is not None

    def page_count(self, path: Path) -> int:
        output = run_tool(["qpdf", "--show-npages", str(path)], backend=self.name)
        return int(output.strip())

    def split(self, path: Path, out_dir: Path) -> None:
        # qpdf has no burst mode; extract one page per call
        for page in range(1, self.page_count(path) + 1):
            run_tool(
                ["qpdf", str(path), "--pages", ".", str(page), "--", str(out_dir / f"page_{page}.pdf")],
                backend=self.name,
            )


class PyMuPDFSplitBackend(SplitBackend):
    name = "pymupdf"

    def is_available(self) -> bool:
        try:
            import fitz  # noqa: F401
        except ImportError:
            return False
        return True

    def page_count(self, path: Path) -> int:
        import fitz

        with fitz.open(str(path)) as doc:
            return doc.page_count

    def split(self, path: Path, out_dir: Path) -> None:
        import fitz

        with fitz.open(str(path)) as doc:
            for page_num in range(doc.page_count):
                single = fitz.open()
                single.insert_pdf(doc, from_page=page_num, to_page=page_num)
                single.save(str(out_dir / f"page_{page_num + 1}.pdf"))
                single.close()


class PypdfSplitBackend(SplitBackend):
    name = "pypdf"

    def is_available(self) -> bool:
        try:
            import pypdf  # noqa: F401
        except ImportError:
            return False
        return True

    def page_count(self, path: Path) -> int:
        from pypdf import PdfReader

        return len(PdfReader(str(path)).pages)

    def split(self, path: Path, out_dir: Path) -> None:
        from pypdf import PdfReader, PdfWriter

        reader = PdfReader(str(path))
        for i, page in enumerate(reader.pages):
            writer = PdfWriter()
            writer.add_page(page)
            with open(out_dir / f"page_{i + 1}.pdf", "wb") as f:
                writer.write(f)


def default_split_backends() -> list[SplitBackend]:
    return [PdftkBackend(), QpdfBackend(), PyMuPDFSplitBackend(), PypdfSplitBackend()]


def select_split_backend(backends: list[SplitBackend] | None = None) -> SplitBackend:
    """
    Pick the first available splitting backend.

    Raises:
        NoSplitBackendError: If none is installed
    """
    candidates = backends if backends is not None else default_split_backends()
    for backend in candidates:
        if backend.is_available():
            logger.info(f"Using {backend.name} to split PDFs")
            return backend
        logger.debug(f"Split backend {backend.name} not available")

    raise NoSplitBackendError(
        "No PDF splitting tool available. "
        "Install pdftk, qpdf, PyMuPDF (pip install pymupdf) or pypdf."
    )


def collect_page_files(out_dir: Path) -> dict[int, Path]:
    """Map page number to file for every page_<n>.pdf in out_dir."""
    pages = {}
    for path in out_dir.iterdir():
        match = _PAGE_FILE_RE.fullmatch(path.name)
        if match:
            pages[int(match.group(1))] = path
    return dict(sorted(pages.items()))


def split_pdf(
    path: str | Path,
    out_dir: str | Path,
    backend: SplitBackend | None = None,
) -> dict[int, Path]:
    """
    Split a PDF into single-page files.

    Args:
        path: Source PDF
        out_dir: Directory to write page files into (created if missing)
        backend: Backend to use; selected automatically when omitted

    Returns:
        Dict of 1-based page number to page file path

    Raises:
        NoSplitBackendError: If no backend is available
        ExtractionError: If the backend fails
    """
    path = Path(path)
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    backend = backend or select_split_backend()
    try:
        backend.split(path, out_dir)
    except BackendUnavailable as e:
        raise NoSplitBackendError(f"{backend.name} became unavailable: {e}") from e

    pages = collect_page_files(out_dir)
    logger.info(f"Split {path.name} into {len(pages)} pages with {backend.name}")
    return pages
