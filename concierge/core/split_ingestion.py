"""Ingesting the case studies of a combined multi-page PDF.

The combined deck is burst into single pages and each page listed in the case
study table is ingested as its own case_study document.
"""

import tempfile
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from concierge.core.case_studies import CaseStudyPage, out_of_range_pages
from concierge.core.document_processing.classifier import case_study_slug
from concierge.core.document_processing.splitter import (
    SplitBackend,
    select_split_backend,
    split_pdf,
)
from concierge.core.errors import InputPathError, PageRangeError
from concierge.core.ingestion import DocumentIndexer
from concierge.core.logging import get_logger
from concierge.core.schemas_documents import (
    DocumentOverrides,
    IngestionResult,
    SplitIngestionReport,
)

logger = get_logger(__name__)

CASE_STUDY_TOPIC = "case-study"


@contextmanager
def split_pages(
    pdf_path: Path,
    backend: SplitBackend,
    work_dir: str | Path | None = None,
) -> Iterator[dict[int, Path]]:
    """Split into a temporary directory that is removed on exit, even on error."""
    with tempfile.TemporaryDirectory(prefix="split-pdf-", dir=work_dir) as tmp:
        yield split_pdf(pdf_path, tmp, backend=backend)


def validate_pages(pages: list[CaseStudyPage], backend: SplitBackend, pdf_path: Path) -> int:
    """
    Check every descriptor against the PDF's real page count.

    Returns:
        The page count

    Raises:
        PageRangeError: Listing every row beyond the last page
    """
    page_count = backend.page_count(pdf_path)
    out_of_range = out_of_range_pages(pages, page_count)
    if out_of_range:
        raise PageRangeError(page_count, out_of_range)
    return page_count


def overrides_for(entry: CaseStudyPage) -> DocumentOverrides:
    return DocumentOverrides(
        title=entry.label,
        slug=case_study_slug(entry.client, entry.title),
        doc_type="case_study",
        client_name=entry.client,
        capability_slugs=entry.capabilities,
        industry_slugs=entry.industries,
        topic_slugs=[CASE_STUDY_TOPIC],
    )


def split_and_ingest(
    pdf_path: str | Path,
    pages: list[CaseStudyPage],
    indexer: DocumentIndexer,
    work_dir: str | Path | None = None,
    backends: list[SplitBackend] | None = None,
    validate: bool = True,
    delay_seconds: float = 0.3,
) -> SplitIngestionReport:
    """
    Split the combined PDF and ingest one case study per listed page.

    Args:
        pdf_path: Combined case study PDF
        pages: Page descriptors
        indexer: Indexer used for every page
        work_dir: Parent for the temporary split directory
        backends: Split backends to probe (defaults to the standard chain)
        validate: Reject descriptors beyond the last page before splitting
        delay_seconds: Pause between pages

    Returns:
        SplitIngestionReport

    Raises:
        InputPathError: If pdf_path does not exist
        NoSplitBackendError: If no splitting backend is available
        PageRangeError: If validate is set and a descriptor is out of range
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.is_file():
        raise InputPathError(f"File not found: {pdf_path}")

    backend = select_split_backend(backends)
    report = SplitIngestionReport(backend=backend.name)
    if validate:
        report.page_count = validate_pages(pages, backend, pdf_path)

    with split_pages(pdf_path, backend, work_dir) as page_files:
        if not report.page_count:
            report.page_count = len(page_files)

        for i, entry in enumerate(pages):
            if i and delay_seconds:
                time.sleep(delay_seconds)

            page_file = page_files.get(entry.page)
            if page_file is None:
                logger.warning(f"Page {entry.page} not found, skipping {entry.label}")
                report.missing_pages.append(entry.page)
                report.record(
                    IngestionResult(
                        success=False,
                        source=f"page {entry.page}",
                        error="page not found in split output",
                    )
                )
                continue

            logger.info(f"[{entry.page}] {entry.label}")
            result = indexer.ingest_file(
                page_file,
                overrides=overrides_for(entry),
                source_label=f"{pdf_path.name}#page={entry.page}",
            )
            report.record(result)

    return report
