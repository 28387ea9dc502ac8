"""Ingest the case studies of the combined single-page case study PDF.

Usage:
    uv run python scripts/ingest_split.py [pdf_path] [--no-validate]

The PDF is split into one file per page (pdftk, qpdf, PyMuPDF or pypdf,
whichever is installed) and each page listed in the case study table is
ingested with its client, title, capabilities and industries.
"""

import argparse
import sys
from pathlib import Path

# Ensure concierge is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from concierge.core.case_studies import CASE_STUDY_PAGES, DEFAULT_COMBINED_PDF  # noqa: E402
from concierge.core.config import get_settings  # noqa: E402
from concierge.core.document_processing.base import ExtractionError  # noqa: E402
from concierge.core.errors import (  # noqa: E402
    InputPathError,
    NoExtractionBackendError,
    NoSplitBackendError,
    PageRangeError,
)
from concierge.core.ingestion import DocumentIndexer  # noqa: E402
from concierge.core.split_ingestion import split_and_ingest  # noqa: E402
from concierge.db.supabase_client import get_supabase  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("pdf_path", nargs="?", default=DEFAULT_COMBINED_PDF)
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip the up-front page range check; missing pages are reported per row",
    )
    args = parser.parse_args()

    print(f"\n{'='*60}")
    print("Case study ingestion")
    print(f"PDF: {args.pdf_path}")
    print(f"Case studies: {len(CASE_STUDY_PAGES)}")
    print(f"{'='*60}\n")

    indexer = DocumentIndexer.from_settings(get_supabase())
    try:
        report = split_and_ingest(
            args.pdf_path,
            CASE_STUDY_PAGES,
            indexer,
            validate=not args.no_validate,
            delay_seconds=get_settings().INGEST_DELAY_SECONDS,
        )
    except (
        InputPathError,
        NoSplitBackendError,
        NoExtractionBackendError,
        PageRangeError,
        ExtractionError,
    ) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\n{'='*60}")
    print(f"Split backend: {report.backend} ({report.page_count} pages)")
    print(f"Successful: {report.successful}")
    print(f"Skipped (already ingested): {report.skipped}")
    print(f"Failed: {report.failed}")
    if report.missing_pages:
        print(f"Missing pages: {', '.join(str(p) for p in report.missing_pages)}")
    for failure in report.failures:
        print(f"  - {failure}")
    print(f"Total: {report.total}")
    print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
