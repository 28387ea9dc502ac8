"""Split the combined case study PDF and upload one PDF per case study.

Usage:
    uv run python scripts/split_upload_pdfs.py [pdf_path] [--create-missing]

Each page is uploaded to individual/<slug>.pdf and linked to its case study
by slug, then by client and title, then by client. With --create-missing a
minimal case study document is created for pages that match nothing.
"""

import argparse
import sys
from pathlib import Path

# Ensure concierge is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from concierge.core.asset_matcher import AssetMatcher  # noqa: E402
from concierge.core.case_studies import CASE_STUDY_PAGES, DEFAULT_COMBINED_PDF  # noqa: E402
from concierge.core.config import get_settings  # noqa: E402
from concierge.core.document_processing.base import ExtractionError  # noqa: E402
from concierge.core.errors import InputPathError, NoSplitBackendError, StorageError  # noqa: E402
from concierge.db.documents import DocumentStore  # noqa: E402
from concierge.db.storage import PdfStorage  # noqa: E402
from concierge.db.supabase_client import get_supabase  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("pdf_path", nargs="?", default=DEFAULT_COMBINED_PDF)
    parser.add_argument("--create-missing", action="store_true")
    args = parser.parse_args()

    settings = get_settings()
    sb = get_supabase()
    matcher = AssetMatcher(
        DocumentStore(sb),
        PdfStorage(sb, settings.CASE_STUDY_BUCKET, settings.BUCKET_FILE_SIZE_LIMIT),
        delay_seconds=settings.UPLOAD_DELAY_SECONDS,
    )

    print(f"Splitting {args.pdf_path} ({len(CASE_STUDY_PAGES)} case studies)...\n")
    try:
        summary = matcher.split_and_upload(
            args.pdf_path, CASE_STUDY_PAGES, create_missing=args.create_missing
        )
    except (InputPathError, NoSplitBackendError, ExtractionError, StorageError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\n{'='*50}")
    print(f"Uploaded: {summary.uploaded}")
    print(f"Linked: {summary.linked}")
    print(f"Created: {summary.created}")
    print(f"Unmatched: {summary.unmatched_count}")
    print(f"Failed: {summary.failed}")
    for name in summary.unmatched:
        print(f"  unmatched: {name}")
    for failure in summary.failures:
        print(f"  failed: {failure}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
