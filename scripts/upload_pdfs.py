"""Upload standalone case study PDFs and link them to case study documents.

Usage:
    uv run python scripts/upload_pdfs.py [directory]

The client is recognised from the file name (e.g. "CrowdStrike - Marketecture.pdf")
and the PDF's public URL is attached to every case study for that client.
"""

import argparse
import sys
from pathlib import Path

# Ensure concierge is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from concierge.core.asset_matcher import AssetMatcher  # noqa: E402
from concierge.core.config import get_settings  # noqa: E402
from concierge.core.errors import InputPathError, StorageError  # noqa: E402
from concierge.db.documents import DocumentStore  # noqa: E402
from concierge.db.storage import PdfStorage  # noqa: E402
from concierge.db.supabase_client import get_supabase  # noqa: E402

DEFAULT_DIRECTORY = "./content/case-studies"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("directory", nargs="?", default=DEFAULT_DIRECTORY)
    args = parser.parse_args()

    settings = get_settings()
    sb = get_supabase()
    matcher = AssetMatcher(
        DocumentStore(sb),
        PdfStorage(sb, settings.CASE_STUDY_BUCKET, settings.BUCKET_FILE_SIZE_LIMIT),
        delay_seconds=settings.UPLOAD_DELAY_SECONDS,
    )

    print(f"Uploading PDFs from {args.directory} to {settings.CASE_STUDY_BUCKET}...\n")
    try:
        summary = matcher.match_directory(args.directory)
    except (InputPathError, StorageError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\n{'='*50}")
    print("UPLOAD SUMMARY")
    print(f"{'='*50}")
    print(f"Uploaded: {summary.uploaded} PDFs")
    print(f"Linked: {summary.linked} case studies")
    print(f"Unmatched: {summary.unmatched_count} PDFs")
    print(f"Failed: {summary.failed} PDFs")
    for name in summary.unmatched:
        print(f"  unmatched: {name}")
    for failure in summary.failures:
        print(f"  failed: {failure}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
