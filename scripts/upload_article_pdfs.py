"""Upload article PDFs and attach them to their article documents.

Usage:
    uv run python scripts/upload_article_pdfs.py [directory]

Articles are found by the slug the ingestion script derives from the file
name. Articles that already have a PDF are skipped.
"""

import argparse
import sys
from pathlib import Path

# Ensure concierge is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from concierge.core.asset_matcher import upload_article_pdfs  # noqa: E402
from concierge.core.config import get_settings  # noqa: E402
from concierge.core.errors import InputPathError, StorageError  # noqa: E402
from concierge.db.documents import DocumentStore  # noqa: E402
from concierge.db.storage import PdfStorage  # noqa: E402
from concierge.db.supabase_client import get_supabase  # noqa: E402

DEFAULT_DIRECTORY = "./content/Articles"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("directory", nargs="?", default=DEFAULT_DIRECTORY)
    args = parser.parse_args()

    settings = get_settings()
    sb = get_supabase()

    print(f"Uploading article PDFs from {args.directory} to {settings.ARTICLE_BUCKET}...\n")
    try:
        summary = upload_article_pdfs(
            args.directory,
            DocumentStore(sb),
            PdfStorage(sb, settings.ARTICLE_BUCKET, settings.BUCKET_FILE_SIZE_LIMIT),
            delay_seconds=settings.UPLOAD_DELAY_SECONDS,
        )
    except (InputPathError, StorageError) as e:
        print(f"ERROR: {e}")
        return 1

    print(f"\n{'='*50}")
    print(f"Uploaded: {summary.uploaded}")
    print(f"Already had PDF: {summary.skipped}")
    print(f"No matching article: {summary.unmatched_count}")
    print(f"Failed: {summary.failed}")
    for name in summary.unmatched:
        print(f"  unmatched: {name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
