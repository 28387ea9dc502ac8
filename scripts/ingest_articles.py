"""Ingest a directory of article PDFs into the content index.

Usage:
    uv run python scripts/ingest_articles.py [directory]

Each PDF is extracted, cleaned, classified (title, summary, topics), chunked
and embedded. Files whose slug is already indexed are skipped, so the script
can be re-run after a partial failure.
"""

import argparse
import sys
from pathlib import Path

# Ensure concierge is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from concierge.core.errors import InputPathError, NoExtractionBackendError  # noqa: E402
from concierge.core.ingestion import DocumentIndexer  # noqa: E402
from concierge.db.supabase_client import get_supabase  # noqa: E402

DEFAULT_DIRECTORY = "./content/Articles"


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("directory", nargs="?", default=DEFAULT_DIRECTORY)
    args = parser.parse_args()

    print(f"\n{'='*60}")
    print("Article ingestion")
    print(f"Directory: {args.directory}")
    print(f"{'='*60}\n")

    indexer = DocumentIndexer.from_settings(get_supabase())
    try:
        summary = indexer.ingest_directory(args.directory)
    except (InputPathError, NoExtractionBackendError) as e:
        print(f"ERROR: {e}")
        return 1

    for result in summary.results:
        if not result.success:
            status = "FAILED"
        elif result.already_ingested:
            status = "skipped"
        else:
            status = f"{result.chunks_created}/{result.chunks_total} chunks"
        print(f"  {result.source[:60]:<60} {status}")

    print(f"\n{'='*60}")
    print(f"Successful: {summary.successful}")
    print(f"Skipped (already ingested): {summary.skipped}")
    print(f"Failed: {summary.failed}")
    print(f"Chunks created: {summary.chunks_created}")
    print(f"Total: {summary.total}")
    for failure in summary.failures:
        print(f"  - {failure}")
    print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
