"""Uploading source PDFs to storage and attaching them to indexed documents.

Standalone case study PDFs are matched to documents by client name patterns
in the file name. Pages of the combined deck and article PDFs are matched by
the slug the indexer would have generated for them.
"""

import re
import time
from pathlib import Path
from typing import Any

from concierge.core.case_studies import CaseStudyPage
from concierge.core.document_processing.classifier import (
    case_study_slug,
    derive_title,
    generate_slug,
)
from concierge.core.document_processing.splitter import SplitBackend, select_split_backend
from concierge.core.errors import InputPathError
from concierge.core.logging import get_logger
from concierge.core.schemas_documents import MatchSummary
from concierge.core.split_ingestion import split_pages
from concierge.db.documents import DocumentStore
from concierge.db.storage import PdfStorage

logger = get_logger(__name__)

DEFAULT_DELAY_SECONDS = 0.1

# Canonical client name -> lower-case file name substrings. Checked in order;
# the first client with a matching substring wins.
CLIENT_PATTERNS: dict[str, list[str]] = {
    "CrowdStrike": ["crowdstrike", "falcon", "fal.con"],
    "AWS": ["aws", "amazon web services", "reinvent", "re:invent", "sagemaker"],
    "Google": ["google"],
    "Google Workspace": ["workspace", "g suite", "gsuite"],
    "Google Cloud": ["google cloud", "gcp"],
    "Chrome Enterprise": ["chrome enterprise"],
    "ChromeOS": ["chromeos", "chrome os"],
    "Android": ["android"],
    "Android Enterprise": ["android enterprise"],
    "Salesforce/Slack": ["salesforce", "slack"],
    "Simons Foundation": ["simons"],
    "Amazon re:MARS": ["re:mars", "remars"],
    "ADP": ["adp"],
    "AIG": ["aig"],
    "Twitch": ["twitch"],
    "Meta": ["meta", "facebook"],
    "J.P. Morgan": ["jp morgan", "jpmorgan", "j.p. morgan"],
    "Omnicell": ["omnicell"],
    "Salt Security": ["salt security", "salt"],
    "Renew Home": ["renew home", "renew"],
}

_UNSAFE_PATH_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")
_REPEATED_HYPHENS_RE = re.compile(r"-+")


def find_client_for_filename(filename: str) -> str | None:
    """Canonical client whose patterns match the file name, if any."""
    lower = filename.lower()
    for client, patterns in CLIENT_PATTERNS.items():
        if any(pattern in lower for pattern in patterns):
            return client
    return None


def storage_path_for(filename: str, prefix: str = "pdfs") -> str:
    """
    Storage object path for an uploaded file.

    Example: "CrowdStrike - Marketecture.pdf" -> "pdfs/CrowdStrike-Marketecture.pdf"
    """
    clean = _UNSAFE_PATH_CHARS_RE.sub("-", filename)
    clean = _REPEATED_HYPHENS_RE.sub("-", clean).strip("-")
    return f"{prefix}/{clean}"


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def case_studies_for_client(case_studies: list[dict[str, Any]], client: str) -> list[dict[str, Any]]:
    """Case studies whose client name or title mentions the client."""
    return [
        cs
        for cs in case_studies
        if _contains(cs.get("client_name"), client) or _contains(cs.get("title"), client)
    ]


def _title_matches(title: str | None, entry: CaseStudyPage) -> bool:
    # Client name plus the first three words of the descriptor title, in order
    if not _contains(title, entry.client):
        return False
    words = entry.title.split()[:3]
    pattern = ".*".join(re.escape(word) for word in words)
    return bool(re.search(pattern, title, re.IGNORECASE))


def _read_pdf(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class AssetMatcher:
    """Uploads case study PDFs and links them to case study documents."""

    def __init__(
        self,
        store: DocumentStore,
        storage: PdfStorage,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
    ):
        self.store = store
        self.storage = storage
        self.delay_seconds = delay_seconds

    def _link_all(self, documents: list[dict[str, Any]], pdf_url: str, summary: MatchSummary) -> int:
        linked = 0
        for document in documents:
            try:
                self.store.set_pdf_url(document["id"], pdf_url)
            except Exception as e:
                logger.warning(f"Failed to update {document.get('title')}: {e}")
                continue
            logger.info(f"Linked to: {document.get('title')}")
            linked += 1
        summary.linked += linked
        return linked

    def match_directory(self, directory: str | Path) -> MatchSummary:
        """
        Upload every PDF in a directory and attach each to its client's case studies.

        One PDF may back several case studies; it is attached to all of them.

        Raises:
            InputPathError: If the directory does not exist
            StorageError: If the bucket can't be created
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise InputPathError(f"Directory not found: {directory}")

        self.storage.ensure_bucket()
        files = sorted(p for p in directory.iterdir() if p.suffix.lower() == ".pdf")
        case_studies = self.store.list_case_studies()
        logger.info(f"Found {len(files)} PDFs and {len(case_studies)} case studies")

        summary = MatchSummary()
        for i, path in enumerate(files):
            if i and self.delay_seconds:
                time.sleep(self.delay_seconds)
            summary.total += 1

            try:
                pdf_url = self.storage.upload_pdf(storage_path_for(path.name), _read_pdf(path))
            except Exception as e:
                logger.error(f"Upload failed for {path.name}: {e}")
                summary.failed += 1
                summary.failures.append(f"{path.name}: {e}")
                continue
            summary.uploaded += 1

            client = find_client_for_filename(path.name)
            if not client:
                logger.warning(f"Could not determine client from filename: {path.name}")
                summary.unmatched.append(path.name)
                continue

            matches = case_studies_for_client(case_studies, client)
            if not matches or not self._link_all(matches, pdf_url, summary):
                logger.warning(f"No case study found for client {client} ({path.name})")
                summary.unmatched.append(path.name)

        return summary

    def _find_case_study(
        self,
        entry: CaseStudyPage,
        slug: str,
        case_studies: list[dict[str, Any]],
    ) -> dict[str, Any] | None:
        by_slug = self.store.get_by_slug(slug, doc_type="case_study")
        if by_slug:
            return by_slug

        for cs in case_studies:
            if _title_matches(cs.get("title"), entry):
                return cs

        by_client = case_studies_for_client(case_studies, entry.client)
        return by_client[0] if by_client else None

    def split_and_upload(
        self,
        pdf_path: str | Path,
        pages: list[CaseStudyPage],
        create_missing: bool = False,
        work_dir: str | Path | None = None,
        backends: list[SplitBackend] | None = None,
    ) -> MatchSummary:
        """
        Split the combined deck and attach each page PDF to its case study.

        Each page is uploaded to individual/<slug>.pdf and linked to the first
        document found by exact slug, then by client plus title words, then by
        client alone. With create_missing, a minimal case study document is
        created when nothing matches.

        Raises:
            InputPathError: If pdf_path does not exist
            NoSplitBackendError: If no splitting backend is available
        """
        pdf_path = Path(pdf_path)
        if not pdf_path.is_file():
            raise InputPathError(f"File not found: {pdf_path}")

        backend = select_split_backend(backends)
        self.storage.ensure_bucket()
        case_studies = self.store.list_case_studies()
        summary = MatchSummary()

        with split_pages(pdf_path, backend, work_dir) as page_files:
            for i, entry in enumerate(pages):
                if i and self.delay_seconds:
                    time.sleep(self.delay_seconds)
                summary.total += 1

                page_file = page_files.get(entry.page)
                if page_file is None:
                    logger.warning(f"Page {entry.page} not found for {entry.label}")
                    summary.failed += 1
                    summary.failures.append(f"page {entry.page}: not found in split output")
                    continue

                slug = case_study_slug(entry.client, entry.title)
                try:
                    pdf_url = self.storage.upload_pdf(f"individual/{slug}.pdf", _read_pdf(page_file))
                except Exception as e:
                    logger.error(f"Upload failed for page {entry.page}: {e}")
                    summary.failed += 1
                    summary.failures.append(f"page {entry.page}: {e}")
                    continue
                summary.uploaded += 1

                document = self._find_case_study(entry, slug, case_studies)
                if document:
                    self._link_all([document], pdf_url, summary)
                    continue

                if not create_missing:
                    summary.unmatched.append(entry.label)
                    continue

                try:
                    self.store.create_document(
                        {
                            "title": entry.label,
                            "slug": slug,
                            "doc_type": "case_study",
                            "client_name": entry.client,
                            "summary": f"{entry.client} case study: {entry.title}",
                            "pdf_url": pdf_url,
                            "capability_slugs": entry.capabilities,
                            "industry_slugs": entry.industries,
                        }
                    )
                    summary.created += 1
                except Exception as e:
                    logger.warning(f"Failed to create {entry.label}: {e}")
                    summary.failed += 1
                    summary.failures.append(f"page {entry.page}: {e}")

        return summary


def upload_article_pdfs(
    directory: str | Path,
    store: DocumentStore,
    storage: PdfStorage,
    delay_seconds: float = DEFAULT_DELAY_SECONDS,
) -> MatchSummary:
    """
    Upload article PDFs and attach them to their article documents.

    The slug is derived from the file name exactly as the indexer derives it.
    Articles that already have a pdf_url are skipped.

    Raises:
        InputPathError: If the directory does not exist
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise InputPathError(f"Directory not found: {directory}")

    storage.ensure_bucket()
    files = sorted(p for p in directory.iterdir() if p.suffix.lower() == ".pdf")
    summary = MatchSummary()

    for i, path in enumerate(files):
        if i and delay_seconds:
            time.sleep(delay_seconds)
        summary.total += 1

        slug = generate_slug(derive_title(path.name))
        try:
            document = store.get_by_slug(slug, doc_type="article")
        except Exception as e:
            logger.error(f"Lookup failed for {path.name}: {e}")
            summary.failed += 1
            summary.failures.append(f"{path.name}: {e}")
            continue

        if not document:
            logger.warning(f"No article found for slug {slug}")
            summary.unmatched.append(path.name)
            continue

        if document.get("pdf_url"):
            summary.skipped += 1
            continue

        try:
            pdf_url = storage.upload_pdf(f"{slug}.pdf", _read_pdf(path))
            store.set_pdf_url(document["id"], pdf_url)
        except Exception as e:
            logger.error(f"Upload failed for {path.name}: {e}")
            summary.failed += 1
            summary.failures.append(f"{path.name}: {e}")
            continue

        summary.uploaded += 1
        summary.linked += 1

    return summary
