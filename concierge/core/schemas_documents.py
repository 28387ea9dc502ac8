"""Pydantic schemas for ingestion, splitting and PDF matching results."""

from typing import Literal

from pydantic import BaseModel, Field


class DocumentOverrides(BaseModel):
    """Caller-supplied metadata that replaces classification entirely."""
    title: str
    slug: str
    doc_type: Literal["article", "case_study"] = "case_study"
    client_name: str | None = None
    capability_slugs: list[str] = []
    industry_slugs: list[str] = []
    topic_slugs: list[str] = []


class IngestionResult(BaseModel):
    """Outcome of ingesting one source file."""
    success: bool
    source: str
    slug: str | None = None
    document_id: str | None = None
    chunks_created: int = 0
    chunks_total: int = 0
    already_ingested: bool = False
    error: str | None = None


class BatchSummary(BaseModel):
    """Tally for a directory ingestion run."""
    total: int = 0
    successful: int = 0
    skipped: int = 0
    failed: int = 0
    chunks_created: int = 0
    failures: list[str] = []
    results: list[IngestionResult] = Field(default_factory=list, repr=False)

    def record(self, result: IngestionResult) -> None:
        self.total += 1
        self.results.append(result)
        if not result.success:
            self.failed += 1
            self.failures.append(f"{result.source}: {result.error}")
        elif result.already_ingested:
            self.skipped += 1
        else:
            self.successful += 1
            self.chunks_created += result.chunks_created


class SplitIngestionReport(BatchSummary):
    """Tally for ingesting the pages of a combined case study PDF."""
    page_count: int = 0
    backend: str | None = None
    missing_pages: list[int] = []


class MatchSummary(BaseModel):
    """Tally for uploading PDFs and attaching them to documents."""
    total: int = 0
    uploaded: int = 0
    linked: int = 0
    skipped: int = 0
    created: int = 0
    failed: int = 0
    unmatched: list[str] = []
    failures: list[str] = []

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)
