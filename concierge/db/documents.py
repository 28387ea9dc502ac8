"""Database operations for documents, topics and content chunks."""

from typing import Any

from supabase import Client

from concierge.core.document_processing.classifier import topic_display_name
from concierge.core.logging import get_logger

logger = get_logger(__name__)


class DocumentStore:
    """Table access for the content index.

    Wraps a Supabase client so the indexer, matcher and retriever can be
    handed a fake in tests.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def get_by_slug(self, slug: str, doc_type: str | None = None) -> dict[str, Any] | None:
        """Fetch a document by slug, optionally restricted to one doc_type."""
        query = self.supabase.table("documents").select("*").eq("slug", slug)
        if doc_type:
            query = query.eq("doc_type", doc_type)
        response = query.limit(1).execute()
        return response.data[0] if response.data else None

    def create_document(self, record: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a document row.

        Args:
            record: Column values (title, slug, doc_type, ...)

        Returns:
            Created row including its id

        Raises:
            ValueError: If the insert returned no row
        """
        response = self.supabase.table("documents").insert(record).execute()
        if not response.data:
            raise ValueError(f"Failed to create document {record.get('slug')}")

        document = response.data[0]
        logger.info(f"Created document {document['id']} ({record.get('slug')})")
        return document

    def list_case_studies(self) -> list[dict[str, Any]]:
        response = (
            self.supabase.table("documents")
            .select("id, title, slug, client_name, pdf_url")
            .eq("doc_type", "case_study")
            .execute()
        )
        return response.data or []

    def set_pdf_url(self, document_id: str, pdf_url: str) -> None:
        self.supabase.table("documents").update({"pdf_url": pdf_url}).eq(
            "id", document_id
        ).execute()

    def get_document_tags(self, document_ids: list[str]) -> dict[str, dict[str, list[str]]]:
        """
        Capability and industry tags for a set of documents.

        Returns:
            Dict of document id to {"capability_slugs": [...], "industry_slugs": [...]}
        """
        if not document_ids:
            return {}

        response = (
            self.supabase.table("documents")
            .select("id, capability_slugs, industry_slugs")
            .in_("id", list(document_ids))
            .execute()
        )
        return {
            row["id"]: {
                "capability_slugs": row.get("capability_slugs") or [],
                "industry_slugs": row.get("industry_slugs") or [],
            }
            for row in response.data or []
        }

    # ------------------------------------------------------------------
    # Topics
    # ------------------------------------------------------------------

    def ensure_topics(self, slugs: list[str]) -> dict[str, str]:
        """
        Look up topics by slug, creating any that don't exist yet.

        A topic that can't be created is logged and left out of the result.

        Returns:
            Dict of topic slug to topic id, in the order given
        """
        topic_ids: dict[str, str] = {}
        for slug in dict.fromkeys(slugs):
            response = (
                self.supabase.table("topics").select("id").eq("slug", slug).limit(1).execute()
            )
            if response.data:
                topic_ids[slug] = response.data[0]["id"]
                continue

            try:
                created = (
                    self.supabase.table("topics")
                    .insert({"name": topic_display_name(slug), "slug": slug})
                    .execute()
                )
            except Exception as e:
                logger.warning(f"Error creating topic {slug}: {e}")
                continue

            if created.data:
                topic_ids[slug] = created.data[0]["id"]
                logger.debug(f"Created topic {slug}")

        return topic_ids

    def link_topics(self, document_id: str, topic_ids: list[str]) -> int:
        """Link a document to topics; returns the number of links written."""
        linked = 0
        for topic_id in topic_ids:
            try:
                self.supabase.table("document_topics").insert(
                    {"document_id": document_id, "topic_id": topic_id}
                ).execute()
                linked += 1
            except Exception as e:
                logger.warning(f"Topic link error for document {document_id}: {e}")
        return linked

    # ------------------------------------------------------------------
    # Chunks
    # ------------------------------------------------------------------

    def insert_chunk(
        self,
        document_id: str,
        chunk_index: int,
        content: str,
        embedding: list[float],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.supabase.table("content_chunks").insert(
            {
                "document_id": document_id,
                "content": content,
                "chunk_index": chunk_index,
                "chunk_type": "text",
                "embedding": embedding,
                "metadata": metadata or {},
            }
        ).execute()

    def list_chunks(self, document_id: str) -> list[dict[str, Any]]:
        """Chunks of a document in reading order, without embeddings."""
        response = (
            self.supabase.table("content_chunks")
            .select("id, content, chunk_index, chunk_type")
            .eq("document_id", document_id)
            .order("chunk_index")
            .execute()
        )
        return response.data or []

    # ------------------------------------------------------------------
    # Lookup by public slug
    # ------------------------------------------------------------------

    def _first_slug_like(self, pattern: str, doc_type: str | None) -> dict[str, Any] | None:
        query = self.supabase.table("documents").select("*").ilike("slug", pattern)
        if doc_type:
            query = query.eq("doc_type", doc_type)
        response = query.limit(1).execute()
        return response.data[0] if response.data else None

    def get_document_by_slug(self, slug: str, doc_type: str | None = None) -> dict[str, Any] | None:
        """
        Resolve a slug from a layout plan or URL to a document.

        Tries the exact slug, then slugs starting with it, then slugs
        containing its first three words of more than two characters in
        order. Links generated before a title was shortened still resolve.

        Returns:
            Document row or None
        """
        document = self.get_by_slug(slug, doc_type=doc_type)
        if document:
            return document

        document = self._first_slug_like(f"{slug}%", doc_type)
        if document:
            return document

        parts = [part for part in slug.split("-") if len(part) > 2]
        if len(parts) < 2:
            return None
        return self._first_slug_like("%" + "%".join(parts[:3]) + "%", doc_type)

    def list_topics(self, document_id: str) -> list[dict[str, Any]]:
        """Name and slug of every topic linked to a document."""
        links = (
            self.supabase.table("document_topics")
            .select("topic_id")
            .eq("document_id", document_id)
            .execute()
        )
        topic_ids = [row["topic_id"] for row in links.data or []]
        if not topic_ids:
            return []

        response = self.supabase.table("topics").select("name, slug").in_("id", topic_ids).execute()
        return response.data or []

    def list_visual_assets(self, document_id: str) -> list[dict[str, Any]]:
        response = (
            self.supabase.table("visual_assets").select("*").eq("document_id", document_id).execute()
        )
        return response.data or []
