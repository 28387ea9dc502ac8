"""Query-time context retrieval for the layout orchestrator.

Similarity ranking happens in the database (hybrid_search and
search_visual_assets RPCs). This module bounds the result sizes, enforces
the capability/industry filters on every returned row and signs asset URLs.

Filters are conjunctive across kinds and disjunctive within a kind: with
capabilities=[a, b] and industries=[x], a document qualifies when it is
tagged with a or b, and with x.

Retrieval never raises. An empty index, no matches, or a failing store or
embedding call all produce an empty RetrievedContext.
"""

from collections.abc import Callable
from typing import Any

from supabase import Client

from concierge.core.embeddings import embed_text
from concierge.core.logging import get_logger
from concierge.core.schemas_chat import RetrievedContext
from concierge.db.documents import DocumentStore
from concierge.db.storage import create_signed_url

logger = get_logger(__name__)

DEFAULT_MAX_CHUNKS = 10
DEFAULT_MAX_ASSETS = 5
DEFAULT_SIGNED_URL_TTL = 3600


def _matches(tags: dict[str, list[str]] | None, capabilities: set[str], industries: set[str]) -> bool:
    if tags is None:
        return False
    if capabilities and not capabilities & set(tags["capability_slugs"]):
        return False
    if industries and not industries & set(tags["industry_slugs"]):
        return False
    return True


class ContextRetriever:
    """Budgeted retrieval of chunks and visual assets for a query."""

    def __init__(
        self,
        supabase: Client,
        embed: Callable[[str], list[float]] = embed_text,
        signed_url_ttl: int = DEFAULT_SIGNED_URL_TTL,
    ):
        self.supabase = supabase
        self.store = DocumentStore(supabase)
        self.embed = embed
        self.signed_url_ttl = signed_url_ttl

    def retrieve(
        self,
        query: str,
        capability_slugs: list[str] | None = None,
        industry_slugs: list[str] | None = None,
        max_chunks: int = DEFAULT_MAX_CHUNKS,
        max_assets: int = DEFAULT_MAX_ASSETS,
    ) -> RetrievedContext:
        """
        Retrieve relevant chunks and visual assets.

        Args:
            query: Free-text user query
            capability_slugs: Documents must carry at least one of these
            industry_slugs: Documents must carry at least one of these
            max_chunks: Upper bound on returned chunks
            max_assets: Upper bound on returned visual assets

        Returns:
            RetrievedContext with at most max_chunks chunks and max_assets assets
        """
        max_chunks = max(0, max_chunks)
        max_assets = max(0, max_assets)
        if not query or not query.strip() or (max_chunks == 0 and max_assets == 0):
            return RetrievedContext()

        try:
            embedding = self.embed(query)
        except Exception as e:
            logger.error(f"Query embedding failed, returning empty context: {e}")
            return RetrievedContext()

        chunks = self._search_chunks(embedding, query, capability_slugs, industry_slugs, max_chunks)
        assets = self._search_assets(embedding, max_assets)

        capabilities = set(capability_slugs or [])
        industries = set(industry_slugs or [])
        if capabilities or industries:
            chunks, assets = self._apply_filters(chunks, assets, capabilities, industries)

        chunks = chunks[:max_chunks]
        assets = [self._sign(asset) for asset in assets[:max_assets]]

        logger.info(f"Retrieved {len(chunks)} chunks and {len(assets)} assets")
        return RetrievedContext(chunks=chunks, visual_assets=assets)

    def _search_chunks(
        self,
        embedding: list[float],
        query: str,
        capability_slugs: list[str] | None,
        industry_slugs: list[str] | None,
        max_chunks: int,
    ) -> list[dict[str, Any]]:
        if max_chunks == 0:
            return []
        try:
            response = self.supabase.rpc(
                "hybrid_search",
                {
                    "query_embedding": embedding,
                    "query_text": query,
                    "capability_slugs": capability_slugs or None,
                    "industry_slugs": industry_slugs or None,
                    "match_count": max_chunks,
                },
            ).execute()
        except Exception as e:
            logger.error(f"hybrid_search failed: {e}")
            return []
        return list(response.data or [])

    def _search_assets(self, embedding: list[float], max_assets: int) -> list[dict[str, Any]]:
        if max_assets == 0:
            return []
        try:
            response = self.supabase.rpc(
                "search_visual_assets",
                {
                    "query_embedding": embedding,
                    "document_ids": None,
                    "asset_types": None,
                    "match_count": max_assets,
                },
            ).execute()
        except Exception as e:
            logger.error(f"search_visual_assets failed: {e}")
            return []
        return list(response.data or [])

    def _apply_filters(
        self,
        chunks: list[dict[str, Any]],
        assets: list[dict[str, Any]],
        capabilities: set[str],
        industries: set[str],
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        document_ids = {row.get("document_id") for row in chunks + assets} - {None}
        try:
            tags = self.store.get_document_tags(sorted(document_ids))
        except Exception as e:
            logger.error(f"Failed to load document tags, dropping filtered results: {e}")
            return [], []

        def keep(row: dict[str, Any]) -> bool:
            return _matches(tags.get(row.get("document_id")), capabilities, industries)

        return [c for c in chunks if keep(c)], [a for a in assets if keep(a)]

    def _sign(self, asset: dict[str, Any]) -> dict[str, Any]:
        bucket = asset.get("bucket_name")
        path = asset.get("storage_path")
        if not bucket or not path:
            return asset
        return {
            **asset,
            "signed_url": create_signed_url(self.supabase, bucket, path, self.signed_url_ttl),
        }
