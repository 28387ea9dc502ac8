"""Document detail endpoints for the slugs referenced by layout plans."""

from typing import Any

from fastapi import APIRouter, HTTPException

from concierge.core.logging import get_logger
from concierge.db.documents import DocumentStore
from concierge.db.supabase_client import get_supabase

logger = get_logger(__name__)

router = APIRouter()


def _get_store() -> DocumentStore:
    return DocumentStore(get_supabase())


@router.get("/case-study/{slug}")
def get_case_study(slug: str) -> dict[str, Any]:
    """Case study with its chunks in reading order and its visual assets."""
    store = _get_store()
    case_study = store.get_document_by_slug(slug, doc_type="case_study")
    if not case_study:
        raise HTTPException(status_code=404, detail="Case study not found")

    return {
        "caseStudy": case_study,
        "chunks": store.list_chunks(case_study["id"]),
        "assets": store.list_visual_assets(case_study["id"]),
    }


@router.get("/article/{slug}")
def get_article(slug: str) -> dict[str, Any]:
    """Article with its chunks in reading order and its topics."""
    store = _get_store()
    article = store.get_document_by_slug(slug, doc_type="article")
    if not article:
        raise HTTPException(status_code=404, detail="Article not found")

    return {
        "article": article,
        "chunks": store.list_chunks(article["id"]),
        "topics": store.list_topics(article["id"]),
    }
