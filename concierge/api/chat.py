"""Chat endpoint: retrieve portfolio context and assemble a layout plan."""

import asyncio

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from concierge.core.config import get_settings
from concierge.core.logging import get_logger
from concierge.core.orchestrator import LayoutOrchestrator, fallback_output
from concierge.core.retrieval import ContextRetriever
from concierge.core.schemas_chat import ChatRequest, OrchestratorOutput
from concierge.db.supabase_client import get_supabase

logger = get_logger(__name__)

router = APIRouter()

MIN_QUERY_CHARS = 3
MAX_QUERY_CHARS = 2000


def _get_retriever() -> ContextRetriever:
    settings = get_settings()
    return ContextRetriever(get_supabase(), signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS)


def _get_orchestrator() -> LayoutOrchestrator:
    return LayoutOrchestrator()


def _error_response(output: OrchestratorOutput) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "An error occurred processing your request",
            **output.model_dump(by_alias=True, exclude_none=True),
        },
    )


@router.post(
    "/chat",
    response_model=OrchestratorOutput,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def chat(request: ChatRequest):
    """
    Answer a portfolio question with a layout plan.

    Returns 400 for a query outside 3-2000 characters. Any failure after
    validation returns the fallback layout with status 500.
    """
    query = request.query.strip()
    if len(query) < MIN_QUERY_CHARS:
        raise HTTPException(status_code=400, detail="Query too short")
    if len(query) > MAX_QUERY_CHARS:
        raise HTTPException(
            status_code=400, detail=f"Query too long (max {MAX_QUERY_CHARS} characters)"
        )

    try:
        settings = get_settings()
        retriever = _get_retriever()
        logger.info(f"Processing query: {query[:50]}")

        context = await asyncio.to_thread(
            retriever.retrieve,
            query,
            capability_slugs=request.filters.capabilities,
            industry_slugs=request.filters.industries,
            max_chunks=settings.RETRIEVAL_MAX_CHUNKS,
            max_assets=settings.RETRIEVAL_MAX_ASSETS,
        )
        logger.info(
            f"Retrieved context: {len(context.chunks)} chunks, "
            f"{len(context.visual_assets)} assets"
        )

        result = await _get_orchestrator().orchestrate(
            user_query=query,
            context=context,
            conversation_history=request.conversation_history,
        )
    except Exception:
        logger.exception("Chat request failed")
        return _error_response(fallback_output())

    if result.degraded:
        return _error_response(result)

    logger.info(f"Generated layout with {len(result.layout_plan.layout)} components")
    return result
