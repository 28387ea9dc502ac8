"""API router for v1 endpoints."""

from fastapi import APIRouter

from concierge.api import chat, documents

router = APIRouter()

# Query -> retrieval -> layout plan
router.include_router(chat.router, tags=["chat"])
router.include_router(documents.router, tags=["documents"])
