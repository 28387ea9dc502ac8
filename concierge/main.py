"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from concierge.api import router as api_router

SERVICE_NAME = "article-group-concierge"
VERSION = "0.1.0"

app = FastAPI(
    title="Article Group Concierge",
    description="Portfolio retrieval and layout orchestration service",
    version=VERSION,
)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={"status": "ok", "service": SERVICE_NAME, "version": VERSION},
        status_code=200,
    )


# Include v1 API router
app.include_router(api_router, prefix="/v1", tags=["v1"])
