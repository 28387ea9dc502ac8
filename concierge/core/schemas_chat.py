"""Pydantic schemas for the chat endpoint, retrieval context and layout plans."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ComponentType = Literal[
    "HeroBlock",
    "StrategyCard",
    "VideoPlayer",
    "MetricGrid",
    "VisualAsset",
    "CaseStudyTeaser",
]


class ConversationTurn(BaseModel):
    """One prior message in the conversation."""
    role: Literal["user", "assistant"]
    content: str


class ChatFilters(BaseModel):
    """Optional taxonomy filters for a query."""
    capabilities: list[str] | None = None
    industries: list[str] | None = None


class ChatRequest(BaseModel):
    """Request body for POST /v1/chat."""
    model_config = ConfigDict(populate_by_name=True)

    query: str = ""
    filters: ChatFilters = Field(default_factory=ChatFilters)
    conversation_history: list[ConversationTurn] = Field(
        default_factory=list, alias="conversationHistory"
    )


class RetrievedContext(BaseModel):
    """Chunks and visual assets handed to the layout orchestrator.

    Rows are passed through as returned by the search RPCs.
    """
    chunks: list[dict[str, Any]] = Field(default_factory=list)
    visual_assets: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.chunks and not self.visual_assets


class LayoutComponent(BaseModel):
    """One UI component in a layout plan."""
    component: ComponentType
    props: dict[str, Any] = Field(default_factory=dict)


class LayoutPlan(BaseModel):
    layout: list[LayoutComponent] = Field(default_factory=list)


class OrchestratorOutput(BaseModel):
    """Response body for POST /v1/chat."""
    model_config = ConfigDict(populate_by_name=True)

    layout_plan: LayoutPlan = Field(default_factory=LayoutPlan, alias="layoutPlan")
    explanation: str = ""
    suggested_follow_ups: list[str] | None = Field(default=None, alias="suggestedFollowUps")
    contact_cta: bool = Field(default=False, alias="contactCTA")
    # Set when the fallback was returned because of an internal failure
    degraded: bool = Field(default=False, exclude=True)
