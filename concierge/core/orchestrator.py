"""Layout orchestration: query + retrieved context -> layout plan.

Claude selects and arranges components from a fixed registry (HeroBlock,
StrategyCard, VideoPlayer, MetricGrid, VisualAsset, CaseStudyTeaser) and
explains the choice. The orchestrator always returns an OrchestratorOutput;
internal failures produce the fallback with ``degraded`` set so the HTTP
layer can choose a status code.
"""

import json
import re

from anthropic import AsyncAnthropic
from pydantic import ValidationError

from concierge.core.config import get_settings
from concierge.core.logging import get_logger
from concierge.core.orchestrator_prompts import (
    FALLBACK_EXPLANATION,
    LAYOUT_PARSE_ERROR_EXPLANATION,
    NO_CONTENT_SECTION,
    ORCHESTRATOR_SYSTEM_PROMPT,
    USER_MESSAGE_TEMPLATE,
)
from concierge.core.schemas_chat import (
    ConversationTurn,
    LayoutPlan,
    OrchestratorOutput,
    RetrievedContext,
)

logger = get_logger(__name__)

_JSON_BLOCK_RE = re.compile(r"```json\s*(.*?)\s*```", re.DOTALL)
_FOLLOW_UP_RE = re.compile(
    r"(?:\*\*Want to explore.*?\*\*|Follow-up questions:)(.*?)(?:\Z|\n\n)",
    re.DOTALL | re.IGNORECASE,
)
_FOLLOW_UP_HEADER = "**Want to explore"
_CONTACT_PHRASE = "contact our strategy lead"


def fallback_output() -> OrchestratorOutput:
    """Safe response used whenever orchestration fails."""
    return OrchestratorOutput(
        layout_plan=LayoutPlan(),
        explanation=FALLBACK_EXPLANATION,
        contact_cta=True,
        degraded=True,
    )


def _score(value: object) -> str:
    return f"{value:.3f}" if isinstance(value, (int, float)) else "N/A"


def format_context(context: RetrievedContext) -> str:
    """Render retrieved chunks and assets as the prompt's context section."""
    sections = []

    if context.chunks:
        rendered = []
        for i, chunk in enumerate(context.chunks, start=1):
            rendered.append(
                f"[Chunk {i}]\n"
                f"Case Study: {chunk.get('document_title') or 'N/A'}\n"
                f"Client: {chunk.get('client_name') or 'N/A'}\n"
                f"Document Type: {chunk.get('document_type') or 'case_study'}\n"
                f"Slug: {chunk.get('slug') or 'N/A'}\n"
                f"Chunk Type: {chunk.get('chunk_type') or 'text'}\n"
                f"Vimeo URL: {chunk.get('vimeo_url') or 'None'}\n"
                f"Thumbnail URL: {chunk.get('thumbnail_url') or 'None'}\n"
                f"Content: {chunk.get('content', '')}\n"
                f"Relevance Score: {_score(chunk.get('combined_score'))}"
            )
        sections.append("## RETRIEVED CONTENT CHUNKS\n" + "\n\n".join(rendered))

    if context.visual_assets:
        rendered = []
        for i, asset in enumerate(context.visual_assets, start=1):
            rendered.append(
                f"[Asset {i}]\n"
                f"Type: {asset.get('asset_type') or 'N/A'}\n"
                f"Caption: {asset.get('caption') or 'N/A'}\n"
                f"Alt Text: {asset.get('alt_text') or 'N/A'}\n"
                f"Description: {asset.get('description') or 'N/A'}\n"
                f"Signed URL: {asset.get('signed_url') or 'UNAVAILABLE'}\n"
                f"Relevance Score: {_score(asset.get('similarity_score'))}"
            )
        sections.append("## AVAILABLE VISUAL ASSETS\n" + "\n\n".join(rendered))

    if not sections:
        return NO_CONTENT_SECTION

    return "\n\n---\n\n".join(sections)


def _extract_follow_ups(text: str) -> list[str]:
    match = _FOLLOW_UP_RE.search(text)
    if not match:
        return []

    questions = []
    for line in match.group(1).splitlines():
        question = line.strip().lstrip("-•*0123456789. ").strip()
        if len(question) > 10 and question.endswith("?"):
            questions.append(question)
    return questions


def parse_orchestrator_response(response: str) -> OrchestratorOutput:
    """
    Split a model response into layout plan, explanation and follow-ups.

    A response whose JSON block can't be parsed into a LayoutPlan yields an
    empty layout with contact_cta set. That is a normal answer, not a failure.
    """
    layout_plan = LayoutPlan()
    explanation = response

    match = _JSON_BLOCK_RE.search(response)
    if match:
        try:
            layout_plan = LayoutPlan.model_validate(json.loads(match.group(1)))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse layout JSON: {e}")
            return OrchestratorOutput(
                layout_plan=LayoutPlan(),
                explanation=LAYOUT_PARSE_ERROR_EXPLANATION,
                contact_cta=True,
            )
        explanation = (response[: match.start()] + response[match.end() :]).strip()

    follow_ups = _extract_follow_ups(explanation)
    contact_cta = not layout_plan.layout or _CONTACT_PHRASE in response.lower()

    return OrchestratorOutput(
        layout_plan=layout_plan,
        explanation=explanation.split(_FOLLOW_UP_HEADER)[0].strip(),
        suggested_follow_ups=follow_ups or None,
        contact_cta=contact_cta,
    )


class LayoutOrchestrator:
    """Builds layout plans with the Anthropic Messages API."""

    def __init__(
        self,
        client: AsyncAnthropic | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
    ):
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    def _get_client(self) -> AsyncAnthropic:
        if self._client is None:
            settings = get_settings()
            self._client = AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)
        return self._client

    async def orchestrate(
        self,
        user_query: str,
        context: RetrievedContext,
        conversation_history: list[ConversationTurn] | None = None,
    ) -> OrchestratorOutput:
        """
        Generate a layout plan for a query.

        Args:
            user_query: The user's question
            context: Retrieved chunks and visual assets
            conversation_history: Prior turns, oldest first

        Returns:
            OrchestratorOutput; the degraded fallback on any internal failure
        """
        messages = [
            {"role": turn.role, "content": turn.content} for turn in conversation_history or []
        ]
        messages.append(
            {
                "role": "user",
                "content": USER_MESSAGE_TEMPLATE.format(
                    query=user_query, context=format_context(context)
                ),
            }
        )

        try:
            settings = get_settings()
            response = await self._get_client().messages.create(
                model=self._model or settings.ORCHESTRATOR_MODEL,
                max_tokens=self._max_tokens or settings.ORCHESTRATOR_MAX_TOKENS,
                system=ORCHESTRATOR_SYSTEM_PROMPT,
                messages=messages,
            )

            text = next(
                (block.text for block in response.content if block.type == "text"), None
            )
            if text is None:
                raise ValueError("No text content in response")

            return parse_orchestrator_response(text)

        except Exception as e:
            logger.error(f"Orchestrator error: {e}")
            return fallback_output()
