"""Tests for layout orchestration with a mocked Anthropic client."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from concierge.core.orchestrator import (
    LayoutOrchestrator,
    fallback_output,
    format_context,
    parse_orchestrator_response,
)
from concierge.core.orchestrator_prompts import (
    FALLBACK_EXPLANATION,
    LAYOUT_PARSE_ERROR_EXPLANATION,
    NO_CONTENT_SECTION,
    ORCHESTRATOR_SYSTEM_PROMPT,
)
from concierge.core.schemas_chat import ConversationTurn, RetrievedContext

LAYOUT = {
    "layout": [
        {"component": "HeroBlock", "props": {"title": "Launching with clarity"}},
        {
            "component": "CaseStudyTeaser",
            "props": {"title": "Renew Home", "client": "Renew Home", "slug": "renew-home"},
        },
    ]
}


def _response_text(layout=LAYOUT, extra=""):
    return (
        "Here's how we've helped energy brands launch.\n\n"
        f"```json\n{json.dumps(layout)}\n```\n\n"
        "These projects show our go-to-market work.\n\n"
        "**Want to explore further?**\n"
        "- How did you measure launch success?\n"
        "- Can you show more sustainability work?"
        f"{extra}"
    )


def _mock_client(text=None, error=None):
    client = MagicMock()
    if error is not None:
        client.messages.create = AsyncMock(side_effect=error)
    else:
        block = MagicMock(type="text", text=text)
        client.messages.create = AsyncMock(return_value=MagicMock(content=[block]))
    return client


class TestParseResponse:
    def test_layout_explanation_and_follow_ups(self):
        output = parse_orchestrator_response(_response_text())

        assert [c.component for c in output.layout_plan.layout] == ["HeroBlock", "CaseStudyTeaser"]
        assert "```" not in output.explanation
        assert "Want to explore" not in output.explanation
        assert output.explanation.endswith("go-to-market work.")
        assert output.suggested_follow_ups == [
            "How did you measure launch success?",
            "Can you show more sustainability work?",
        ]
        assert output.contact_cta is False
        assert output.degraded is False

    def test_contact_phrase_sets_cta(self):
        text = _response_text(extra="\n\nOr contact our Strategy Lead to go deeper.")
        assert parse_orchestrator_response(text).contact_cta is True

    def test_no_json_block(self):
        output = parse_orchestrator_response("We don't have work on that topic yet.")

        assert output.layout_plan.layout == []
        assert output.contact_cta is True
        assert output.explanation == "We don't have work on that topic yet."
        assert output.suggested_follow_ups is None

    def test_invalid_json(self):
        output = parse_orchestrator_response("Intro\n```json\n{not json}\n```")

        assert output.layout_plan.layout == []
        assert output.explanation == LAYOUT_PARSE_ERROR_EXPLANATION
        assert output.contact_cta is True
        assert output.degraded is False

    def test_unknown_component_rejected(self):
        layout = {"layout": [{"component": "Carousel", "props": {}}]}
        output = parse_orchestrator_response(_response_text(layout=layout))

        assert output.explanation == LAYOUT_PARSE_ERROR_EXPLANATION
        assert output.layout_plan.layout == []


class TestFormatContext:
    def test_empty_context(self):
        assert format_context(RetrievedContext()) == NO_CONTENT_SECTION

    def test_chunks_and_assets(self):
        context = RetrievedContext(
            chunks=[
                {
                    "document_title": "AIG: Investor Day",
                    "client_name": "AIG",
                    "slug": "aig-investor-day",
                    "content": "Visual narrative for investors.",
                    "combined_score": 0.81234,
                }
            ],
            visual_assets=[{"asset_type": "image", "signed_url": "https://signed/x.png"}],
        )

        text = format_context(context)

        assert "[Chunk 1]" in text
        assert "Client: AIG" in text
        assert "Relevance Score: 0.812" in text
        assert "Vimeo URL: None" in text
        assert "[Asset 1]" in text
        assert "Signed URL: https://signed/x.png" in text
        assert "Relevance Score: N/A" in text


class TestOrchestrate:
    @pytest.mark.asyncio
    async def test_success(self):
        client = _mock_client(text=_response_text())
        orchestrator = LayoutOrchestrator(client=client, model="test-model", max_tokens=1000)
        history = [
            ConversationTurn(role="user", content="Hi"),
            ConversationTurn(role="assistant", content="Hello, how can I help?"),
        ]

        output = await orchestrator.orchestrate("energy launches", RetrievedContext(), history)

        assert len(output.layout_plan.layout) == 2
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["max_tokens"] == 1000
        assert kwargs["system"] == ORCHESTRATOR_SYSTEM_PROMPT
        assert [m["role"] for m in kwargs["messages"]] == ["user", "assistant", "user"]
        assert "energy launches" in kwargs["messages"][-1]["content"]
        assert NO_CONTENT_SECTION in kwargs["messages"][-1]["content"]

    @pytest.mark.asyncio
    async def test_api_error_returns_fallback(self):
        orchestrator = LayoutOrchestrator(client=_mock_client(error=RuntimeError("overloaded")))

        output = await orchestrator.orchestrate("anything", RetrievedContext())

        assert output.degraded is True
        assert output.contact_cta is True
        assert output.layout_plan.layout == []
        assert output.explanation == FALLBACK_EXPLANATION

    @pytest.mark.asyncio
    async def test_no_text_block_returns_fallback(self):
        client = MagicMock()
        client.messages.create = AsyncMock(
            return_value=MagicMock(content=[MagicMock(type="tool_use")])
        )

        output = await LayoutOrchestrator(client=client).orchestrate("q", RetrievedContext())

        assert output.degraded is True


def test_fallback_output_serialization():
    body = fallback_output().model_dump(by_alias=True, exclude_none=True)

    assert body == {
        "layoutPlan": {"layout": []},
        "explanation": FALLBACK_EXPLANATION,
        "contactCTA": True,
    }
