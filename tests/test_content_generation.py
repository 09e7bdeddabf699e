"""Tests for the chat completions client and deck assistant parsing."""

from __future__ import annotations

import json

import httpx
import pytest

from pitchdeck.modules.decks.schemas import StartupInfo
from pitchdeck.services.content_generator import (
    ContentGenerationError,
    OpenAIContentGenerator,
)
from pitchdeck.services.deck_ai import DeckAIAssistant

from conftest import FakeContentGenerator


def _generator(handler) -> OpenAIContentGenerator:
    client = httpx.AsyncClient(
        base_url="https://llm.test/v1", transport=httpx.MockTransport(handler)
    )
    return OpenAIContentGenerator(
        api_key="sk-test", base_url="https://llm.test/v1", model="gpt-4", client=client
    )


@pytest.mark.anyio
class TestOpenAIContentGenerator:
    async def test_posts_chat_completion_and_returns_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["payload"] = json.loads(request.content)
            return httpx.Response(
                200, json={"choices": [{"message": {"content": "Hello investors"}}]}
            )

        generator = _generator(handler)
        text = await generator.generate(
            "Write a headline", system="You are helpful", temperature=0.2, max_tokens=50
        )
        await generator.aclose()

        assert text == "Hello investors"
        assert seen["path"] == "/v1/chat/completions"
        assert seen["payload"]["model"] == "gpt-4"
        assert seen["payload"]["temperature"] == 0.2
        assert seen["payload"]["max_tokens"] == 50
        assert seen["payload"]["messages"][0] == {"role": "system", "content": "You are helpful"}

    async def test_http_error_is_wrapped(self):
        generator = _generator(lambda request: httpx.Response(503, json={"error": "busy"}))
        with pytest.raises(ContentGenerationError):
            await generator.generate("x", system="y")
        await generator.aclose()

    async def test_malformed_payload_is_wrapped(self):
        generator = _generator(lambda request: httpx.Response(200, json={"choices": []}))
        with pytest.raises(ContentGenerationError):
            await generator.generate("x", system="y")
        await generator.aclose()

    async def test_empty_content_is_an_error(self):
        generator = _generator(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": ""}}]})
        )
        with pytest.raises(ContentGenerationError):
            await generator.generate("x", system="y")
        await generator.aclose()


class TestDeckAIAssistantParsing:
    def setup_method(self):
        self.assistant = DeckAIAssistant(FakeContentGenerator())

    def test_parse_slides_with_surrounding_text(self):
        output = 'Deck:\n[{"type": "traction", "title": "Growth", "content": "3x YoY"}]\nDone'
        slides = self.assistant.parse_slides(output)
        assert len(slides) == 1
        assert slides[0]["type"] == "traction"
        assert slides[0]["content"]["body"] == "3x YoY"
        assert slides[0]["order"] == 1
        assert slides[0]["aiFeedback"]["tone"] == "professional"

    def test_empty_array_falls_back(self):
        slides = self.assistant.parse_slides("[]")
        assert [s["type"] for s in slides] == ["problem", "solution"]

    def test_non_object_items_fall_back(self):
        slides = self.assistant.parse_slides('["just a string"]')
        assert [s["title"] for s in slides] == ["The Problem", "Our Solution"]

    def test_prompt_defaults_for_missing_fields(self):
        prompt = self.assistant.build_generation_prompt(StartupInfo(), [])
        assert "Startup Name: TBD" in prompt
        assert "Funding Goal: $TBD" in prompt
        assert "Competitors: None specified" in prompt
        assert "General investor audience" in prompt

    def test_prompt_formats_money(self):
        prompt = self.assistant.build_generation_prompt(
            StartupInfo(name="Acme", funding_goal=2500000, stage="seed"), []
        )
        assert "Funding Goal: $2,500,000" in prompt
        assert "Stage: seed" in prompt


@pytest.mark.anyio
async def test_out_of_range_feedback_falls_back():
    generator = FakeContentGenerator()
    generator.replies.append('{"clarity": 14, "persuasiveness": 3}')
    feedback = await DeckAIAssistant(generator).analyze_slide({"headline": "x"}, "problem")
    assert feedback["clarity"] == 6
    assert feedback["suggestions"] == ["Review content for clarity"]
