"""Tests for deck CRUD, share links and AI-assisted editing."""

from __future__ import annotations

import json
import uuid

import pytest
from httpx import AsyncClient

from pitchdeck.models.decks import Deck

from conftest import SAMPLE_DECK_ID

pytestmark = pytest.mark.anyio

GENERATED_SLIDES = [
    {
        "type": "problem",
        "title": "Reporting Takes Weeks",
        "content": {
            "headline": "Finance teams wait weeks for numbers",
            "keyPoints": ["Manual exports", "Stale data"],
            "visualDescription": "Timeline of a month-end close",
            "callToAction": "Imagine real-time numbers",
        },
    },
    {
        "type": "business-model",
        "title": "",
        "content": {"headline": "Seat-based SaaS", "pricing": "$49/seat"},
    },
]


class TestDeckCrud:
    async def test_create_deck(self, client: AsyncClient, headers):
        resp = await client.post(
            "/api/decks",
            json={
                "title": "  Series A Deck  ",
                "startupInfo": {"name": "Acme", "stage": "series-a", "fundingGoal": 5000000},
                "tags": ["fintech"],
            },
            headers=headers,
        )
        assert resp.status_code == 201
        deck = resp.json()
        assert deck["title"] == "Series A Deck"
        assert deck["status"] == "draft"
        assert deck["slides"] == []
        assert deck["isPublic"] is False
        assert deck["aiGenerated"] is False
        assert deck["startupInfo"]["fundingGoal"] == 5000000
        assert deck["theme"]["fontFamily"] == "Inter"

    async def test_blank_title_is_rejected(self, client: AsyncClient, headers):
        resp = await client.post("/api/decks", json={"title": "   "}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "title"

    async def test_requires_authentication(self, client: AsyncClient):
        resp = await client.get("/api/decks")
        assert resp.status_code == 401
        assert resp.json()["error"] == "http_401"

    async def test_list_orders_by_last_update(self, client: AsyncClient, headers):
        first = (await client.post("/api/decks", json={"title": "First"}, headers=headers)).json()
        await client.post("/api/decks", json={"title": "Second"}, headers=headers)
        await client.put(
            f"/api/decks/{first['id']}", json={"description": "edited"}, headers=headers
        )

        resp = await client.get("/api/decks", headers=headers)
        assert resp.status_code == 200
        assert [d["title"] for d in resp.json()] == ["First", "Second"]
        assert resp.json()[0]["slideCount"] == 0

    async def test_get_foreign_deck_is_not_found(
        self, client: AsyncClient, sample_deck: Deck, other_headers
    ):
        resp = await client.get(f"/api/decks/{SAMPLE_DECK_ID}", headers=other_headers)
        assert resp.status_code == 404

    async def test_update_slides_normalises_content(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.put(
            f"/api/decks/{SAMPLE_DECK_ID}",
            json={
                "status": "review",
                "slides": [
                    {"type": "team", "title": "Team", "content": "Two repeat founders", "order": 0},
                    {
                        "type": "market",
                        "title": "Market",
                        "content": {"headline": "Big market", "tam": "$10B"},
                        "order": 1,
                    },
                ],
            },
            headers=headers,
        )
        assert resp.status_code == 200
        deck = resp.json()
        assert deck["status"] == "review"
        assert deck["title"] == "Acme Seed Round"
        assert deck["slides"][0]["content"]["body"] == "Two repeat founders"
        assert deck["slides"][1]["content"]["headline"] == "Big market"
        assert deck["slides"][1]["content"]["extensions"] == {"tam": "$10B"}

    async def test_update_rejects_unknown_slide_type(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.put(
            f"/api/decks/{SAMPLE_DECK_ID}",
            json={"slides": [{"type": "vision", "title": "Vision", "order": 0}]},
            headers=headers,
        )
        assert resp.status_code == 400

    async def test_delete_deck(self, client: AsyncClient, sample_deck: Deck, headers):
        resp = await client.delete(f"/api/decks/{SAMPLE_DECK_ID}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Deck deleted successfully"}

        resp = await client.get(f"/api/decks/{SAMPLE_DECK_ID}", headers=headers)
        assert resp.status_code == 404

    async def test_duplicate_deck(self, client: AsyncClient, sample_deck: Deck, headers):
        await client.put(
            f"/api/decks/{SAMPLE_DECK_ID}", json={"status": "published"}, headers=headers
        )

        resp = await client.post(f"/api/decks/{SAMPLE_DECK_ID}/duplicate", headers=headers)
        assert resp.status_code == 201
        copy = resp.json()
        assert copy["id"] != str(SAMPLE_DECK_ID)
        assert copy["title"] == "Acme Seed Round (Copy)"
        assert copy["status"] == "draft"
        assert len(copy["slides"]) == 3


class TestSharing:
    async def test_share_then_open_public_link(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(f"/api/decks/{SAMPLE_DECK_ID}/share", headers=headers)
        assert resp.status_code == 200
        token = resp.json()["shareToken"]
        assert len(token) == 64
        assert resp.json()["shareUrl"].endswith(f"/deck/{token}")

        first = await client.get(f"/api/decks/shared/{token}")
        assert first.status_code == 200
        public = first.json()
        assert public["title"] == "Acme Seed Round"
        assert public["startupInfo"] == {"name": "Acme", "industry": "SaaS", "stage": "seed"}
        assert public["slideCount"] == 3
        assert public["viewCount"] == 1
        assert "slides" not in public

        second = await client.get(f"/api/decks/shared/{token}")
        assert second.json()["viewCount"] == 2

    async def test_resharing_rotates_token(self, client: AsyncClient, sample_deck: Deck, headers):
        old = (await client.post(f"/api/decks/{SAMPLE_DECK_ID}/share", headers=headers)).json()
        new = (await client.post(f"/api/decks/{SAMPLE_DECK_ID}/share", headers=headers)).json()
        assert old["shareToken"] != new["shareToken"]

        resp = await client.get(f"/api/decks/shared/{old['shareToken']}")
        assert resp.status_code == 404

    async def test_unknown_token(self, client: AsyncClient):
        resp = await client.get("/api/decks/shared/not-a-token")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Deck not found or not shared"


class TestGenerateDeck:
    async def test_generated_slides_are_normalised(
        self, client: AsyncClient, sample_deck: Deck, headers, fake_generator
    ):
        fake_generator.replies.append(
            "Here is your deck:\n" + json.dumps(GENERATED_SLIDES) + "\nGood luck!"
        )

        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/generate",
            json={
                "startupInfo": {"name": "Acme", "industry": "Fintech", "stage": "seed"},
                "targetInvestors": [{"type": "vc", "focus": ["fintech"]}],
            },
            headers=headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Deck generated successfully"

        deck = data["deck"]
        assert deck["aiGenerated"] is True
        assert deck["aiPrompt"] == "Generated deck for Acme in Fintech"
        assert [s["type"] for s in deck["slides"]] == ["problem", "custom"]
        assert [s["order"] for s in deck["slides"]] == [1, 2]
        assert deck["slides"][1]["title"] == "Slide 2"
        assert deck["slides"][1]["content"]["extensions"] == {"pricing": "$49/seat"}
        assert deck["slides"][0]["aiFeedback"]["clarity"] == 8
        assert deck["targetInvestors"][0]["type"] == "vc"

        call = fake_generator.calls[0]
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 4000
        assert "Startup Name: Acme" in call["prompt"]
        assert "Target investors: vc focused on fintech" in call["prompt"]

    async def test_unparseable_output_falls_back(
        self, client: AsyncClient, sample_deck: Deck, headers, fake_generator
    ):
        fake_generator.replies.append("I cannot help with that.")

        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/generate",
            json={"startupInfo": {"name": "Acme"}},
            headers=headers,
        )
        assert resp.status_code == 200
        slides = resp.json()["deck"]["slides"]
        assert [s["title"] for s in slides] == ["The Problem", "Our Solution"]
        assert slides[0]["aiFeedback"]["clarity"] == 7

    async def test_generator_failure_is_a_server_error(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/generate",
            json={"startupInfo": {"name": "Acme"}},
            headers=headers,
        )
        assert resp.status_code == 500
        assert resp.json()["message"] == "Failed to generate deck content"

        deck = await client.get(f"/api/decks/{SAMPLE_DECK_ID}", headers=headers)
        assert len(deck.json()["slides"]) == 3


class TestSlideAssistance:
    async def test_analyze_stores_feedback(
        self, client: AsyncClient, sample_deck: Deck, headers, fake_generator
    ):
        fake_generator.replies.append(
            'Sure! {"clarity": 9, "persuasiveness": 7, '
            '"suggestions": ["Quantify the pain"], "tone": "confident"}'
        )

        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/slides/0/analyze", headers=headers
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["slideIndex"] == 0
        assert data["feedback"] == {
            "clarity": 9,
            "persuasiveness": 7,
            "suggestions": ["Quantify the pain"],
            "tone": "confident",
        }
        assert fake_generator.calls[0]["temperature"] == 0.3

        deck = await client.get(f"/api/decks/{SAMPLE_DECK_ID}", headers=headers)
        assert deck.json()["slides"][0]["aiFeedback"]["clarity"] == 9

    async def test_analyze_falls_back_on_generator_failure(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/slides/1/analyze", headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["feedback"] == {
            "clarity": 6,
            "persuasiveness": 6,
            "suggestions": ["Review content for clarity"],
            "tone": "professional",
        }

    async def test_analyze_out_of_range_index(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/slides/5/analyze", headers=headers
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid slide index"

    async def test_suggestions(
        self, client: AsyncClient, sample_deck: Deck, headers, fake_generator
    ):
        fake_generator.replies.append("Lead with a customer quote.")

        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/slides/2/suggestions",
            json={"targetInvestor": {"type": "angel", "focus": ["saas"]}},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json() == {"slideIndex": 2, "suggestions": "Lead with a customer quote."}
        assert "Target Investor: angel focused on saas" in fake_generator.calls[0]["prompt"]

    async def test_suggestions_fall_back_without_body(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/slides/0/suggestions", headers=headers
        )
        assert resp.status_code == 200
        assert resp.json()["suggestions"].startswith("Review content for clarity")

    async def test_customize_keeps_content_and_stores_tailoring(
        self, client: AsyncClient, sample_deck: Deck, headers, fake_generator
    ):
        fake_generator.replies.extend(["VC take 1", "VC take 2", "VC take 3"])

        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/customize",
            json={"investorProfile": {"type": "vc", "focus": ["saas"], "stage": ["seed"]}},
            headers=headers,
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["message"] == "Deck customized successfully"
        slides = data["deck"]["slides"]
        assert [s["customizations"]["vc"] for s in slides] == [
            "VC take 1",
            "VC take 2",
            "VC take 3",
        ]
        assert slides[0]["content"]["headline"] == "Analytics is slow"
        assert data["deck"]["targetInvestors"] == [
            {"type": "vc", "focus": ["saas"], "stage": ["seed"]}
        ]

    async def test_customize_requires_investor_type(
        self, client: AsyncClient, sample_deck: Deck, headers
    ):
        resp = await client.post(
            f"/api/decks/{SAMPLE_DECK_ID}/customize",
            json={"investorProfile": {"focus": ["saas"]}},
            headers=headers,
        )
        assert resp.status_code == 400
        assert resp.json()["errors"][0]["field"] == "investorProfile.type"

    async def test_unknown_deck(self, client: AsyncClient, headers):
        resp = await client.post(f"/api/decks/{uuid.uuid4()}/slides/0/analyze", headers=headers)
        assert resp.status_code == 404
