"""
DeckAIAssistant: prompt construction and response parsing for deck content.

Model calls go through a ContentGenerator. Generation failures propagate as
ContentGenerationError; feedback, suggestions and customisation degrade to
fixed fallback content instead.
"""

from __future__ import annotations

import json
import re
from typing import Any

import structlog
from fastapi import Depends
from pydantic import ValidationError

from pitchdeck.models.enums import SlideType
from pitchdeck.modules.decks.schemas import (
    AIFeedback,
    CustomizationTarget,
    Slide,
    StartupInfo,
    TargetInvestor,
    slide_to_document,
)
from pitchdeck.services.content_generator import (
    ContentGenerationError,
    ContentGenerator,
    get_content_generator,
)

logger = structlog.get_logger()

GENERATION_SYSTEM_PROMPT = (
    "You are an expert pitch deck consultant with deep knowledge of YC, Sequoia, "
    "and Techstars best practices. Generate compelling, investor-ready pitch deck content."
)
ANALYSIS_SYSTEM_PROMPT = (
    "You are an expert pitch deck consultant. Provide constructive, actionable feedback."
)
CUSTOMIZATION_SYSTEM_PROMPT = (
    "You are an expert at tailoring pitch content for specific investors."
)
SUGGESTION_SYSTEM_PROMPT = (
    "You are an expert pitch deck consultant. "
    "Provide specific, actionable improvement suggestions."
)

FALLBACK_SUGGESTIONS = (
    "Review content for clarity and impact. Consider adding more specific data and metrics."
)

_SLIDE_TYPES = {t.value for t in SlideType}


def _money(value: float | None, default: str) -> str:
    if value is None:
        return default
    return f"{value:,.0f}"


def _or(value: Any, default: str) -> str:
    return str(value) if value not in (None, "") else default


def _describe_investor(investor: TargetInvestor | CustomizationTarget) -> str:
    kind = investor.type.value if investor.type else "investor"
    return f"{kind} focused on {', '.join(investor.focus)}"


def fallback_feedback() -> dict[str, Any]:
    return {
        "clarity": 6,
        "persuasiveness": 6,
        "suggestions": ["Review content for clarity"],
        "tone": "professional",
    }


class DeckAIAssistant:
    def __init__(self, generator: ContentGenerator) -> None:
        self.generator = generator

    # ── Deck generation ────────────────────────────────────────────────────────

    def build_generation_prompt(
        self, info: StartupInfo, target_investors: list[TargetInvestor]
    ) -> str:
        if target_investors:
            investor_context = "Target investors: " + ", ".join(
                _describe_investor(inv) for inv in target_investors
            )
        else:
            investor_context = "General investor audience"

        fin = info.financials
        stage = info.stage.value if info.stage else None
        competitors = ", ".join(info.competitors) if info.competitors else "None specified"

        return f"""Generate a complete pitch deck for the following startup:

Startup Name: {_or(info.name, "TBD")}
Industry: {_or(info.industry, "TBD")}
Stage: {_or(stage, "TBD")}
Funding Goal: ${_money(info.funding_goal, "TBD")}
Current Funding: ${_money(info.current_funding, "0")}
Team Size: {_or(info.team_size, "TBD")}
Founded: {_or(info.founded_year, "TBD")}

Problem: {_or(info.problem, "Not specified")}
Solution: {_or(info.solution, "Not specified")}
Market Size: {_or(info.market_size, "Not specified")}
Traction: {_or(info.traction, "Not specified")}
Competitors: {competitors}
Business Model: {_or(info.business_model, "Not specified")}

Financials:
- Revenue: ${_money(fin.revenue if fin else None, "0")}
- Growth: {_or(fin.growth if fin else None, "0")}%
- Burn Rate: ${_money(fin.burn_rate if fin else None, "0")}/month
- Runway: {_or(fin.runway if fin else None, "0")} months

{investor_context}

Generate the following slides as a JSON array:
1. Problem Slide (title, key points, visual description)
2. Solution Slide (title, key points, visual description)
3. Market Opportunity Slide (title, key points, visual description)
4. Traction Slide (title, key points, visual description)
5. Business Model Slide (title, key points, visual description)
6. Team Slide (title, key points, visual description)
7. Financials Slide (title, key points, visual description)
8. Ask Slide (title, key points, visual description)

Format each slide as:
{{
  "type": "slide_type",
  "title": "Slide Title",
  "content": {{
    "headline": "Main headline",
    "keyPoints": ["Point 1", "Point 2", "Point 3"],
    "visualDescription": "Description of suggested visual",
    "callToAction": "Action item for this slide"
  }}
}}

Make content compelling, data-driven, and tailored to the startup's stage and target investors."""

    async def generate_pitch_deck(
        self, info: StartupInfo, target_investors: list[TargetInvestor]
    ) -> list[dict[str, Any]]:
        """Generate slide documents. Raises ContentGenerationError if the call fails."""
        prompt = self.build_generation_prompt(info, target_investors)
        content = await self.generator.generate(
            prompt,
            system=GENERATION_SYSTEM_PROMPT,
            temperature=0.7,
            max_tokens=4000,
        )
        return self.parse_slides(content)

    def parse_slides(self, content: str) -> list[dict[str, Any]]:
        """Extract the JSON slide array from model output.

        Falls back to the two-slide skeleton when nothing usable is found.
        """
        try:
            match = re.search(r"\[.*\]", content, re.DOTALL)
            if not match:
                raise ValueError("No JSON array in model output")
            raw = json.loads(match.group())
            if not isinstance(raw, list) or not raw:
                raise ValueError("Expected a non-empty list of slides")

            slides = []
            for index, item in enumerate(raw):
                slide_type = item.get("type")
                slides.append(
                    Slide(
                        type=slide_type if slide_type in _SLIDE_TYPES else SlideType.CUSTOM,
                        title=item.get("title") or f"Slide {index + 1}",
                        content=item.get("content"),
                        order=index + 1,
                        ai_feedback=AIFeedback(
                            clarity=8, persuasiveness=8, suggestions=[], tone="professional"
                        ),
                    )
                )
        except (ValueError, TypeError, AttributeError) as exc:
            logger.warning("deck_generation_parse_failed", error=str(exc))
            return self.fallback_slides()

        return [slide_to_document(s) for s in slides]

    def fallback_slides(self) -> list[dict[str, Any]]:
        feedback = AIFeedback(clarity=7, persuasiveness=7, suggestions=[], tone="professional")
        slides = [
            Slide(
                type=SlideType.PROBLEM,
                title="The Problem",
                content={
                    "headline": "What problem are you solving?",
                    "keyPoints": [
                        "Define the problem clearly",
                        "Show market pain points",
                        "Quantify the opportunity",
                    ],
                    "visualDescription": "Problem statement with supporting data",
                    "callToAction": "Clearly articulate the problem",
                },
                order=1,
                ai_feedback=feedback,
            ),
            Slide(
                type=SlideType.SOLUTION,
                title="Our Solution",
                content={
                    "headline": "How do you solve it?",
                    "keyPoints": [
                        "Your unique approach",
                        "Key differentiators",
                        "Product/market fit",
                    ],
                    "visualDescription": "Solution overview with key features",
                    "callToAction": "Demonstrate your solution",
                },
                order=2,
                ai_feedback=feedback,
            ),
        ]
        return [slide_to_document(s) for s in slides]

    # ── Slide feedback ─────────────────────────────────────────────────────────

    async def analyze_slide(self, content: dict[str, Any], slide_type: str) -> dict[str, Any]:
        prompt = f"""Analyze this pitch deck slide and provide feedback:

Slide Type: {slide_type}
Content: {json.dumps(content)}

Respond ONLY with valid JSON in this exact structure:
{{
  "clarity": <integer 1-10>,
  "persuasiveness": <integer 1-10>,
  "suggestions": ["suggestion1", "suggestion2"],
  "tone": "professional|casual|confident|humble"
}}"""
        try:
            raw = await self.generator.generate(
                prompt, system=ANALYSIS_SYSTEM_PROMPT, temperature=0.3, max_tokens=1000
            )
        except ContentGenerationError:
            return fallback_feedback()

        try:
            match = re.search(r"\{.*\}", raw, re.DOTALL)
            feedback = AIFeedback.model_validate(json.loads(match.group() if match else raw))
        except (ValueError, ValidationError) as exc:
            logger.warning("slide_analysis_parse_failed", error=str(exc))
            return fallback_feedback()
        return feedback.model_dump(mode="json", by_alias=True)

    async def customize_for_investor(
        self, content: dict[str, Any], investor: CustomizationTarget
    ) -> Any:
        """Tailored slide content as free text, or the original content on failure."""
        prompt = f"""Customize this pitch deck content for a specific investor:

Investor Profile:
- Type: {investor.type.value}
- Focus Areas: {", ".join(investor.focus)}
- Investment Stage: {", ".join(investor.stage)}
- Location: {_or(investor.location, "Any")}

Original Content: {json.dumps(content)}

Provide customized content that emphasizes aspects most relevant to this investor."""
        try:
            return await self.generator.generate(
                prompt, system=CUSTOMIZATION_SYSTEM_PROMPT, temperature=0.5, max_tokens=2000
            )
        except ContentGenerationError:
            return content

    async def suggest_improvements(
        self,
        content: dict[str, Any],
        slide_type: str,
        target_investor: TargetInvestor | None = None,
    ) -> str:
        prompt = f"""Suggest improvements for this pitch deck slide:

Slide Type: {slide_type}
Content: {json.dumps(content)}
"""
        if target_investor is not None:
            prompt += f"\nTarget Investor: {_describe_investor(target_investor)}"
        prompt += (
            "\n\nProvide specific, actionable suggestions to improve clarity, "
            "persuasiveness, and impact."
        )
        try:
            return await self.generator.generate(
                prompt, system=SUGGESTION_SYSTEM_PROMPT, temperature=0.4, max_tokens=1500
            )
        except ContentGenerationError:
            return FALLBACK_SUGGESTIONS


def get_deck_assistant(
    generator: ContentGenerator = Depends(get_content_generator),
) -> DeckAIAssistant:
    """FastAPI dependency: an assistant bound to the app's content generator."""
    return DeckAIAssistant(generator)
