"""
Text generation client for deck content.

Callers depend on the ContentGenerator protocol; the app wires in an
OpenAI-compatible chat completions client at startup.
"""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog
from fastapi import Request

from pitchdeck.core.config import settings

logger = structlog.get_logger()


class ContentGenerationError(Exception):
    """Raised when the upstream model call fails or returns nothing usable."""


class ContentGenerator(Protocol):
    async def generate(
        self,
        prompt: str,
        *,
        system: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str: ...


class OpenAIContentGenerator:
    """Chat completions over httpx. One pooled client per application."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = 90.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.model = model
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers={"Authorization": f"Bearer {api_key}"},
        )

    @classmethod
    def from_settings(cls) -> OpenAIContentGenerator:
        return cls(
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.OPENAI_BASE_URL,
            model=settings.OPENAI_MODEL,
            timeout=settings.AI_REQUEST_TIMEOUT,
        )

    async def generate(
        self,
        prompt: str,
        *,
        system: str,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        try:
            resp = await self._client.post("/chat/completions", json=payload)
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as exc:
            logger.warning("content_generation_failed", model=self.model, error=str(exc))
            raise ContentGenerationError(str(exc)) from exc

        if not content:
            raise ContentGenerationError("Empty completion")
        return content

    async def aclose(self) -> None:
        await self._client.aclose()


def get_content_generator(request: Request) -> ContentGenerator:
    """FastAPI dependency: the generator created by the app lifespan."""
    return request.app.state.content_generator
