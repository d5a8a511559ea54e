"""Thin wrapper around the OpenAI chat completions API."""
from __future__ import annotations

import logging
from typing import Optional

import openai

from growth_map.core.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a growth architect for a personal development product. Always answer with a single JSON object."


class CompletionError(RuntimeError):
    """The completion service answered without usable content."""


class CompletionClient:
    """Sends one prompt, returns the raw completion text."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = "gpt-4.1",
        temperature: float = 0.3,
        timeout: float = 30.0,
    ) -> None:
        self._client = openai.OpenAI(api_key=api_key, timeout=timeout, max_retries=0)
        self.model = model
        self.temperature = temperature

    def complete(self, prompt: str) -> str:
        completion = self._client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            raise CompletionError("Completion response did not contain any content")
        return content


def build_completion_client(settings: Settings) -> Optional[CompletionClient]:
    """Return a client when an API key is configured, otherwise None."""
    if not settings.openai_api_key:
        logger.info("OPENAI_API_KEY missing; plans will use heuristic generation.")
        return None
    return CompletionClient(
        settings.openai_api_key,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout=settings.openai_timeout_seconds,
    )
