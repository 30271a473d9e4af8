"""Tag suggestions from an external text model.

Best-effort only: every failure is logged and turns into an empty list, so
event creation never waits on or fails because of this call.
"""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

import httpx
from pydantic import BaseModel, ValidationError

from src.config.settings import settings

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are an event tag suggestion expert. Based on the event details provided, \
suggest relevant tags to categorize the event.

Event Name: {name}
Event Description: {description}
Event Date: {date}
Event Location: {location}

Suggest at least 5 relevant tags. Answer with JSON of the form {{"tags": ["tag", ...]}}."""


@dataclass(frozen=True)
class TagSuggestionInput:
    name: str
    description: str
    date: str
    location: str


class TagSuggestionOutput(BaseModel):
    tags: list[str]


class TagSuggester(Protocol):
    """Protocol for tag suggestion collaborators."""

    async def __call__(self, event: TagSuggestionInput) -> list[str]:
        """Return suggested tags, or an empty list if none could be produced."""
        ...


class GeminiConfig(Protocol):
    gemini_api_key: str
    gemini_model: str
    gemini_api_url: str
    tag_suggestion_timeout: float


class GeminiTagSuggester:
    """Default tag suggester using the Gemini generateContent HTTP API."""

    def __init__(
        self,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
        config: GeminiConfig = settings,
    ):
        self._http_client_class = http_client_class
        self._config = config

    async def __call__(self, event: TagSuggestionInput) -> list[str]:
        if not self._config.gemini_api_key:
            logger.info("Tag suggestions disabled: no Gemini API key configured")
            return []

        try:
            text = await self._generate(event)
            output = TagSuggestionOutput.model_validate(json.loads(text))
        except (httpx.HTTPError, json.JSONDecodeError, ValidationError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Tag suggestion failed for '{event.name}': {e}")
            return []

        # drop blanks and repeats, keep the model's ordering
        seen: set[str] = set()
        tags = []
        for tag in output.tags:
            tag = tag.strip()
            if tag and tag.lower() not in seen:
                seen.add(tag.lower())
                tags.append(tag)
        return tags

    async def _generate(self, event: TagSuggestionInput) -> str:
        prompt = PROMPT_TEMPLATE.format(
            name=event.name,
            description=event.description,
            date=event.date,
            location=event.location,
        )
        async with self._http_client_class(timeout=self._config.tag_suggestion_timeout) as client:
            response = await client.post(
                f"{self._config.gemini_api_url}/models/{self._config.gemini_model}:generateContent",
                headers={
                    "x-goog-api-key": self._config.gemini_api_key,
                    "Content-Type": "application/json",
                },
                json={
                    "contents": [{"parts": [{"text": prompt}]}],
                    "generationConfig": {"responseMimeType": "application/json"},
                },
            )
            response.raise_for_status()
            data = response.json()
        return data["candidates"][0]["content"]["parts"][0]["text"]


def get_tag_suggester() -> TagSuggester:
    """Factory for the tag suggester. Override in tests."""
    return GeminiTagSuggester(http_client_class=httpx.AsyncClient, config=settings)
