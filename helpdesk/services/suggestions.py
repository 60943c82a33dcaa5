from __future__ import annotations

import json
import os
from functools import lru_cache
from typing import Any

from google import genai
from google.genai import types
from loguru import logger

from helpdesk.core.config import get_settings
from helpdesk.schemas import Suggestion, Ticket

FALLBACK_TEXT = "Could not generate an AI suggestion at this time."

SYSTEM_INSTRUCTION = (
    "Keep advice professional, concise, and specific to a school environment. "
    "If you found specific documentation or helpful links, mention them."
)


def build_prompt(ticket: Ticket, *, use_search: bool = True) -> str:
    lines = [
        "You are an expert school IT support agent. Analyze this ticket and provide a short, "
        "actionable 3-step solution or troubleshooting guide for the staff to follow.",
    ]
    if use_search:
        lines.append(
            "Use Google Search to find the latest solutions for this specific hardware, "
            "software, or network issue if applicable."
        )
    lines += [
        "",
        f"Category: {ticket.category}",
        f"Title: {ticket.title}",
        f"Description: {ticket.description}",
    ]
    if ticket.custom_data:
        lines.append(f"Additional Context: {json.dumps(ticket.custom_data, ensure_ascii=False)}")
    return "\n".join(lines)


def extract_sources(response: Any) -> list[str]:
    """Grounding chunk URIs from the first candidate, de-duplicated in order."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    sources: list[str] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if uri and uri not in sources:
            sources.append(uri)
    return sources


class SuggestionClient:
    def __init__(self, *, model: str, api_key_env: str, use_search: bool = True) -> None:
        self.model = model
        self.api_key_env = api_key_env
        self.use_search = use_search

    def _config(self) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self.use_search else None
        return types.GenerateContentConfig(system_instruction=SYSTEM_INSTRUCTION, tools=tools)

    async def suggest(self, ticket: Ticket) -> Suggestion:
        try:
            # a fresh client per call picks up a rotated key immediately
            api_key = os.environ.get(self.api_key_env)
            if not api_key:
                raise RuntimeError(f"{self.api_key_env} is not set")
            client = genai.Client(api_key=api_key)
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=build_prompt(ticket, use_search=self.use_search),
                config=self._config(),
            )
            text = response.text
            if not text:
                raise ValueError("empty response from model")
            sources = extract_sources(response) if self.use_search else []
        except Exception as exc:  # noqa: BLE001
            logger.warning("AI suggestion failed for ticket {ticket_id}: {error}", ticket_id=ticket.id, error=exc)
            return Suggestion(text=FALLBACK_TEXT, sources=[])

        logger.info(
            "AI suggestion ready for ticket {ticket_id} with {count} sources",
            ticket_id=ticket.id,
            count=len(sources),
        )
        return Suggestion(text=text, sources=sources)


@lru_cache
def get_suggestion_client() -> SuggestionClient:
    settings = get_settings()
    return SuggestionClient(
        model=settings.gemini_model,
        api_key_env=settings.gemini_api_key_env,
        use_search=settings.ai_search_grounding,
    )
