"""Feature suggestions from a product description via the claude-agent-sdk.

The suggester only produces partial feature records. Filling defaults and
admitting them into the backlog is done by ``planning.suggestions``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any

from claude_agent_sdk import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    TextBlock,
    query,
)

from ..planning.models import Priority, System

logger = logging.getLogger(__name__)

SUGGEST_PROMPT = """\
You are a product planning assistant. Based on the product description \
below, suggest {count} high-impact features.

For each feature provide:
- name
- description
- priority: one of {priorities}
- estimatedCost: a number in dollars
- points: story points between 1 and 21
- owner: a logical requestor name
- programs: a list of one or more program names
- system: one of {systems}
- jiraNumber: a placeholder ticket reference

Output ONLY a JSON array of objects with exactly those keys, no commentary \
and no code fences.

Product description: "{description}"
"""

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def build_prompt(product_description: str, count: int = 5) -> str:
    return SUGGEST_PROMPT.format(
        count=count,
        priorities=", ".join(p.value for p in Priority),
        systems=", ".join(s.value for s in System),
        description=product_description,
    )


def parse_suggestions(text: str) -> list[dict[str, Any]]:
    """Decode the model's JSON array. Anything unusable yields an empty list."""
    text = text.strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.warning("Failed to parse suggestion response: %.200s", text)
        return []
    if not isinstance(data, list):
        logger.warning("Suggestion response was not a JSON array")
        return []
    return [item for item in data if isinstance(item, dict)]


class ClaudeFeatureSuggester:
    """Asks Claude for feature ideas. No tools, a single turn."""

    def __init__(self, model: str = "sonnet", count: int = 5) -> None:
        self._model = model
        self._count = count

    async def suggest(self, product_description: str, timeout: int = 120) -> list[dict[str, Any]]:
        if not product_description.strip():
            return []

        options = ClaudeAgentOptions(
            model=self._model,
            allowed_tools=[],
            max_turns=1,
        )
        prompt = build_prompt(product_description, self._count)

        text_parts: list[str] = []
        result_text: str | None = None
        try:
            async with asyncio.timeout(timeout):
                async for message in query(prompt=prompt, options=options):
                    if isinstance(message, AssistantMessage):
                        for block in message.content:
                            if isinstance(block, TextBlock):
                                text_parts.append(block.text)
                    elif isinstance(message, ResultMessage):
                        if message.is_error:
                            logger.warning("Suggestion request failed: %s", message.result)
                            return []
                        result_text = message.result
        except TimeoutError:
            logger.warning("Suggestion request timed out after %ss", timeout)
            return []

        return parse_suggestions(result_text or "\n".join(text_parts))


class MockFeatureSuggester:
    """Test double that returns canned suggestion records."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self._records = records if records is not None else [
            {
                "name": "Single Sign-On",
                "description": "Federated login across partner portals.",
                "priority": "High",
                "estimatedCost": 12000,
                "points": 8,
                "owner": "Identity Team",
                "programs": ["Security Foundation"],
                "system": "TOM",
                "jiraNumber": "SEC-200",
            },
            {"name": "Usage Analytics"},
        ]
        self.call_count = 0
        self.last_description: str | None = None

    async def suggest(self, product_description: str, timeout: int = 120) -> list[dict[str, Any]]:
        self.call_count += 1
        self.last_description = product_description
        return [dict(r) for r in self._records]
