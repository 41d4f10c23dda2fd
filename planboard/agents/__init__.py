from .suggester import (
    ClaudeFeatureSuggester,
    MockFeatureSuggester,
    build_prompt,
    parse_suggestions,
)

__all__ = [
    "ClaudeFeatureSuggester",
    "MockFeatureSuggester",
    "build_prompt",
    "parse_suggestions",
]
