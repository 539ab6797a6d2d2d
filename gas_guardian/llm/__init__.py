"""Generative (language-model) suggestion providers."""

from __future__ import annotations

from ..config import LLMConfig
from .anthropic_provider import AnthropicSuggestionProvider
from .base import SuggestionProvider
from .cache import SuggestionCache

PROVIDERS: dict[str, type[SuggestionProvider]] = {
    "anthropic": AnthropicSuggestionProvider,
}


def create_provider(name: str = "anthropic", config: LLMConfig | None = None) -> SuggestionProvider:
    """
    Create a suggestion provider by name.

    Args:
        name: Provider name ("anthropic").
        config: LLM configuration.

    Returns:
        Configured provider instance.
    """
    if name not in PROVIDERS:
        raise ValueError(f"Unknown provider: {name}. Available: {list(PROVIDERS.keys())}")
    return PROVIDERS[name](config)


__all__ = [
    "AnthropicSuggestionProvider",
    "SuggestionCache",
    "SuggestionProvider",
    "create_provider",
]
