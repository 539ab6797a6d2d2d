"""Suggestion provider backed by the Anthropic Messages API."""

from __future__ import annotations

import logging
from typing import Any

import anthropic

from ..config import LLMConfig
from ..schemas import SOURCE_LLM, Suggestion
from .base import SuggestionProvider
from .cache import SuggestionCache
from .prompt import SYSTEM_PROMPT, build_prompt, count_tokens, estimate_impact, parse_output

logger = logging.getLogger(__name__)


class AnthropicSuggestionProvider(SuggestionProvider):
    """Generate gas optimization suggestions with Claude.

    Responses are parsed line by line, filtered to gas-related statements and
    cached by content hash. Any API or parsing failure yields an empty list.
    """

    name = "anthropic"

    def __init__(
        self,
        config: LLMConfig | None = None,
        cache: SuggestionCache | None = None,
        client: Any = None,
    ):
        """
        Initialize the provider.

        Args:
            config: Model, sampling and truncation settings.
            cache: Suggestion cache. Built from config when None.
            client: An AsyncAnthropic-compatible client. Created lazily when None.
        """
        self.config = config or LLMConfig()
        self.cache = cache or SuggestionCache(
            self.config.cache_dir,
            ttl=self.config.cache_ttl,
            enabled=self.config.enable_cache,
        )
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic(timeout=self.config.timeout)
        return self._client

    async def generate(
        self,
        function_text: str,
        metadata: dict[str, Any],
    ) -> list[Suggestion]:
        if not function_text or not function_text.strip():
            logger.warning("No function code available for LLM analysis")
            return []

        cached = self.cache.get(function_text)
        if cached is not None:
            logger.debug(f"Cache hit for {metadata.get('name', 'unknown')}")
            for suggestion in cached:
                suggestion.from_cache = True
            return cached

        prompt = build_prompt(
            function_text,
            name=metadata.get("name", "unknown"),
            patterns=metadata.get("patterns", []),
            max_code_tokens=self.config.max_code_tokens,
        )
        logger.debug(f"Prompt for {metadata.get('name', 'unknown')}: {count_tokens(prompt)} tokens")

        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as e:
            logger.warning(f"LLM generation failed for {metadata.get('name', 'unknown')}: {e}")
            return []

        text = "\n".join(
            block.text for block in response.content if block.type == "text"
        )
        suggestions = [
            Suggestion(
                type="ai_generated",
                message=message,
                confidence=self.config.confidence,
                impact=estimate_impact(message),
                source=SOURCE_LLM,
                rule=self.config.model,
            )
            for message in parse_output(text)[: self.config.max_suggestions]
        ]

        self.cache.put(function_text, suggestions)
        return suggestions
