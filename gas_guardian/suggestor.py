"""Suggestion engine: static rules plus an optional generative provider."""

from __future__ import annotations

import asyncio
import logging

from .config import AnalyzerConfig
from .llm.base import SuggestionProvider
from .ranker import merge
from .rules import analyze_function
from .schemas import Function, Suggestion

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Produce a ranked, duplicate-free suggestion list per function.

    Static suggestions always come first in merge order, so on a near-duplicate
    the static suggestion is kept. Provider failures and timeouts degrade to
    static-only suggestions for that function.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        provider: SuggestionProvider | None = None,
    ):
        self.config = config or AnalyzerConfig()
        self.provider = provider

    def static_suggestions(
        self,
        function: Function,
        contract_source: str | None = None,
    ) -> list[Suggestion]:
        """Run the static rule engine for one function."""
        return analyze_function(function, self.config.rules, contract_source)

    async def provider_suggestions(
        self,
        function: Function,
        diagnostics: list[str] | None = None,
    ) -> list[Suggestion]:
        """Ask the provider for suggestions, isolating failures.

        Args:
            function: Function to describe.
            diagnostics: Collects a message when the provider fails.

        Returns:
            Provider suggestions, or [] on failure, timeout or no provider.
        """
        if self.provider is None or not function.source_code:
            return []

        metadata = {
            "name": function.name,
            "patterns": [p.type.value for p in function.patterns],
        }
        try:
            return await asyncio.wait_for(
                self.provider.generate(function.source_code, metadata),
                timeout=self.config.llm.timeout,
            )
        except asyncio.TimeoutError:
            message = (
                f"{function.name}: {self.provider.name} suggestions timed out "
                f"after {self.config.llm.timeout}s"
            )
        except Exception as e:
            message = f"{function.name}: {self.provider.name} suggestions failed: {e}"

        logger.warning(message)
        if diagnostics is not None:
            diagnostics.append(message)
        return []

    async def generate(
        self,
        function: Function,
        contract_source: str | None = None,
        diagnostics: list[str] | None = None,
    ) -> list[Suggestion]:
        """Generate ranked suggestions for one function.

        Args:
            function: Parsed function.
            contract_source: Full contract text for contract-scoped heuristics.
            diagnostics: Collects non-fatal provider failures.

        Returns:
            Merged, deduplicated and ranked suggestions.
        """
        static = self.static_suggestions(function, contract_source)
        generated = await self.provider_suggestions(function, diagnostics)
        return merge(static, generated, config=self.config.ranking)
