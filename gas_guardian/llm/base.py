"""Interface for generative suggestion providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..schemas import Suggestion


class SuggestionProvider(ABC):
    """Source of free-text optimization suggestions for a function.

    Implementations return suggestions with source="llm" and must not raise
    for recoverable failures (network, quota, malformed output): they return
    an empty list instead.
    """

    name: str = "base"

    @abstractmethod
    async def generate(
        self,
        function_text: str,
        metadata: dict[str, Any],
    ) -> list[Suggestion]:
        """Generate suggestions for one function.

        Args:
            function_text: The function's source code.
            metadata: At least "name" and "patterns" (list of pattern type names).

        Returns:
            Suggestions, possibly empty.
        """
        pass
