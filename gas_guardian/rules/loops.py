"""Rule: loop optimizations.

Only fires for functions with a detected loop pattern.
"""

from __future__ import annotations

import re

from .base import Rule, RuleContext
from ..schemas import IMPACT_HIGH, IMPACT_MEDIUM, PatternType


NESTED_LOOP_PATTERN = re.compile(r"\bfor\s*\([^}]*\bfor\s*\(")


class LoopRule(Rule):
    """Detect loop shapes with known cheaper alternatives."""

    @property
    def name(self) -> str:
        return "loop"

    @property
    def description(self) -> str:
        return "Loop counters, array length caching and nested loops"

    def check(self, ctx: RuleContext) -> None:
        if not ctx.has_pattern(PatternType.LOOP):
            return

        code = ctx.code

        ctx.suggest(
            "loop.general",
            type="loop",
            message="Loop detected. Consider using unchecked arithmetic for counters and caching array length.",
            confidence=0.9,
            impact=IMPACT_MEDIUM,
            estimated_saving=5000,
        )

        if ".length" in code:
            ctx.suggest(
                "loop.cache_length",
                type="loop",
                message="Cache array length before loop: uint256 len = array.length; for(uint256 i = 0; i < len;)",
                confidence=0.85,
                impact=IMPACT_MEDIUM,
                estimated_saving=3000,
            )

        if "++" in code or "i + 1" in code:
            ctx.suggest(
                "loop.unchecked_increment",
                type="loop",
                message="Use unchecked{++i} for loop increments when overflow is impossible.",
                confidence=0.9,
                impact=IMPACT_MEDIUM,
                estimated_saving=2500,
            )

        if NESTED_LOOP_PATTERN.search(code):
            ctx.suggest(
                "loop.nested",
                type="loop",
                message="Nested loops detected. Consider alternative algorithms or breaking into separate functions.",
                confidence=0.7,
                impact=IMPACT_HIGH,
                estimated_saving=10000,
            )
