"""Rule: variable and type choices."""

from __future__ import annotations

import re

from .base import Rule, RuleContext
from ..schemas import IMPACT_LOW, IMPACT_MEDIUM


# A name assigned a literal and referenced again later on the same line
CONSTANT_CANDIDATE_PATTERN = re.compile(r"\b(\w+)\s*=\s*[\d\"'][^;]*;.*?\b\1\b")

ZERO_INIT_COUNTER_PATTERN = re.compile(r"\buint(?:256)?\s+\w+\s*=\s*0\s*;")


class VariablesRule(Rule):
    """Detect oversized types, constant candidates and redundant initialization."""

    @property
    def name(self) -> str:
        return "variables"

    @property
    def description(self) -> str:
        return "Small-value types, constant/immutable candidates and zero-initialized counters"

    def check(self, ctx: RuleContext) -> None:
        code = ctx.code

        if "uint256" in code and "< 256" in code:
            ctx.suggest(
                "variables.small_types",
                type="types",
                message="Consider using uint8 or uint16 for small values to save gas in structs.",
                confidence=0.4,
                impact=IMPACT_LOW,
                estimated_saving=1000,
            )

        if "constant" not in code and CONSTANT_CANDIDATE_PATTERN.search(code):
            ctx.suggest(
                "variables.constant",
                type="constants",
                message='Consider marking unchanging values as "constant" or "immutable".',
                confidence=0.6,
                impact=IMPACT_MEDIUM,
                estimated_saving=2000,
            )

        if ZERO_INIT_COUNTER_PATTERN.search(code):
            ctx.suggest(
                "variables.zero_init_counter",
                type="variables",
                message="Avoid explicit initialization of loop counters to 0 (default value).",
                confidence=0.8,
                impact=IMPACT_LOW,
                estimated_saving=500,
            )
