"""Rule: control flow (require counts, short-circuit order, if/else chains)."""

from __future__ import annotations

import re

from .base import Rule, RuleContext
from ..schemas import IMPACT_LOW, IMPACT_MEDIUM


REQUIRE_PATTERN = re.compile(r"\brequire\s*\(")
ELSE_IF_PATTERN = re.compile(r"\belse\s+if\b")

MANY_REQUIRES_THRESHOLD = 2
LONG_CHAIN_THRESHOLD = 3


class ControlFlowRule(Rule):
    """Detect control flow that costs more than it needs to."""

    @property
    def name(self) -> str:
        return "control_flow"

    @property
    def description(self) -> str:
        return "Multiple require statements, boolean ordering and long if/else chains"

    def check(self, ctx: RuleContext) -> None:
        code = ctx.code

        requires = len(REQUIRE_PATTERN.findall(code))
        if requires > MANY_REQUIRES_THRESHOLD:
            ctx.suggest(
                "control_flow.custom_errors",
                type="control_flow",
                message="Multiple require statements detected. Consider custom errors and early returns.",
                confidence=0.7,
                impact=IMPACT_MEDIUM,
                estimated_saving=requires * 1000,
            )

        if "&&" in code or "||" in code:
            ctx.suggest(
                "control_flow.short_circuit",
                type="control_flow",
                message="Optimize boolean operations by placing cheaper conditions first.",
                confidence=0.5,
                impact=IMPACT_LOW,
                estimated_saving=500,
            )

        if len(ELSE_IF_PATTERN.findall(code)) > LONG_CHAIN_THRESHOLD:
            ctx.suggest(
                "control_flow.lookup_table",
                type="control_flow",
                message="Consider using mapping-based lookup instead of long if-else chains.",
                confidence=0.6,
                impact=IMPACT_MEDIUM,
                estimated_saving=3000,
            )
