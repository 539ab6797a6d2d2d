"""Rule: gas-expensive operations (division, modulo, strings, dynamic arrays)."""

from __future__ import annotations

from .base import Rule, RuleContext
from ..schemas import IMPACT_HIGH, IMPACT_MEDIUM


class ExpensiveOperationsRule(Rule):
    """Detect operations with cheaper equivalents."""

    @property
    def name(self) -> str:
        return "expensive_operations"

    @property
    def description(self) -> str:
        return "Division, modulo, string concatenation and dynamic array operations"

    def check(self, ctx: RuleContext) -> None:
        code = ctx.code

        # Skipped when the body contains a line comment
        if "/" in code and "//" not in code:
            ctx.suggest(
                "operations.division",
                type="arithmetic",
                message="Division operations are expensive. Consider using bit shifting for powers of 2.",
                confidence=0.6,
                impact=IMPACT_MEDIUM,
                estimated_saving=1500,
            )

        if "%" in code:
            ctx.suggest(
                "operations.modulo",
                type="arithmetic",
                message="Modulo operations are expensive. Consider using bitwise AND for powers of 2.",
                confidence=0.6,
                impact=IMPACT_MEDIUM,
                estimated_saving=1200,
            )

        if "string" in code and ("concat" in code or "+" in code):
            ctx.suggest(
                "operations.string_concat",
                type="string",
                message="String concatenation is gas-expensive. Consider using bytes or assembly.",
                confidence=0.7,
                impact=IMPACT_HIGH,
                estimated_saving=8000,
            )

        if ".push(" in code or ".pop()" in code:
            ctx.suggest(
                "operations.dynamic_array",
                type="array",
                message="Dynamic array operations are expensive. Consider using fixed-size arrays when possible.",
                confidence=0.5,
                impact=IMPACT_MEDIUM,
                estimated_saving=4000,
            )
