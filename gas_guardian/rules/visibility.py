"""Rules: function visibility and state mutability."""

from __future__ import annotations

from .base import (
    Rule,
    RuleContext,
    has_state_changes,
    is_called_internally,
    is_pure_function,
)
from ..schemas import IMPACT_LOW, IMPACT_MEDIUM, PatternType


class VisibilityRule(Rule):
    """Suggest external visibility and calldata parameters."""

    @property
    def name(self) -> str:
        return "visibility"

    @property
    def description(self) -> str:
        return "public functions that could be external, memory parameters that could be calldata"

    def check(self, ctx: RuleContext) -> None:
        function = ctx.function
        code = ctx.code

        if function.visibility == "public" and not is_called_internally(
            ctx.call_scope_text, function.name
        ):
            ctx.suggest(
                "visibility.external",
                type="visibility",
                message='Consider using "external" instead of "public" if function is only called externally.',
                confidence=0.6,
                impact=IMPACT_LOW,
                estimated_saving=1000,
            )

        if function.visibility == "external" and "memory" in code and "calldata" not in code:
            ctx.suggest(
                "visibility.calldata",
                type="visibility",
                message='Use "calldata" instead of "memory" for external function parameters.',
                confidence=0.8,
                impact=IMPACT_MEDIUM,
                estimated_saving=3000,
            )


class MutabilityRule(Rule):
    """Suggest view/pure for functions without side effects."""

    @property
    def name(self) -> str:
        return "mutability"

    @property
    def description(self) -> str:
        return "nonpayable functions that could be view or pure"

    def check(self, ctx: RuleContext) -> None:
        function = ctx.function
        code = ctx.code

        if function.state_mutability != "nonpayable":
            return
        if has_state_changes(code) or ctx.has_pattern(PatternType.STORAGE_WRITE):
            return

        if is_pure_function(code):
            message = 'Function appears to be pure (no state reading). Consider marking as "pure".'
        else:
            message = 'Function appears to be read-only. Consider marking as "view".'

        ctx.suggest(
            "mutability.view_or_pure",
            type="mutability",
            message=message,
            confidence=0.5,
            impact=IMPACT_LOW,
            estimated_saving=500,
        )
