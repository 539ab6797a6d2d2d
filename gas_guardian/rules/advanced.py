"""Rule: advanced patterns (reentrancy, string events, getters, hashing)."""

from __future__ import annotations

from .base import Rule, RuleContext
from ..schemas import IMPACT_HIGH, IMPACT_LOW, IMPACT_MEDIUM


class AdvancedPatternsRule(Rule):
    """Detect reentrancy-shaped calls and other higher-level patterns."""

    @property
    def name(self) -> str:
        return "advanced"

    @property
    def description(self) -> str:
        return "Unguarded external calls, string events, getter naming and hash usage"

    def check(self, ctx: RuleContext) -> None:
        code = ctx.code

        if ".call(" in code and "nonReentrant" not in code:
            ctx.suggest(
                "advanced.reentrancy",
                type="security",
                message=(
                    "External call detected. Consider reentrancy protection and "
                    "checks-effects-interactions pattern."
                ),
                confidence=0.8,
                impact=IMPACT_HIGH,
                estimated_saving=0,
            )

        if "emit" in code and "string" in code:
            ctx.suggest(
                "advanced.string_events",
                type="events",
                message="Avoid emitting strings in events. Use indexed parameters and bytes32 when possible.",
                confidence=0.7,
                impact=IMPACT_MEDIUM,
                estimated_saving=5000,
            )

        if "get" in ctx.name and "return" in code:
            ctx.suggest(
                "advanced.getter",
                type="patterns",
                message='Getter functions should be marked as "view" and consider using public variables instead.',
                confidence=0.6,
                impact=IMPACT_LOW,
                estimated_saving=1000,
            )

        if "keccak256" in code or "sha256" in code:
            ctx.suggest(
                "advanced.hash_assembly",
                type="assembly",
                message="Consider using inline assembly for hash operations to save gas.",
                confidence=0.4,
                impact=IMPACT_MEDIUM,
                estimated_saving=2000,
            )
