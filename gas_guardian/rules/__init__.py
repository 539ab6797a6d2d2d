"""Rule engine for detecting gas optimization opportunities.

The rule engine is a pluggable set of independent heuristics over a parsed
function. Each rule:
1. Inspects the function's source text, patterns, visibility and mutability
2. Records zero or more suggestions with a fixed confidence and impact tier
3. Attaches a fixed or occurrence-scaled estimated saving

Rules are stateless; all per-call state lives in a fresh RuleContext.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import (
    Rule,
    RuleContext,
    RuleRegistry,
    has_state_changes,
    is_called_internally,
    is_pure_function,
)
from .storage import StorageRule
from .loops import LoopRule
from .visibility import MutabilityRule, VisibilityRule
from .operations import ExpensiveOperationsRule
from .variables import VariablesRule
from .control_flow import ControlFlowRule
from .advanced import AdvancedPatternsRule

if TYPE_CHECKING:
    from ..config import RuleConfig
    from ..schemas import Function, Suggestion

# Register all rules
_registry = RuleRegistry()
_registry.register(StorageRule())
_registry.register(LoopRule())
_registry.register(VisibilityRule())
_registry.register(MutabilityRule())
_registry.register(ExpensiveOperationsRule())
_registry.register(VariablesRule())
_registry.register(ControlFlowRule())
_registry.register(AdvancedPatternsRule())


def get_registry() -> RuleRegistry:
    """Get the global rule registry."""
    return _registry


def analyze_function(
    function: "Function",
    config: "RuleConfig | None" = None,
    contract_source: str | None = None,
) -> list["Suggestion"]:
    """Run the static rules against one function.

    This is the main entry point for rule evaluation. Pure and total: a
    function matching nothing yields an empty list.

    Args:
        function: The parsed function to examine.
        config: Rule configuration (confidence overrides, call scope).
        contract_source: Full contract text for contract-scoped heuristics.

    Returns:
        Unranked static suggestions, in rule order.
    """
    return _registry.analyze(function, config, contract_source)


__all__ = [
    "Rule",
    "RuleContext",
    "RuleRegistry",
    "get_registry",
    "analyze_function",
    "has_state_changes",
    "is_called_internally",
    "is_pure_function",
    "StorageRule",
    "LoopRule",
    "VisibilityRule",
    "MutabilityRule",
    "ExpensiveOperationsRule",
    "VariablesRule",
    "ControlFlowRule",
    "AdvancedPatternsRule",
]
