"""Base classes and shared predicates for the rule engine."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..config import RuleConfig
from ..schemas import SOURCE_STATIC, Suggestion

if TYPE_CHECKING:
    from ..schemas import Function, PatternType


STATE_CHANGE_PATTERNS = [
    re.compile(r"\w+\s*=\s*[^=!<>]"),  # Assignment (not comparison)
    re.compile(r"\w+\[\w*\]\s*="),  # Array/mapping assignment
    re.compile(r"\bemit\s+\w+"),  # Events
    re.compile(r"\.transfer\("),  # Transfers
    re.compile(r"\.send\("),  # Send calls
    re.compile(r"\.call\("),  # External calls
    re.compile(r"\.delegatecall\("),  # Delegate calls
    re.compile(r"\bselfdestruct\("),  # Self destruct
    re.compile(r"\brequire\("),  # Reverting checks
    re.compile(r"\bassert\("),
    re.compile(r"\brevert\("),
    re.compile(r"\bdelete\s+\w+"),  # Delete operations
    re.compile(r"\.push\("),  # Array push
    re.compile(r"\.pop\("),  # Array pop
]

STATE_READ_PATTERNS = [
    re.compile(r"\bmsg\."),  # Message context
    re.compile(r"\btx\."),  # Transaction context
    re.compile(r"\bblock\."),  # Block context
    re.compile(r"\baddress\(this\)"),
    re.compile(r"\bbalance"),
    re.compile(r"\w+\[\w*\]"),  # Storage/mapping reads
    re.compile(r"\w+\.call"),  # External calls
    re.compile(r"\bkeccak256\("),
    re.compile(r"\becrecover\("),
]


def has_state_changes(code: str) -> bool:
    """Check if code contains any state-changing side effect."""
    return any(p.search(code) for p in STATE_CHANGE_PATTERNS)


def is_pure_function(code: str) -> bool:
    """Check if code reads no state (message/block context, storage, hashes)."""
    return not any(p.search(code) for p in STATE_READ_PATTERNS)


def is_called_internally(code: str, function_name: str) -> bool:
    """Approximate "called internally" by counting `name(` occurrences.

    The declaration itself is one occurrence, so more than one means the name
    is used again. This is textual: shadowing, comments and string literals
    containing the name all count.
    """
    if not function_name:
        return False
    calls = re.findall(rf"\b{re.escape(function_name)}\s*\(", code)
    return len(calls) > 1


@dataclass
class RuleContext:
    """Context provided to rules for a single function."""

    function: "Function"
    config: RuleConfig = field(default_factory=RuleConfig)

    # Full contract text, used when internal_call_scope is "contract"
    contract_source: str | None = None

    suggestions: list[Suggestion] = field(default_factory=list)

    @property
    def code(self) -> str:
        return self.function.source_code

    @property
    def name(self) -> str:
        return self.function.name or "unknown"

    def has_pattern(self, pattern_type: "PatternType") -> bool:
        return self.function.has_pattern(pattern_type)

    @property
    def call_scope_text(self) -> str:
        """Text searched by the internal-call heuristic."""
        if self.config.internal_call_scope == "contract" and self.contract_source:
            return self.contract_source
        return self.code

    def suggest(
        self,
        rule_id: str,
        type: str,
        message: str,
        confidence: float,
        impact: str,
        estimated_saving: int = 0,
    ) -> Suggestion:
        """Record a static suggestion, applying any configured confidence override."""
        confidence = self.config.confidence_overrides.get(rule_id, confidence)
        suggestion = Suggestion(
            type=type,
            message=message,
            confidence=confidence,
            impact=impact,
            source=SOURCE_STATIC,
            estimated_saving=max(0, estimated_saving),
            rule=rule_id,
        )
        self.suggestions.append(suggestion)
        return suggestion


class Rule(ABC):
    """Base class for optimization rules.

    A rule groups sub-rules for one concern (storage, loops, ...). It inspects
    the function in the context and records zero or more suggestions.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name for this rule."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this rule detects."""
        ...

    @abstractmethod
    def check(self, ctx: RuleContext) -> None:
        """Inspect ctx.function and record suggestions via ctx.suggest()."""
        ...


class RuleRegistry:
    """Registry for optimization rules.

    Runs every registered rule against a function, in registration order.
    """

    def __init__(self) -> None:
        self._rules: list[Rule] = []

    def register(self, rule: Rule) -> None:
        """Register a rule.

        Args:
            rule: The rule instance to register.
        """
        self._rules.append(rule)

    def get_rules(self) -> list[Rule]:
        """Get all registered rules."""
        return list(self._rules)

    def analyze(
        self,
        function: "Function",
        config: RuleConfig | None = None,
        contract_source: str | None = None,
    ) -> list[Suggestion]:
        """Run all rules against a function.

        Args:
            function: The parsed function to examine.
            config: Rule configuration (defaults if None).
            contract_source: Full contract text for contract-scoped heuristics.

        Returns:
            Suggestions in rule order. Empty if nothing matched.
        """
        ctx = RuleContext(
            function=function,
            config=config or RuleConfig(),
            contract_source=contract_source,
        )
        for rule in self._rules:
            rule.check(ctx)
        return ctx.suggestions
