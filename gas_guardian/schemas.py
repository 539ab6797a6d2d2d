"""Data models for contract analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PatternType(Enum):
    """Structural code shapes detected in a function body."""

    LOOP = "loop"
    STORAGE_WRITE = "storage_write"
    EXTERNAL_CALL = "external_call"
    VALIDATION = "validation"


# Impact tiers
IMPACT_HIGH = "high"
IMPACT_MEDIUM = "medium"
IMPACT_LOW = "low"

# Suggestion sources
SOURCE_STATIC = "static"
SOURCE_LLM = "llm"

# Sentinel contract names
UNKNOWN_CONTRACT = "Unknown"
INVALID_CONTRACT = "InvalidContract"

VISIBILITIES = ("public", "private", "internal", "external")
STATE_MUTABILITIES = ("pure", "view", "payable", "nonpayable")


@dataclass
class Parameter:
    """A function parameter or return value."""

    type: str
    name: str
    location: str | None = None  # memory, calldata or storage

    def to_dict(self) -> dict[str, Any]:
        result = {"type": self.type, "name": self.name}
        if self.location:
            result["location"] = self.location
        return result


@dataclass
class Pattern:
    """A structural pattern detected in a function body."""

    type: PatternType
    description: str
    estimated_gas: int
    suggestion: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "description": self.description,
            "estimated_gas": self.estimated_gas,
            "suggestion": self.suggestion,
        }


@dataclass
class Function:
    """A function recovered from contract source text."""

    name: str
    visibility: str = "public"
    state_mutability: str = "nonpayable"
    parameters: list[Parameter] = field(default_factory=list)
    returns: list[Parameter] = field(default_factory=list)
    patterns: list[Pattern] = field(default_factory=list)

    # Declaration through the matching closing brace, inclusive
    source_code: str = ""
    start_line: int = 1

    @property
    def complexity_score(self) -> int:
        return 1 + 2 * len(self.patterns)

    def has_pattern(self, pattern_type: PatternType) -> bool:
        return any(p.type == pattern_type for p in self.patterns)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "visibility": self.visibility,
            "state_mutability": self.state_mutability,
            "parameters": [p.to_dict() for p in self.parameters],
            "returns": [r.to_dict() for r in self.returns],
            "patterns": [p.to_dict() for p in self.patterns],
            "complexity_score": self.complexity_score,
            "start_line": self.start_line,
            "source_code": self.source_code,
        }


@dataclass
class Contract:
    """Structural model of a contract source file."""

    name: str = UNKNOWN_CONTRACT
    functions: list[Function] = field(default_factory=list)
    state_variables: list[str] = field(default_factory=list)
    events: list[str] = field(default_factory=list)
    total_lines: int = 0

    @property
    def is_valid(self) -> bool:
        return self.name != INVALID_CONTRACT

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "functions": [f.to_dict() for f in self.functions],
            "state_variables": list(self.state_variables),
            "events": list(self.events),
            "total_lines": self.total_lines,
        }


@dataclass
class Suggestion:
    """A single optimization recommendation."""

    type: str
    message: str
    confidence: float
    impact: str
    source: str = SOURCE_STATIC
    estimated_saving: int = 0

    # Rule that produced this suggestion (static) or model name (llm)
    rule: str = ""
    from_cache: bool = False

    def to_dict(self) -> dict[str, Any]:
        result = {
            "type": self.type,
            "message": self.message,
            "confidence": self.confidence,
            "impact": self.impact,
            "source": self.source,
            "estimated_saving": self.estimated_saving,
        }
        if self.rule:
            result["rule"] = self.rule
        if self.from_cache:
            result["from_cache"] = True
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Suggestion:
        return cls(
            type=data.get("type", "ai_generated"),
            message=data.get("message", ""),
            confidence=float(data.get("confidence", 0.5)),
            impact=data.get("impact", IMPACT_LOW),
            source=data.get("source", SOURCE_STATIC),
            estimated_saving=int(data.get("estimated_saving", 0)),
            rule=data.get("rule", ""),
        )


@dataclass
class FunctionAnalysis:
    """A parsed function augmented with cost data and ranked suggestions."""

    function: Function
    gas_usage: int = 0
    gas_rank: str = "unknown"
    suggestions: list[Suggestion] = field(default_factory=list)
    potential_savings: int = 0

    @property
    def name(self) -> str:
        return self.function.name

    @property
    def has_gas_data(self) -> bool:
        return self.gas_usage > 0

    def to_dict(self) -> dict[str, Any]:
        result = self.function.to_dict()
        result.update({
            "gas_usage": self.gas_usage,
            "gas_rank": self.gas_rank,
            "has_gas_data": self.has_gas_data,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "potential_savings": self.potential_savings,
        })
        return result


@dataclass
class ContractAnalysis:
    """Complete analysis result for one contract file."""

    contract: Contract
    path: str = ""
    functions: list[FunctionAnalysis] = field(default_factory=list)
    framework: str = "none"
    analysis_timestamp: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    # Non-fatal warnings (malformed input, collaborator failures)
    diagnostics: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.contract.name

    @property
    def total_gas_usage(self) -> int:
        return sum(f.gas_usage for f in self.functions)

    @property
    def total_potential_savings(self) -> int:
        return sum(f.potential_savings for f in self.functions)

    @property
    def gas_data_available(self) -> bool:
        return self.total_gas_usage > 0

    @property
    def gas_coverage(self) -> float:
        """Percentage of functions with measured gas usage."""
        if not self.functions:
            return 0.0
        measured = sum(1 for f in self.functions if f.has_gas_data)
        return measured / len(self.functions) * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.contract.name,
            "path": self.path,
            "total_lines": self.contract.total_lines,
            "state_variables": list(self.contract.state_variables),
            "events": list(self.contract.events),
            "functions": [f.to_dict() for f in self.functions],
            "total_gas_usage": self.total_gas_usage,
            "total_potential_savings": self.total_potential_savings,
            "gas_data_available": self.gas_data_available,
            "gas_coverage": round(self.gas_coverage, 1),
            "framework": self.framework,
            "analysis_timestamp": self.analysis_timestamp.isoformat(),
            "diagnostics": list(self.diagnostics),
        }


@dataclass
class AnalysisError:
    """A fatal error for a single input of a batch."""

    path: str
    kind: str  # not_found, read_error, analysis_error
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "kind": self.kind, "message": self.message}


@dataclass
class BatchAnalysis:
    """Results for a batch of contract files."""

    contracts: list[ContractAnalysis] = field(default_factory=list)
    errors: list[AnalysisError] = field(default_factory=list)
    framework: str = "none"

    def to_dict(self) -> dict[str, Any]:
        from .integrator import summarize

        return {
            "framework": self.framework,
            "summary": summarize(self.contracts),
            "contracts": [c.to_dict() for c in self.contracts],
            "errors": [e.to_dict() for e in self.errors],
        }
