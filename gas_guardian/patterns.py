"""Structural pattern detection over a single function's source text.

Each detector is a pure function of the body text. Detection is textual, not
semantic: a function can match several pattern types at once, and false
positives (locals counted as storage writes, keywords inside comments) are
accepted in exchange for speed and simplicity.

- loop: a for/while head
- storage_write: indexed or bare assignments (estimate scales with count)
- external_call: .call / .delegatecall / .staticcall
- validation: require/assert calls (estimate scales with count)
"""

from __future__ import annotations

import re

from .schemas import Pattern, PatternType


LOOP_GAS = 5000
STORAGE_WRITE_GAS = 20000
EXTERNAL_CALL_GAS = 2300
VALIDATION_GAS = 500

LOOP_PATTERN = re.compile(r"\b(?:for|while)\s*\(")

# Assignment operators, including compound forms (+=, <<=, ...)
_ASSIGN_OP = r"(?:<<|>>|[-+*/%&|^])?=(?![=>])"

# a[i] = x, a[b[i]] += x, a[i][j] = x
INDEXED_ASSIGN_PATTERN = re.compile(
    r"\w+(?:\s*\[[^\[\]]*(?:\[[^\[\]]*\][^\[\]]*)*\])+\s*" + _ASSIGN_OP
)

# x = y, x += y; never ==, !=, <=, >=
BARE_ASSIGN_PATTERN = re.compile(r"(?<![=!<>])\b\w+\s*" + _ASSIGN_OP)

EXTERNAL_CALL_PATTERN = re.compile(r"\w+\.(?:call|delegatecall|staticcall)\s*[({]")

VALIDATION_PATTERN = re.compile(r"\b(?:require|assert)\s*\(")


def has_loop(code: str) -> bool:
    """Check if the code contains a for or while construct head."""
    return LOOP_PATTERN.search(code) is not None


def count_storage_writes(code: str) -> int:
    """Count indexed and bare assignment occurrences."""
    return len(INDEXED_ASSIGN_PATTERN.findall(code)) + len(BARE_ASSIGN_PATTERN.findall(code))


def has_external_call(code: str) -> bool:
    """Check if the code contains a low-level call invocation."""
    return EXTERNAL_CALL_PATTERN.search(code) is not None


def count_validations(code: str) -> int:
    """Count require/assert invocations."""
    return len(VALIDATION_PATTERN.findall(code))


def detect_patterns(code: str) -> list[Pattern]:
    """Detect all structural patterns in a function's source text.

    Args:
        code: Function source text (declaration through closing brace).

    Returns:
        Detected patterns, at most one per pattern type, in a fixed order.
    """
    patterns: list[Pattern] = []

    if has_loop(code):
        patterns.append(Pattern(
            type=PatternType.LOOP,
            description="Loop detected - gas scales with iterations",
            estimated_gas=LOOP_GAS,
            suggestion="Consider using fixed iterations or breaking into smaller chunks",
        ))

    storage_writes = count_storage_writes(code)
    if storage_writes > 0:
        patterns.append(Pattern(
            type=PatternType.STORAGE_WRITE,
            description=f"Storage write operations detected ({storage_writes})",
            estimated_gas=storage_writes * STORAGE_WRITE_GAS,
            suggestion="Consider batching storage operations",
        ))

    if has_external_call(code):
        patterns.append(Pattern(
            type=PatternType.EXTERNAL_CALL,
            description="External call detected",
            estimated_gas=EXTERNAL_CALL_GAS,
            suggestion="Ensure proper gas estimation and consider reentrancy protection",
        ))

    validations = count_validations(code)
    if validations > 0:
        patterns.append(Pattern(
            type=PatternType.VALIDATION,
            description=f"Input validation detected ({validations})",
            estimated_gas=validations * VALIDATION_GAS,
            suggestion="Consider custom errors instead of require with strings",
        ))

    return patterns
