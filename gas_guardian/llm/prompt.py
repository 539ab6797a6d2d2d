"""Prompt construction and response parsing for generative suggestions."""

from __future__ import annotations

import functools
import re
from typing import Iterable

import tiktoken

from ..schemas import IMPACT_HIGH, IMPACT_LOW, IMPACT_MEDIUM

RESPONSE_MARKER = "Gas optimizations:"

SYSTEM_PROMPT = """You are a Solidity gas optimization expert.
Reply with a numbered list of short, concrete gas optimizations for the given function.
One optimization per line, under 150 characters each. No code blocks, no preamble."""

PROMPT_TEMPLATE = """Optimize this Solidity function for gas efficiency:

{code}

Function: {name}
Issues: {issues}

{marker}
1."""

GAS_KEYWORDS = (
    "unchecked", "external", "storage", "memory", "calldata",
    "gas", "sstore", "sload", "mapping", "array", "uint",
    "require", "error", "batch", "pack", "slot", "optimize",
)

# Echoed prompt lines
_ECHO_FRAGMENTS = ("Optimize this Solidity", "Function:", "Issues:", RESPONSE_MARKER)

MIN_LINE_LENGTH = 15
MIN_SUGGESTION_LENGTH = 20
MAX_SUGGESTION_LENGTH = 150

_MARKER_PATTERN = re.compile(r"^.*?" + re.escape(RESPONSE_MARKER) + r"\s*", re.IGNORECASE | re.DOTALL)
_NUMBERING_PATTERN = re.compile(r"^\d+[.)]\s*")
_BULLET_PATTERN = re.compile(r"^[*-]\s*")
_LEADING_VERB_PATTERN = re.compile(r"^(?:use|consider|try|implement)\s+", re.IGNORECASE)


# cl100k_base approximates Claude tokenization closely enough for truncation.
# Loaded on first use: get_encoding may download the encoding file.
@functools.lru_cache(maxsize=None)
def _encoder() -> tiktoken.Encoding:
    return tiktoken.get_encoding("cl100k_base")


def count_tokens(text: str) -> int:
    """Count tokens in a string."""
    if not text:
        return 0
    return len(_encoder().encode(text))


def truncate_code(code: str, max_tokens: int) -> str:
    """Truncate code to at most max_tokens tokens, marking the cut with '...'."""
    encoder = _encoder()
    tokens = encoder.encode(code)
    if len(tokens) <= max_tokens:
        return code
    return encoder.decode(tokens[:max_tokens]) + "..."


def build_prompt(
    function_text: str,
    name: str = "unknown",
    patterns: Iterable[str] = (),
    max_code_tokens: int = 1024,
) -> str:
    """Build the user prompt for one function."""
    patterns = list(patterns)
    return PROMPT_TEMPLATE.format(
        code=truncate_code(function_text.strip(), max_code_tokens),
        name=name or "unknown",
        issues=", ".join(patterns) if patterns else "none",
        marker=RESPONSE_MARKER,
    )


def is_gas_optimization(text: str) -> bool:
    """Check if a response line reads as a gas optimization."""
    lower = text.lower()
    return (
        any(keyword in lower for keyword in GAS_KEYWORDS)
        and MIN_SUGGESTION_LENGTH < len(text) < MAX_SUGGESTION_LENGTH
    )


def clean_suggestion(text: str) -> str:
    """Strip numbering and leading verbs, capitalize, terminate with a period."""
    cleaned = _NUMBERING_PATTERN.sub("", text.strip())
    cleaned = _BULLET_PATTERN.sub("", cleaned)
    cleaned = _LEADING_VERB_PATTERN.sub("", cleaned).strip()
    if not cleaned:
        return ""
    cleaned = cleaned[0].upper() + cleaned[1:]
    if not cleaned.endswith((".", "!")):
        cleaned += "."
    return cleaned


def estimate_impact(text: str) -> str:
    """Guess the impact tier of a free-text suggestion from its keywords."""
    lower = text.lower()
    if any(k in lower for k in ("storage", "sstore", "struct")):
        return IMPACT_HIGH
    if any(k in lower for k in ("loop", "unchecked", "memory")):
        return IMPACT_MEDIUM
    return IMPACT_LOW


def parse_output(output: str) -> list[str]:
    """Extract cleaned suggestion messages from a model response.

    Returns:
        Messages in response order; empty if nothing qualifies.
    """
    body = _MARKER_PATTERN.sub("", output, count=1).strip()

    messages = []
    for line in body.splitlines():
        text = line.strip()
        if len(text) < MIN_LINE_LENGTH:
            continue
        if any(fragment in text for fragment in _ECHO_FRAGMENTS):
            continue
        if not is_gas_optimization(text):
            continue
        cleaned = clean_suggestion(text)
        if cleaned:
            messages.append(cleaned)
    return messages
