"""Rule: storage access patterns.

- Many storage writes → batch or use memory for intermediates
- Repeated indexed reads → cache in memory
- Structs with uint256 fields → pack into fewer slots
- Explicit default initialization (0, false, "") → drop it
"""

from __future__ import annotations

import re

from .base import Rule, RuleContext
from ..schemas import IMPACT_HIGH, IMPACT_LOW, IMPACT_MEDIUM, PatternType


WRITE_PATTERN = re.compile(r"\w+\s*=\s*[^=!<>]|\w+\[\w*\]\s*=")
INDEXED_READ_PATTERN = re.compile(r"\w+\[[\w\s]*\]")
DEFAULT_INIT_PATTERNS = [
    re.compile(r"\w+\s*=\s*0[^x\w]"),
    re.compile(r"\w+\s*=\s*false\b"),
    re.compile(r'\w+\s*=\s*""'),
]

MANY_WRITES_THRESHOLD = 3
MANY_READS_THRESHOLD = 2


class StorageRule(Rule):
    """Detect storage reads and writes that could be cheaper."""

    @property
    def name(self) -> str:
        return "storage"

    @property
    def description(self) -> str:
        return "Storage writes, repeated reads, struct packing and default initialization"

    def check(self, ctx: RuleContext) -> None:
        code = ctx.code

        if ctx.has_pattern(PatternType.STORAGE_WRITE):
            writes = len(WRITE_PATTERN.findall(code))
            if writes > MANY_WRITES_THRESHOLD:
                ctx.suggest(
                    "storage.batch_writes",
                    type="storage",
                    message=(
                        "Multiple storage writes detected. Consider batching operations "
                        "or using memory for intermediate calculations."
                    ),
                    confidence=0.8,
                    impact=IMPACT_HIGH,
                    estimated_saving=writes * 5000,
                )
            else:
                ctx.suggest(
                    "storage.write",
                    type="storage",
                    message=(
                        "Storage write detected. Skip the write when the value is unchanged "
                        "and avoid writing the same slot more than once."
                    ),
                    confidence=0.5,
                    impact=IMPACT_LOW,
                    estimated_saving=writes * 800,
                )

        reads = len(INDEXED_READ_PATTERN.findall(code))
        if reads > MANY_READS_THRESHOLD:
            ctx.suggest(
                "storage.cache_reads",
                type="storage",
                message="Multiple storage reads detected. Cache storage values in memory variables.",
                confidence=0.7,
                impact=IMPACT_MEDIUM,
                estimated_saving=(reads - 1) * 2100,
            )

        if "struct" in code and "uint256" in code:
            ctx.suggest(
                "storage.struct_packing",
                type="storage",
                message=(
                    "Consider packing struct variables to use fewer storage slots "
                    "(uint128 instead of uint256 when possible)."
                ),
                confidence=0.6,
                impact=IMPACT_HIGH,
                estimated_saving=20000,
            )

        if any(p.search(code) for p in DEFAULT_INIT_PATTERNS):
            ctx.suggest(
                "storage.default_init",
                type="storage",
                message='Avoid explicit initialization to default values (0, false, "") to save gas.',
                confidence=0.9,
                impact=IMPACT_LOW,
                estimated_saving=2000,
            )
