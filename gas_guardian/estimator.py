"""Gas rank and potential savings estimation.

Savings use two policies:
- Measured usage known: each suggestion saves a percentage of that usage,
  by impact tier (high 15%, medium 8%, low 3%, otherwise a flat 100).
- No measured usage: each suggestion contributes a flat amount by impact
  tier (high 15000, medium 5000, low 1000, otherwise 500).
"""

from __future__ import annotations

from typing import Iterable

from .config import GasConfig
from .schemas import Suggestion


RANK_UNKNOWN = "unknown"
RANK_LOW = "low"
RANK_MEDIUM = "medium"
RANK_HIGH = "high"


def gas_rank(gas_usage: int, config: GasConfig | None = None) -> str:
    """Bucket a measured gas usage.

    Args:
        gas_usage: Measured usage, 0 when unknown.
        config: Thresholds (defaults 30000 / 100000).

    Returns:
        "unknown" for 0, "low" below the low threshold, "medium" below the
        high threshold, otherwise "high".
    """
    config = config or GasConfig()
    if gas_usage <= 0:
        return RANK_UNKNOWN
    if gas_usage < config.low_threshold:
        return RANK_LOW
    if gas_usage < config.high_threshold:
        return RANK_MEDIUM
    return RANK_HIGH


def potential_savings(
    suggestions: Iterable[Suggestion],
    gas_usage: int = 0,
    config: GasConfig | None = None,
) -> int:
    """Estimate total savings for a function's suggestions.

    Args:
        suggestions: Ranked suggestions for the function.
        gas_usage: Measured usage, 0 when unknown.
        config: Savings tables.

    Returns:
        Estimated savings in gas units.
    """
    config = config or GasConfig()
    total = 0

    if gas_usage > 0:
        for suggestion in suggestions:
            percent = config.savings_percent.get(suggestion.impact)
            if percent is None:
                total += config.default_measured_saving
            else:
                total += gas_usage * percent // 100
    else:
        for suggestion in suggestions:
            total += config.flat_savings.get(suggestion.impact, config.default_flat_saving)

    return total


def total_estimated_saving(suggestions: Iterable[Suggestion]) -> int:
    """Sum the per-rule estimated savings of suggestions."""
    return sum(s.estimated_saving for s in suggestions)
