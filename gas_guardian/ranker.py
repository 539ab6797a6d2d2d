"""Suggestion merging: deduplication and ranking.

merge() concatenates suggestion lists, drops near-duplicates and orders the
rest by impact weight × confidence. Dedup is greedy and order-dependent: the
first suggestion of a similarity cluster survives. The sort is stable, so the
result is a fixed point: merge(merge(s)) == merge(s).
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Iterable

from .config import RankingConfig
from .schemas import Suggestion


TOKEN_SPLIT_PATTERN = re.compile(r"\W+")


def tokenize(text: str) -> list[str]:
    """Split text into lowercase word tokens."""
    return [t for t in TOKEN_SPLIT_PATTERN.split(text.lower()) if t]


def similarity(text1: str, text2: str) -> float:
    """Word-overlap similarity: |common tokens| / max(|tokens1|, |tokens2|).

    Common tokens are counted as a multiset intersection, so the measure is
    symmetric and bounded by 1.0.
    """
    tokens1 = tokenize(text1)
    tokens2 = tokenize(text2)
    total = max(len(tokens1), len(tokens2))
    if total == 0:
        return 0.0
    common = sum((Counter(tokens1) & Counter(tokens2)).values())
    return common / total


def are_similar(text1: str, text2: str, threshold: float = 0.7) -> bool:
    """Check if two messages are near-duplicates."""
    return similarity(text1, text2) > threshold


def deduplicate(
    suggestions: Iterable[Suggestion],
    threshold: float = 0.7,
) -> list[Suggestion]:
    """Drop suggestions similar to an earlier retained one.

    Args:
        suggestions: Suggestions in priority order.
        threshold: Similarity above which two messages are duplicates.

    Returns:
        Retained suggestions, in input order.
    """
    unique: list[Suggestion] = []
    for suggestion in suggestions:
        if any(are_similar(suggestion.message, kept.message, threshold) for kept in unique):
            continue
        unique.append(suggestion)
    return unique


def score(suggestion: Suggestion, config: RankingConfig | None = None) -> float:
    """Composite ranking score: impact weight × confidence."""
    config = config or RankingConfig()
    weight = config.impact_weights.get(suggestion.impact, config.default_weight)
    return weight * suggestion.confidence


def rank(
    suggestions: Iterable[Suggestion],
    config: RankingConfig | None = None,
) -> list[Suggestion]:
    """Sort suggestions by score, descending. Ties keep their input order."""
    config = config or RankingConfig()
    return sorted(suggestions, key=lambda s: score(s, config), reverse=True)


def merge(
    *suggestion_lists: Iterable[Suggestion],
    config: RankingConfig | None = None,
) -> list[Suggestion]:
    """Merge suggestion lists into one deduplicated, ranked list.

    Args:
        *suggestion_lists: Lists to merge, in priority order (static first).
        config: Ranking configuration (threshold, impact weights).

    Returns:
        Duplicate-free suggestions sorted by impact weight × confidence.
    """
    config = config or RankingConfig()
    combined = [s for suggestions in suggestion_lists for s in suggestions]
    unique = deduplicate(combined, config.similarity_threshold)
    return rank(unique, config)
