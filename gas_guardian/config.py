"""Configuration for the analyzer and its collaborators.

Every hand-tuned constant (similarity threshold, rule confidences, rank
thresholds, savings tables) lives here with its default value, so callers can
override them without touching the heuristics.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "GAS_GUARDIAN_"

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "gas-guardian" / "suggestions"


@dataclass
class RuleConfig:
    """Configuration for the static rule engine."""

    # Rule id (e.g. "loop.cache_length") -> confidence
    confidence_overrides: dict[str, float] = field(default_factory=dict)

    # Text searched by the "called internally" heuristic: "function" or "contract"
    internal_call_scope: str = "function"


@dataclass
class RankingConfig:
    """Configuration for suggestion deduplication and ordering."""

    similarity_threshold: float = 0.7
    impact_weights: dict[str, int] = field(
        default_factory=lambda: {"high": 3, "medium": 2, "low": 1}
    )
    default_weight: int = 1


@dataclass
class GasConfig:
    """Gas rank thresholds and potential savings tables."""

    low_threshold: int = 30_000
    high_threshold: int = 100_000

    # Percent of measured usage saved per suggestion, by impact
    savings_percent: dict[str, int] = field(
        default_factory=lambda: {"high": 15, "medium": 8, "low": 3}
    )
    default_measured_saving: int = 100

    # Flat savings per suggestion when no measured usage exists
    flat_savings: dict[str, int] = field(
        default_factory=lambda: {"high": 15_000, "medium": 5_000, "low": 1_000}
    )
    default_flat_saving: int = 500


@dataclass
class LLMConfig:
    """Configuration for the generative suggestion provider."""

    enabled: bool = False
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 512
    temperature: float = 0.1
    timeout: float = 30.0
    max_suggestions: int = 3
    max_code_tokens: int = 1024
    confidence: float = 0.8

    # Cache
    enable_cache: bool = True
    cache_dir: Path = field(default_factory=lambda: DEFAULT_CACHE_DIR)
    cache_ttl: float = 24 * 60 * 60  # 24 hours


@dataclass
class AdapterConfig:
    """Configuration for the gas data framework adapter."""

    framework: str = "foundry"  # foundry, hardhat or none
    project_root: Path = field(default_factory=Path.cwd)

    # Run forge/hardhat when no existing report is found
    auto_run: bool = True
    command_timeout: int = 180  # 3 minutes


@dataclass
class AnalyzerConfig:
    """Top-level configuration."""

    rules: RuleConfig = field(default_factory=RuleConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    gas: GasConfig = field(default_factory=GasConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    adapter: AdapterConfig = field(default_factory=AdapterConfig)

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> AnalyzerConfig:
        """Build a configuration from GAS_GUARDIAN_* environment variables.

        A .env file is loaded first (without overriding variables that are
        already set).

        Args:
            env_file: Explicit .env path. Searches upward from cwd if None.

        Returns:
            AnalyzerConfig with environment overrides applied.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))
        config = cls()

        threshold = _env_float("SIMILARITY_THRESHOLD")
        if threshold is not None:
            config.ranking.similarity_threshold = threshold

        scope = os.environ.get(f"{ENV_PREFIX}INTERNAL_CALL_SCOPE")
        if scope in ("function", "contract"):
            config.rules.internal_call_scope = scope

        model = os.environ.get(f"{ENV_PREFIX}MODEL")
        if model:
            config.llm.model = model

        timeout = _env_float("LLM_TIMEOUT")
        if timeout is not None:
            config.llm.timeout = timeout

        cache_dir = os.environ.get(f"{ENV_PREFIX}CACHE_DIR")
        if cache_dir:
            config.llm.cache_dir = Path(cache_dir).expanduser()

        ttl = _env_float("CACHE_TTL")
        if ttl is not None:
            config.llm.cache_ttl = ttl

        framework = os.environ.get(f"{ENV_PREFIX}FRAMEWORK")
        if framework:
            config.adapter.framework = framework

        auto_run = os.environ.get(f"{ENV_PREFIX}AUTO_RUN")
        if auto_run is not None:
            config.adapter.auto_run = auto_run.strip().lower() in ("1", "true", "yes")

        return config


def _env_float(name: str) -> float | None:
    """Read a float environment variable, ignoring malformed values."""
    raw = os.environ.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {ENV_PREFIX}{name}={raw!r}")
        return None
