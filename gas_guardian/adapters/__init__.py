"""Framework adapters supplying measured gas data."""

from __future__ import annotations

from ..config import AdapterConfig
from .base import GasDataProvider, NullGasDataProvider, extract_function_name
from .foundry import FoundryAdapter
from .hardhat import HardhatAdapter

ADAPTERS: dict[str, type[GasDataProvider]] = {
    "foundry": FoundryAdapter,
    "hardhat": HardhatAdapter,
    "none": NullGasDataProvider,
}


def create_adapter(framework: str, config: AdapterConfig | None = None) -> GasDataProvider:
    """
    Create a gas data provider by framework name.

    Args:
        framework: "foundry", "hardhat" or "none".
        config: Adapter configuration.

    Returns:
        Configured provider instance.
    """
    framework = framework.lower()
    if framework not in ADAPTERS:
        raise ValueError(f"Unknown framework: {framework}. Available: {list(ADAPTERS.keys())}")
    return ADAPTERS[framework](config)


__all__ = [
    "ADAPTERS",
    "FoundryAdapter",
    "GasDataProvider",
    "HardhatAdapter",
    "NullGasDataProvider",
    "create_adapter",
    "extract_function_name",
]
