"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def simple_contract_path() -> Path:
    """Path to a one-function contract with a single storage write."""
    return FIXTURES_DIR / "simple.sol"


@pytest.fixture
def invalid_contract_path() -> Path:
    """Path to a file with no contract declaration."""
    return FIXTURES_DIR / "invalid.sol"


@pytest.fixture
def foundry_project_dir() -> Path:
    """Path to a Foundry project with a .gas-snapshot."""
    return FIXTURES_DIR / "foundry"


@pytest.fixture
def token_contract_path(foundry_project_dir: Path) -> Path:
    """Path to a token contract with loops, mappings, events and modifiers."""
    return foundry_project_dir / "src" / "GasToken.sol"


@pytest.fixture
def hardhat_project_dir() -> Path:
    """Path to a Hardhat project with a gasReporterOutput.json."""
    return FIXTURES_DIR / "hardhat"
