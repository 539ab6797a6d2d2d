"""Interface for gas data providers (framework adapters)."""

from __future__ import annotations

import logging
import os
import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from ..config import AdapterConfig

logger = logging.getLogger(__name__)

TEST_NAME_PATTERN = re.compile(r"test_?(\w+)", re.IGNORECASE)

# Parent directories visited during project-root discovery
MAX_ROOT_SEARCH_DEPTH = 10


def extract_function_name(test_name: str) -> str | None:
    """Map a test name to the lowercase function it measures.

    testTransfer -> transfer, test_batchMint -> batchmint.
    """
    match = TEST_NAME_PATTERN.search(test_name)
    return match.group(1).lower() if match else None


def find_project_root(
    contract_path: Path | str,
    markers: tuple[str, ...],
    max_depth: int = MAX_ROOT_SEARCH_DEPTH,
) -> Path | None:
    """Walk up from a contract file looking for any of the marker paths.

    Args:
        contract_path: A file inside the project.
        markers: File or directory names that identify a project root.
        max_depth: Maximum number of parent directories to visit.

    Returns:
        The first directory containing a marker, or None.
    """
    current = Path(contract_path).resolve().parent
    for _ in range(max_depth):
        if any((current / marker).exists() for marker in markers):
            return current
        if current.parent == current:
            break
        current = current.parent
    return None


class GasDataProvider(ABC):
    """Supplies measured gas usage per function.

    get_gas_data() maps lowercase function names to non-negative gas units.
    An empty mapping means "no data"; it is not an error.
    """

    name: str = "base"

    def __init__(self, config: AdapterConfig | None = None):
        self.config = config or AdapterConfig()

    @abstractmethod
    def get_gas_data(self, contract_path: Path | str | None = None) -> dict[str, int]:
        """Collect gas data, optionally scoped to the project containing contract_path."""
        pass

    def run_command(
        self,
        args: list[str],
        cwd: Path,
        env: dict[str, str] | None = None,
    ) -> str | None:
        """Run a framework command, returning stdout or None on failure."""
        logger.info(f"Running {' '.join(args)} in {cwd}")
        try:
            result = subprocess.run(
                args,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.config.command_timeout,
                env={**os.environ, **env} if env else None,
            )
        except FileNotFoundError:
            logger.warning(f"{args[0]} not found; is {self.name} installed?")
            return None
        except subprocess.TimeoutExpired:
            logger.warning(f"{' '.join(args)} timed out after {self.config.command_timeout}s")
            return None

        if result.returncode != 0:
            logger.warning(
                f"{' '.join(args)} exited with {result.returncode}: {result.stderr.strip()[:200]}"
            )
            return None
        return result.stdout


class NullGasDataProvider(GasDataProvider):
    """Provider for projects without a supported framework."""

    name = "none"

    def get_gas_data(self, contract_path: Path | str | None = None) -> dict[str, int]:
        return {}
