"""Hardhat gas data: hardhat-gas-reporter output and test logs."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from .base import MAX_ROOT_SEARCH_DEPTH, GasDataProvider

logger = logging.getLogger(__name__)

CONFIG_FILES = ("hardhat.config.js", "hardhat.config.ts")

REPORT_PATHS = (
    "gasReporterOutput.json",
    "gas-report.json",
    "reports/gas-report.json",
    ".gas-report.json",
)

# | Token · transfer · min · max · avg · calls |
REPORT_TABLE_PATTERN = re.compile(r"\|\s*(\w+)\s*·\s*(\w+)\s*·[^·]*·[^·]*·\s*(\d+)\s*·")

# transfer gas used: 51234
TEST_OUTPUT_PATTERN = re.compile(r"(\w+)\s+gas used:\s*(\d+)", re.IGNORECASE)


def has_hardhat_dependency(package_json: Path) -> bool:
    """Check package.json for a hardhat dependency."""
    try:
        with open(package_json, encoding="utf-8") as f:
            pkg = json.load(f)
    except (OSError, ValueError) as e:
        logger.debug(f"Could not read {package_json}: {e}")
        return False
    if not isinstance(pkg, dict):
        return False
    return any(
        "hardhat" in (pkg.get(section) or {})
        for section in ("dependencies", "devDependencies")
    )


def is_hardhat_project(directory: Path) -> bool:
    """A directory with a hardhat config, or a package.json depending on hardhat."""
    if any((directory / name).exists() for name in CONFIG_FILES):
        return True
    package_json = directory / "package.json"
    return package_json.exists() and has_hardhat_dependency(package_json)


def _average(values: list[Any]) -> int:
    numbers = [v for v in values if isinstance(v, (int, float))]
    return round(sum(numbers) / len(numbers)) if numbers else 0


def parse_gas_report(data: Any) -> dict[str, int]:
    """Parse a hardhat-gas-reporter JSON report.

    Supported shapes:
    - info.methods[contract][method].avg
    - info.methods[id] = {method, gasData: [...]}
    - methods[method].gasUsed
    """
    gas_data: dict[str, int] = {}
    if not isinstance(data, dict):
        return gas_data

    methods = (data.get("info") or {}).get("methods") or {}
    for key, entry in methods.items():
        if not isinstance(entry, dict):
            continue
        if "gasData" in entry:
            gas = _average(entry.get("gasData") or [])
            name = entry.get("method") or key
            if gas > 0:
                gas_data[str(name).lower()] = gas
            continue
        for method_name, method in entry.items():
            avg = method.get("avg") if isinstance(method, dict) else None
            if isinstance(avg, (int, float)) and avg > 0:
                gas_data[method_name.lower()] = int(avg)

    for method_name, method in (data.get("methods") or {}).items():
        gas_used = method.get("gasUsed") if isinstance(method, dict) else None
        if isinstance(gas_used, (int, float)) and gas_used > 0:
            gas_data[method_name.lower()] = int(gas_used)

    return gas_data


def parse_gas_report_text(content: str) -> dict[str, int]:
    """Parse the gas reporter's console table (method and avg columns)."""
    gas_data: dict[str, int] = {}
    for line in content.splitlines():
        match = REPORT_TABLE_PATTERN.search(line)
        if match and int(match.group(3)) > 0:
            gas_data[match.group(2).lower()] = int(match.group(3))
    return gas_data


def parse_test_output(output: str) -> dict[str, int]:
    """Parse `<function> gas used: N` lines logged by tests."""
    gas_data: dict[str, int] = {}
    for line in output.splitlines():
        match = TEST_OUTPUT_PATTERN.search(line)
        if match:
            gas_data[match.group(1).lower()] = int(match.group(2))
    return gas_data


class HardhatAdapter(GasDataProvider):
    """Gas data from a Hardhat project.

    Directories that are not Hardhat projects yield no data and run nothing.
    An existing gas report is preferred. With auto_run enabled, `npx hardhat
    test` is run with REPORT_GAS=true when none exists; the fresh report is
    read, falling back to gas figures logged in the test output.
    """

    name = "hardhat"

    def project_dir(self, contract_path: Path | str | None = None) -> Path:
        """Hardhat project root for a contract, or the configured root."""
        if contract_path:
            current = Path(contract_path).resolve().parent
            for _ in range(MAX_ROOT_SEARCH_DEPTH):
                if is_hardhat_project(current):
                    return current
                if current.parent == current:
                    break
                current = current.parent
        return Path(self.config.project_root)

    def load_gas_report(self, project_dir: Path) -> dict[str, int]:
        """Parse the first gas report found in the project, or return {}."""
        for relative in REPORT_PATHS:
            path = project_dir / relative
            if not path.exists():
                continue
            logger.debug(f"Found gas report at {path}")
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Could not read {path}: {e}")
                continue

            if content.lstrip().startswith(("{", "[")):
                try:
                    return parse_gas_report(json.loads(content))
                except ValueError as e:
                    logger.debug(f"Invalid JSON in {path}, parsing as text: {e}")
            return parse_gas_report_text(content)
        return {}

    def run_tests(self, project_dir: Path) -> dict[str, int]:
        """Run `npx hardhat test` with gas reporting enabled."""
        output = self.run_command(
            ["npx", "hardhat", "test"],
            cwd=project_dir,
            env={"REPORT_GAS": "true"},
        )
        if output is None:
            return {}
        return self.load_gas_report(project_dir) or parse_test_output(output)

    def get_gas_data(self, contract_path: Path | str | None = None) -> dict[str, int]:
        project_dir = self.project_dir(contract_path)
        if not is_hardhat_project(project_dir):
            logger.info(f"{project_dir} is not a Hardhat project, skipping gas data")
            return {}

        gas_data = self.load_gas_report(project_dir)
        if gas_data:
            logger.info(f"Loaded {len(gas_data)} entries from Hardhat gas report in {project_dir}")
            return gas_data

        if not self.config.auto_run:
            logger.warning(f"No Hardhat gas report found in {project_dir}")
            return {}

        gas_data = self.run_tests(project_dir)
        if not gas_data:
            logger.warning(f"No Hardhat gas data available for {project_dir}")
        return gas_data
