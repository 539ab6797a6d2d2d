"""Foundry gas data: .gas-snapshot files and forge output."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from .base import GasDataProvider, extract_function_name, find_project_root

logger = logging.getLogger(__name__)

SNAPSHOT_FILE = ".gas-snapshot"
PROJECT_MARKERS = ("foundry.toml", "lib")

# Markers trusted when walking up from a contract (lib/ also matches /lib)
ROOT_MARKERS = ("foundry.toml",)

# CounterTest:testIncrement() (gas: 31303)
# CounterTest:testFuzz_Set(uint256) (runs: 256, μ: 30454, ~: 31310)
# forge output uses "::" as separator
SNAPSHOT_LINE_PATTERN = re.compile(
    r"(\w+)::?(test\w*)\([^)]*\)\s+"
    r"\((?:gas:\s*(\d+)|runs:\s*\d+,\s*μ:\s*(\d+),\s*~:\s*\d+)\)"
)

GAS_REPORT_GAS_PATTERN = re.compile(r"gas:\s*(\d+)")


def parse_snapshot(content: str) -> dict[str, int]:
    """Parse .gas-snapshot content (or snapshot-style forge output).

    Fuzz rows use the mean (μ) gas.
    """
    gas_data: dict[str, int] = {}
    for line in content.splitlines():
        match = SNAPSHOT_LINE_PATTERN.search(line)
        if not match:
            continue
        name = extract_function_name(match.group(2))
        if name:
            gas_data[name] = int(match.group(3) or match.group(4))
    return gas_data


def parse_forge_json(output: str) -> dict[str, int]:
    """Parse `forge test --json` output.

    Supports the suite shape ({suite: {test_results: {name: {gas_used}}}}) and
    the legacy flat shape ({testName: gas}). Non-JSON output is parsed as
    snapshot text.
    """
    try:
        data = json.loads(output)
    except ValueError:
        return parse_snapshot(output)

    gas_data: dict[str, int] = {}
    if not isinstance(data, dict):
        return gas_data

    for key, value in data.items():
        if isinstance(value, dict) and isinstance(value.get("test_results"), dict):
            for test_name, result in value["test_results"].items():
                gas_used = result.get("gas_used") if isinstance(result, dict) else None
                name = extract_function_name(test_name)
                if name and isinstance(gas_used, (int, float)) and gas_used > 0:
                    gas_data[name] = int(gas_used)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            name = extract_function_name(key)
            if name:
                gas_data[name] = int(value)
    return gas_data


def parse_test_output(output: str) -> dict[str, int]:
    """Parse `forge test --gas-report` text for `testX() (gas: N)` lines."""
    gas_data: dict[str, int] = {}
    for line in output.splitlines():
        if "gas:" not in line or "test" not in line:
            continue
        gas_match = GAS_REPORT_GAS_PATTERN.search(line)
        name = extract_function_name(line[line.find("test"):])
        if gas_match and name:
            gas_data[name] = int(gas_match.group(1))
    return gas_data


class FoundryAdapter(GasDataProvider):
    """Gas data from a Foundry project.

    Directories without a Foundry marker yield no data and run nothing. An
    existing .gas-snapshot is preferred. With auto_run enabled, `forge
    snapshot` is run when none exists, falling back to `forge test --json`
    and then `forge test --gas-report` output.
    """

    name = "foundry"

    def project_dir(self, contract_path: Path | str | None = None) -> Path:
        """Foundry project root for a contract, or the configured root."""
        if contract_path:
            root = find_project_root(contract_path, ROOT_MARKERS)
            if root:
                return root
        return Path(self.config.project_root)

    def is_foundry_project(self, directory: Path | None = None) -> bool:
        directory = Path(directory or self.config.project_root)
        return any((directory / marker).exists() for marker in PROJECT_MARKERS)

    def load_snapshot(self, project_dir: Path) -> dict[str, int]:
        """Parse an existing .gas-snapshot, or return {} when absent."""
        snapshot = project_dir / SNAPSHOT_FILE
        if not snapshot.exists():
            logger.debug(f"No snapshot at {snapshot}")
            return {}
        try:
            content = snapshot.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {snapshot}: {e}")
            return {}
        return parse_snapshot(content)

    def generate_snapshot(self, project_dir: Path) -> dict[str, int]:
        """Run `forge snapshot` and parse the resulting file."""
        if self.run_command(["forge", "snapshot"], cwd=project_dir) is None:
            return {}
        return self.load_snapshot(project_dir)

    def run_json_tests(self, project_dir: Path) -> dict[str, int]:
        """Run `forge test --json` and parse its output."""
        output = self.run_command(["forge", "test", "--json"], cwd=project_dir)
        return parse_forge_json(output) if output else {}

    def run_gas_report(self, project_dir: Path) -> dict[str, int]:
        """Run `forge test --gas-report` and parse its output."""
        output = self.run_command(["forge", "test", "--gas-report"], cwd=project_dir)
        return parse_test_output(output) if output else {}

    def get_gas_data(self, contract_path: Path | str | None = None) -> dict[str, int]:
        project_dir = self.project_dir(contract_path)
        if not self.is_foundry_project(project_dir):
            logger.info(f"{project_dir} is not a Foundry project, skipping gas data")
            return {}

        gas_data = self.load_snapshot(project_dir)
        if gas_data:
            logger.info(f"Loaded {len(gas_data)} entries from {project_dir / SNAPSHOT_FILE}")
            return gas_data

        if not self.config.auto_run:
            logger.warning(f"No Foundry gas snapshot found in {project_dir}")
            return {}

        gas_data = (
            self.generate_snapshot(project_dir)
            or self.run_json_tests(project_dir)
            or self.run_gas_report(project_dir)
        )
        if not gas_data:
            logger.warning(f"No Foundry gas data available for {project_dir}")
        return gas_data
