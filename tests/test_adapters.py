"""Tests for framework gas data adapters."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from gas_guardian.adapters import (
    FoundryAdapter,
    HardhatAdapter,
    NullGasDataProvider,
    create_adapter,
    extract_function_name,
)
from gas_guardian.adapters import foundry, hardhat
from gas_guardian.adapters.base import find_project_root
from gas_guardian.config import AdapterConfig


def fail_if_run(*args, **kwargs):
    raise AssertionError(f"Unexpected subprocess call: {args}")


class TestExtractFunctionName:
    """Tests for mapping test names to function names."""

    @pytest.mark.parametrize(
        ("test_name", "expected"),
        [
            ("testTransfer", "transfer"),
            ("test_mint", "mint"),
            ("testBatchTransfer()", "batchtransfer"),
            ("TestApprove", "approve"),
            ("helper", None),
            ("test", None),
        ],
    )
    def test_names(self, test_name: str, expected: str | None):
        assert extract_function_name(test_name) == expected


class TestFoundryParsing:
    """Tests for Foundry output parsers."""

    def test_snapshot_fixture(self, foundry_project_dir: Path):
        content = (foundry_project_dir / ".gas-snapshot").read_text(encoding="utf-8")

        assert foundry.parse_snapshot(content) == {
            "batchtransfer": 85421,
            "getbalance": 7800,
            "transfer": 133128,
            "mint": 29999,
        }

    def test_snapshot_ignores_other_lines(self):
        content = "garbage line\n\nCounterTest:testIncrement() (gas: 31303)\n"
        assert foundry.parse_snapshot(content) == {"increment": 31303}

    def test_forge_output_separator(self):
        assert foundry.parse_snapshot("GasTokenTest::testTransfer() (gas: 133128)") == {
            "transfer": 133128
        }

    def test_forge_json_suites(self):
        output = json.dumps({
            "test/GasToken.t.sol:GasTokenTest": {
                "test_results": {
                    "testTransfer()": {"status": "Success", "gas_used": 133128},
                    "testRevert()": {"status": "Success", "gas_used": 0},
                },
            },
        })

        assert foundry.parse_forge_json(output) == {"transfer": 133128}

    def test_forge_json_legacy(self):
        assert foundry.parse_forge_json('{"testMint": 29999, "testFlag": true}') == {"mint": 29999}

    def test_forge_json_falls_back_to_text(self):
        assert foundry.parse_forge_json("GasTokenTest:testMint() (gas: 29999)") == {"mint": 29999}

    def test_forge_json_non_object(self):
        assert foundry.parse_forge_json("[1, 2, 3]") == {}

    def test_gas_report_output(self):
        output = "\n".join([
            "Ran 2 tests for test/GasToken.t.sol:GasTokenTest",
            "[PASS] testTransfer() (gas: 133128)",
            "[PASS] test_mint() (gas: 29999)",
            "Suite result: ok. 2 passed",
        ])

        assert foundry.parse_test_output(output) == {"transfer": 133128, "mint": 29999}


class TestFoundryAdapter:
    """Tests for FoundryAdapter."""

    def test_project_dir_discovery(self, token_contract_path: Path, foundry_project_dir: Path):
        adapter = FoundryAdapter()
        assert adapter.project_dir(token_contract_path) == foundry_project_dir.resolve()

    def test_project_dir_fallback(self, tmp_path: Path):
        contract = tmp_path / "contracts" / "A.sol"
        contract.parent.mkdir()
        contract.write_text("contract A {}")

        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path / "configured"))
        assert adapter.project_dir(contract) == tmp_path / "configured"

    def test_is_foundry_project(self, foundry_project_dir: Path, tmp_path: Path):
        adapter = FoundryAdapter()
        assert adapter.is_foundry_project(foundry_project_dir)
        assert not adapter.is_foundry_project(tmp_path)

        (tmp_path / "lib").mkdir()
        assert adapter.is_foundry_project(tmp_path)

    def test_existing_snapshot(self, token_contract_path: Path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fail_if_run)
        adapter = FoundryAdapter(AdapterConfig(auto_run=True))

        gas_data = adapter.get_gas_data(token_contract_path)

        assert gas_data["transfer"] == 133128
        assert gas_data["mint"] == 29999

    def test_no_snapshot_without_auto_run(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fail_if_run)
        (tmp_path / "foundry.toml").write_text("[profile.default]\n")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=False))

        assert adapter.get_gas_data() == {}

    def test_forge_missing(self, tmp_path: Path, monkeypatch):
        """A missing forge binary yields no data, not an exception."""
        calls = []

        def missing(args, **kwargs):
            calls.append(args)
            raise FileNotFoundError(args[0])

        monkeypatch.setattr(subprocess, "run", missing)
        (tmp_path / "foundry.toml").write_text("[profile.default]\n")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data() == {}
        assert calls == [
            ["forge", "snapshot"],
            ["forge", "test", "--json"],
            ["forge", "test", "--gas-report"],
        ]

    def test_generate_snapshot(self, tmp_path: Path, monkeypatch):
        def forge(args, cwd, **kwargs):
            (Path(cwd) / ".gas-snapshot").write_text("T:testTransfer() (gas: 50000)\n")
            return subprocess.CompletedProcess(args, 0, stdout="", stderr="")

        monkeypatch.setattr(subprocess, "run", forge)
        (tmp_path / "foundry.toml").write_text("[profile.default]\n")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data() == {"transfer": 50000}

    def test_command_failure(self, tmp_path: Path, monkeypatch):
        def failing(args, **kwargs):
            return subprocess.CompletedProcess(args, 1, stdout="", stderr="compilation failed")

        monkeypatch.setattr(subprocess, "run", failing)
        (tmp_path / "foundry.toml").write_text("[profile.default]\n")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data() == {}

    def test_not_a_foundry_project(self, tmp_path: Path, monkeypatch):
        """Outside a Foundry project nothing is run, even with auto_run."""
        calls = []
        monkeypatch.setattr(
            FoundryAdapter, "run_command", lambda self, args, cwd, env=None: calls.append((args, cwd))
        )
        contract = tmp_path / "A.sol"
        contract.write_text("contract A { function f() public {} }")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data(contract) == {}
        assert calls == []

    def test_forge_json_fallback(self, tmp_path: Path, monkeypatch):
        """Without a snapshot, `forge test --json` output is used."""
        output = json.dumps({
            "test/GasToken.t.sol:GasTokenTest": {
                "test_results": {"testTransfer()": {"status": "Success", "gas_used": 133128}},
            },
        })

        def forge(args, **kwargs):
            stdout = output if args == ["forge", "test", "--json"] else ""
            return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")

        monkeypatch.setattr(subprocess, "run", forge)
        (tmp_path / "foundry.toml").write_text("[profile.default]\n")
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data() == {"transfer": 133128}

    def test_command_timeout(self, tmp_path: Path, monkeypatch):
        def slow(args, **kwargs):
            raise subprocess.TimeoutExpired(args, kwargs.get("timeout"))

        monkeypatch.setattr(subprocess, "run", slow)
        adapter = FoundryAdapter(AdapterConfig(project_root=tmp_path, command_timeout=1))

        assert adapter.run_command(["forge", "snapshot"], cwd=tmp_path) is None


class TestHardhatParsing:
    """Tests for Hardhat output parsers."""

    def test_reporter_fixture(self, hardhat_project_dir: Path):
        data = json.loads((hardhat_project_dir / "gasReporterOutput.json").read_text())

        assert hardhat.parse_gas_report(data) == {"transfer": 51500}

    def test_nested_avg(self):
        data = {"info": {"methods": {"GasToken": {"transfer": {"avg": 51000}, "mint": {"avg": 0}}}}}
        assert hardhat.parse_gas_report(data) == {"transfer": 51000}

    def test_methods_gas_used(self):
        data = {"methods": {"Approve": {"gasUsed": 46000}, "burn": {"gasUsed": None}}}
        assert hardhat.parse_gas_report(data) == {"approve": 46000}

    def test_non_object(self):
        assert hardhat.parse_gas_report([1, 2]) == {}
        assert hardhat.parse_gas_report({}) == {}

    def test_report_table_text(self):
        content = "\n".join([
            "|  Contract  ·  Method  ·  Min  ·  Max  ·  Avg  ·  # calls  |",
            "|  GasToken  ·  transfer  ·  51000  ·  52000  ·  51500  ·  2  |",
            "|  GasToken  ·  mint  ·  -  ·  -  ·  0  ·  0  |",
        ])

        assert hardhat.parse_gas_report_text(content) == {"transfer": 51500}

    def test_test_output(self):
        output = "  ✓ transfers (52ms)\ntransfer gas used: 51234\nMint Gas Used: 70000\n"
        assert hardhat.parse_test_output(output) == {"transfer": 51234, "mint": 70000}


class TestHardhatAdapter:
    """Tests for HardhatAdapter."""

    def test_fixture_report(self, hardhat_project_dir: Path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fail_if_run)
        adapter = HardhatAdapter(AdapterConfig(project_root=hardhat_project_dir))

        assert adapter.get_gas_data() == {"transfer": 51500}

    def test_project_dir_from_package_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"devDependencies": {"hardhat": "^2.19.0"}}))
        contract = tmp_path / "contracts" / "Token.sol"
        contract.parent.mkdir()
        contract.write_text("contract Token {}")

        assert HardhatAdapter().project_dir(contract) == tmp_path.resolve()
        assert hardhat.is_hardhat_project(tmp_path)

    def test_package_json_without_hardhat(self, tmp_path: Path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"ethers": "^6"}}))
        assert not hardhat.is_hardhat_project(tmp_path)

    def test_malformed_package_json(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{not json")
        assert not hardhat.is_hardhat_project(tmp_path)

    def test_text_report_file(self, tmp_path: Path):
        (tmp_path / "gas-report.json").write_text(
            "|  GasToken  ·  approve  ·  46000  ·  46000  ·  46000  ·  1  |\n"
        )
        (tmp_path / "hardhat.config.js").write_text("module.exports = {};\n")
        adapter = HardhatAdapter(AdapterConfig(project_root=tmp_path, auto_run=False))

        assert adapter.get_gas_data() == {"approve": 46000}

    def test_run_tests_uses_test_output(self, tmp_path: Path, monkeypatch):
        seen = {}

        def npx(args, cwd, env=None, **kwargs):
            seen["args"] = args
            seen["report_gas"] = (env or {}).get("REPORT_GAS")
            return subprocess.CompletedProcess(args, 0, stdout="transfer gas used: 51234\n", stderr="")

        monkeypatch.setattr(subprocess, "run", npx)
        (tmp_path / "hardhat.config.js").write_text("module.exports = {};\n")
        adapter = HardhatAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data() == {"transfer": 51234}
        assert seen == {"args": ["npx", "hardhat", "test"], "report_gas": "true"}

    def test_no_report_without_auto_run(self, tmp_path: Path, monkeypatch):
        monkeypatch.setattr(subprocess, "run", fail_if_run)
        (tmp_path / "hardhat.config.ts").write_text("export default {};\n")
        adapter = HardhatAdapter(AdapterConfig(project_root=tmp_path, auto_run=False))

        assert adapter.get_gas_data() == {}

    def test_not_a_hardhat_project(self, tmp_path: Path, monkeypatch):
        """Outside a Hardhat project nothing is run, even with auto_run."""
        calls = []
        monkeypatch.setattr(
            HardhatAdapter, "run_command", lambda self, args, cwd, env=None: calls.append((args, cwd))
        )
        contract = tmp_path / "A.sol"
        contract.write_text("contract A { function f() public {} }")
        adapter = HardhatAdapter(AdapterConfig(project_root=tmp_path, auto_run=True))

        assert adapter.get_gas_data(contract) == {}
        assert calls == []


class TestFactory:
    """Tests for create_adapter and project discovery."""

    def test_create(self):
        assert isinstance(create_adapter("foundry"), FoundryAdapter)
        assert isinstance(create_adapter("Hardhat"), HardhatAdapter)
        assert isinstance(create_adapter("none"), NullGasDataProvider)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown framework"):
            create_adapter("truffle")

    def test_null_provider(self):
        assert create_adapter("none").get_gas_data("anything.sol") == {}

    def test_find_project_root_depth(self, tmp_path: Path):
        (tmp_path / "marker").write_text("")
        deep = tmp_path / "a" / "b" / "c"
        deep.mkdir(parents=True)
        contract = deep / "X.sol"

        assert find_project_root(contract, ("marker",)) == tmp_path.resolve()
        assert find_project_root(contract, ("marker",), max_depth=2) is None
