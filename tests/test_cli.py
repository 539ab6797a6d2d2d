"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gas_guardian import __version__
from gas_guardian.cli import expand_paths, main


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """Keep .env files and GAS_GUARDIAN_* variables out of CLI runs."""
    monkeypatch.chdir(tmp_path)
    for name in ("FRAMEWORK", "AUTO_RUN", "SIMILARITY_THRESHOLD", "INTERNAL_CALL_SCOPE"):
        monkeypatch.delenv(f"GAS_GUARDIAN_{name}", raising=False)


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_help():
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0


def test_no_command():
    assert main([]) == 1


def test_analyze_json(simple_contract_path: Path, capsys):
    code = main(["analyze", str(simple_contract_path), "--framework", "none", "--format", "json"])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["framework"] == "none"
    assert data["contracts"][0]["name"] == "SimpleContract"
    assert data["contracts"][0]["functions"][0]["name"] == "setValue"


def test_analyze_summary_json(simple_contract_path: Path, capsys):
    code = main([
        "analyze", str(simple_contract_path),
        "--framework", "none", "--format", "json", "--summary",
    ])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert data["summary"]["total_functions"] == 1
    assert "contracts" not in data


def test_analyze_text(simple_contract_path: Path, capsys):
    assert main(["analyze", str(simple_contract_path), "--framework", "none", "--format", "text"]) == 0
    assert "CONTRACT SimpleContract" in capsys.readouterr().out


def test_analyze_rich(simple_contract_path: Path, capsys):
    assert main(["analyze", str(simple_contract_path), "--framework", "none"]) == 0
    assert "SimpleContract" in capsys.readouterr().out


def test_analyze_foundry_directory(foundry_project_dir: Path, capsys):
    code = main([
        "analyze", str(foundry_project_dir / "src"),
        "--framework", "foundry", "--no-auto-run", "--format", "json",
    ])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    functions = {f["name"]: f for f in data["contracts"][0]["functions"]}
    assert functions["transfer"]["gas_usage"] == 133128
    assert functions["transfer"]["gas_rank"] == "high"


def test_missing_file(tmp_path: Path, capsys):
    code = main(["analyze", str(tmp_path / "Missing.sol"), "--framework", "none", "--format", "json"])

    assert code == 1
    data = json.loads(capsys.readouterr().out)
    assert data["errors"][0]["kind"] == "not_found"


def test_suggest_json(simple_contract_path: Path, capsys):
    assert main(["suggest", str(simple_contract_path), "--format", "json"]) == 0

    data = json.loads(capsys.readouterr().out)
    suggestions = data[str(simple_contract_path)]["setValue"]
    assert any(s["type"] == "storage" for s in suggestions)


def test_suggest_rich(simple_contract_path: Path, capsys):
    assert main(["suggest", str(simple_contract_path)]) == 0
    assert "Function: setValue" in capsys.readouterr().out


def test_report_to_file(simple_contract_path: Path, tmp_path: Path):
    output = tmp_path / "report.md"

    assert main(["report", str(simple_contract_path), "--framework", "none", "-o", str(output)]) == 0
    content = output.read_text(encoding="utf-8")
    assert content.startswith("# Gas Guardian Analysis Report")
    assert "## Contract: SimpleContract" in content


def test_report_unwritable(simple_contract_path: Path, tmp_path: Path):
    output = tmp_path / "missing-dir" / "report.md"
    assert main(["report", str(simple_contract_path), "--framework", "none", "-o", str(output)]) == 1


def test_report_json_stdout(simple_contract_path: Path, capsys):
    assert main(["report", str(simple_contract_path), "--framework", "none", "--format", "json"]) == 0
    assert json.loads(capsys.readouterr().out)["summary"]["total_contracts"] == 1


def test_invalid_framework(simple_contract_path: Path):
    with pytest.raises(SystemExit) as exc:
        main(["analyze", str(simple_contract_path), "--framework", "truffle"])
    assert exc.value.code == 2


def test_expand_paths(foundry_project_dir: Path, simple_contract_path: Path):
    paths = expand_paths([foundry_project_dir, simple_contract_path])

    assert paths == [foundry_project_dir / "src" / "GasToken.sol", simple_contract_path]
