"""Tests for gas rank and savings estimation."""

import pytest

from gas_guardian.config import GasConfig
from gas_guardian.estimator import gas_rank, potential_savings, total_estimated_saving
from gas_guardian.schemas import Suggestion


def make(impact: str, estimated_saving: int = 0) -> Suggestion:
    return Suggestion(
        type="test",
        message=f"{impact} suggestion",
        confidence=0.5,
        impact=impact,
        estimated_saving=estimated_saving,
    )


@pytest.mark.parametrize(
    ("gas", "expected"),
    [
        (0, "unknown"),
        (-5, "unknown"),
        (1, "low"),
        (29_999, "low"),
        (30_000, "medium"),
        (99_999, "medium"),
        (100_000, "high"),
        (1_000_000, "high"),
    ],
)
def test_gas_rank_thresholds(gas: int, expected: str):
    assert gas_rank(gas) == expected


def test_gas_rank_custom_thresholds():
    config = GasConfig(low_threshold=10, high_threshold=20)
    assert gas_rank(9, config) == "low"
    assert gas_rank(10, config) == "medium"
    assert gas_rank(20, config) == "high"


def test_measured_savings():
    """With measured usage, savings are a percentage per impact tier."""
    suggestions = [make("high"), make("medium"), make("low"), make("critical")]

    assert potential_savings(suggestions, 100_000) == 15_000 + 8_000 + 3_000 + 100


def test_measured_savings_floor():
    assert potential_savings([make("high")], 33_333) == 4_999


def test_flat_savings_without_measurement():
    suggestions = [make("high"), make("medium"), make("low"), make("critical")]

    assert potential_savings(suggestions) == 15_000 + 5_000 + 1_000 + 500
    assert potential_savings(suggestions, 0) == 21_500


def test_no_suggestions_no_savings():
    assert potential_savings([], 50_000) == 0
    assert potential_savings([]) == 0


def test_savings_never_negative():
    assert potential_savings([make("low")], 1) == 0


def test_custom_savings_tables():
    config = GasConfig(savings_percent={"high": 50}, flat_savings={"high": 7})

    assert potential_savings([make("high")], 1_000, config) == 500
    assert potential_savings([make("high"), make("low")], 0, config) == 7 + 500


def test_total_estimated_saving():
    assert total_estimated_saving([make("high", 3_000), make("low", 500)]) == 3_500
