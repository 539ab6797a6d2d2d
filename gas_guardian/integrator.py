"""Merge measured gas data and ranked suggestions into a parsed contract."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from .config import AnalyzerConfig
from .estimator import gas_rank, potential_savings
from .ranker import merge
from .rules import analyze_function
from .schemas import Contract, ContractAnalysis, FunctionAnalysis, Suggestion

logger = logging.getLogger(__name__)


def integrate(
    contract: Contract,
    cost_map: Mapping[str, int] | None = None,
    suggestions: Sequence[list[Suggestion]] | None = None,
    config: AnalyzerConfig | None = None,
    path: str = "",
    framework: str = "none",
    source: str | None = None,
) -> ContractAnalysis:
    """Enrich a parsed contract with gas usage, rank and suggestions.

    Args:
        contract: Parsed contract.
        cost_map: Lowercase function name -> measured gas. Missing names get 0.
        suggestions: Ranked suggestions per function, aligned with
            contract.functions. When None, static rules are run and merged here.
        config: Analyzer configuration.
        path: Source path, for reporting.
        framework: Name of the framework that produced cost_map.
        source: Full contract text, for contract-scoped rule heuristics.

    Returns:
        ContractAnalysis with one FunctionAnalysis per function, in order.
    """
    config = config or AnalyzerConfig()
    cost_map = cost_map or {}

    if suggestions is not None and len(suggestions) != len(contract.functions):
        raise ValueError(
            f"Got {len(suggestions)} suggestion lists for {len(contract.functions)} functions"
        )

    analyses = []
    for i, function in enumerate(contract.functions):
        if suggestions is None:
            ranked = merge(
                analyze_function(function, config.rules, source),
                config=config.ranking,
            )
        else:
            ranked = list(suggestions[i])

        gas_usage = max(0, int(cost_map.get(function.name.lower(), 0)))
        analyses.append(FunctionAnalysis(
            function=function,
            gas_usage=gas_usage,
            gas_rank=gas_rank(gas_usage, config.gas),
            suggestions=ranked,
            potential_savings=potential_savings(ranked, gas_usage, config.gas),
        ))

    result = ContractAnalysis(
        contract=contract,
        path=path,
        functions=analyses,
        framework=framework,
    )
    logger.debug(
        f"Integrated {contract.name}: {len(analyses)} functions, "
        f"{result.total_gas_usage} gas, {result.gas_coverage:.0f}% coverage"
    )
    return result


def summarize(contracts: Iterable[ContractAnalysis]) -> dict:
    """Aggregate statistics across analyzed contracts.

    Args:
        contracts: Per-contract analysis results.

    Returns:
        Dictionary with totals, gas data coverage and averages.
    """
    contracts = list(contracts)
    total_functions = sum(len(c.functions) for c in contracts)
    total_gas = sum(c.total_gas_usage for c in contracts)
    total_savings = sum(c.total_potential_savings for c in contracts)
    with_gas = sum(1 for c in contracts if c.gas_data_available)

    return {
        "total_contracts": len(contracts),
        "total_functions": total_functions,
        "total_gas_usage": total_gas,
        "total_potential_savings": total_savings,
        "contracts_with_gas_data": with_gas,
        "gas_data_coverage": round(with_gas / len(contracts) * 100) if contracts else 0,
        "average_gas_per_function": round(total_gas / total_functions) if total_functions else 0,
        "potential_savings_percentage": round(total_savings / total_gas * 100) if total_gas else 0,
    }
