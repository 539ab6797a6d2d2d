"""Report generation for contract analysis results.

JSON, plain text and markdown reports are returned as strings; the rich
console report and suggestion listing print directly.
"""

from __future__ import annotations

import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .estimator import total_estimated_saving
from .integrator import summarize
from .schemas import IMPACT_HIGH, IMPACT_MEDIUM, SOURCE_LLM, BatchAnalysis, FunctionAnalysis

IMPACT_STYLES = {IMPACT_HIGH: "bold red", IMPACT_MEDIUM: "yellow"}

RANK_STYLES = {"high": "red", "medium": "yellow", "low": "green", "unknown": "dim"}


def format_number(n: int) -> str:
    """Format a number with thousands separators."""
    return f"{n:,}"


def _gas_cell(function: FunctionAnalysis) -> str:
    return format_number(function.gas_usage) if function.has_gas_data else "N/A"


def generate_json_report(batch: BatchAnalysis) -> str:
    """Generate a JSON report from the analysis.

    Args:
        batch: The analyzed contracts.

    Returns:
        JSON string with the full result structure.
    """
    return json.dumps(batch.to_dict(), indent=2)


def generate_text_report(batch: BatchAnalysis) -> str:
    """Generate a plain text report from the analysis.

    Args:
        batch: The analyzed contracts.

    Returns:
        Formatted text report.
    """
    lines = []
    summary = summarize(batch.contracts)

    lines.append("=" * 70)
    lines.append("                    Gas Guardian Report")
    lines.append("=" * 70)
    lines.append("")

    lines.append("SUMMARY")
    lines.append("-" * 70)
    lines.append(f"  Framework:            {batch.framework}")
    lines.append(f"  Contracts:            {summary['total_contracts']}")
    lines.append(f"  Functions:            {summary['total_functions']}")
    if summary["total_gas_usage"] > 0:
        lines.append(f"  Total gas usage:      {format_number(summary['total_gas_usage'])}")
        lines.append(
            f"  Potential savings:    {format_number(summary['total_potential_savings'])} gas "
            f"({summary['potential_savings_percentage']}%)"
        )
        lines.append(f"  Gas data coverage:    {summary['gas_data_coverage']}%")
    else:
        lines.append(f"  Potential savings:    {format_number(summary['total_potential_savings'])} gas (estimated)")
        lines.append(f"  No gas data available - run tests with {batch.framework} first")
    lines.append("")

    for contract in batch.contracts:
        lines.append(f"CONTRACT {contract.name}  ({contract.path})")
        lines.append("-" * 70)
        lines.append(f"  Functions: {len(contract.functions)} | Lines: {contract.contract.total_lines}")
        lines.append(f"  {'Function':<28} {'Gas':>10} {'Rank':>8} {'Sugg.':>6} {'Savings':>10}")
        for function in contract.functions:
            lines.append(
                f"  {function.name:<28} {_gas_cell(function):>10} {function.gas_rank:>8} "
                f"{len(function.suggestions):>6} {format_number(function.potential_savings):>10}"
            )
        for diagnostic in contract.diagnostics:
            lines.append(f"  ! {diagnostic}")
        lines.append("")

    if batch.errors:
        lines.append("ERRORS")
        lines.append("-" * 70)
        for error in batch.errors:
            lines.append(f"  {error.path}: [{error.kind}] {error.message}")
        lines.append("")

    lines.append("=" * 70)

    return "\n".join(lines)


def generate_markdown_report(batch: BatchAnalysis) -> str:
    """Generate a markdown report: summary plus a function table per contract.

    Args:
        batch: The analyzed contracts.

    Returns:
        Markdown document.
    """
    summary = summarize(batch.contracts)
    lines = [
        "# Gas Guardian Analysis Report",
        "",
        "## Summary",
        f"- **Framework**: {batch.framework}",
        f"- **Contracts**: {summary['total_contracts']}",
        f"- **Functions**: {summary['total_functions']}",
        f"- **Total Gas Usage**: {format_number(summary['total_gas_usage'])}",
        f"- **Potential Savings**: {format_number(summary['total_potential_savings'])} gas "
        f"({summary['potential_savings_percentage']}%)",
        "",
    ]

    for contract in batch.contracts:
        lines.append(f"## Contract: {contract.name}")
        lines.append("")
        lines.append(f"- **Functions**: {len(contract.functions)}")
        lines.append(f"- **Lines**: {contract.contract.total_lines}")
        lines.append(f"- **Gas Data Available**: {'Yes' if contract.gas_data_available else 'No'}")
        lines.append("")

        if contract.functions:
            lines.append("### Functions")
            lines.append("")
            lines.append("| Function | Gas Usage | Rank | Suggestions | Potential Savings |")
            lines.append("|----------|-----------|------|-------------|-------------------|")
            for function in contract.functions:
                lines.append(
                    f"| {function.name} | {_gas_cell(function)} | {function.gas_rank} "
                    f"| {len(function.suggestions)} | {format_number(function.potential_savings)} |"
                )
            lines.append("")

    if batch.errors:
        lines.append("## Errors")
        lines.append("")
        for error in batch.errors:
            lines.append(f"- `{error.path}`: {error.message}")
        lines.append("")

    return "\n".join(lines)


def print_rich_report(
    batch: BatchAnalysis,
    console: Console | None = None,
    summary_only: bool = False,
) -> None:
    """Print a rich-formatted report to the console.

    Args:
        batch: The analyzed contracts.
        console: Console to print to (default stdout).
        summary_only: Skip per-contract function tables.
    """
    console = console or Console()
    summary = summarize(batch.contracts)

    console.print()
    console.print(Panel.fit("[bold]Gas Guardian Report[/bold]", border_style="blue"))
    console.print()

    summary_table = Table(title="Analysis Summary", show_header=False, box=None)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", justify="right")
    summary_table.add_row("Framework", batch.framework)
    summary_table.add_row("Contracts", str(summary["total_contracts"]))
    summary_table.add_row("Functions", str(summary["total_functions"]))
    summary_table.add_row("Total gas usage", format_number(summary["total_gas_usage"]))
    summary_table.add_row(
        "Potential savings",
        f"{format_number(summary['total_potential_savings'])} ({summary['potential_savings_percentage']}%)",
    )
    summary_table.add_row("Gas data coverage", f"{summary['gas_data_coverage']}%")
    console.print(summary_table)

    if summary["total_gas_usage"] == 0:
        console.print(f"[yellow]No gas data available - run tests with {batch.framework} first[/yellow]")

    if not summary_only:
        for contract in batch.contracts:
            console.print()
            table = Table(
                title=f"{contract.name} [dim]({contract.contract.total_lines} lines)[/dim]"
            )
            table.add_column("Function", style="cyan")
            table.add_column("Gas Usage", justify="right")
            table.add_column("Rank")
            table.add_column("Suggestions", justify="right")
            table.add_column("Potential Savings", justify="right", style="bold")

            for function in contract.functions:
                style = RANK_STYLES.get(function.gas_rank, "")
                table.add_row(
                    function.name,
                    _gas_cell(function),
                    f"[{style}]{function.gas_rank}[/{style}]" if style else function.gas_rank,
                    str(len(function.suggestions)),
                    format_number(function.potential_savings),
                )
            console.print(table)

            for diagnostic in contract.diagnostics:
                console.print(f"[yellow]! {escape(diagnostic)}[/yellow]")

    if batch.errors:
        console.print()
        for error in batch.errors:
            console.print(f"[red]Error[/red] {escape(error.path)}: {escape(error.message)}")

    console.print()


def print_suggestions(batch: BatchAnalysis, console: Console | None = None) -> None:
    """Print ranked suggestions for every function.

    Args:
        batch: The analyzed contracts.
        console: Console to print to (default stdout).
    """
    console = console or Console()

    for contract in batch.contracts:
        console.print()
        console.print(f"[bold cyan]{contract.name}[/bold cyan] [dim]{escape(contract.path)}[/dim]")

        for function in contract.functions:
            console.print()
            console.print(f"[yellow]Function: {function.name}[/yellow]")
            details = (
                f"   Visibility: {function.function.visibility} | "
                f"Complexity: {function.function.complexity_score}"
            )
            if function.function.patterns:
                details += " | Patterns: " + ", ".join(p.type.value for p in function.function.patterns)
            console.print(f"[dim]{details}[/dim]")

            if not function.suggestions:
                console.print("   [green]No optimization suggestions[/green]")
                continue

            for suggestion in function.suggestions:
                style = IMPACT_STYLES.get(suggestion.impact, "dim")
                source = "llm" if suggestion.source == SOURCE_LLM else "rule"
                console.print(
                    f"   [{style}]{suggestion.impact.upper():<6}[/{style}] "
                    f"[dim]{source:<4}[/dim] {escape(suggestion.message)}",
                    highlight=False,
                )
                console.print(
                    f"[dim]          confidence {suggestion.confidence:.0%}"
                    f" | est. saving {format_number(suggestion.estimated_saving)}[/dim]"
                )
            console.print(
                f"[dim]   Rule estimates total: "
                f"{format_number(total_estimated_saving(function.suggestions))} gas[/dim]"
            )

    for error in batch.errors:
        console.print(f"[red]Error[/red] {escape(error.path)}: {escape(error.message)}")
