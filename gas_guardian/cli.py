"""CLI for gas-guardian contract analysis.

Usage:
    gas-guardian analyze <Contract.sol>
    gas-guardian analyze contracts/ --framework hardhat --format json
    gas-guardian suggest <Contract.sol> --llm
    gas-guardian report contracts/ --output report.md
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from . import __version__
from .analyzer import GasAnalyzer
from .config import AnalyzerConfig
from .integrator import summarize
from .llm import create_provider
from .reporter import (
    generate_json_report,
    generate_markdown_report,
    generate_text_report,
    print_rich_report,
    print_suggestions,
)
from .schemas import BatchAnalysis
from .suggestor import SuggestionEngine

logger = logging.getLogger(__name__)

FRAMEWORKS = ["foundry", "hardhat", "none"]


def _add_common_arguments(parser: argparse.ArgumentParser, default_framework: str | None) -> None:
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Contract file(s) or directories to analyze (.sol)",
    )
    parser.add_argument(
        "--framework",
        choices=FRAMEWORKS,
        default=default_framework,
        help="Framework providing gas data (default: GAS_GUARDIAN_FRAMEWORK or foundry)",
    )
    parser.add_argument(
        "--project-root",
        type=Path,
        help="Framework project root (default: discovered from each contract, else cwd)",
    )
    parser.add_argument(
        "--llm",
        action="store_true",
        help="Add AI-generated suggestions (requires ANTHROPIC_API_KEY)",
    )
    parser.add_argument(
        "--no-auto-run",
        action="store_true",
        help="Only read existing gas reports; never run forge or hardhat",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="gas-guardian",
        description="Find gas optimization opportunities in Solidity contracts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyze a contract using an existing Foundry .gas-snapshot
    gas-guardian analyze src/Token.sol

    # Analyze a Hardhat project, output as JSON
    gas-guardian analyze contracts/ --framework hardhat --format json > analysis.json

    # Ranked suggestions per function, including AI suggestions
    gas-guardian suggest src/Token.sol --llm

    # Markdown report
    gas-guardian report src/ --output gas-report.md
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze contracts with gas data",
        description="Parse contracts, load measured gas data and estimate savings",
    )
    _add_common_arguments(analyze_parser, default_framework=None)
    analyze_parser.add_argument(
        "--format",
        "-f",
        choices=["text", "json", "rich"],
        default="rich",
        help="Output format (default: rich)",
    )
    analyze_parser.add_argument(
        "--summary",
        "-s",
        action="store_true",
        help="Show only the aggregate summary across all files",
    )

    # Suggest command
    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Show ranked optimization suggestions per function",
        description="List static (and optionally AI) suggestions for every function",
    )
    _add_common_arguments(suggest_parser, default_framework="none")
    suggest_parser.add_argument(
        "--format",
        "-f",
        choices=["json", "rich"],
        default="rich",
        help="Output format (default: rich)",
    )

    # Report command
    report_parser = subparsers.add_parser(
        "report",
        help="Generate an analysis report",
        description="Generate a markdown or JSON report for one or more contracts",
    )
    _add_common_arguments(report_parser, default_framework=None)
    report_parser.add_argument(
        "--format",
        "-f",
        choices=["markdown", "json"],
        default="markdown",
        help="Report format (default: markdown)",
    )
    report_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the report to a file instead of stdout",
    )

    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    batch = asyncio.run(run_analysis(parsed))

    if parsed.command == "analyze":
        cmd_analyze(parsed, batch)
    elif parsed.command == "suggest":
        cmd_suggest(parsed, batch)
    elif parsed.command == "report":
        if not cmd_report(parsed, batch):
            return 1

    return 1 if batch.errors else 0


def expand_paths(paths: list[Path]) -> list[Path]:
    """Expand directories into the .sol files they contain, sorted."""
    expanded = []
    for path in paths:
        if path.is_dir():
            expanded.extend(sorted(path.rglob("*.sol")))
        else:
            expanded.append(path)
    return expanded


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    """Load configuration from the environment and apply CLI overrides."""
    config = AnalyzerConfig.from_env()
    if args.framework:
        config.adapter.framework = args.framework
    if args.project_root:
        config.adapter.project_root = args.project_root
    if args.no_auto_run:
        config.adapter.auto_run = False
    if args.llm:
        config.llm.enabled = True
    return config


async def run_analysis(args: argparse.Namespace) -> BatchAnalysis:
    """Analyze the requested files."""
    config = build_config(args)
    provider = create_provider(config=config.llm) if config.llm.enabled else None
    analyzer = GasAnalyzer(config, engine=SuggestionEngine(config, provider))

    paths = expand_paths(args.files)
    logger.info(f"Framework: {analyzer.framework} | Files: {len(paths)}")
    return await analyzer.analyze_files(paths)


def cmd_analyze(args: argparse.Namespace, batch: BatchAnalysis) -> None:
    """Handle the analyze command."""
    if args.format == "json":
        if args.summary:
            data = {
                "framework": batch.framework,
                "summary": summarize(batch.contracts),
                "errors": [e.to_dict() for e in batch.errors],
            }
            print(json.dumps(data, indent=2))
        else:
            print(generate_json_report(batch))
    elif args.format == "text":
        print(generate_text_report(batch))
    else:  # rich
        print_rich_report(batch, summary_only=args.summary)


def cmd_suggest(args: argparse.Namespace, batch: BatchAnalysis) -> None:
    """Handle the suggest command."""
    if args.format == "json":
        data = {
            contract.path: {
                function.name: [s.to_dict() for s in function.suggestions]
                for function in contract.functions
            }
            for contract in batch.contracts
        }
        print(json.dumps(data, indent=2))
    else:
        print_suggestions(batch)


def cmd_report(args: argparse.Namespace, batch: BatchAnalysis) -> bool:
    """Handle the report command. Returns False if the report couldn't be written."""
    if args.format == "json":
        report = generate_json_report(batch)
    else:
        report = generate_markdown_report(batch)

    if not args.output:
        print(report)
        return True

    try:
        args.output.write_text(report, encoding="utf-8")
    except OSError as e:
        print(f"Error: Could not write {args.output}: {e}", file=sys.stderr)
        return False
    logger.info(f"Report saved to {args.output}")
    return True


if __name__ == "__main__":
    sys.exit(main())
