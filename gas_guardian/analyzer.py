"""End-to-end contract analysis.

Pipeline per file: read -> parse -> gas data (adapter) -> suggestions per
function (static rules + optional provider, concurrently) -> integrate.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable

from .adapters import GasDataProvider, create_adapter
from .config import AnalyzerConfig
from .integrator import integrate
from .parser import (
    ContractNotFoundError,
    ContractParser,
    ContractReadError,
    get_parser,
    read_contract_source,
)
from .schemas import AnalysisError, BatchAnalysis, ContractAnalysis
from .suggestor import SuggestionEngine

logger = logging.getLogger(__name__)


class GasAnalyzer:
    """Analyze contract files and attach gas data and ranked suggestions."""

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        adapter: GasDataProvider | None = None,
        engine: SuggestionEngine | None = None,
        parser: ContractParser | None = None,
    ):
        """
        Initialize the analyzer.

        Args:
            config: Analyzer configuration.
            adapter: Gas data provider. Built from config.adapter.framework if None.
            engine: Suggestion engine. Static-only if None.
            parser: Contract parser. Default heuristic parser if None.
        """
        self.config = config or AnalyzerConfig()
        self.adapter = adapter or create_adapter(self.config.adapter.framework, self.config.adapter)
        self.engine = engine or SuggestionEngine(self.config)
        self.parser = parser or get_parser()

    @property
    def framework(self) -> str:
        return self.adapter.name

    async def _gas_data(self, path: str | None, diagnostics: list[str]) -> dict[str, int]:
        try:
            return await asyncio.to_thread(self.adapter.get_gas_data, path)
        except Exception as e:
            message = f"Could not load {self.framework} gas data: {e}"
            logger.warning(message)
            diagnostics.append(message)
            return {}

    async def analyze_source(self, source: str, path: str = "") -> ContractAnalysis:
        """Analyze contract source text.

        Args:
            source: Raw contract text.
            path: File path, used to locate the framework project and in reports.

        Returns:
            ContractAnalysis with diagnostics for any non-fatal problems.
        """
        diagnostics: list[str] = []
        contract = self.parser.parse(source)

        if not contract.is_valid:
            message = f"{path or '<source>'} doesn't appear to contain valid Solidity code"
            logger.warning(message)
            diagnostics.append(message)

        cost_map = await self._gas_data(path or None, diagnostics) if contract.functions else {}
        if cost_map:
            logger.info(f"Loaded gas data for {len(cost_map)} functions from {self.framework}")

        suggestions = await asyncio.gather(*(
            self.engine.generate(function, source, diagnostics)
            for function in contract.functions
        ))

        analysis = integrate(
            contract,
            cost_map,
            suggestions=list(suggestions),
            config=self.config,
            path=path,
            framework=self.framework,
        )
        analysis.diagnostics.extend(diagnostics)
        return analysis

    async def analyze_file(self, path: Path | str) -> ContractAnalysis:
        """Analyze one contract file.

        Raises:
            ContractNotFoundError: If the file doesn't exist.
            ContractReadError: If the file can't be read.
        """
        logger.info(f"Analyzing contract: {Path(path).name}")
        source = read_contract_source(path)
        return await self.analyze_source(source, str(path))

    async def analyze_files(self, paths: Iterable[Path | str]) -> BatchAnalysis:
        """Analyze several files, isolating failures per file.

        Args:
            paths: Contract files.

        Returns:
            BatchAnalysis with results for successful files and one
            AnalysisError per failed file.
        """
        batch = BatchAnalysis(framework=self.framework)
        for path in paths:
            try:
                batch.contracts.append(await self.analyze_file(path))
            except ContractNotFoundError as e:
                logger.error(str(e))
                batch.errors.append(AnalysisError(str(path), "not_found", str(e)))
            except ContractReadError as e:
                logger.error(str(e))
                batch.errors.append(AnalysisError(str(path), "read_error", str(e)))
            except Exception as e:
                logger.error(f"Contract analysis failed for {path}: {e}")
                batch.errors.append(AnalysisError(str(path), "analysis_error", str(e)))
        return batch
