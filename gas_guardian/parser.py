"""Structural parser for Solidity contract source text.

Recovers a function-level model without a grammar:

1. Contract name from the first contract/interface/library declaration.
2. Function signatures found by regex, anchored at the opening brace.
3. Function bodies extracted by brace-depth counting from that brace, so
   nested blocks are always returned balanced.
4. Parameters split on commas and matched against a `type [location] name`
   shape; entries that don't match are skipped.
5. Patterns detected per body (see patterns.py).
6. State variables and events collected from contract-level text.

Braces inside string literals and comments are counted like any other brace.
This is a known limitation of the heuristic parser.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path

from .patterns import detect_patterns
from .schemas import (
    INVALID_CONTRACT,
    STATE_MUTABILITIES,
    UNKNOWN_CONTRACT,
    VISIBILITIES,
    Contract,
    Function,
    Parameter,
)

logger = logging.getLogger(__name__)


class ContractNotFoundError(FileNotFoundError):
    """The contract file does not exist."""


class ContractReadError(OSError):
    """The contract file exists but could not be read as UTF-8 text."""


DECLARATION_KEYWORD_PATTERN = re.compile(r"\b(?:contract|interface|library)\b")
CONTRACT_NAME_PATTERN = re.compile(r"\b(?:contract|interface|library)\s+([A-Za-z_]\w*)")

# function name(params) <qualifiers> {
FUNCTION_PATTERN = re.compile(
    r"\bfunction\s+([A-Za-z_]\w*)\s*\(([^(){};]*)\)([^{};]*?)\{"
)

RETURNS_PATTERN = re.compile(r"\breturns\s*\(([^{};]*)\)")

DATA_LOCATIONS = ("memory", "calldata", "storage")

PARAMETER_PATTERN = re.compile(
    r"^\s*([A-Za-z_][\w.]*(?:\s*\[\s*\w*\s*\])*)"  # type, with optional array dims
    r"(?:\s+(payable))?"
    r"(?:\s+(memory|calldata|storage))?"
    r"(?:\s+indexed)?"
    r"(?:\s+(?!(?:memory|calldata|storage|payable|indexed)\b)([A-Za-z_]\w*))?"
    r"\s*$"
)

_STATE_VAR_TYPE = (
    r"\b(?:u?int\d*|address(?:\s+payable)?|bool|string|bytes\d*"
    r"|mapping\s*\((?:[^()]|\([^()]*\))*\))"
)
STATE_VARIABLE_PATTERN = re.compile(
    _STATE_VAR_TYPE
    + r"\s+(?:(?:public|private|internal|constant|immutable|override)\s+)*"
    + r"([A-Za-z_]\w*)\s*[;=]"
)

EVENT_PATTERN = re.compile(r"\bevent\s+([A-Za-z_]\w*)\s*\(")

# Bodies that are not functions but still hold locals:
# modifier name[(params)] ... {, constructor(...) ... {, fallback(...) ... {, receive() ... {
BLOCK_PATTERN = re.compile(
    r"\b(?:modifier\s+[A-Za-z_]\w*\s*(?:\([^(){};]*\))?"
    r"|(?:constructor|fallback|receive)\s*\([^(){};]*\))"
    r"[^{};]*?\{"
)


class ContractParser(ABC):
    """Interface for structural contract parsers."""

    name: str = "base"

    @abstractmethod
    def parse(self, source: str) -> Contract:
        """Parse contract source text.

        Never raises on malformed content; degrades to fewer (or zero)
        functions and a sentinel contract name.
        """
        ...


class HeuristicParser(ContractParser):
    """Regex and brace-counting parser."""

    name = "heuristic"

    def parse(self, source: str) -> Contract:
        contract = Contract(total_lines=count_lines(source))

        if not DECLARATION_KEYWORD_PATTERN.search(source):
            contract.name = INVALID_CONTRACT
            return contract

        name_match = CONTRACT_NAME_PATTERN.search(source)
        contract.name = name_match.group(1) if name_match else UNKNOWN_CONTRACT

        # (start, end) spans of bodies excluded from the state scan
        spans: list[tuple[int, int]] = []

        pos = 0
        while True:
            match = FUNCTION_PATTERN.search(source, pos)
            if match is None:
                break

            brace_pos = match.end() - 1
            end = find_matching_brace(source, brace_pos)
            if end is None:
                # Unterminated body: no function for this match
                logger.debug(
                    f"Unterminated body for function '{match.group(1)}' "
                    f"at offset {match.start()}"
                )
                pos = match.end()
                continue

            contract.functions.append(self._build_function(source, match, end))
            spans.append((match.start(), end + 1))
            pos = end + 1

        spans.extend(_block_spans(source))
        contract_text = _mask_spans(source, spans)
        contract.state_variables = _unique(
            m.group(1) for m in STATE_VARIABLE_PATTERN.finditer(contract_text)
        )
        contract.events = _unique(m.group(1) for m in EVENT_PATTERN.finditer(source))

        return contract

    def _build_function(self, source: str, match: re.Match, end: int) -> Function:
        name, params, qualifiers = match.group(1), match.group(2), match.group(3)

        returns: list[Parameter] = []
        returns_match = RETURNS_PATTERN.search(qualifiers)
        if returns_match:
            returns = parse_parameters(returns_match.group(1), allow_unnamed=True)
            qualifiers = qualifiers[: returns_match.start()]

        words = set(re.findall(r"\w+", qualifiers))
        visibility = next((v for v in VISIBILITIES if v in words), "public")
        mutability = next((m for m in STATE_MUTABILITIES if m in words), "nonpayable")

        source_code = source[match.start(): end + 1]

        return Function(
            name=name,
            visibility=visibility,
            state_mutability=mutability,
            parameters=parse_parameters(params),
            returns=returns,
            patterns=detect_patterns(source_code),
            source_code=source_code,
            start_line=source.count("\n", 0, match.start()) + 1,
        )


def count_lines(source: str) -> int:
    """Count lines in source text (an empty string is one empty line)."""
    return source.count("\n") + 1


def find_matching_brace(source: str, open_pos: int) -> int | None:
    """Find the brace closing the one at open_pos.

    Walks forward counting depth: +1 on '{', -1 on '}'. Stops when depth
    returns to zero.

    Args:
        source: Text to scan.
        open_pos: Index of an opening brace.

    Returns:
        Index of the matching closing brace, or None if the text ends first.
    """
    depth = 0
    for i in range(open_pos, len(source)):
        char = source[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def parse_parameters(params: str, allow_unnamed: bool = False) -> list[Parameter]:
    """Parse a comma-separated parameter list.

    Entries without a `type name` shape are skipped rather than returned
    partially. Return lists pass allow_unnamed=True so `returns (uint256)`
    keeps its type with an empty name.
    """
    parameters: list[Parameter] = []
    if not params.strip():
        return parameters

    for entry in params.split(","):
        match = PARAMETER_PATTERN.match(entry)
        if not match:
            continue
        if match.group(4) is None and not allow_unnamed:
            continue
        param_type = re.sub(r"\s+", "", match.group(1))
        if match.group(2):
            param_type += " payable"
        parameters.append(Parameter(
            type=param_type,
            name=match.group(4) or "",
            location=match.group(3),
        ))
    return parameters


def _block_spans(source: str) -> list[tuple[int, int]]:
    """(start, end) spans of modifier, constructor, fallback and receive bodies."""
    spans = []
    for match in BLOCK_PATTERN.finditer(source):
        end = find_matching_brace(source, match.end() - 1)
        if end is not None:
            spans.append((match.start(), end + 1))
    return spans


def _mask_spans(source: str, spans: list[tuple[int, int]]) -> str:
    """Blank out the given spans, keeping everything else.

    Spans may arrive unordered and overlap; each character is blanked once.
    """
    if not spans:
        return source
    parts = []
    last = 0
    for start, end in sorted(spans):
        if end <= last:
            continue
        parts.append(source[last:max(start, last)])
        parts.append(" ")
        last = end
    parts.append(source[last:])
    return "".join(parts)


def _unique(names) -> list[str]:
    """Deduplicate names, keeping first-seen order."""
    return list(dict.fromkeys(names))


# Parser registry

_PARSERS: dict[str, type[ContractParser]] = {
    HeuristicParser.name: HeuristicParser,
}

DEFAULT_PARSER = HeuristicParser.name


def register_parser(name: str, parser_cls: type[ContractParser]) -> None:
    """Register an alternative parser implementation under a name."""
    _PARSERS[name] = parser_cls


def get_parser(name: str = DEFAULT_PARSER) -> ContractParser:
    """Create a parser by name.

    Raises:
        ValueError: If no parser is registered under that name.
    """
    if name not in _PARSERS:
        raise ValueError(f"Unknown parser: {name}. Choose from: {list(_PARSERS.keys())}")
    return _PARSERS[name]()


def parse_contract(source: str, parser: ContractParser | None = None) -> Contract:
    """Parse contract source text into a Contract.

    Args:
        source: Raw Solidity source text.
        parser: Parser to use (default heuristic parser).

    Returns:
        Contract model. Sentinel name and no functions for non-contract text.
    """
    return (parser or get_parser()).parse(source)


def read_contract_source(path: Path | str) -> str:
    """Read a contract file as UTF-8 text.

    Raises:
        ContractNotFoundError: If the file doesn't exist.
        ContractReadError: If the file can't be read or decoded.
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ContractNotFoundError(f"File not found: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ContractReadError(f"Failed to read {path}: {e}") from e
