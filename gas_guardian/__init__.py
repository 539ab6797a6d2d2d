"""Gas Guardian - static gas optimization analysis for Solidity contracts."""

__version__ = "0.1.0"
