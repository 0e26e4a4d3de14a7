"""Chain catalog and registry."""

from .catalog import KNOWN_CHAINS, ChainDefinition, chain_from_name
from .registry import ChainRegistry, WriteClient

__all__ = [
    "KNOWN_CHAINS",
    "ChainDefinition",
    "ChainRegistry",
    "WriteClient",
    "chain_from_name",
]
