"""Secrets distribution for Chainlink Functions DONs."""

from .config import SecretsDistributionConfig
from .encryption import SecretsManager, decrypt_with_private_key, ecies_encrypt
from .gateway import GatewayClient
from .gist import GistClient
from .pipeline import DistributionState, SecretsDistributionPipeline
from .storage import DistributionStore

__all__ = [
    "DistributionState",
    "DistributionStore",
    "GatewayClient",
    "GistClient",
    "SecretsDistributionConfig",
    "SecretsDistributionPipeline",
    "SecretsManager",
    "decrypt_with_private_key",
    "ecies_encrypt",
]
