"""Gift agent - Chainlink Functions secrets distribution and gift request dispatch.

This library lets an agent publish encrypted secrets for a Chainlink Functions
DON and submit gift redemption requests to the consumer contract across EVM
chains.
"""

from .cache import FileCacheStore, LayeredCache
from .chains import KNOWN_CHAINS, ChainDefinition, ChainRegistry, WriteClient
from .distribution import (
    DistributionState,
    DistributionStore,
    GatewayClient,
    GistClient,
    SecretsDistributionConfig,
    SecretsDistributionPipeline,
    SecretsManager,
)
from .exceptions import (
    ChainError,
    ConfigError,
    GiftAgentError,
    InsufficientFundsError,
    InvalidChainError,
    InvalidParametersError,
    NetworkError,
    NoSigningAccountError,
    NonceError,
    PublishFailedError,
    SubmissionError,
    SubmissionFailedError,
    UnsupportedChainError,
    UserRejectedError,
    ValidationError,
)
from .gift import (
    DonHostedSecrets,
    GetGiftAction,
    GiftContractConfig,
    GiftRequestOrchestrator,
    ParameterExtractor,
    RemoteSecrets,
    ResponseHandler,
    load_gift_config,
    validate_config,
)
from .settings import Settings
from .types import (
    DistributionRecord,
    DonHostedRecord,
    EncryptedSecrets,
    GiftRequestParams,
    RemoteSecretsRecord,
    Transaction,
    UploadResult,
)
from .wallet import WalletProvider

__version__ = "0.1.0"

__all__ = [
    # Chains and wallet
    "KNOWN_CHAINS",
    "ChainDefinition",
    "ChainRegistry",
    "WriteClient",
    "WalletProvider",
    "Settings",
    # Cache
    "FileCacheStore",
    "LayeredCache",
    # Secrets distribution
    "DistributionState",
    "DistributionStore",
    "GatewayClient",
    "GistClient",
    "SecretsDistributionConfig",
    "SecretsDistributionPipeline",
    "SecretsManager",
    # Gift requests
    "DonHostedSecrets",
    "GetGiftAction",
    "GiftContractConfig",
    "GiftRequestOrchestrator",
    "ParameterExtractor",
    "RemoteSecrets",
    "ResponseHandler",
    "load_gift_config",
    "validate_config",
    # Types
    "DistributionRecord",
    "DonHostedRecord",
    "EncryptedSecrets",
    "GiftRequestParams",
    "RemoteSecretsRecord",
    "Transaction",
    "UploadResult",
    # Exceptions
    "GiftAgentError",
    "ValidationError",
    "ConfigError",
    "InvalidParametersError",
    "NetworkError",
    "PublishFailedError",
    "ChainError",
    "UnsupportedChainError",
    "InvalidChainError",
    "NoSigningAccountError",
    "SubmissionError",
    "InsufficientFundsError",
    "UserRejectedError",
    "NonceError",
    "SubmissionFailedError",
]
