"""Gift request configuration, dispatch and agent glue."""

from .action import GetGiftAction, ParameterExtractor
from .config import (
    DonHostedSecrets,
    GiftContractConfig,
    RemoteSecrets,
    load_gift_config,
    validate_config,
)
from .contract import GiftContractService, build_call_arguments
from .errors import classify_submission_error
from .orchestrator import GiftRequestOrchestrator
from .response import ResponseHandler

__all__ = [
    "DonHostedSecrets",
    "GetGiftAction",
    "GiftContractConfig",
    "GiftContractService",
    "GiftRequestOrchestrator",
    "ParameterExtractor",
    "RemoteSecrets",
    "ResponseHandler",
    "build_call_arguments",
    "classify_submission_error",
    "load_gift_config",
    "validate_config",
]
