"""Exception hierarchy for the gift agent."""

from typing import Any


class GiftAgentError(Exception):
    """Base exception for all gift agent errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(GiftAgentError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigError(ValidationError):
    """Raised when a deployment configuration is missing or still holds a placeholder."""


class InvalidParametersError(ValidationError):
    """Raised when gift request parameters are missing or malformed."""


class NetworkError(GiftAgentError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class PublishFailedError(NetworkError):
    """Raised when encrypted secrets could not be published."""


class ChainError(GiftAgentError):
    """Raised for chain registry lookups."""

    def __init__(self, message: str, chain: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.chain = chain


class UnsupportedChainError(ChainError):
    """Raised when a chain name was never registered."""


class InvalidChainError(ChainError):
    """Raised when a chain name is not in the well-known catalog."""


class NoSigningAccountError(GiftAgentError):
    """Raised when a write client has no account bound to it."""


class SubmissionError(GiftAgentError):
    """Base class for classified transaction submission failures."""

    def __init__(self, message: str, original: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.original = original


class InsufficientFundsError(SubmissionError):
    """Raised when the signer cannot pay for the transaction."""


class UserRejectedError(SubmissionError):
    """Raised when the signer rejected the transaction."""


class NonceError(SubmissionError):
    """Raised when the transaction nonce was refused; rebuild and resubmit."""


class SubmissionFailedError(SubmissionError):
    """Raised for any other submission failure."""
