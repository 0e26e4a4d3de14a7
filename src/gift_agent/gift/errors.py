"""Map transaction submission failures onto the gift agent error taxonomy."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..exceptions import (
    InsufficientFundsError,
    NonceError,
    SubmissionError,
    SubmissionFailedError,
    UserRejectedError,
)

_CLASSIFIERS: tuple[tuple[str, type[SubmissionError], str], ...] = (
    ("insufficient funds", InsufficientFundsError, "Insufficient funds for transaction"),
    ("user rejected", UserRejectedError, "Transaction was rejected by user"),
    ("nonce", NonceError, "Transaction nonce error - please try again"),
)


def extract_error_message(error: BaseException) -> str:
    """Return the most specific message carried by a submission error.

    JSON-RPC failures surface from web3 either as ``rpc_response`` on the
    exception or as an error dict in ``args[0]``; prefer their ``message``.
    """

    rpc_response = getattr(error, "rpc_response", None)
    if isinstance(rpc_response, Mapping):
        message = _rpc_message(rpc_response.get("error"))
        if message:
            return message

    if error.args:
        message = _rpc_message(error.args[0])
        if message:
            return message

    return str(error).strip()


def classify_submission_error(error: BaseException) -> SubmissionError:
    """Turn a raw submission error into the matching SubmissionError subclass."""

    message = extract_error_message(error)
    if not message:
        return SubmissionFailedError("unknown error", original=None)

    lowered = message.lower()
    for needle, error_class, friendly in _CLASSIFIERS:
        if needle in lowered:
            return error_class(friendly, original=message)

    return SubmissionFailedError(message, original=message)


def _rpc_message(payload: Any) -> str | None:
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return None
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None
