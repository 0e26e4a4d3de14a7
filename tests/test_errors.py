from __future__ import annotations

import pytest

from gift_agent.exceptions import (
    InsufficientFundsError,
    NonceError,
    SubmissionFailedError,
    UserRejectedError,
)
from gift_agent.gift.errors import classify_submission_error, extract_error_message


class RpcFailure(Exception):
    def __init__(self, rpc_response: dict) -> None:
        super().__init__("RPC call failed")
        self.rpc_response = rpc_response


@pytest.mark.parametrize(
    ("raw", "expected_type", "message"),
    [
        ("Insufficient funds for gas", InsufficientFundsError, "Insufficient funds for transaction"),
        ("User rejected the request.", UserRejectedError, "Transaction was rejected by user"),
        ("nonce too low", NonceError, "Transaction nonce error - please try again"),
        ("execution reverted", SubmissionFailedError, "execution reverted"),
    ],
)
def test_classification(raw: str, expected_type: type, message: str) -> None:
    classified = classify_submission_error(RuntimeError(raw))

    assert type(classified) is expected_type
    assert classified.message == message
    assert classified.original == raw


def test_insufficient_funds_wins_over_nonce() -> None:
    classified = classify_submission_error(
        RuntimeError("insufficient funds: nonce 4 balance 0")
    )

    assert isinstance(classified, InsufficientFundsError)


def test_rpc_response_message_is_preferred() -> None:
    error = RpcFailure({"error": {"code": -32000, "message": "nonce too high"}})

    assert extract_error_message(error) == "nonce too high"
    assert isinstance(classify_submission_error(error), NonceError)


def test_error_dict_argument_is_read() -> None:
    error = ValueError({"code": 4001, "message": "User rejected transaction"})

    assert isinstance(classify_submission_error(error), UserRejectedError)


def test_empty_message_is_unknown_error() -> None:
    classified = classify_submission_error(RuntimeError())

    assert isinstance(classified, SubmissionFailedError)
    assert classified.message == "unknown error"
    assert classified.original is None
