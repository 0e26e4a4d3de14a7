"""Reply formatting for gift requests."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..exceptions import GiftAgentError
from ..types import GiftRequestParams, Transaction
from ..utils import format_ether

logger = logging.getLogger(__name__)

Reply = dict[str, Any]
Callback = Callable[[Reply], Any]


class ResponseHandler:
    """Build the natural-language and structured replies sent back to the user."""

    @staticmethod
    def handle_success(
        callback: Callback | None,
        params: GiftRequestParams,
        transaction: Transaction,
        chain_name: str,
    ) -> Reply:
        reply = {
            "text": (
                f"Gift request successful! Code: {params.code}, Address: {params.address}\n"
                f"Transaction Hash: {transaction.hash}"
            ),
            "content": {
                "success": True,
                "hash": transaction.hash,
                "amount": format_ether(transaction.value),
                "recipient": transaction.to,
                "chain": chain_name,
            },
        }
        if callback is not None:
            callback(reply)
        return reply

    @staticmethod
    def handle_error(callback: Callback | None, error: BaseException) -> Reply:
        if isinstance(error, GiftAgentError):
            logger.error("Gift request error: %s", error.message)
            message = error.message
        else:
            logger.error("Unexpected gift request failure", exc_info=error)
            message = str(error) or "Unknown error occurred"

        reply = {
            "text": f"Gift request failed: {message}",
            "content": {"error": message},
        }
        if callback is not None:
            callback(reply)
        return reply
