"""Agent action that turns a user's gift request into an on-chain request."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from ..types import GiftRequestParams
from .config import GiftContractConfig
from .orchestrator import GiftRequestOrchestrator
from .response import Callback, ResponseHandler

logger = logging.getLogger(__name__)


class ParameterExtractor(Protocol):
    """Turns free text into ``{"code" | "id": ..., "address": ...}``."""

    def extract(self, text: str) -> Mapping[str, Any]: ...


class GetGiftAction:
    """Handle "get gift" requests: extract, dispatch, reply."""

    name = "GET_GIFT"
    similes = ("GET_GIFT", "GIFT_GIVE", "SEND_GIFT")
    description = (
        "Process gift requests by extracting wallet address and gift code, "
        "then calling the Functions consumer smart contract"
    )

    def __init__(
        self,
        orchestrator: GiftRequestOrchestrator,
        config: GiftContractConfig,
        extractor: ParameterExtractor,
    ) -> None:
        self._orchestrator = orchestrator
        self._config = config
        self._extractor = extractor

    @staticmethod
    def validate(env: Mapping[str, str]) -> bool:
        private_key = env.get("EVM_PRIVATE_KEY")
        return isinstance(private_key, str) and private_key.startswith("0x")

    def handle(self, text: str, callback: Callback | None = None) -> bool:
        logger.info("Gift request handler initiated")
        try:
            params = GiftRequestParams.from_mapping(self._extractor.extract(text))
            transaction = self._orchestrator.dispatch(params, self._config)
        except Exception as exc:  # replies carry the failure back to the user
            ResponseHandler.handle_error(callback, exc)
            return False

        ResponseHandler.handle_success(callback, params, transaction, self._config.chain_name)
        return True
