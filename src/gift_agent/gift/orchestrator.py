"""Orchestrate gift redemption requests from parameters to a submitted transaction."""

from __future__ import annotations

import logging

from ..abi import load_contract_abi
from ..chains import ChainRegistry
from ..exceptions import InvalidParametersError
from ..types import GiftRequestParams, Transaction
from ..utils import is_address
from .config import GiftContractConfig, validate_config
from .contract import GiftContractService

logger = logging.getLogger(__name__)


class GiftRequestOrchestrator:
    """Validate inputs, select the chain and submit the gift request."""

    def __init__(self, registry: ChainRegistry, contract_service: GiftContractService) -> None:
        self._registry = registry
        self._contract_service = contract_service
        self._validated: set[GiftContractConfig] = set()

    @classmethod
    def create(
        cls, registry: ChainRegistry, config: GiftContractConfig | None = None
    ) -> GiftRequestOrchestrator:
        """Build an orchestrator with the packaged ABI, validating ``config`` up front."""

        orchestrator = cls(registry, GiftContractService(load_contract_abi()))
        if config is not None:
            orchestrator.ensure_valid(config)
        return orchestrator

    def ensure_valid(self, config: GiftContractConfig) -> None:
        if config in self._validated:
            return
        validate_config(config)
        self._validated.add(config)

    def dispatch(self, params: GiftRequestParams, config: GiftContractConfig) -> Transaction:
        if not params.code or not params.address:
            raise InvalidParametersError(
                "Invalid parameters: code and address are required",
                field="code" if not params.code else "address",
            )
        if not is_address(params.address):
            raise InvalidParametersError(
                "Invalid parameters: address must be a 42 character 0x-prefixed hex string",
                field="address",
                value=params.address,
            )

        self.ensure_valid(config)
        logger.info("Processing gift request - Code: %s, Address: %s", params.code, params.address)

        if self._registry.active_name != config.chain_name:
            self._registry.switch_active(config.chain_name)

        client = self._registry.get_write_client(config.chain_name)
        with self._registry.submission_lock:
            return self._contract_service.send_gift_request(client, config, params)
