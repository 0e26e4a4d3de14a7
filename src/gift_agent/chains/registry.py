"""Chain registry: chain definitions, RPC transports and read/write clients."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import cast

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import HTTPProvider, Web3
from web3.middleware import SignAndSendRawMiddlewareBuilder

from ..constants import DEFAULT_CHAIN
from ..exceptions import InvalidChainError, UnsupportedChainError, ValidationError
from .catalog import ChainDefinition, chain_from_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteClient:
    """Web3 handle bound to a chain and, when configured, the signer account."""

    web3: Web3
    chain: ChainDefinition
    account: LocalAccount | None

    @property
    def address(self) -> str | None:
        return self.account.address if self.account is not None else None


class ChainRegistry:
    """Track known chains and the wallet's active chain session."""

    def __init__(
        self,
        private_key: str | None = None,
        chains: Mapping[str, ChainDefinition] | None = None,
        *,
        request_timeout: float | None = None,
    ) -> None:
        self._chains: dict[str, ChainDefinition] = {}
        self._request_timeout = request_timeout
        self._account: LocalAccount | None = None
        # nonces are assigned per signer, so submissions must not overlap
        self.submission_lock = threading.Lock()

        if private_key:
            try:
                self._account = cast(LocalAccount, Account.from_key(private_key))
            except Exception as exc:
                raise ValidationError(
                    "Failed to derive signer account from provided private key",
                    field="private_key",
                ) from exc

        for name, definition in (chains or {}).items():
            self.register(name, definition)

        if self._chains:
            self._active = next(iter(self._chains))
        else:
            self.switch_active(DEFAULT_CHAIN)

    @classmethod
    def from_env_chains(
        cls,
        names: Iterable[str],
        env: Mapping[str, str],
        *,
        private_key: str | None = None,
        request_timeout: float | None = None,
    ) -> ChainRegistry:
        """Build a registry from chain names, honouring ``<NAME>_RPC_URL`` overrides."""

        chains: dict[str, ChainDefinition] = {}
        for name in names:
            rpc_url = env.get(f"{name.upper()}_RPC_URL") or None
            definition = chain_from_name(name, rpc_url)
            if definition is None:
                raise InvalidChainError(f"Invalid chain name '{name}'", chain=name)
            chains[name] = definition

        sepolia_rpc = env.get("SEPOLIA_RPC_URL")
        if DEFAULT_CHAIN not in chains and sepolia_rpc:
            chains[DEFAULT_CHAIN] = cast(ChainDefinition, chain_from_name(DEFAULT_CHAIN, sepolia_rpc))

        return cls(private_key, chains, request_timeout=request_timeout)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    @property
    def chains(self) -> Mapping[str, ChainDefinition]:
        return dict(self._chains)

    @property
    def account(self) -> LocalAccount | None:
        return self._account

    def register(self, name: str, definition: ChainDefinition) -> None:
        if name in self._chains:
            return
        self._chains[name] = definition
        logger.debug("Registered chain %s (id=%s)", name, definition.chain_id)

    def get_definition(self, name: str) -> ChainDefinition:
        definition = self._chains.get(name)
        if definition is None:
            raise UnsupportedChainError(f"Chain {name} is not supported", chain=name)
        return definition

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def switch_active(self, name: str, custom_rpc_url: str | None = None) -> ChainDefinition:
        if name not in self._chains:
            definition = chain_from_name(name, custom_rpc_url)
            if definition is None:
                raise InvalidChainError(f"Invalid chain name '{name}'", chain=name)
            self.register(name, definition)

        self._active = name
        logger.info("Active chain set to %s", name)
        return self._chains[name]

    def active_chain(self) -> ChainDefinition:
        return self._chains[self._active]

    @property
    def active_name(self) -> str:
        return self._active

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------
    def resolve(self, name: str) -> HTTPProvider:
        definition = self.get_definition(name)
        rpc_url = definition.rpc_url()
        if self._request_timeout is not None:
            return HTTPProvider(rpc_url, request_kwargs={"timeout": self._request_timeout})
        return HTTPProvider(rpc_url)

    def get_read_client(self, name: str) -> Web3:
        return Web3(self.resolve(name))

    def get_write_client(self, name: str) -> WriteClient:
        definition = self.get_definition(name)
        web3 = Web3(self.resolve(name))
        if self._account is not None:
            web3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(self._account))  # type: ignore[arg-type]
            web3.eth.default_account = self._account.address
        return WriteClient(web3=web3, chain=definition, account=self._account)
