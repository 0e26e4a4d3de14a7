"""Wallet provider: signer address, cached balances and the agent's wallet summary."""

from __future__ import annotations

import logging

from .cache import LayeredCache
from .chains import ChainRegistry
from .exceptions import NoSigningAccountError
from .utils import format_ether

logger = logging.getLogger(__name__)


class WalletProvider:
    """Expose the signer's wallet state on the registry's active chain."""

    def __init__(self, registry: ChainRegistry, cache: LayeredCache) -> None:
        self._registry = registry
        self._cache = cache

    @property
    def registry(self) -> ChainRegistry:
        return self._registry

    def get_address(self) -> str:
        account = self._registry.account
        if account is None:
            raise NoSigningAccountError("Wallet account not found")
        return account.address

    def get_wallet_balance(self) -> str | None:
        """Return the active chain balance in ether, or None when the RPC read fails."""

        chain_name = self._registry.active_name
        cache_key = f"walletBalance_{chain_name}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            logger.debug("Returning cached wallet balance for chain: %s", chain_name)
            return cached

        balance = self.get_wallet_balance_for_chain(chain_name)
        if balance is not None:
            self._cache.set(cache_key, balance)
            logger.debug("Wallet balance cached for chain: %s", chain_name)
        return balance

    def get_wallet_balance_for_chain(self, chain_name: str) -> str | None:
        try:
            client = self._registry.get_read_client(chain_name)
            balance = client.eth.get_balance(self.get_address())
        except Exception as exc:
            logger.error("Error getting wallet balance on %s: %s", chain_name, exc)
            return None
        return format_ether(balance)

    def describe(self, agent_name: str | None = None) -> str:
        chain = self._registry.active_chain()
        balance = self.get_wallet_balance()
        name = agent_name or "The agent"
        return (
            f"{name}'s EVM Wallet Address: {self.get_address()}\n"
            f"Balance: {balance} {chain.native_currency}\n"
            f"Chain ID: {chain.chain_id}, Name: {chain.display_name}"
        )
