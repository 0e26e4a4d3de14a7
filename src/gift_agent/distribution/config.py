"""Configuration containers for secrets distribution."""

from __future__ import annotations

from dataclasses import dataclass

from ..constants import (
    DEFAULT_EXPIRATION_MINUTES,
    DEFAULT_SECRETS_RECORD,
    DEFAULT_SLOT_ID,
    FUNCTIONS_ROUTERS,
    GATEWAY_URLS,
    FunctionsNetwork,
)


@dataclass(frozen=True)
class SecretsDistributionConfig:
    """Where and how encrypted secrets are published for one deployment."""

    router_address: str
    don_id: str
    gateway_urls: tuple[str, ...] = ()
    slot_id: int = DEFAULT_SLOT_ID
    expiration_minutes: int = DEFAULT_EXPIRATION_MINUTES
    record_dir: str = "."
    deployment: str = DEFAULT_SECRETS_RECORD

    @classmethod
    def for_network(
        cls,
        network: FunctionsNetwork = FunctionsNetwork.ETHEREUM_SEPOLIA,
        **overrides,
    ) -> SecretsDistributionConfig:
        """Return the Chainlink-published defaults for ``network`` with optional overrides."""

        values = {
            "router_address": FUNCTIONS_ROUTERS[network],
            "don_id": network.value,
            "gateway_urls": GATEWAY_URLS[network],
        }
        values.update(overrides)
        return cls(**values)
