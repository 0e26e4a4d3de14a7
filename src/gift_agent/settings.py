"""Process-level settings loaded once from the environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .cache import FileCacheStore, LayeredCache
from .chains import ChainRegistry
from .constants import DEFAULT_CHAIN, WALLET_CACHE_NAMESPACE
from .exceptions import ConfigError


@dataclass(frozen=True)
class Settings:
    """Aggregated settings shared by the agent's components."""

    private_key: str
    chains: tuple[str, ...] = (DEFAULT_CHAIN,)
    rpc_overrides: Mapping[str, str] | None = None
    cache_dir: str = ".cache"
    record_dir: str = "."
    github_token: str | None = None
    request_timeout: float | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> Settings:
        """Read settings, reporting every missing or malformed variable at once."""

        problems: list[str] = []
        fields: list[str] = []

        private_key = (env.get("EVM_PRIVATE_KEY") or "").strip()
        if not private_key:
            problems.append("EVM_PRIVATE_KEY not provided")
            fields.append("EVM_PRIVATE_KEY")
        elif not private_key.startswith("0x"):
            problems.append("EVM_PRIVATE_KEY must start with 0x")
            fields.append("EVM_PRIVATE_KEY")

        chains = tuple(
            name.strip() for name in (env.get("EVM_CHAINS") or DEFAULT_CHAIN).split(",") if name.strip()
        )

        request_timeout: float | None = None
        raw_timeout = (env.get("RPC_REQUEST_TIMEOUT") or "").strip()
        if raw_timeout:
            try:
                request_timeout = float(raw_timeout)
            except ValueError:
                problems.append("RPC_REQUEST_TIMEOUT is not a number")
                fields.append("RPC_REQUEST_TIMEOUT")

        if problems:
            raise ConfigError(
                "Invalid environment: " + "; ".join(problems),
                field=fields[0],
                details={"fields": fields},
            )

        overrides = {
            key: value
            for key, value in env.items()
            if key.endswith("_RPC_URL") and value
        }

        return cls(
            private_key=private_key,
            chains=chains or (DEFAULT_CHAIN,),
            rpc_overrides=overrides,
            cache_dir=env.get("GIFT_AGENT_CACHE_DIR") or ".cache",
            record_dir=env.get("SECRETS_RECORD_DIR") or ".",
            github_token=env.get("GITHUB_API_TOKEN") or None,
            request_timeout=request_timeout,
        )

    def build_registry(self) -> ChainRegistry:
        return ChainRegistry.from_env_chains(
            self.chains,
            self.rpc_overrides or {},
            private_key=self.private_key,
            request_timeout=self.request_timeout,
        )

    def build_wallet_cache(self) -> LayeredCache:
        return LayeredCache(FileCacheStore(self.cache_dir, WALLET_CACHE_NAMESPACE))
