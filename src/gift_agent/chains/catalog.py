"""Well-known EVM chain definitions, keyed by the names agents use in settings."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ChainDefinition:
    """Static description of an EVM chain."""

    name: str
    chain_id: int
    display_name: str
    native_currency: str
    rpc_urls: tuple[str, ...]
    custom_rpc_url: str | None = None

    def with_custom_rpc(self, rpc_url: str | None) -> ChainDefinition:
        """Return a copy that prefers ``rpc_url`` over the default endpoints."""

        if not rpc_url:
            return self
        return replace(self, custom_rpc_url=rpc_url)

    def rpc_url(self) -> str:
        if self.custom_rpc_url:
            return self.custom_rpc_url
        return self.rpc_urls[0]


def _chain(name: str, chain_id: int, display_name: str, symbol: str, *urls: str) -> ChainDefinition:
    return ChainDefinition(
        name=name,
        chain_id=chain_id,
        display_name=display_name,
        native_currency=symbol,
        rpc_urls=tuple(urls),
    )


KNOWN_CHAINS: dict[str, ChainDefinition] = {
    chain.name: chain
    for chain in (
        _chain("mainnet", 1, "Ethereum", "ETH", "https://eth.merkle.io"),
        _chain("sepolia", 11155111, "Sepolia", "ETH", "https://sepolia.drpc.org"),
        _chain("holesky", 17000, "Holesky", "ETH", "https://ethereum-holesky-rpc.publicnode.com"),
        _chain("base", 8453, "Base", "ETH", "https://mainnet.base.org"),
        _chain("baseSepolia", 84532, "Base Sepolia", "ETH", "https://sepolia.base.org"),
        _chain("optimism", 10, "OP Mainnet", "ETH", "https://mainnet.optimism.io"),
        _chain("optimismSepolia", 11155420, "OP Sepolia", "ETH", "https://sepolia.optimism.io"),
        _chain("arbitrum", 42161, "Arbitrum One", "ETH", "https://arb1.arbitrum.io/rpc"),
        _chain(
            "arbitrumSepolia",
            421614,
            "Arbitrum Sepolia",
            "ETH",
            "https://sepolia-rollup.arbitrum.io/rpc",
        ),
        _chain("polygon", 137, "Polygon", "POL", "https://polygon-rpc.com"),
        _chain("polygonAmoy", 80002, "Polygon Amoy", "POL", "https://rpc-amoy.polygon.technology"),
        _chain("avalanche", 43114, "Avalanche", "AVAX", "https://api.avax.network/ext/bc/C/rpc"),
        _chain(
            "avalancheFuji",
            43113,
            "Avalanche Fuji",
            "AVAX",
            "https://api.avax-test.network/ext/bc/C/rpc",
        ),
    )
}


def chain_from_name(name: str, custom_rpc_url: str | None = None) -> ChainDefinition | None:
    """Look up ``name`` in the catalog, overlaying ``custom_rpc_url`` when given."""

    base = KNOWN_CHAINS.get(name)
    if base is None:
        return None
    return base.with_custom_rpc(custom_rpc_url)
