"""Constants for the gift agent."""

from enum import Enum

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Short placeholder some deployments ship before the consumer contract exists.
PLACEHOLDER_ADDRESS = "0x00"

DEFAULT_CHAIN = "sepolia"

# Balance lookups are cheap but rate limited on public RPCs
CACHE_EXPIRY_SECONDS = 5
WALLET_CACHE_NAMESPACE = "evm/wallet"

GIFT_CONTRACT_NAME = "GetGift.sol:GetGift"
GIFT_ARTIFACT = "GetGift.json"

DEFAULT_SECRETS_RECORD = "donSecretsInfo"
DEFAULT_SLOT_ID = 0
DEFAULT_EXPIRATION_MINUTES = 1440

GITHUB_GISTS_URL = "https://api.github.com/gists"


class FunctionsNetwork(str, Enum):
    """Chainlink Functions deployments the agent knows how to target."""

    ETHEREUM_SEPOLIA = "fun-ethereum-sepolia-1"


# https://docs.chain.link/chainlink-functions/supported-networks
FUNCTIONS_ROUTERS = {
    FunctionsNetwork.ETHEREUM_SEPOLIA: "0xb83E47C2bC239B3bf370bc41e1459A34b41238D0",
}

GATEWAY_URLS = {
    FunctionsNetwork.ETHEREUM_SEPOLIA: (
        "https://01.functions-gateway.testnet.chain.link/",
        "https://02.functions-gateway.testnet.chain.link/",
    ),
}
