"""Example: Encrypt secrets, store them in a gist and print the encrypted gist URL."""

from __future__ import annotations

import logging
import os

import requests
from dotenv import load_dotenv
from eth_account import Account
from web3 import Web3

from gift_agent import (
    DistributionStore,
    GistClient,
    SecretsDistributionConfig,
    SecretsDistributionPipeline,
    SecretsManager,
)

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

REQUIRED_VARS = ("SEPOLIA_RPC_URL", "EVM_PRIVATE_KEY", "SUPABASE_API_KEY", "GITHUB_API_TOKEN")


def main() -> None:
    """Publish secrets through a gist and save the encrypted URL for the gift config."""

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise ValueError(f"{', '.join(missing)} not provided - check your environment variables")

    config = SecretsDistributionConfig.for_network(
        record_dir=os.getenv("SECRETS_RECORD_DIR", "."),
        deployment="gistSecretsInfo",
    )
    account = Account.from_key(os.environ["EVM_PRIVATE_KEY"])
    session = requests.Session()
    manager = SecretsManager(
        account,
        don_id=config.don_id,
        web3=Web3(Web3.HTTPProvider(os.environ["SEPOLIA_RPC_URL"])),
        router_address=config.router_address,
    )
    pipeline = SecretsDistributionPipeline(
        manager,
        DistributionStore(config.record_dir),
        config,
        gist=GistClient(os.environ["GITHUB_API_TOKEN"], session),
    )

    record = pipeline.distribute_indirect({"apikey": os.environ["SUPABASE_API_KEY"]})
    print(f"Encrypted secrets URLs ready for DON consumption: {record.encrypted_secrets_urls}")


if __name__ == "__main__":
    main()
