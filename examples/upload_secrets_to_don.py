"""Example: Encrypt secrets and upload them to the Sepolia Functions DON gateways."""

from __future__ import annotations

import logging
import os

import requests
from dotenv import load_dotenv
from eth_account import Account
from web3 import Web3

from gift_agent import (
    DistributionStore,
    GatewayClient,
    SecretsDistributionConfig,
    SecretsDistributionPipeline,
    SecretsManager,
)

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    """Upload the Supabase API key to slot 0 and save the version to donSecretsInfo.json."""

    rpc_url = os.getenv("SEPOLIA_RPC_URL")
    if not rpc_url:
        raise ValueError("SEPOLIA_RPC_URL not found in environment variables")
    private_key = os.getenv("EVM_PRIVATE_KEY")
    if not private_key:
        raise ValueError("EVM_PRIVATE_KEY not found in environment variables")
    api_key = os.getenv("SUPABASE_API_KEY")
    if not api_key:
        raise ValueError("SUPABASE_API_KEY not found in environment variables")

    config = SecretsDistributionConfig.for_network(
        record_dir=os.getenv("SECRETS_RECORD_DIR", "."),
    )
    account = Account.from_key(private_key)
    manager = SecretsManager(
        account,
        don_id=config.don_id,
        web3=Web3(Web3.HTTPProvider(rpc_url)),
        router_address=config.router_address,
    )
    pipeline = SecretsDistributionPipeline(
        manager,
        DistributionStore(config.record_dir),
        config,
        gateway=GatewayClient(account, requests.Session()),
    )

    record = pipeline.distribute_direct({"apikey": api_key}, reuse=os.getenv("FORCE_UPLOAD") != "1")
    print(f"donHostedSecretsVersion is {record.version} (slot {record.slot_id})")


if __name__ == "__main__":
    main()
