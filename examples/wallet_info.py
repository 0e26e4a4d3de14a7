"""Example: Show the agent wallet address and cached balance on each configured chain."""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from gift_agent import Settings, WalletProvider

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def main() -> None:
    settings = Settings.from_env(os.environ)
    wallet = WalletProvider(settings.build_registry(), settings.build_wallet_cache())

    for chain_name in settings.chains:
        wallet.registry.switch_active(chain_name)
        print(wallet.describe(os.getenv("AGENT_NAME")))
        print()


if __name__ == "__main__":
    main()
