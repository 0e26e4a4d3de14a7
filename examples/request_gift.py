"""Example: Submit a gift redemption request to the Functions consumer contract."""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

from gift_agent import (
    DistributionStore,
    GiftRequestOrchestrator,
    GiftRequestParams,
    ResponseHandler,
    Settings,
    load_gift_config,
)

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

GIFT_CODE = "898770"
RECIPIENT = "0x1234567890123456789012345678901234567890"


def main() -> int:
    """Send one gift request using settings from the environment."""

    settings = Settings.from_env(os.environ)
    config = load_gift_config(os.environ, DistributionStore(settings.record_dir))
    registry = settings.build_registry()
    orchestrator = GiftRequestOrchestrator.create(registry, config)

    params = GiftRequestParams(
        code=os.getenv("GIFT_CODE", GIFT_CODE),
        address=os.getenv("GIFT_RECIPIENT", RECIPIENT),
    )
    try:
        transaction = orchestrator.dispatch(params, config)
    except Exception as exc:
        reply = ResponseHandler.handle_error(None, exc)
        print(reply["text"])
        return 1

    reply = ResponseHandler.handle_success(None, params, transaction, config.chain_name)
    print(reply["text"])
    return 0


if __name__ == "__main__":
    sys.exit(main())
