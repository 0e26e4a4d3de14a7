"""Gift consumer contract calls: argument building and transaction submission."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from hexbytes import HexBytes
from web3 import Web3

from ..chains import WriteClient
from ..exceptions import GiftAgentError, NoSigningAccountError
from ..types import GiftRequestParams, Transaction
from ..utils import to_checksum
from .config import DonHostedSecrets, GiftContractConfig, RemoteSecrets
from .errors import classify_submission_error

logger = logging.getLogger(__name__)

DON_HOSTED_SIGNATURE = "sendRequest(uint8,uint64,string[],uint64,address)"
REMOTE_SECRETS_SIGNATURE = "sendRequest(bytes,string[],uint64,address)"


def build_call_arguments(
    config: GiftContractConfig, params: GiftRequestParams
) -> tuple[str, list[Any]]:
    """Return the function signature and ordered arguments for ``sendRequest``."""

    recipient = to_checksum(params.address, "address")
    subscription_id = int(config.subscription_id)
    args = [params.code]

    match config.secrets:
        case DonHostedSecrets(slot_id=slot_id, version=version):
            return DON_HOSTED_SIGNATURE, [
                int(slot_id),
                int(version),
                args,
                subscription_id,
                recipient,
            ]
        case RemoteSecrets(encrypted_secrets_urls=urls):
            return REMOTE_SECRETS_SIGNATURE, [
                Web3.to_bytes(hexstr=urls),
                args,
                subscription_id,
                recipient,
            ]

    raise TypeError(f"Unsupported secrets reference: {config.secrets!r}")


class GiftContractService:
    """Submit gift requests to the consumer contract through a write client."""

    def __init__(self, abi: Sequence[Mapping[str, Any]]) -> None:
        self._abi = abi

    def send_gift_request(
        self,
        client: WriteClient,
        config: GiftContractConfig,
        params: GiftRequestParams,
    ) -> Transaction:
        if client.account is None:
            raise NoSigningAccountError("Wallet account not found")

        sender = client.account.address
        try:
            contract_address = Web3.to_checksum_address(config.contract_address)
            signature, args = build_call_arguments(config, params)
            contract = client.web3.eth.contract(address=contract_address, abi=self._abi)
            contract_function = contract.get_function_by_signature(signature)(*args)
            logger.info("Dispatching gift request via %s on %s", signature, client.chain.name)
            tx_hash = contract_function.transact({"from": sender, "value": 0})
        except GiftAgentError:
            raise
        except Exception as exc:
            classified = classify_submission_error(exc)
            logger.warning(
                "Gift request submission failed (%s): %s",
                type(classified).__name__,
                classified.original or classified.message,
            )
            raise classified from exc

        tx_hex = HexBytes(tx_hash).to_0x_hex()
        logger.info("Transaction sent for gift request hash=%s", tx_hex)
        return Transaction(hash=tx_hex, from_address=sender, to=contract_address, value=0)
