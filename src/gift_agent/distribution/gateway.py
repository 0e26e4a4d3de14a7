"""Upload encrypted secrets to Chainlink Functions DON gateways."""

from __future__ import annotations

import base64
import json
import logging
import secrets
import time
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import requests
from eth_account.messages import SignableMessage, encode_defunct
from eth_account.signers.local import LocalAccount

from ..exceptions import PublishFailedError, ValidationError
from ..types import EncryptedSecrets, UploadResult

logger = logging.getLogger(__name__)

SECRETS_SET_METHOD = "secrets_set"

# Fixed widths of the packed gateway message header
MESSAGE_ID_MAX_LEN = 128
MESSAGE_METHOD_MAX_LEN = 64
MESSAGE_DON_ID_MAX_LEN = 64
MESSAGE_RECEIVER_LEN = 2 + 2 * 20


def random_message_id() -> str:
    return str(secrets.randbits(32))


def _aligned(value: str, size: int, field: str) -> bytes:
    raw = value.encode("utf-8")
    if len(raw) > size:
        raise ValidationError(
            f"Gateway message {field} longer than {size} bytes", field=field, value=value
        )
    return raw.ljust(size, b"\x00")


def encode_gateway_message_body(
    message_id: str,
    method: str,
    don_id: str,
    receiver: str,
    payload: Mapping[str, Any] | None,
) -> bytes:
    """Pack a gateway message the way DON gateway nodes verify its signature.

    Header fields are zero padded to fixed widths and followed by the compact
    JSON payload.
    """

    payload_json = json.dumps(payload, separators=(",", ":")) if payload else ""
    return b"".join(
        (
            _aligned(message_id, MESSAGE_ID_MAX_LEN, "message_id"),
            _aligned(method, MESSAGE_METHOD_MAX_LEN, "method"),
            _aligned(don_id, MESSAGE_DON_ID_MAX_LEN, "don_id"),
            _aligned(receiver, MESSAGE_RECEIVER_LEN, "receiver"),
            payload_json.encode("utf-8"),
        )
    )


class GatewayClient:
    """Send ``secrets_set`` requests to a DON through its gateway nodes."""

    def __init__(
        self,
        account: LocalAccount,
        session: requests.Session,
        *,
        request_timeout: float | None = None,
        clock: Callable[[], float] = time.time,
        message_id: Callable[[], str] = random_message_id,
    ) -> None:
        self._account = account
        self._session = session
        self._request_timeout = request_timeout
        self._clock = clock
        self._message_id = message_id

    def upload(
        self,
        encrypted: EncryptedSecrets,
        gateway_urls: Sequence[str],
        *,
        slot_id: int,
        minutes_until_expiration: int,
    ) -> UploadResult:
        """Upload ``encrypted`` to ``slot_id``; gateways are tried in order until one answers."""

        if not gateway_urls:
            raise ValidationError("At least one gateway URL is required", field="gateway_urls")
        if slot_id < 0:
            raise ValidationError("Slot id must be non-negative", field="slot_id", value=slot_id)
        if minutes_until_expiration < 5:
            raise ValidationError(
                "Expiration must be at least 5 minutes",
                field="minutes_until_expiration",
                value=minutes_until_expiration,
            )

        now = self._clock()
        version = int(now)
        request = self._build_request(
            encrypted,
            slot_id=slot_id,
            version=version,
            expiration_ms=int(now * 1000) + minutes_until_expiration * 60 * 1000,
        )

        errors: dict[str, str] = {}
        for url in gateway_urls:
            logger.info("Uploading encrypted secrets to gateway %s (slot %s)", url, slot_id)
            try:
                response = self._session.post(url, json=request, timeout=self._request_timeout)
                response.raise_for_status()
                payload = response.json()
            except (requests.RequestException, ValueError) as exc:
                logger.warning("Gateway %s failed: %s", url, exc)
                errors[url] = str(exc)
                continue

            return self._parse_response(payload, version=version, gateway_url=url)

        raise PublishFailedError(
            f"Encrypted secrets not uploaded to {list(gateway_urls)}",
            endpoint=gateway_urls[-1],
            details={"errors": errors},
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _build_request(
        self,
        encrypted: EncryptedSecrets,
        *,
        slot_id: int,
        version: int,
        expiration_ms: int,
    ) -> dict[str, Any]:
        encoded = base64.b64encode(
            bytes.fromhex(encrypted.encrypted_secrets.removeprefix("0x"))
        ).decode("ascii")
        storage_message = {
            "address": self._account.address,
            "slotid": slot_id,
            "payload": encoded,
            "version": version,
            "expiration": expiration_ms,
        }
        storage_signature = self._sign(
            encode_defunct(text=json.dumps(storage_message, separators=(",", ":")))
        )

        message_id = self._message_id()
        payload = {
            "slot_id": slot_id,
            "version": version,
            "payload": encoded,
            "expiration": expiration_ms,
            "signature": base64.b64encode(storage_signature).decode("ascii"),
        }
        packed = encode_gateway_message_body(
            message_id, SECRETS_SET_METHOD, encrypted.don_id, "", payload
        )
        body_signature = self._sign(encode_defunct(primitive=packed))

        return {
            "jsonrpc": "2.0",
            "id": message_id,
            "method": SECRETS_SET_METHOD,
            "params": {
                "body": {
                    "message_id": message_id,
                    "method": SECRETS_SET_METHOD,
                    "don_id": encrypted.don_id,
                    "receiver": "",
                    "payload": payload,
                },
                "signature": "0x" + body_signature.hex(),
            },
        }

    def _sign(self, message: SignableMessage) -> bytes:
        return bytes(self._account.sign_message(message).signature)

    def _parse_response(self, payload: Any, *, version: int, gateway_url: str) -> UploadResult:
        if not isinstance(payload, Mapping):
            logger.warning("Gateway %s returned a non-object response", gateway_url)
            return UploadResult(success=False, version=version, gateway_url=gateway_url)

        if payload.get("error"):
            logger.warning("Gateway %s rejected upload: %s", gateway_url, payload["error"])
            return UploadResult(success=False, version=version, gateway_url=gateway_url)

        node_responses = _node_responses(payload)
        succeeded = [node for node in node_responses if _node_succeeded(node)]
        success = bool(node_responses) and len(succeeded) == len(node_responses)
        logger.info(
            "Gateway %s: %d/%d nodes accepted version %s",
            gateway_url,
            len(succeeded),
            len(node_responses),
            version,
        )
        return UploadResult(
            success=success,
            version=version,
            node_responses=node_responses,
            gateway_url=gateway_url,
        )


def _node_responses(payload: Mapping[str, Any]) -> list[dict[str, Any]]:
    try:
        responses = payload["result"]["body"]["payload"]["node_responses"]
    except (KeyError, TypeError):
        return []
    if not isinstance(responses, list):
        return []
    return [dict(item) for item in responses if isinstance(item, Mapping)]


def _node_succeeded(node: Mapping[str, Any]) -> bool:
    try:
        return node["body"]["payload"]["success"] is True
    except (KeyError, TypeError):
        return False
