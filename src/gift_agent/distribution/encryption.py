"""Secrets encryption for Chainlink Functions DONs.

Secrets are signed by the uploading wallet and then encrypted to the DON's
secp256k1 public key, so only that DON can read them and it can verify who
authorised them. The ECIES layout matches eccrypto/eth-crypto
(``iv | compressed ephemeral key | mac | ciphertext``), which is what the
Functions toolkit produces.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
from collections.abc import Mapping, Sequence

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..exceptions import NetworkError, ValidationError
from ..types import EncryptedSecrets

logger = logging.getLogger(__name__)

_ROUTER_ABI = (
    {
        "inputs": [{"internalType": "bytes32", "name": "id", "type": "bytes32"}],
        "name": "getContractById",
        "outputs": [{"internalType": "address", "name": "", "type": "address"}],
        "stateMutability": "view",
        "type": "function",
    },
)

_COORDINATOR_ABI = (
    {
        "inputs": [],
        "name": "getDONPublicKey",
        "outputs": [{"internalType": "bytes", "name": "", "type": "bytes"}],
        "stateMutability": "view",
        "type": "function",
    },
)

_IV_LENGTH = 16
_COMPRESSED_KEY_LENGTH = 33
_MAC_LENGTH = 32


def don_id_to_bytes32(don_id: str) -> bytes:
    raw = don_id.encode("utf-8")
    if len(raw) > 32:
        raise ValidationError("DON id longer than 32 bytes", field="don_id", value=don_id)
    return raw.ljust(32, b"\x00")


def load_public_key(raw: bytes) -> ec.EllipticCurvePublicKey:
    """Load a secp256k1 key from 64 byte (x|y), uncompressed or compressed encodings."""

    if len(raw) == 64:
        raw = b"\x04" + raw
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256K1(), raw)
    except ValueError as exc:
        raise ValidationError(
            "Invalid DON public key", field="don_public_key", value=raw.hex()
        ) from exc


def ecies_encrypt(public_key: bytes, plaintext: bytes) -> bytes:
    peer = load_public_key(public_key)
    ephemeral = ec.generate_private_key(ec.SECP256K1())
    shared = ephemeral.exchange(ec.ECDH(), peer)
    digest = hashlib.sha512(shared).digest()
    enc_key, mac_key = digest[:32], digest[32:]

    iv = os.urandom(_IV_LENGTH)
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()

    ephemeral_public = ephemeral.public_key()
    uncompressed = ephemeral_public.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)
    compressed = ephemeral_public.public_bytes(Encoding.X962, PublicFormat.CompressedPoint)
    mac = hmac.new(mac_key, iv + uncompressed + ciphertext, hashlib.sha256).digest()

    return iv + compressed + mac + ciphertext


def decrypt_with_private_key(private_key: bytes, blob: bytes) -> bytes:
    """Reverse ``ecies_encrypt`` with the recipient's raw private key."""

    header = _IV_LENGTH + _COMPRESSED_KEY_LENGTH + _MAC_LENGTH
    if len(blob) <= header:
        raise ValidationError("Ciphertext too short", field="ciphertext")

    iv = blob[:_IV_LENGTH]
    compressed = blob[_IV_LENGTH : _IV_LENGTH + _COMPRESSED_KEY_LENGTH]
    mac = blob[_IV_LENGTH + _COMPRESSED_KEY_LENGTH : header]
    ciphertext = blob[header:]

    recipient = ec.derive_private_key(int.from_bytes(private_key, "big"), ec.SECP256K1())
    ephemeral_public = load_public_key(compressed)
    shared = recipient.exchange(ec.ECDH(), ephemeral_public)
    digest = hashlib.sha512(shared).digest()
    enc_key, mac_key = digest[:32], digest[32:]

    uncompressed = ephemeral_public.public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)
    expected = hmac.new(mac_key, iv + uncompressed + ciphertext, hashlib.sha256).digest()
    if not hmac.compare_digest(mac, expected):
        raise ValidationError("Ciphertext MAC mismatch", field="ciphertext")

    decryptor = Cipher(algorithms.AES(enc_key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


class SecretsManager:
    """Encrypt secrets and secret URLs for one DON on behalf of one signer."""

    def __init__(
        self,
        account: LocalAccount,
        *,
        don_id: str,
        web3: Web3 | None = None,
        router_address: str | None = None,
        don_public_key: bytes | None = None,
    ) -> None:
        self._account = account
        self._don_id = don_id
        self._web3 = web3
        self._router_address = router_address
        self._don_public_key = don_public_key

    @property
    def don_id(self) -> str:
        return self._don_id

    @property
    def signer_address(self) -> str:
        return self._account.address

    @property
    def initialized(self) -> bool:
        return self._don_public_key is not None

    def initialize(self) -> None:
        """Fetch the DON public key from the Functions coordinator, unless one was injected."""

        if self._don_public_key is not None:
            return
        if self._web3 is None or not self._router_address:
            raise ValidationError(
                "A web3 client and router address are required to fetch the DON public key",
                field="router_address",
            )

        router_address = Web3.to_checksum_address(self._router_address)
        try:
            router = self._web3.eth.contract(address=router_address, abi=_ROUTER_ABI)
            coordinator_address = router.functions.getContractById(
                don_id_to_bytes32(self._don_id)
            ).call()
            coordinator = self._web3.eth.contract(
                address=Web3.to_checksum_address(coordinator_address), abi=_COORDINATOR_ABI
            )
            public_key = coordinator.functions.getDONPublicKey().call()
        except ValidationError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to fetch DON public key",
                endpoint=router_address,
                details={"don_id": self._don_id, "error": str(exc)},
            ) from exc

        self._don_public_key = bytes(public_key)
        logger.info("Fetched DON public key for %s via coordinator %s", self._don_id, coordinator_address)

    def encrypt_secrets(self, secrets: Mapping[str, str]) -> EncryptedSecrets:
        if not secrets:
            raise ValidationError("Secrets bundle is empty", field="secrets")
        for name, value in secrets.items():
            if not isinstance(name, str) or not isinstance(value, str):
                raise ValidationError(
                    "Secrets must map string names to string values", field="secrets", value=name
                )

        public_key = self._require_public_key()
        message = json.dumps(dict(secrets), separators=(",", ":"))
        signed = self._account.sign_message(encode_defunct(text=message))
        signed_secrets = json.dumps(
            {"message": message, "signature": signed.signature.to_0x_hex()},
            separators=(",", ":"),
        )
        encrypted = ecies_encrypt(public_key, signed_secrets.encode("utf-8")).hex()
        envelope = json.dumps(
            {self._account.address: encrypted, "donId": self._don_id}, separators=(",", ":")
        )
        logger.info(
            "Encrypted %d secret(s) %s for DON %s", len(secrets), sorted(secrets), self._don_id
        )
        return EncryptedSecrets(
            encrypted_secrets="0x" + envelope.encode("utf-8").hex(),
            signer=self._account.address,
            don_id=self._don_id,
        )

    def encrypt_secrets_urls(self, urls: Sequence[str]) -> str:
        if not urls:
            raise ValidationError("At least one secrets URL is required", field="urls")
        public_key = self._require_public_key()
        blob = ecies_encrypt(public_key, " ".join(urls).encode("utf-8"))
        return "0x" + blob.hex()

    def _require_public_key(self) -> bytes:
        if self._don_public_key is None:
            raise ValidationError(
                "SecretsManager is not initialised; call initialize() first",
                field="don_public_key",
            )
        return self._don_public_key
