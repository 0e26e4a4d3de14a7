"""Type definitions and data models for the gift agent."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import InvalidParametersError, ValidationError

Address = str  # 0x-prefixed, 20 bytes
HexString = str
Wei = int


@dataclass(frozen=True)
class GiftRequestParams:
    """Structured gift redemption request.

    ``code`` is the canonical identifier. It is sent on-chain as a one-element
    ``string[]``, so integer identifiers are normalised to their decimal string.
    """

    code: str
    address: Address

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> GiftRequestParams:
        """Build params from extractor output, accepting ``id`` as an alias of ``code``."""

        if data is None:
            return cls(code="", address="")

        raw_code = data.get("code")
        if raw_code is None:
            raw_code = data.get("id")

        return cls(code=_normalise_code(raw_code), address=str(data.get("address") or "").strip())


@dataclass(frozen=True)
class Transaction:
    """Handle for a submitted gift request transaction."""

    hash: HexString
    from_address: Address
    to: Address
    value: Wei = 0
    data: HexString = "0x"


@dataclass(frozen=True)
class EncryptedSecrets:
    """Ciphertext produced for a single DON and signer pair."""

    encrypted_secrets: HexString
    signer: Address
    don_id: str


@dataclass(frozen=True)
class UploadResult:
    """Acknowledgement returned by the DON gateway network."""

    success: bool
    version: int
    node_responses: list[dict[str, Any]] = field(default_factory=list)
    gateway_url: str | None = None


@dataclass(frozen=True)
class DonHostedRecord:
    """Slot/version reference for secrets uploaded directly to the DON."""

    slot_id: int
    version: int
    expiration_minutes: int
    stored_at: float | None = None

    def expires_at(self) -> float | None:
        if self.stored_at is None:
            return None
        return self.stored_at + self.expiration_minutes * 60

    def is_fresh(self, now: float) -> bool:
        expires = self.expires_at()
        return expires is not None and now < expires

    def to_json(self) -> dict[str, str]:
        return {
            "donHostedSecretsVersion": str(self.version),
            "slotId": str(self.slot_id),
            "expirationTimeMinutes": str(self.expiration_minutes),
        }


@dataclass(frozen=True)
class RemoteSecretsRecord:
    """Encrypted reference to secrets stored behind a public URL."""

    encrypted_secrets_urls: HexString
    stored_at: float | None = None

    def is_fresh(self, now: float) -> bool:
        # gists do not expire
        return True

    def to_json(self) -> dict[str, str]:
        return {"encryptedSecretsUrls": self.encrypted_secrets_urls}


DistributionRecord = DonHostedRecord | RemoteSecretsRecord


def record_from_json(data: Mapping[str, Any], stored_at: float | None = None) -> DistributionRecord:
    """Parse a persisted distribution record."""

    if "encryptedSecretsUrls" in data:
        urls = str(data["encryptedSecretsUrls"])
        if not urls:
            raise ValidationError(
                "Persisted record has an empty encrypted URL",
                field="encryptedSecretsUrls",
                value=urls,
            )
        return RemoteSecretsRecord(encrypted_secrets_urls=urls, stored_at=stored_at)

    try:
        return DonHostedRecord(
            slot_id=int(data["slotId"]),
            version=int(data["donHostedSecretsVersion"]),
            expiration_minutes=int(data["expirationTimeMinutes"]),
            stored_at=stored_at,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(
            "Persisted secrets record is malformed",
            field="record",
            value=dict(data),
            details={"error": str(exc)},
        ) from exc


def _normalise_code(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        raise InvalidParametersError("Gift code must be a string or integer", field="code", value=value)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidParametersError("Gift ID must be a whole number", field="code", value=value)
        value = int(value)
    if isinstance(value, int):
        if value <= 0:
            raise InvalidParametersError("Gift ID must be a positive integer", field="code", value=value)
        return str(value)
    return str(value).strip()
