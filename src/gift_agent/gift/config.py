"""Configuration containers and validation for gift contract requests."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import cast

from ..constants import DEFAULT_CHAIN, DEFAULT_SECRETS_RECORD
from ..distribution.storage import DistributionStore
from ..exceptions import ConfigError
from ..types import DonHostedRecord, RemoteSecretsRecord
from ..utils import (
    env_int,
    fits_uint,
    is_address,
    is_hex_blob,
    is_placeholder_address,
    is_unset_number,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DonHostedSecrets:
    """Secrets uploaded directly to the DON, addressed by slot and version."""

    slot_id: int | float
    version: int | float


@dataclass(frozen=True)
class RemoteSecrets:
    """Secrets stored off-chain behind an encrypted URL (hex encoded)."""

    encrypted_secrets_urls: str


SecretsReference = DonHostedSecrets | RemoteSecrets


@dataclass(frozen=True)
class GiftContractConfig:
    """Per-deployment constants for the gift consumer contract."""

    contract_address: str
    secrets: SecretsReference
    subscription_id: int | float
    chain_name: str = DEFAULT_CHAIN


def validate_config(config: GiftContractConfig) -> None:
    """Raise ConfigError naming the first field that still holds a placeholder."""

    address = config.contract_address
    if is_placeholder_address(address) or not is_address(address):
        raise ConfigError(
            "Contract address is not configured", field="contract_address", value=address
        )

    secrets = config.secrets
    if isinstance(secrets, DonHostedSecrets):
        if is_unset_number(secrets.slot_id):
            raise ConfigError(
                "DON hosted secrets slot ID is not configured",
                field="secrets.slot_id",
                value=secrets.slot_id,
            )
        if not fits_uint(secrets.slot_id, 8):
            raise ConfigError(
                "DON hosted secrets slot ID must be an integer between 0 and 255",
                field="secrets.slot_id",
                value=secrets.slot_id,
            )
        if is_unset_number(secrets.version) or secrets.version <= 0:
            raise ConfigError(
                "DON hosted secrets version is not configured",
                field="secrets.version",
                value=secrets.version,
            )
        if not fits_uint(secrets.version, 64):
            raise ConfigError(
                "DON hosted secrets version must be an integer that fits in uint64",
                field="secrets.version",
                value=secrets.version,
            )
    elif isinstance(secrets, RemoteSecrets):
        urls = secrets.encrypted_secrets_urls
        if not urls or urls.lower() in ("0x", "0x00"):
            raise ConfigError(
                "Encrypted secrets URL is not configured",
                field="secrets.encrypted_secrets_urls",
                value=urls,
            )
        if not is_hex_blob(urls):
            raise ConfigError(
                "Encrypted secrets URL must be a 0x-prefixed hex string",
                field="secrets.encrypted_secrets_urls",
                value=urls,
            )
    else:
        raise ConfigError("Secrets reference is not configured", field="secrets", value=secrets)

    subscription_id = config.subscription_id
    if is_unset_number(subscription_id) or subscription_id <= 0:
        raise ConfigError(
            "Chainlink subscription ID is not configured",
            field="subscription_id",
            value=subscription_id,
        )
    if not fits_uint(subscription_id, 64):
        raise ConfigError(
            "Chainlink subscription ID must be an integer that fits in uint64",
            field="subscription_id",
            value=subscription_id,
        )


def load_gift_config(
    env: Mapping[str, str],
    store: DistributionStore | None = None,
    *,
    deployment: str = DEFAULT_SECRETS_RECORD,
    clock: Callable[[], float] = time.time,
) -> GiftContractConfig:
    """Build a GiftContractConfig from the environment.

    DON hosted slot/version values that are not set in the environment are
    taken from the persisted distribution record when a store is given and
    the record has not expired. All missing or unparsable variables are
    reported together.
    """

    missing: list[str] = []
    invalid: list[str] = []
    expired: list[str] = []

    def read_int(name: str) -> int | None:
        try:
            return env_int(env.get(name))
        except ValueError:
            invalid.append(name)
            return None

    contract_address = (env.get("GIFT_CONTRACT_ADDRESS") or "").strip()
    if not contract_address:
        missing.append("GIFT_CONTRACT_ADDRESS")

    subscription_id = read_int("SUBSCRIPTION_ID")
    if subscription_id is None and "SUBSCRIPTION_ID" not in invalid:
        missing.append("SUBSCRIPTION_ID")

    chain_name = (env.get("GIFT_CHAIN") or DEFAULT_CHAIN).strip()
    record = store.load(deployment) if store is not None else None
    if isinstance(record, DonHostedRecord) and not record.is_fresh(clock()):
        logger.warning("Ignoring expired DON hosted secrets record %s", deployment)
        expired.append(deployment)
        record = None

    secrets: SecretsReference | None = None
    urls = (env.get("ENCRYPTED_SECRETS_URLS") or "").strip()
    if urls:
        secrets = RemoteSecrets(encrypted_secrets_urls=urls)
    elif isinstance(record, RemoteSecretsRecord):
        secrets = RemoteSecrets(encrypted_secrets_urls=record.encrypted_secrets_urls)
    else:
        slot_id = read_int("DON_HOSTED_SECRETS_SLOT_ID")
        version = read_int("DON_HOSTED_SECRETS_VERSION")
        if isinstance(record, DonHostedRecord):
            if slot_id is None and "DON_HOSTED_SECRETS_SLOT_ID" not in invalid:
                slot_id = record.slot_id
            if version is None and "DON_HOSTED_SECRETS_VERSION" not in invalid:
                version = record.version
            logger.debug("Using persisted secrets record for %s", deployment)

        for name, value in (
            ("DON_HOSTED_SECRETS_SLOT_ID", slot_id),
            ("DON_HOSTED_SECRETS_VERSION", version),
        ):
            if value is None and name not in invalid:
                missing.append(name)
        if slot_id is not None and version is not None:
            secrets = DonHostedSecrets(slot_id=slot_id, version=version)

    if missing or invalid:
        problems = [f"{name} not provided" for name in missing]
        problems += [f"{name} is not an integer" for name in invalid]
        problems += [f"persisted secrets record {name} has expired" for name in expired]
        details: dict = {"missing": missing, "invalid": invalid}
        if expired:
            details["expired"] = expired
        raise ConfigError(
            "Gift contract configuration incomplete: " + "; ".join(problems),
            field=(missing + invalid)[0],
            details=details,
        )

    return GiftContractConfig(
        contract_address=contract_address,
        secrets=cast(SecretsReference, secrets),
        subscription_id=cast(int, subscription_id),
        chain_name=chain_name,
    )
