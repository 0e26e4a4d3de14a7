"""Encrypt, publish and record secrets for a Chainlink Functions deployment."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Mapping
from enum import Enum

from ..exceptions import PublishFailedError, ValidationError
from ..types import DistributionRecord, DonHostedRecord, EncryptedSecrets, RemoteSecretsRecord
from .config import SecretsDistributionConfig
from .encryption import SecretsManager
from .gateway import GatewayClient
from .gist import GistClient
from .storage import DistributionStore

logger = logging.getLogger(__name__)


class DistributionState(str, Enum):
    IDLE = "idle"
    ENCRYPTING = "encrypting"
    PUBLISHING = "publishing"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class SecretsDistributionPipeline:
    """Run one secrets distribution, reusing a fresh persisted record when allowed.

    Two publishing strategies exist: direct upload to the DON gateways
    (slot + version) and indirect storage in a gist whose URL is encrypted.
    Nothing is retried here; re-running the whole pipeline is always safe.
    """

    def __init__(
        self,
        manager: SecretsManager,
        store: DistributionStore,
        config: SecretsDistributionConfig,
        *,
        gateway: GatewayClient | None = None,
        gist: GistClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._manager = manager
        self._store = store
        self._config = config
        self._gateway = gateway
        self._gist = gist
        self._clock = clock
        self._state = DistributionState.IDLE

    @property
    def state(self) -> DistributionState:
        return self._state

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def reusable_record(self, record_type: type[DistributionRecord]) -> DistributionRecord | None:
        """Return the persisted record when it matches ``record_type``, this config and is fresh."""

        record = self._store.load(self._config.deployment)
        if not isinstance(record, record_type):
            return None
        if isinstance(record, DonHostedRecord) and (
            record.slot_id != self._config.slot_id
            or record.expiration_minutes != self._config.expiration_minutes
        ):
            logger.info(
                "Persisted secrets record for %s targets slot %s (%s minutes), "
                "not slot %s (%s minutes)",
                self._config.deployment,
                record.slot_id,
                record.expiration_minutes,
                self._config.slot_id,
                self._config.expiration_minutes,
            )
            return None
        if not record.is_fresh(self._clock()):
            logger.info("Persisted secrets record for %s has expired", self._config.deployment)
            return None
        return record

    def distribute_direct(self, secrets: Mapping[str, str], *, reuse: bool = True) -> DonHostedRecord:
        if self._gateway is None:
            raise ValidationError("Direct distribution requires a gateway client", field="gateway")

        if reuse:
            existing = self.reusable_record(DonHostedRecord)
            if isinstance(existing, DonHostedRecord):
                logger.info(
                    "Reusing DON hosted secrets slot %s version %s",
                    existing.slot_id,
                    existing.version,
                )
                self._state = DistributionState.DONE
                return existing

        gateway = self._gateway
        config = self._config

        def publish(encrypted: EncryptedSecrets) -> DonHostedRecord:
            logger.info(
                "Uploading encrypted secrets to gateways. Slot ID: %s, Expiration: %s minutes",
                config.slot_id,
                config.expiration_minutes,
            )
            result = gateway.upload(
                encrypted,
                config.gateway_urls,
                slot_id=config.slot_id,
                minutes_until_expiration=config.expiration_minutes,
            )
            if not result.success:
                raise PublishFailedError(
                    f"Encrypted secrets not uploaded to {list(config.gateway_urls)}",
                    endpoint=result.gateway_url,
                    details={"node_responses": result.node_responses},
                )
            return DonHostedRecord(
                slot_id=config.slot_id,
                version=int(result.version),
                expiration_minutes=config.expiration_minutes,
                stored_at=self._clock(),
            )

        record = self._run(secrets, publish)
        logger.info("donHostedSecretsVersion is %s", record.version)
        return record

    def distribute_indirect(
        self, secrets: Mapping[str, str], *, reuse: bool = True
    ) -> RemoteSecretsRecord:
        if self._gist is None:
            raise ValidationError("Indirect distribution requires a gist client", field="gist")

        if reuse:
            existing = self.reusable_record(RemoteSecretsRecord)
            if isinstance(existing, RemoteSecretsRecord):
                logger.info("Reusing encrypted secrets URL for %s", self._config.deployment)
                self._state = DistributionState.DONE
                return existing

        gist = self._gist

        def publish(encrypted: EncryptedSecrets) -> RemoteSecretsRecord:
            logger.info("Creating gist to store encrypted secrets")
            url = gist.create_gist(json.dumps({"encryptedSecrets": encrypted.encrypted_secrets}))
            logger.info("Encrypting gist URL for the DON")
            return RemoteSecretsRecord(
                encrypted_secrets_urls=self._manager.encrypt_secrets_urls([url]),
                stored_at=self._clock(),
            )

        return self._run(secrets, publish)

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------
    def _run(self, secrets, publish):
        self._state = DistributionState.IDLE
        try:
            self._state = DistributionState.ENCRYPTING
            self._manager.initialize()
            encrypted = self._manager.encrypt_secrets(secrets)

            self._state = DistributionState.PUBLISHING
            record = publish(encrypted)

            self._state = DistributionState.FINALIZING
            self._store.save(self._config.deployment, record)
        except Exception:
            failed_in = self._state
            self._state = DistributionState.FAILED
            logger.error("Secrets distribution failed while %s", failed_in.value)
            raise

        self._state = DistributionState.DONE
        return record
