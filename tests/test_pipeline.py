from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any, cast

import pytest

from gift_agent.distribution import (
    DistributionState,
    DistributionStore,
    GatewayClient,
    GistClient,
    SecretsDistributionConfig,
    SecretsDistributionPipeline,
    SecretsManager,
)
from gift_agent.exceptions import NetworkError, PublishFailedError, ValidationError
from gift_agent.types import DonHostedRecord, EncryptedSecrets, RemoteSecretsRecord, UploadResult

from .helpers import FakeClock

GATEWAYS = ("https://gw-1.example/", "https://gw-2.example/")


class DummyManager:
    def __init__(self, fail_initialize: bool = False) -> None:
        self.fail_initialize = fail_initialize
        self.initialize_calls = 0
        self.encrypted: list[dict[str, str]] = []
        self.encrypted_urls: list[list[str]] = []

    def initialize(self) -> None:
        self.initialize_calls += 1
        if self.fail_initialize:
            raise NetworkError("Failed to fetch DON public key")

    def encrypt_secrets(self, secrets: dict[str, str]) -> EncryptedSecrets:
        self.encrypted.append(dict(secrets))
        return EncryptedSecrets(encrypted_secrets="0xfeed", signer="0xsigner", don_id="fun")

    def encrypt_secrets_urls(self, urls: list[str]) -> str:
        self.encrypted_urls.append(list(urls))
        return "0xc1a55ed"


class DummyGateway:
    def __init__(self, result: UploadResult) -> None:
        self.result = result
        self.calls: list[dict[str, Any]] = []
        self.pipeline: SecretsDistributionPipeline | None = None

    def upload(self, encrypted: EncryptedSecrets, gateway_urls: Any, **kwargs: Any) -> UploadResult:
        state = self.pipeline.state if self.pipeline is not None else None
        self.calls.append({"encrypted": encrypted, "urls": tuple(gateway_urls), "state": state, **kwargs})
        return self.result


class DummyGist:
    def __init__(self) -> None:
        self.contents: list[str] = []

    def create_gist(self, content: str) -> str:
        self.contents.append(content)
        return "https://gist.github.com/agent/abc/raw"


def _config(tmp_path: Path, **overrides: Any) -> SecretsDistributionConfig:
    return SecretsDistributionConfig.for_network(
        gateway_urls=GATEWAYS, record_dir=str(tmp_path), **overrides
    )


def _pipeline(
    tmp_path: Path,
    manager: DummyManager,
    *,
    gateway: DummyGateway | None = None,
    gist: DummyGist | None = None,
    clock: FakeClock | None = None,
    **overrides: Any,
) -> SecretsDistributionPipeline:
    config = _config(tmp_path, **overrides)
    pipeline = SecretsDistributionPipeline(
        cast(SecretsManager, manager),
        DistributionStore(config.record_dir),
        config,
        gateway=cast(GatewayClient, gateway),
        gist=cast(GistClient, gist),
        clock=clock or FakeClock(time.time()),
    )
    if gateway is not None:
        gateway.pipeline = pipeline
    return pipeline


def test_direct_distribution_persists_version(tmp_path: Path) -> None:
    manager = DummyManager()
    gateway = DummyGateway(UploadResult(success=True, version=7))
    pipeline = _pipeline(tmp_path, manager, gateway=gateway)

    record = pipeline.distribute_direct({"apikey": "abc"})

    assert record.version == 7
    assert pipeline.state is DistributionState.DONE
    assert manager.encrypted == [{"apikey": "abc"}]
    assert gateway.calls == [
        {
            "encrypted": EncryptedSecrets("0xfeed", "0xsigner", "fun"),
            "urls": GATEWAYS,
            "state": DistributionState.PUBLISHING,
            "slot_id": 0,
            "minutes_until_expiration": 1440,
        }
    ]
    saved = json.loads((tmp_path / "donSecretsInfo.json").read_text())
    assert saved == {
        "donHostedSecretsVersion": "7",
        "slotId": "0",
        "expirationTimeMinutes": "1440",
    }


def test_fresh_record_is_reused_without_publishing(tmp_path: Path) -> None:
    DistributionStore(tmp_path).save(
        "donSecretsInfo", DonHostedRecord(slot_id=0, version=5, expiration_minutes=1440)
    )
    manager = DummyManager()
    gateway = DummyGateway(UploadResult(success=True, version=9))
    pipeline = _pipeline(tmp_path, manager, gateway=gateway)

    record = pipeline.distribute_direct({"apikey": "abc"})

    assert record.version == 5
    assert manager.initialize_calls == 0
    assert manager.encrypted == []
    assert gateway.calls == []
    assert pipeline.state is DistributionState.DONE


def test_expired_record_is_replaced(tmp_path: Path) -> None:
    store = DistributionStore(tmp_path)
    path = store.save(
        "donSecretsInfo", DonHostedRecord(slot_id=0, version=5, expiration_minutes=10)
    )
    stale = time.time() - 11 * 60
    os.utime(path, (stale, stale))
    gateway = DummyGateway(UploadResult(success=True, version=9))
    pipeline = _pipeline(tmp_path, DummyManager(), gateway=gateway, expiration_minutes=10)

    record = pipeline.distribute_direct({"apikey": "abc"})

    assert record.version == 9
    assert len(gateway.calls) == 1
    assert store.load("donSecretsInfo") == DonHostedRecord(
        slot_id=0, version=9, expiration_minutes=10, stored_at=path.stat().st_mtime
    )


def test_reuse_can_be_disabled(tmp_path: Path) -> None:
    DistributionStore(tmp_path).save(
        "donSecretsInfo", DonHostedRecord(slot_id=0, version=5, expiration_minutes=1440)
    )
    gateway = DummyGateway(UploadResult(success=True, version=9))
    pipeline = _pipeline(tmp_path, DummyManager(), gateway=gateway)

    assert pipeline.distribute_direct({"apikey": "abc"}, reuse=False).version == 9


def test_negative_ack_fails_without_saving(tmp_path: Path) -> None:
    gateway = DummyGateway(UploadResult(success=False, version=7, gateway_url=GATEWAYS[0]))
    pipeline = _pipeline(tmp_path, DummyManager(), gateway=gateway)

    with pytest.raises(PublishFailedError) as exc_info:
        pipeline.distribute_direct({"apikey": "abc"})

    assert exc_info.value.endpoint == GATEWAYS[0]
    assert pipeline.state is DistributionState.FAILED
    assert not (tmp_path / "donSecretsInfo.json").exists()


def test_key_fetch_failure_marks_pipeline_failed(tmp_path: Path) -> None:
    gateway = DummyGateway(UploadResult(success=True, version=7))
    pipeline = _pipeline(tmp_path, DummyManager(fail_initialize=True), gateway=gateway)

    with pytest.raises(NetworkError):
        pipeline.distribute_direct({"apikey": "abc"})

    assert pipeline.state is DistributionState.FAILED
    assert gateway.calls == []


def test_indirect_distribution_encrypts_gist_url(tmp_path: Path) -> None:
    manager = DummyManager()
    gist = DummyGist()
    pipeline = _pipeline(tmp_path, manager, gist=gist, deployment="gistSecretsInfo")

    record = pipeline.distribute_indirect({"apikey": "abc"})

    assert isinstance(record, RemoteSecretsRecord)
    assert record.encrypted_secrets_urls == "0xc1a55ed"
    assert gist.contents == ['{"encryptedSecrets": "0xfeed"}']
    assert manager.encrypted_urls == [["https://gist.github.com/agent/abc/raw"]]
    saved = json.loads((tmp_path / "gistSecretsInfo.json").read_text())
    assert saved == {"encryptedSecretsUrls": "0xc1a55ed"}


def test_indirect_record_is_reused(tmp_path: Path) -> None:
    DistributionStore(tmp_path).save(
        "gistSecretsInfo", RemoteSecretsRecord(encrypted_secrets_urls="0xold")
    )
    gist = DummyGist()
    pipeline = _pipeline(tmp_path, DummyManager(), gist=gist, deployment="gistSecretsInfo")

    assert pipeline.distribute_indirect({"apikey": "abc"}).encrypted_secrets_urls == "0xold"
    assert gist.contents == []


def test_direct_record_is_not_reused_for_indirect_distribution(tmp_path: Path) -> None:
    DistributionStore(tmp_path).save(
        "donSecretsInfo", DonHostedRecord(slot_id=0, version=5, expiration_minutes=1440)
    )
    pipeline = _pipeline(tmp_path, DummyManager(), gist=DummyGist())

    assert pipeline.reusable_record(RemoteSecretsRecord) is None
    assert isinstance(pipeline.reusable_record(DonHostedRecord), DonHostedRecord)


def test_missing_publisher_is_a_validation_error(tmp_path: Path) -> None:
    pipeline = _pipeline(tmp_path, DummyManager())

    with pytest.raises(ValidationError):
        pipeline.distribute_direct({"apikey": "abc"})
    with pytest.raises(ValidationError):
        pipeline.distribute_indirect({"apikey": "abc"})
    assert pipeline.state is DistributionState.IDLE


def test_sepolia_defaults() -> None:
    config = SecretsDistributionConfig.for_network()

    assert config.don_id == "fun-ethereum-sepolia-1"
    assert config.router_address == "0xb83E47C2bC239B3bf370bc41e1459A34b41238D0"
    assert len(config.gateway_urls) == 2
    assert (config.slot_id, config.expiration_minutes) == (0, 1440)
    assert config.deployment == "donSecretsInfo"


@pytest.mark.parametrize(
    "overrides",
    [{"slot_id": 1}, {"expiration_minutes": 60}],
)
def test_record_for_other_slot_or_expiration_is_not_reused(
    tmp_path: Path, overrides: dict[str, int]
) -> None:
    DistributionStore(tmp_path).save(
        "donSecretsInfo", DonHostedRecord(slot_id=0, version=5, expiration_minutes=1440)
    )
    manager = DummyManager()
    gateway = DummyGateway(UploadResult(success=True, version=9))
    pipeline = _pipeline(tmp_path, manager, gateway=gateway, **overrides)

    record = pipeline.distribute_direct({"apikey": "abc"})

    assert record.version == 9
    assert manager.encrypted == [{"apikey": "abc"}]
    assert len(gateway.calls) == 1
    assert gateway.calls[0]["slot_id"] == overrides.get("slot_id", 0)
    saved = json.loads((tmp_path / "donSecretsInfo.json").read_text())
    assert saved["slotId"] == str(overrides.get("slot_id", 0))
