from __future__ import annotations

from typing import Any, cast

import pytest
import requests

from gift_agent.distribution import GistClient
from gift_agent.exceptions import PublishFailedError, ValidationError

from .helpers import FakeClock


class DummyResponse:
    def __init__(self, payload: dict[str, Any], status_code: int = 201) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=cast(Any, self))

    def json(self) -> dict[str, Any]:
        return self._payload


class DummySession:
    def __init__(self, response: DummyResponse) -> None:
        self._response = response
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, **kwargs: Any) -> DummyResponse:
        self.calls.append({"url": url, **kwargs})
        return self._response


def test_create_gist_returns_raw_url(clock: FakeClock) -> None:
    session = DummySession(DummyResponse({"html_url": "https://gist.github.com/agent/abc123"}))
    client = GistClient("ghp_token", cast(requests.Session, session), clock=clock)

    url = client.create_gist('{"encryptedSecrets":"0x01"}')

    assert url == "https://gist.github.com/agent/abc123/raw"
    call = session.calls[0]
    assert call["url"] == "https://api.github.com/gists"
    assert call["headers"]["Authorization"] == "token ghp_token"
    assert call["json"]["public"] is False
    (filename, file_body), = call["json"]["files"].items()
    assert filename == f"encrypted-functions-request-data-{int(clock.now * 1000)}.json"
    assert file_body == {"content": '{"encryptedSecrets":"0x01"}'}


def test_rejected_gist_raises_publish_failed(clock: FakeClock) -> None:
    session = DummySession(DummyResponse({"message": "Bad credentials"}, status_code=401))
    client = GistClient("bad", cast(requests.Session, session), clock=clock)

    with pytest.raises(PublishFailedError) as exc_info:
        client.create_gist("{}")

    assert exc_info.value.status_code == 401


def test_missing_html_url_raises_publish_failed(clock: FakeClock) -> None:
    session = DummySession(DummyResponse({"id": "abc"}))
    client = GistClient("ghp_token", cast(requests.Session, session), clock=clock)

    with pytest.raises(PublishFailedError):
        client.create_gist("{}")


def test_token_is_required() -> None:
    with pytest.raises(ValidationError):
        GistClient("", requests.Session())
