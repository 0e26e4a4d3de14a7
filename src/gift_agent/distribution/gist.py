"""Store encrypted secrets in a private GitHub gist."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import requests

from ..constants import GITHUB_GISTS_URL
from ..exceptions import PublishFailedError, ValidationError

logger = logging.getLogger(__name__)


class GistClient:
    """Minimal GitHub gists client used as a write-once blob store."""

    def __init__(
        self,
        token: str,
        session: requests.Session,
        *,
        api_url: str = GITHUB_GISTS_URL,
        request_timeout: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not token:
            raise ValidationError("GitHub API token is required", field="github_token")
        self._token = token
        self._session = session
        self._api_url = api_url
        self._request_timeout = request_timeout
        self._clock = clock

    def create_gist(self, content: str) -> str:
        """Create a secret gist holding ``content`` and return its raw URL."""

        filename = f"encrypted-functions-request-data-{int(self._clock() * 1000)}.json"
        body = {
            "public": False,
            "files": {filename: {"content": content}},
        }
        headers = {
            "Authorization": f"token {self._token}",
            "Accept": "application/vnd.github+json",
        }

        try:
            response = self._session.post(
                self._api_url, json=body, headers=headers, timeout=self._request_timeout
            )
            response.raise_for_status()
            html_url = response.json()["html_url"]
        except requests.RequestException as exc:
            raise PublishFailedError(
                "Gist creation was rejected",
                endpoint=self._api_url,
                status_code=getattr(exc.response, "status_code", None),
                details={"error": str(exc)},
            ) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise PublishFailedError(
                "Gist API response did not include html_url",
                endpoint=self._api_url,
                details={"error": str(exc)},
            ) from exc

        logger.info("Gist created at %s", html_url)
        return f"{html_url}/raw"
