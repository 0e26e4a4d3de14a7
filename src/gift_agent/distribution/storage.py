"""Local persistence of secrets distribution records."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path

from ..exceptions import ValidationError
from ..types import DistributionRecord, record_from_json

logger = logging.getLogger(__name__)

_DEPLOYMENT_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class DistributionStore:
    """One JSON file per deployment, written wholesale on every save.

    The file body holds only the string-encoded record fields; the time the
    record was stored is taken from the file's modification time.
    """

    def __init__(self, directory: str | os.PathLike[str] = ".") -> None:
        self._directory = Path(directory)

    def path_for(self, deployment: str) -> Path:
        if not _DEPLOYMENT_RE.match(deployment):
            raise ValidationError(
                "Deployment name may only contain letters, digits, '.', '_' and '-'",
                field="deployment",
                value=deployment,
            )
        return self._directory / f"{deployment}.json"

    def save(self, deployment: str, record: DistributionRecord) -> Path:
        path = self.path_for(deployment)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{deployment}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(record.to_json(), handle, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.info("Saved secrets distribution record to %s", path)
        return path

    def load(self, deployment: str) -> DistributionRecord | None:
        path = self.path_for(deployment)
        try:
            raw = path.read_text(encoding="utf-8")
            stored_at = path.stat().st_mtime
        except FileNotFoundError:
            return None

        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise ValidationError(
                "Secrets distribution record is not valid JSON",
                field="record",
                value=str(path),
            ) from exc
        if not isinstance(data, dict):
            raise ValidationError(
                "Secrets distribution record must be a JSON object",
                field="record",
                value=str(path),
            )
        return record_from_json(data, stored_at=stored_at)
