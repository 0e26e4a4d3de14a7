"""Contract ABI artifacts shipped with the package."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from importlib import resources
from typing import Any

from ..constants import GIFT_ARTIFACT, GIFT_CONTRACT_NAME
from ..exceptions import ValidationError


def load_contract_abi(
    contract_name: str = GIFT_CONTRACT_NAME,
    artifact_path: str | os.PathLike[str] | None = None,
) -> Sequence[Mapping[str, Any]]:
    """Read ``contracts[contract_name].abi`` from a combined-json artifact."""

    if artifact_path is None:
        raw = resources.files(__name__).joinpath(GIFT_ARTIFACT).read_text(encoding="utf-8")
    else:
        with open(artifact_path, encoding="utf-8") as handle:
            raw = handle.read()

    artifact = json.loads(raw)
    contract = (artifact.get("contracts") or {}).get(contract_name)
    abi = contract.get("abi") if isinstance(contract, Mapping) else None
    if not abi:
        raise ValidationError(
            "Contract ABI not found in artifacts", field="abi", value=contract_name
        )
    return abi
