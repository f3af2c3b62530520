from __future__ import annotations

import hashlib
import json
from enum import Enum
from typing import Any, Mapping


def _canonical(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(key): _canonical(item) for key, item in sorted(value.items(), key=lambda row: str(row[0]))}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    return value


def derive_seed(namespace: str, context: Mapping[str, Any]) -> int:
    """Stable 32-bit seed for ``namespace`` and ``context``, independent of process hash salt."""

    payload = {"namespace": str(namespace), "context": _canonical(context)}
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str, ensure_ascii=False)
    digest = hashlib.sha256(serialized.encode("utf-8")).hexdigest()
    return int(digest, 16) % (2**32)


def pick_index(namespace: str, context: Mapping[str, Any], size: int) -> int:
    if size <= 0:
        raise ValueError("Cannot pick from an empty collection")
    return derive_seed(namespace, context) % int(size)
