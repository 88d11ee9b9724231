"""
NutriVeda Canonical Hashing
Single source of truth for result hashes (recommendation lists, daily plans).
"""

import hashlib
import json
from typing import Any

# Fields excluded from hashing (volatile/generated)
VOLATILE_FIELDS = frozenset([
    "generated_at",
    "processed_at",
    "result_hash",
])


def canonicalize(obj: Any, exclude_volatile: bool = True) -> str:
    """
    Convert object to canonical JSON string.
    Deterministic: same input always produces same output.
    """
    def _clean(o: Any) -> Any:
        if isinstance(o, dict):
            return {
                k: _clean(v)
                for k, v in sorted(o.items())
                if not (exclude_volatile and k in VOLATILE_FIELDS)
            }
        if isinstance(o, (list, tuple)):
            return [_clean(i) for i in o]
        if isinstance(o, float):
            # Equal scores must hash equally across float noise
            return round(o, 6)
        return o

    return json.dumps(_clean(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=True)


def canonicalize_and_hash(obj: Any, exclude_volatile: bool = True) -> str:
    """
    Hash any JSON-compatible object.
    Returns: "sha256:<64-char-hex>"
    """
    canonical = canonicalize(obj, exclude_volatile)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"sha256:{digest}"
