"""Deep merge of nested key/value documents."""
from __future__ import annotations

from typing import Any


def merge_maps(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* without mutating either.

    Override wins at every leaf, base fills gaps at any depth, and nested
    objects that end up empty are dropped. Keys present only in
    *override* are copied as-is. A non-empty base object is kept when
    *override* has a scalar under the same key.
    """
    merged: dict[str, Any] = {}
    for key, value in base.items():
        if isinstance(value, dict):
            other = override.get(key, {})
            if isinstance(other, dict):
                sub = merge_maps(value, other)
            else:
                sub = merge_maps(value, {})
                if not sub:
                    # Empty base branch: the override's scalar fills the key.
                    merged[key] = other
                    continue
            if sub:
                merged[key] = sub
        elif key in override:
            merged[key] = override[key]
        else:
            merged[key] = value

    for key, value in override.items():
        if key not in merged and key not in base:
            merged[key] = value
    return merged
