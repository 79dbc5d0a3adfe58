"""Merge a partial-field patch into a record."""
from __future__ import annotations

from typing import Any, Mapping

PROTECTED_KEYS = ("id", "createdAt")


def apply_patch(record: dict, patch: Mapping[str, Any], *, expand_dotted: bool = False) -> dict:
    """
    Return a new dict with `patch` merged into `record`.

    Default is a shallow merge: "payment.status" lands as a literal top-level
    key. With expand_dotted=True each dotted key walks/creates nested dicts, so
    {"payment.status": "completed"} only touches record["payment"]["status"].
    Keys in PROTECTED_KEYS are never overwritten.
    """
    merged = dict(record)
    for key, value in patch.items():
        if key in PROTECTED_KEYS:
            continue
        if expand_dotted and "." in key:
            _set_path(merged, key.split("."), value)
        else:
            merged[key] = value
    return merged


def _set_path(target: dict, parts: list[str], value: Any) -> None:
    head, rest = parts[0], parts[1:]
    if not rest:
        target[head] = value
        return
    current = target.get(head)
    # copy so the caller's nested dicts are never mutated in place
    child = dict(current) if isinstance(current, dict) else {}
    target[head] = child
    _set_path(child, rest, value)
