"""Removal of server-managed fields from live objects."""

from __future__ import annotations

import copy
from typing import Any, Iterable, Sequence

from helm_drift.config import NONDETERMINISTIC_FIELDS


def normalize(
    body: dict[str, Any],
    excluded_paths: Iterable[Sequence[str]] = NONDETERMINISTIC_FIELDS,
) -> dict[str, Any]:
    """Deep-copy body and remove every excluded key path that is present."""
    result = copy.deepcopy(body)
    for path in excluded_paths:
        _remove_path_parts(result, list(path))
    return result


def _remove_path_parts(obj: object, parts: list[str]) -> None:
    """Recursively walk into obj following parts, removing the leaf."""
    if not parts or not isinstance(obj, dict):
        return

    key = parts[0]
    remaining = parts[1:]

    if not remaining:
        obj.pop(key, None)
    elif key in obj:
        _remove_path_parts(obj[key], remaining)
