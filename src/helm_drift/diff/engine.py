"""Line-level diff of declared and live resource bodies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import yaml
from deepdiff import DeepDiff

LineTag = Literal["unchanged", "added", "removed"]


@dataclass(frozen=True)
class DiffLine:
    tag: LineTag
    text: str


@dataclass
class FieldChange:
    path: str
    old_value: Any
    new_value: Any
    change_type: str  # "value_changed", "item_added", "item_removed", "type_changed"


def serialize(body: dict[str, Any]) -> list[str]:
    """Canonical YAML text of body, one entry per line."""
    text = yaml.safe_dump(body, sort_keys=True, default_flow_style=False)
    return text.splitlines()


def render(declared: dict[str, Any], live: dict[str, Any]) -> list[DiffLine]:
    """Diff the canonical YAML of both trees.

    Lines only in live are "added", lines only in declared are "removed".
    """
    return diff_lines(serialize(declared), serialize(live))


def diff_lines(old: list[str], new: list[str]) -> list[DiffLine]:
    """Longest-common-subsequence line diff, merged in a single pass.

    When dropping an old line and taking a new one are equally good, the
    lexically smaller line goes first, so swapping the inputs only flips
    added/removed tags.
    """
    start = 0
    while start < len(old) and start < len(new) and old[start] == new[start]:
        start += 1
    end_old, end_new = len(old), len(new)
    while end_old > start and end_new > start and old[end_old - 1] == new[end_new - 1]:
        end_old -= 1
        end_new -= 1

    result = [DiffLine("unchanged", line) for line in old[:start]]
    result.extend(_merge(old[start:end_old], new[start:end_new]))
    result.extend(DiffLine("unchanged", line) for line in old[end_old:])
    return result


def _merge(old: list[str], new: list[str]) -> list[DiffLine]:
    n, m = len(old), len(new)
    band = max(abs(n - m), 1)
    while True:
        table = _BandedLCS(old, new, band)
        # An alignment with at most `band` edits never leaves the band, so
        # the banded table is then exact.
        if n + m - 2 * table.get(0, 0) <= band or band >= max(n, m):
            break
        band *= 2

    result: list[DiffLine] = []
    i = j = 0
    while i < n and j < m:
        if old[i] == new[j]:
            result.append(DiffLine("unchanged", old[i]))
            i += 1
            j += 1
            continue
        drop_old, take_new = table.get(i + 1, j), table.get(i, j + 1)
        if drop_old > take_new or (drop_old == take_new and old[i] < new[j]):
            result.append(DiffLine("removed", old[i]))
            i += 1
        else:
            result.append(DiffLine("added", new[j]))
            j += 1

    result.extend(DiffLine("removed", line) for line in old[i:])
    result.extend(DiffLine("added", line) for line in new[j:])
    return result


class _BandedLCS:
    """LCS lengths of old[i:] and new[j:] for cells with |i - j| <= band.

    Cells outside the band read as -1. Memory and time grow with
    (n + m) * band instead of n * m.
    """

    def __init__(self, old: list[str], new: list[str], band: int) -> None:
        self.m = len(new)
        self.band = band
        n, m = len(old), len(new)
        self.rows: list[list[int]] = [[] for _ in range(n + 1)]
        for i in range(n, -1, -1):
            lo, hi = self._bounds(i)
            row = [0] * (hi - lo + 1)
            if i < n:
                below = self.rows[i + 1]
                below_lo = self._bounds(i + 1)[0]
                for j in range(min(hi, m - 1), lo - 1, -1):
                    if old[i] == new[j]:
                        row[j - lo] = below[j + 1 - below_lo] + 1
                    else:
                        down = below[j - below_lo] if j >= below_lo else -1
                        right = row[j + 1 - lo] if j + 1 <= hi else -1
                        row[j - lo] = max(down, right)
            self.rows[i] = row

    def _bounds(self, i: int) -> tuple[int, int]:
        return max(0, i - self.band), min(self.m, i + self.band)

    def get(self, i: int, j: int) -> int:
        lo, hi = self._bounds(i)
        if j < lo or j > hi:
            return -1
        return self.rows[i][j - lo]


def summarize_changes(declared: dict[str, Any], live: dict[str, Any]) -> list[FieldChange]:
    """Field-level changes from declared to live, as dot-paths."""
    dd = DeepDiff(declared, live, verbose_level=2)
    return _extract_changes(dd)


def _extract_changes(dd: DeepDiff) -> list[FieldChange]:
    """Convert DeepDiff output to FieldChange list."""
    changes: list[FieldChange] = []

    for path, detail in dd.get("values_changed", {}).items():
        changes.append(FieldChange(
            path=_deepdiff_path_to_dot(path),
            old_value=detail.get("old_value"),
            new_value=detail.get("new_value"),
            change_type="value_changed",
        ))

    for path, detail in dd.get("type_changes", {}).items():
        changes.append(FieldChange(
            path=_deepdiff_path_to_dot(path),
            old_value=detail.get("old_value"),
            new_value=detail.get("new_value"),
            change_type="type_changed",
        ))

    for key in ("dictionary_item_added", "iterable_item_added"):
        for path, value in dd.get(key, {}).items():
            changes.append(FieldChange(
                path=_deepdiff_path_to_dot(path),
                old_value=None,
                new_value=value,
                change_type="item_added",
            ))

    for key in ("dictionary_item_removed", "iterable_item_removed"):
        for path, value in dd.get(key, {}).items():
            changes.append(FieldChange(
                path=_deepdiff_path_to_dot(path),
                old_value=value,
                new_value=None,
                change_type="item_removed",
            ))

    return sorted(changes, key=lambda c: c.path)


def _deepdiff_path_to_dot(path: str) -> str:
    """Convert DeepDiff path like root['spec']['replicas'] to spec.replicas."""
    path = path.replace("root", "", 1)
    result = ""
    i = 0
    while i < len(path):
        if path[i] == "[":
            end = path.index("]", i)
            inner = path[i + 1 : end]
            if inner.startswith("'") or inner.startswith('"'):
                key = inner.strip("'\"")
                if result:
                    result += "."
                result += key
            else:
                result += f"[{inner}]"
            i = end + 1
        else:
            i += 1
    return result
