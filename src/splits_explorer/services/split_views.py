"""Turn a macro split payload into displayable rows.

Payload families::

    by_location   {home, away}
    vs_handedness {L, R}
    vs_teams      {TEAM: {home, away}}
    vs_pitchers   {TEAM-First_Last: {...}}
    by_count      {"3-2": {...}}
    compound      {count_vs_team: {...}, count_vs_handedness: {...}, ...}

Any bucket that is not itself a stat leaf is the sum of every leaf beneath it,
so a team's ``home`` and ``away`` buckets collapse into one "vs TEAM" row.
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from splits_explorer.domain.split_row import SplitGroup, SplitRow
from splits_explorer.domain.stat_node import has_stats
from splits_explorer.services.aggregator import aggregate_batting_buckets, aggregate_pitching_buckets
from splits_explorer.services.rate_deriver import (
    DEFAULT_FIP_CONSTANT,
    derive_batting,
    derive_batting_counts,
    derive_pitching,
    derive_pitching_counts,
)

FLAT_VIEWS: dict[str, str] = {
    "location": "by_location",
    "handedness": "vs_handedness",
    "teams": "vs_teams",
    "pitchers": "vs_pitchers",
    "counts": "by_count",
}

COMPOUND_VIEWS: tuple[str, ...] = (
    "count_vs_team",
    "count_vs_handedness",
    "handedness_vs_team",
    "count_vs_pitcher",
)

_LOCATION_LABELS = {"home": "Home", "away": "Away", "total": "Total"}
_HAND_LABELS = {"L": "vs LHP", "R": "vs RHP", "S": "vs Switch"}
_LOCATION_ORDER = {"home": 0, "away": 1}
_HAND_ORDER = {"L": 0, "R": 1, "S": 2}
_COUNT_RE = re.compile(r"^(\d)-(\d)$")
_TEAM_RE = re.compile(r"^[A-Z]{2,3}$")
_PITCHER_RE = re.compile(r"^([A-Z]{2,3})-(.+)$")


class UnknownViewError(ValueError):
    pass


def label_for(key: str) -> str:
    """Human-readable label for a split bucket key."""
    if key in _LOCATION_LABELS:
        return _LOCATION_LABELS[key]
    if key in _HAND_LABELS:
        return _HAND_LABELS[key]
    if match := _COUNT_RE.match(key):
        return f"Count {match.group(1)}-{match.group(2)}"
    if _TEAM_RE.match(key):
        return f"vs {key}"
    if match := _PITCHER_RE.match(key):
        name = match.group(2).replace("_", " ")
        return f"vs {name} ({match.group(1)})"
    return key.replace("_", " ")


def _order_key(key: str) -> tuple[int, int, int, str]:
    if key in _LOCATION_ORDER:
        return (0, _LOCATION_ORDER[key], 0, key)
    if key in _HAND_ORDER:
        return (1, _HAND_ORDER[key], 0, key)
    if match := _COUNT_RE.match(key):
        return (2, int(match.group(1)), int(match.group(2)), key)
    return (3, 0, 0, label_for(key).casefold())


def bucket_leaves(node: Any) -> list[Any]:
    if has_stats(node):
        return [node]
    if not isinstance(node, Mapping):
        return []
    leaves: list[Any] = []
    for child in node.values():
        leaves.extend(bucket_leaves(child))
    return leaves


def row_from_leaves(
    key: str,
    label: str,
    leaves: Sequence[Any],
    fip_constant: float = DEFAULT_FIP_CONSTANT,
) -> SplitRow:
    if len(leaves) == 1:
        return SplitRow(
            key=key,
            label=label,
            batting=derive_batting(leaves[0]),
            pitching=derive_pitching(leaves[0], fip_constant),
        )
    return SplitRow(
        key=key,
        label=label,
        batting=derive_batting_counts(aggregate_batting_buckets(leaves)),
        pitching=derive_pitching_counts(aggregate_pitching_buckets(leaves), fip_constant),
    )


def _family(payload: Mapping[str, Any], view: str) -> Mapping[str, Any]:
    if view not in FLAT_VIEWS:
        raise UnknownViewError(f"Unknown view: {view!r}. Use one of {', '.join(FLAT_VIEWS)}.")
    family = payload.get(FLAT_VIEWS[view])
    return family if isinstance(family, Mapping) else {}


def _rows(buckets: Mapping[str, Any], fip_constant: float) -> list[SplitRow]:
    rows: list[SplitRow] = []
    for key in sorted(buckets, key=_order_key):
        leaves = bucket_leaves(buckets[key])
        if leaves:
            rows.append(row_from_leaves(key, label_for(key), leaves, fip_constant))
    return rows


def build_rows(
    payload: Mapping[str, Any],
    view: str,
    *,
    include_total: bool = False,
    fip_constant: float = DEFAULT_FIP_CONSTANT,
) -> list[SplitRow]:
    family = _family(payload, view)
    rows = _rows(family, fip_constant)
    if include_total:
        leaves = bucket_leaves(family)
        if leaves:
            rows.append(row_from_leaves("total", "Total", leaves, fip_constant))
    return rows


def build_groups(
    payload: Mapping[str, Any],
    view: str,
    *,
    fip_constant: float = DEFAULT_FIP_CONSTANT,
) -> list[SplitGroup]:
    if view not in COMPOUND_VIEWS:
        raise UnknownViewError(f"Unknown compound view: {view!r}. Use one of {', '.join(COMPOUND_VIEWS)}.")
    compound = payload.get("compound")
    family = compound.get(view) if isinstance(compound, Mapping) else None
    if not isinstance(family, Mapping):
        return []

    groups: list[SplitGroup] = []
    for group_key in sorted(family, key=_order_key):
        buckets = family[group_key]
        if not isinstance(buckets, Mapping) or has_stats(buckets):
            continue
        rows = _rows(buckets, fip_constant)
        if rows:
            groups.append(SplitGroup(key=group_key, label=label_for(group_key), rows=tuple(rows)))
    return groups


def combined_row(
    payload: Mapping[str, Any],
    view: str,
    keys: Iterable[str],
    *,
    label: str = "Combined",
    fip_constant: float = DEFAULT_FIP_CONSTANT,
) -> SplitRow | None:
    """Aggregate a chosen subset of a view's buckets (e.g. several opponents) into one row."""
    family = _family(payload, view)
    selected = [k for k in dict.fromkeys(keys) if k in family]
    leaves = [leaf for k in selected for leaf in bucket_leaves(family[k])]
    if not leaves:
        return None
    return row_from_leaves("+".join(selected), label, leaves, fip_constant)


def available_views() -> list[str]:
    return [*FLAT_VIEWS, *COMPOUND_VIEWS]
