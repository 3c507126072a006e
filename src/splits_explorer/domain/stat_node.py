"""Resolve heterogeneously shaped stat nodes into canonical counting stats.

The splits backend is not consistent about where a bucket keeps its numbers:
a leaf may hold them at top level, under ``batting``/``pitching``, or under
``stats.batting``/``stats.pitching``, and older writers use ``walks`` and
``strikeouts`` where the MLB API says ``baseOnBalls`` and ``strikeOuts``.
"""

import math
from collections.abc import Mapping
from typing import Any, Literal, TypeAlias

from splits_explorer.domain.batting_stats import BattingCounts
from splits_explorer.domain.innings import Innings
from splits_explorer.domain.pitching_stats import PitchingCounts

StatKind: TypeAlias = Literal["batting", "pitching"]

SYNONYMS: dict[str, str] = {
    "walks": "baseOnBalls",
    "strikeouts": "strikeOuts",
    "hitBatsmen": "hitByPitch",
    "sacFlies": "sacrificeFlies",
}

BATTING_COUNT_FIELDS: dict[str, str] = {
    "atBats": "at_bats",
    "hits": "hits",
    "doubles": "doubles",
    "triples": "triples",
    "homeRuns": "home_runs",
    "baseOnBalls": "base_on_balls",
    "strikeOuts": "strike_outs",
    "hitByPitch": "hit_by_pitch",
    "sacrificeFlies": "sacrifice_flies",
}

# Totals that can be recomputed from the counts above when absent.
BATTING_DERIVABLE_FIELDS: dict[str, str] = {
    "plateAppearances": "plate_appearances",
    "singles": "singles",
    "totalBases": "total_bases",
}

BATTING_RATE_FIELDS: tuple[str, ...] = ("avg", "obp", "slg", "ops")

PITCHING_COUNT_FIELDS: dict[str, str] = {
    "earnedRuns": "earned_runs",
    "hits": "hits",
    "homeRuns": "home_runs",
    "baseOnBalls": "base_on_balls",
    "strikeOuts": "strike_outs",
    "hitByPitch": "hit_by_pitch",
    "battersFaced": "batters_faced",
}

PITCHING_RATE_FIELDS: tuple[str, ...] = ("era", "whip", "fip")

_KNOWN_STAT_KEYS: frozenset[str] = frozenset(
    {
        *BATTING_COUNT_FIELDS,
        *BATTING_DERIVABLE_FIELDS,
        *BATTING_RATE_FIELDS,
        *PITCHING_COUNT_FIELDS,
        *PITCHING_RATE_FIELDS,
        *SYNONYMS,
        "inningsPitched",
        "outs",
        "plateAppearances",
    }
)


def stat_node(node: Any, kind: StatKind) -> Mapping[str, Any]:
    """Return the first stat mapping found at ``stats.<kind>``, ``<kind>``, or the node itself."""
    if not isinstance(node, Mapping):
        return {}
    stats = node.get("stats")
    if isinstance(stats, Mapping):
        nested = stats.get(kind)
        if isinstance(nested, Mapping):
            return nested
    direct = node.get(kind)
    if isinstance(direct, Mapping):
        return direct
    return node


def canonicalize(stats: Mapping[str, Any]) -> dict[str, Any]:
    """Rename synonym keys to canonical names without clobbering canonical keys."""
    result = dict(stats)
    for synonym, canonical in SYNONYMS.items():
        if synonym in result:
            value = result.pop(synonym)
            if canonical not in result:
                result[canonical] = value
    return result


def has_stats(node: Any) -> bool:
    """True when *node* is a stat leaf rather than a container of buckets."""
    if not isinstance(node, Mapping):
        return False
    stats = node.get("stats")
    if isinstance(stats, Mapping):
        return True
    if isinstance(node.get("batting"), Mapping) or isinstance(node.get("pitching"), Mapping):
        return True
    return any(key in _KNOWN_STAT_KEYS for key in node)


def to_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def to_optional_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def to_optional_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() in ("", "-", "-.--", ".---"):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_batting_counts(node: Any) -> BattingCounts:
    stats = canonicalize(stat_node(node, "batting"))
    kwargs: dict[str, Any] = {attr: to_int(stats.get(key)) for key, attr in BATTING_COUNT_FIELDS.items()}
    for key, attr in BATTING_DERIVABLE_FIELDS.items():
        kwargs[attr] = to_optional_int(stats.get(key))
    for key in BATTING_RATE_FIELDS:
        kwargs[key] = to_optional_float(stats.get(key))
    return BattingCounts(**kwargs)


def parse_innings(stats: Mapping[str, Any]) -> Innings:
    """Prefer an explicit ``outs`` count; fall back to ``inningsPitched`` in thirds notation."""
    outs = to_optional_int(stats.get("outs"))
    if outs is not None and outs > 0:
        return Innings(outs)
    return Innings.parse(stats.get("inningsPitched"))


def parse_pitching_counts(node: Any) -> PitchingCounts:
    stats = canonicalize(stat_node(node, "pitching"))
    kwargs: dict[str, Any] = {attr: to_int(stats.get(key)) for key, attr in PITCHING_COUNT_FIELDS.items()}
    for key in PITCHING_RATE_FIELDS:
        kwargs[key] = to_optional_float(stats.get(key))
    return PitchingCounts(innings=parse_innings(stats), **kwargs)
