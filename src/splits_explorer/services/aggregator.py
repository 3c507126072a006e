"""Sum counting stats across situational buckets before re-deriving rates.

Rates never aggregate directly: a combined AVG is total hits over total at
bats, not the mean of per-bucket averages. Backend-precomputed rates are
dropped when two or more buckets are summed and recomputed from the totals.
A single bucket passes through unchanged, backend rates included.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from splits_explorer.domain.batting_stats import BattingCounts
from splits_explorer.domain.innings import Innings
from splits_explorer.domain.pitching_stats import PitchingCounts
from splits_explorer.domain.stat_node import (
    BATTING_COUNT_FIELDS,
    BATTING_DERIVABLE_FIELDS,
    PITCHING_COUNT_FIELDS,
    parse_batting_counts,
    parse_pitching_counts,
)


def _bucket_nodes(buckets: Mapping[str, Any] | Iterable[Any]) -> list[Any]:
    if isinstance(buckets, Mapping):
        return list(buckets.values())
    return list(buckets)


def sum_batting_counts(counts: Iterable[BattingCounts]) -> BattingCounts:
    parsed = list(counts)
    if len(parsed) == 1:
        return parsed[0]
    totals: dict[str, Any] = {
        attr: sum(getattr(c, attr) for c in parsed) for attr in BATTING_COUNT_FIELDS.values()
    }
    # Derivable totals are only trusted when every bucket reports them;
    # a partial sum would disagree with the components summed above.
    for attr in BATTING_DERIVABLE_FIELDS.values():
        values = [getattr(c, attr) for c in parsed]
        totals[attr] = sum(values) if values and all(v is not None for v in values) else None
    return BattingCounts(**totals)


def sum_pitching_counts(counts: Iterable[PitchingCounts]) -> PitchingCounts:
    parsed = list(counts)
    if len(parsed) == 1:
        return parsed[0]
    totals: dict[str, Any] = {
        attr: sum(getattr(c, attr) for c in parsed) for attr in PITCHING_COUNT_FIELDS.values()
    }
    innings = sum((c.innings for c in parsed), Innings())
    return PitchingCounts(innings=innings, **totals)


def aggregate_batting_buckets(buckets: Mapping[str, Any] | Iterable[Any]) -> BattingCounts:
    return sum_batting_counts(parse_batting_counts(node) for node in _bucket_nodes(buckets))


def aggregate_pitching_buckets(buckets: Mapping[str, Any] | Iterable[Any]) -> PitchingCounts:
    return sum_pitching_counts(parse_pitching_counts(node) for node in _bucket_nodes(buckets))
