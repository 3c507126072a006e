import bisect
import math
from collections.abc import Iterable, Mapping, Sequence

from splits_explorer.domain.columns import Column
from splits_explorer.domain.split_row import SplitGroup
from splits_explorer.domain.tier import StatContext, Tier

LOWER_IS_BETTER: dict[StatContext, frozenset[str]] = {
    StatContext.BATTING: frozenset({"k_rate"}),
    StatContext.PITCHING: frozenset({"era", "whip", "fip"}),
}

_PERCENTILE_CUTS: tuple[tuple[float, Tier], ...] = (
    (0.90, Tier.ELITE),
    (0.65, Tier.ABOVE_AVERAGE),
    (0.35, Tier.AVERAGE),
    (0.10, Tier.BELOW_AVERAGE),
)


def _finite(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def lower_is_better(stat_key: str, context: StatContext) -> bool:
    return stat_key in LOWER_IS_BETTER[context]


def tier_from_deviation(deviation_pct: float) -> Tier:
    """Map signed percent deviation from the baseline (positive = better) to a tier."""
    if deviation_pct > 10.0:
        return Tier.ELITE
    if deviation_pct > 3.0:
        return Tier.ABOVE_AVERAGE
    if deviation_pct >= -3.0:
        return Tier.AVERAGE
    if deviation_pct >= -10.0:
        return Tier.BELOW_AVERAGE
    return Tier.POOR


def percentile_rank(value: float, sample: Sequence[float]) -> float | None:
    """Position of *value* in *sample* as 0..1; ties resolve to the first index >= value."""
    ordered = sorted(sample)
    if len(ordered) < 2:
        return None
    index = bisect.bisect_left(ordered, value)
    return min(max(index / (len(ordered) - 1), 0.0), 1.0)


def tier_from_percentile(percentile: float) -> Tier:
    for cut, tier in _PERCENTILE_CUTS:
        if percentile >= cut:
            return tier
    return Tier.POOR


def classify(
    stat_key: str,
    value: object,
    baseline: Mapping[str, float] | None = None,
    sample_values: Iterable[object] = (),
    context: StatContext = StatContext.BATTING,
) -> Tier:
    """Place *value* into one of five quality tiers.

    Compares against the league baseline for *stat_key* when one exists and is
    non-zero; otherwise ranks the value within *sample_values* (the other
    values currently on screen). Missing or non-finite values are AVERAGE.
    """
    number = _finite(value)
    if number is None:
        return Tier.AVERAGE
    inverted = lower_is_better(stat_key, context)

    reference = _finite(baseline.get(stat_key)) if baseline else None
    if reference:
        # Rounded so exact band edges (+10%, -3%) are not pushed across by float error.
        deviation = round((number - reference) / abs(reference) * 100.0, 9)
        if inverted:
            deviation = -deviation
        return tier_from_deviation(deviation)

    sample = [v for v in (_finite(s) for s in sample_values) if v is not None]
    percentile = percentile_rank(number, sample)
    if percentile is None:
        return Tier.AVERAGE
    tier = tier_from_percentile(percentile)
    return Tier(4 - tier) if inverted else tier


def classify_groups(
    groups: Sequence[SplitGroup],
    columns: Sequence[Column],
    context: StatContext,
    baseline: Mapping[str, float] | None = None,
) -> dict[tuple[str, str, str], Tier]:
    """Tier every tiered cell; each column's sample is its values across all displayed rows."""
    rows = [(group.key, row) for group in groups for row in group.rows]
    tiers: dict[tuple[str, str, str], Tier] = {}
    for column in columns:
        if not column.tiered:
            continue
        values = [getattr(row.stats_for(context), column.key, None) for _, row in rows]
        for (group_key, row), value in zip(rows, values, strict=True):
            tiers[(group_key, row.key, column.key)] = classify(column.key, value, baseline, values, context)
    return tiers
