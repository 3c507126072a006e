from typing import Any

from splits_explorer.domain.batting_stats import BattingCounts, DerivedBattingStats
from splits_explorer.domain.pitching_stats import DerivedPitchingStats, PitchingCounts
from splits_explorer.domain.stat_node import parse_batting_counts, parse_pitching_counts

DEFAULT_FIP_CONSTANT = 3.10


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if denominator > 0 else 0.0


def _prefer(backend: float | None, computed: float) -> float:
    """Backend-precomputed value wins over the local one, even when it is 0."""
    return backend if backend is not None else computed


def derive_batting(node: Any) -> DerivedBattingStats:
    return derive_batting_counts(parse_batting_counts(node))


def derive_batting_counts(counts: BattingCounts) -> DerivedBattingStats:
    singles = (
        counts.singles
        if counts.singles is not None
        else counts.hits - counts.doubles - counts.triples - counts.home_runs
    )
    total_bases = (
        counts.total_bases
        if counts.total_bases is not None
        else singles + 2 * counts.doubles + 3 * counts.triples + 4 * counts.home_runs
    )
    pa = (
        counts.plate_appearances
        if counts.plate_appearances is not None
        else counts.at_bats + counts.base_on_balls + counts.hit_by_pitch + counts.sacrifice_flies
    )

    avg = _prefer(counts.avg, _ratio(counts.hits, counts.at_bats))
    obp = _prefer(counts.obp, _ratio(counts.hits + counts.base_on_balls + counts.hit_by_pitch, pa))
    slg = _prefer(counts.slg, _ratio(total_bases, counts.at_bats))
    ops = _prefer(counts.ops, obp + slg)

    return DerivedBattingStats(
        pa=pa,
        at_bats=counts.at_bats,
        hits=counts.hits,
        singles=singles,
        doubles=counts.doubles,
        triples=counts.triples,
        home_runs=counts.home_runs,
        total_bases=total_bases,
        base_on_balls=counts.base_on_balls,
        strike_outs=counts.strike_outs,
        hit_by_pitch=counts.hit_by_pitch,
        sacrifice_flies=counts.sacrifice_flies,
        avg=avg,
        obp=obp,
        slg=slg,
        ops=ops,
        k_rate=_ratio(counts.strike_outs, pa),
        bb_rate=_ratio(counts.base_on_balls, pa),
    )


def derive_pitching(node: Any, fip_constant: float = DEFAULT_FIP_CONSTANT) -> DerivedPitchingStats:
    return derive_pitching_counts(parse_pitching_counts(node), fip_constant)


def derive_pitching_counts(counts: PitchingCounts, fip_constant: float = DEFAULT_FIP_CONSTANT) -> DerivedPitchingStats:
    ip = counts.innings.as_float

    computed_era = _ratio(counts.earned_runs * 9, ip)
    computed_whip = _ratio(counts.hits + counts.base_on_balls, ip)
    fip_core = 13 * counts.home_runs + 3 * (counts.base_on_balls + counts.hit_by_pitch) - 2 * counts.strike_outs
    computed_fip = fip_core / ip + fip_constant if ip > 0 else 0.0

    return DerivedPitchingStats(
        innings=counts.innings,
        era=_prefer(counts.era, computed_era),
        whip=_prefer(counts.whip, computed_whip),
        fip=_prefer(counts.fip, computed_fip),
        k9=_ratio(counts.strike_outs * 9, ip),
        bb9=_ratio(counts.base_on_balls * 9, ip),
        strike_outs=counts.strike_outs,
        base_on_balls=counts.base_on_balls,
        hits=counts.hits,
        home_runs=counts.home_runs,
        earned_runs=counts.earned_runs,
        k_rate=_ratio(counts.strike_outs, counts.batters_faced),
        bb_rate=_ratio(counts.base_on_balls, counts.batters_faced),
        batters_faced=counts.batters_faced,
    )
