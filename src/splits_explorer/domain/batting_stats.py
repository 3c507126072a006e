from dataclasses import dataclass


@dataclass(frozen=True)
class BattingCounts:
    at_bats: int = 0
    hits: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    base_on_balls: int = 0
    strike_outs: int = 0
    hit_by_pitch: int = 0
    sacrifice_flies: int = 0
    plate_appearances: int | None = None
    singles: int | None = None
    total_bases: int | None = None
    avg: float | None = None
    obp: float | None = None
    slg: float | None = None
    ops: float | None = None


@dataclass(frozen=True)
class DerivedBattingStats:
    pa: int = 0
    at_bats: int = 0
    hits: int = 0
    singles: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    total_bases: int = 0
    base_on_balls: int = 0
    strike_outs: int = 0
    hit_by_pitch: int = 0
    sacrifice_flies: int = 0
    avg: float = 0.0
    obp: float = 0.0
    slg: float = 0.0
    ops: float = 0.0
    k_rate: float = 0.0
    bb_rate: float = 0.0
