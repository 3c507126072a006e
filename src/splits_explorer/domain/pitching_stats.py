from dataclasses import dataclass, field

from splits_explorer.domain.innings import Innings


@dataclass(frozen=True)
class PitchingCounts:
    innings: Innings = field(default_factory=Innings)
    earned_runs: int = 0
    hits: int = 0
    home_runs: int = 0
    base_on_balls: int = 0
    strike_outs: int = 0
    hit_by_pitch: int = 0
    batters_faced: int = 0
    era: float | None = None
    whip: float | None = None
    fip: float | None = None


@dataclass(frozen=True)
class DerivedPitchingStats:
    innings: Innings = field(default_factory=Innings)
    era: float = 0.0
    whip: float = 0.0
    fip: float = 0.0
    k9: float = 0.0
    bb9: float = 0.0
    strike_outs: int = 0
    base_on_balls: int = 0
    hits: int = 0
    home_runs: int = 0
    earned_runs: int = 0
    k_rate: float = 0.0
    bb_rate: float = 0.0
    batters_faced: int = 0
