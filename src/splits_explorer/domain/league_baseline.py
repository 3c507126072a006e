from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from splits_explorer.domain.innings import Innings
from splits_explorer.domain.stat_node import to_int, to_optional_float
from splits_explorer.domain.tier import StatContext

_BATTING_KEYS: dict[str, str] = {
    "avg": "avg",
    "obp": "obp",
    "slg": "slg",
    "ops": "ops",
    "kRate": "k_rate",
    "bbRate": "bb_rate",
}

_PITCHING_KEYS: dict[str, str] = {
    "era": "era",
    "whip": "whip",
    "fip": "fip",
}


@dataclass(frozen=True)
class PitchingTotals:
    innings: Innings = field(default_factory=Innings)
    strike_outs: int = 0
    base_on_balls: int = 0


@dataclass(frozen=True)
class LeagueBaseline:
    """League-wide average rates for one season, keyed by derived-stat field name."""

    season: int
    batting: Mapping[str, float] = field(default_factory=dict)
    pitching: Mapping[str, float] = field(default_factory=dict)
    pitching_totals: PitchingTotals = field(default_factory=PitchingTotals)

    def rates_for(self, context: StatContext) -> Mapping[str, float]:
        return self.batting if context is StatContext.BATTING else self.pitching


def _rates(raw: Any, keys: Mapping[str, str]) -> dict[str, float]:
    if not isinstance(raw, Mapping):
        return {}
    rates: dict[str, float] = {}
    for key, attr in keys.items():
        value = to_optional_float(raw.get(key))
        if value is not None:
            rates[attr] = value
    return rates


def parse_league_baseline(season: int, payload: Any) -> LeagueBaseline:
    """Build a baseline from the backend payload.

    League K/9 and BB/9 are not shipped as rates, so they are computed from the
    pitching totals (innings converted to outs first) when those are present.
    """
    if not isinstance(payload, Mapping):
        return LeagueBaseline(season=season)
    batting = _rates(payload.get("batting"), _BATTING_KEYS)
    raw_pitching = payload.get("pitching")
    pitching = _rates(raw_pitching, _PITCHING_KEYS)

    raw_totals = raw_pitching.get("totals") if isinstance(raw_pitching, Mapping) else None
    totals = PitchingTotals()
    if isinstance(raw_totals, Mapping):
        totals = PitchingTotals(
            innings=Innings.parse(raw_totals.get("inningsPitched")),
            strike_outs=to_int(raw_totals.get("strikeOuts")),
            base_on_balls=to_int(raw_totals.get("baseOnBalls", raw_totals.get("walks"))),
        )
    if totals.innings:
        pitching["k9"] = totals.strike_outs * 9 / totals.innings.as_float
        pitching["bb9"] = totals.base_on_balls * 9 / totals.innings.as_float

    return LeagueBaseline(season=season, batting=batting, pitching=pitching, pitching_totals=totals)
