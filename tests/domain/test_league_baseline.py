import pytest

from splits_explorer.domain.innings import Innings
from splits_explorer.domain.league_baseline import LeagueBaseline, parse_league_baseline
from splits_explorer.domain.tier import StatContext


class TestParseLeagueBaseline:
    def test_batting_rates_renamed(self) -> None:
        baseline = parse_league_baseline(
            2025, {"batting": {"avg": ".245", "obp": 0.312, "kRate": 0.224, "bbRate": 0.083}}
        )
        assert baseline.season == 2025
        assert baseline.batting == pytest.approx({"avg": 0.245, "obp": 0.312, "k_rate": 0.224, "bb_rate": 0.083})

    def test_pitching_per_nine_from_totals(self) -> None:
        baseline = parse_league_baseline(
            2025,
            {
                "pitching": {
                    "era": 4.1,
                    "totals": {"inningsPitched": "100.0", "strikeOuts": 90, "walks": 30},
                }
            },
        )
        assert baseline.pitching_totals.innings == Innings(300)
        assert baseline.pitching["era"] == pytest.approx(4.1)
        assert baseline.pitching["k9"] == pytest.approx(8.1)
        assert baseline.pitching["bb9"] == pytest.approx(2.7)

    def test_no_innings_no_per_nine(self) -> None:
        baseline = parse_league_baseline(2025, {"pitching": {"whip": 1.28}})
        assert "k9" not in baseline.pitching
        assert baseline.pitching == pytest.approx({"whip": 1.28})

    def test_missing_rates_skipped(self) -> None:
        baseline = parse_league_baseline(2025, {"batting": {"avg": None, "slg": "-.--"}})
        assert baseline.batting == {}

    def test_non_mapping_payload_is_empty_baseline(self) -> None:
        assert parse_league_baseline(2024, None) == LeagueBaseline(season=2024)


class TestLeagueBaseline:
    def test_rates_for_context(self) -> None:
        baseline = LeagueBaseline(season=2025, batting={"avg": 0.25}, pitching={"era": 4.0})
        assert baseline.rates_for(StatContext.BATTING) == {"avg": 0.25}
        assert baseline.rates_for(StatContext.PITCHING) == {"era": 4.0}
