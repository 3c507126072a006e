import httpx
import pytest

from splits_explorer.domain.league_baseline import LeagueBaseline
from splits_explorer.domain.load_state import LoadState
from splits_explorer.domain.player import PlayerCandidate
from splits_explorer.domain.result import Err, Ok
from splits_explorer.domain.tier import StatContext, Tier
from splits_explorer.services.session import ExplorerSession, Selection
from tests.fakes.payloads import macro_payload
from tests.fakes.sources import FakeSplitsSource


def _not_found() -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://test/api/v2/splits/macro/player/NYY/Nobody/2025")
    return httpx.HTTPStatusError("404 Not Found", request=request, response=httpx.Response(404, request=request))


def _baseline(season: int = 2025) -> LeagueBaseline:
    return LeagueBaseline(season=season, batting={"avg": 0.250, "ops": 0.720}, pitching={"era": 4.0})


@pytest.fixture
def source() -> FakeSplitsSource:
    return FakeSplitsSource(splits=macro_payload(), baseline=_baseline())


@pytest.fixture
def session(source: FakeSplitsSource) -> ExplorerSession:
    return ExplorerSession(source, 2025)


class TestLoad:
    def test_success(self, session: ExplorerSession, source: FakeSplitsSource) -> None:
        result = session.load("nyy", "Aaron Judge")
        assert isinstance(result, Ok)
        assert session.state is LoadState.LOADED
        assert session.payload == macro_payload()
        assert session.selection == Selection(team="NYY", player="Aaron Judge", season=2025)
        assert source.split_calls == [("NYY", "Aaron Judge", 2025)]

    def test_baseline_loaded_alongside(self, session: ExplorerSession, source: FakeSplitsSource) -> None:
        session.load("NYY", "Aaron Judge")
        session.load("NYY", "Juan Soto")
        assert session.baseline.current == _baseline()
        assert source.baseline_calls == [2025]

    def test_failure_enters_error_state(self, source: FakeSplitsSource) -> None:
        source.splits_error = httpx.ConnectError("connection refused")
        session = ExplorerSession(source, 2025)
        result = session.load("NYY", "Aaron Judge")
        assert isinstance(result, Err)
        assert session.state is LoadState.ERROR
        assert session.error is not None
        assert not session.error.not_found
        assert session.payload is None

    def test_not_found_flagged(self, source: FakeSplitsSource) -> None:
        source.splits_error = _not_found()
        session = ExplorerSession(source, 2025)
        match session.load("NYY", "Nobody"):
            case Err(error):
                assert error.not_found
                assert error.status_code == 404
            case Ok(_):
                pytest.fail("expected an error")

    def test_retry_after_failure(self, source: FakeSplitsSource) -> None:
        source.splits_error = httpx.ConnectError("connection refused")
        session = ExplorerSession(source, 2025)
        session.load("NYY", "Aaron Judge")
        source.splits_error = None
        result = session.retry()
        assert isinstance(result, Ok)
        assert session.state is LoadState.LOADED
        assert len(source.split_calls) == 2

    def test_retry_without_selection(self, session: ExplorerSession) -> None:
        assert session.retry() is None

    def test_baseline_failure_does_not_block_splits(self, source: FakeSplitsSource) -> None:
        source.baseline_error = httpx.ConnectError("down")
        session = ExplorerSession(source, 2025)
        result = session.load("NYY", "Aaron Judge")
        assert isinstance(result, Ok)
        assert session.baseline.state is LoadState.ERROR


class TestRequestTokens:
    def test_stale_response_dropped(self, session: ExplorerSession) -> None:
        first = session.begin_request()
        second = session.begin_request()
        stale = Selection(team="NYY", player="Aaron Judge", season=2025)
        fresh = Selection(team="NYY", player="Juan Soto", season=2025)

        assert session.complete_request(second, fresh, Ok({"by_location": {}}))
        assert not session.complete_request(first, stale, Ok(macro_payload()))
        assert session.selection == fresh
        assert session.payload == {"by_location": {}}

    def test_begin_marks_loading(self, session: ExplorerSession) -> None:
        session.begin_request()
        assert session.state is LoadState.LOADING


class TestRecent:
    def test_newest_first_and_deduplicated(self, source: FakeSplitsSource) -> None:
        session = ExplorerSession(source, 2025, recent_limit=2)
        session.load("NYY", "Aaron Judge")
        session.load("NYY", "Juan Soto")
        session.load("NYY", "Aaron Judge")
        assert [s.player for s in session.recent] == ["Aaron Judge", "Juan Soto"]

        session.load("BOS", "Rafael Devers")
        assert [s.player for s in session.recent] == ["Rafael Devers", "Aaron Judge"]

    def test_failures_not_remembered(self, source: FakeSplitsSource) -> None:
        source.splits_error = httpx.ConnectError("down")
        session = ExplorerSession(source, 2025)
        session.load("NYY", "Aaron Judge")
        assert session.recent == []


class TestSeasonChange:
    def test_drops_payload_and_replaces_baseline(self, session: ExplorerSession, source: FakeSplitsSource) -> None:
        session.load("NYY", "Aaron Judge")
        source.baseline = None
        session.change_season(2024)
        assert session.season == 2024
        assert session.payload is None
        assert session.state is LoadState.IDLE
        assert session.baseline.season == 2024
        assert session.baseline.current is None
        assert source.baseline_calls == [2025, 2024]

    def test_load_with_other_season_switches(self, session: ExplorerSession, source: FakeSplitsSource) -> None:
        session.load("NYY", "Aaron Judge", 2024)
        assert session.season == 2024
        assert source.split_calls == [("NYY", "Aaron Judge", 2024)]


class TestSearch:
    def test_ok(self, source: FakeSplitsSource) -> None:
        source.candidates = [PlayerCandidate(id="NYY-Aaron_Judge", team="NYY", name="Aaron Judge", season=2025)]
        session = ExplorerSession(source, 2025)
        result = session.search("judge", team="NYY")
        assert result == Ok(source.candidates)
        assert source.search_calls == [("judge", 2025, "NYY", 20)]

    def test_err(self, source: FakeSplitsSource) -> None:
        source.search_error = httpx.ReadTimeout("slow")
        session = ExplorerSession(source, 2025)
        result = session.search("judge")
        assert isinstance(result, Err)
        assert result.error.resource == "search:judge"


class TestRender:
    def test_flat_view_sorted(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location", sort_key="avg", descending=True)
        assert not table.grouped
        assert [r.key for r in table.rows] == ["home", "away"]

    def test_ascending(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location", sort_key="avg", descending=False)
        assert [r.key for r in table.rows] == ["away", "home"]

    def test_tiers_against_baseline(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location")
        # home .300 vs league .250, away .250
        assert table.tier("", "home", "avg") == Tier.ELITE
        assert table.tier("", "away", "avg") == Tier.AVERAGE
        assert table.tier("", "home", "pa") is None

    def test_percentile_tiers_without_baseline(self, source: FakeSplitsSource) -> None:
        source.baseline_error = httpx.ConnectError("down")
        session = ExplorerSession(source, 2025)
        session.load("NYY", "Aaron Judge")
        table = session.render("location")
        assert table.tier("", "home", "avg") == Tier.ELITE
        assert table.tier("", "away", "avg") == Tier.POOR

    def test_filter(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("teams", text_filter="nyy")
        assert [r.label for r in table.rows] == ["vs NYY"]

    def test_compound_view_grouped(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("count_vs_team")
        assert table.grouped
        assert [g.key for g in table.groups] == ["BOS", "NYY"]

    def test_compound_filter_drops_empty_groups(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("count_vs_team", text_filter="3-2")
        assert [g.key for g in table.groups] == ["NYY"]

    def test_pitching_context(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location", StatContext.PITCHING, sort_key="era", descending=False)
        assert table.context is StatContext.PITCHING
        assert table.rows[0].pitching.era <= table.rows[1].pitching.era

    def test_render_before_load_is_empty(self, session: ExplorerSession) -> None:
        table = session.render("location")
        assert table.rows == []

    def test_combined(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        row = session.combined("teams", ["NYY", "BOS"])
        assert row is not None
        assert row.label == "Combined"
        assert row.batting.at_bats == 30

    def test_sort_by_label(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("teams", sort_key="label", descending=True)
        assert [r.label for r in table.rows] == ["vs NYY", "vs BOS"]

    def test_sort_by_key_ascending(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location", sort_key="key", descending=False)
        assert [r.key for r in table.rows] == ["away", "home"]


class TestRenderCombined:
    def test_combined_row_last_and_tiered(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("location", sort_key="avg", descending=False, combine=["home", "away"])
        assert [r.key for r in table.rows] == ["away", "home", "home+away"]
        # 25 for 90 against a .250 league average
        assert table.tier("", "home+away", "avg") == Tier.ELITE

    def test_combined_row_joins_percentile_sample(self, source: FakeSplitsSource) -> None:
        source.baseline_error = httpx.ConnectError("down")
        session = ExplorerSession(source, 2025)
        session.load("NYY", "Aaron Judge")
        table = session.render("location", combine=["home", "away"])
        assert table.tier("", "home", "avg") == Tier.ELITE
        assert table.tier("", "home+away", "avg") == Tier.AVERAGE
        assert table.tier("", "away", "avg") == Tier.POOR

    def test_unknown_keys_add_nothing(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("teams", combine=["LAD"])
        assert [r.label for r in table.rows] == ["vs BOS", "vs NYY"]

    def test_ignored_for_compound_views(self, session: ExplorerSession) -> None:
        session.load("NYY", "Aaron Judge")
        table = session.render("count_vs_team", combine=["NYY"])
        assert all(r.label != "Combined" for r in table.rows)
