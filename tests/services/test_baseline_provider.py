import httpx

from splits_explorer.domain.league_baseline import LeagueBaseline
from splits_explorer.domain.load_state import LoadState
from splits_explorer.domain.result import Err, Ok
from splits_explorer.domain.tier import StatContext
from splits_explorer.services.baseline_provider import BaselineProvider


class FakeFetch:
    def __init__(self, baselines: dict[int, LeagueBaseline | None], failing: set[int] | None = None) -> None:
        self.baselines = baselines
        self.failing = failing or set()
        self.calls: list[int] = []

    def __call__(self, season: int) -> LeagueBaseline | None:
        self.calls.append(season)
        if season in self.failing:
            raise httpx.ConnectError("connection refused")
        return self.baselines.get(season)


def _baseline(season: int, avg: float) -> LeagueBaseline:
    return LeagueBaseline(season=season, batting={"avg": avg}, pitching={"era": 4.0})


class TestBaselineProvider:
    def test_starts_idle(self) -> None:
        provider = BaselineProvider(FakeFetch({}))
        assert provider.state is LoadState.IDLE
        assert provider.current is None
        assert provider.rates_for(StatContext.BATTING) is None

    def test_load_success(self) -> None:
        provider = BaselineProvider(FakeFetch({2025: _baseline(2025, 0.245)}))
        result = provider.load(2025)
        assert isinstance(result, Ok)
        assert provider.state is LoadState.LOADED
        assert provider.season == 2025
        assert provider.rates_for(StatContext.BATTING) == {"avg": 0.245}
        assert provider.rates_for(StatContext.PITCHING) == {"era": 4.0}

    def test_loaded_season_not_refetched(self) -> None:
        fetch = FakeFetch({2025: _baseline(2025, 0.245)})
        provider = BaselineProvider(fetch)
        provider.load(2025)
        provider.load(2025)
        assert fetch.calls == [2025]

    def test_failure_sets_error_state(self) -> None:
        provider = BaselineProvider(FakeFetch({}, failing={2025}))
        result = provider.load(2025)
        assert isinstance(result, Err)
        assert result.error.resource == "baseline:2025"
        assert provider.state is LoadState.ERROR
        assert provider.error is not None
        assert provider.current is None

    def test_failed_season_is_retried(self) -> None:
        fetch = FakeFetch({2025: _baseline(2025, 0.245)}, failing={2025})
        provider = BaselineProvider(fetch)
        provider.load(2025)
        fetch.failing.clear()
        provider.load(2025)
        assert fetch.calls == [2025, 2025]
        assert provider.state is LoadState.LOADED
        assert provider.error is None

    def test_season_change_replaces_baseline(self) -> None:
        fetch = FakeFetch({2024: _baseline(2024, 0.243)}, failing={2025})
        provider = BaselineProvider(fetch)
        provider.load(2024)
        provider.load(2025)
        assert provider.season == 2025
        assert provider.current is None

    def test_no_published_baseline(self) -> None:
        provider = BaselineProvider(FakeFetch({}))
        result = provider.load(2030)
        assert result == Ok(None)
        assert provider.state is LoadState.LOADED
        assert provider.current is None
