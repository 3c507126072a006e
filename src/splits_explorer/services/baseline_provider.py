import logging
from collections.abc import Callable, Mapping

import httpx

from splits_explorer.domain.errors import FetchError
from splits_explorer.domain.league_baseline import LeagueBaseline
from splits_explorer.domain.load_state import LoadState
from splits_explorer.domain.result import Err, Ok, Result
from splits_explorer.domain.tier import StatContext

logger = logging.getLogger(__name__)


class BaselineProvider:
    """Holds the league baseline for the selected season.

    A failed or empty fetch leaves ``current`` as ``None`` so classification
    falls back to percentiles; it never propagates into derivation.
    """

    def __init__(self, fetch: Callable[[int], LeagueBaseline | None]) -> None:
        self._fetch = fetch
        self._season: int | None = None
        self._baseline: LeagueBaseline | None = None
        self._state = LoadState.IDLE
        self._error: FetchError | None = None

    @property
    def season(self) -> int | None:
        return self._season

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> FetchError | None:
        return self._error

    @property
    def current(self) -> LeagueBaseline | None:
        return self._baseline

    def rates_for(self, context: StatContext) -> Mapping[str, float] | None:
        if self._baseline is None:
            return None
        return self._baseline.rates_for(context)

    def load(self, season: int) -> Result[LeagueBaseline | None, FetchError]:
        """Fetch *season*'s baseline once; a loaded season is not fetched again."""
        if season == self._season and self._state is LoadState.LOADED:
            return Ok(self._baseline)

        if season != self._season:
            self._baseline = None
        self._season = season
        self._state = LoadState.LOADING
        self._error = None
        try:
            baseline = self._fetch(season)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("League baseline for %d unavailable, using percentile tiers: %s", season, e)
            self._baseline = None
            self._state = LoadState.ERROR
            self._error = FetchError(message=str(e), resource=f"baseline:{season}")
            return Err(self._error)

        self._baseline = baseline
        self._state = LoadState.LOADED
        if baseline is None:
            logger.info("No league baseline published for %d", season)
        return Ok(baseline)
