"""Explorer session: the state one split-explorer view owns.

Payload and baseline state live on the session object and are passed around
explicitly; nothing is module-global. Every render recomputes rows and tiers
from the held payload.
"""

import itertools
import logging
from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import httpx

from splits_explorer.domain.columns import columns_for
from splits_explorer.domain.errors import FetchError
from splits_explorer.domain.load_state import LoadState
from splits_explorer.domain.player import PlayerCandidate
from splits_explorer.domain.result import Err, Ok, Result
from splits_explorer.domain.split_row import SplitGroup, SplitRow, SplitTable
from splits_explorer.domain.tier import StatContext
from splits_explorer.ingest.protocols import SplitsSource
from splits_explorer.services.baseline_provider import BaselineProvider
from splits_explorer.services.rate_deriver import DEFAULT_FIP_CONSTANT
from splits_explorer.services.sorting import filter_rows, sort_rows
from splits_explorer.services.split_views import COMPOUND_VIEWS, build_groups, build_rows, combined_row
from splits_explorer.services.tier_classifier import classify_groups

logger = logging.getLogger(__name__)

_ROW_FIELDS = frozenset({"key", "label"})


@dataclass(frozen=True)
class Selection:
    team: str
    player: str
    season: int

    @property
    def title(self) -> str:
        return f"{self.player} {self.team} {self.season}"


def _fetch_error(resource: str, exc: Exception) -> FetchError:
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return FetchError(message=str(exc), resource=resource, not_found=status == 404, status_code=status)
    return FetchError(message=str(exc), resource=resource)


class ExplorerSession:
    def __init__(
        self,
        source: SplitsSource,
        season: int,
        *,
        recent_limit: int = 10,
        fip_constant: float = DEFAULT_FIP_CONSTANT,
    ) -> None:
        self._source = source
        self._season = season
        self._fip_constant = fip_constant
        self._baseline = BaselineProvider(source.fetch_league_baseline)
        self._recent: deque[Selection] = deque(maxlen=recent_limit)
        self._tokens = itertools.count(1)
        self._latest_token = 0
        self._selection: Selection | None = None
        self._payload: dict[str, Any] | None = None
        self._state = LoadState.IDLE
        self._error: FetchError | None = None

    @property
    def season(self) -> int:
        return self._season

    @property
    def baseline(self) -> BaselineProvider:
        return self._baseline

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def error(self) -> FetchError | None:
        return self._error

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def payload(self) -> dict[str, Any] | None:
        return self._payload

    @property
    def recent(self) -> list[Selection]:
        """Most recent selection first."""
        return list(reversed(self._recent))

    def change_season(self, season: int) -> None:
        """Switch seasons; the baseline is replaced wholesale and the loaded payload dropped."""
        if season == self._season and self._baseline.season == season:
            return
        self._season = season
        self._payload = None
        self._selection = None
        self._state = LoadState.IDLE
        self._error = None
        self._baseline.load(season)

    def load_baseline(self) -> Result[Any, FetchError]:
        return self._baseline.load(self._season)

    def search(self, query: str, team: str | None = None, limit: int = 20) -> Result[list[PlayerCandidate], FetchError]:
        try:
            return Ok(self._source.search_players(query, self._season, team=team, limit=limit))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Player search for %r failed: %s", query, e)
            return Err(_fetch_error(f"search:{query}", e))

    def begin_request(self) -> int:
        """Issue a request token; only the newest token may publish a result."""
        self._latest_token = next(self._tokens)
        self._state = LoadState.LOADING
        self._error = None
        return self._latest_token

    def complete_request(
        self,
        token: int,
        selection: Selection,
        result: Result[dict[str, Any], FetchError],
    ) -> bool:
        """Publish *result* if *token* is still the newest request. Returns whether it was applied."""
        if token != self._latest_token:
            logger.debug(
                "Dropping stale splits response for %s (token %d < %d)", selection.title, token, self._latest_token
            )
            return False
        match result:
            case Ok(payload):
                self._payload = payload
                self._selection = selection
                self._state = LoadState.LOADED
                self._remember(selection)
            case Err(error):
                self._payload = None
                self._selection = selection
                self._state = LoadState.ERROR
                self._error = error
        return True

    def load(self, team: str, player: str, season: int | None = None) -> Result[dict[str, Any], FetchError]:
        """Fetch a player's macro splits; on failure the session enters the ERROR state and may be retried."""
        if season is not None and season != self._season:
            self.change_season(season)
        self._baseline.load(self._season)

        selection = Selection(team=team.upper(), player=player, season=self._season)
        token = self.begin_request()
        result: Result[dict[str, Any], FetchError]
        try:
            result = Ok(self._source.fetch_player_splits(selection.team, selection.player, selection.season))
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Loading splits for %s failed: %s", selection.title, e)
            result = Err(_fetch_error(f"splits:{selection.title}", e))
        self.complete_request(token, selection, result)
        return result

    def retry(self) -> Result[dict[str, Any], FetchError] | None:
        if self._selection is None:
            return None
        return self.load(self._selection.team, self._selection.player, self._selection.season)

    def _remember(self, selection: Selection) -> None:
        if selection in self._recent:
            self._recent.remove(selection)
        self._recent.append(selection)

    def render(
        self,
        view: str,
        context: StatContext = StatContext.BATTING,
        *,
        sort_key: str | None = None,
        descending: bool = True,
        text_filter: str | None = None,
        include_total: bool = False,
        combine: Sequence[str] = (),
        combine_label: str = "Combined",
    ) -> SplitTable:
        """Build, filter, sort and tier one view.

        *sort_key* names a stat column (resolved on the *context* stats) or a row
        field (``label``, ``key``). For flat views, *combine* folds the named buckets
        into one extra row placed last and tiered alongside the others.
        """
        payload = self._payload or {}
        extra: tuple[SplitRow, ...] = ()
        if view in COMPOUND_VIEWS:
            groups = build_groups(payload, view, fip_constant=self._fip_constant)
        else:
            rows = build_rows(payload, view, include_total=include_total, fip_constant=self._fip_constant)
            groups = [SplitGroup(key="", label="", rows=tuple(rows))]
            if combine:
                row = self.combined(view, list(combine), combine_label)
                extra = (row,) if row is not None else ()

        path = self._sort_path(context, sort_key)
        shown: list[SplitGroup] = []
        for group in groups:
            rows = [*sort_rows(filter_rows(group.rows, text_filter), path, descending), *extra]
            if rows or not group.label:
                shown.append(SplitGroup(key=group.key, label=group.label, rows=tuple(rows)))

        tiers = classify_groups(shown, columns_for(context), context, self._baseline.rates_for(context))
        return SplitTable(view=view, context=context, groups=tuple(shown), tiers=tiers)

    @staticmethod
    def _sort_path(context: StatContext, sort_key: str | None) -> str | None:
        if not sort_key:
            return None
        if sort_key in _ROW_FIELDS:
            return sort_key
        return f"{context.value}.{sort_key}"

    def combined(self, view: str, keys: list[str], label: str = "Combined") -> SplitRow | None:
        return combined_row(self._payload or {}, view, keys, label=label, fip_constant=self._fip_constant)
