import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from splits_explorer.domain.league_baseline import LeagueBaseline, parse_league_baseline
from splits_explorer.domain.player import PlayerCandidate
from splits_explorer.ingest._retry import default_http_retry

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001"
_DEFAULT_RETRY = default_http_retry("splits API request")


def player_path_name(name: str) -> str:
    """Macro keys store player names with underscores for spaces."""
    return "_".join(name.replace("-", " ").split())


def _splits_body(data: Any) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        return {}
    splits = data.get("splits")
    if isinstance(splits, Mapping):
        return dict(splits)
    return {k: v for k, v in data.items() if k not in ("key", "info", "games", "lastUpdated")}


class SplitsApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: httpx.Client | None = None,
        retry: Callable[..., Callable[..., Any]] = _DEFAULT_RETRY,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=5.0))
        self._get_with_retry = retry(self._do_get)

    def _do_get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("GET %s params=%s", url, params)
        response = self._client.get(url, params=params)
        logger.debug("Splits API responded %d", response.status_code)
        response.raise_for_status()
        return response.json()

    def search_players(
        self,
        query: str,
        season: int,
        team: str | None = None,
        limit: int = 20,
    ) -> list[PlayerCandidate]:
        params: dict[str, Any] = {"q": query, "season": season, "limit": limit}
        if team:
            params["team"] = team.upper()
        data = self._get_with_retry("/api/v2/splits/players/search", params)

        seen: set[str] = set()
        candidates: list[PlayerCandidate] = []
        for raw in data.get("players", []) if isinstance(data, Mapping) else []:
            player_id = str(raw.get("id", ""))
            if not player_id or player_id in seen:
                continue
            seen.add(player_id)
            try:
                player_season = int(raw.get("season", season))
            except (TypeError, ValueError):
                player_season = season
            candidates.append(
                PlayerCandidate(
                    id=player_id,
                    team=str(raw.get("team", "")).upper(),
                    name=str(raw.get("name", "")),
                    season=player_season,
                )
            )
        logger.info("Found %d players matching %r in %d", len(candidates), query, season)
        return candidates

    def fetch_player_splits(self, team: str, player: str, season: int) -> dict[str, Any]:
        path = f"/api/v2/splits/macro/player/{team.upper()}/{player_path_name(player)}/{season}"
        data = self._get_with_retry(path)
        splits = _splits_body(data)
        logger.info("Fetched %d split families for %s %s %d", len(splits), team.upper(), player, season)
        return splits

    def fetch_league_baseline(self, season: int) -> LeagueBaseline | None:
        """Return the season baseline, or ``None`` when the backend has none for *season*."""
        try:
            data = self._get_with_retry(f"/api/v2/splits/league/{season}")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise
        if not isinstance(data, Mapping) or not data:
            return None
        return parse_league_baseline(season, data)

    def close(self) -> None:
        self._client.close()
