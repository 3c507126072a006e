from typing import Any, Protocol, runtime_checkable

from splits_explorer.domain.league_baseline import LeagueBaseline
from splits_explorer.domain.player import PlayerCandidate


@runtime_checkable
class SplitsSource(Protocol):
    def search_players(
        self,
        query: str,
        season: int,
        team: str | None = None,
        limit: int = 20,
    ) -> list[PlayerCandidate]: ...

    def fetch_player_splits(self, team: str, player: str, season: int) -> dict[str, Any]: ...

    def fetch_league_baseline(self, season: int) -> LeagueBaseline | None: ...
