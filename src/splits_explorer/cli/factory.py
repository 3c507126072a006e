from collections.abc import Iterator
from contextlib import contextmanager

from splits_explorer.config import ExplorerSettings
from splits_explorer.ingest.splits_api import SplitsApiClient
from splits_explorer.services.session import ExplorerSession


@contextmanager
def build_session(settings: ExplorerSettings) -> Iterator[ExplorerSession]:
    """Yield a session bound to a live API client; the client is closed on exit."""
    client = SplitsApiClient(base_url=settings.base_url, timeout=settings.timeout)
    try:
        yield ExplorerSession(
            client,
            settings.season,
            recent_limit=settings.recent_limit,
            fip_constant=settings.fip_constant,
        )
    finally:
        client.close()
