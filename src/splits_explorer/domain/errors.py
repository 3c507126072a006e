from dataclasses import dataclass


@dataclass(frozen=True)
class SplitsError:
    message: str


@dataclass(frozen=True)
class FetchError(SplitsError):
    resource: str
    not_found: bool = False
    status_code: int | None = None
