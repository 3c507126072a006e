import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from splits_explorer.domain.innings import Innings

T = TypeVar("T")


def resolve(row: Any, path: str) -> Any:
    """Look up a dotted *path* on mappings and attributes; missing segments give None."""
    value = row
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def _is_null(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _sort_key(value: Any) -> tuple[int, float | str]:
    if isinstance(value, Innings):
        return (0, value.as_float)
    if isinstance(value, int | float) and not isinstance(value, bool):
        return (0, float(value))
    return (1, str(value).casefold())


def sort_rows(rows: Sequence[T], sort_key: str | None, descending: bool = False) -> list[T]:
    """Stable sort of *rows* by *sort_key*; nulls always sort last, whatever the direction."""
    if not sort_key:
        return list(rows)
    present: list[tuple[tuple[int, float | str], T]] = []
    missing: list[T] = []
    for row in rows:
        value = resolve(row, sort_key)
        if _is_null(value):
            missing.append(row)
        else:
            present.append((_sort_key(value), row))
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [row for _, row in present] + missing


def _default_label(row: Any) -> str:
    label = resolve(row, "label")
    return "" if label is None else str(label)


def filter_rows(rows: Sequence[T], text: str | None, label: Callable[[T], str] = _default_label) -> list[T]:
    """Keep rows whose display label contains *text*, case-insensitively."""
    needle = (text or "").strip().casefold()
    if not needle:
        return list(rows)
    return [row for row in rows if needle in label(row).casefold()]
