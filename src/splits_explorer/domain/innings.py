"""Innings pitched as a count of outs.

Box scores write innings in thirds notation: ``"6.2"`` means six full innings
plus two outs, not 6.2 innings. Adding those strings as decimals drifts
(``1.2 + 1.2 = 2.4``, which is not a legal innings value), so every innings
value in the package is carried as an integer number of outs and only turned
back into notation for display.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

OUTS_PER_INNING = 3


@dataclass(frozen=True, order=True)
class Innings:
    outs: int = 0

    @classmethod
    def parse(cls, value: Any) -> Innings:
        """Read a thirds-notation value (``"5.2"``, ``5.2``, ``5``) into outs.

        The digit after the point is read literally as extra outs. Digits above
        2 are capped at 2. Anything unparseable or negative reads as zero outs.
        """
        if value is None or isinstance(value, bool):
            return cls()
        if isinstance(value, int):
            return cls(max(value, 0) * OUTS_PER_INNING)
        if isinstance(value, float):
            if not math.isfinite(value) or value <= 0:
                return cls()
            tenths = round(value * 10)
            return cls._from_parts(tenths // 10, tenths % 10)
        text = str(value).strip()
        if not text:
            return cls()
        whole_text, _, remainder_text = text.partition(".")
        try:
            whole = int(whole_text or "0")
            remainder = int(remainder_text[:1] or "0")
        except ValueError:
            return cls()
        if whole < 0 or text.startswith("-"):
            return cls()
        return cls._from_parts(whole, remainder)

    @classmethod
    def _from_parts(cls, whole: int, remainder: int) -> Innings:
        return cls(whole * OUTS_PER_INNING + min(remainder, OUTS_PER_INNING - 1))

    @property
    def whole(self) -> int:
        return self.outs // OUTS_PER_INNING

    @property
    def remainder(self) -> int:
        return self.outs % OUTS_PER_INNING

    @property
    def notation(self) -> str:
        return f"{self.whole}.{self.remainder}"

    @property
    def as_float(self) -> float:
        """True innings for rate arithmetic (``"6.2"`` -> 6.666...)."""
        return self.outs / OUTS_PER_INNING

    def __float__(self) -> float:
        return self.as_float

    def __add__(self, other: object) -> Innings:
        if not isinstance(other, Innings):
            return NotImplemented
        return Innings(self.outs + other.outs)

    def __bool__(self) -> bool:
        return self.outs > 0

    def __str__(self) -> str:
        return self.notation
