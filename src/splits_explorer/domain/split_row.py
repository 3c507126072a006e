from dataclasses import dataclass, field

from splits_explorer.domain.batting_stats import DerivedBattingStats
from splits_explorer.domain.pitching_stats import DerivedPitchingStats
from splits_explorer.domain.tier import StatContext, Tier


@dataclass(frozen=True)
class SplitRow:
    key: str
    label: str
    batting: DerivedBattingStats = field(default_factory=DerivedBattingStats)
    pitching: DerivedPitchingStats = field(default_factory=DerivedPitchingStats)

    def stats_for(self, context: StatContext) -> DerivedBattingStats | DerivedPitchingStats:
        return self.batting if context is StatContext.BATTING else self.pitching


@dataclass(frozen=True)
class SplitGroup:
    key: str
    label: str
    rows: tuple[SplitRow, ...] = ()


@dataclass(frozen=True)
class SplitTable:
    """One rendered view: groups of rows plus a tier per (group key, row key, column key).

    Flat views hold a single unlabeled group.
    """

    view: str
    context: StatContext
    groups: tuple[SplitGroup, ...]
    tiers: dict[tuple[str, str, str], Tier] = field(default_factory=dict)

    @property
    def grouped(self) -> bool:
        return len(self.groups) != 1 or self.groups[0].label != ""

    @property
    def rows(self) -> list[SplitRow]:
        return [row for group in self.groups for row in group.rows]

    def tier(self, group_key: str, row_key: str, column_key: str) -> Tier | None:
        return self.tiers.get((group_key, row_key, column_key))
