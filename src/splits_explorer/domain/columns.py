from dataclasses import dataclass

from splits_explorer.domain.tier import StatContext


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    numeric: bool = True
    decimals: int | None = None
    tiered: bool = False

    def format(self, value: object) -> str:
        if value is None:
            return ""
        if self.decimals is not None and isinstance(value, float):
            text = f"{value:.{self.decimals}f}"
            # Baseball convention: .300 rather than 0.300 for three-place rates.
            if self.decimals == 3 and text.startswith("0."):
                return text[1:]
            return text
        return str(value)


BATTING_COLUMNS: tuple[Column, ...] = (
    Column("pa", "PA"),
    Column("at_bats", "AB"),
    Column("hits", "H"),
    Column("doubles", "2B"),
    Column("triples", "3B"),
    Column("home_runs", "HR"),
    Column("base_on_balls", "BB"),
    Column("strike_outs", "K"),
    Column("avg", "AVG", decimals=3, tiered=True),
    Column("obp", "OBP", decimals=3, tiered=True),
    Column("slg", "SLG", decimals=3, tiered=True),
    Column("ops", "OPS", decimals=3, tiered=True),
    Column("k_rate", "K%", decimals=3, tiered=True),
    Column("bb_rate", "BB%", decimals=3, tiered=True),
)

PITCHING_COLUMNS: tuple[Column, ...] = (
    Column("innings", "IP"),
    Column("batters_faced", "BF"),
    Column("hits", "H"),
    Column("home_runs", "HR"),
    Column("base_on_balls", "BB"),
    Column("strike_outs", "K"),
    Column("era", "ERA", decimals=2, tiered=True),
    Column("whip", "WHIP", decimals=2, tiered=True),
    Column("fip", "FIP", decimals=2, tiered=True),
    Column("k9", "K/9", decimals=2, tiered=True),
    Column("bb9", "BB/9", decimals=2, tiered=True),
    Column("k_rate", "K%", decimals=3, tiered=True),
    Column("bb_rate", "BB%", decimals=3, tiered=True),
)


def columns_for(context: StatContext) -> tuple[Column, ...]:
    return BATTING_COLUMNS if context is StatContext.BATTING else PITCHING_COLUMNS
