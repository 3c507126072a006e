from enum import IntEnum, StrEnum


class Tier(IntEnum):
    POOR = 0
    BELOW_AVERAGE = 1
    AVERAGE = 2
    ABOVE_AVERAGE = 3
    ELITE = 4

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class StatContext(StrEnum):
    BATTING = "batting"
    PITCHING = "pitching"
