from dataclasses import dataclass


@dataclass(frozen=True)
class PlayerCandidate:
    id: str
    team: str
    name: str
    season: int

    @property
    def display(self) -> str:
        return f"{self.name} ({self.team}, {self.season})"
