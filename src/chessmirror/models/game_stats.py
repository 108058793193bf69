"""Derived per-game facts and aggregate statistics."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class GraphPoint:
    """Rating trajectory point.

    Attributes:
        x: Cumulative play time in seconds before the game started.
        y: The player's rating for the game.
    """

    x: int
    y: int


@dataclass(frozen=True, slots=True)
class GameFact:
    """Memoized outcome of one game from one player's perspective."""

    rating: int
    win: int
    draw: int
    duration: int
    time_class: str
    rules: str


@dataclass(slots=True)
class GameStats:
    """Aggregate over a filtered, chronologically sorted set of games."""

    effective_time_class: str
    effective_rules: str
    win: int = 0
    count: int = 0
    draw: int = 0
    duration: int = 0
    graph_data: list[GraphPoint] = field(default_factory=list)

    def add(self, fact: GameFact) -> None:
        """Fold one game into the aggregate."""

        self.graph_data.append(GraphPoint(x=self.duration, y=fact.rating))
        self.win += fact.win
        self.draw += fact.draw
        self.duration += fact.duration
        self.count += 1

    def to_dict(self) -> dict[str, object]:
        return {
            "win": self.win,
            "count": self.count,
            "draw": self.draw,
            "duration": self.duration,
            "graphData": [{"x": point.x, "y": point.y} for point in self.graph_data],
            "effectiveTimeClass": self.effective_time_class,
            "effectiveRules": self.effective_rules,
        }
