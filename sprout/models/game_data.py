from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..constants import (
    GRID_SIZE,
    INITIAL_MONEY,
    INITIAL_WATER,
    INITIAL_WEATHER,
    LOG_INFO,
    PLANT_EMPTY,
)


@dataclass
class Plot:
    """Represents one cell of the garden grid. The id is the plot's fixed 0-based index."""
    id: int
    plant: str = PLANT_EMPTY
    growth_stage: float = 0.0
    water_level: float = 0.0
    health: float = 100.0
    planted_day: int = 0

    @property
    def is_empty(self) -> bool:
        return self.plant == PLANT_EMPTY

    @property
    def is_mature(self) -> bool:
        return self.growth_stage >= 100.0

    def reset(self):
        """Puts the plot back into the unplanted rest state."""
        self.plant = PLANT_EMPTY
        self.growth_stage = 0.0
        self.water_level = 0.0
        self.health = 100.0


@dataclass(frozen=True)
class LogEvent:
    """A single entry in a garden's chronological log."""
    day: int
    message: str
    kind: str = LOG_INFO


@dataclass(frozen=True)
class DailyEvent:
    """A one-time effect produced by the event generator for a new day."""
    title: str
    description: str
    effect_type: str
    effect_value: int
    weather_change: Optional[str] = None


@dataclass(frozen=True)
class HistorySample:
    """A (day, money, water) snapshot used for trend display."""
    day: int
    money: int
    water_supply: int


def _fresh_slots() -> List[Plot]:
    return [Plot(id=i) for i in range(GRID_SIZE)]


@dataclass
class GameState:
    """The internal, mutable representation of one player's garden."""
    day: int = 1
    money: int = INITIAL_MONEY
    water_supply: int = INITIAL_WATER
    slots: List[Plot] = field(default_factory=_fresh_slots)
    logs: List[LogEvent] = field(default_factory=list)
    weather: str = INITIAL_WEATHER


# --- External Immutable View ---

@dataclass(frozen=True)
class GameStateView:
    """The external read-only view of a garden."""
    day: int
    money: int
    water_supply: int
    slots: Tuple[Plot, ...]
    logs: Tuple[LogEvent, ...]
    weather: str


@dataclass(frozen=True)
class PendingAction:
    """A long-running garden action that blocks the player's other commands until it finishes."""
    user_id: int
    action: str
    message: str
    started_at: float
