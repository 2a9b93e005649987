from .assets import PlantSpec
from .game_data import (
    Plot,
    LogEvent,
    DailyEvent,
    HistorySample,
    GameState,
    GameStateView,
    PendingAction,
)

__all__ = [
    "PlantSpec",
    "Plot",
    "LogEvent",
    "DailyEvent",
    "HistorySample",
    "GameState",
    "GameStateView",
    "PendingAction",
]
