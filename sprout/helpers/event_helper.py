import dataclasses
import random
from typing import Any, Optional

from ..constants import (
    EFFECT_GROWTH,
    EFFECT_HEALTH,
    EFFECT_MONEY,
    EFFECT_TYPES,
    EFFECT_WATER,
    FALLBACK_WEATHER_CYCLE,
    LOG_EVENT,
    WEATHER_TYPES,
)
from ..models import DailyEvent, GameState, LogEvent
from .simulation_helper import clamp


class EventHelper:
    """Merges externally generated daily events into a garden, with a weather fallback when none arrive."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    @staticmethod
    def parse_daily_event(payload: Any) -> Optional[DailyEvent]:
        """
        Validates a decoded JSON payload from the event generator.
        Returns None for anything that does not describe a usable event.
        """

        if not isinstance(payload, dict):
            return None

        title = payload.get("title")
        description = payload.get("description")
        effect_type = payload.get("effectType", payload.get("effect_type"))
        effect_value = payload.get("effectValue", payload.get("effect_value"))
        weather_change = payload.get("weatherChange", payload.get("weather_change"))

        if not isinstance(title, str) or not isinstance(description, str):
            return None
        if effect_type not in EFFECT_TYPES:
            return None
        # bool is an int subclass
        if isinstance(effect_value, bool):
            return None
        if isinstance(effect_value, float) and effect_value.is_integer():
            effect_value = int(effect_value)
        if not isinstance(effect_value, int):
            return None
        if weather_change is not None and weather_change not in WEATHER_TYPES:
            return None

        return DailyEvent(
            title=title,
            description=description,
            effect_type=effect_type,
            effect_value=effect_value,
            weather_change=weather_change,
        )

    def pick_fallback_weather(self) -> str:
        return self.rng.choice(FALLBACK_WEATHER_CYCLE)

    def merge_daily_event(self, state: GameState, event: Optional[DailyEvent]) -> GameState:
        """Applies an event exactly once, or rolls fallback weather when there is no event."""

        if event is None:
            return dataclasses.replace(
                state,
                slots=[dataclasses.replace(plot) for plot in state.slots],
                logs=list(state.logs),
                weather=self.pick_fallback_weather(),
            )

        new_log = LogEvent(day=state.day, message=f"Event: {event.title} - {event.description}", kind=LOG_EVENT)
        weather = event.weather_change or state.weather
        money = state.money
        water_supply = state.water_supply
        slots = [dataclasses.replace(plot) for plot in state.slots]

        if event.effect_type == EFFECT_MONEY:
            money += event.effect_value
        elif event.effect_type == EFFECT_WATER:
            water_supply += event.effect_value
        elif event.effect_type == EFFECT_HEALTH:
            for plot in slots:
                if not plot.is_empty:
                    plot.health = clamp(plot.health + event.effect_value)
        elif event.effect_type == EFFECT_GROWTH:
            for plot in slots:
                if not plot.is_empty:
                    plot.growth_stage = clamp(plot.growth_stage + event.effect_value)

        return dataclasses.replace(
            state,
            money=money,
            water_supply=water_supply,
            slots=slots,
            logs=[new_log] + state.logs,
            weather=weather,
        )
