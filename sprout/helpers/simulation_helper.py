import dataclasses

from ..constants import (
    DROUGHT_DAMAGE,
    GROWTH_HEALTH_THRESHOLD,
    HEATWAVE_WATER_MULTIPLIER,
    OVERWATER_DAMAGE,
    OVERWATER_THRESHOLD,
    RAIN_REPLENISHMENT,
    RAINY_WATER_MULTIPLIER,
    THRIVING_GROWTH_BONUS,
    THRIVING_HEALTH_THRESHOLD,
    WEATHER_HEATWAVE,
    WEATHER_RAINY,
)
from ..models import GameState, Plot
from .plant_helper import PlantHelper


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


class SimulationHelper:
    """
    The daily simulation engine. Advances water, health and growth for every planted plot.
    All methods are pure: they build new objects and never touch the state they are given.
    """

    def __init__(self, plant_helper: PlantHelper):
        self.plant_helper = plant_helper

    @staticmethod
    def get_water_multiplier(weather: str) -> float:
        if weather == WEATHER_HEATWAVE:
            return HEATWAVE_WATER_MULTIPLIER
        if weather == WEATHER_RAINY:
            return RAINY_WATER_MULTIPLIER
        return 1.0

    def advance_plot(self, plot: Plot, weather: str) -> Plot:
        """
        Resolves one day for a single plot. Water is settled first, then health from the new water
        level, then growth from the new health.
        """

        if plot.is_empty:
            return dataclasses.replace(plot)

        spec = self.plant_helper.get_spec(plot.plant)

        water_level = plot.water_level - spec.water_needs * self.get_water_multiplier(weather)
        if weather == WEATHER_RAINY:
            water_level += RAIN_REPLENISHMENT
        water_level = clamp(water_level)

        health_change = 0.0
        if water_level <= 0:
            health_change -= DROUGHT_DAMAGE
        if water_level > OVERWATER_THRESHOLD and weather != WEATHER_RAINY:
            health_change -= OVERWATER_DAMAGE
        health = clamp(plot.health + health_change)

        growth_amount = 0.0
        if health > GROWTH_HEALTH_THRESHOLD:
            growth_amount = 100.0 / spec.days_to_maturity
            if health > THRIVING_HEALTH_THRESHOLD:
                growth_amount *= THRIVING_GROWTH_BONUS
        growth_stage = clamp(plot.growth_stage + growth_amount)

        return dataclasses.replace(plot, water_level=water_level, health=health, growth_stage=growth_stage)

    def advance_day(self, state: GameState) -> GameState:
        """Returns the next day's state, before any daily event is applied."""

        new_slots = [self.advance_plot(plot, state.weather) for plot in state.slots]
        return dataclasses.replace(state, day=state.day + 1, slots=new_slots, logs=list(state.logs))
