import asyncio
import dataclasses
import math
from typing import Callable, List, Optional, Tuple

from ..constants import (
    LOG_INFO,
    LOG_SUCCESS,
    LOG_WARNING,
    PLANT_EMPTY,
    PLANTING_WATER_LEVEL,
    WATER_ACTION_AMOUNT,
    WATER_ACTION_COST,
    WATER_REFILL_AMOUNT,
    WATER_REFILL_COST,
    WELCOME_MESSAGE,
)
from ..errors import InvalidPlotError, UnknownPlantError
from ..models import GameState, GameStateView, HistorySample, LogEvent, Plot
from .advisor_helper import AdvisorHelper
from .event_helper import EventHelper
from .history_helper import HistoryHelper
from .logging_helper import LoggingHelper
from .plant_helper import PlantHelper
from .simulation_helper import SimulationHelper

StateListener = Callable[[GameStateView, str], None]


class GardenHelper:
    """
    Owns one player's garden. Enforces encapsulation by keeping the mutable GameState private,
    exposing an immutable GameStateView, and accepting changes only through the intent methods.
    Listeners registered with subscribe() are told about every change.
    """

    def __init__(
        self,
        plant_helper: PlantHelper,
        simulation_helper: SimulationHelper,
        event_helper: EventHelper,
        advisor_helper: AdvisorHelper,
        logger: LoggingHelper,
        state: Optional[GameState] = None,
    ):
        self.plant_helper = plant_helper
        self.simulation_helper = simulation_helper
        self.event_helper = event_helper
        self.advisor_helper = advisor_helper
        self.logger = logger

        self._state = state or GameState()
        if state is None:
            self._add_log(WELCOME_MESSAGE, LOG_INFO)

        self.history_helper = HistoryHelper()
        self.history_helper.record(self._state)

        self._day_lock = asyncio.Lock()
        self._listeners: List[StateListener] = []

    # --- Read-only access ---

    def get_view(self) -> GameStateView:
        state = self._state
        return GameStateView(
            day=state.day,
            money=state.money,
            water_supply=state.water_supply,
            slots=tuple(dataclasses.replace(plot) for plot in state.slots),
            logs=tuple(state.logs),
            weather=state.weather,
        )

    @property
    def history(self) -> Tuple[HistorySample, ...]:
        return self.history_helper.samples

    @property
    def is_advancing(self) -> bool:
        return self._day_lock.locked()

    def subscribe(self, listener: StateListener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, reason: str):
        view = self.get_view()
        for listener in list(self._listeners):
            listener(view, reason)

    # --- Internal mutation helpers ---

    def _add_log(self, message: str, kind: str = LOG_INFO):
        self._state.logs.insert(0, LogEvent(day=self._state.day, message=message, kind=kind))

    def _get_plot(self, slot_id: int) -> Plot:
        for plot in self._state.slots:
            if plot.id == slot_id:
                return plot
        raise InvalidPlotError(slot_id)

    # --- Intents ---

    async def plant_seed(self, slot_id: int, plant_type: str) -> bool:
        """
        Plants a seed after consulting the advisor for a tip. Affordability is checked again once the
        tip arrives, and the planting is dropped without a warning if money ran short in the meantime.
        """

        self._get_plot(slot_id)
        if plant_type == PLANT_EMPTY:
            raise UnknownPlantError(plant_type)
        spec = self.plant_helper.get_spec(plant_type)

        if self._state.money < spec.cost:
            self._add_log("Not enough money for seeds.", LOG_WARNING)
            self._notify("plant")
            return False

        self._add_log(f"Consulting the advisor about {plant_type}...", LOG_INFO)
        self._notify("plant")

        tip = await self.advisor_helper.analyze_plant_selection(plant_type)
        self._add_log(f"Advisor tip: {tip}", LOG_INFO)

        if self._state.money < spec.cost:
            self._notify("plant")
            return False

        # The state object may have been replaced by a day advance while the tip was pending.
        plot = self._get_plot(slot_id)
        plot.plant = plant_type
        plot.growth_stage = 0.0
        plot.water_level = PLANTING_WATER_LEVEL
        plot.health = 100.0
        plot.planted_day = self._state.day
        self._state.money -= spec.cost
        self._add_log(f"Planted {plant_type}.", LOG_SUCCESS)
        self._notify("plant")
        return True

    def water_slot(self, slot_id: int) -> bool:
        plot = self._get_plot(slot_id)

        if plot.is_empty:
            self._add_log("Nothing is planted there to water.", LOG_WARNING)
            self._notify("water")
            return False

        if self._state.water_supply < WATER_ACTION_COST:
            self._add_log("Not enough water in tank!", LOG_WARNING)
            self._notify("water")
            return False

        self._state.water_supply -= WATER_ACTION_COST
        plot.water_level = min(100.0, plot.water_level + WATER_ACTION_AMOUNT)
        self._add_log("Watered plant.", LOG_SUCCESS)
        self._notify("water")
        return True

    def harvest_slot(self, slot_id: int) -> Optional[int]:
        """Harvests a mature plant. Returns the earnings, or None if the plant was not ready."""

        plot = self._get_plot(slot_id)

        if plot.is_empty or not plot.is_mature:
            self._add_log("Not ready for harvest yet.", LOG_WARNING)
            self._notify("harvest")
            return None

        spec = self.plant_helper.get_spec(plot.plant)
        earnings = math.floor(spec.value * (plot.health / 100))
        self._state.money += earnings
        plot.reset()
        self._add_log(f"Harvested {spec.type} for ${earnings}!", LOG_SUCCESS)
        self._notify("harvest")
        return earnings

    def remove_slot(self, slot_id: int):
        plot = self._get_plot(slot_id)
        plot.reset()
        self._add_log("Cleared plot.", LOG_INFO)
        self._notify("remove")

    def buy_water(self) -> bool:
        if self._state.money < WATER_REFILL_COST:
            self._add_log("Not enough money!", LOG_WARNING)
            self._notify("buy_water")
            return False

        self._state.money -= WATER_REFILL_COST
        self._state.water_supply += WATER_REFILL_AMOUNT
        self._add_log(f"Bought {WATER_REFILL_AMOUNT}L of water.", LOG_INFO)
        self._notify("buy_water")
        return True

    async def advance_day(self) -> GameStateView:
        """
        Runs the daily simulation, then merges the day's event into whatever the state is once the
        event arrives. Only one advance runs at a time per garden.
        """

        async with self._day_lock:
            self._state = self.simulation_helper.advance_day(self._state)
            new_day = self._state.day

            event = None
            try:
                event = await self.advisor_helper.generate_daily_event(new_day)
            except Exception as e:
                await self.logger.log_to_discord(f"Garden: Event request for day {new_day} failed: {e}", "WARNING")
            finally:
                # A started day always gets its weather roll and history sample.
                self._state = self.event_helper.merge_daily_event(self._state, event)
                self.history_helper.record(self._state)

        self._notify("advance_day")
        return self.get_view()

    # --- Display ---

    def get_text_garden_display(self, view: GameStateView, columns: int = 3) -> str:
        rows = []
        for start in range(0, len(view.slots), columns):
            cells = []
            for plot in view.slots[start:start + columns]:
                slot_prefix = f"**{plot.id + 1}:**"
                if plot.is_empty:
                    cells.append(f"{slot_prefix} 🟫 Unoccupied")
                elif plot.is_mature:
                    cells.append(f"{slot_prefix} ✅ {plot.plant} READY (❤️ {plot.health:.0f}%)")
                else:
                    cells.append(
                        f"{slot_prefix} 🌱 {plot.plant} {plot.growth_stage:.0f}% "
                        f"(💧 {plot.water_level:.0f}% ❤️ {plot.health:.0f}%)")
            rows.append("\n".join(cells))
        return "\n\n".join(rows)

    def get_harvest_value(self, plot: Plot) -> int:
        if plot.is_empty:
            return 0
        spec = self.plant_helper.get_spec(plot.plant)
        return math.floor(spec.value * (plot.health / 100))
