import asyncio

import pytest

from sprout.constants import (
    EFFECT_MONEY,
    FALLBACK_WEATHER_CYCLE,
    GRID_SIZE,
    INITIAL_MONEY,
    INITIAL_WATER,
    LOG_INFO,
    LOG_SUCCESS,
    LOG_WARNING,
    PLANT_BASIL,
    PLANT_EMPTY,
    PLANT_TOMATO,
    WEATHER_HEATWAVE,
    WELCOME_MESSAGE,
)
from sprout.errors import InvalidPlotError, UnknownPlantError
from sprout.models import DailyEvent, HistorySample, Plot

from .fakes import FakeAdvisor, planted, state_with


def test_new_garden_starts_empty(make_garden):
    view = make_garden().get_view()

    assert (view.day, view.money, view.water_supply) == (1, INITIAL_MONEY, INITIAL_WATER)
    assert len(view.slots) == GRID_SIZE
    assert [plot.id for plot in view.slots] == list(range(GRID_SIZE))
    assert all(plot == Plot(id=plot.id) for plot in view.slots)
    assert view.logs[0].message == WELCOME_MESSAGE


def test_history_opens_with_day_one(make_garden):
    garden = make_garden()
    assert garden.history == (HistorySample(day=1, money=INITIAL_MONEY, water_supply=INITIAL_WATER),)


def test_view_is_detached_from_state(make_garden):
    garden = make_garden()
    view = garden.get_view()
    view.slots[0].water_level = 99

    assert garden.get_view().slots[0].water_level == 0
    with pytest.raises(AttributeError):
        view.money = 1_000_000


class TestWatering:

    def test_water_slot(self, make_garden):
        garden = make_garden(state=state_with(planted(0, PLANT_TOMATO, water=70)))

        assert garden.water_slot(0) is True

        view = garden.get_view()
        assert view.water_supply == INITIAL_WATER - 20
        assert view.slots[0].water_level == 100
        assert view.logs[0].kind == LOG_SUCCESS

    def test_not_enough_water_in_tank(self, make_garden):
        garden = make_garden(state=state_with(planted(0, PLANT_TOMATO, water=30), water_supply=15))
        logs_before = len(garden.get_view().logs)

        assert garden.water_slot(0) is False

        view = garden.get_view()
        assert view.water_supply == 15
        assert view.slots[0].water_level == 30
        assert len(view.logs) == logs_before + 1
        assert view.logs[0].kind == LOG_WARNING
        assert view.logs[0].message == "Not enough water in tank!"

    def test_empty_plot_stays_dry(self, make_garden):
        garden = make_garden()

        assert garden.water_slot(4) is False

        view = garden.get_view()
        assert view.slots[4] == Plot(id=4)
        assert view.water_supply == INITIAL_WATER
        assert view.logs[0].kind == LOG_WARNING


class TestHarvest:

    def test_harvest_pays_by_health(self, make_garden):
        garden = make_garden(state=state_with(planted(2, PLANT_TOMATO, growth=100, health=80)))

        assert garden.harvest_slot(2) == 40

        view = garden.get_view()
        assert view.money == INITIAL_MONEY + 40
        assert view.slots[2] == Plot(id=2, planted_day=1)
        assert view.slots[2].plant == PLANT_EMPTY
        assert view.logs[0].message == "Harvested Tomato for $40!"

    def test_harvest_before_maturity(self, make_garden):
        garden = make_garden(state=state_with(planted(2, PLANT_TOMATO, growth=99.9)))

        assert garden.harvest_slot(2) is None

        view = garden.get_view()
        assert view.money == INITIAL_MONEY
        assert view.slots[2].plant == PLANT_TOMATO
        assert view.logs[0].message == "Not ready for harvest yet."

    def test_dead_plant_is_worthless(self, make_garden):
        garden = make_garden(state=state_with(planted(0, PLANT_TOMATO, growth=100, health=0)))
        assert garden.harvest_slot(0) == 0
        assert garden.get_view().slots[0].is_empty


def test_remove_slot_has_no_refund(make_garden):
    garden = make_garden(state=state_with(planted(5, PLANT_TOMATO, growth=60, water=40, health=70)))

    garden.remove_slot(5)

    view = garden.get_view()
    assert view.slots[5].plant == PLANT_EMPTY
    assert (view.slots[5].growth_stage, view.slots[5].water_level, view.slots[5].health) == (0, 0, 100)
    assert view.money == INITIAL_MONEY
    assert view.logs[0].kind == LOG_INFO
    assert view.logs[0].message == "Cleared plot."


class TestBuyWater:

    def test_cannot_afford(self, make_garden):
        garden = make_garden(state=state_with(money=3))

        assert garden.buy_water() is False

        view = garden.get_view()
        assert (view.money, view.water_supply) == (3, INITIAL_WATER)
        assert len(view.logs) == 1
        assert view.logs[0].kind == LOG_WARNING

    def test_buys_refill(self, make_garden):
        garden = make_garden(state=state_with(money=10))

        assert garden.buy_water() is True

        view = garden.get_view()
        assert (view.money, view.water_supply) == (5, INITIAL_WATER + 50)
        assert view.logs[0].message == "Bought 50L of water."


def test_unknown_plot_raises(make_garden):
    garden = make_garden()
    with pytest.raises(InvalidPlotError):
        garden.water_slot(GRID_SIZE)
    with pytest.raises(InvalidPlotError):
        garden.remove_slot(-1)


class TestPlantSeed:

    async def test_plants_after_tip(self, make_garden):
        advisor = FakeAdvisor(tip="Pinch the flowers.")
        garden = make_garden(advisor)

        assert await garden.plant_seed(3, PLANT_BASIL) is True

        view = garden.get_view()
        assert view.slots[3] == Plot(id=3, plant=PLANT_BASIL, growth_stage=0, water_level=50, health=100,
                                     planted_day=1)
        assert view.money == INITIAL_MONEY - 5
        assert advisor.tip_requests == [PLANT_BASIL]
        assert [log.message for log in view.logs[:3]] == [
            "Planted Basil.",
            "Advisor tip: Pinch the flowers.",
            "Consulting the advisor about Basil...",
        ]

    async def test_cannot_afford_seeds(self, make_garden):
        advisor = FakeAdvisor()
        garden = make_garden(advisor, state=state_with(money=4))

        assert await garden.plant_seed(0, PLANT_BASIL) is False

        view = garden.get_view()
        assert view.slots[0].is_empty
        assert view.money == 4
        assert advisor.tip_requests == []
        assert view.logs[0].message == "Not enough money for seeds."
        assert view.logs[0].kind == LOG_WARNING

    async def test_money_spent_while_waiting_for_tip(self, make_garden):
        garden = None

        async def spend_everything():
            garden.buy_water()

        advisor = FakeAdvisor(on_tip=spend_everything)
        garden = make_garden(advisor, state=state_with(money=5))

        assert await garden.plant_seed(0, PLANT_BASIL) is False

        view = garden.get_view()
        assert view.slots[0] == Plot(id=0)
        assert view.money == 0
        assert view.water_supply == INITIAL_WATER + 50
        messages = [log.message for log in view.logs]
        assert "Planted Basil." not in messages
        assert "Not enough money for seeds." not in messages
        assert view.logs[0].message == "Advisor tip: Water early."

    async def test_plot_is_found_again_after_day_advanced(self, make_garden):
        garden = None

        async def next_day():
            await garden.advance_day()

        garden = make_garden(FakeAdvisor(on_tip=next_day))

        assert await garden.plant_seed(1, PLANT_TOMATO) is True

        view = garden.get_view()
        assert view.day == 2
        assert view.slots[1].plant == PLANT_TOMATO
        assert view.slots[1].planted_day == 2

    async def test_rejects_empty_and_unknown_plants(self, make_garden):
        garden = make_garden()
        with pytest.raises(UnknownPlantError):
            await garden.plant_seed(0, PLANT_EMPTY)
        with pytest.raises(UnknownPlantError):
            await garden.plant_seed(0, "Cactus")
        assert garden.get_view().money == INITIAL_MONEY


class TestAdvanceDay:

    async def test_applies_event(self, make_garden):
        event = DailyEvent(title="Farmers Market", description="Sales are up.", effect_type=EFFECT_MONEY,
                           effect_value=25, weather_change=WEATHER_HEATWAVE)
        advisor = FakeAdvisor(event=event)
        garden = make_garden(advisor, state=state_with(planted(0, PLANT_TOMATO, water=50)))

        view = await garden.advance_day()

        assert view.day == 2
        assert advisor.event_days == [2]
        assert view.money == INITIAL_MONEY + 25
        assert view.weather == WEATHER_HEATWAVE
        assert view.slots[0].water_level == pytest.approx(35)
        assert view.logs[0].message == "Event: Farmers Market - Sales are up."
        assert garden.history[-1] == HistorySample(day=2, money=INITIAL_MONEY + 25, water_supply=INITIAL_WATER)

    @pytest.mark.parametrize("advisor", [FakeAdvisor(event=None), FakeAdvisor(raise_on_event=True)])
    async def test_event_failure_still_advances(self, make_garden, advisor):
        garden = make_garden(advisor)
        history_before = len(garden.history)
        logs_before = len(garden.get_view().logs)

        view = await garden.advance_day()

        assert view.day == 2
        assert view.weather in FALLBACK_WEATHER_CYCLE
        assert len(garden.history) == history_before + 1
        assert garden.history[-1].day == 2
        assert len(view.logs) == logs_before

    async def test_cancelled_event_request_still_finishes_the_day(self, make_garden):
        never = asyncio.Event()

        async def hang():
            await never.wait()

        garden = make_garden(FakeAdvisor(on_event=hang))
        task = asyncio.create_task(garden.advance_day())
        await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        view = garden.get_view()
        assert view.day == 2
        assert view.weather in FALLBACK_WEATHER_CYCLE
        assert garden.history[-1].day == 2
        assert garden.is_advancing is False

    async def test_intent_during_event_request_is_kept(self, make_garden):
        garden = None

        async def water_while_waiting():
            garden.water_slot(0)

        garden = make_garden(FakeAdvisor(on_event=water_while_waiting),
                             state=state_with(planted(0, PLANT_TOMATO, water=50)))

        view = await garden.advance_day()

        # 50 - 15 from the day, then +40 from the watering
        assert view.slots[0].water_level == pytest.approx(75)
        assert view.water_supply == INITIAL_WATER - 20
        assert garden.history[-1].water_supply == INITIAL_WATER - 20

    async def test_concurrent_advances_are_serialized(self, make_garden):
        in_flight = 0
        peak = 0

        async def slow_request():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1

        advisor = FakeAdvisor(on_event=slow_request)
        garden = make_garden(advisor)

        await asyncio.gather(garden.advance_day(), garden.advance_day(), garden.advance_day())

        assert peak == 1
        assert advisor.event_days == [2, 3, 4]
        assert garden.get_view().day == 4
        assert [sample.day for sample in garden.history] == [1, 2, 3, 4]

    async def test_is_advancing_while_waiting(self, make_garden):
        seen = []
        garden = None

        async def look():
            seen.append(garden.is_advancing)

        garden = make_garden(FakeAdvisor(on_event=look))
        await garden.advance_day()

        assert seen == [True]
        assert garden.is_advancing is False


class TestListeners:

    async def test_listeners_hear_every_intent(self, make_garden):
        garden = make_garden(state=state_with(planted(0, PLANT_TOMATO, growth=100)))
        heard = []
        listener = lambda view, reason: heard.append((reason, view.day))
        garden.subscribe(listener)

        garden.water_slot(0)
        garden.harvest_slot(0)
        garden.buy_water()
        garden.remove_slot(0)
        await garden.advance_day()

        assert heard == [("water", 1), ("harvest", 1), ("buy_water", 1), ("remove", 1), ("advance_day", 2)]

        garden.unsubscribe(listener)
        garden.buy_water()
        assert len(heard) == 5

    def test_subscribe_is_idempotent(self, make_garden):
        garden = make_garden()
        heard = []
        listener = lambda view, reason: heard.append(reason)
        garden.subscribe(listener)
        garden.subscribe(listener)

        garden.buy_water()

        assert heard == ["buy_water"]


def test_text_garden_display(make_garden):
    garden = make_garden(state=state_with(planted(0, PLANT_TOMATO, growth=100), planted(1, PLANT_BASIL, growth=40)))

    display = garden.get_text_garden_display(garden.get_view())

    assert "**1:** ✅ Tomato READY" in display
    assert "**2:** 🌱 Basil 40%" in display
    assert "**9:** 🟫 Unoccupied" in display
    assert garden.get_harvest_value(garden.get_view().slots[0]) == 50
