from typing import List, Tuple

from ..models import GameState, HistorySample


class HistoryHelper:
    """Records one (day, money, water) sample per completed day for trend display."""

    def __init__(self):
        self._samples: List[HistorySample] = []

    @property
    def samples(self) -> Tuple[HistorySample, ...]:
        return tuple(self._samples)

    def record(self, state: GameState) -> HistorySample:
        sample = HistorySample(day=state.day, money=state.money, water_supply=state.water_supply)
        self._samples.append(sample)
        return sample

    def get_recent(self, count: int) -> Tuple[HistorySample, ...]:
        if count <= 0:
            return ()
        return tuple(self._samples[-count:])

    def get_text_table(self, count: int = 10) -> str:
        lines = ["Day   | Money  | Water"]
        for sample in self.get_recent(count):
            lines.append(f"{sample.day:<5} | {sample.money:<6} | {sample.water_supply}")
        return "\n".join(lines)
