class SproutError(Exception):
    """Base class for errors raised at the garden's command boundary."""


class InvalidPlotError(SproutError):
    def __init__(self, slot_id: int):
        super().__init__(f"Plot {slot_id} does not exist in this garden.")
        self.slot_id = slot_id


class UnknownPlantError(SproutError):
    def __init__(self, plant: str):
        super().__init__(f"'{plant}' is not a known plant.")
        self.plant = plant
