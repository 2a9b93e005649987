from dataclasses import dataclass


@dataclass(frozen=True)
class PlantSpec:
    """Represents a single plant definition from plants.json."""
    type: str
    days_to_maturity: int
    water_needs: float
    value: int
    cost: int
    description: str = ""
