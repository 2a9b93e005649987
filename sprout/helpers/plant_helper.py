from typing import Dict, List, Optional

from ..constants import PLANT_EMPTY
from ..errors import UnknownPlantError
from ..models import PlantSpec


class PlantHelper:
    """
    Manages the list of all plant definitions.
    Provides spec lookups for the simulation and name resolution for commands.
    """

    def __init__(self, plant_specs: Dict[str, PlantSpec]):
        """Initializes the PlantHelper with dataclass objects provided by DataHelper."""

        self.specs_by_type: Dict[str, PlantSpec] = dict(plant_specs)
        self._types_by_lower_name: Dict[str, str] = {name.lower(): name for name in self.specs_by_type}

        if len(self.get_plantable_specs()) == 0:
            print("CRITICAL WARNING: No plantable seeds were loaded. Players will not be able to plant anything!")

    def get_spec(self, plant_type: str) -> PlantSpec:
        spec = self.specs_by_type.get(plant_type)
        if spec is None:
            raise UnknownPlantError(plant_type)
        return spec

    def get_plantable_specs(self) -> List[PlantSpec]:
        return [spec for name, spec in self.specs_by_type.items() if name != PLANT_EMPTY]

    def resolve_plant_name(self, user_input: str) -> Optional[str]:
        """Maps user input such as 'tomato' to its canonical plant type, ignoring the Empty sentinel."""

        plant_type = self._types_by_lower_name.get(user_input.strip().lower())
        if plant_type == PLANT_EMPTY:
            return None
        return plant_type
