import json
import pathlib
from typing import Any, Dict

from ..constants import DEFAULT_PLANT_DATA, PLANT_EMPTY, PLANT_TYPES
from ..models import PlantSpec
from .logging_helper import LoggingHelper


def _is_number(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class DataHelper:
    """
    Handles the loading and validation of the JSON data files from the data directory.
    This class is responsible for parsing raw JSON into structured dataclass objects.
    It operates in a read-only manner on the data path.
    """

    EMPTY_SPEC = PlantSpec(type=PLANT_EMPTY, days_to_maturity=0, water_needs=0, value=0, cost=0,
                           description="Empty plot.")
    NUMERIC_FIELDS = ("days_to_maturity", "water_needs", "value", "cost")

    def __init__(self, data_path_obj: pathlib.Path, logger: LoggingHelper):
        self.data_path = data_path_obj
        self.logger = logger

        self.plant_specs: Dict[str, PlantSpec] = {}

    def load_all_data(self):
        """Master method to load all data files."""

        self.logger.init_log("Data loading process initiated.", "INFO")
        self.plant_specs = self._load_plant_data()
        self.logger.init_log("All data files loaded and processed.", "INFO")

    def _load_json_file(self, filename: str, default_data: Any) -> Any:
        """Generic JSON file loader with validation and logging. Does not write to disk."""

        file_path = self.data_path / filename
        log_prefix = f"Data Load ({filename}): "
        try:
            if file_path.exists():
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)

                if data:
                    self.logger.init_log(f"{log_prefix}Successfully loaded {len(data)} entries.", "INFO")
                    return data
                else:
                    self.logger.init_log(f"{log_prefix}File is empty. Using default fallback data.", "WARNING")
                    return default_data
            else:
                self.logger.init_log(
                    f"{log_prefix}File not found. This is a critical error if not intended. "
                    "Using default fallback data.", "ERROR"
                )
                return default_data
        except (OSError, json.JSONDecodeError) as e:
            self.logger.init_log(f"{log_prefix}Failed to load or parse: {e}. Using default fallback data.", "ERROR")
            return default_data

    def _load_plant_data(self) -> Dict[str, PlantSpec]:
        data = self._load_json_file("plants.json", DEFAULT_PLANT_DATA)
        if not isinstance(data, dict):
            self.logger.init_log("Data Load (plants.json): Expected a JSON object. Using default fallback data.",
                                 "ERROR")
            data = DEFAULT_PLANT_DATA

        specs = {}
        for plant_type, details in data.items():
            if plant_type not in PLANT_TYPES or plant_type == PLANT_EMPTY:
                self.logger.init_log(f"Data Load (plants.json): Unknown plant '{plant_type}'. Skipping.", "WARNING")
                continue

            try:
                spec = PlantSpec(type=plant_type, **details)
            except TypeError as e:
                self.logger.init_log(f"Data Load (plants.json): Malformed entry '{plant_type}': {e}. Skipping.",
                                     "ERROR")
                continue

            wrong_fields = [name for name in self.NUMERIC_FIELDS if not _is_number(getattr(spec, name))]
            if wrong_fields or not isinstance(spec.description, str):
                self.logger.init_log(
                    f"Data Load (plants.json): '{plant_type}' has wrongly typed fields "
                    f"{wrong_fields or ['description']}. Skipping.", "ERROR")
                continue

            if spec.days_to_maturity <= 0 or spec.water_needs <= 0:
                self.logger.init_log(
                    f"Data Load (plants.json): '{plant_type}' needs positive days_to_maturity and water_needs. "
                    "Skipping.", "ERROR")
                continue

            specs[plant_type] = spec

        if not specs:
            self.logger.init_log("Data Load (plants.json): No usable plants. Using built-in catalogue.", "WARNING")
            specs = {name: PlantSpec(type=name, **details) for name, details in DEFAULT_PLANT_DATA.items()}

        specs[PLANT_EMPTY] = self.EMPTY_SPEC
        return specs
