from .logging_helper import LoggingHelper
from .lock_helper import LockHelper
from .data_helper import DataHelper
from .plant_helper import PlantHelper
from .simulation_helper import SimulationHelper
from .event_helper import EventHelper
from .history_helper import HistoryHelper
from .advisor_helper import AdvisorHelper
from .garden_helper import GardenHelper
