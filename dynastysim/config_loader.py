import json
import logging
import os

from pydantic import ConfigDict, Field, model_validator

from dynastysim.models import SuccessionLaw, WorldModel
from dynastysim.paths import CONFIG_DIR

###############################
### Imported to other files ###
###############################
# Toggle this to True to log every birth, death and inheritance at INFO
# instead of DEBUG. Long runs produce a LOT of lines.
NARRATIVE_LOGGING = False

# Toggle this to True if you want to print info about which files were loaded
LOADED_INFO_FILES = False
###############################

CONFIG_FILENAME = 'simulation.json'


def setup_logging(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler()
        ]
    )


class SimulationConfig(WorldModel):
    """Every tunable constant of the engine, with its default value."""

    # Mortality
    old_age_threshold: int = Field(default=40, ge=0)
    old_age_mortality_per_year: float = Field(default=0.001, ge=0.0, le=1.0)
    frailty_mortality_per_point: float = Field(default=0.0005, ge=0.0, le=1.0)
    child_mortality_max_age: int = Field(default=5, ge=0)
    child_mortality_chance: float = Field(default=0.10, ge=0.0, le=1.0)
    maternal_mortality_chance: float = Field(default=0.10, ge=0.0, le=1.0)

    # Fertility
    pregnancy_weeks: int = Field(default=40, gt=0)
    fertile_min_age: int = Field(default=16, ge=0)
    fertile_max_age: int = Field(default=45, ge=0)
    max_shared_children: int = Field(default=4, ge=0)
    conception_base_chance: float = Field(default=0.005, ge=0.0, le=1.0)

    # Marriage and court
    marriage_min_age: int = Field(default=16, ge=0)
    invite_base_chance: float = Field(default=0.5, ge=0.0, le=1.0)
    invite_prestige_divisor: float = Field(default=500, gt=0)
    invite_prestige_bonus_cap: float = Field(default=0.3, ge=0.0, le=1.0)
    invite_max_chance: float = Field(default=0.95, ge=0.0, le=1.0)

    # Narrative and bookkeeping
    event_chance_per_week: float = Field(default=0.02, ge=0.0, le=1.0)
    autosave_interval_weeks: int = Field(default=104, gt=0)
    resolve_succession_on_event_death: bool = False

    # Genesis
    rival_realm_count: int = Field(default=15, ge=0)
    default_succession_law: SuccessionLaw = SuccessionLaw.PRIMOGENITURE

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="after")
    def fertile_window_is_ordered(self) -> "SimulationConfig":
        if self.fertile_max_age < self.fertile_min_age:
            raise ValueError("fertile_max_age must be greater than or equal to fertile_min_age.")
        return self


class ConfigLoader:
    def __init__(self, config_folder=CONFIG_DIR):
        self.config_folder = config_folder
        self.raw = {}
        self.load_configs()
        self.config = self.validate_configs()

    def load_configs(self):
        file_path = os.path.join(self.config_folder, CONFIG_FILENAME)
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Configuration file {CONFIG_FILENAME} not found in {self.config_folder}.")
        with open(file_path, 'r', encoding='utf-8') as file:
            try:
                self.raw = json.load(file)
                if LOADED_INFO_FILES:
                    logging.info(f"Loaded configuration from {CONFIG_FILENAME}.")
            except json.JSONDecodeError as e:
                raise ValueError(f"Error parsing {CONFIG_FILENAME}: {e}")

    def validate_configs(self):
        config = SimulationConfig.model_validate(self.raw)

        # Flag unused parameters
        for key in (config.model_extra or {}):
            logging.warning(f"Simulation parameter '{key}' is currently unused.")

        return config

    def get_simulation_config(self):
        return self.config

    def get(self, key, default=None):
        return getattr(self.config, key, default)
