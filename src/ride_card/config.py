"""Configuration for statistics, formatting and template composition."""

from dataclasses import dataclass, field, fields, replace
import json
import logging
from pathlib import Path

from ride_card.distance import DISTANCE_METHODS
from ride_card.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "ride-card"
CONFIG_PATH = CONFIG_DIR / "ride-card.json"
LOCAL_CONFIG_PATH = Path("ride-card.json")

DISTANCE_UNITS = ("km", "mi")
SPEED_UNITS = ("km/h", "mph", "m/s")
ELEVATION_UNITS = ("m", "ft")

# Speed below or at this threshold (m/s) counts as stopped
DEFAULT_MOVING_THRESHOLD = 0.5  # ~1.8 km/h

REQUIRED_PLACEHOLDERS = (
    "value_distance",
    "value_time",
    "value_moving_time",
    "value_speed",
    "value_speed_moving",
    "value_speed_max",
    "value_uphill",
    "value_downhill",
    "value_elevation_max",
    "value_elevation_min",
    "path_elevation",
    "image_map",
)


@dataclass(frozen=True)
class RideConfig:
    distance_unit: str = "km"
    speed_unit: str = "km/h"
    elevation_unit: str = "m"
    decimal_places: int = 1  # for distance and speed values
    moving_threshold_mps: float = DEFAULT_MOVING_THRESHOLD
    distance_method: str = "haversine"
    elevation_smoothing: float = 0.0  # meters; 0 disables smoothing
    min_elevation_span: float = 0.0  # meters; profile never scales a smaller range to full height
    close_profile: bool = False  # close the profile path along its baseline
    strict: bool = True  # missing required placeholders are errors
    required_placeholders: frozenset[str] = field(default_factory=lambda: frozenset(REQUIRED_PLACEHOLDERS))

    def __post_init__(self):
        _check_choice("distance_unit", self.distance_unit, DISTANCE_UNITS)
        _check_choice("speed_unit", self.speed_unit, SPEED_UNITS)
        _check_choice("elevation_unit", self.elevation_unit, ELEVATION_UNITS)
        _check_choice("distance_method", self.distance_method, DISTANCE_METHODS)
        if self.decimal_places < 0:
            raise ConfigError(f"decimal_places must be >= 0, got {self.decimal_places}")
        if self.moving_threshold_mps < 0:
            raise ConfigError(f"moving_threshold_mps must be >= 0, got {self.moving_threshold_mps}")
        if self.elevation_smoothing < 0:
            raise ConfigError(f"elevation_smoothing must be >= 0, got {self.elevation_smoothing}")
        if self.min_elevation_span < 0:
            raise ConfigError(f"min_elevation_span must be >= 0, got {self.min_elevation_span}")

    @classmethod
    def from_dict(cls, data: dict) -> "RideConfig":
        """Build a config from a plain dict, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", ", ".join(unknown))
        if "required_placeholders" in values:
            values["required_placeholders"] = frozenset(values["required_placeholders"])
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError(f"Invalid config: {e}") from e

    def with_overrides(self, **overrides) -> "RideConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _check_choice(name: str, value: str, choices: tuple[str, ...]) -> None:
    if value not in choices:
        raise ConfigError(f"Unknown {name}: {value!r}. Use one of {', '.join(choices)}.")


def _load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/ride-card/ride-card.json (global, loaded first)
    2. ./ride-card.json (local, overrides global)

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Skipping unreadable config file %s: %s", config_path, e)
                continue
    return config


def load_config() -> RideConfig:
    """Load the merged config files into a RideConfig."""
    return RideConfig.from_dict(_load_config())
