"""
User configuration for skycast.

Settings persist in a small JSON or YAML file, picked by extension:
- $SKYCAST_CONFIG if set
- otherwise ~/.config/skycast/config.yaml

Loading never fails. A missing, unreadable or corrupt file yields defaults,
and individual bad values are replaced by their defaults. Saving propagates
filesystem errors to the caller.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .constants import DEFAULT_FRAME_DELAY_MS, Units
from .tui.palette import PALETTE_NAMES
from .utils.error_handling import ErrorCategory, safe_execute

logger = logging.getLogger(__name__)

CONFIG_ENV = "SKYCAST_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/skycast/config.yaml")


class ConfigFormat(Enum):
    """On-disk config formats."""
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'ConfigFormat':
        suffix = Path(path).suffix.lower()
        if suffix in ('.yaml', '.yml'):
            return cls.YAML
        return cls.JSON


@dataclass
class SkycastConfig:
    """Persisted user preferences."""
    default_location: Optional[str] = None
    default_units: str = Units.AUTO
    palette: str = "day"
    animate: bool = False
    frame_delay_ms: int = DEFAULT_FRAME_DELAY_MS

    @classmethod
    def from_dict(cls, data: Any) -> 'SkycastConfig':
        """
        Build a config from parsed file contents.

        Unknown keys are ignored and invalid values fall back to defaults.
        """
        config = cls()
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(f"Ignoring config of type {type(data).__name__}")
            return config

        location = data.get('default_location')
        if isinstance(location, str) and location.strip():
            config.default_location = location.strip()

        units = data.get('default_units')
        if units in Units.ALL:
            config.default_units = units
        elif units is not None:
            logger.warning(f"Invalid default_units {units!r}, using {config.default_units!r}")

        palette = data.get('palette')
        if isinstance(palette, str) and palette.strip().lower() in PALETTE_NAMES:
            config.palette = palette.strip().lower()
        elif palette is not None:
            logger.warning(f"Unknown palette {palette!r}, using {config.palette!r}")

        animate = data.get('animate')
        if isinstance(animate, bool):
            config.animate = animate

        delay = data.get('frame_delay_ms')
        if isinstance(delay, int) and not isinstance(delay, bool) and delay > 0:
            config.frame_delay_ms = delay
        elif delay is not None:
            logger.warning(f"Invalid frame_delay_ms {delay!r}, using {config.frame_delay_ms}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_config_path() -> Path:
    """Config path from $SKYCAST_CONFIG, else the per-user default."""
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


class ConfigStore:
    """Loads and saves a SkycastConfig at one path."""

    def __init__(self, path: Union[str, Path, None] = None):
        self.path = Path(path).expanduser() if path else default_config_path()
        self.format = ConfigFormat.from_path(self.path)

    def load(self) -> SkycastConfig:
        """Read the config file. Returns defaults on any failure."""
        if not self.path.exists():
            logger.debug(f"No config at {self.path}, using defaults")
            return SkycastConfig()

        with safe_execute(
            "load_config",
            ErrorCategory.CONFIG,
            additional_context={'path': str(self.path)},
        ) as result:
            text = self.path.read_text(encoding='utf-8')
            if self.format is ConfigFormat.YAML:
                result.value = yaml.safe_load(text)
            else:
                result.value = json.loads(text) if text.strip() else None

        return SkycastConfig.from_dict(result.value)

    def save(self, config: SkycastConfig):
        """Write the config file, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = config.to_dict()
        if self.format is ConfigFormat.YAML:
            text = yaml.safe_dump(data, default_flow_style=False, sort_keys=True)
        else:
            text = json.dumps(data, indent=2, sort_keys=True) + '\n'
        self.path.write_text(text, encoding='utf-8')
        logger.debug(f"Saved config to {self.path}")

    def update(self, **changes) -> SkycastConfig:
        """Load, apply changes, save and return the new config."""
        config = self.load()
        known = {f.name for f in fields(SkycastConfig)}
        for key, value in changes.items():
            if key not in known:
                raise ValueError(f"Unknown config key: {key}")
            setattr(config, key, value)
        self.save(config)
        return config


def resolve_units(
    celsius: bool = False,
    fahrenheit: bool = False,
    units: Optional[str] = None,
) -> Optional[str]:
    """
    Resolve the requested temperature unit.

    Explicit celsius/fahrenheit flags win over `units`. metric and imperial
    are accepted as aliases. Returns None for auto (let the provider decide).
    """
    if celsius:
        return Units.CELSIUS
    if fahrenheit:
        return Units.FAHRENHEIT
    if units in (Units.CELSIUS, Units.METRIC):
        return Units.CELSIUS
    if units in (Units.FAHRENHEIT, Units.IMPERIAL):
        return Units.FAHRENHEIT
    return None
