"""Configuration and settings management."""
import json
import logging
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import Optional

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "StepView"


class ConfigError(Exception):
    """Raised when configuration operations fail."""
    pass


@dataclass
class AppSettings:
    """Application settings."""
    brightness_step: float = 10.0
    contrast_step: float = 15.0
    crop_margin: int = 25
    output_format: str = "JPEG"
    default_quality: int = 95
    max_width: int = 1920
    max_height: int = 1080

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'AppSettings':
        """Create settings from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to settings.json
    """
    config_dir = Path(user_config_dir(APP_NAME))
    return config_dir / "settings.json"


def load_settings(config_path: Optional[Path] = None) -> AppSettings:
    """
    Load settings from disk.

    Args:
        config_path: Settings file to read (defaults to the per-user config file)

    Returns:
        AppSettings object with loaded settings
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        logger.info("No settings file found, using defaults")
        return AppSettings()

    try:
        with open(config_path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("settings file must contain a JSON object")
        settings = AppSettings.from_dict(data)
        logger.info(f"Loaded settings from {config_path}")
        return settings
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return AppSettings()


def save_settings(settings: AppSettings, config_path: Optional[Path] = None) -> Path:
    """
    Save settings to disk.

    Args:
        settings: AppSettings object to save
        config_path: Destination file (defaults to the per-user config file)

    Returns:
        Path the settings were written to

    Raises:
        ConfigError: If save fails
    """
    config_path = config_path or get_config_path()

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(settings.to_dict(), f, indent=2)
        logger.info(f"Saved settings to {config_path}")
        return config_path
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
        raise ConfigError(f"Failed to save settings: {str(e)}") from e
