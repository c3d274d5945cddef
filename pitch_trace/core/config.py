"""Configuration management for Pitch Trace components."""

from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)

CONFIG_FILENAME = "pitch_trace.json"

DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "session": {
        "tolerance_cents": 25,
        "trace_length": 700,
        "reference_delay_ms": 90.0,
        "reference_retention_ms": 5000.0,
        "silence_frames": 8,
        "smoothing_factor": 0.22,
    },
    "pitch_estimator": {
        "silence_rms": 0.01,
        "clip_threshold": 0.2,
        "min_frequency": 60.0,
        "max_frequency": 1400.0,
    },
    "audio_input": {
        "sample_rate": 44100,
        "frames_per_buffer": 2048,
        "channels": 1,
    },
    "reference_tone": {
        "note_ms": 700.0,
        "gap_ms": 150.0,
        "gain": 0.2,
    },
}


def _coerce(key: str, value: Any, default: Any) -> Any:
    """Convert a stored value to the type of its default.

    Raises:
        ValueError: If the value cannot stand in for the default
    """
    # bool is an int subclass; neither is a valid number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    if isinstance(default, int) and not float(value).is_integer():
        raise ValueError(f"{key} must be a whole number, got {value!r}")
    return type(default)(value)


class ConfigManager:
    """Sectioned configuration stored in a single JSON file.

    Every section and key is declared in DEFAULT_CONFIGS. Values read from
    disk or passed to `update_config` are checked against the type of their
    default; unknown sections and keys are rejected.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory holding the configuration file, or None to
                use ~/.config/pitch_trace
        """
        if config_dir is None:
            config_dir = os.path.join(os.path.expanduser("~"), ".config", "pitch_trace")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file = self.config_dir / CONFIG_FILENAME

        self.default_configs = {name: dict(values) for name, values in DEFAULT_CONFIGS.items()}
        self.configs = {name: dict(values) for name, values in self.default_configs.items()}
        self._load()

    def _validated(self, name: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Keep the valid entries of one section, logging the rest."""
        defaults = self.default_configs[name]
        valid = {}
        for key, value in values.items():
            if key not in defaults:
                logger.warning(f"Ignoring unknown setting {name}.{key}")
                continue
            try:
                valid[key] = _coerce(key, value, defaults[key])
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring setting {name}.{key}: {e}")
        return valid

    def _load(self) -> None:
        """Merge the configuration file over the defaults, creating it if missing."""
        if not self.config_file.exists():
            self.save()
            return

        try:
            with open(self.config_file, "r") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration from {self.config_file}: {e}")
            return

        if not isinstance(stored, dict):
            logger.error(f"Ignoring malformed configuration in {self.config_file}")
            return

        for name, values in stored.items():
            if name not in self.configs:
                logger.warning(f"Ignoring unknown configuration section: {name}")
                continue
            if not isinstance(values, dict):
                logger.warning(f"Ignoring malformed configuration section: {name}")
                continue
            self.configs[name].update(self._validated(name, values))

        logger.info(f"Loaded configuration from {self.config_file}")

    def save(self) -> bool:
        """Write every section to the configuration file.

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            with open(self.config_file, "w") as f:
                json.dump(self.configs, f, indent=2, sort_keys=True)
        except OSError as e:
            logger.error(f"Error saving configuration to {self.config_file}: {e}")
            return False

        logger.info(f"Saved configuration to {self.config_file}")
        return True

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get a copy of one section, or an empty dict for an unknown name."""
        return dict(self.configs.get(name, {}))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Apply updates to a section and save.

        Args:
            name: Section name
            updates: Settings to change

        Returns:
            True if every update was valid and the file was saved
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        valid = self._validated(name, updates)
        if len(valid) != len(updates):
            return False

        self.configs[name].update(valid)
        return self.save()

    def reset_config(self, name: str) -> bool:
        """Restore a section to its defaults and save."""
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = dict(self.default_configs[name])
        return self.save()
