#!/usr/bin/env python3
"""
Configuration Management Module
Handles loading and validating iris locator configuration files

Created: 2025
"""

import json
import os
import sys
from dataclasses import dataclass
from typing import Dict, Any, Optional


@dataclass(frozen=True)
class SearchConfig:
    """Tunables of the sliding-window iris search."""

    retained_window_count: int = 50
    grid_step_x: int = 5
    grid_step_y: int = 5
    iris_radius_divisor: float = 6.0
    window_width_pad: int = 3
    window_height_pad: int = 1

    def __post_init__(self):
        if self.retained_window_count <= 0:
            raise ValueError("retained_window_count must be positive")
        if self.grid_step_x <= 0 or self.grid_step_y <= 0:
            raise ValueError("grid steps must be positive")
        if self.iris_radius_divisor <= 0:
            raise ValueError("iris_radius_divisor must be positive")
        if self.window_width_pad < 0 or self.window_height_pad < 0:
            raise ValueError("window padding must not be negative")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "SearchConfig":
        """Build from a flat mapping, ignoring keys that are not search tunables"""
        return cls(
            retained_window_count=int(values.get("retained_window_count", 50)),
            grid_step_x=int(values.get("grid_step_x", 5)),
            grid_step_y=int(values.get("grid_step_y", 5)),
            iris_radius_divisor=float(values.get("iris_radius_divisor", 6.0)),
            window_width_pad=int(values.get("window_width_pad", 3)),
            window_height_pad=int(values.get("window_height_pad", 1)),
        )

    @classmethod
    def from_manager(cls, manager: "ConfigManager") -> "SearchConfig":
        return cls.from_dict(manager.config)


class ConfigManager:
    """Configuration manager for the iris locator"""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager
        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path or "config.json"
        self.config = self._get_default_config()

        if os.path.exists(self.config_path):
            self.load_config()

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration"""
        return {
            "retained_window_count": 50,
            "grid_step_x": 5,
            "grid_step_y": 5,
            "iris_radius_divisor": 6,
            "window_width_pad": 3,
            "window_height_pad": 1,
            "verbose": False,
            "face_detector": {
                "cascade_path": None,
                "scale_factor": 1.1,
                "min_neighbors": 4,
                "min_face_size": 90,
                "resize_factor": 1.0
            },
            "drawing": {
                "face_color": [255, 237, 178],
                "left_color": [0, 255, 0],
                "right_color": [0, 0, 255],
                "marker_radius": 3
            }
        }

    def load_config(self) -> bool:
        """
        Load configuration from file
        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_path, 'r') as f:
                loaded_config = json.load(f)
        except (OSError, ValueError) as e:
            print(f"Error loading configuration: {e}", file=sys.stderr)
            return False

        if not isinstance(loaded_config, dict):
            print(f"Error loading configuration: {self.config_path} is not a JSON object", file=sys.stderr)
            return False

        # Update default config with loaded values
        self._deep_update(self.config, loaded_config)
        return True

    def save_config(self) -> bool:
        """
        Save current configuration to file

        An existing file is copied to a timestamped backup first.

        Returns:
            True if saved successfully
        """
        try:
            if os.path.exists(self.config_path):
                import shutil
                from datetime import datetime
                timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
                backup_path = f"{self.config_path}.backup.{timestamp}"
                shutil.copy2(self.config_path, backup_path)
                print(f"📁 Backup created: {backup_path}")

            with open(self.config_path, 'w') as f:
                json.dump(self.config, f, indent=2)

            print(f"Configuration saved to {self.config_path}")
            return True

        except OSError as e:
            print(f"Error saving configuration: {e}", file=sys.stderr)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value
        Args:
            key: Configuration key (supports dot notation, e.g., 'face_detector.min_face_size')
            default: Default value if key not found
        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self.config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any):
        """
        Set configuration value
        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def search_config(self) -> SearchConfig:
        """Engine tunables as a SearchConfig"""
        return SearchConfig.from_manager(self)

    def _deep_update(self, base_dict: Dict, update_dict: Dict):
        """
        Deep update dictionary
        Args:
            base_dict: Base dictionary to update
            update_dict: Dictionary with updates
        """
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def _number(self, key: str, default: Any, errors: list) -> Optional[float]:
        """Fetch a numeric value, recording an error if it is not a number"""
        value = self.get(key, default)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            errors.append(f"{key} must be a number, got {value!r}")
            return None
        return value

    def validate_config(self) -> bool:
        """
        Validate configuration values
        Returns:
            True if configuration is valid
        """
        errors = []

        for key in ("retained_window_count", "grid_step_x", "grid_step_y"):
            value = self._number(key, 0, errors)
            if value is not None and value <= 0:
                errors.append(f"{key} must be positive")

        divisor = self._number('iris_radius_divisor', 0, errors)
        if divisor is not None and divisor <= 0:
            errors.append("iris_radius_divisor must be positive")

        for key in ("window_width_pad", "window_height_pad"):
            value = self._number(key, 0, errors)
            if value is not None and value < 0:
                errors.append(f"{key} must not be negative")

        min_face_size = self._number('face_detector.min_face_size', 0, errors)
        if min_face_size is not None and min_face_size < 0:
            errors.append("face_detector.min_face_size must not be negative")

        scale_factor = self._number('face_detector.scale_factor', 0, errors)
        if scale_factor is not None and scale_factor <= 1.0:
            errors.append("face_detector.scale_factor must be greater than 1.0")

        resize_factor = self._number('face_detector.resize_factor', 1.0, errors)
        if resize_factor is not None and not 0 < resize_factor <= 1.0:
            errors.append("face_detector.resize_factor must be in (0, 1]")

        cascade_path = self.get('face_detector.cascade_path')
        if cascade_path and not (isinstance(cascade_path, str) and os.path.exists(cascade_path)):
            errors.append(f"Cascade file does not exist: {cascade_path}")

        if errors:
            print("Configuration validation errors:", file=sys.stderr)
            for error in errors:
                print(f"  - {error}", file=sys.stderr)
            return False

        return True

    def print_config(self):
        """Print current configuration"""
        print("=== Current Configuration ===")
        self._print_dict(self.config, indent=0)

    def _print_dict(self, d: Dict, indent: int):
        """Recursively print dictionary"""
        for key, value in d.items():
            if isinstance(value, dict):
                print("  " * indent + f"{key}:")
                self._print_dict(value, indent + 1)
            else:
                print("  " * indent + f"{key}: {value}")

def load_config_file(config_path: str) -> Optional[Dict]:
    """
    Load configuration from file
    Args:
        config_path: Path to configuration file
    Returns:
        Configuration dictionary or None if failed
    """
    try:
        with open(config_path, 'r') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        print(f"Error loading config file {config_path}: {e}", file=sys.stderr)
        return None
