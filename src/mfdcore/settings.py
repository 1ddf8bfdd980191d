"""
mfdcore User Settings

Hierarchical settings with global defaults + local overrides:
- Global: ~/.mfd/config.json (cross-project settings)
- Local: <project>/.mfd/config.json (project-specific overrides)

Settings structure:
{
  "resolver": {
    "max_include_depth": 20,     // Include nesting bound
    "extension": ".mfd"          // Appended to extension-less include paths
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from mfdcore.exceptions import ConfigError
from mfdcore.logging_config import logger


DEFAULT_SETTINGS = {
    "resolver": {
        "max_include_depth": 20,
        "extension": ".mfd",
    },
}


def _deep_merge(base: Dict, override: Dict) -> Dict:
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_settings(settings: Dict[str, Any]) -> None:
    """
    Check value types and ranges.

    Raises:
        ConfigError: If a setting is out of range or of the wrong type.
    """
    resolver = settings.get("resolver", {})
    depth = resolver.get("max_include_depth")
    if not isinstance(depth, int) or isinstance(depth, bool) or depth < 1:
        raise ConfigError(f"resolver.max_include_depth must be a positive integer, got {depth!r}")

    extension = resolver.get("extension")
    if not isinstance(extension, str) or not extension.startswith("."):
        raise ConfigError(f"resolver.extension must start with '.', got {extension!r}")


class Settings:
    """
    Layered settings.

    Load order (with override):
    1. Default settings (hardcoded)
    2. Global settings (~/.mfd/config.json)
    3. Local settings (<project>/.mfd/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None, home: Optional[Path] = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        home = Path(home) if home else Path.home()
        self.global_config_path = home / ".mfd" / "config.json"
        self.local_config_path = self.project_root / ".mfd" / "config.json"

        self._settings = self._load()
        validate_settings(self._settings)

    def _load(self) -> Dict[str, Any]:
        settings = copy.deepcopy(DEFAULT_SETTINGS)

        for path in (self.global_config_path, self.local_config_path):
            if not path.exists():
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    override = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load settings from {path}: {e}")
                continue
            if not isinstance(override, dict):
                raise ConfigError(f"Settings file {path} must contain a JSON object")
            settings = _deep_merge(settings, override)
            logger.debug(f"Loaded settings from {path}")

        return settings

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting by dot-separated key.

        Example:
            settings.get("resolver.max_include_depth")  # 20
        """
        value: Any = self._settings
        for part in key.split("."):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    def section(self, name: str) -> Dict[str, Any]:
        return copy.deepcopy(self._settings.get(name, {}))

    def as_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._settings)


def load_settings(project_root: Optional[Path] = None) -> Settings:
    return Settings(project_root)
