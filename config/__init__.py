"""
Configuration Module for the Expense Scanner.

Settings live in YAML. The packaged ``settings.yaml`` holds every default;
a site file (passed explicitly or named by $EXPENSE_SCANNER_CONFIG) is
laid over it, so it only needs the keys it changes.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

# Overrides the default settings.yaml location when set
CONFIG_ENV_VAR = "EXPENSE_SCANNER_CONFIG"

DEFAULT_SETTINGS = Path(__file__).parent / "settings.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must hold a mapping: {path}")
    return data


def _overlay(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``override`` into a copy of ``base``, section by section."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _overlay(merged[key], value)
        else:
            merged[key] = value
    return merged


class ConfigurationManager:
    """
    Process-wide settings for the expense scanner.

    Attributes:
        config_path (Path): Site file laid over the defaults, or the
            packaged settings.yaml when there is none.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("ocr.tesseract.lang")
        'eng'
    """

    _instance: Optional['ConfigurationManager'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        """Singleton pattern to ensure only one configuration instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Load the defaults and the site file, once per process.

        Args:
            config_path: Optional site file. Defaults to $EXPENSE_SCANNER_CONFIG.
        """
        if self._initialized:
            return

        site_file = config_path or os.environ.get(CONFIG_ENV_VAR)

        self._config = _read_yaml(DEFAULT_SETTINGS)
        self.config_path = DEFAULT_SETTINGS
        if site_file:
            self.config_path = Path(site_file)
            self._config = _overlay(self._config, _read_yaml(self.config_path))

        self._initialized = True

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "pdf.backend").
            default: Default value if key doesn't exist.

        Returns:
            Configuration value or default.

        Example:
            >>> config.get("parsing.amount.max")
            10000
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._config
        for part in key.split('.'):
            if not isinstance(value, dict) or part not in value:
                return default
            value = value[part]
        return value

    @classmethod
    def reset(cls) -> None:
        """Drop the loaded instance so the next access reads the files again."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """
    Convenience function to get configuration values.

    Args:
        key: Configuration key in dot notation.
        default: Default value if key doesn't exist.

    Returns:
        Configuration value or default.
    """
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'get_config', 'CONFIG_ENV_VAR']
