"""
Configuration parser for rangetree.

Handles TOML file parsing for tree diagnostics and the local timezone
used when building datetime ranges.
"""

import tomllib
import os
import sys
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Optional

from .timezone_utils import set_timezone


@dataclass
class TreeConfig:
    """Configuration for RangeTree diagnostics."""
    debug: bool = False             # Trace tree operations on stderr
    verify_integrity: bool = False  # Re-check ordering and max after every mutation


def _get_bool(section: dict, key: str, default: bool) -> bool:
    value: Any = section.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Expected true or false for '{key}', got {value!r}")
    return value


@dataclass
class Config:
    """Main configuration container for rangetree."""

    timezone: str = "UTC"
    tree: TreeConfig = field(default_factory=TreeConfig)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'rangetree' / 'rangetree.toml'

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from TOML file.

        The [General] timezone becomes the local timezone used by
        timezone_utils for naive datetimes.
        """
        if config_path is None:
            config_path = cls.get_default_config_path()
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        # Parse General section
        general = data.get('General', {})
        timezone = general.get('timezone', cls.timezone)

        # Parse Tree section
        tree_data = data.get('Tree', {})
        tree = TreeConfig(
            debug=_get_bool(tree_data, 'debug', TreeConfig.debug),
            verify_integrity=_get_bool(tree_data, 'verify_integrity', TreeConfig.verify_integrity),
        )

        config = cls(timezone=timezone, tree=tree)
        config.apply()

        if tree.debug:
            print(f"DEBUG: Loaded configuration from {config_path} (timezone={timezone})", file=sys.stderr)

        return config

    def apply(self):
        """Make this configuration's timezone the local timezone."""
        set_timezone(self.timezone)
