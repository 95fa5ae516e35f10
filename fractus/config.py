"""
Fractus configuration.

An optional TOML file supplies defaults for the CLI:

    [defaults]
    threshold = 3
    shares = 5
    format = "json"

Search order when no path is given: $XDG_CONFIG_HOME/fractus/config.toml
(or ~/.config/fractus/config.toml), ./fractus.toml, ./.fractus.toml.
"""

import os
import tomllib
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .formats import FORMATS

DEFAULT_THRESHOLD = 3
DEFAULT_SHARES = 5
DEFAULT_FORMAT = 'json'


class Defaults:
    def __init__(self, threshold: int = DEFAULT_THRESHOLD,
                 shares: int = DEFAULT_SHARES, format: str = DEFAULT_FORMAT):
        self.threshold = threshold
        self.shares = shares
        self.format = format

    def validate(self):
        for name in ('threshold', 'shares'):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or not 1 <= value <= 255:
                raise ConfigError(f"defaults.{name} must be an integer between 1 and 255")
        if self.format not in FORMATS:
            raise ConfigError(
                f"defaults.format must be one of {', '.join(FORMATS)}, got {self.format!r}"
            )


class Config:
    def __init__(self, defaults: Optional[Defaults] = None, path: Optional[Path] = None):
        self.defaults = defaults or Defaults()
        self.path = path

    @classmethod
    def from_dict(cls, data: dict, path: Optional[Path] = None) -> 'Config':
        section = data.get('defaults', {})
        if not isinstance(section, dict):
            raise ConfigError("[defaults] must be a table")
        defaults = Defaults(
            threshold=section.get('threshold', DEFAULT_THRESHOLD),
            shares=section.get('shares', DEFAULT_SHARES),
            format=section.get('format', DEFAULT_FORMAT),
        )
        defaults.validate()
        return cls(defaults, path)


def default_paths() -> list:
    config_home = os.environ.get('XDG_CONFIG_HOME') or str(Path.home() / '.config')
    return [
        Path(config_home) / 'fractus' / 'config.toml',
        Path('fractus.toml'),
        Path('.fractus.toml'),
    ]


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from ``path`` or the first default location found.

    Raises:
        ConfigError: Explicit path missing, unreadable, or invalid TOML/values
    """
    if path is not None:
        return _load_file(Path(path))

    for candidate in default_paths():
        if candidate.is_file():
            return _load_file(candidate)

    return Config()


def _load_file(path: Path) -> Config:
    try:
        with open(path, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read config file {path}: {e}")
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}")
    return Config.from_dict(data, path)
