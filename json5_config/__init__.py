"""Typed configuration records persisted as JSON5 files.

Front-ends should only depend on the public API re-exported here rather
than importing internal modules directly.
"""

from .config import ConfigManager
from .core.config_class import ConfigClass, setting
from .core.exceptions import ConfigError, InvalidConfigFileError

__all__: list[str] = [
    "ConfigManager",
    "ConfigClass",
    "setting",
    "ConfigError",
    "InvalidConfigFileError",
]
