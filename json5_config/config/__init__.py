"""Configuration file management.

Also ships ``logging.yml``, the default logging setup applied by
:func:`json5_config.logging_config.setup_logging`.
"""

from .manager import ConfigManager

__all__ = [
    "ConfigManager",
]
