from __future__ import annotations

"""Configuration exception classes.

Only :class:`InvalidConfigFileError` is ever raised out of
:class:`~json5_config.config.manager.ConfigManager`; every other failure
is contained and logged by the manager itself.
"""

from typing import Optional


class ConfigError(Exception):
    """Base exception for all configuration errors.

    Carries the name of the offending file (when known) and the
    underlying exception that triggered it.
    """

    def __init__(self, message: str, filename: Optional[str] = None,
                 cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.filename = filename
        self.cause = cause

    def __str__(self) -> str:
        if self.filename:
            return f"[Config: {self.filename}] {super().__str__()}"
        return super().__str__()


class InvalidConfigFileError(ConfigError):
    """Raised when a config file cannot be used.

    This covers a path without the ``.json5`` extension, a file whose
    contents cannot be parsed or decoded into the schema, and a schema
    whose ``validate()`` rejected the loaded values.
    """
    pass
