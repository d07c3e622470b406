from __future__ import annotations

"""Load, validate and persist a typed configuration record in a JSON5 file.

A :class:`ConfigManager` is bound once to a schema class and a ``.json5``
path. :meth:`ConfigManager.load_config` reads the file, or writes a fresh
default one when it does not exist yet, and :meth:`ConfigManager.save_config`
writes the current record back.

Failure handling is deliberately uneven:

* a bad extension, or a file that cannot be parsed, decoded or validated,
  raises :class:`InvalidConfigFileError`;
* a failing default factory, and render or I/O errors while saving, are
  only logged so the host keeps running (``get_config()`` may then return ``None``).
"""

import logging
import os
from pathlib import Path
from typing import Callable, Generic, Optional, Type, TypeVar, Union

from json5_config.core.codec import decode_config, parse_json5, render_json5
from json5_config.core.config_class import ConfigClass
from json5_config.core.exceptions import InvalidConfigFileError

logger = logging.getLogger(__name__)

__all__ = ["ConfigManager", "CONFIG_EXTENSION"]

CONFIG_EXTENSION = ".json5"

T = TypeVar("T", bound=ConfigClass)


class ConfigManager(Generic[T]):
    """Manages the configuration file of one schema.

    Args:
        config_class: The :class:`ConfigClass` dataclass to manage
        config_file: Path of the backing file; must end with ``.json5``
        default_factory: Zero-argument callable producing the default
            record. Falls back to ``config_class.default``.

    Raises:
        InvalidConfigFileError: If ``config_file`` lacks the ``.json5``
            extension. Nothing is read or written in that case.
    """

    def __init__(self, config_class: Type[T], config_file: Union[str, os.PathLike],
                 default_factory: Optional[Callable[[], T]] = None) -> None:
        path = Path(config_file)
        logger.debug("Checking file extension of %s", path.name)
        if not path.name.endswith(CONFIG_EXTENSION):
            raise InvalidConfigFileError(
                f"Config file must have a {CONFIG_EXTENSION} extension: {path.name}",
                filename=path.name,
            )
        self._config_class = config_class
        self._config_file = path
        self._default_factory: Callable[[], T] = default_factory or config_class.default
        self._config: Optional[T] = None

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------
    @property
    def config_class(self) -> Type[T]:
        return self._config_class

    @property
    def config_file(self) -> Path:
        return self._config_file

    def load_config(self) -> None:
        """Load the configuration from disk.

        When the file does not exist a default record is created and
        saved immediately. Otherwise the file is parsed, decoded into a
        new record and validated; the held record is only replaced once
        all of that succeeded.

        Raises:
            InvalidConfigFileError: If the file cannot be read, parsed,
                decoded or validated. The previous record is kept.
        """
        if not self._config_file.exists():
            logger.debug("Creating new config file for class: %s",
                         self._config_class.__name__)
            try:
                self._config = self._default_factory()
            except Exception:
                logger.error("Something went wrong while loading config file: %s",
                             self._config_file.name, exc_info=True)
                return
            self.save_config()
            return

        try:
            text = self._config_file.read_text(encoding="utf-8")
            loaded = decode_config(self._config_class, parse_json5(text),
                                   self._default_factory)
            if loaded is not None:
                loaded.validate()
        except Exception as exc:
            logger.debug("Rejected config file %s: %s", self._config_file, exc)
            raise InvalidConfigFileError(
                f"Invalid config file: {self._config_file.name}",
                filename=self._config_file.name,
                cause=exc,
            ) from exc

        self._config = loaded

    def save_config(self) -> None:
        """Write the current record to the config file.

        The file is overwritten in full. The text is rendered and encoded
        before the file is opened, so a record that cannot be rendered
        leaves the existing file intact. Rendering and I/O errors are
        logged and not raised.
        """
        if self._config is None:
            logger.warning("No configuration loaded, not saving %s",
                           self._config_file.name)
            return

        try:
            data = (render_json5(self._config, comments=True, newlines=True)
                    + "\n").encode("utf-8")
        except (TypeError, ValueError):
            logger.error("Could not render config for file: %s",
                         self._config_file.name, exc_info=True)
            return

        try:
            self._config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._config_file, "wb") as fh:
                fh.write(data)
            logger.debug("Saved to config file: %s", self._config_file.name)
        except OSError:
            logger.error("Something went wrong while saving config file: %s",
                         self._config_file.name, exc_info=True)

    def get_config_json_as_string(self, comments: bool, newlines: bool) -> str:
        """Return the current record as JSON5 text.

        Args:
            comments: Include field comments
            newlines: Spread members over several lines

        Returns:
            The rendered text with tabs replaced by two spaces, or ``"{}"``
            when nothing has been loaded or the record cannot be rendered.
        """
        if self._config is None:
            return "{}"
        try:
            text = render_json5(self._config, comments=comments, newlines=newlines)
        except TypeError:
            logger.error("Could not render config for file: %s",
                         self._config_file.name, exc_info=True)
            return "{}"
        return text.replace("\t", "  ")

    def get_config(self) -> Optional[T]:
        """Return the current record, or ``None`` if none is loaded."""
        return self._config
