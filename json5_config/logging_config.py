from __future__ import annotations

"""Central logging configuration for json5_config.

The library itself only emits records through ``logging.getLogger``.
Host applications that want the packaged defaults can call
:func:`setup_logging` at start-up.
"""

import importlib.resources as pkg_resources
import logging
import logging.config
import os
from typing import Any, Dict, Optional

import yaml

__all__ = ["setup_logging"]

_PACKAGE_LOGGER = "json5_config"
_LOGGING_RESOURCE = "logging.yml"
_LOG_FILENAME = "json5_config.log"


def setup_logging(log_dir: Optional[str] = None) -> None:
    """Configure logging from the packaged ``logging.yml``.

    Args:
        log_dir: Directory for a rotating ``json5_config.log`` file. Falls
            back to the ``JSON5_CONFIG_LOG_DIR`` environment variable; no
            file is written when neither is set.
    """
    log_dir = log_dir or os.environ.get("JSON5_CONFIG_LOG_DIR")

    try:
        logging_config = _load_packaged_config()
        if not logging_config.get("version"):
            raise ValueError("logging.yml has no 'version' key")
        if log_dir:
            _add_file_handler(logging_config, log_dir)
        logging.config.dictConfig(logging_config)
        logging.getLogger(_PACKAGE_LOGGER).debug("Logging initialised from %s", _LOGGING_RESOURCE)
    except Exception as exc:
        _setup_minimal_logging()
        logging.getLogger(_PACKAGE_LOGGER).error(
            "Logging initialised with minimal fallback (config error: %s)", exc
        )

    _apply_debug_overrides()


def _load_packaged_config() -> Dict[str, Any]:
    resource = pkg_resources.files("json5_config.config").joinpath(_LOGGING_RESOURCE)
    data = yaml.safe_load(resource.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{_LOGGING_RESOURCE} must contain a mapping")
    return data


def _add_file_handler(logging_config: Dict[str, Any], log_dir: str) -> None:
    os.makedirs(log_dir, exist_ok=True)
    handlers = logging_config.setdefault("handlers", {})
    logging_config.setdefault("formatters", {}).setdefault("detailed", {
        "format": "%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] %(message)s",
    })
    handlers["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "detailed",
        "level": "DEBUG",
        "filename": os.path.join(log_dir, _LOG_FILENAME),
        "maxBytes": 1024 * 1024,
        "backupCount": 3,
        "encoding": "utf-8",
    }
    package_logger = logging_config.setdefault("loggers", {}).setdefault(_PACKAGE_LOGGER, {})
    package_logger.setdefault("handlers", []).append("file")


def _setup_minimal_logging() -> None:
    """Set up console-only logging when the packaged config is unusable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
    }
    logging.config.dictConfig(minimal_config)


def _apply_debug_overrides() -> None:
    """Apply environment-driven debug overrides.

    Supports:
    - JSON5_CONFIG_DEBUG=true -> DEBUG for the whole json5_config package
    - JSON5_CONFIG_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_all = os.environ.get("JSON5_CONFIG_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}
    extra_modules = os.environ.get("JSON5_CONFIG_DEBUG_MODULES", "").strip()
    targets = []
    if debug_all:
        targets.append(_PACKAGE_LOGGER)
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(",") if m.strip())

    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        if logger.handlers:
            # The packaged console handler filters at INFO
            for handler in logger.handlers:
                if handler.level > logging.DEBUG:
                    handler.setLevel(logging.DEBUG)
        else:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(handler)
            logger.propagate = False
        logger.info("Debug override active for logger '%s'", name)
