import logging
import logging.handlers
from unittest.mock import patch

import pytest
import yaml

from json5_config import logging_config
from json5_config.logging_config import setup_logging

_TOUCHED = ["json5_config", "json5_config.config.manager"]


@pytest.fixture(autouse=True)
def restore_logging(monkeypatch):
    """Snapshot and restore the loggers that setup_logging reconfigures."""
    for var in ("JSON5_CONFIG_LOG_DIR", "JSON5_CONFIG_DEBUG", "JSON5_CONFIG_DEBUG_MODULES"):
        monkeypatch.delenv(var, raising=False)

    root = logging.getLogger()
    saved_root = (root.level, list(root.handlers))
    saved = {}
    for name in _TOUCHED:
        logger = logging.getLogger(name)
        saved[name] = (logger.level, list(logger.handlers), logger.propagate, logger.disabled)
    yield

    for name, (level, handlers, propagate, disabled) in saved.items():
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers = handlers
        logger.setLevel(level)
        logger.propagate = propagate
        logger.disabled = disabled
    for handler in root.handlers:
        if handler not in saved_root[1]:
            handler.close()
    root.handlers = saved_root[1]
    root.setLevel(saved_root[0])


class TestSetupLogging:
    """Test cases for the packaged logging configuration."""

    def test_packaged_yaml_is_a_dict_config(self):
        data = logging_config._load_packaged_config()
        assert data["version"] == 1
        assert "console" in data["handlers"]
        assert "json5_config" in data["loggers"]

    def test_applies_packaged_config(self):
        setup_logging()
        logger = logging.getLogger("json5_config")
        assert logger.level == logging.INFO
        assert logger.propagate is False
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)

    def test_log_dir_adds_rotating_file(self, temp_dir):
        setup_logging(log_dir=str(temp_dir / "logs"))
        logger = logging.getLogger("json5_config")
        file_handlers = [h for h in logger.handlers
                         if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1

        logger.info("hello from test")
        file_handlers[0].flush()
        assert "hello from test" in (temp_dir / "logs" / "json5_config.log").read_text(encoding="utf-8")

    def test_log_dir_from_environment(self, temp_dir, monkeypatch):
        monkeypatch.setenv("JSON5_CONFIG_LOG_DIR", str(temp_dir / "envlogs"))
        setup_logging()
        assert (temp_dir / "envlogs").is_dir()

    def test_falls_back_to_minimal_config(self):
        with patch.object(logging_config, "_load_packaged_config",
                          side_effect=yaml.YAMLError("broken")), \
             patch.object(logging_config, "_setup_minimal_logging",
                          wraps=logging_config._setup_minimal_logging) as minimal:
            setup_logging()
        minimal.assert_called_once()
        assert logging.getLogger().level == logging.INFO

    def test_missing_version_falls_back(self):
        with patch.object(logging_config, "_load_packaged_config", return_value={"handlers": {}}), \
             patch.object(logging_config, "_setup_minimal_logging") as minimal:
            setup_logging()
        minimal.assert_called_once()


class TestDebugOverrides:
    """Test cases for environment-driven debug switches."""

    def test_package_debug_switch(self, monkeypatch):
        monkeypatch.setenv("JSON5_CONFIG_DEBUG", "true")
        setup_logging()
        logger = logging.getLogger("json5_config")
        assert logger.level == logging.DEBUG
        assert all(h.level <= logging.DEBUG for h in logger.handlers)

    def test_module_debug_list(self, monkeypatch):
        monkeypatch.setenv("JSON5_CONFIG_DEBUG_MODULES", " json5_config.config.manager , ")
        setup_logging()
        logger = logging.getLogger("json5_config.config.manager")
        assert logger.level == logging.DEBUG
        assert logger.handlers and logger.handlers[0].level == logging.DEBUG
        assert logger.propagate is False

    def test_no_overrides_by_default(self):
        setup_logging()
        assert logging.getLogger("json5_config.config.manager").level == logging.NOTSET
