"""Schema base class, error types and the JSON5 codec."""

from .config_class import ConfigClass, setting, field_comment
from .exceptions import ConfigError, InvalidConfigFileError
from .codec import parse_json5, decode_config, encode_config, render_json5

__all__ = [
    "ConfigClass",
    "setting",
    "field_comment",
    "ConfigError",
    "InvalidConfigFileError",
    "parse_json5",
    "decode_config",
    "encode_config",
    "render_json5",
]
