from __future__ import annotations

"""Conversion between config records, plain data and JSON5 text.

Parsing is delegated to the ``json5`` package. Rendering is done here so
that dataclass field comments can be emitted as ``/* ... */`` blocks and
so that indentation and line breaks can be toggled independently.

Public API:
- parse_json5(text) -> plain data
- decode_config(config_class, data, factory=None) -> instance
- encode_config(instance) -> plain data
- render_json5(value, comments=True, newlines=True, indent="\\t") -> str
"""

import dataclasses
import json
import logging
import math
import re
import types
import typing
from collections.abc import Mapping
from enum import Enum
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Type, TypeVar

import json5

from .config_class import field_comment

logger = logging.getLogger(__name__)

__all__ = ["parse_json5", "decode_config", "encode_config", "render_json5"]

T = TypeVar("T")

_NONE_TYPE = type(None)

# Lone surrogates cannot be encoded as UTF-8
_SURROGATES = re.compile("[\ud800-\udfff]")


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------
def parse_json5(text: str) -> Any:
    """Parse JSON5 text into plain Python data.

    Raises:
        ValueError: If the text is not valid JSON5
    """
    return json5.loads(text)


# ----------------------------------------------------------------------
# Decoding (plain data -> dataclass)
# ----------------------------------------------------------------------
def decode_config(config_class: Type[T], data: Any,
                  factory: Optional[Callable[[], T]] = None) -> T:
    """Build a config instance from parsed data.

    A default instance is created first, then every key present in
    ``data`` overrides the matching field. Missing keys keep their
    defaults and unknown keys are ignored.

    Args:
        config_class: Dataclass describing the schema
        data: Parsed JSON5 document (must be a mapping)
        factory: Zero-argument callable producing the default instance;
            ``config_class.default`` (or ``config_class``) when omitted

    Returns:
        A populated instance of ``config_class``

    Raises:
        TypeError: If the data does not match the schema
    """
    if not isinstance(data, Mapping):
        raise TypeError(
            f"Expected an object at the root, got {type(data).__name__}"
        )
    if factory is None:
        factory = getattr(config_class, "default", config_class)
    instance = factory()
    _decode_into(instance, data, "")
    return instance


def _decode_into(instance: Any, data: Mapping, path: str) -> None:
    hints = _resolve_hints(type(instance))
    known: Set[str] = set()
    for f in dataclasses.fields(instance):
        if not f.init:
            continue
        known.add(f.name)
        if f.name not in data:
            continue
        raw = data[f.name]
        field_path = f"{path}{f.name}"
        tp = hints.get(f.name, Any)
        current = getattr(instance, f.name, None)
        if (_is_dataclass_type(tp) and isinstance(current, tp)
                and isinstance(raw, Mapping)):
            _decode_into(current, raw, field_path + ".")
        else:
            setattr(instance, f.name, _coerce(tp, raw, field_path))

    for key in data:
        if key not in known:
            logger.debug("Ignoring unknown config key: %s%s", path, key)


def _resolve_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as exc:
        # Annotations that cannot be resolved are accepted as-is
        logger.debug("Could not resolve type hints for %s: %s", cls.__name__, exc)
        return {f.name: (Any if isinstance(f.type, str) else f.type)
                for f in dataclasses.fields(cls)}


def _is_dataclass_type(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _coerce(tp: Any, value: Any, path: str) -> Any:
    if tp is Any or tp is object:
        return value

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if _is_union(tp, origin):
        if value is None and _NONE_TYPE in args:
            return None
        options = [a for a in args if a is not _NONE_TYPE]
        errors: List[str] = []
        for option in options:
            try:
                return _coerce(option, value, path)
            except TypeError as exc:
                errors.append(str(exc))
        raise TypeError("; ".join(errors) or f"{path}: unexpected null")

    if value is None:
        raise TypeError(f"{path}: null is not allowed for {_type_name(tp)}")

    if _is_dataclass_type(tp):
        if not isinstance(value, Mapping):
            raise TypeError(f"{path}: expected an object, got {type(value).__name__}")
        nested = getattr(tp, "default", tp)()
        _decode_into(nested, value, path + ".")
        return nested

    if origin is None and isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(tp, value, path)

    if tp is bool:
        if isinstance(value, bool):
            return value
    elif tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif tp is str:
        if isinstance(value, str):
            return value
    elif tp is list or origin is list:
        if isinstance(value, list):
            item_tp = args[0] if args else Any
            return [_coerce(item_tp, item, f"{path}[{i}]") for i, item in enumerate(value)]
    elif tp is tuple or origin is tuple:
        if isinstance(value, list):
            return _coerce_tuple(args, value, path)
    elif tp in (set, frozenset) or origin in (set, frozenset):
        if isinstance(value, list):
            item_tp = args[0] if args else Any
            items = [_coerce(item_tp, item, f"{path}[{i}]") for i, item in enumerate(value)]
            return frozenset(items) if (origin or tp) is frozenset else set(items)
    elif tp is dict or origin is dict:
        if isinstance(value, Mapping):
            key_tp = args[0] if len(args) == 2 else Any
            value_tp = args[1] if len(args) == 2 else Any
            return {_coerce_key(key_tp, k, path): _coerce(value_tp, v, f"{path}.{k}")
                    for k, v in value.items()}
    elif origin is None and isinstance(tp, type) and issubclass(tp, PurePath):
        if isinstance(value, str):
            return tp(value)
    elif origin is None and isinstance(tp, type) and isinstance(value, tp):
        return value

    raise TypeError(f"{path}: expected {_type_name(tp)}, got {type(value).__name__}")


def _is_union(tp: Any, origin: Any) -> bool:
    if origin is typing.Union:
        return True
    union_type = getattr(types, "UnionType", None)
    return union_type is not None and isinstance(tp, union_type)


def _coerce_enum(tp: Type[Enum], value: Any, path: str) -> Enum:
    if isinstance(value, str) and value in tp.__members__:
        return tp[value]
    try:
        return tp(value)
    except ValueError:
        names = ", ".join(tp.__members__)
        raise TypeError(f"{path}: {value!r} is not one of {names}") from None


def _coerce_key(tp: Any, key: str, path: str) -> Any:
    """Convert an object key (always text in JSON5) to the declared key type."""
    if tp is Any or tp is object or tp is str:
        return key
    if tp is int or tp is float:
        try:
            return tp(key)
        except ValueError:
            raise TypeError(f"{path}: key {key!r} is not a valid {tp.__name__}") from None
    if isinstance(tp, type) and issubclass(tp, Enum):
        return _coerce_enum(tp, key, f"{path}.{key}")
    raise TypeError(f"{path}: unsupported key type {_type_name(tp)}")


def _coerce_tuple(args: Tuple[Any, ...], value: List[Any], path: str) -> Tuple[Any, ...]:
    if not args:
        return tuple(value)
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(_coerce(args[0], item, f"{path}[{i}]") for i, item in enumerate(value))
    if len(args) != len(value):
        raise TypeError(f"{path}: expected {len(args)} items, got {len(value)}")
    return tuple(_coerce(a, item, f"{path}[{i}]") for i, (a, item) in enumerate(zip(args, value)))


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or str(tp)


# ----------------------------------------------------------------------
# Encoding (dataclass -> plain data)
# ----------------------------------------------------------------------
def encode_config(value: Any) -> Any:
    """Convert a config instance to plain JSON-compatible data."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: encode_config(getattr(value, f.name))
                for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, Mapping):
        return {_key_text(k): encode_config(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_config(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return [encode_config(v) for v in _ordered(value)]
    if isinstance(value, PurePath):
        return str(value)
    return value


def _key_text(key: Any) -> str:
    if isinstance(key, Enum):
        return key.name
    return str(key)


def _ordered(items: Any) -> List[Any]:
    """Sort set members when possible so saved files are stable."""
    try:
        return sorted(items)
    except TypeError:
        return list(items)


# ----------------------------------------------------------------------
# Rendering (dataclass / plain data -> JSON5 text)
# ----------------------------------------------------------------------
def render_json5(value: Any, comments: bool = True, newlines: bool = True,
                 indent: str = "\t") -> str:
    """Render a config instance (or plain data) as JSON5 text.

    Args:
        value: Dataclass instance, mapping, sequence or scalar
        comments: Emit field comments as ``/* ... */`` blocks
        newlines: One member per line (otherwise a single line)
        indent: Indentation unit used when ``newlines`` is on

    Returns:
        The rendered text, without a trailing newline

    Raises:
        TypeError: If a value cannot be represented in JSON5
    """
    return _Renderer(comments, newlines, indent).render(value, 0)


class _Renderer:

    def __init__(self, comments: bool, newlines: bool, indent: str) -> None:
        self.comments = comments
        self.newlines = newlines
        self.indent = indent

    def render(self, value: Any, depth: int) -> str:
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            members = [
                (f.name, getattr(value, f.name), field_comment(f) if self.comments else None)
                for f in dataclasses.fields(value)
            ]
            return self._object(members, depth)
        if isinstance(value, Mapping):
            return self._object([(_key_text(k), v, None) for k, v in value.items()], depth)
        if isinstance(value, (list, tuple)):
            return self._array(list(value), depth)
        if isinstance(value, (set, frozenset)):
            return self._array(_ordered(value), depth)
        return _scalar(value)

    def _object(self, members: List[Tuple[str, Any, Optional[str]]], depth: int) -> str:
        if not members:
            return "{}"
        if not self.newlines:
            parts = []
            for key, val, comment in members:
                prefix = f"/* {_flatten_comment(comment)} */ " if comment else ""
                parts.append(f"{prefix}{_quote(key)}: {self.render(val, depth + 1)}")
            return "{ " + ", ".join(parts) + " }"

        pad = self.indent * (depth + 1)
        lines: List[str] = []
        for i, (key, val, comment) in enumerate(members):
            if comment:
                lines.extend(pad + line for line in _comment_lines(comment))
            entry = f"{pad}{_quote(key)}: {self.render(val, depth + 1)}"
            if i < len(members) - 1:
                entry += ","
            lines.append(entry)
        return "{\n" + "\n".join(lines) + "\n" + self.indent * depth + "}"

    def _array(self, items: List[Any], depth: int) -> str:
        if not items:
            return "[]"
        if not self.newlines:
            return "[ " + ", ".join(self.render(item, depth + 1) for item in items) + " ]"
        pad = self.indent * (depth + 1)
        lines = [pad + self.render(item, depth + 1) for item in items]
        return "[\n" + ",\n".join(lines) + "\n" + self.indent * depth + "]"


def _scalar(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return _quote(value.name)
    if isinstance(value, int):
        return str(int(value))
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, PurePath):
        return _quote(str(value))
    raise TypeError(f"Cannot render value of type {type(value).__name__} as JSON5")


def _quote(text: str) -> str:
    quoted = json.dumps(text, ensure_ascii=False)
    return _SURROGATES.sub(lambda m: f"\\u{ord(m.group()):04x}", quoted)


def _escape_comment(text: str) -> str:
    return text.replace("*/", "* /")


def _comment_lines(comment: str) -> List[str]:
    lines = [_escape_comment(line.rstrip()) for line in comment.strip().splitlines()]
    if len(lines) == 1:
        return [f"/* {lines[0]} */"]
    return [f"/* {lines[0]}"] + [f"   {line}" for line in lines[1:-1]] + [f"   {lines[-1]} */"]


def _flatten_comment(comment: str) -> str:
    return " ".join(_escape_comment(line.strip()) for line in comment.strip().splitlines())
