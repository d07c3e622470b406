from __future__ import annotations

"""Base class for configuration schemas.

A schema is a plain ``@dataclass`` deriving from :class:`ConfigClass`.
Every field needs a default so that :meth:`ConfigClass.default` can build
an instance without arguments. Fields declared with :func:`setting` may
carry a comment that is written above the key in the saved file.

Example::

    @dataclass
    class AudioConfig(ConfigClass):
        volume: int = setting(50, comment="Master volume (0-100)")
        name: str = "default"

        def validate(self) -> None:
            self.volume = max(0, min(self.volume, 100))
"""

import dataclasses
from typing import Any, Callable, Optional, Type, TypeVar

__all__ = ["ConfigClass", "setting", "field_comment", "COMMENT_KEY"]

COMMENT_KEY = "comment"

C = TypeVar("C", bound="ConfigClass")


class ConfigClass:
    """Capability contract for configuration records.

    Subclasses provide defaults for every field and may override
    :meth:`validate` to normalise or reject values after loading.
    """

    @classmethod
    def default(cls: Type[C]) -> C:
        """Return a default instance of the schema."""
        return cls()

    def validate(self) -> None:
        """Check (and optionally fix up) field values in place.

        Raise any exception to reject the configuration. The default
        implementation accepts everything.
        """
        pass


def setting(default: Any = dataclasses.MISSING, *,
            default_factory: Callable[[], Any] = dataclasses.MISSING,  # type: ignore[assignment]
            comment: Optional[str] = None) -> Any:
    """Declare a dataclass field with an optional comment.

    Args:
        default: Default value for immutable fields
        default_factory: Zero-argument callable for mutable defaults
        comment: Text rendered as ``/* ... */`` above the key

    Returns:
        A ``dataclasses.Field`` to assign in the class body
    """
    metadata = {COMMENT_KEY: comment} if comment and comment.strip() else None
    return dataclasses.field(default=default, default_factory=default_factory,
                             metadata=metadata)


def field_comment(field: dataclasses.Field) -> Optional[str]:
    return field.metadata.get(COMMENT_KEY) if field.metadata else None
