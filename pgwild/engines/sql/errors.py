"""
Errors raised by the SQL wildcard formatter.

Every error carries the offending value, its observed shape and, once the
scanner has attached it, the character offset of the wildcard token in the
template.
"""

from __future__ import annotations

from typing import Any


class FormatError(ValueError):
    """Raised when a value cannot be formatted for the wildcard that consumed it."""

    def __init__(
        self,
        message: str,
        *,
        value: Any = None,
        shape: str | None = None,
        wildcard: str | None = None,
        position: int | None = None,
    ) -> None:
        self.message = message
        self.value = value
        self.shape = shape
        self.wildcard = wildcard
        self.position = position
        super().__init__(self._render())

    def _render(self) -> str:
        text = self.message
        if self.wildcard is not None:
            text = f"{text} (wildcard {self.wildcard!r})"
        if self.position is not None:
            text = f"{text}, at position {self.position}"
        return text

    def with_position(self, position: int, wildcard: str) -> FormatError:
        """Attach the token offset; keeps a position that is already set."""
        if self.position is None:
            self.position = position
        if self.wildcard is None:
            self.wildcard = wildcard
        self.args = (self._render(),)
        return self


class UnsupportedTypeError(FormatError):
    """A value's shape has no formatting rule."""

    pass


class WildcardTypeMismatchError(FormatError):
    """A value's shape is not accepted by the wildcard flavor that consumed it."""

    pass
