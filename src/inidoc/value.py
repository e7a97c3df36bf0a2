from collections.abc import Callable
from typing import Any, Self, TypeVar

import attrs

from ._conv import converter

T = TypeVar("T")


@attrs.define
class Value:
    """The text of a key, i.e. whatever follows the equals sign.

    Typed access is explicit: use `read()` and `write()` to convert from and to other types.

    Attributes:
        text: The value, trimmed and without any trailing comment.
        comment: The comment attached to the key.
            Multi-line comments are joined by newlines.
    """

    text: str = ""
    comment: str = ""

    def __str__(self) -> str:
        return self.text

    def read(self, cls: type[T] = str, fn: Callable[[Self], T] | None = None) -> T:
        """Convert the text to another type.

        Numbers are read on a best effort basis, like a stream extraction:
        the longest leading number is used (`'12px'` reads as 12), and text with no leading number reads as zero.
        No error is raised for malformed text, so check the text beforehand if that matters.

        Args:
            cls: The type to convert to. Defaults to str.
            fn: A custom conversion from the value, for types that the converter does not know of.

        Returns:
            The converted value.
        """

        if fn is not None:
            return fn(self)

        if cls is str:
            return self.text

        return converter.structure(self.text, cls)

    def write(self, obj: Any, fn: Callable[[Any], str] | None = None) -> Self:
        """Replace the text with another object. The comment is kept.

        Floats are written with enough precision to read back to the same value.

        Args:
            obj: The object to write.
            fn: A custom conversion to text, for types that the converter does not know of.

        Returns:
            The value itself.
        """

        text = fn(obj) if fn is not None else converter.unstructure(obj)
        self.text = text if isinstance(text, str) else str(text)

        return self
