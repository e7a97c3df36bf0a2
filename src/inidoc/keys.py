from collections.abc import Iterable, Mapping
from typing import Any

import attrs

from . import grammar
from .omap import OrderedMap, ascii_fold
from .value import Value


class KeyTable(OrderedMap[Value]):
    """An ordered block of keys, such as the body of a section.

    Keys are case-insensitive but keep the case they were inserted with.
    Plain objects assigned to a key are written into its value, so `table["port"] = 8080` stores `Value("8080")`.
    None stands for an empty value.

    Attributes:
        comment: The comment attached to the block (i.e., the comment above a section header).

    Args:
        data: Initial keys, as a mapping or an iterable of key-value pairs.
        comment: The comment attached to the block.
    """

    comment: str

    def __init__(
        self, data: Mapping[str, Any] | Iterable[tuple[str, Any]] = (), /, *, comment: str = ""
    ):
        self.comment = comment

        super().__init__(data, fold=ascii_fold)

    def _coerce(self, value: Any) -> Value:
        if isinstance(value, Value):
            return value

        if value is None:
            return Value()

        return Value().write(value)

    def __setitem__(self, key: str, value: Any):
        entry = self.find(key)

        if entry is not self.end and not isinstance(value, Value):
            # Keep the existing comment.
            entry.value.text = self._coerce(value).text
        else:
            super().__setitem__(key, value)

    def copy(self) -> "KeyTable":
        """Copy the keys, their values and the block comment into a new table."""

        return KeyTable(
            ((key, attrs.evolve(value)) for key, value in self.items()), comment=self.comment
        )

    def to_string(self, comments: bool = True) -> str:
        """Serialize the keys as INI.

        Args:
            comments: Whether or not to write comments. Defaults to True.

        Returns:
            One `key = value` line per key, each preceded by its comment lines.
        """

        lines = []
        for key, value in self.items():
            if comments:
                lines.append(grammar.format_comment(value.comment))

            lines.append(f"{grammar.escape(key)} = {grammar.format_value(value.text)}\n")

        return "".join(lines)
