from collections.abc import Iterable, Mapping
from typing import Any

from . import grammar
from .keys import KeyTable
from .omap import Entry, OrderedMap, ascii_fold


class SectionTable(OrderedMap[KeyTable]):
    """An ordered collection of sections.

    Section names are case-insensitive but keep the case they were inserted with.
    Mappings assigned to a section are converted to a key table, and key tables are copied,
    so that no two sections share their keys.

    Args:
        data: Initial sections, as a mapping or an iterable of name-keys pairs.
    """

    def __init__(
        self, data: Mapping[str, Any] | Iterable[tuple[str, Any]] = (), /
    ):
        super().__init__(data, fold=ascii_fold)

    def _coerce(self, keys: Any) -> KeyTable:
        if isinstance(keys, KeyTable):
            return keys.copy()

        return KeyTable(keys or ())

    def rename(self, position: Entry[KeyTable] | str, new_name: str) -> Entry[KeyTable]:
        """Rename a section without changing its place in the document.

        Unlike keys, sections are never renamed onto an existing name.
        Since names are case-insensitive, this also means a section cannot be renamed to a different case of its own name.

        Args:
            position: The section entry (or its name) to rename.
            new_name: The new section name.

        Returns:
            The renamed entry, or `end` if the position is not a section of this table or the new name is taken.
        """

        if isinstance(position, str):
            position = self.find(position)

        if not self.valid(position) or new_name in self:
            return self.end

        return super().rename(position, new_name)

    def to_string(self, comments: bool = True) -> str:
        """Serialize the sections as INI.

        Args:
            comments: Whether or not to write comments. Defaults to True.

        Returns:
            Each section's comment lines, header and keys, followed by a blank line.
        """

        lines = []
        for name, keys in self.items():
            if comments:
                lines.append(grammar.format_comment(keys.comment))

            lines.append(f"[{grammar.escape(name)}]\n")
            lines.append(keys.to_string(comments))
            lines.append("\n")

        return "".join(lines)
