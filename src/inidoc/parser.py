"""Builds key and section tables from lines of INI.

Parsing is best effort and never fails on content:
lines without an equals sign, and keys that appear before the first section header, are dropped.
"""

import logging
from collections.abc import Iterable, Iterator

from . import grammar
from .keys import KeyTable
from .sections import SectionTable
from .value import Value

_log = logging.getLogger(__name__)


def _chomp(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


class _LineWalker:
    """Walks over lines, collecting comments until a key or section claims them.

    Attributes:
        lineno: The number of the line last read.
    """

    lineno: int

    def __init__(self, lines: Iterable[str]):
        self._lines = iter(lines)
        self._comment = ""
        self.lineno = 0

    def __iter__(self) -> Iterator[str]:
        """Yield the trimmed content of non-blank lines.

        Comments are collected along the way (blank lines do not discard them).
        """

        # Continuation lines are consumed from the same iterator, so they are never yielded.
        for line in self._lines:
            self.lineno += 1

            content, comment = grammar.split_comment(line)
            if comment is not None:
                self._comment += comment + "\n"

            if content := grammar.trim(content):
                yield content

    def take_comment(self) -> str:
        """Return the collected comment and start over."""

        comment, self._comment = _chomp(self._comment), ""
        return comment

    def read_property(self, line: str) -> tuple[grammar.Property, str] | None:
        """Read a property, following continuation lines.

        Args:
            line: The line the property starts on.

        Returns:
            A tuple of the property and its comment, or None if the line is not a property.
        """

        prop = grammar.split_property(line)
        if prop is None:
            _log.debug("line %d: no '=' in %r, dropping it", self.lineno, line)
            return None

        comment = self._comment
        self._comment = ""

        prop.value, continued = grammar.split_continuation(prop.value)

        while continued:
            if (following := next(self._lines, None)) is None:
                break

            self.lineno += 1
            content, note = grammar.split_comment(following)
            piece, continued = grammar.split_continuation(grammar.trim(content))
            prop.value += piece
            comment += (note or "") + "\n"

        return prop, _chomp(comment)

    def insert_property(self, line: str, table: KeyTable):
        """Read a property and append it to a table.

        The first of several case-equal keys keeps its value, but the comment of the last one.
        """

        if (result := self.read_property(line)) is None:
            return

        prop, comment = result
        value = Value(prop.value)

        entry = table.insert_hint(table.end, prop.key, value)
        if entry.value is not value:
            _log.debug("line %d: duplicate key %r, dropping its value", self.lineno, prop.key)

        entry.value.comment = comment


def parse_keys(lines: Iterable[str], table: KeyTable) -> KeyTable:
    """Parse a block of keys with no sections.

    Comments are attached to the key they precede (or follow on the same line).

    Args:
        lines: The lines to parse, e.g. an open file.
        table: The table to add keys to.

    Returns:
        The table.
    """

    walker = _LineWalker(lines)

    for line in walker:
        walker.insert_property(line, table)

    _log.debug("parsed %d keys from %d lines", len(table), walker.lineno)
    return table


def parse_sections(lines: Iterable[str], table: SectionTable) -> SectionTable:
    """Parse sections and their keys.

    Comments above a header are attached to the section, comments above a key to the key.
    A header naming an existing section (in any case) continues that section, and replaces its comment.

    Args:
        lines: The lines to parse, e.g. an open file.
        table: The table to add sections to.

    Returns:
        The table.
    """

    walker = _LineWalker(lines)
    section: KeyTable | None = None

    for line in walker:
        config = grammar.parse(line)

        if isinstance(config, grammar.Section):
            entry, created = table.insert(config.name, KeyTable())
            if not created:
                _log.debug("line %d: section %r continues", walker.lineno, config.name)

            section = entry.value
            section.comment = walker.take_comment()

        elif section is not None:
            walker.insert_property(line, section)

        else:
            _log.debug("line %d: %r is outside of a section, dropping it", walker.lineno, line)

    _log.debug("parsed %d sections from %d lines", len(table), walker.lineno)
    return table
