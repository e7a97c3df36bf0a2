"""Line-level INI grammar shared by the sectioned and flat parsers."""

import dataclasses
import re

WHITESPACE = " \t\n\r\f\v"

# A comment starts at the first marker that is not escaped by a backslash.
RE_COMMENT = re.compile(r"(?<!\\)[;#]")
RE_MARKER = re.compile(r"[;#]")
RE_ESCAPED_MARKER = re.compile(r"\\([;#])")

REGEX = re.compile(
    r"""
    # Anchor to the start of the (trimmed) line.
    ^
    (?:
        # Match a section...
        (?:\[(?P<section>.*)\])
        # or a property, split on the first equals sign.
        | (?:(?P<key>[^=]*) = (?P<value>.*))
    )
    # Anchor to the end of the line.
    $
    """,
    flags=re.VERBOSE,
)


@dataclasses.dataclass(slots=True)
class Section:
    """An INI section, i.e. [name]."""

    name: str


@dataclasses.dataclass(slots=True)
class Property:
    """An INI property, i.e. key=value."""

    key: str
    value: str


def trim(line: str) -> str:
    """Strip leading and trailing whitespace (including form feeds and vertical tabs)."""

    return line.strip(WHITESPACE)


def split_comment(line: str) -> tuple[str, str | None]:
    """Split a line at its comment marker (`;` or `#`).

    Markers escaped with a backslash do not start a comment, and lose the backslash in the content.

    Args:
        line: The line to split.

    Returns:
        A tuple of the unescaped content before the marker and the trimmed comment after it.
        The comment is None if the line has no marker, and empty if nothing follows the marker.
    """

    content, comment = line, None

    if match := RE_COMMENT.search(line):
        content, comment = line[: match.start()], trim(line[match.end() :])

    return RE_ESCAPED_MARKER.sub(r"\1", content), comment


def escape(text: str) -> str:
    """Escape comment markers in text, so it can be written before a comment.

    Args:
        text: The text to escape.

    Returns:
        The text with a backslash before every `;` and `#`.
    """

    return RE_MARKER.sub(r"\\\g<0>", text)


def split_continuation(value: str) -> tuple[str, bool]:
    """Resolve the backslashes at the end of a (trimmed) value.

    Each pair of trailing backslashes stands for one literal backslash.
    A leftover single backslash continues the value on the next line, and is dropped.

    Args:
        value: The value to resolve.

    Returns:
        A tuple of the resolved value and whether or not it continues.
    """

    run = len(value) - len(value.rstrip("\\"))

    return value[: len(value) - run] + "\\" * (run // 2), bool(run % 2)


def format_value(text: str) -> str:
    """Format value text so that it reads back as the same text.

    Args:
        text: The value text.

    Returns:
        The escaped text, with any trailing backslashes doubled.
    """

    text = escape(text)
    run = len(text) - len(text.rstrip("\\"))

    return text + "\\" * run


def format_comment(text: str) -> str:
    """Format comment text as comment lines, one `#` line per line of text.

    Args:
        text: The comment text.

    Returns:
        The newline-terminated comment lines, or an empty string if there is no comment.
    """

    if not text:
        return ""

    return "".join(f"#{line}\n" for line in text.split("\n"))


def split_property(line: str) -> Property | None:
    """Split a line into a key and value on the first equals sign.

    Args:
        line: The line to split.

    Returns:
        The trimmed property, or None if there is no equals sign.
    """

    key, sep, value = line.partition("=")
    if not sep:
        return None

    return Property(trim(key), trim(value))


def parse(line: str) -> Section | Property | None:
    """Classify a line of INI.

    Args:
        line: The line to parse, without its comment.

    Returns:
        A section, property, or None if the line is blank or neither.
    """

    if m := REGEX.match(trim(line)):
        if (section := m["section"]) is not None:
            return Section(trim(section))
        else:
            return Property(key=trim(m["key"]), value=trim(m["value"]))

    return None
