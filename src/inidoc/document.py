"""INI documents and their file handling.

A document is either sectioned (`Document`, a table of sections) or flat (`FlatDocument`, a single table of keys).
The mode is picked by the class, and never changes for the lifetime of a document.
"""

import abc
import io
import logging
import os
import pathlib
from typing import Self, TextIO

from . import parser
from .encoding import DEFAULT_ENCODING, detect_encoding
from .keys import KeyTable
from .sections import SectionTable

_log = logging.getLogger(__name__)

Source = str | os.PathLike[str] | TextIO


class _Stream(abc.ABC):
    """Parsing and writing for both document modes.

    Attributes:
        encoding: The encoding of the file last parsed with `parse_path()`, if any.
            `to_path()` writes in this encoding by default.
    """

    encoding: str | None

    def __init__(self, source: Source | None = None, /, *, encoding: str | None = None):
        super().__init__()

        self.encoding = encoding

        if isinstance(source, (str, os.PathLike)):
            self.parse_path(source, encoding)
        elif source is not None:
            self.parse_file(source)

    # Mixed in before a key or section table, which provide clear() and to_string().
    @abc.abstractmethod
    def _parse(self, file: TextIO):
        """Parse a text stream into the (cleared) document.

        Args:
            file: The stream to parse.
        """

    def parse_file(self, file: TextIO) -> Self:
        """Parse a text stream, replacing the document's contents.
        The stream is left open.

        Args:
            file: The stream to parse.

        Returns:
            The document itself.
        """

        self.clear()
        self._parse(file)

        return self

    def parse_path(self, path: str | os.PathLike[str], encoding: str | None = None) -> Self:
        """Parse a file, replacing the document's contents.

        Args:
            path: The path to the file.
            encoding: The file's encoding.
                If None, encoding detection is attempted (falling back to UTF-8).

        Returns:
            The document itself.

        Raises:
            OSError: The file could not be opened.
            UnicodeDecodeError: The file could not be decoded.
        """

        path = pathlib.Path(path)

        if encoding is None:
            # Attempt to detect the encoding.
            with path.open("rb") as f:
                encoding = detect_encoding(f) or DEFAULT_ENCODING

            _log.debug("detected encoding %s for %s", encoding, path)

        with path.open(encoding=encoding) as f:
            self.parse_file(f)

        self.encoding = encoding

        return self

    def parse_str(self, text: str) -> Self:
        """Parse INI text, replacing the document's contents.

        Args:
            text: The text to parse.

        Returns:
            The document itself.
        """

        with io.StringIO(text) as buf:
            return self.parse_file(buf)

    def to_file(self, file: TextIO, comments: bool = True):
        """Write the document to a text stream.
        The stream is left open.

        Args:
            file: The stream to write to.
            comments: Whether or not to write comments. Defaults to True.
        """

        file.write(self.to_string(comments))

    def to_path(
        self,
        path: str | os.PathLike[str],
        encoding: str | None = None,
        comments: bool = True,
    ):
        """Write the document to a file.

        Args:
            path: The path to the file. It is created or overwritten.
            encoding: The encoding to write in.
                Defaults to the encoding of the last parsed file, or UTF-8.
            comments: Whether or not to write comments. Defaults to True.

        Raises:
            OSError: The file could not be opened.
            UnicodeEncodeError: The document could not be encoded. The file is left untouched.
        """

        encoding = encoding or self.encoding or DEFAULT_ENCODING

        # Encode before opening, since opening truncates the file.
        data = self.to_string(comments).encode(encoding)
        pathlib.Path(path).write_bytes(data)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], encoding: str | None = None) -> Self:
        """Parse a file into a new document.

        Args:
            path: The path to the file.
            encoding: The file's encoding. If None, encoding detection is attempted.

        Returns:
            The parsed document.
        """

        return cls().parse_path(path, encoding)

    @classmethod
    def from_str(cls, text: str) -> Self:
        """Parse INI text into a new document.

        Args:
            text: The text to parse.

        Returns:
            The parsed document.
        """

        return cls().parse_str(text)

    def __str__(self) -> str:
        return self.to_string()


class Document(_Stream, SectionTable):
    """An INI document made of sections.

    Comments above a section header belong to the section, comments above a key to the key.
    Keys before the first section header are ignored.

    Args:
        source: A path or text stream to parse. If None, the document starts out empty.
        encoding: The encoding of the file at `source`.
            If None, encoding detection is attempted.

    Raises:
        OSError: The file at `source` could not be opened.
    """

    def _parse(self, file: TextIO):
        parser.parse_sections(file, self)


class FlatDocument(_Stream, KeyTable):
    """An INI document made of keys only, with no sections.

    Comments above a key belong to the key, including the comments at the top of the document.

    Args:
        source: A path or text stream to parse. If None, the document starts out empty.
        encoding: The encoding of the file at `source`.
            If None, encoding detection is attempted.

    Raises:
        OSError: The file at `source` could not be opened.
    """

    def _parse(self, file: TextIO):
        parser.parse_keys(file, self)


def load(file: TextIO, *, flat: bool = False) -> Document | FlatDocument:
    """Parse an INI file.

    Args:
        file: The file to parse.
        flat: Whether or not the file has no sections. Defaults to False.

    Returns:
        The parsed document.
    """

    return (FlatDocument if flat else Document)().parse_file(file)


def loads(text: str, *, flat: bool = False) -> Document | FlatDocument:
    """Parse INI text.

    Args:
        text: The text to parse.
        flat: Whether or not the text has no sections. Defaults to False.

    Returns:
        The parsed document.
    """

    return (FlatDocument if flat else Document)().parse_str(text)


def dump(doc: SectionTable | KeyTable, file: TextIO, comments: bool = True):
    """Serialize a document (or any key or section table) as INI to a file.

    Args:
        doc: The document to serialize.
        file: The file to serialize to.
        comments: Whether or not to write comments. Defaults to True.
    """

    file.write(doc.to_string(comments))


def dumps(doc: SectionTable | KeyTable, comments: bool = True) -> str:
    """Serialize a document (or any key or section table) as INI to a string.

    Args:
        doc: The document to serialize.
        comments: Whether or not to write comments. Defaults to True.

    Returns:
        The INI as a string.
    """

    with io.StringIO() as buf:
        dump(doc, buf, comments)
        return buf.getvalue()
