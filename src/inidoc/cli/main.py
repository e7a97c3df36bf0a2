import logging
import pathlib
from typing import Annotated, NoReturn, Optional

import typer
from rich.markup import escape
from rich.table import Table

from .. import Document, FlatDocument, KeyTable

from .console import console, err_console

LOG_LEVELS = [
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]

app = typer.Typer(no_args_is_help=True)

File = Annotated[
    pathlib.Path, typer.Argument(exists=True, dir_okay=False, resolve_path=True)
]
Flat = Annotated[
    bool, typer.Option("--flat", help="Treat the file as keys with no sections")
]
SectionName = Annotated[
    Optional[str], typer.Option("--section", "-s", help="Section of the key")
]
Comments = Annotated[bool, typer.Option(help="Write comments")]


@app.callback()
def common(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, min=0, max=5, help="set logging level"
        ),
    ] = 0
):
    """Read and edit INI files without losing their order or comments."""

    if verbose == 0:
        logging.disable()
    else:
        logging.disable(logging.NOTSET)
        logging.basicConfig(level=LOG_LEVELS[verbose - 1])


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]error:[/red] {escape(message)}", highlight=False)
    raise typer.Exit(code=1)


def _open(file: pathlib.Path, flat: bool) -> Document | FlatDocument:
    return (FlatDocument if flat else Document).from_path(file)


def _keys(doc: Document | FlatDocument, section: str | None) -> KeyTable:
    if isinstance(doc, FlatDocument):
        return doc

    if section is None:
        _fail("a section is required (use --section, or --flat for files without sections)")

    if (entry := doc.find(section)) is doc.end:
        _fail(f"no such section: '{section}'")

    return entry.value


@app.command()
def show(file: File, flat: Flat = False, comments: Comments = True):
    """Show the keys of an INI file as a table."""

    doc = _open(file, flat)

    table = Table(title=str(file))
    if not flat:
        table.add_column("Section")

    table.add_column("Key")
    table.add_column("Value")
    if comments:
        table.add_column("Comment")

    if isinstance(doc, FlatDocument):
        blocks = [(None, doc)]
    else:
        blocks = list(doc.items())

    for name, keys in blocks:
        for key, value in keys.items():
            row = [escape(key), escape(value.text)]
            if name is not None:
                row.insert(0, escape(name))
            if comments:
                row.append(escape(value.comment))

            table.add_row(*row)

    console.print(table)


@app.command()
def get(file: File, key: str, section: SectionName = None, flat: Flat = False):
    """Print the value of a key."""

    keys = _keys(_open(file, flat), section)

    if (entry := keys.find(key)) is keys.end:
        _fail(f"no such key: '{key}'")

    typer.echo(entry.value.text)


@app.command("set")
def set_value(
    file: File,
    key: str,
    value: str,
    section: SectionName = None,
    comment: Annotated[
        Optional[str], typer.Option(help="Comment to attach to the key")
    ] = None,
    flat: Flat = False,
):
    """Set the value of a key, creating the key (and section) if needed."""

    doc = _open(file, flat)

    if isinstance(doc, FlatDocument):
        keys: KeyTable = doc
    elif section is None:
        _fail("a section is required (use --section, or --flat for files without sections)")
    else:
        keys = doc.setdefault(section, KeyTable())

    keys[key] = value
    if comment is not None:
        keys[key].comment = comment

    doc.to_path(file)


@app.command()
def rename(
    file: File, old: str, new: str, section: SectionName = None, flat: Flat = False
):
    """Rename a key (with --section or --flat) or a section, keeping its place in the file."""

    doc = _open(file, flat)

    if isinstance(doc, FlatDocument) or section is not None:
        table: KeyTable | Document = _keys(doc, section)
        kind = "key"
    else:
        table = doc
        kind = "section"

    if old not in table:
        _fail(f"no such {kind}: '{old}'")

    if table.rename(old, new) is table.end:
        _fail(f"cannot rename {kind} '{old}' to '{new}': the name is taken")

    doc.to_path(file)


@app.command()
def fmt(
    file: File,
    output: Annotated[
        Optional[pathlib.Path],
        typer.Option("--output", "-o", dir_okay=False, help="Write here instead of stdout"),
    ] = None,
    comments: Comments = True,
    flat: Flat = False,
):
    """Rewrite an INI file in normalized form."""

    doc = _open(file, flat)

    if output is None:
        typer.echo(doc.to_string(comments), nl=False)
    else:
        doc.to_path(output, comments=comments)
