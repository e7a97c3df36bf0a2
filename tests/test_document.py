import io
import pathlib

import pytest

from inidoc import Document, FlatDocument, document, dump, dumps, load, loads

TEST_INI = """\
; Global settings
# for the server
[Server]
host = example.org ; where to connect
port = 8080

; Paths
[paths]
root = /srv/www
; a long one
motd = Hello, \\
  World
empty =
"""

# What the library writes back for TEST_INI.
TEST_INI_NORMALIZED = (
    "#Global settings\n"
    "#for the server\n"
    "[Server]\n"
    "#where to connect\n"
    "host = example.org\n"
    "port = 8080\n"
    "\n"
    "#Paths\n"
    "[paths]\n"
    "root = /srv/www\n"
    "#a long one\n"
    "#\n"
    "motd = Hello, World\n"
    "empty = \n"
    "\n"
)


def snapshot(doc: Document) -> list:
    return [
        (name, keys.comment, [(k, v.text, v.comment) for k, v in keys.items()])
        for name, keys in doc.items()
    ]


def test_document():
    doc = Document.from_str(TEST_INI)

    assert list(doc) == ["Server", "paths"]
    assert doc["server"].comment == "Global settings\nfor the server"
    assert doc["SERVER"]["port"].read(int) == 8080
    assert doc["paths"]["motd"].text == "Hello, World"
    assert doc["paths"]["empty"].text == ""


def test_document_to_string():
    doc = Document.from_str(TEST_INI)

    assert doc.to_string() == TEST_INI_NORMALIZED
    assert str(doc) == TEST_INI_NORMALIZED


def test_document_round_trip():
    doc = Document.from_str(TEST_INI)
    again = Document.from_str(doc.to_string())

    assert snapshot(again) == snapshot(doc)
    assert again.to_string() == doc.to_string()


def test_document_round_trip_no_comments():
    doc = Document.from_str(TEST_INI)
    again = Document.from_str(doc.to_string(comments=False))

    def texts(d: Document) -> list:
        return [(n, {key: v.text for key, v in k.items()}) for n, k in d.items()]

    assert texts(again) == texts(doc)


def test_document_edit():
    doc = Document.from_str(TEST_INI)

    doc["server"]["port"] = 9090
    doc.rename("paths", "dirs")
    doc["Server"].rename("host", "hostname")
    doc["extra"] = {"added": True}

    assert doc.to_string(comments=False) == (
        "[Server]\nhostname = example.org\nport = 9090\n\n"
        "[dirs]\nroot = /srv/www\nmotd = Hello, World\nempty = \n\n"
        "[extra]\nadded = true\n\n"
    )


def test_parse_clears():
    doc = Document.from_str("[a]\nx = 1\n")
    doc.parse_str("[b]\ny = 2\n")

    assert list(doc) == ["b"]


def test_parse_file_leaves_stream_open():
    with io.StringIO(TEST_INI) as buf:
        doc = Document(buf)
        assert not buf.closed

    assert list(doc) == ["Server", "paths"]


def test_flat_document():
    doc = FlatDocument.from_str("; top\na = 1\n\nB = 2 ; inline\n[ignored]\n")

    assert list(doc) == ["a", "B"]
    assert doc["b"].comment == "inline"
    assert doc.to_string() == "#top\na = 1\n#inline\nB = 2\n"


def test_flat_document_round_trip():
    doc = FlatDocument.from_str("; one\n; two\nkey = value\nother = x ; y\n")

    assert FlatDocument.from_str(doc.to_string()).to_string() == doc.to_string()


def test_load_dump():
    doc = load(io.StringIO(TEST_INI))
    assert isinstance(doc, Document)

    buf = io.StringIO()
    dump(doc, buf)
    assert buf.getvalue() == TEST_INI_NORMALIZED

    flat = loads("a = 1\n", flat=True)
    assert isinstance(flat, FlatDocument)
    assert dumps(flat) == "a = 1\n"
    assert dumps(loads(TEST_INI), comments=False).startswith("[Server]\nhost = example.org\n")


def test_path(tmp_path: pathlib.Path):
    path = tmp_path / "config.ini"
    path.write_text(TEST_INI, encoding="utf-8")

    doc = Document(path)
    assert doc.encoding == "utf-8"
    assert snapshot(doc) == snapshot(Document.from_str(TEST_INI))

    out = tmp_path / "out.ini"
    doc.to_path(out)
    assert out.read_text(encoding="utf-8") == TEST_INI_NORMALIZED

    assert snapshot(Document.from_path(out)) == snapshot(doc)


def test_path_detect_utf8(tmp_path: pathlib.Path):
    path = tmp_path / "greetings.ini"
    path.write_text(
        "; 日本語のコメントです\n[挨拶]\nこんにちは = こんにちは、世界！\nさようなら = またね\n",
        encoding="utf-8",
    )

    doc = Document(str(path))

    assert doc.encoding == "utf-8"
    assert doc["挨拶"]["こんにちは"].text == "こんにちは、世界！"
    assert doc["挨拶"].comment == "日本語のコメントです"


def test_path_explicit_encoding(tmp_path: pathlib.Path):
    path = tmp_path / "sjis.ini"
    path.write_text("[挨拶]\nこんにちは = 世界\n", encoding="shift_jis")

    doc = Document.from_path(path, encoding="shift_jis")
    assert doc.encoding == "shift_jis"
    assert doc["挨拶"]["こんにちは"].text == "世界"

    # The document is written back in the encoding it was read in.
    out = tmp_path / "out.ini"
    doc.to_path(out)
    assert out.read_bytes().decode("shift_jis") == "[挨拶]\nこんにちは = 世界\n\n"


def test_path_empty(tmp_path: pathlib.Path):
    path = tmp_path / "empty.ini"
    path.touch()

    doc = Document(path)

    assert len(doc) == 0
    assert doc.encoding == "utf-8"


def test_path_missing(tmp_path: pathlib.Path):
    with pytest.raises(FileNotFoundError):
        Document(tmp_path / "missing.ini")


def test_document_round_trip_assigned_values():
    doc = Document()
    doc["s"] = {"url": "http://example.org/#top", "path": "C:\\dir\\", "note": "a;b"}

    parsed = Document.from_str(doc.to_string())

    assert [v.text for v in parsed["s"].values()] == ["http://example.org/#top", "C:\\dir\\", "a;b"]
    assert parsed.to_string() == doc.to_string()


def test_to_path_unencodable(tmp_path: pathlib.Path):
    path = tmp_path / "latin.ini"
    path.write_bytes("[s]\nname = café\n".encode("latin-1"))

    doc = Document.from_path(path, encoding="latin-1")
    doc["s"]["name"] = "日本語"

    with pytest.raises(UnicodeEncodeError):
        doc.to_path(path)

    # The file is left as it was.
    assert path.read_bytes() == "[s]\nname = café\n".encode("latin-1")


def test_stream_is_abstract():
    with pytest.raises(TypeError):
        document._Stream()
