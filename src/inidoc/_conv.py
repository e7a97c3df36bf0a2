import logging
import re

import cattrs

_log = logging.getLogger(__name__)

# Numbers are read like a stream extraction: the longest valid prefix wins and the rest is ignored.
RE_INT = re.compile(r"^\s*[+-]?\d+")
RE_FLOAT = re.compile(
    r"""
    ^\s*

    [+-]?
    (?:
        # Decimal with optional exponent...
        (?: \d+\.?\d* | \.\d+ ) (?: [eE][+-]?\d+ )?
        # or one of the special values.
        | inf(?:inity)?
        | nan
    )
    """,
    flags=re.VERBOSE | re.IGNORECASE,
)

BOOLEANS = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}


def _structure_int(text: str, _) -> int:
    if match := RE_INT.match(text):
        return int(match.group())

    _log.debug("no integer in %r, reading as 0", text)
    return 0


def _structure_float(text: str, _) -> float:
    if match := RE_FLOAT.match(text):
        return float(match.group())

    _log.debug("no number in %r, reading as 0.0", text)
    return 0.0


def _structure_bool(text: str, _) -> bool:
    flag = BOOLEANS.get(text.strip().lower())
    if flag is None:
        _log.debug("no boolean in %r, reading as false", text)
        return False

    return flag


converter = cattrs.Converter()
converter.register_structure_hook(int, _structure_int)
converter.register_structure_hook(float, _structure_float)
converter.register_structure_hook(bool, _structure_bool)
converter.register_unstructure_hook(int, str)
# repr() gives the shortest text that reads back to the same float.
converter.register_unstructure_hook(float, repr)
converter.register_unstructure_hook(bool, lambda b: "true" if b else "false")
