"""An order-preserving, comment-preserving document model for INI files."""

from .document import Document, FlatDocument, dump, dumps, load, loads
from .keys import KeyTable
from .omap import Entry, OrderedMap, ascii_fold
from .sections import SectionTable
from .value import Value

__version__ = "0.1.0"
