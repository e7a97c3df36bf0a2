"""An insertion-ordered mapping with stable positions.

Entries live in nodes threaded on a circular doubly linked list which starts and ends at a sentinel,
the map's `end` position. Lookup goes through a dict keyed by the normalized key, so the display key keeps its case
while identity follows whatever `fold` function the map was created with.

Positions (entries) stay valid until the entry itself is erased, no matter how other entries are inserted, erased
or moved around.
"""

import dataclasses
import string
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping, MutableMapping
from typing import Generic, TypeVar

V = TypeVar("V")

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_fold(key: str) -> str:
    """Lowercase the ASCII letters of a key.

    Non-ASCII characters are left as is, so 'Ä' and 'ä' stay distinct.

    Args:
        key: The key to fold.

    Returns:
        The folded key.
    """

    return key.translate(_ASCII_LOWER)


def _identity(key: str) -> str:
    return key


@dataclasses.dataclass(slots=True, eq=False)
class Entry(Generic[V]):
    """A position in an ordered map, i.e. one key and its value.

    Attributes:
        key: The key as it was inserted.
        value: The value mapped to the key.
    """

    key: str
    value: V
    _prev: "Entry[V] | None" = dataclasses.field(default=None, repr=False)
    _next: "Entry[V] | None" = dataclasses.field(default=None, repr=False)

    @property
    def attached(self) -> bool:
        """Whether or not the entry is still linked into a map."""

        return self._next is not None


class OrderedMap(MutableMapping[str, V]):
    """A mapping that iterates in insertion order and can move entries around.

    Args:
        data: Initial items, as a mapping or an iterable of key-value pairs.
        fold: Normalizes keys for identity and lookup. Two keys are the same if they fold to the same value.
            Defaults to keeping keys as is.
    """

    def __init__(
        self,
        data: Mapping[str, V] | Iterable[tuple[str, V]] = (),
        /,
        *,
        fold: Callable[[str], Hashable] = _identity,
    ):
        self._fold = fold
        self._index: dict[Hashable, Entry[V]] = {}

        # The sentinel links to itself when the map is empty.
        self._root: Entry[V] = Entry("", None)
        self._root._prev = self._root._next = self._root

        self.update(data)

    def _coerce(self, value) -> V:
        # Subclasses convert plain objects into their value type here.
        return value

    def _link(self, entry: Entry[V], after: Entry[V]):
        entry._prev = after
        entry._next = after._next
        after._next._prev = entry
        after._next = entry

    def _unlink(self, entry: Entry[V]):
        entry._prev._next = entry._next
        entry._next._prev = entry._prev
        entry._prev = entry._next = None

    def _check(self, position: Entry[V], end: bool = False):
        if position is self._root:
            if not end:
                raise ValueError("the end position does not refer to an entry")
        elif not self.valid(position):
            raise ValueError(f"position does not belong to this map: {position!r}")

    @property
    def end(self) -> Entry[V]:
        """The past-the-end position, returned when a lookup fails."""

        return self._root

    @property
    def first(self) -> Entry[V]:
        """The first entry, or `end` if the map is empty."""

        return self._root._next

    @property
    def last(self) -> Entry[V]:
        """The last entry, or `end` if the map is empty."""

        return self._root._prev

    def valid(self, position: Entry[V]) -> bool:
        """Check if a position refers to an entry of this map.

        Args:
            position: The position to check.

        Returns:
            False for `end`, erased entries and entries of other maps, otherwise True.
        """

        if position is self._root or not position.attached:
            return False

        return self._index.get(self._fold(position.key)) is position

    def before(self, position: Entry[V]) -> Entry[V]:
        """Return the entry preceding a position (`end` if the position is the first one)."""

        self._check(position, end=True)
        return position._prev

    def after(self, position: Entry[V]) -> Entry[V]:
        """Return the entry following a position (`end` if the position is the last one)."""

        self._check(position, end=True)
        return position._next

    def entries(self) -> Iterator[Entry[V]]:
        """Iterate over the entries in order.

        The entry being visited may be erased or moved without disturbing the iteration.
        """

        entry = self._root._next
        while entry is not self._root:
            following = entry._next
            yield entry
            entry = following

    def find(self, key: str) -> Entry[V]:
        """Look up the entry for a key.

        Args:
            key: The key to look up.

        Returns:
            The entry, or `end` if the key is not in the map.
        """

        return self._index.get(self._fold(key), self._root)

    def insert(self, key: str, value: V) -> tuple[Entry[V], bool]:
        """Append an entry, unless an equivalent key already exists.

        Args:
            key: The key to insert.
            value: The value to map to the key.

        Returns:
            A tuple of the entry for the key and whether or not it was inserted.
            If it was not, the existing entry is returned untouched.
        """

        return self._emplace(self._root, key, value)

    def insert_hint(self, position: Entry[V], key: str, value: V) -> Entry[V]:
        """Insert an entry right before a position, unless an equivalent key already exists.

        Args:
            position: Where to insert the entry. `end` appends it.
            key: The key to insert.
            value: The value to map to the key.

        Returns:
            The new entry, or the existing entry for the key.

        Raises:
            ValueError: The position does not belong to this map.
        """

        self._check(position, end=True)
        return self._emplace(position, key, value)[0]

    def _emplace(
        self, before: Entry[V], key: str, value: V, coerce: bool = True
    ) -> tuple[Entry[V], bool]:
        norm = self._fold(key)
        if (existing := self._index.get(norm)) is not None:
            return existing, False

        entry = Entry(key, self._coerce(value) if coerce else value)
        self._link(entry, before._prev)
        self._index[norm] = entry

        return entry, True

    def erase(self, position: Entry[V]) -> Entry[V]:
        """Remove an entry.

        Args:
            position: The entry to remove.

        Returns:
            The entry that followed the removed one, or `end`.

        Raises:
            ValueError: The position is `end` or does not belong to this map.
        """

        self._check(position)

        following = position._next
        self._unlink(position)
        del self._index[self._fold(position.key)]

        return following

    def splice(self, source: Entry[V], dest: Entry[V]):
        """Move an entry so it sits right after another position.
        No other entry is moved, so every other position stays valid.

        Args:
            source: The entry to move.
            dest: The position to move the entry after. `end` moves it to the front.

        Raises:
            ValueError: Either position does not belong to this map.
        """

        self._check(source)
        self._check(dest, end=True)

        if source is dest or source._prev is dest:
            return

        self._unlink(source)
        self._link(source, dest)

    def rename(self, position: Entry[V] | str, new_name: str) -> Entry[V]:
        """Rename an entry without changing its place in the map.

        The entry is erased and reinserted under the new name, then spliced back into its old place,
        so positions referring to the old entry become invalid.

        If the new name belongs to another entry, that entry is moved into the old place instead
        and the renamed value is lost.

        Args:
            position: The entry (or its key) to rename.
            new_name: The new key.

        Returns:
            The renamed entry, or `end` if the position is not an entry of this map.
        """

        if isinstance(position, str):
            position = self.find(position)

        if not self.valid(position):
            return self._root

        value = position.value
        previous = position._prev

        self.erase(position)
        # The value is moved, not assigned, so it is not coerced again.
        entry, _ = self._emplace(self._root, new_name, value, coerce=False)
        self.splice(entry, previous)

        return entry

    def setdefault(self, key: str, default: V | None = None) -> V:
        return self.insert(key, default)[0].value

    def clear(self):
        for entry in self.entries():
            entry._prev = entry._next = None

        self._root._prev = self._root._next = self._root
        self._index.clear()

    def __getitem__(self, key: str) -> V:
        if (entry := self.find(key)) is self._root:
            raise KeyError(key)

        return entry.value

    def __setitem__(self, key: str, value: V):
        entry, inserted = self.insert(key, value)
        if not inserted:
            entry.value = self._coerce(value)

    def __delitem__(self, key: str):
        if (entry := self.find(key)) is self._root:
            raise KeyError(key)

        self.erase(entry)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._fold(key) in self._index

    def __iter__(self) -> Iterator[str]:
        for entry in self.entries():
            yield entry.key

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"
