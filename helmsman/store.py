"""
Value store shared by a single parse.

One Values instance is created per top-level process() call and handed, by
reference, to every option, command and action involved in that parse. Keys
are canonical option keys (tags without leading dashes); values are either
True (flags) or a string (value options).
"""
from .utils import Unset


class Values:
    """
    Mapping from canonical option key to recognized value.

    Contract
    - set(key, value): insert or overwrite (last write wins); no deletions.
    - get(key, default=Unset): never raises; Unset marks an absent key.
    """

    __slots__ = ("_data",)

    def __init__(self):
        self._data = {}

    def set(self, key, value, /):
        if not isinstance(key, str):
            raise TypeError("values keys must be strings")
        if value is not True and not isinstance(value, str):
            raise TypeError("values must be True or a string, not %r" % type(value).__name__)
        self._data[key] = value

    def get(self, key, default=Unset, /):
        return self._data.get(key, default)

    def asdict(self):
        """
        Return a snapshot of the recognized values as a plain dict.
        """
        return dict(self._data)

    def __contains__(self, key):
        return key in self._data

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def __eq__(self, other):
        if not isinstance(other, Values):
            return NotImplemented
        return self._data == other._data

    __hash__ = None

    def __repr__(self):
        return "values(%s)" % ", ".join("%s=%r" % item for item in self._data.items())

    def __rich_repr__(self):
        yield from self._data.items()


__all__ = (
    "Values",
)
