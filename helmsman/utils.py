"""
Helmsman utilities (shared helpers for the grammar engine)

Scope
- Small building blocks used by the store, options and commands layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for “absent”: returned by Values.get() for keys that were
    never recognized, and used as a parameter default where None is meaningful.
  • Falsey, printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, keeping None/""/0 untouched.

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated callables.

- mirror("attr")
  • Read-only property over a private backing field (self._attr) that hands out
    copies of containers, so declarations stay immutable from the outside.

- canonical(tag)
  • Store key of an option tag: the tag with every leading '-' removed.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> canonical("--output")
    'output'
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Sentinel type for a value that was not provided or not recognized.

    Characteristics
    - Boolean-false, but distinct from None, "" and False.
    - repr(Unset) -> "Unset".
    - Singleton per process and sealed against subclassing.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `object` unless it is Unset, in which case return `default`.

    Falsey values such as None, "" or False are preserved; only the sentinel is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce("", "fallback")     -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or return a decorator doing so.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - @rename(name)          -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Copy containers one level at a time so callers cannot mutate a declaration.

    Tuples (named tuples included) are returned as-is; other sequences become
    lists, mappings become dicts and sets become sets. Leaves are returned as-is.
    """
    if isinstance(object, tuple):
        return object
    elif isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_detach, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, Set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property exposing the private field "_{name}".

    Containers are copied on every access (see _detach), so the public view of
    a declaration cannot be used to change it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


def canonical(tag, /):
    """
    Return the store key for an option tag.

    The key is the tag with all leading '-' characters stripped, so "--output",
    "-output" and "output" all map to "output".
    """
    if not isinstance(tag, str):
        raise TypeError("canonical() argument must be a string")
    return tag.lstrip("-")


Unset = UnsetType()
"""
Absent sentinel.

Values.get() returns it for keys that were never recognized during a parse, and
APIs use it as a default where None is a legitimate user value.
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "canonical",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
