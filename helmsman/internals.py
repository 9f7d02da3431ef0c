"""
Internal declaration plumbing shared by options and commands.

GrammarType is the metaclass behind every grammar element (Option variants,
Command variants and Definition). It gives them:
- __typename__: the class name split on capitals and hyphenated ("value-option").
- read-only properties for every name listed in __introspectable__ (see mirror()).
- a compact, stable __repr__ and a __rich_repr__ for rich pretty printing.

Not part of the public API.
"""
import functools
import operator
import re

from .utils import Unset, coalesce, mirror, rename


class GrammarType(type):
    """
    Metaclass that turns declarations into read-only, introspectable objects.

    Conventions
    - __introspectable__ lists the fields exposed as properties; each is backed
      by a private "_{name}" attribute set during construction.
    - __displayable__ (if set) narrows what __repr__/__rich_repr__ show;
      otherwise __introspectable__ is used.
    - Subclasses inherit mirrored properties, and may extend
      __introspectable__ with their own fields.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field)
                for field in namespace.get("__introspectable__", ())
                if field not in namespace
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise representation, e.g. flag-option(tags=('-v',), help='...').
            """
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        if "__repr__" not in namespace:
            self.__repr__ = __repr__
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        return self
