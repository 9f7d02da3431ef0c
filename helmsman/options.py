r"""
Helmsman options and the option-list processor.

Overview
- Option variants (leaf grammar elements, each matching the head token only)
  • ValueOption: matches "<tag>=<value>" and stores the text after the first '='.
  • FlagOption: matches a tag exactly and stores True.
  • ActionOption: matches a tag exactly and runs a callback instead of storing.
  Every variant stores under its canonical key: the first tag without its
  leading dashes ("--output" -> "output").

- process_options(definition, options, tokens, values)
  • Consumes option tokens from the head of `tokens` until the head no longer
    starts with '-', the tokens run out, or the '--' terminator is consumed.
  • The first option in declaration order whose matches() is true wins.
  • A '-' token that nothing matches is fatal ("Invalid option <token>").

- action_option(*tags, help=...)
  • Decorator building an ActionOption around the decorated callback.

Validation (at construction)
- At least one tag; tags are strings matching r"-[^\s=]*" and are never the
  terminator "--". Duplicates within one option are rejected; order is kept
  because the first tag provides the canonical key.
- help must be a string (may be empty).

Example
    >>> verbose = FlagOption("-v", "--verbose", help="Chatty output")
    >>> verbose.key
    'v'
"""
import re

from rich.text import Text

from .docs import Palette, vcat, punctuate, nest
from .faults import UnknownOptionError, AmbiguousOptionWarning
from .flow import Continue, settle
from .internals import GrammarType
from .utils import Unset, coalesce, canonical, rename


def _sanitize_tags(cls, tags, /):
    """
    Internal: validate option tags and return them as an ordered tuple.

    Raises
    - TypeError: when no tag is given or a tag is not a string.
    - ValueError: when a tag is malformed, is the terminator, or is repeated.
    """
    if not tags:
        raise TypeError(f"{cls.__typename__} must specify at least one tag")

    sanitized = []
    for tag in tags:
        if not isinstance(tag, str):
            raise TypeError(f"{cls.__typename__} tags must be strings")
        elif not re.fullmatch(r"-[^\s=]*", tag):
            raise ValueError(f"{cls.__typename__} tags must start with '-' and contain no spaces or '=' ({tag!r})")
        elif tag == "--":
            raise ValueError(f"{cls.__typename__} tags cannot be the '--' terminator")
        elif tag in sanitized:
            raise ValueError(f"{cls.__typename__} tags cannot contain duplicates")
        sanitized.append(tag)
    return tuple(sanitized)


def _sanitize_help(cls, help, /):
    if not isinstance(help, str | Text):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    return help


class Option(metaclass=GrammarType):
    """
    Base of the option variants.

    Subclasses implement matches() and apply(); show() and the canonical key
    are shared. Instances are immutable once declared and may be shared by
    several definitions or commands (e.g., the built-in help_flag).
    """

    __introspectable__ = (
        "tags",
        "help",
    )

    def __init__(self, *tags, help=""):
        self._tags = _sanitize_tags(type(self), tags)
        self._help = _sanitize_help(type(self), help)

    @property
    def key(self):
        """
        Canonical store key: the first tag with its leading dashes stripped.
        """
        return canonical(self._tags[0])

    def matches(self, tokens, /):
        raise NotImplementedError

    def apply(self, definition, tokens, values, /):
        raise NotImplementedError

    def labels(self):
        """
        Spellings shown in help, in declaration order.
        """
        return self._tags

    def show(self, palette=Unset, /):
        """
        Documentation fragment: the comma-joined labels, then the indented help.
        """
        palette = coalesce(palette, Palette())
        return vcat(
            punctuate(", ", [palette(label, "option-name") for label in self.labels()]),
            nest(4, palette(self._help, "help")),
        )


class ValueOption(Option):
    """
    Option written as "<tag>=<value>"; stores the text after the first '='.

    "--output=" stores the empty string. A bare "--output" does not match.
    """

    __introspectable__ = (
        "tags",
        "help",
    )

    def matches(self, tokens, /):
        return bool(tokens) and any(tokens[0].startswith(tag + "=") for tag in self._tags)

    def apply(self, definition, tokens, values, /):
        _, _, value = tokens.popleft().partition("=")
        values.set(self.key, value)
        return Continue

    def labels(self):
        return tuple(tag + "=Value" for tag in self._tags)


class FlagOption(Option):
    """
    Presence-only option; matches one of its tags exactly and stores True.

    "-x" is not matched by "-xx" nor by "-x=y".
    """

    __introspectable__ = (
        "tags",
        "help",
    )

    def matches(self, tokens, /):
        return bool(tokens) and tokens[0] in self._tags

    def apply(self, definition, tokens, values, /):
        tokens.popleft()
        values.set(self.key, True)
        return Continue


class ActionOption(Option):
    """
    Presence-only option that runs a callback instead of storing a value.

    The callback receives (definition, tokens, values) after the option token
    has been consumed. It may consume further tokens, and returning Halt(status) stops the whole
    parse; any other result keeps parsing.
    """

    __introspectable__ = (
        "tags",
        "help",
        "action",
    )

    def __init__(self, *tags, help="", action=Unset):
        super().__init__(*tags, help=help)
        if not callable(action):
            raise TypeError(f"{type(self).__typename__} 'action' must be callable")
        self._action = action

    def matches(self, tokens, /):
        return bool(tokens) and tokens[0] in self._tags

    def apply(self, definition, tokens, values, /):
        tokens.popleft()
        return settle(self._action(definition, tokens, values))


def action_option(*tags, help=""):
    """
    Decorator building an ActionOption around the decorated callback.

    Usage
        @action_option("-V", "--version", help="Prints the version")
        def version(definition, tokens, values):
            definition.console.print("1.0.0")
            return Halt(0)
    """

    @rename("action_option")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@action_option() must be applied to a callable")
        return ActionOption(*tags, help=help, action=callback)

    return wrapper


def process_options(definition, options, tokens, values, /):
    """
    Consume option tokens from the head of `tokens`.

    parameters
    - definition: the Definition being processed (fault reporting, debug flag).
    - options: candidate options, in declaration (priority) order.
    - tokens: deque of remaining tokens, consumed in place.
    - values: the parse's Values store.

    returns
    - Continue when scanning stopped normally: tokens are empty, the head does
      not start with '-', or the '--' terminator was consumed.
    - the Halt returned by an option, as soon as one halts.

    faults
    - UnknownOptionError ("Invalid option <token>") for an unmatched '-' token.
    - AmbiguousOptionWarning when definition.debug is set and several options
      match the same token (the first declared still wins).
    """
    while tokens and tokens[0].startswith("-"):
        if tokens[0] == "--":
            tokens.popleft()
            break

        option = next((option for option in options if option.matches(tokens)), None)

        if option is None:
            return definition.trigger(UnknownOptionError(
                "Invalid option %s" % tokens[0],
                token=tokens[0],
                hint="use '--' to pass values that start with '-'",
            ))

        if definition.debug:
            rivals = [other for other in options if other.matches(tokens)]
            if len(rivals) > 1:
                definition.trigger(AmbiguousOptionWarning(
                    "Ambiguous option %s matches %s" % (tokens[0], "; ".join(", ".join(rival.tags) for rival in rivals)),
                    token=tokens[0],
                    options=tuple(rivals),
                    hint="the first declared option wins",
                ))

        if outcome := option.apply(definition, tokens, values):
            return outcome

    return Continue


__all__ = (
    "Option",
    "ValueOption",
    "FlagOption",
    "ActionOption",
    "action_option",
    "process_options",
)
