"""
Control-flow results of the grammar engine.

Every Option.apply(), Command.apply() and the dispatcher return one of:
- Continue: keep consuming tokens (falsy singleton).
- Halt(status): stop the parse right here (truthy); in shell mode the
  top-level process() exits with `status`, otherwise it is handed back.

Typical pattern
    if outcome := option.apply(definition, tokens, values):
        return outcome
"""
import functools
from typing import NamedTuple, final


@final
class ContinueType:
    """
    Singleton marker meaning "the parse goes on".

    Falsey so that callers can write `if outcome := ...: return outcome`.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Continue"

    def __reduce__(self):
        return type(self), ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'ContinueType' is not an acceptable base type")


class Halt(NamedTuple):
    """
    Stop the parse and terminate with `status` (0 means success).
    """
    status: int = 0


def settle(outcome, /):
    """
    Normalize a callback result: a Halt passes through, anything else is Continue.

    Callbacks are free to return whatever their own work produced; only a Halt
    changes the course of the parse.
    """
    if isinstance(outcome, Halt):
        return outcome
    return Continue


Continue = ContinueType()


__all__ = (
    "ContinueType",
    "Continue",
    "Halt",
    "settle",
)
