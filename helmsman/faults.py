"""
Helmsman faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue.
- CommandException / CommandWarning: base types carrying a message plus
  read-only options; they know how to render and surface themselves.
- trigger(): the single entry point used by the engine to surface a fault.

Surfacing rules
- Errors are always fatal; there is no recovery path in the grammar engine.
  • shell mode: print "Error: <message>" on the definition's console (standard
    output), flush it, then exit with status -1.
  • library mode: raise the exception.
- Warnings never stop the parse.
  • shell mode: print "Warning: <message>" on a standard-error console.
  • library mode: warnings.warn(fault).

Options understood by the built-in faults
- tool: the Definition being processed (its console receives error output).
- shell: bool, print-and-exit vs raise.
- colorful: bool, styled output (palette keys "error-label", "error-message",
  "warning-label", "warning-message"; overridable through __styles__ in __main__).
- any extra context (token, tokens, hint, options, ...) is kept for callers.
"""
import sys
import warnings
from abc import ABC
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .docs import Palette
from .utils import Unset

console = Console(stderr=True, highlight=False)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): NO_COMMAND_SPECIFIED, UNKNOWN_COMMAND, UNKNOWN_HELP_TARGET
    - options (1111x): UNKNOWN_OPTION
    - positionals (1112x): MISSING_REQUIRED_VALUE, TOO_MANY_ARGUMENTS
    - warnings (121xx): AMBIGUOUS_OPTION
    """
    # --- routing errors ---
    NO_COMMAND_SPECIFIED   = 11100
    UNKNOWN_COMMAND        = 11101
    UNKNOWN_HELP_TARGET    = 11102

    # --- option errors ---
    UNKNOWN_OPTION         = 11111

    # --- positional errors ---
    MISSING_REQUIRED_VALUE = 11121
    TOO_MANY_ARGUMENTS     = 11122

    # --- warnings ---
    AMBIGUOUS_OPTION       = 12111


class CommandException(Exception):
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        palette = Palette(self.options.get("colorful", False))
        return Text.assemble(
            palette("Error: ", "error-label"),
            palette(self.message, "error-message"),
        )

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        output = getattr(self.options.get("tool"), "console", None)
        if output is None:
            output = Console(highlight=False)
        output.print(self, soft_wrap=True)
        output.file.flush()
        sys.exit(-1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCommandSpecifiedError(CommandException):
    code = FaultCode.NO_COMMAND_SPECIFIED


class UnknownCommandError(CommandException):
    code = FaultCode.UNKNOWN_COMMAND


class UnknownOptionError(CommandException):
    code = FaultCode.UNKNOWN_OPTION


class MissingRequiredValueError(CommandException):
    code = FaultCode.MISSING_REQUIRED_VALUE


class TooManyArgumentsError(CommandException):
    code = FaultCode.TOO_MANY_ARGUMENTS


class UnknownHelpTargetError(CommandException):
    code = FaultCode.UNKNOWN_HELP_TARGET


class CommandWarning(ABC, Warning):
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        palette = Palette(self.options.get("colorful", False))
        return Text.assemble(
            palette("Warning: ", "warning-label"),
            palette(self.message, "warning-message"),
        )

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=3)
        console.print(self, soft_wrap=True)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class AmbiguousOptionWarning(CommandWarning):
    code = FaultCode.AMBIGUOUS_OPTION


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - errors never return: they exit (shell) or raise (library).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    return fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "CommandException",
    "NoCommandSpecifiedError",
    "UnknownCommandError",
    "UnknownOptionError",
    "MissingRequiredValueError",
    "TooManyArgumentsError",
    "UnknownHelpTargetError",
    "CommandWarning",
    "AmbiguousOptionWarning",
    "trigger",
)
