"""
Helmsman command layer: declare a CLI as a tree, then dispatch argv into it.

What this module provides
- ShowValue: descriptor of a command's single positional value.
- Command variants
  • ValueCommand: own options, then zero or one positional value, then an action.
  • GroupCommand: own options, then sub-dispatch into child commands.
- Definition: the root of the tree (program name, help, global options,
  top-level commands) plus its runtime flags (shell, colorful, debug, console).
- dispatch(): select the first command whose name equals the head token.
- process(definition, prompt): run a whole parse.
- Built-ins: help_flag (-h/--help) and help_cmd ("help [CmdName]").

Parse walk-through
    definition options -> (no tokens? error) -> first matching command
      -> command options -> positional check / sub-dispatch -> action

Quick start
    from helmsman import Definition, ValueCommand, ShowValue, FlagOption, help_flag, help_cmd, process

    def build(definition, file, values):
        print(file, values.get("release"))

    cli = Definition(
        "tool",
        "A small tool",
        [help_flag],
        [
            help_cmd,
            ValueCommand(
                "build",
                "Builds a file",
                [FlagOption("-r", "--release", help="Optimized build")],
                ShowValue("File", False, "The file to build"),
                build,
            ),
        ],
    )

    if __name__ == "__main__":
        process(cli)

Design notes
- Tokens live in one deque consumed strictly left to right; the same deque and
  the same Values store travel through every layer of a parse.
- Errors are fatal: in shell mode they print "Error: <message>" and exit with
  -1; otherwise they are raised (see helmsman.faults).
- An action that returns Halt(status) stops the parse and, in shell mode, exits
  with that status once the console has been flushed; any other result goes on.
"""
import re
import shlex
import sys
from collections import deque
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console
from rich.text import Text

from .docs import Palette, vcat, hsep, nest, columns, render
from .faults import *
from .flow import Continue, Halt, settle
from .internals import GrammarType
from .options import Option, ActionOption, process_options
from .store import Values
from .utils import Unset, coalesce, rename


class ShowValue(NamedTuple):
    """
    Descriptor of the single positional value a ValueCommand accepts.
    """
    name: str
    optional: bool = False
    help: str = ""


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\s-]\S*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be a single word not starting with '-' ({name!r})")
    return name


def _sanitize_help(cls, help, /):
    if not isinstance(help, str | Text):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    return help


def _sanitize_members(cls, field, members, kind, /):
    if isinstance(members, str) or not isinstance(members, Iterable):
        raise TypeError(f"{cls.__typename__} '{field}' must be an iterable")
    members = tuple(members)
    for member in members:
        if not isinstance(member, kind):
            raise TypeError(f"{cls.__typename__} '{field}' must only contain {kind.__name__} instances")
    return members


def _sanitize_value(cls, value, /):
    if not isinstance(value, ShowValue):
        if not isinstance(value, tuple):
            raise TypeError(f"{cls.__typename__} 'value' must be a ShowValue")
        value = ShowValue(*value)
    if not isinstance(value.name, str) or not value.name.strip():
        raise ValueError(f"{cls.__typename__} value 'name' must be a non-empty string")
    if not isinstance(value.optional, bool):
        raise TypeError(f"{cls.__typename__} value 'optional' must be a bool")
    if not isinstance(value.help, str | Text):
        raise TypeError(f"{cls.__typename__} value 'help' must be a string")
    return value


def _options_section(options, palette, /):
    return vcat(
        Text(""),
        palette("OPTION:", "section-label"),
        nest(4, vcat(*(option.show(palette) for option in options))),
    )


def _commands_section(commands, palette, /):
    return vcat(
        Text(""),
        palette("COMMAND:", "section-label"),
        nest(4, columns([
            (palette(command.name, "command-name"), palette(command.help, "help"))
            for command in commands
        ])),
    )


class Command(metaclass=GrammarType):
    """
    Base of the command variants.

    A command is selected by exact equality between its name and the head
    token (commands are never prefix-matched). The caller consumes the name
    token before calling apply().
    """

    __introspectable__ = (
        "name",
        "help",
        "options",
    )

    def __init__(self, name, help="", options=()):
        self._name = _sanitize_name(type(self), name)
        self._help = _sanitize_help(type(self), help)
        self._options = _sanitize_members(type(self), "options", options, Option)

    def matches(self, tokens, /):
        return bool(tokens) and tokens[0] == self._name

    def apply(self, definition, tokens, values, /):
        raise NotImplementedError

    def show(self, palette=Unset, /):
        raise NotImplementedError


class ValueCommand(Command):
    """
    Command accepting its own options followed by at most one positional value.

    After its options are processed, the remaining tokens decide the outcome:
    - none: the action runs with value None if the value is optional,
      otherwise "<ShowValue.name> requires a value" is fatal.
    - exactly one: the action runs with that token as the value.
    - more: "Too many arguments <tokens>" is fatal.

    The action receives (definition, value, values); returning a Halt stops the
    parse, any other result is ignored.
    """

    __introspectable__ = (
        "name",
        "help",
        "options",
        "value",
        "action",
    )

    def __init__(self, name, help="", options=(), value=Unset, action=Unset):
        super().__init__(name, help, options)
        if value is Unset:
            raise TypeError(f"{type(self).__typename__} requires a 'value' descriptor")
        if not callable(action):
            raise TypeError(f"{type(self).__typename__} 'action' must be callable")
        self._value = _sanitize_value(type(self), value)
        self._action = action

    def apply(self, definition, tokens, values, /):
        if outcome := process_options(definition, self._options, tokens, values):
            return outcome

        match len(tokens):
            case 0:
                if not self._value.optional:
                    return definition.trigger(MissingRequiredValueError(
                        "%s requires a value" % self._value.name,
                        command=self._name,
                        hint="run 'help %s' to see the expected usage" % self._name,
                    ))
                return settle(self._action(definition, None, values))
            case 1:
                return settle(self._action(definition, tokens.popleft(), values))
            case _:
                return definition.trigger(TooManyArgumentsError(
                    "Too many arguments %s" % ",".join(tokens),
                    command=self._name,
                    tokens=tuple(tokens),
                    hint="%s accepts a single %s" % (self._name, self._value.name),
                ))

    def show(self, palette=Unset, /):
        palette = coalesce(palette, Palette())
        usage = "[%s]" % self._value.name if self._value.optional else self._value.name
        return vcat(
            palette("USAGE:", "section-label"),
            nest(4, hsep(
                palette(self._name, "command-name"),
                palette("{OPTION}", "metavar") if self._options else None,
                palette(usage, "value-name"),
            )),
            _options_section(self._options, palette) if self._options else None,
            Text(""),
            palette(self._value.name, "value-name"),
            nest(4, palette(self._value.help, "help")),
        )


class GroupCommand(Command):
    """
    Command accepting its own options followed by one of its child commands.

    Child selection follows the same rules as the top-level dispatcher.
    """

    __introspectable__ = (
        "name",
        "help",
        "options",
        "commands",
    )

    def __init__(self, name, help="", options=(), commands=()):
        super().__init__(name, help, options)
        self._commands = _sanitize_members(type(self), "commands", commands, Command)

    def apply(self, definition, tokens, values, /):
        if outcome := process_options(definition, self._options, tokens, values):
            return outcome
        return dispatch(definition, self._commands, tokens, values)

    def show(self, palette=Unset, /):
        palette = coalesce(palette, Palette())
        return vcat(
            palette("USAGE:", "section-label"),
            nest(4, hsep(
                palette(self._name, "command-name"),
                palette("{OPTION}", "metavar") if self._options else None,
                palette("[COMMAND]", "metavar") if self._commands else None,
            )),
            _options_section(self._options, palette) if self._options else None,
            _commands_section(self._commands, palette) if self._commands else None,
        )


def value_command(name, help="", options=(), value=Unset):
    """
    Decorator building a ValueCommand around the decorated action.

    Usage
        @value_command("build", "Builds a file", [], ShowValue("File"))
        def build(definition, file, values): ...
    """

    @rename("value_command")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@value_command() must be applied to a callable")
        return ValueCommand(name, help, options, value, callback)

    return wrapper


def dispatch(definition, commands, tokens, values, /):
    """
    Select and run the first command (declaration order) named by the head token.

    faults
    - NoCommandSpecifiedError when no token is left.
    - UnknownCommandError when no command has that name.
    """
    if not tokens:
        return definition.trigger(NoCommandSpecifiedError(
            "Invalid arguments - no command specified",
            hint="run '%s help' to see the available commands" % definition.name,
        ))

    command = next((command for command in commands if command.matches(tokens)), None)

    if command is None:
        return definition.trigger(UnknownCommandError(
            "Invalid command %s" % tokens[0],
            token=tokens[0],
            hint="run '%s help' to see the available commands" % definition.name,
        ))

    tokens.popleft()
    return command.apply(definition, tokens, values)


def _tokenize(prompt, /):
    """
    Normalize a prompt into a fresh list of tokens.

    - Unset: snapshot of sys.argv[1:].
    - str: shell-like splitting via shlex.split.
    - Iterable[str]: items are taken as-is (no trimming, no dropping).
    """
    if prompt is Unset:
        return list(sys.argv[1:])
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("process() prompt must be a string or an iterable of strings")
        return tokens
    raise TypeError("process() prompt must be a string or an iterable of strings")


class Definition(metaclass=GrammarType):
    """
    Root of a declarative CLI: program name, help, global options and commands.

    Runtime flags
    - shell (default True): faults print "Error: ..." and exit with -1, and a
      Halt exits with its status. When False, faults are raised and the Halt
      is returned to the caller.
    - colorful (default False): style help and fault output.
    - debug (default False): warn when sibling options are ambiguous.
    - console: the rich Console receiving help and error output; defaults to
      standard output.

    The definition is read-only once built; each __invoke__ (or process())
    works on its own token deque and Values store.
    """

    __introspectable__ = (
        "name",
        "help",
        "options",
        "commands",
        "shell",
        "colorful",
        "debug",
    )

    __displayable__ = (
        "name",
        "help",
        "options",
        "commands",
    )

    def __init__(
            self,
            name,
            help="",
            options=(),
            commands=(),
            *,
            shell=True,
            colorful=False,
            debug=False,
            console=Unset
    ):
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"{type(self).__typename__} 'name' must be a non-empty string")
        if console is not Unset and not isinstance(console, Console):
            raise TypeError(f"{type(self).__typename__} 'console' must be a rich Console")

        self._name = name
        self._help = _sanitize_help(type(self), help)
        self._options = _sanitize_members(type(self), "options", options, Option)
        self._commands = _sanitize_members(type(self), "commands", commands, Command)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._debug = bool(debug)
        self._console = console if console is not Unset else Console(highlight=False)

    @property
    def console(self):
        return self._console

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this definition's runtime flags merged in.
        """
        return trigger(fault, **options, tool=self, shell=self._shell, colorful=self._colorful)

    def show(self, palette=Unset, /):
        """
        Top-level help document (description, usage, options, commands).
        """
        palette = coalesce(palette, Palette(self._colorful))
        return vcat(
            palette(self._help, "description"),
            Text(""),
            palette("USAGE:", "section-label"),
            nest(4, hsep(
                palette(self._name, "program-name"),
                palette("{OPTION}", "metavar") if self._options else None,
                palette("[COMMAND]", "metavar") if self._commands else None,
            )),
            _options_section(self._options, palette) if self._options else None,
            _commands_section(self._commands, palette) if self._commands else None,
            Text(""),
        )

    def __invoke__(self, prompt=Unset):
        """
        Run one parse over `prompt` (see _tokenize for accepted forms).

        Returns Continue or a Halt; in shell mode a Halt exits instead.
        """
        tokens = deque(_tokenize(prompt))
        values = Values()

        if not (outcome := process_options(self, self._options, tokens, values)):
            outcome = dispatch(self, self._commands, tokens, values)

        if outcome and self._shell:
            self._console.file.flush()
            sys.exit(outcome.status)
        return outcome


def process(definition, prompt=Unset, /):
    """
    Parse `prompt` (default: sys.argv[1:]) against `definition` and dispatch.

    Raises
    - TypeError: when `definition` cannot be invoked or the prompt is invalid.
    """
    if hasattr(definition, "__invoke__") and callable(definition.__invoke__):
        return definition.__invoke__(prompt)
    raise TypeError("process() first argument must implement __invoke__ method") from None


def _print_help(definition, tokens, values):
    render(definition.show(), definition.console)
    return Halt(0)


def _print_command_help(definition, value, values):
    if value is None:
        return render(definition.show(), definition.console)

    command = next((command for command in definition.commands if command.name == value), None)

    if command is None:
        return definition.trigger(UnknownHelpTargetError(
            "Unknown command %s" % value,
            token=value,
            hint="run '%s help' to see the available commands" % definition.name,
        ))

    render(vcat(command.show(Palette(definition.colorful)), Text("")), definition.console)


help_flag = ActionOption(
    "-h",
    "--help",
    help="Prints help information",
    action=_print_help,
)

help_cmd = ValueCommand(
    "help",
    "Provides detail help on a specific command",
    (),
    ShowValue(
        "CmdName",
        True,
        "The name of the command that more help detail is to be shown.",
    ),
    _print_command_help,
)


__all__ = (
    "ShowValue",
    "Command",
    "ValueCommand",
    "GroupCommand",
    "value_command",
    "Definition",
    "dispatch",
    "process",
    "help_flag",
    "help_cmd",
)

# Only the declarations above are public; the engine's metaclass stays internal.
del GrammarType
