"""
Options module behavioral tests (matching, consumption, processor loop).

Scope
- Validate option declarations (tags, help, action) and their read-only views.
- Validate each variant's matches()/apply() contract on the head token.
- Validate process_options(): stop conditions, '--' terminator, first-declared
  precedence, unknown options, halting actions and the debug ambiguity check.

Conventions
- Test method names follow CamelCase per project convention.
- Definitions run in library mode (shell=False) so faults are raised.
"""

from __future__ import annotations

import io
import unittest
from collections import deque
from unittest import TestCase

from rich.console import Console

from helmsman import (
    Definition,
    ValueOption,
    FlagOption,
    ActionOption,
    action_option,
    process_options,
    Values,
    Continue,
    Halt,
    Unset,
    UnknownOptionError,
    AmbiguousOptionWarning,
)


def _definition(**options):
    return Definition("tool", "A tool", shell=False, **options)


class TestOptionDeclaration(TestCase):
    """Construction-time validation of option declarations."""

    def testRequiresAtLeastOneTag(self):
        with self.assertRaises(TypeError):
            FlagOption()

    def testTagsMustBeStrings(self):
        with self.assertRaises(TypeError):
            FlagOption(1)

    def testTagsMustStartWithDash(self):
        with self.assertRaises(ValueError):
            FlagOption("verbose")

    def testTagsRejectEqualsSign(self):
        with self.assertRaises(ValueError):
            ValueOption("--out=x")

    def testTerminatorIsNotATag(self):
        with self.assertRaises(ValueError):
            FlagOption("--")

    def testDuplicateTagsRejected(self):
        with self.assertRaises(ValueError):
            FlagOption("-v", "-v")

    def testTagsKeepDeclarationOrder(self):
        option = FlagOption("--verbose", "-v")
        self.assertEqual(option.tags, ("--verbose", "-v"))

    def testCanonicalKeyFromFirstTag(self):
        self.assertEqual(FlagOption("--verbose", "-v").key, "verbose")
        self.assertEqual(ValueOption("-o", "--output").key, "o")

    def testHelpMustBeAString(self):
        with self.assertRaises(TypeError):
            FlagOption("-v", help=1)

    def testActionMustBeCallable(self):
        with self.assertRaises(TypeError):
            ActionOption("-x")

    def testFieldsAreReadOnly(self):
        option = FlagOption("-v", help="Chatty")
        with self.assertRaises(AttributeError):
            option.help = "Quiet"

    def testRepr(self):
        self.assertEqual(repr(FlagOption("-v", help="Chatty")), "flag-option(tags=('-v',), help='Chatty')")

    def testActionOptionDecorator(self):
        @action_option("-V", "--version", help="Prints the version")
        def version(definition, tokens, values):
            return Halt(0)

        self.assertIsInstance(version, ActionOption)
        self.assertEqual(version.tags, ("-V", "--version"))
        self.assertEqual(version.help, "Prints the version")


class TestValueOption(TestCase):
    """ValueOption matches '<tag>=' prefixes and stores the text after '='."""

    def setUp(self) -> None:
        self.option = ValueOption("--foo", "-f")
        self.definition = _definition()

    def testMatchesAnyTagWithEquals(self):
        self.assertTrue(self.option.matches(deque(["--foo=bar"])))
        self.assertTrue(self.option.matches(deque(["-f=bar"])))

    def testDoesNotMatchBareTag(self):
        self.assertFalse(self.option.matches(deque(["--foo"])))

    def testDoesNotMatchLongerTag(self):
        self.assertFalse(self.option.matches(deque(["--foobar=x"])))

    def testDoesNotMatchEmptyTokens(self):
        self.assertFalse(self.option.matches(deque()))

    def testMatchesDoesNotConsume(self):
        tokens = deque(["--foo=bar"])
        self.option.matches(tokens)
        self.assertEqual(list(tokens), ["--foo=bar"])

    def testApplyStoresValueUnderCanonicalKey(self):
        tokens = deque(["-f=bar", "next"])
        values = Values()
        self.assertIs(self.option.apply(self.definition, tokens, values), Continue)
        self.assertEqual(values.get("foo"), "bar")
        self.assertEqual(list(tokens), ["next"])

    def testEmptyValue(self):
        values = Values()
        self.option.apply(self.definition, deque(["--foo="]), values)
        self.assertEqual(values.get("foo"), "")

    def testSplitsAtFirstEquals(self):
        values = Values()
        self.option.apply(self.definition, deque(["--foo=a=b"]), values)
        self.assertEqual(values.get("foo"), "a=b")


class TestFlagOption(TestCase):
    """FlagOption matches its tags exactly and stores True."""

    def setUp(self) -> None:
        self.option = FlagOption("-x")
        self.definition = _definition()

    def testMatchesExactTag(self):
        self.assertTrue(self.option.matches(deque(["-x"])))

    def testDoesNotMatchClusteredOrAssigned(self):
        self.assertFalse(self.option.matches(deque(["-xx"])))
        self.assertFalse(self.option.matches(deque(["-x=y"])))

    def testApplyStoresTrue(self):
        tokens = deque(["-x"])
        values = Values()
        self.option.apply(self.definition, tokens, values)
        self.assertIs(values.get("x"), True)
        self.assertFalse(tokens)


class TestActionOption(TestCase):
    """ActionOption runs its callback after consuming its token."""

    def testCallbackReceivesStateAfterConsumption(self):
        received = []

        def callback(definition, tokens, values):
            received.append((definition, list(tokens), values))

        option = ActionOption("--go", action=callback)
        definition = _definition()
        values = Values()

        outcome = option.apply(definition, deque(["--go", "rest"]), values)

        self.assertIs(outcome, Continue)
        self.assertEqual(received, [(definition, ["rest"], values)])
        self.assertNotIn("go", values)

    def testCallbackHalt(self):
        option = ActionOption("--stop", action=lambda definition, tokens, values: Halt(3))
        self.assertEqual(option.apply(_definition(), deque(["--stop"]), Values()), Halt(3))

    def testCallbackResultOtherThanHaltIsIgnored(self):
        option = ActionOption("--count", action=lambda definition, tokens, values: len(tokens))
        tokens = deque(["--count", "-v"])
        values = Values()
        self.assertIs(process_options(_definition(), [option, FlagOption("-v")], tokens, values), Continue)
        self.assertFalse(tokens)
        self.assertEqual(values.asdict(), {"v": True})


class TestProcessOptions(TestCase):
    """Option-list processor loop."""

    def setUp(self) -> None:
        self.definition = _definition()
        self.options = [FlagOption("-v", "--verbose"), ValueOption("-o", "--output")]

    def testStopsAtFirstPositional(self):
        tokens = deque(["-v", "build", "-o=x"])
        values = Values()
        self.assertIs(process_options(self.definition, self.options, tokens, values), Continue)
        self.assertEqual(list(tokens), ["build", "-o=x"])
        self.assertEqual(values.asdict(), {"v": True})

    def testStopsWhenTokensRunOut(self):
        tokens = deque(["--verbose", "--output=a"])
        values = Values()
        process_options(self.definition, self.options, tokens, values)
        self.assertFalse(tokens)
        self.assertEqual(values.asdict(), {"v": True, "o": "a"})

    def testTerminatorIsConsumed(self):
        tokens = deque(["-v", "--", "-o=x", "file"])
        values = Values()
        process_options(self.definition, self.options, tokens, values)
        self.assertEqual(list(tokens), ["-o=x", "file"])
        self.assertNotIn("o", values)

    def testUnknownOptionIsFatal(self):
        with self.assertRaises(UnknownOptionError) as context:
            process_options(self.definition, self.options, deque(["-v", "-q"]), Values())
        self.assertEqual(context.exception.message, "Invalid option -q")
        self.assertEqual(context.exception.options["token"], "-q")
        self.assertEqual(context.exception.options["hint"], "use '--' to pass values that start with '-'")

    def testBareValueOptionTagIsUnknown(self):
        with self.assertRaises(UnknownOptionError):
            process_options(self.definition, self.options, deque(["--output"]), Values())

    def testFirstDeclaredWins(self):
        first = FlagOption("-x", "--first")
        second = FlagOption("-x", "--second")
        values = Values()
        process_options(self.definition, [first, second], deque(["-x"]), values)
        self.assertEqual(values.asdict(), {"x": True})
        values = Values()
        process_options(self.definition, [second, first], deque(["--first"]), values)
        self.assertEqual(values.asdict(), {"x": True})

    def testFirstDeclaredWinsAcrossVariants(self):
        received = []
        action = ActionOption("-x", action=lambda definition, tokens, values: received.append("action"))
        values = Values()
        process_options(self.definition, [action, FlagOption("-x")], deque(["-x"]), values)
        self.assertEqual(received, ["action"])
        self.assertIs(values.get("x"), Unset)

    def testHaltStopsScanning(self):
        stop = ActionOption("--stop", action=lambda definition, tokens, values: Halt(0))
        tokens = deque(["--stop", "-v"])
        values = Values()
        self.assertEqual(process_options(self.definition, [stop, *self.options], tokens, values), Halt(0))
        self.assertEqual(list(tokens), ["-v"])
        self.assertNotIn("v", values)

    def testConsumptionIsMonotonic(self):
        sizes = []

        def spy(definition, tokens, values):
            sizes.append(len(tokens))

        options = [ActionOption("-a", "-b", "-c", action=spy)]
        process_options(self.definition, options, deque(["-a", "-b", "-c"]), Values())
        self.assertEqual(sizes, [2, 1, 0])

    def testAmbiguityWarningInDebugMode(self):
        definition = _definition(debug=True)
        values = Values()
        first, second = FlagOption("-x", "--ex"), FlagOption("-x")
        with self.assertWarns(AmbiguousOptionWarning) as context:
            process_options(definition, [first, second], deque(["-x"]), values)
        self.assertEqual(values.asdict(), {"x": True})
        self.assertEqual(context.warning.message, "Ambiguous option -x matches -x, --ex; -x")
        self.assertEqual(context.warning.options["options"], (first, second))
        self.assertEqual(context.warning.options["hint"], "the first declared option wins")

    def testNoAmbiguityCheckByDefault(self):
        import warnings

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            process_options(self.definition, [FlagOption("-x"), FlagOption("-x")], deque(["-x"]), Values())


class TestOptionShow(TestCase):
    """Documentation fragments for options."""

    def render(self, renderable):
        console = Console(file=io.StringIO(), width=100, color_system=None, highlight=False)
        console.print(renderable)
        return [line.rstrip() for line in console.file.getvalue().splitlines()]

    def testFlagFragment(self):
        lines = self.render(FlagOption("-v", "--verbose", help="Chatty output").show())
        self.assertEqual(lines, ["-v, --verbose", "    Chatty output"])

    def testValueFragmentHasValueSuffix(self):
        lines = self.render(ValueOption("-o", "--output", help="Target").show())
        self.assertEqual(lines, ["-o=Value, --output=Value", "    Target"])


if __name__ == "__main__":
    unittest.main()
