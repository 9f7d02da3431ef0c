"""
Utility tests (Unset sentinel, coalesce, rename, mirror, canonical).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman.utils import Unset, UnsetType, coalesce, rename, mirror, canonical


class TestUnset(TestCase):
    """Unset is a falsy, sealed singleton distinct from None."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyButNotNone(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testUnionWithTypes(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", str | Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class TestCoalesce(TestCase):

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testKeepsFalsyValues(self):
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(None, "fallback"))


class TestRename(TestCase):

    def testFunctionForm(self):
        def f():
            pass

        rename(f, "g")
        self.assertEqual((f.__name__, f.__qualname__), ("g", "g"))

    def testDecoratorForm(self):
        @rename("g")
        def f():
            pass

        self.assertEqual(f.__name__, "g")

    def testWrongArity(self):
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testReadOnlyCopy(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = ["a"]

        holder = Holder()
        holder.items.append("b")
        self.assertEqual(holder.items, ["a"])
        with self.assertRaises(AttributeError):
            holder.items = []


class TestCanonical(TestCase):

    def testStripsLeadingDashes(self):
        self.assertEqual(canonical("--output"), "output")
        self.assertEqual(canonical("-o"), "o")

    def testKeepsInnerDashes(self):
        self.assertEqual(canonical("--dry-run"), "dry-run")


if __name__ == "__main__":
    unittest.main()
