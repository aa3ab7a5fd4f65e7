"""
Utils module behavioral tests (Unset, coalesce, rename, mirror).

Scope
- Validate the Unset sentinel: singleton, falsy, printable, sealed.
- Validate coalesce() only replaces Unset.
- Validate both forms of rename() and its rejections.
- Validate mirror() exposes read-only copies of private state.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from optscan.utils import Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testSealed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testUnions(self):
        self.assertIsInstance(Unset, Unset | str)
        self.assertIsInstance("x", str | Unset)


class TestCoalesce(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testKeepsFalseyValues(self):
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(None, "fallback"))


class TestRename(TestCase):
    """Behavioral tests for rename()."""

    def testFunctionForm(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual((function.__name__, function.__qualname__), ("renamed", "renamed"))

    def testDecoratorForm(self):
        @rename("renamed")
        def function():
            pass

        self.assertEqual(function.__name__, "renamed")

    def testRejections(self):
        with self.assertRaises(TypeError):
            rename(42, "name")
        with self.assertRaises(TypeError):
            rename(print, 42)
        with self.assertRaises(TypeError):
            rename(print, "renamed")
        with self.assertRaises(TypeError):
            rename("a", "b", "c")
        with self.assertRaises(TypeError):
            rename("name")(42)


class TestMirror(TestCase):
    """Behavioral tests for mirror()."""

    class Holder:
        items = mirror("items")
        name = mirror("name")

        def __init__(self):
            self._items = {"a": [1, 2]}
            self._name = "holder"

    def testCopies(self):
        holder = self.Holder()
        items = holder.items
        self.assertEqual(items, {"a": (1, 2)})
        items["b"] = ()
        self.assertNotIn("b", holder.items)

    def testReadOnly(self):
        holder = self.Holder()
        self.assertEqual(holder.name, "holder")
        with self.assertRaises(AttributeError):
            holder.name = "other"

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            mirror(42)


if __name__ == "__main__":
    unittest.main()
