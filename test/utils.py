# python
"""
Utils module behavioral tests.

Scope
- Validate the Unset sentinel (singleton, falsey, union support, not subclassable).
- Validate coalesce, rename and mirror.
- Validate the Introspectable metaclass (typename, read-only mirrors, repr).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argroute.utils import Introspectable, Unset, UnsetType, coalesce, mirror, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalseyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testUnionSupport(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("x", Unset | str)
        self.assertNotIsInstance(1, str | Unset)

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})


class TestHelpers(TestCase):
    """Behavioral tests for coalesce, rename and mirror."""

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "x"), "x")
        self.assertIsNone(coalesce(Unset))
        self.assertEqual(coalesce(0, 5), 0)
        self.assertIsNone(coalesce(None, 5))

    def testRenameCallable(self):
        def f():
            pass

        self.assertIs(rename(f, "g"), f)
        self.assertEqual(f.__name__, "g")
        self.assertEqual(f.__qualname__, "g")

    def testRenameDecorator(self):
        @rename("renamed")
        def f():
            pass

        self.assertEqual(f.__name__, "renamed")

    def testRenameArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Box:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        box = Box()
        box.items.append(3)
        self.assertEqual(box.items, [1, 2])
        with self.assertRaises(AttributeError):
            box.items = []


class TestIntrospectable(TestCase):
    """Behavioral tests for the Introspectable metaclass."""

    def setUp(self):
        class DataPoint(metaclass=Introspectable):
            __introspectable__ = ("x", "y")
            __displayable__ = ("x",)

            def __init__(self, x, y):
                self._x = x
                self._y = y

        self.DataPoint = DataPoint

    def testTypename(self):
        self.assertEqual(self.DataPoint.__typename__, "data-point")

    def testMirroredFields(self):
        point = self.DataPoint(1, (2, 3))
        self.assertEqual(point.y, (2, 3))
        with self.assertRaises(AttributeError):
            point.x = 5

    def testReprUsesDisplayableFields(self):
        self.assertEqual(repr(self.DataPoint(1, 2)), "data-point(x=1)")
        self.assertEqual(list(self.DataPoint(1, 2).__rich_repr__()), [("x", 1)])


if __name__ == "__main__":
    unittest.main()
