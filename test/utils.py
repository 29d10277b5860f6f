"""
Tests for the internal helpers.

Covers the Unset sentinel (singleton, falsy, stable repr, copy/pickle identity,
finality, unions), coalesce() and the read-only mirror() property factory.
"""
import copy
import pickle
import unittest
from threading import Thread, Lock
from unittest import TestCase

from lightargs.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` sentinel.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testNotEqualToNoneOrEmpty(self) -> None:
        """
        Falsy does not imply equality with other falsy values.
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, "")
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testThreadSafetySingleton(self) -> None:
        """
        Concurrent constructions return the same instance.
        """
        results: list[UnsetType] = []
        lock: Lock = Lock()

        def worker():
            instance = UnsetType()
            with lock:
                results.append(instance)

        threads: list[Thread] = [Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertTrue(results)
        for instance in results:
            self.assertIs(instance, Unset)

    def testUnionWithType(self) -> None:
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertNotIsInstance(None, str | Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testUnsetDefaultsToNone(self) -> None:
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesArePreserved(self) -> None:
        for value in (None, 0, "", (), False):
            with self.subTest(value=value):
                self.assertIs(coalesce(value, "fallback"), value)


class MirrorTest(TestCase):

    def testReadOnlyProperty(self) -> None:
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, [2, 3]]

        holder = Holder()
        self.assertEqual(holder.items, (1, (2, 3)))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testListsComeBackAsTuples(self) -> None:
        class Holder:
            tokens = mirror("tokens")

            def __init__(self):
                self._tokens = ["--x", "1"]

        holder = Holder()
        self.assertEqual(holder.tokens, ("--x", "1"))
        self.assertEqual(holder._tokens, ["--x", "1"])
        self.assertIsInstance(holder.tokens, tuple)

    def testRejectsNonStringName(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


class RenameTest(TestCase):

    def testFunctionForm(self) -> None:
        def f():
            pass

        self.assertIs(rename(f, "renamed"), f)
        self.assertEqual(f.__name__, "renamed")
        self.assertEqual(f.__qualname__, "renamed")

    def testDecoratorForm(self) -> None:
        @rename("renamed")
        def f():
            pass

        self.assertEqual(f.__name__, "renamed")

    def testWrongArity(self) -> None:
        with self.assertRaises(TypeError):
            rename()


if __name__ == '__main__':
    unittest.main()
