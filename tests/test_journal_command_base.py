#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Test suite for the Command base class and identity hashing
"""

import unittest
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from undo_journal.command import Command, destination_hash, variant_seed
from undo_journal.errors import CommandDestroyed, IncompatibleCommand


class Counter:
    def __init__(self, value=0):
        self.value = value


class AddCommand(Command):
    """Adds a delta to a counter; merging sums the deltas"""

    def __init__(self, counter, delta):
        self.counter = counter
        self.delta = delta
        self.released = 0
        super().__init__(self.render_message(),
                         destination_hash(variant_seed(AddCommand), counter))

    def do(self):
        self.counter.value += self.delta

    def undo(self):
        self.counter.value -= self.delta

    def absorb(self, other):
        self.delta += other.delta

    def render_message(self):
        return f"add {self.delta}"

    def release(self):
        self.released += 1


class OtherAddCommand(AddCommand):
    def __init__(self, counter, delta):
        super().__init__(counter, delta)
        self.type_destination_hash = destination_hash(variant_seed(OtherAddCommand), counter)


class TestCommandBase(unittest.TestCase):
    """Test the Command base class"""

    def setUp(self):
        """Set up test fixtures"""
        self.counter = Counter()

    def test_command_is_abstract(self):
        """Command cannot be instantiated without its hooks"""
        with self.assertRaises(TypeError):
            Command("message", 0)

    def test_do_undo(self):
        """undo after do restores the previous state"""
        cmd = AddCommand(self.counter, 5)
        cmd.do()
        self.assertEqual(self.counter.value, 5)
        cmd.undo()
        self.assertEqual(self.counter.value, 0)

    def test_description_and_str(self):
        """description mirrors the message"""
        cmd = AddCommand(self.counter, 3)
        self.assertEqual(cmd.description, "add 3")
        self.assertEqual(str(cmd), "add 3")
        self.assertIn("AddCommand", repr(cmd))
        self.assertIsNone(cmd.timestamp)

    def test_merge_regenerates_message(self):
        """merge absorbs the other command and rebuilds the message"""
        first = AddCommand(self.counter, 2)
        second = AddCommand(self.counter, 3)

        first.merge(second)

        self.assertEqual(first.delta, 5)
        self.assertEqual(first.message, "add 5")

    def test_merge_different_hash_rejected(self):
        """Commands with different identity hashes cannot merge"""
        first = AddCommand(self.counter, 2)
        second = AddCommand(Counter(), 3)

        self.assertFalse(first.can_merge_with(second))
        with self.assertRaises(IncompatibleCommand):
            first.merge(second)
        self.assertEqual(first.delta, 2)

    def test_can_merge_with_same_target(self):
        """Same variant and target compare equal regardless of payload"""
        first = AddCommand(self.counter, 2)
        second = AddCommand(self.counter, 300)
        self.assertEqual(first.type_destination_hash, second.type_destination_hash)
        self.assertTrue(first.can_merge_with(second))

    def test_destroy_releases_once(self):
        """destroy releases the context exactly once"""
        cmd = AddCommand(self.counter, 1)
        cmd.destroy()
        cmd.destroy()

        self.assertTrue(cmd.destroyed)
        self.assertIsNone(cmd.message)
        self.assertEqual(cmd.released, 1)

    def test_destroyed_command_cannot_merge(self):
        """A destroyed command refuses to merge"""
        first = AddCommand(self.counter, 1)
        second = AddCommand(self.counter, 1)
        second.destroy()

        self.assertFalse(first.can_merge_with(second))
        with self.assertRaises(CommandDestroyed):
            first.merge(second)


class TestIdentityHash(unittest.TestCase):
    """Test the identity hash helpers"""

    def test_variant_seed_is_stable(self):
        """The seed of a class does not change between calls"""
        self.assertEqual(variant_seed(AddCommand), variant_seed(AddCommand))

    def test_variant_seed_differs_per_class(self):
        """Different classes get different seeds"""
        self.assertNotEqual(variant_seed(AddCommand), variant_seed(OtherAddCommand))

    def test_hash_is_64_bit(self):
        """Hashes fit in an unsigned 64-bit integer"""
        value = destination_hash(variant_seed(AddCommand), object(), "key")
        self.assertGreaterEqual(value, 0)
        self.assertLess(value, 1 << 64)

    def test_hash_depends_on_target_and_key(self):
        """Different targets or keys give different hashes"""
        seed = variant_seed(AddCommand)
        a, b = Counter(), Counter()

        self.assertEqual(destination_hash(seed, a, "x"), destination_hash(seed, a, "x"))
        self.assertNotEqual(destination_hash(seed, a, "x"), destination_hash(seed, b, "x"))
        self.assertNotEqual(destination_hash(seed, a, "x"), destination_hash(seed, a, "y"))

    def test_hash_depends_on_variant(self):
        """Different variants on the same target give different hashes"""
        counter = Counter()
        self.assertNotEqual(
            AddCommand(counter, 1).type_destination_hash,
            OtherAddCommand(counter, 1).type_destination_hash
        )


if __name__ == '__main__':
    unittest.main()
