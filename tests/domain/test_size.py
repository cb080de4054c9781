import dataclasses
import unittest

import numpy as np

from gridpool.domain._size import Size


class TestSize(unittest.TestCase):
    def test_total_and_str(self):
        s = Size(4, 6)
        self.assertEqual(s.total(), 24)
        self.assertEqual(str(s), "4x6")
        self.assertEqual(s.as_list(), [4, 6])
        self.assertEqual(tuple(s), (4, 6))

    def test_of_normalizes_int_pair_and_size(self):
        self.assertEqual(Size.of(3), Size(3, 3))
        self.assertEqual(Size.of((2, 5)), Size(2, 5))
        self.assertEqual(Size.of([2, 5]), Size(2, 5))
        s = Size(1, 2)
        self.assertIs(Size.of(s), s)

    def test_of_accepts_numpy_integers(self):
        s = Size.of((np.int64(4), np.int32(2)))
        self.assertEqual(s, Size(4, 2))
        self.assertIsInstance(s.rows, int)

    def test_rejects_invalid_values(self):
        for bad in (0, -1, (1, 2, 3), (1,), "ab", 2.5, True, (2, 0), (2.0, 2), None):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    Size.of(bad)

    def test_divides_and_floordiv(self):
        inp = Size(4, 6)
        self.assertTrue(Size(2, 3).divides(inp))
        self.assertFalse(Size(3, 3).divides(inp))
        self.assertEqual(inp // Size(2, 3), Size(2, 2))

    def test_is_frozen(self):
        s = Size(2, 2)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            s.rows = 3  # type: ignore[misc]


if __name__ == "__main__":
    unittest.main()
