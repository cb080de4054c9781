import unittest

import numpy as np

from gridpool.domain._errors import DimensionMismatchError, NoForwardContextError
from gridpool.infrastructure.pooling._max_pooling_layer import (
    LayerState,
    MaxPoolingLayer,
)


class TestMaxPoolingLayerStateMachine(unittest.TestCase):
    """
    READY -> PRIMED on forward, PRIMED -> READY on backward, and every
    rejected call leaves the layer untouched.
    """

    def setUp(self) -> None:
        self.layer = MaxPoolingLayer(None, (4, 4), (2, 2), 1)
        self.x = np.arange(16, dtype=np.float64).reshape(16, 1)

    def _assert_parameters_untouched(self) -> None:
        np.testing.assert_array_equal(self.layer.scale, [1.0])
        np.testing.assert_array_equal(self.layer.bias, [0.0])
        np.testing.assert_array_equal(self.layer.dscale, [0.0])
        np.testing.assert_array_equal(self.layer.dbias, [0.0])

    def test_starts_ready(self):
        self.assertEqual(self.layer.state, LayerState.READY)
        self.assertIsNone(self.layer.winners)
        self.assertIsNone(self.layer.last_input)
        self.assertIsNone(self.layer.last_output)

    def test_backward_without_forward_is_rejected(self):
        with self.assertRaises(NoForwardContextError):
            self.layer.back_propagation(np.ones((4, 1)))
        self._assert_parameters_untouched()

    def test_forward_primes_and_backward_consumes(self):
        self.layer.forward_propagation(self.x)
        self.assertEqual(self.layer.state, LayerState.PRIMED)
        self.assertEqual(self.layer.winners.shape, (4, 1))

        self.layer.back_propagation(np.ones((4, 1)))
        self.assertEqual(self.layer.state, LayerState.READY)
        self.assertIsNone(self.layer.winners)

        with self.assertRaises(NoForwardContextError):
            self.layer.back_propagation(np.ones((4, 1)))

    def test_new_forward_supersedes_previous_winners(self):
        first = np.zeros((16, 1))
        first[0, 0] = 1.0  # window 0 won by edge 0
        second = np.zeros((16, 1))
        second[5, 0] = 1.0  # window 0 won by edge 3

        self.layer.forward_propagation(first)
        self.layer.forward_propagation(second)
        self.assertEqual(self.layer.state, LayerState.PRIMED)

        err = np.zeros((4, 1))
        err[0, 0] = 2.0
        prev = self.layer.back_propagation(err)

        self.assertEqual(prev[0, 0], 0.0)
        self.assertEqual(prev[5, 0], 2.0)

    def test_forward_rejects_wrong_row_count(self):
        with self.assertRaises(DimensionMismatchError) as cm:
            self.layer.forward_propagation(np.ones((15, 2)))
        self.assertEqual(cm.exception.expected, 16)
        self.assertEqual(cm.exception.got, 15)
        self.assertEqual(self.layer.state, LayerState.READY)

    def test_forward_rejects_non_matrix(self):
        with self.assertRaises(DimensionMismatchError):
            self.layer.forward_propagation(np.ones(16))
        with self.assertRaises(DimensionMismatchError):
            self.layer.forward_propagation(np.ones((16, 1, 1)))

    def test_rejected_forward_keeps_previous_context(self):
        self.layer.forward_propagation(self.x)
        winners = self.layer.winners

        with self.assertRaises(DimensionMismatchError):
            self.layer.forward_propagation(np.ones((3, 1)))

        self.assertEqual(self.layer.state, LayerState.PRIMED)
        np.testing.assert_array_equal(self.layer.winners, winners)
        np.testing.assert_array_equal(self.layer.last_input, self.x)

    def test_backward_rejects_wrong_row_count(self):
        self.layer.forward_propagation(self.x)
        with self.assertRaises(DimensionMismatchError):
            self.layer.back_propagation(np.ones((5, 1)))
        self.assertEqual(self.layer.state, LayerState.PRIMED)
        self._assert_parameters_untouched()

    def test_backward_rejects_wrong_sample_count(self):
        self.layer.forward_propagation(self.x)
        with self.assertRaises(DimensionMismatchError) as cm:
            self.layer.back_propagation(np.ones((4, 2)))
        self.assertEqual(cm.exception.expected, 1)
        self.assertEqual(cm.exception.got, 2)
        self.assertEqual(self.layer.state, LayerState.PRIMED)
        self._assert_parameters_untouched()

        # the pending context is still usable after the rejection
        prev = self.layer.back_propagation(np.ones((4, 1)), eta=0.0, momentum=0.0)
        self.assertEqual(prev.shape, (16, 1))
        self.assertEqual(self.layer.state, LayerState.READY)

    def test_backward_rejects_non_matrix(self):
        self.layer.forward_propagation(self.x)
        with self.assertRaises(DimensionMismatchError):
            self.layer.back_propagation(np.ones(4))
        self._assert_parameters_untouched()


if __name__ == "__main__":
    unittest.main()
