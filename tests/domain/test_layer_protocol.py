import unittest

from gridpool.domain._layer import ILayer
from gridpool.domain._random import IRandom
from gridpool.infrastructure._random import Random
from gridpool.infrastructure.pooling._max_pooling_layer import MaxPoolingLayer


class TestLayerProtocol(unittest.TestCase):
    def test_max_pooling_layer_conforms_to_ilayer(self):
        layer = MaxPoolingLayer(None, (4, 4), (2, 2), 1)
        self.assertIsInstance(layer, ILayer)

    def test_random_conforms_to_irandom(self):
        self.assertIsInstance(Random(0), IRandom)

    def test_plain_object_is_not_a_layer(self):
        self.assertNotIsInstance(object(), ILayer)


if __name__ == "__main__":
    unittest.main()
