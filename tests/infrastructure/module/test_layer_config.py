import json
import unittest

from gridpool.domain._size import Size
from gridpool.infrastructure._random import Random
from gridpool.infrastructure.module._serialization_core import (
    layer_from_config,
    layer_to_config,
    register_layer,
    registered_layers,
)
from gridpool.infrastructure.pooling._max_pooling_layer import MaxPoolingLayer


class TestPoolingConfig(unittest.TestCase):
    def test_get_config_is_json_serializable(self):
        layer = MaxPoolingLayer(None, (4, 6), (2, 3), 2)
        cfg = layer.get_config()

        self.assertEqual(
            cfg, {"input_size": [4, 6], "pool_size": [2, 3], "n_featmap": 2}
        )
        self.assertEqual(json.loads(json.dumps(cfg)), cfg)

    def test_from_config_round_trip(self):
        rng = Random(0)
        layer = MaxPoolingLayer(rng, (4, 6), (2, 3), 2)
        rebuilt = MaxPoolingLayer.from_config(layer.get_config(), rng=rng)

        self.assertEqual(rebuilt.input_size, Size(4, 6))
        self.assertEqual(rebuilt.pool_size, Size(2, 3))
        self.assertEqual(rebuilt.output_size, Size(2, 2))
        self.assertEqual(rebuilt.n_featmap, 2)
        self.assertIs(rebuilt.rng, rng)

    def test_from_config_rejects_unknown_options(self):
        with self.assertRaises(ValueError):
            MaxPoolingLayer.from_config(
                {"input_size": [4, 4], "pool_size": [2, 2], "n_featmap": 1, "stride": 1}
            )

    def test_from_config_requires_all_options(self):
        with self.assertRaises(KeyError):
            MaxPoolingLayer.from_config({"input_size": [4, 4], "pool_size": [2, 2]})

    def test_from_config_rejects_fractional_feature_maps(self):
        with self.assertRaises(ValueError):
            MaxPoolingLayer.from_config(
                {"input_size": [4, 4], "pool_size": [2, 2], "n_featmap": 1.5}
            )

    def test_learned_parameters_are_not_exported(self):
        layer = MaxPoolingLayer(None, (2, 2), (2, 2), 1)
        layer.forward_propagation([[1.0], [2.0], [3.0], [4.0]])
        layer.back_propagation([[1.0]], eta=1.0, momentum=0.0)

        rebuilt = MaxPoolingLayer.from_config(layer.get_config())
        self.assertNotEqual(layer.scale[0], 1.0)
        self.assertEqual(rebuilt.scale[0], 1.0)


class TestLayerRegistry(unittest.TestCase):
    def test_max_pooling_layer_is_registered(self):
        self.assertIn("MaxPoolingLayer", registered_layers())

    def test_layer_round_trip_through_registry(self):
        layer = MaxPoolingLayer(None, (6, 6), (3, 3), 4)
        node = layer_to_config(layer)
        self.assertEqual(node["type"], "MaxPoolingLayer")

        rebuilt = layer_from_config(json.loads(json.dumps(node)))
        self.assertIsInstance(rebuilt, MaxPoolingLayer)
        self.assertEqual(rebuilt.get_config(), layer.get_config())

    def test_custom_registered_name_round_trips(self):
        @register_layer("WidePool")
        class WideMaxPoolingLayer(MaxPoolingLayer):
            pass

        layer = WideMaxPoolingLayer(None, (4, 4), (2, 2), 2)
        node = layer_to_config(layer)
        self.assertEqual(node["type"], "WidePool")

        rebuilt = layer_from_config(node)
        self.assertIsInstance(rebuilt, WideMaxPoolingLayer)
        self.assertEqual(rebuilt.get_config(), layer.get_config())

    def test_unknown_type_is_rejected(self):
        with self.assertRaises(ValueError):
            layer_from_config({"type": "AvgPoolingLayer", "config": {}})


if __name__ == "__main__":
    unittest.main()
