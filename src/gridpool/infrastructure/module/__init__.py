from ._serialization_core import layer_from_config, layer_to_config, register_layer

__all__ = ["layer_from_config", "layer_to_config", "register_layer"]
