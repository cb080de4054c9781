from ._max_pooling_layer import LayerState, MaxPoolingLayer

__all__ = ["LayerState", "MaxPoolingLayer"]
