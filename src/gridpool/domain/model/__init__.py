from ._pooling_config_mixin import POOLING_CONFIG_KEYS, PoolingConfigMixin

__all__ = ["POOLING_CONFIG_KEYS", "PoolingConfigMixin"]
