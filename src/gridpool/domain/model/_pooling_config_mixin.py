"""
Configuration mixin for grid pooling layers.

This module defines `PoolingConfigMixin`, a lightweight mixin that provides
JSON-serializable configuration hooks for pooling layers whose structure is
fully determined by their grid geometry (`input_size`, `pool_size`,
`n_featmap`).

Design notes
------------
- Only structural hyperparameters are exported. Learned scale/bias values are
  not part of the configuration.
- Uses plain Python types (lists, ints) to ensure JSON compatibility.
- `from_config` accepts only the recognized option names; anything else is
  rejected rather than silently ignored.
- The randomness source is not configuration. It is passed to `from_config`
  by the caller, exactly as it is passed to the constructor.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from .._size import Size

T = TypeVar("T", bound="PoolingConfigMixin")

POOLING_CONFIG_KEYS = frozenset({"input_size", "pool_size", "n_featmap"})


class PoolingConfigMixin:
    """
    Mixin providing JSON serialization hooks for grid pooling layers.

    This mixin assumes the host class exposes the following properties:
    - input_size : Size
    - pool_size  : Size
    - n_featmap  : int

    and a constructor ``cls(rng, input_size, pool_size, n_featmap)``.
    """

    # ---------------------------------------------------------------------
    # JSON serialization
    # ---------------------------------------------------------------------
    def get_config(self) -> Dict[str, Any]:
        """
        Return JSON-serializable configuration for this pooling layer.
        """
        return {
            "input_size": self.input_size.as_list(),
            "pool_size": self.pool_size.as_list(),
            "n_featmap": int(self.n_featmap),
        }

    @classmethod
    def from_config(
        cls: Type[T], cfg: Dict[str, Any], rng: Optional[Any] = None
    ) -> T:
        """
        Reconstruct the pooling layer from a JSON configuration dict.

        Raises
        ------
        KeyError
            If a recognized option is missing.
        ValueError
            If unrecognized options are present.
        """
        unknown = set(cfg) - POOLING_CONFIG_KEYS
        if unknown:
            raise ValueError(
                f"Unrecognized pooling options: {sorted(unknown)}. "
                f"Expected {sorted(POOLING_CONFIG_KEYS)}."
            )
        return cls(
            rng,
            Size.of(cfg["input_size"]),
            Size.of(cfg["pool_size"]),
            cfg["n_featmap"],
        )
