from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Type

_LAYER_REGISTRY: dict[str, Type[Any]] = {}
_LAYER_NAMES: dict[Type[Any], str] = {}


def register_layer(name: Optional[str] = None) -> Callable[[Type[Any]], Type[Any]]:
    """
    Decorator to register a layer class for JSON deserialization.
    """

    def deco(cls: Type[Any]) -> Type[Any]:
        key = name or cls.__name__
        _LAYER_REGISTRY[key] = cls
        _LAYER_NAMES[cls] = key
        return cls

    return deco


def registered_layers() -> tuple[str, ...]:
    """Return registered layer type names (sorted)."""
    return tuple(sorted(_LAYER_REGISTRY))


def layer_to_config(layer: Any) -> Dict[str, Any]:
    """
    Convert a layer into a JSON-serializable configuration node.

    Node format
    -----------
    {
      "type": "MaxPoolingLayer",
      "config": {...}
    }

    The type is the name the class was registered under.
    Only structural configuration is exported; learned parameters are not.
    """
    get_cfg = getattr(layer, "get_config", None)
    cfg = get_cfg() if callable(get_cfg) else {}
    cls = layer.__class__
    return {"type": _LAYER_NAMES.get(cls, cls.__name__), "config": cfg}


def layer_from_config(node: Dict[str, Any], rng: Optional[Any] = None) -> Any:
    """
    Rebuild a layer from a configuration node.

    Parameters
    ----------
    node : dict
        Node produced by `layer_to_config`.
    rng : IRandom or None, optional
        Randomness source handed to the rebuilt layer.

    Raises
    ------
    ValueError
        If the node's type has not been registered via `@register_layer`.
    """
    type_name = str(node["type"])
    if type_name not in _LAYER_REGISTRY:
        raise ValueError(
            f"Unknown layer type '{type_name}'. " f"Register it via @register_layer."
        )

    cls = _LAYER_REGISTRY[type_name]
    cfg = node.get("config", {}) or {}

    from_cfg = getattr(cls, "from_config", None)
    if callable(from_cfg):
        return from_cfg(cfg, rng=rng)
    return cls(rng, **cfg)
