"""Pure rule helpers: hex geometry, supply, stacking and habitat matching."""

from . import core, geometry, habitat, stacking, supply

__all__ = [
    "core",
    "geometry",
    "habitat",
    "stacking",
    "supply",
]
