"""
Leaflet Layer Map

Color-classified feature layers on an interactive Leaflet base map.
Each layer's color attribute is classified (categorical / sequential /
diverging), normalized, and turned into a generated style function.
"""

from Leaflet_Map.config import CONFIG
from Leaflet_Map.map_builder import Map, make_layer
from Leaflet_Map.models import (
    AttributeRef,
    Layer,
    LayerDataError,
    Literal,
    StyleConflictError,
    StylingOptions,
    TileProvider,
)
from Leaflet_Map.rendering import generate_leaflet_javascript, get_provider

__all__ = [
    "CONFIG",
    "Map",
    "make_layer",
    "AttributeRef",
    "Layer",
    "LayerDataError",
    "Literal",
    "StyleConflictError",
    "StylingOptions",
    "TileProvider",
    "generate_leaflet_javascript",
    "get_provider",
]
