#!/usr/bin/env python3
"""
Rendering Package

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Turn layers into the Leaflet render script and the page
that hosts it.

Modules:
- geojson_io: Layer data normalization to GeoJSON FeatureCollections
- providers: Base layer tile providers
- script_generator: Render callback generation
- legend: Legend entries and legend panel HTML
- html_template: Standalone HTML page assembly

Navigation Guide:
- Each module has its own docstring with function list
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

from Leaflet_Map.rendering.geojson_io import (
    LayerData,
    collection_to_json_string,
    prepare_layer_data,
    to_feature_collection,
)
from Leaflet_Map.rendering.providers import PROVIDERS, get_provider, osm
from Leaflet_Map.rendering.script_generator import (
    LayerRender,
    RenderScript,
    generate_leaflet_javascript,
)
from Leaflet_Map.rendering.legend import (
    LegendEntry,
    build_legend,
    generate_legend_panel_html,
)
from Leaflet_Map.rendering.html_template import generate_html

__all__ = [
    "LayerData",
    "collection_to_json_string",
    "prepare_layer_data",
    "to_feature_collection",
    "PROVIDERS",
    "get_provider",
    "osm",
    "LayerRender",
    "RenderScript",
    "generate_leaflet_javascript",
    "LegendEntry",
    "build_legend",
    "generate_legend_panel_html",
    "generate_html",
]
