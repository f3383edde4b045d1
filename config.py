#!/usr/bin/env python3
"""
Leaflet Layer Map - Configuration

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Centralized configuration for layer styling and map output.
Single source of truth for map defaults, layer style defaults, color scales,
classification fallbacks, page assets and logging.

Configuration Sections:
1. map: Default map size, center, zoom and tile provider
2. layer_defaults: Default styling options applied to every layer
3. color_scales: Default chroma.js scale per classification
4. classification: Fallback values for degenerate attributes
5. assets: Leaflet / chroma-js URLs imported by the page
6. output: Page title and output file location
7. logging: Log level

Pattern:
- config.py defines the CONFIG dictionary (edit this)
- config_types.py defines frozen dataclasses and AppConfig.from_dict(CONFIG)

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between sections
"""

import os
from typing import Dict, Any, TypeVar, Callable, Optional

T = TypeVar("T")


def _env_or_default(
    key: str, default: T, type_fn: Optional[Callable[[str], T]] = None
) -> T:
    """
    Get value from environment variable or use default.

    Args:
        key: Environment variable name (e.g., "LEAFLET_MAP_LOG_LEVEL")
        default: Default value if env var not set
        type_fn: Optional type conversion function (e.g., float, int)

    Returns:
        Value from environment (converted) or default

    Example:
        >>> _env_or_default("LEAFLET_MAP_ZOOM", 11, int)
        11  # If env var not set
    """
    val = os.getenv(key)
    if val is not None:
        if type_fn is not None:
            return type_fn(val)
        return val  # type: ignore
    return default


CONFIG: Dict[str, Any] = {
    # ═══════════════════════════════════════════════════════════════════════
    # 🗺️ MAP SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "map": {
        "width": 900,  # Container width in pixels
        "height": 500,  # Container min-height in pixels
        "center": [0.0, 0.0],  # [lat, lon]
        "zoom": _env_or_default("LEAFLET_MAP_ZOOM", 11, int),
        "provider": _env_or_default("LEAFLET_MAP_PROVIDER", "OpenStreetMap"),
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🎨 LAYER STYLE DEFAULTS
    # ═══════════════════════════════════════════════════════════════════════
    # Numbers and strings are emitted as literals. An AttributeRef reads the
    # value from each feature's properties at render time.
    "layer_defaults": {
        "marker_size": 3.0,  # circleMarker radius (pixels)
        "border_width": 2.0,  # Stroke weight (pixels)
        "opacity": 0.5,  # Stroke opacity
        "fill_opacity": 0.5,
        "color": None,  # None | "#rrggbb" | AttributeRef("field")
        "color_map": None,  # None | chroma.js scale name, e.g. "OrRd"
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 🌈 DEFAULT COLOR SCALES (chroma.js / ColorBrewer names)
    # ═══════════════════════════════════════════════════════════════════════
    "color_scales": {
        "sequential": "YlGnBu",  # Light to dark blue-green
        "diverging": "RdYlBu",  # Red-yellow-blue, symmetric around zero
        "categorical": "accent",  # Qualitative palette
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📊 CLASSIFICATION FALLBACKS
    # ═══════════════════════════════════════════════════════════════════════
    "classification": {
        # Normalized value when a categorical attribute has one category
        "single_category_value": 0.0,
        # Normalized value when a numeric attribute is constant (range == 0)
        "constant_range_value": 0.5,
        # Fill color for features missing the color attribute
        "missing_color": "#cccccc",
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📦 PAGE ASSETS
    # ═══════════════════════════════════════════════════════════════════════
    "assets": {
        "leaflet_js": "https://unpkg.com/leaflet@1.7.1/dist/leaflet.js",
        "leaflet_css": "https://unpkg.com/leaflet@1.7.1/dist/leaflet.css",
        "chroma_js": "https://cdnjs.cloudflare.com/ajax/libs/chroma-js/1.3.3/chroma.min.js",
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📄 OUTPUT SETTINGS
    # ═══════════════════════════════════════════════════════════════════════
    "output": {
        "output_dir": _env_or_default("LEAFLET_MAP_OUTPUT_DIR", "Output"),
        "filename": "leaflet_map.html",
        "title": "Leaflet Layer Map",
        "show_legend": True,
    },
    # ═══════════════════════════════════════════════════════════════════════
    # 📋 LOGGING
    # ═══════════════════════════════════════════════════════════════════════
    "logging": {
        "level": _env_or_default("LEAFLET_MAP_LOG_LEVEL", "INFO"),
    },
}
