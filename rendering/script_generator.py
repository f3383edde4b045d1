"""
Leaflet render script generator.

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Compose the JavaScript callback that initializes the Leaflet
map and draws every layer once the page assets have loaded.

Emission order inside the callback:
1. L.map on the container id + setView(center, zoom)
2. Base tile layer
3. Per layer: data, normalization step, style function, L.geoJson(...).addTo
4. One featureGroup + fitBounds over the non-empty layers (if any)

Every layer fragment is produced by a pure function and the fragments are
joined at the end. All layer data is validated before anything is emitted.

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import logging
import textwrap
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from Leaflet_Map.config_types import AppConfig
from Leaflet_Map.models.data_models import (
    Classification,
    Layer,
    LayerDataError,
    MapConfig,
)
from Leaflet_Map.rendering.geojson_io import (
    LayerData,
    collection_to_json_string,
    prepare_layer_data,
)
from Leaflet_Map.styling.color_classifier import classify
from Leaflet_Map.styling.expressions import js_literal, to_js
from Leaflet_Map.styling.style_builder import StyleDescriptor, build_style

logger = logging.getLogger(__name__)

INDENT = "    "


# ═══════════════════════════════════════════════════════════════════════════════
# 📦 RESULT CONTAINERS
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LayerRender:
    """Everything derived for one layer during generation.

    Attributes:
        index: 1-based layer number used in JS variable names
        data: Normalized layer data
        classification: Color classification (NONE for empty layers)
        style: Style descriptor, None for empty layers
        fragment: JavaScript for this layer
    """

    index: int
    data: LayerData
    classification: Classification
    style: Optional[StyleDescriptor]
    fragment: str
    name: Optional[str] = None

    @property
    def variable(self) -> str:
        return f"layer{self.index}"


@dataclass(frozen=True)
class RenderScript:
    """Generated callback plus the container id the host page must provide."""

    callback: str
    container_id: str
    layers: Tuple[LayerRender, ...] = ()

    def __str__(self) -> str:
        return self.callback


# ═══════════════════════════════════════════════════════════════════════════════
# 🧩 LAYER FRAGMENTS
# ═══════════════════════════════════════════════════════════════════════════════


def style_object_js(style: StyleDescriptor, feature_var: str = "feature") -> str:
    """Serialize the style channels as a JS object literal."""
    entries = [f"{key}: {to_js(expr, feature_var)}" for key, expr in style.channels()]
    body = ",\n".join(INDENT + entry for entry in entries)
    return "{\n" + body + "\n}"


def preprocessing_js(index: int, style: StyleDescriptor) -> str:
    """Rewrite the color attribute of every feature into its normalized value."""
    target = f"feature.properties[{js_literal(style.attribute)}]"
    return (
        f"data{index}.features.forEach(function(feature) {{\n"
        f"{INDENT}{target} = {to_js(style.normalization)};\n"
        f"}});"
    )


def style_function_js(index: int, style: StyleDescriptor) -> str:
    body = textwrap.indent("return " + style_object_js(style) + ";", INDENT)
    return f"var style{index} = function(feature) {{\n{body}\n}};"


def layer_fragment(
    index: int, data: LayerData, style: Optional[StyleDescriptor]
) -> str:
    """
    JavaScript for one layer.

    Args:
        index: 1-based layer number
        data: Normalized layer data
        style: Style descriptor; None for an empty layer, which is added
            without a style function

    Returns:
        JavaScript statements
    """
    parts = [f"var data{index} = {collection_to_json_string(data.geojson)};"]

    if style is None:
        parts.append(f"var layer{index} = L.geoJson(data{index}).addTo(map);")
        return "\n".join(parts)

    if style.needs_preprocessing:
        parts.append(preprocessing_js(index, style))
    parts.append(style_function_js(index, style))
    parts.append(
        f"var layer{index} = L.geoJson(data{index}, {{\n"
        f"{INDENT}pointToLayer: function(feature, latlng) {{\n"
        f"{INDENT}{INDENT}return L.circleMarker(latlng, style{index}(feature));\n"
        f"{INDENT}}},\n"
        f"{INDENT}style: style{index}\n"
        f"}}).addTo(map);"
    )
    return "\n".join(parts)


def fit_bounds_js(renders: Sequence[LayerRender]) -> str:
    """Group the layers that have geometry and fit the view to their bounds.

    Layers without any bounded geometry (no features, or only null
    geometries) are left out. Returns an empty string when none remain.
    """
    variables = [r.variable for r in renders if r.data.bounds is not None]
    if not variables:
        return ""
    return (
        f"var group = L.featureGroup([{', '.join(variables)}]);\n"
        "map.fitBounds(group.getBounds());"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# 🏗️ MAIN GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════


def prepare_all_layers(layers: Sequence[Layer]) -> List[LayerData]:
    """Validate and normalize every layer before anything is emitted."""
    prepared = []
    for i, layer in enumerate(layers, start=1):
        try:
            prepared.append(prepare_layer_data(layer.data))
        except LayerDataError as e:
            raise LayerDataError(f"layer {i}: {e}") from e
    return prepared


def render_layer(
    index: int, layer: Layer, data: LayerData, app_config: AppConfig
) -> LayerRender:
    """Classify, build the style and emit the fragment for one layer."""
    if data.is_empty:
        logger.info(f"   ⚪ Layer {index}: empty, no style or bounds")
        return LayerRender(
            index=index,
            data=data,
            classification=Classification.none(),
            style=None,
            fragment=layer_fragment(index, data, None),
            name=layer.name,
        )

    classification = classify(
        data.features, layer.options.color, app_config.classification
    )
    style = build_style(
        layer.options,
        classification,
        scales=app_config.color_scales,
        classification_config=app_config.classification,
    )

    color_info = classification.color_type.value
    if style.scale:
        color_info += f" on '{style.attribute}' (scale {style.scale})"
    logger.info(f"   🎨 Layer {index}: {data.feature_count} features, {color_info}")

    return LayerRender(
        index=index,
        data=data,
        classification=classification,
        style=style,
        fragment=layer_fragment(index, data, style),
        name=layer.name,
    )


def generate_leaflet_javascript(
    layers: Sequence[Layer],
    config: MapConfig,
    app_config: Optional[AppConfig] = None,
) -> RenderScript:
    """
    Generate the map initialization callback for a set of layers.

    Args:
        layers: Layers in draw order
        config: Map container, view and tile provider
        app_config: Color scales and classification fallbacks

    Returns:
        RenderScript with the callback text and container id

    Raises:
        LayerDataError: If any layer's data is not a geometry / feature
            collection (raised before any script is produced)
        StyleConflictError: If a layer combines a constant color with a scale
    """
    app_config = app_config or AppConfig()

    logger.info(f"📜 Generating Leaflet script for {len(layers)} layer(s)...")
    prepared = prepare_all_layers(layers)

    renders = tuple(
        render_layer(i, layer, data, app_config)
        for i, (layer, data) in enumerate(zip(layers, prepared), start=1)
    )

    body_parts = [r.fragment for r in renders]
    fit = fit_bounds_js(renders)
    if fit:
        body_parts.append(fit)

    provider = config.provider
    header = [
        f"var map = L.map({js_literal(config.container_id)})"
        f".setView({js_literal(list(config.center))}, {js_literal(config.zoom)});",
        f"L.tileLayer({js_literal(provider.url)}, {js_literal(provider.options)}).addTo(map);",
    ]
    body = "\n".join(header + body_parts)

    callback = "function(p) {\n" + textwrap.indent(body, INDENT) + "\n}"

    return RenderScript(
        callback=callback,
        container_id=config.container_id,
        layers=renders,
    )
