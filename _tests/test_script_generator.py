#!/usr/bin/env python3
"""
Unit tests for the Leaflet render script generator.

Tests:
1. Statement ordering (map, base layer, layers, bounds fit)
2. Empty layers: no style function, excluded from the bounds fit
3. Single bounds fit after every layer
4. Embedded data round trip
5. Validation before emission (LayerDataError)
6. Styling fragments (constant / classified / preprocessing)

Run with: python -m pytest _tests/test_script_generator.py -v
"""

import copy
import json
import re

import pytest

from Leaflet_Map.models.data_models import (
    AttributeRef,
    ColorType,
    Layer,
    LayerDataError,
    MapConfig,
    StylingOptions,
)
from Leaflet_Map.rendering.providers import osm
from Leaflet_Map.rendering.script_generator import (
    RenderScript,
    generate_leaflet_javascript,
)


# ============================================================================
# FIXTURES
# ============================================================================


def point_collection(attribute, values):
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [float(i), float(i)]},
                "properties": {attribute: value, "label": f"p{i}"},
            }
            for i, value in enumerate(values)
        ],
    }


EMPTY = {"type": "FeatureCollection", "features": []}


@pytest.fixture
def config():
    return MapConfig(
        width=900,
        height=500,
        center=(51.5, -0.1),
        zoom=9,
        provider=osm(),
        id="test-id",
    )


def layer(data, **options):
    return Layer(data=data, options=StylingOptions(**options))


# ============================================================================
# STRUCTURE AND ORDERING
# ============================================================================


class TestStructure:
    """Callback layout and statement order."""

    def test_returns_render_script(self, config):
        script = generate_leaflet_javascript([], config)

        assert isinstance(script, RenderScript)
        assert script.container_id == "maptest-id"
        assert str(script) == script.callback

    def test_callback_wrapper(self, config):
        callback = generate_leaflet_javascript([], config).callback

        assert callback.startswith("function(p) {\n")
        assert callback.endswith("\n}")

    def test_map_view_and_base_layer(self, config):
        callback = generate_leaflet_javascript([], config).callback

        assert 'var map = L.map("maptest-id").setView([51.5, -0.1], 9);' in callback
        assert json.dumps(config.provider.url) in callback
        assert "var data" not in callback

    def test_statement_order(self, config):
        layers = [
            layer(point_collection("pop", [1, 2])),
            layer(point_collection("pop", [3, 4])),
        ]
        callback = generate_leaflet_javascript(layers, config).callback

        positions = [
            callback.index("L.map("),
            callback.index("L.tileLayer("),
            callback.index("var data1 ="),
            callback.index("var layer1 ="),
            callback.index("var data2 ="),
            callback.index("var layer2 ="),
            callback.index("map.fitBounds("),
        ]
        assert positions == sorted(positions)

    def test_generation_is_repeatable(self, config):
        data = point_collection("pop", [1, 2, 3])
        before = copy.deepcopy(data)
        layers = [layer(data, color=AttributeRef("pop"))]

        first = generate_leaflet_javascript(layers, config).callback
        second = generate_leaflet_javascript(layers, config).callback

        assert first == second
        assert data == before


# ============================================================================
# EMPTY LAYERS AND BOUNDS
# ============================================================================


class TestEmptyLayersAndBounds:
    """Empty layers are drawn unstyled and never enter the bounds fit."""

    def test_empty_layer_has_no_style(self, config):
        script = generate_leaflet_javascript(
            [layer(EMPTY, color=AttributeRef("pop"))], config
        )
        callback = script.callback

        assert "var layer1 = L.geoJson(data1).addTo(map);" in callback
        assert "var style1" not in callback
        assert "forEach" not in callback
        assert script.layers[0].style is None
        assert script.layers[0].classification.color_type is ColorType.NONE

    def test_all_empty_no_fit(self, config):
        callback = generate_leaflet_javascript(
            [layer(EMPTY), layer(EMPTY)], config
        ).callback

        assert "fitBounds" not in callback
        assert "featureGroup" not in callback

    def test_single_fit_after_all_layers(self, config):
        layers = [
            layer(point_collection("pop", [1])),
            layer(point_collection("pop", [2])),
            layer(point_collection("pop", [3])),
        ]
        callback = generate_leaflet_javascript(layers, config).callback

        assert callback.count("map.fitBounds(") == 1
        assert "L.featureGroup([layer1, layer2, layer3])" in callback
        assert callback.index("map.fitBounds(") > callback.index("var layer3 =")

    def test_empty_layer_excluded_from_group(self, config):
        layers = [layer(EMPTY), layer(point_collection("pop", [1, 2]))]
        callback = generate_leaflet_javascript(layers, config).callback

        assert "L.featureGroup([layer2])" in callback

    def test_null_geometry_layer_not_fitted(self, config):
        no_geometry = {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "geometry": None, "properties": {"pop": 1}}],
        }
        callback = generate_leaflet_javascript([layer(no_geometry)], config).callback

        assert "var style1" in callback
        assert "featureGroup" not in callback
        assert "fitBounds" not in callback

    def test_null_geometry_layer_excluded_from_group(self, config):
        no_geometry = {
            "type": "Feature",
            "geometry": None,
            "properties": {"pop": 1},
        }
        layers = [layer(point_collection("pop", [1])), layer(no_geometry)]
        callback = generate_leaflet_javascript(layers, config).callback

        assert "L.featureGroup([layer1])" in callback


# ============================================================================
# DATA ROUND TRIP
# ============================================================================


class TestDataRoundTrip:
    """The embedded data parses back to the same features."""

    def test_embedded_data_parses_back(self, config):
        data = point_collection("pop", [1, 2, 3])
        callback = generate_leaflet_javascript([layer(data)], config).callback

        match = re.search(r"^\s*var data1 = (.*);$", callback, re.MULTILINE)
        assert match is not None
        parsed = json.loads(match.group(1))

        assert len(parsed["features"]) == len(data["features"])
        for original, embedded in zip(data["features"], parsed["features"]):
            assert set(embedded["properties"]) == set(original["properties"])
            assert embedded["geometry"] == original["geometry"]

    def test_infinite_values_embedded_as_null(self, config):
        data = point_collection("v", [1.0, float("inf"), 3.0])
        script = generate_leaflet_javascript(
            [layer(data, color=AttributeRef("v"))], config
        )

        match = re.search(r"^\s*var data1 = (.*);$", script.callback, re.MULTILINE)
        parsed = json.loads(match.group(1))
        values = [f["properties"]["v"] for f in parsed["features"]]

        assert values == [1.0, None, 3.0]
        assert script.layers[0].classification.maximum == 3.0
        assert data["features"][1]["properties"]["v"] == float("inf")

    def test_closing_tag_in_property_is_escaped(self, config):
        data = point_collection("note", ["</script><b>"])
        callback = generate_leaflet_javascript([layer(data)], config).callback

        assert "</script>" not in callback
        assert "<\\/script>" in callback


# ============================================================================
# VALIDATION
# ============================================================================


class TestValidation:
    """Invalid data fails before any script is produced."""

    def test_invalid_data_raises(self, config):
        with pytest.raises(LayerDataError):
            generate_leaflet_javascript([layer([1, 2, 3])], config)

    def test_error_names_the_layer(self, config):
        layers = [layer(point_collection("pop", [1])), layer("nope")]
        with pytest.raises(LayerDataError, match="layer 2"):
            generate_leaflet_javascript(layers, config)


# ============================================================================
# STYLING FRAGMENTS
# ============================================================================


class TestStylingFragments:
    """Style functions and preprocessing emitted per layer."""

    def test_constant_color_layer(self, config):
        callback = generate_leaflet_javascript(
            [layer(point_collection("pop", [1, 2]), color="#ff7800")], config
        ).callback

        assert 'fillColor: "#ff7800"' in callback
        assert 'color: "#ff7800"' in callback
        assert "forEach" not in callback

    def test_style_function_and_point_markers(self, config):
        callback = generate_leaflet_javascript(
            [layer(point_collection("pop", [1, 2]))], config
        ).callback

        assert "var style1 = function(feature) {" in callback
        assert "L.circleMarker(latlng, style1(feature))" in callback
        assert "style: style1" in callback
        assert "radius: 3.0" in callback
        assert "fillColor" not in callback

    def test_classified_layer_preprocesses_then_scales(self, config):
        callback = generate_leaflet_javascript(
            [layer(point_collection("pop", [1, 5, 3]), color=AttributeRef("pop"))],
            config,
        ).callback

        assert "data1.features.forEach(function(feature) {" in callback
        assert '((feature.properties["pop"] - (1.0)) / 4.0)' in callback
        assert 'chroma.scale("YlGnBu")(feature.properties["pop"]).hex()' in callback
        assert callback.index("forEach") < callback.index("var style1")

    def test_categorical_index_map(self, config):
        callback = generate_leaflet_javascript(
            [layer(point_collection("kind", ["B", "A", "B", "C"]), color=AttributeRef("kind"))],
            config,
        ).callback

        assert '{"B": 0, "A": 1, "C": 2}[String(feature.properties["kind"])]' in callback
        assert 'chroma.scale("accent")' in callback

    def test_color_map_scale_used(self, config):
        callback = generate_leaflet_javascript(
            [
                layer(
                    point_collection("pop", [-3, 3]),
                    color=AttributeRef("pop"),
                    color_map="OrRd",
                )
            ],
            config,
        ).callback

        assert 'chroma.scale("OrRd")' in callback
        assert "RdYlBu" not in callback

    def test_render_metadata(self, config):
        script = generate_leaflet_javascript(
            [layer(point_collection("pop", [-3, 3]), color=AttributeRef("pop"))],
            config,
        )
        render = script.layers[0]

        assert render.variable == "layer1"
        assert render.classification.color_type is ColorType.DIVERGING
        assert render.style.scale == "RdYlBu"
