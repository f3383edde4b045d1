#!/usr/bin/env python3
"""
Unit tests for the Style Descriptor Builder and the style expression tree.

Tests:
1. Fill color resolution order (constant, color_map, defaults, none)
2. Constant color / color_map conflict
3. Channel set and per-feature evaluation
4. JavaScript serialization of expressions

Run with: python -m pytest _tests/test_style_builder.py -v
"""

import pytest

from Leaflet_Map.config_types import ClassificationConfig, ColorScalesConfig
from Leaflet_Map.models.data_models import (
    AttributeRef,
    Classification,
    ColorType,
    Literal,
    StyleConflictError,
    StylingOptions,
)
from Leaflet_Map.styling.color_classifier import classify
from Leaflet_Map.styling.expressions import (
    Attribute,
    Conditional,
    Const,
    HasValue,
    Normalize,
    ScaleLookup,
    ScaleSample,
    evaluate,
    to_js,
)
from Leaflet_Map.styling.style_builder import build_style, default_scale


# ============================================================================
# FIXTURES
# ============================================================================


def records(attribute, values):
    return [{attribute: v} for v in values]


@pytest.fixture
def sequential():
    return classify(records("pop", [1, 5, 3]), AttributeRef("pop"))


@pytest.fixture
def diverging():
    return classify(records("pop", [-2, 5, 1]), AttributeRef("pop"))


@pytest.fixture
def categorical():
    return classify(records("kind", ["B", "A", "C"]), AttributeRef("kind"))


# ============================================================================
# FILL COLOR RESOLUTION
# ============================================================================


class TestFillColorResolution:
    """First matching rule wins."""

    def test_constant_color(self):
        options = StylingOptions(color="#ff7800")
        style = build_style(options, Classification.none())

        assert style.fill_color == Const("#ff7800")
        assert style.color == Const("#ff7800")
        assert style.normalization is None
        assert not style.needs_preprocessing

    def test_color_map_overrides_default(self, sequential):
        options = StylingOptions(color=AttributeRef("pop"), color_map="OrRd")
        style = build_style(options, sequential)

        assert style.scale == "OrRd"
        assert style.fill_color.then == ScaleLookup("OrRd", Attribute("pop"))

    def test_sequential_default(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)
        assert style.scale == "YlGnBu"
        assert style.color_type is ColorType.SEQUENTIAL

    def test_diverging_default(self, diverging):
        style = build_style(StylingOptions(color=AttributeRef("pop")), diverging)
        assert style.scale == "RdYlBu"

    def test_categorical_default(self, categorical):
        style = build_style(StylingOptions(color=AttributeRef("kind")), categorical)
        assert style.scale == "accent"

    def test_configured_default_scales(self, sequential):
        scales = ColorScalesConfig(sequential="Greens")
        style = build_style(
            StylingOptions(color=AttributeRef("pop")), sequential, scales=scales
        )
        assert style.scale == "Greens"

    def test_no_classification_no_fill_rule(self):
        style = build_style(StylingOptions(color=AttributeRef("pop")), Classification.none())

        assert style.fill_color is None
        assert "fillColor" not in dict(style.channels())

    def test_no_color_option(self):
        style = build_style(StylingOptions(), Classification.none())

        assert [key for key, _ in style.channels()] == [
            "radius",
            "weight",
            "opacity",
            "fillOpacity",
        ]

    def test_missing_value_guard(self, sequential):
        config = ClassificationConfig(missing_color="#000000")
        style = build_style(
            StylingOptions(color=AttributeRef("pop")),
            sequential,
            classification_config=config,
        )

        assert style.fill_color == Conditional(
            HasValue("pop"),
            ScaleLookup("YlGnBu", Attribute("pop")),
            Const("#000000"),
        )

    def test_default_scale_for_none(self):
        assert default_scale(ColorType.NONE, ColorScalesConfig()) is None


# ============================================================================
# CONFLICTS
# ============================================================================


class TestStyleConflicts:
    """A constant color never combines with a scale."""

    def test_options_reject_constant_with_color_map(self):
        with pytest.raises(StyleConflictError):
            StylingOptions(color="#ff0000", color_map="OrRd")

    def test_builder_rejects_constant_with_classification(self, sequential):
        with pytest.raises(StyleConflictError):
            build_style(StylingOptions(color="#ff0000"), sequential)

    def test_conflict_is_a_value_error(self):
        with pytest.raises(ValueError):
            StylingOptions(color=Literal("red"), color_map="Blues")

    def test_numeric_color_rejected(self):
        with pytest.raises(TypeError):
            StylingOptions(color=3)

    def test_empty_color_map_is_unset(self):
        options = StylingOptions(color="#ff0000", color_map="")
        assert options.color_map is None


# ============================================================================
# EVALUATION
# ============================================================================


class TestEvaluation:
    """StyleDescriptor.evaluate mirrors the generated style function."""

    def test_literal_channels(self):
        options = StylingOptions(marker_size=6, border_width=1, opacity=0.8, fill_opacity=0.3)
        style = build_style(options, Classification.none())

        assert style.evaluate({}) == {
            "radius": 6,
            "weight": 1,
            "opacity": 0.8,
            "fillOpacity": 0.3,
        }

    def test_attribute_driven_marker_size(self):
        options = StylingOptions(marker_size=AttributeRef("size"))
        style = build_style(options, Classification.none())

        assert style.radius == Attribute("size")
        assert style.evaluate({"size": 12})["radius"] == 12

    def test_fill_uses_normalized_value(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)

        assert style.evaluate({"pop": 5})["fillColor"] == ScaleSample("YlGnBu", 1.0)
        assert style.evaluate({"pop": 1})["fillColor"] == ScaleSample("YlGnBu", 0.0)

    def test_attribute_color_leaves_stroke_default(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)

        assert style.color is None
        assert "color" not in style.evaluate({"pop": 3})

    def test_missing_value_gets_missing_color(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)
        assert style.evaluate({"other": 1})["fillColor"] == "#cccccc"

    def test_numeric_string_gets_missing_color(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)
        assert style.evaluate({"pop": "3"})["fillColor"] == "#cccccc"

    def test_categorical_positions(self, categorical):
        style = build_style(StylingOptions(color=AttributeRef("kind")), categorical)

        assert style.evaluate({"kind": "A"})["fillColor"] == ScaleSample("accent", 0.5)
        assert style.evaluate({"kind": "C"})["fillColor"] == ScaleSample("accent", 1.0)

    def test_evaluate_does_not_mutate_properties(self, sequential):
        style = build_style(StylingOptions(color=AttributeRef("pop")), sequential)
        properties = {"pop": 5}
        style.evaluate(properties)

        assert properties == {"pop": 5}

    def test_expression_evaluate(self):
        expr = Conditional(HasValue("a"), Attribute("a"), Const("none"))

        assert evaluate(expr, {"a": 2}) == 2
        assert evaluate(expr, {"a": None}) == "none"
        assert evaluate(expr, {}) == "none"


# ============================================================================
# JAVASCRIPT SERIALIZATION
# ============================================================================


class TestToJs:
    """Expressions serialize to the JavaScript the page runs."""

    def test_constants(self):
        assert to_js(Const("#ff0000")) == '"#ff0000"'
        assert to_js(Const(2.5)) == "2.5"
        assert to_js(Const(None)) == "null"

    def test_attribute_access_is_quoted(self):
        assert to_js(Attribute("pop")) == 'feature.properties["pop"]'
        assert to_js(Attribute('a"b')) == 'feature.properties["a\\"b"]'

    def test_has_value(self):
        assert to_js(HasValue("pop")) == '(feature.properties["pop"] != null)'

    def test_scale_lookup(self):
        js = to_js(ScaleLookup("YlGnBu", Attribute("pop")))
        assert js == 'chroma.scale("YlGnBu")(feature.properties["pop"]).hex()'

    def test_conditional(self):
        js = to_js(Conditional(HasValue("a"), Const(1), Const(0)))
        assert js == '((feature.properties["a"] != null) ? 1 : 0)'

    def test_numeric_normalize(self, sequential):
        js = to_js(Normalize(Attribute("pop"), sequential))
        assert js == (
            '(typeof feature.properties["pop"] === "number" ? '
            '((feature.properties["pop"] - (1.0)) / 4.0) : null)'
        )

    def test_categorical_normalize(self, categorical):
        js = to_js(Normalize(Attribute("kind"), categorical))
        assert js == (
            '({"B": 0, "A": 1, "C": 2}[String(feature.properties["kind"])] / 2)'
        )

    def test_degenerate_normalize_is_constant(self):
        constant = classify(records("pop", [4, 4]), AttributeRef("pop"))
        assert to_js(Normalize(Attribute("pop"), constant)) == (
            '(typeof feature.properties["pop"] === "number" ? 0.5 : null)'
        )

    def test_single_category_normalize_is_constant(self):
        single = classify(records("kind", ["x", "x"]), AttributeRef("kind"))
        assert to_js(Normalize(Attribute("kind"), single)) == "0.0"

    def test_custom_feature_variable(self):
        assert to_js(Attribute("pop"), feature_var="f") == 'f.properties["pop"]'
