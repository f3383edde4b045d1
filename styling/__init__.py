#!/usr/bin/env python3
"""
Styling Package

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Decide how each layer is colored and styled.

Modules:
- color_classifier: categorical / sequential / diverging classification
- expressions: style expression tree, Python evaluation and JS serialization
- style_builder: StyleDescriptor from StylingOptions + Classification

Usage:
    from Leaflet_Map.styling import classify, build_style

    classification = classify(features, options.color)
    style = build_style(options, classification)

Navigation Guide:
- Each module has its own docstring with function list
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

# ===========================================================================
# COLOR CLASSIFIER
# ===========================================================================

from Leaflet_Map.styling.color_classifier import (
    classify,
    extract_attribute_values,
    feature_properties,
    normalize_values,
)

# ===========================================================================
# EXPRESSIONS
# ===========================================================================

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

# ===========================================================================
# STYLE BUILDER
# ===========================================================================

from Leaflet_Map.styling.style_builder import (
    StyleDescriptor,
    build_style,
    default_scale,
)

__all__ = [
    # Classifier
    "classify",
    "extract_attribute_values",
    "feature_properties",
    "normalize_values",
    # Expressions
    "Attribute",
    "Conditional",
    "Const",
    "HasValue",
    "Normalize",
    "ScaleLookup",
    "ScaleSample",
    "evaluate",
    "to_js",
    # Style builder
    "StyleDescriptor",
    "build_style",
    "default_scale",
]
