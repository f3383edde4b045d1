"""Data models package for typed layer, styling and classification structures."""

from .data_models import (
    AttributeRef,
    Classification,
    ColorType,
    Layer,
    LayerDataError,
    Literal,
    MapConfig,
    StyleConflictError,
    StyleValue,
    StylingOptions,
    TileProvider,
    # Helpers
    as_style_value,
    category_key,
    is_missing,
)

__all__ = [
    # Style values
    "AttributeRef",
    "Literal",
    "StyleValue",
    "as_style_value",
    # Layer models
    "Layer",
    "StylingOptions",
    "MapConfig",
    "TileProvider",
    # Classification
    "Classification",
    "ColorType",
    "category_key",
    "is_missing",
    # Errors
    "LayerDataError",
    "StyleConflictError",
]
