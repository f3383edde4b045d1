#!/usr/bin/env python3
"""
Style Descriptor Builder

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Turn a layer's StylingOptions plus its Classification into a
StyleDescriptor: one expression per Leaflet path option.

Channel mapping (Leaflet option <- styling option):
- radius      <- marker_size
- color       <- color (stroke; constant colors only, Leaflet default otherwise)
- weight      <- border_width
- opacity     <- opacity
- fillOpacity <- fill_opacity
- fillColor   <- resolved fill rule (see build_style)

Only fillColor depends on the classification. Every other channel is a
literal or a plain attribute read.

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from Leaflet_Map.config_types import ClassificationConfig, ColorScalesConfig
from Leaflet_Map.models.data_models import (
    AttributeRef,
    Classification,
    ColorType,
    Literal,
    StyleConflictError,
    StyleValue,
    StylingOptions,
)
from Leaflet_Map.styling.expressions import (
    Attribute,
    Conditional,
    Const,
    Expr,
    HasValue,
    Normalize,
    ScaleLookup,
    evaluate,
)

logger = logging.getLogger(__name__)


# ===========================================================================
# STYLE DESCRIPTOR
# ===========================================================================


@dataclass(frozen=True)
class StyleDescriptor:
    """
    Resolved per-layer style rules.

    Attributes:
        radius, weight, opacity, fill_opacity: Always-present channels
        color: Stroke color channel, None unless the layer sets a constant color
        fill_color: Fill color rule, None when no rule applies
        normalization: Per-feature preprocessing expression that rewrites the
            color attribute into its normalized value, None when not classified
        color_type: Classification the fill rule was resolved for
        scale: chroma.js scale name used by fill_color, if any
        attribute: Color attribute name, if any
    """

    radius: Expr
    weight: Expr
    opacity: Expr
    fill_opacity: Expr
    color: Optional[Expr] = None
    fill_color: Optional[Expr] = None
    normalization: Optional[Expr] = None
    color_type: ColorType = ColorType.NONE
    scale: Optional[str] = None
    attribute: Optional[str] = None

    def channels(self) -> List[Tuple[str, Expr]]:
        """Leaflet option name / expression pairs in emission order."""
        pairs: List[Tuple[str, Optional[Expr]]] = [
            ("radius", self.radius),
            ("color", self.color),
            ("weight", self.weight),
            ("opacity", self.opacity),
            ("fillOpacity", self.fill_opacity),
            ("fillColor", self.fill_color),
        ]
        return [(key, expr) for key, expr in pairs if expr is not None]

    def evaluate(self, properties: Mapping[str, Any]) -> Dict[str, Any]:
        """Evaluate every channel for one feature, as the page would.

        The normalization step runs first, rewriting the color attribute,
        then each channel is evaluated against the rewritten properties.
        """
        if self.normalization is not None:
            properties = dict(properties)
            properties[self.attribute] = evaluate(self.normalization, properties)
        return {key: evaluate(expr, properties) for key, expr in self.channels()}

    @property
    def needs_preprocessing(self) -> bool:
        return self.normalization is not None


# ===========================================================================
# CHANNEL RESOLUTION
# ===========================================================================


def option_expression(value: StyleValue) -> Expr:
    """Literal -> Const, AttributeRef -> Attribute read."""
    if isinstance(value, AttributeRef):
        return Attribute(value.name)
    if isinstance(value, Literal):
        return Const(value.value)
    raise TypeError(f"Expected Literal or AttributeRef, got {type(value).__name__}")


def default_scale(color_type: ColorType, scales: ColorScalesConfig) -> Optional[str]:
    """Default chroma.js scale for a classification type."""
    return {
        ColorType.SEQUENTIAL: scales.sequential,
        ColorType.DIVERGING: scales.diverging,
        ColorType.CATEGORICAL: scales.categorical,
    }.get(color_type)


def normalization_expression(classification: Classification) -> Expr:
    """Normalized value of the classified attribute, null when missing."""
    attribute = classification.attribute
    return Conditional(
        HasValue(attribute),
        Normalize(Attribute(attribute), classification),
        Const(None),
    )


# ===========================================================================
# BUILDER
# ===========================================================================


def build_style(
    options: StylingOptions,
    classification: Classification,
    scales: Optional[ColorScalesConfig] = None,
    classification_config: Optional[ClassificationConfig] = None,
) -> StyleDescriptor:
    """
    Build the style descriptor for one layer.

    Fill color resolution (first match wins):
        1. constant color string -> that constant
        2. color_map set         -> named scale on the normalized attribute
        3. SEQUENTIAL            -> default sequential scale
        4. DIVERGING             -> default diverging scale
        5. CATEGORICAL           -> default categorical scale
        6. otherwise             -> no fillColor rule

    Args:
        options: Layer styling options
        classification: Result of classify() for the layer
        scales: Default color scales
        classification_config: Supplies the missing-value fill color

    Returns:
        StyleDescriptor

    Raises:
        StyleConflictError: constant color combined with color_map, or with
            an attribute classification
    """
    scales = scales or ColorScalesConfig()
    classification_config = classification_config or ClassificationConfig()

    channels = dict(
        radius=option_expression(options.marker_size),
        weight=option_expression(options.border_width),
        opacity=option_expression(options.opacity),
        fill_opacity=option_expression(options.fill_opacity),
    )

    constant = options.constant_color
    if constant is not None:
        if options.color_map is not None:
            raise StyleConflictError(
                f"constant color {constant!r} cannot be combined with "
                f"color_map {options.color_map!r}"
            )
        if classification.color_type is not ColorType.NONE:
            raise StyleConflictError(
                f"constant color {constant!r} cannot be used with a "
                f"{classification.color_type.value} classification"
            )
        return StyleDescriptor(
            color=Const(constant), fill_color=Const(constant), **channels
        )

    if classification.color_type is ColorType.NONE:
        return StyleDescriptor(**channels)

    scale = options.color_map or default_scale(classification.color_type, scales)
    attribute = classification.attribute
    fill_color = Conditional(
        HasValue(attribute),
        ScaleLookup(scale, Attribute(attribute)),
        Const(classification_config.missing_color),
    )

    logger.debug(
        f"Fill color for '{attribute}': {classification.color_type.value} "
        f"scale '{scale}'"
    )

    return StyleDescriptor(
        fill_color=fill_color,
        normalization=normalization_expression(classification),
        color_type=classification.color_type,
        scale=scale,
        attribute=attribute,
        **channels,
    )
