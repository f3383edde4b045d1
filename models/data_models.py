"""
Typed data models for layers, styling options and classifications.

Architectural Overview:
=======================
This module contains the immutable dataclasses that flow through the style
engine. Option values are resolved once into a tagged variant
(Literal | AttributeRef) so nothing downstream re-inspects raw Python types.

Key Interactions:
-----------------
- Input: Callers build Layer / MapConfig objects (or Map does it for them)
- Derived: color_classifier produces Classification per layer
- Output: style_builder and script_generator consume these types
- Navigation: Use VS Code outline (Ctrl+Shift+O) for quick navigation

MODIFICATION POINT: Add new ColorType values here for new scale families
"""

import math
import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import pandas as pd


# ═══════════════════════════════════════════════════════════════════════════
# ⚠️ EXCEPTIONS SECTION
# ═══════════════════════════════════════════════════════════════════════════


class LayerDataError(ValueError):
    """Layer data is not a recognized geometry or feature collection."""


class StyleConflictError(ValueError):
    """Styling options that cannot be combined (constant color + color_map)."""


# ═══════════════════════════════════════════════════════════════════════════
# 🏷️ STYLE VALUE VARIANT SECTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Literal:
    """A style value emitted as-is (number or string)."""

    value: Union[int, float, str]


@dataclass(frozen=True)
class AttributeRef:
    """A style value read from each feature's properties at render time.

    Usage:
        Layer.from_options(gdf, color=AttributeRef("population"))
    """

    name: str

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"attribute name must be a non-empty string, got {self.name!r}")


StyleValue = Union[Literal, AttributeRef]


def as_style_value(value: Any) -> StyleValue:
    """Resolve a raw option value into Literal or AttributeRef.

    Args:
        value: Number, string, Literal or AttributeRef

    Returns:
        The tagged style value

    Raises:
        TypeError: If the value is neither a number nor a string
    """
    if isinstance(value, (Literal, AttributeRef)):
        return value
    if isinstance(value, bool):
        raise TypeError(f"boolean is not a valid style value: {value!r}")
    if isinstance(value, numbers.Real):
        # numpy scalars become plain Python numbers
        return Literal(value.item() if hasattr(value, "item") else value)
    if isinstance(value, str):
        return Literal(value)
    raise TypeError(
        f"style value must be a number, string or AttributeRef, got {type(value).__name__}"
    )


# ═══════════════════════════════════════════════════════════════════════════
# 🎨 STYLING OPTIONS SECTION
# ═══════════════════════════════════════════════════════════════════════════

OPTION_NAMES: Tuple[str, ...] = (
    "marker_size",
    "border_width",
    "opacity",
    "fill_opacity",
    "color",
    "color_map",
)


@dataclass(frozen=True)
class StylingOptions:
    """Per-layer styling options.

    Raw values passed to the constructor are resolved in __post_init__, so a
    StylingOptions instance only ever holds Literal / AttributeRef values.

    Attributes:
        marker_size: circleMarker radius
        border_width: Stroke weight
        opacity: Stroke opacity
        fill_opacity: Fill opacity
        color: None, a constant color Literal, or an AttributeRef to classify
        color_map: Optional chroma.js scale name applied to the attribute
    """

    marker_size: Any = 3.0
    border_width: Any = 2.0
    opacity: Any = 0.5
    fill_opacity: Any = 0.5
    color: Any = None
    color_map: Optional[str] = None

    def __post_init__(self) -> None:
        # Frozen dataclass - use object.__setattr__ for normalization
        for name in ("marker_size", "border_width", "opacity", "fill_opacity"):
            object.__setattr__(self, name, as_style_value(getattr(self, name)))
        if self.color is not None:
            object.__setattr__(self, "color", as_style_value(self.color))
            if isinstance(self.color, Literal) and not isinstance(self.color.value, str):
                raise TypeError(
                    f"color must be a color string or AttributeRef, got {self.color.value!r}"
                )
        if self.color_map is not None and not isinstance(self.color_map, str):
            raise TypeError(f"color_map must be a scale name, got {self.color_map!r}")
        if self.color_map == "":
            object.__setattr__(self, "color_map", None)

        if self.constant_color is not None and self.color_map is not None:
            raise StyleConflictError(
                f"constant color {self.constant_color!r} cannot be combined "
                f"with color_map {self.color_map!r}"
            )

    @property
    def color_attribute(self) -> Optional[str]:
        """Name of the attribute driving the fill color, if any."""
        if isinstance(self.color, AttributeRef):
            return self.color.name
        return None

    @property
    def constant_color(self) -> Optional[str]:
        """Constant color string, if the color option is a literal string."""
        if isinstance(self.color, Literal) and isinstance(self.color.value, str):
            return self.color.value
        return None

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "StylingOptions":
        """Create StylingOptions from a dictionary, rejecting unknown keys."""
        unknown = sorted(set(d) - set(OPTION_NAMES))
        if unknown:
            raise ValueError(f"Unknown styling options: {unknown}")
        return cls(**dict(d))


# ═══════════════════════════════════════════════════════════════════════════
# 📊 CLASSIFICATION SECTION
# ═══════════════════════════════════════════════════════════════════════════


class ColorType(Enum):
    """Distribution shape of the color-driving attribute."""

    NONE = "nothing"
    CATEGORICAL = "categorical"
    SEQUENTIAL = "sequential"
    DIVERGING = "diverging"


@dataclass(frozen=True)
class Classification:
    """Classification of a layer attribute plus its normalization parameters.

    Categorical classifications carry categories in first-appearance order;
    numeric ones carry minimum / maximum / value_range (already symmetrized
    for DIVERGING). fallback_value is the normalized value used when the
    division is degenerate (one category, or zero range).
    """

    color_type: ColorType = ColorType.NONE
    attribute: Optional[str] = None
    categories: Tuple[str, ...] = ()
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    value_range: Optional[float] = None
    fallback_value: float = 0.0

    @classmethod
    def none(cls) -> "Classification":
        return cls()

    @property
    def is_numeric(self) -> bool:
        return self.color_type in (ColorType.SEQUENTIAL, ColorType.DIVERGING)

    @property
    def count(self) -> int:
        """Number of categories (0 for non-categorical)."""
        return len(self.categories)

    @property
    def is_degenerate(self) -> bool:
        """True when every value normalizes to fallback_value."""
        if self.color_type is ColorType.CATEGORICAL:
            return self.count == 1
        if self.is_numeric:
            return self.value_range == 0
        return False

    @property
    def category_index(self) -> Dict[str, int]:
        """Insertion-ordered category -> index mapping."""
        return {category: i for i, category in enumerate(self.categories)}

    def normalize(self, value: Any) -> Optional[float]:
        """Normalize a raw attribute value into [0, 1].

        Returns None for missing values, unknown categories, non-numeric
        values of a numeric attribute, or when there is no classification.
        """
        if self.color_type is ColorType.NONE or is_missing(value):
            return None

        if self.color_type is ColorType.CATEGORICAL:
            index = self.category_index.get(category_key(value))
            if index is None:
                return None
            if self.is_degenerate:
                return self.fallback_value
            return index / (self.count - 1)

        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return None
        if not math.isfinite(value):
            return None
        if self.is_degenerate:
            return self.fallback_value
        return (float(value) - self.minimum) / self.value_range

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging / JSON serialization."""
        return {
            "color_type": self.color_type.value,
            "attribute": self.attribute,
            "categories": list(self.categories),
            "minimum": self.minimum,
            "maximum": self.maximum,
            "range": self.value_range,
        }


def is_missing(value: Any) -> bool:
    """True for None, NaN and pandas NA (a feature without a usable value)."""
    return bool(pd.api.types.is_scalar(value) and pd.isna(value))


def category_key(value: Any) -> str:
    """Key used for a category, matching JavaScript's String(value)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# ═══════════════════════════════════════════════════════════════════════════
# 🗺️ LAYER AND MAP CONFIG SECTION
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Layer:
    """A geometry / feature collection plus its styling options.

    data may be a GeoJSON mapping, shapely geometry, GeoDataFrame, GeoSeries
    or any object exposing __geo_interface__. It is validated when the
    render script is generated.
    """

    data: Any
    options: StylingOptions = field(default_factory=StylingOptions)
    name: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        data: Any,
        name: Optional[str] = None,
        defaults: Optional[Mapping[str, Any]] = None,
        **options: Any,
    ) -> "Layer":
        """Build a layer from keyword styling options over defaults.

        Args:
            data: Geometry / feature collection
            name: Optional display name (used in the legend)
            defaults: Base option values (LayerDefaultsConfig.to_dict())
            **options: marker_size, border_width, opacity, fill_opacity,
                color, color_map

        Returns:
            Layer instance
        """
        merged: Dict[str, Any] = dict(defaults or {})
        merged.update(options)
        return cls(data=data, options=StylingOptions.from_dict(merged), name=name)


@dataclass(frozen=True)
class TileProvider:
    """Base layer tile provider: URL template plus Leaflet tileLayer options."""

    url: str
    options: Dict[str, Any] = field(default_factory=dict)
    name: str = ""


@dataclass(frozen=True)
class MapConfig:
    """Map container and initial view.

    Attributes:
        width: Container width in pixels
        height: Container minimum height in pixels
        center: (lat, lon) initial view center
        zoom: Initial zoom level
        provider: Base layer tile provider
        id: Unique element id (uuid4 string)
    """

    width: int
    height: int
    center: Tuple[float, float]
    zoom: int
    provider: TileProvider
    id: str

    @property
    def container_id(self) -> str:
        """DOM id of the map container element."""
        return f"map{self.id}"
