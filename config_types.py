"""
═══════════════════════════════════════════════════════════════════════════════
📋 UNIFIED CONFIGURATION TYPES
═══════════════════════════════════════════════════════════════════════════════

ARCHITECTURAL OVERVIEW
----------------------
Responsibility: Define the configuration dataclasses for the Leaflet layer map.
Wraps the CONFIG dictionary in typed, validated, immutable objects.

Usage:
    from Leaflet_Map.config import CONFIG
    from Leaflet_Map.config_types import AppConfig

    # Create once at application startup
    app_config = AppConfig.from_dict(CONFIG)

    scale = app_config.color_scales.sequential

For Navigation: Use VS Code outline (Ctrl+Shift+O)

NAVIGATION GUIDE
----------------
# ═════ 1. MAP DEFAULTS CONFIGURATION
# ═════ 2. LAYER DEFAULTS CONFIGURATION
# ═════ 3. COLOR SCALE CONFIGURATION
# ═════ 4. CLASSIFICATION CONFIGURATION
# ═════ 5. ASSETS AND OUTPUT CONFIGURATION
# ═════ 6. APP CONFIG (MASTER FACADE)

═══════════════════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import logging


# ═══════════════════════════════════════════════════════════════════════════════
# 🗺️ 1. MAP DEFAULTS CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class MapDefaultsConfig:
    """
    Default map container and view settings.

    Attributes:
        width: Container width in pixels.
        height: Container minimum height in pixels.
        center: (lat, lon) initial view center.
        zoom: Initial zoom level.
        provider: Registered tile provider name.
    """

    width: int = 900
    height: int = 500
    center: Tuple[float, float] = (0.0, 0.0)
    zoom: int = 11
    provider: str = "OpenStreetMap"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"map width/height must be > 0, got {self.width}x{self.height}"
            )
        if len(self.center) != 2:
            raise ValueError(f"center must be [lat, lon], got {self.center}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "MapDefaultsConfig":
        """Create MapDefaultsConfig from CONFIG['map'] dictionary."""
        center = d.get("center", [0.0, 0.0])
        return cls(
            width=int(d.get("width", 900)),
            height=int(d.get("height", 500)),
            center=(float(center[0]), float(center[1])),
            zoom=int(d.get("zoom", 11)),
            provider=d.get("provider", "OpenStreetMap"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "width": self.width,
            "height": self.height,
            "center": list(self.center),
            "zoom": self.zoom,
            "provider": self.provider,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 🎨 2. LAYER DEFAULTS CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LayerDefaultsConfig:
    """
    Default styling options for layers.

    Values stay untyped here; StylingOptions resolves them into
    Literal / AttributeRef when a layer is built.
    """

    marker_size: Any = 3.0
    border_width: Any = 2.0
    opacity: Any = 0.5
    fill_opacity: Any = 0.5
    color: Any = None
    color_map: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LayerDefaultsConfig":
        """Create LayerDefaultsConfig from CONFIG['layer_defaults'] dictionary."""
        return cls(
            marker_size=d.get("marker_size", 3.0),
            border_width=d.get("border_width", 2.0),
            opacity=d.get("opacity", 0.5),
            fill_opacity=d.get("fill_opacity", 0.5),
            color=d.get("color"),
            color_map=d.get("color_map"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to keyword dictionary for StylingOptions."""
        return {
            "marker_size": self.marker_size,
            "border_width": self.border_width,
            "opacity": self.opacity,
            "fill_opacity": self.fill_opacity,
            "color": self.color,
            "color_map": self.color_map,
        }


# ═══════════════════════════════════════════════════════════════════════════════
# 🌈 3. COLOR SCALE CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ColorScalesConfig:
    """Default chroma.js scale names per classification type."""

    sequential: str = "YlGnBu"
    diverging: str = "RdYlBu"
    categorical: str = "accent"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ColorScalesConfig":
        """Create ColorScalesConfig from CONFIG['color_scales'] dictionary."""
        return cls(
            sequential=d.get("sequential", "YlGnBu"),
            diverging=d.get("diverging", "RdYlBu"),
            categorical=d.get("categorical", "accent"),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# 📊 4. CLASSIFICATION CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class ClassificationConfig:
    """
    Fallbacks for degenerate classification inputs.

    Attributes:
        single_category_value: Normalized value when only one category exists.
        constant_range_value: Normalized value when max == min.
        missing_color: Fill color for features without the color attribute.
    """

    single_category_value: float = 0.0
    constant_range_value: float = 0.5
    missing_color: str = "#cccccc"

    def __post_init__(self) -> None:
        for name in ("single_category_value", "constant_range_value"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ClassificationConfig":
        """Create ClassificationConfig from CONFIG['classification'] dictionary."""
        return cls(
            single_category_value=float(d.get("single_category_value", 0.0)),
            constant_range_value=float(d.get("constant_range_value", 0.5)),
            missing_color=d.get("missing_color", "#cccccc"),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# 📦 5. ASSETS AND OUTPUT CONFIGURATION
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AssetsConfig:
    """URLs of the scripts and stylesheets the page imports."""

    leaflet_js: str = "https://unpkg.com/leaflet@1.7.1/dist/leaflet.js"
    leaflet_css: str = "https://unpkg.com/leaflet@1.7.1/dist/leaflet.css"
    chroma_js: str = (
        "https://cdnjs.cloudflare.com/ajax/libs/chroma-js/1.3.3/chroma.min.js"
    )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AssetsConfig":
        """Create AssetsConfig from CONFIG['assets'] dictionary."""
        defaults = cls()
        return cls(
            leaflet_js=d.get("leaflet_js", defaults.leaflet_js),
            leaflet_css=d.get("leaflet_css", defaults.leaflet_css),
            chroma_js=d.get("chroma_js", defaults.chroma_js),
        )

    @property
    def scripts(self) -> Tuple[str, ...]:
        """Script URLs in load order."""
        return (self.leaflet_js, self.chroma_js)

    @property
    def stylesheets(self) -> Tuple[str, ...]:
        """Stylesheet URLs."""
        return (self.leaflet_css,)


@dataclass(frozen=True)
class OutputConfig:
    """Output page settings."""

    output_dir: str = "Output"
    filename: str = "leaflet_map.html"
    title: str = "Leaflet Layer Map"
    show_legend: bool = True

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OutputConfig":
        """Create OutputConfig from CONFIG['output'] dictionary."""
        return cls(
            output_dir=d.get("output_dir", "Output"),
            filename=d.get("filename", "leaflet_map.html"),
            title=d.get("title", "Leaflet Layer Map"),
            show_legend=d.get("show_legend", True),
        )

    @property
    def output_path(self) -> Path:
        """Default output file as relative Path object."""
        return Path(self.output_dir) / self.filename


# ═══════════════════════════════════════════════════════════════════════════════
# 🏛️ 6. APP CONFIG (MASTER FACADE)
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AppConfig:
    """
    Master configuration facade.

    Groups every typed section so callers take one object instead of
    reaching into the CONFIG dictionary.
    """

    map_defaults: MapDefaultsConfig = field(default_factory=MapDefaultsConfig)
    layer_defaults: LayerDefaultsConfig = field(default_factory=LayerDefaultsConfig)
    color_scales: ColorScalesConfig = field(default_factory=ColorScalesConfig)
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AppConfig":
        """Create AppConfig from the full CONFIG dictionary."""
        return cls(
            map_defaults=MapDefaultsConfig.from_dict(d.get("map", {})),
            layer_defaults=LayerDefaultsConfig.from_dict(d.get("layer_defaults", {})),
            color_scales=ColorScalesConfig.from_dict(d.get("color_scales", {})),
            classification=ClassificationConfig.from_dict(
                d.get("classification", {})
            ),
            assets=AssetsConfig.from_dict(d.get("assets", {})),
            output=OutputConfig.from_dict(d.get("output", {})),
            log_level=d.get("logging", {}).get("level", "INFO"),
        )

    @property
    def logging_level(self) -> int:
        """Numeric logging level, INFO if the name is unknown."""
        level = logging.getLevelName(str(self.log_level).upper())
        return level if isinstance(level, int) else logging.INFO


def default_app_config() -> AppConfig:
    """Build the AppConfig from the module-level CONFIG dictionary."""
    from Leaflet_Map.config import CONFIG

    return AppConfig.from_dict(CONFIG)
