"""
Leaflet map builder - main orchestrator.

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Hold the layers and map config of one map and turn them into
a render script, a standalone HTML page, or a notebook display.

Key Features:
- Unique container id per map (uuid4)
- Script regenerated on every request (no cached styles)
- Standalone HTML output with optional legend
- Notebook display through _repr_html_

Usage:
    from Leaflet_Map import Map, make_layer, AttributeRef

    counties = make_layer(gdf, color=AttributeRef("population"))
    m = Map(layers=[counties], zoom=6)
    html_path = m.save("output/counties.html")

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import html
import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from Leaflet_Map.config_types import AppConfig, default_app_config
from Leaflet_Map.models.data_models import Layer, MapConfig, TileProvider
from Leaflet_Map.rendering.html_template import generate_html
from Leaflet_Map.rendering.legend import (
    LegendEntry,
    build_legend,
    generate_legend_panel_html,
)
from Leaflet_Map.rendering.providers import get_provider
from Leaflet_Map.rendering.script_generator import (
    RenderScript,
    generate_leaflet_javascript,
)

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# 🧱 LAYER CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════════════


def make_layer(
    data: Any,
    name: Optional[str] = None,
    app_config: Optional[AppConfig] = None,
    **options: Any,
) -> Layer:
    """
    Build a layer with configured default styling options.

    Args:
        data: Geometry / feature collection (GeoJSON, shapely, geopandas)
        name: Optional display name for the legend
        app_config: Supplies the layer defaults (CONFIG['layer_defaults'])
        **options: marker_size, border_width, opacity, fill_opacity, color,
            color_map

    Returns:
        Layer
    """
    app_config = app_config or default_app_config()
    return Layer.from_options(
        data, name=name, defaults=app_config.layer_defaults.to_dict(), **options
    )


# ═══════════════════════════════════════════════════════════════════════════════
# 🗺️ MAP
# ═══════════════════════════════════════════════════════════════════════════════


class Map:
    """
    A Leaflet map of feature layers.

    Args:
        layers: A Layer or a sequence of Layers, drawn in order
        center: (lat, lon) initial view center
        width: Container width in pixels
        height: Container minimum height in pixels
        zoom: Initial zoom level
        provider: TileProvider or registered provider name
        app_config: Defaults, color scales and assets

    Unset arguments fall back to CONFIG['map'].
    """

    def __init__(
        self,
        layers: Union[Layer, Sequence[Layer], None] = None,
        center: Optional[Tuple[float, float]] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        zoom: Optional[int] = None,
        provider: Union[str, TileProvider, None] = None,
        app_config: Optional[AppConfig] = None,
    ) -> None:
        self.app_config = app_config or default_app_config()
        defaults = self.app_config.map_defaults

        if layers is None:
            layers = []
        elif isinstance(layers, Layer):
            layers = [layers]
        for layer in layers:
            if not isinstance(layer, Layer):
                raise TypeError(f"Expected Layer, got {type(layer).__name__}")
        self.layers: Tuple[Layer, ...] = tuple(layers)

        width = defaults.width if width is None else width
        height = defaults.height if height is None else height
        if width <= 0 or height <= 0:
            raise ValueError(f"map width/height must be > 0, got {width}x{height}")

        center = defaults.center if center is None else center
        if len(center) != 2:
            raise ValueError(f"center must be (lat, lon), got {center}")

        self.config = MapConfig(
            width=int(width),
            height=int(height),
            center=(float(center[0]), float(center[1])),
            zoom=defaults.zoom if zoom is None else int(zoom),
            provider=get_provider(defaults.provider if provider is None else provider),
            id=str(uuid.uuid4()),
        )

    def __repr__(self) -> str:
        return (
            f"Map(layers={len(self.layers)}, center={self.config.center}, "
            f"zoom={self.config.zoom}, id={self.config.id!r})"
        )

    # === SCRIPT ===

    @property
    def script(self) -> RenderScript:
        """Freshly generated render script."""
        return generate_leaflet_javascript(self.layers, self.config, self.app_config)

    def legend(self, script: Optional[RenderScript] = None) -> List[LegendEntry]:
        """Legend entries for the layers' fill rules."""
        script = script or self.script
        return build_legend(script.layers)

    # === HTML ===

    def to_html(self, title: Optional[str] = None, show_legend: Optional[bool] = None) -> str:
        """
        Render the map as a standalone HTML page.

        Args:
            title: Page title (CONFIG['output']['title'] if None)
            show_legend: Include the legend panel (CONFIG default if None)

        Returns:
            Complete HTML string
        """
        output = self.app_config.output
        title = output.title if title is None else title
        show_legend = output.show_legend if show_legend is None else show_legend

        script = self.script
        legend_html = ""
        if show_legend:
            legend_html = generate_legend_panel_html(self.legend(script))

        return generate_html(
            callback=script.callback,
            config=self.config,
            assets=self.app_config.assets,
            title=title,
            legend_html=legend_html,
        )

    def save(
        self,
        output_path: Union[str, Path, None] = None,
        title: Optional[str] = None,
        show_legend: Optional[bool] = None,
    ) -> str:
        """
        Write the standalone HTML page.

        Args:
            output_path: Target file (CONFIG['output'] location if None)
            title: Page title
            show_legend: Include the legend panel

        Returns:
            Absolute path to the generated HTML file
        """
        logger.info("=" * 60)
        logger.info("🚀 GENERATING LEAFLET MAP")
        logger.info("=" * 60)

        html_content = self.to_html(title=title, show_legend=show_legend)

        output_path = Path(
            self.app_config.output.output_path if output_path is None else output_path
        )
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html_content, encoding="utf-8")

        file_size_kb = len(html_content.encode("utf-8")) / 1024
        logger.info(f"   ✅ Generated HTML: {output_path}")
        logger.info(f"   📊 File size: {file_size_kb:.1f} KB")
        logger.info(f"   📍 Layers: {len(self.layers)}")
        logger.info("=" * 60)

        return str(output_path.absolute())

    def _repr_html_(self) -> str:
        """Notebook display: the standalone page inside an iframe."""
        page = self.to_html()
        return (
            f'<iframe srcdoc="{html.escape(page, quote=True)}" '
            f'width="100%" height="{self.config.height + 40}" '
            f'style="border: none;"></iframe>'
        )
