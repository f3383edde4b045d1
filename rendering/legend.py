#!/usr/bin/env python3
"""
Layer Legend

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Describe each layer's resolved fill rule as legend swatches
and render them as an HTML panel (display only).

Legend kinds:
1. constant: one swatch with the layer's constant color
2. categories: one swatch per category, in first-appearance order
3. ramp: evenly spaced stops from minimum to maximum

Scale colors come from the ColorBrewer tables shipped with plotly, sampled
with linear RGB interpolation as chroma.scale does.

Dependencies:
- plotly (plotly.colors ColorBrewer tables and sampling)

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

import html
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from plotly.colors import colorbrewer, make_colorscale, sample_colorscale, unlabel_rgb

from Leaflet_Map.models.data_models import ColorType
from Leaflet_Map.styling.expressions import Const

logger = logging.getLogger(__name__)

RAMP_STOPS = 5
DEFAULT_PANEL_WIDTH = 200


# ===========================================================================
# SCALE LOOKUP
# ===========================================================================


def _brewer_tables() -> Dict[str, List[str]]:
    return {
        name.lower(): colors
        for name, colors in vars(colorbrewer).items()
        if not name.startswith("_") and isinstance(colors, list)
    }


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Convert RGB components (0-255) to a hex color string."""
    return "#{:02x}{:02x}{:02x}".format(
        *(max(0, min(255, int(round(c)))) for c in (r, g, b))
    )


def sample_scale(scale: str, positions: Sequence[float]) -> Optional[List[str]]:
    """
    Sample a named ColorBrewer scale at [0, 1] positions.

    Args:
        scale: Scale name (case-insensitive, e.g. "YlGnBu", "accent")
        positions: Sample positions in [0, 1]

    Returns:
        Hex colors, or None if the scale is unknown
    """
    colors = _brewer_tables().get(scale.lower())
    if colors is None:
        logger.warning(f"⚠️ Color scale '{scale}' not found in ColorBrewer tables")
        return None
    if not positions:
        return []
    samples = sample_colorscale(make_colorscale(colors), list(positions))
    return [rgb_to_hex(*unlabel_rgb(color)) for color in samples]


# ===========================================================================
# LEGEND ENTRIES
# ===========================================================================


@dataclass(frozen=True)
class LegendEntry:
    """Legend block for one layer.

    Attributes:
        title: Layer name (or attribute name)
        kind: "constant", "categories" or "ramp"
        swatches: (label, hex color) pairs
    """

    title: str
    kind: str
    swatches: Tuple[Tuple[str, str], ...]


def _format_number(value: float) -> str:
    return f"{value:.4g}"


def build_legend_entry(render) -> Optional[LegendEntry]:
    """
    Build the legend entry for a rendered layer.

    Args:
        render: LayerRender from the script generator

    Returns:
        LegendEntry, or None when the layer has no fill rule to explain
    """
    style = render.style
    if style is None or style.fill_color is None:
        return None

    title = render.name or style.attribute or f"Layer {render.index}"

    if isinstance(style.fill_color, Const):
        return LegendEntry(
            title=title,
            kind="constant",
            swatches=((title, str(style.fill_color.value)),),
        )

    classification = render.classification

    if classification.color_type is ColorType.CATEGORICAL:
        labels = list(classification.categories)
        positions = [classification.normalize(label) for label in labels]
        colors = sample_scale(style.scale, positions) or []
        return LegendEntry(
            title=title, kind="categories", swatches=tuple(zip(labels, colors))
        )

    if classification.is_degenerate:
        positions = [classification.fallback_value]
        labels = [_format_number(classification.minimum)]
    else:
        positions = [i / (RAMP_STOPS - 1) for i in range(RAMP_STOPS)]
        labels = [
            _format_number(classification.minimum + p * classification.value_range)
            for p in positions
        ]
    colors = sample_scale(style.scale, positions) or []
    return LegendEntry(title=title, kind="ramp", swatches=tuple(zip(labels, colors)))


def build_legend(renders: Sequence) -> List[LegendEntry]:
    """Legend entries for every layer that has one, in layer order."""
    entries = (build_legend_entry(r) for r in renders)
    return [e for e in entries if e is not None]


# ===========================================================================
# LEGEND PANEL
# ===========================================================================


def generate_legend_panel_html(
    entries: Sequence[LegendEntry],
    panel_width: int = DEFAULT_PANEL_WIDTH,
) -> str:
    """
    Generate HTML for the legend panel (non-interactive, display only).

    Args:
        entries: Legend entries in layer order
        panel_width: Panel width in pixels

    Returns:
        HTML string, empty when there are no entries
    """
    if not entries:
        return ""

    blocks = []
    for entry in entries:
        items = []
        for label, color in entry.swatches:
            items.append(
                f'<div style="display: flex; align-items: center; margin: 4px 0;">'
                f'<span style="display: inline-block; width: 12px; height: 12px; '
                f'background-color: {html.escape(color)}; margin-right: 8px;"></span>'
                f'<span style="font-size: 11px;">{html.escape(label)}</span>'
                f"</div>"
            )
        blocks.append(
            f'<div style="margin-bottom: 8px;">'
            f'<div style="font-size: 12px; font-weight: 600;">{html.escape(entry.title)}</div>'
            f"{''.join(items)}"
            f"</div>"
        )

    return f"""
<div class="legend-panel" style="
    background: rgba(255, 255, 255, 0.95);
    border-radius: 8px;
    box-shadow: 0 2px 10px rgba(0, 0, 0, 0.15);
    padding: 10px;
    width: {panel_width}px;
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
">
    <div style="font-size: 13px; font-weight: 600; margin-bottom: 8px;">Legend</div>
{''.join(blocks)}
</div>
"""
