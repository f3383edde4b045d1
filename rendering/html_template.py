"""
HTML page assembly for the Leaflet layer map.

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Embed a generated render script into a standalone HTML page.

Key Features:
- Leaflet and chroma-js imported from CDN (configurable URLs)
- Sized wrapper div holding the uniquely identified map container
- Render callback invoked once, after every asset has loaded
- Optional legend panel next to the map

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import html
from typing import Optional

from Leaflet_Map.config_types import AssetsConfig
from Leaflet_Map.models.data_models import MapConfig


# ═══════════════════════════════════════════════════════════════════════════════
# 🧱 PAGE FRAGMENTS
# ═══════════════════════════════════════════════════════════════════════════════


def escape_script(text: str) -> str:
    """Keep '</' sequences from closing the surrounding <script> element."""
    return text.replace("</", "<\\/")


def generate_asset_tags(assets: AssetsConfig) -> str:
    """<link> and <script> tags for the page head, in load order."""
    tags = [
        f'<link rel="stylesheet" href="{html.escape(url)}" />'
        for url in assets.stylesheets
    ]
    tags += [f'<script src="{html.escape(url)}"></script>' for url in assets.scripts]
    return "\n    ".join(tags)


def generate_container_html(config: MapConfig) -> str:
    """Wrapper div sized from the map config, holding the map container."""
    return (
        f'<div class="map-wrapper" style="display: flex; flex-direction: column-reverse; '
        f'width: {config.width}px; min-height: {config.height}px;">\n'
        f'        <div id="{html.escape(config.container_id)}" '
        f'style="flex: 5; position: relative; display: flex;"></div>\n'
        f"    </div>"
    )


def generate_onload_script(callback: str) -> str:
    """Register the render callback to run once the page has loaded."""
    return (
        "<script>\n"
        '        window.addEventListener("load", function() {\n'
        f"            var render = {escape_script(callback)};\n"
        "            render(null);\n"
        "        });\n"
        "    </script>"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# 📄 TEMPLATE GENERATION
# ═══════════════════════════════════════════════════════════════════════════════


def generate_html(
    callback: str,
    config: MapConfig,
    assets: Optional[AssetsConfig] = None,
    title: str = "Leaflet Layer Map",
    legend_html: str = "",
) -> str:
    """
    Generate a complete standalone HTML page.

    Args:
        callback: Render callback from generate_leaflet_javascript
        config: Map config (container id and size)
        assets: Asset URLs to import
        title: HTML page title
        legend_html: Optional legend panel HTML

    Returns:
        Complete HTML string
    """
    assets = assets or AssetsConfig()

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)}</title>
    {generate_asset_tags(assets)}
    <style>
        body {{
            margin: 0;
            padding: 10px;
            font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
        }}

        .map-layout {{
            display: flex;
            gap: 12px;
            align-items: flex-start;
        }}
    </style>
</head>
<body>
<div class="map-layout">
    {generate_container_html(config)}
{legend_html}
</div>
    {generate_onload_script(callback)}
</body>
</html>
"""
