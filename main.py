#!/usr/bin/env python3
"""
Leaflet Layer Map Entry Point

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Build a standalone Leaflet map page from vector files on the
command line. Every input file becomes one layer, styled with the same
options.

Usage:
    python -m Leaflet_Map.main parcels.geojson --color land_use
    python -m Leaflet_Map.main stations.shp --color temp --color-map OrRd \
        --provider CartoDB.Positron --output Output/stations.html

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

# Fix Windows console encoding for emoji support
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

import geopandas as gpd

from Leaflet_Map.config import CONFIG
from Leaflet_Map.config_types import AppConfig
from Leaflet_Map.map_builder import Map, make_layer
from Leaflet_Map.models.data_models import AttributeRef, Layer
from Leaflet_Map.rendering.providers import PROVIDERS


# ═══════════════════════════════════════════════════════════════════════════════
# 📋 LOGGING SETUP
# ═══════════════════════════════════════════════════════════════════════════════


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Configure logging with console output.

    The package loggers (Leaflet_Map.*) share the same handler.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("Leaflet_Map")
    logger.setLevel(level)
    logger.handlers.clear()

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)
    ch.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(ch)

    return logger


# ═══════════════════════════════════════════════════════════════════════════════
# 📂 DATA LOADING
# ═══════════════════════════════════════════════════════════════════════════════


def load_layers(
    paths: List[str],
    args: argparse.Namespace,
    app_config: AppConfig,
    logger: logging.Logger,
) -> List[Layer]:
    """Read each vector file with geopandas and wrap it in a Layer.

    Args:
        paths: Vector file paths (GeoJSON, shapefile, GeoPackage, ...)
        args: Parsed command-line styling options
        app_config: Layer defaults
        logger: Logger instance

    Returns:
        Layers in command-line order
    """
    options = {}
    if args.color is not None:
        options["color"] = AttributeRef(args.color)
    elif args.fill is not None:
        options["color"] = args.fill
    if args.color_map is not None:
        options["color_map"] = args.color_map
    if args.marker_size is not None:
        options["marker_size"] = args.marker_size

    layers = []
    for path in paths:
        if not Path(path).exists():
            raise FileNotFoundError(f"Vector file not found: {path}")
        logger.info(f"📂 Loading layer: {path}")
        gdf = gpd.read_file(path)
        logger.info(f"   ✅ Loaded {len(gdf)} features")
        layers.append(
            make_layer(gdf, name=Path(path).stem, app_config=app_config, **options)
        )
    return layers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render vector files as color-classified Leaflet layers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("files", nargs="+", help="Vector files, one layer each")
    color = parser.add_mutually_exclusive_group()
    color.add_argument("--color", help="Attribute that drives the fill color")
    color.add_argument("--fill", help="Constant fill color, e.g. '#ff7800'")
    parser.add_argument("--color-map", help="chroma.js scale name, e.g. OrRd")
    parser.add_argument("--marker-size", type=float, help="Point marker radius")
    parser.add_argument(
        "--provider",
        help=f"Base layer provider, one of: {', '.join(sorted(PROVIDERS))}",
    )
    parser.add_argument("--zoom", type=int, help="Initial zoom level")
    parser.add_argument("--title", help="HTML page title")
    parser.add_argument("--no-legend", action="store_true", help="Omit the legend")
    parser.add_argument("--output", "-o", help="Output HTML path")
    return parser


# ═══════════════════════════════════════════════════════════════════════════════
# 🚀 MAIN ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for map generation."""
    args = build_parser().parse_args(argv)
    app_config = AppConfig.from_dict(CONFIG)
    logger = setup_logging(app_config.logging_level)

    logger.info("=" * 60)
    logger.info("🚀 LEAFLET LAYER MAP")
    logger.info("=" * 60)
    logger.info(f"⏰ Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("")

    try:
        layers = load_layers(args.files, args, app_config, logger)
        leaflet_map = Map(
            layers=layers,
            zoom=args.zoom,
            provider=args.provider,
            app_config=app_config,
        )
        result_path = leaflet_map.save(
            args.output,
            title=args.title,
            show_legend=False if args.no_legend else None,
        )
    except Exception as e:
        logger.error(f"❌ ERROR: {e}")
        logger.debug("Traceback:", exc_info=True)
        return 1

    logger.info("")
    logger.info("✅ MAP COMPLETE")
    logger.info(f"📄 Output: {result_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
