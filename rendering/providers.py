#!/usr/bin/env python3
"""
Base Layer Tile Providers

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Describe the tile providers a map can use as its base layer.
A provider is a URL template plus the options passed to L.tileLayer; both are
serialized verbatim into the render script.

Key Functions:
1. Factory per provider (osm, carto_positron, esri_world_imagery, ...)
2. get_provider(name) registry lookup, case-insensitive

Navigation Guide:
- Use VS Code outline (Ctrl+Shift+O) to jump between functions
"""

from typing import Callable, Dict, Union

from Leaflet_Map.models.data_models import TileProvider

OSM_ATTRIBUTION = (
    '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> '
    "contributors"
)


# ===========================================================================
# PROVIDER FACTORIES
# ===========================================================================


def osm() -> TileProvider:
    """OpenStreetMap standard tiles (the default base layer)."""
    return TileProvider(
        url="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        options={"maxZoom": 19, "attribution": OSM_ATTRIBUTION},
        name="OpenStreetMap",
    )


def carto_positron() -> TileProvider:
    """CARTO light basemap."""
    return TileProvider(
        url="https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
        options={
            "maxZoom": 20,
            "subdomains": "abcd",
            "attribution": f'{OSM_ATTRIBUTION} &copy; <a href="https://carto.com/attributions">CARTO</a>',
        },
        name="CartoDB.Positron",
    )


def carto_dark_matter() -> TileProvider:
    """CARTO dark basemap."""
    return TileProvider(
        url="https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
        options={
            "maxZoom": 20,
            "subdomains": "abcd",
            "attribution": f'{OSM_ATTRIBUTION} &copy; <a href="https://carto.com/attributions">CARTO</a>',
        },
        name="CartoDB.DarkMatter",
    )


def esri_world_imagery() -> TileProvider:
    """Esri WorldImagery satellite tiles."""
    return TileProvider(
        url=(
            "https://server.arcgisonline.com/ArcGIS/rest/services/"
            "World_Imagery/MapServer/tile/{z}/{y}/{x}"
        ),
        options={
            "maxZoom": 19,
            "attribution": (
                "Tiles &copy; Esri &mdash; Source: Esri, i-cubed, USDA, USGS, "
                "AEX, GeoEye, Getmapping, Aerogrid, IGN, IGP, UPR-EGP, and the "
                "GIS User Community"
            ),
        },
        name="Esri.WorldImagery",
    )


def open_topo_map() -> TileProvider:
    """OpenTopoMap topographic tiles."""
    return TileProvider(
        url="https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png",
        options={
            "maxZoom": 17,
            "attribution": (
                f"Map data: {OSM_ATTRIBUTION}, SRTM | Map style: &copy; "
                '<a href="https://opentopomap.org">OpenTopoMap</a> (CC-BY-SA)'
            ),
        },
        name="OpenTopoMap",
    )


# ===========================================================================
# REGISTRY
# ===========================================================================

PROVIDERS: Dict[str, Callable[[], TileProvider]] = {
    "openstreetmap": osm,
    "osm": osm,
    "cartodb.positron": carto_positron,
    "cartodb.darkmatter": carto_dark_matter,
    "esri.worldimagery": esri_world_imagery,
    "opentopomap": open_topo_map,
}


def get_provider(provider: Union[str, TileProvider]) -> TileProvider:
    """
    Resolve a provider name (or pass a TileProvider through).

    Args:
        provider: Registered name, case-insensitive, or a TileProvider

    Returns:
        TileProvider

    Raises:
        ValueError: If the name is not registered
    """
    if isinstance(provider, TileProvider):
        return provider
    factory = PROVIDERS.get(str(provider).lower())
    if factory is None:
        raise ValueError(
            f"Unknown tile provider '{provider}', expected one of {sorted(PROVIDERS)}"
        )
    return factory()
