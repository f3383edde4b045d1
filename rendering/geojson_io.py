"""
Layer data normalization for Leaflet rendering.

═══════════════════════════════════════════════════════════════════════════════
ARCHITECTURAL OVERVIEW
═══════════════════════════════════════════════════════════════════════════════

Responsibility: Convert whatever a layer was built from into a GeoJSON
FeatureCollection dictionary that can be embedded in the page.

Accepted inputs:
- GeoJSON mappings: FeatureCollection, Feature, or a bare geometry
- shapely geometries
- geopandas GeoDataFrame / GeoSeries (reprojected to WGS84)
- Any object exposing __geo_interface__

Anything else raises LayerDataError. The caller's data is never mutated:
features and properties are copied, numpy scalars become Python values and
non-finite floats (NaN, +-inf) become null.

For Navigation: Use VS Code outline (Ctrl+Shift+O)

═══════════════════════════════════════════════════════════════════════════════
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import geopandas as gpd
import numpy as np
from shapely.errors import ShapelyError
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from Leaflet_Map.models.data_models import LayerDataError, is_missing

logger = logging.getLogger(__name__)

GEOMETRY_TYPES = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


# ═══════════════════════════════════════════════════════════════════════════════
# 📦 DATA CONTAINERS
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class LayerData:
    """Container for a normalized layer.

    Attributes:
        geojson: GeoJSON FeatureCollection dictionary
        feature_count: Number of features
        bounds: (minx, miny, maxx, maxy) in WGS84, None when no feature has geometry
    """

    geojson: Dict[str, Any]
    feature_count: int
    bounds: Optional[Tuple[float, float, float, float]]

    @property
    def features(self) -> List[Dict[str, Any]]:
        return self.geojson["features"]

    @property
    def is_empty(self) -> bool:
        return self.feature_count == 0


# ═══════════════════════════════════════════════════════════════════════════════
# 🗺️ COORDINATE TRANSFORMATION
# ═══════════════════════════════════════════════════════════════════════════════


def _ensure_wgs84(gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Ensure GeoDataFrame is in WGS84 (EPSG:4326) for web mapping.

    Args:
        gdf: Input GeoDataFrame in any CRS

    Returns:
        GeoDataFrame reprojected to WGS84
    """
    if gdf.crs is None:
        logger.warning("⚠️ GeoDataFrame has no CRS, assuming EPSG:4326 (WGS84)")
        return gdf

    if gdf.crs.to_epsg() != 4326:
        logger.info(f"🔄 Reprojecting from {gdf.crs} to WGS84 (EPSG:4326)")
        gdf = gdf.to_crs("EPSG:4326")

    return gdf


# ═══════════════════════════════════════════════════════════════════════════════
# 🧹 VALUE CLEANING
# ═══════════════════════════════════════════════════════════════════════════════


def _clean_value(val: Any) -> Any:
    """Convert numpy types to Python types and NaN / +-inf to None for JSON."""
    if hasattr(val, "item") and np.ndim(val) == 0:
        val = val.item()
    if is_missing(val):
        return None
    if isinstance(val, float) and not math.isfinite(val):
        return None
    return val


def _clean_properties(properties: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    if properties is None:
        return {}
    if not isinstance(properties, Mapping):
        raise LayerDataError(
            f"feature properties must be a mapping, got {type(properties).__name__}"
        )
    return {str(key): _clean_value(val) for key, val in properties.items()}


def _clean_geometry(geometry: Any) -> Optional[Dict[str, Any]]:
    """Validate a geometry and return it as a GeoJSON mapping (None allowed)."""
    if geometry is None:
        return None
    if isinstance(geometry, BaseGeometry):
        return dict(mapping(geometry))
    if not isinstance(geometry, Mapping):
        raise LayerDataError(
            f"geometry must be a GeoJSON mapping, got {type(geometry).__name__}"
        )
    if geometry.get("type") not in GEOMETRY_TYPES:
        raise LayerDataError(f"unrecognized geometry type: {geometry.get('type')!r}")
    try:
        shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        raise LayerDataError(f"invalid {geometry.get('type')} geometry: {e}") from e
    return dict(geometry)


# ═══════════════════════════════════════════════════════════════════════════════
# 🔷 FEATURE COLLECTION BUILDING
# ═══════════════════════════════════════════════════════════════════════════════


def _feature(geometry: Any, properties: Optional[Mapping[str, Any]], feature_id: Any = None) -> Dict[str, Any]:
    feature = {
        "type": "Feature",
        "geometry": _clean_geometry(geometry),
        "properties": _clean_properties(properties),
    }
    if feature_id is not None:
        feature["id"] = _clean_value(feature_id)
    return feature


def _collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": features}


def _from_mapping(data: Mapping[str, Any]) -> Dict[str, Any]:
    """GeoJSON FeatureCollection / Feature / geometry mapping -> collection."""
    kind = data.get("type")

    if kind == "FeatureCollection":
        features = data.get("features")
        if not isinstance(features, (list, tuple)):
            raise LayerDataError("FeatureCollection has no 'features' list")
        return _collection([_from_feature(f) for f in features])

    if kind == "Feature":
        return _collection([_from_feature(data)])

    if kind in GEOMETRY_TYPES:
        return _collection([_feature(data, None)])

    raise LayerDataError(
        f"data is not a GeoJSON compatible Feature or Geometry (type={kind!r})"
    )


def _from_feature(feature: Any) -> Dict[str, Any]:
    if hasattr(feature, "__geo_interface__") and not isinstance(feature, Mapping):
        feature = feature.__geo_interface__
    if not isinstance(feature, Mapping) or feature.get("type") != "Feature":
        raise LayerDataError(f"FeatureCollection member is not a Feature: {feature!r:.80}")
    return _feature(feature.get("geometry"), feature.get("properties"), feature.get("id"))


def _from_geodataframe(gdf: gpd.GeoDataFrame) -> Dict[str, Any]:
    """GeoDataFrame rows -> features, all non-geometry columns as properties."""
    gdf_wgs84 = _ensure_wgs84(gdf)
    geometry_col = gdf_wgs84.geometry.name

    features = []
    for idx, row in gdf_wgs84.iterrows():
        geom = row[geometry_col]
        if geom is None or (isinstance(geom, BaseGeometry) and geom.is_empty):
            geom = None
        properties = {col: row[col] for col in row.index if col != geometry_col}
        features.append(_feature(geom, properties, feature_id=idx))
    return _collection(features)


def to_feature_collection(data: Any) -> Dict[str, Any]:
    """
    Normalize layer data into a GeoJSON FeatureCollection dictionary.

    Args:
        data: Layer data (see module docstring for accepted types)

    Returns:
        New FeatureCollection dictionary

    Raises:
        LayerDataError: If data is not a recognized geometry / feature type
    """
    if isinstance(data, gpd.GeoDataFrame):
        return _from_geodataframe(data)
    if isinstance(data, gpd.GeoSeries):
        return _from_geodataframe(gpd.GeoDataFrame(geometry=data))
    if isinstance(data, BaseGeometry):
        return _collection([_feature(data, None)])
    if isinstance(data, Mapping):
        return _from_mapping(data)
    if hasattr(data, "__geo_interface__"):
        return _from_mapping(data.__geo_interface__)
    raise LayerDataError(
        f"data is not a GeoJSON compatible Feature or Geometry: {type(data).__name__}"
    )


# ═══════════════════════════════════════════════════════════════════════════════
# 📐 BOUNDS AND SERIALIZATION
# ═══════════════════════════════════════════════════════════════════════════════


def compute_bounds(
    collection: Mapping[str, Any],
) -> Optional[Tuple[float, float, float, float]]:
    """Combined (minx, miny, maxx, maxy) of all features, None if nothing to bound."""
    all_bounds = [
        shape(f["geometry"]).bounds
        for f in collection["features"]
        if f.get("geometry") is not None
    ]
    if not all_bounds:
        return None
    arr = np.array(all_bounds, dtype=float)
    arr = arr[np.all(np.isfinite(arr), axis=1)]
    if arr.size == 0:
        return None
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def prepare_layer_data(data: Any) -> LayerData:
    """Normalize layer data and compute its metadata."""
    geojson = to_feature_collection(data)
    return LayerData(
        geojson=geojson,
        feature_count=len(geojson["features"]),
        bounds=compute_bounds(geojson),
    )


def collection_to_json_string(collection: Mapping[str, Any]) -> str:
    """Compact JSON safe to embed inside a <script> element."""
    try:
        text = json.dumps(
            collection,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
            default=str,
        )
    except ValueError as e:
        raise LayerDataError(f"layer data is not JSON serializable: {e}") from e
    return text.replace("</", "<\\/")
