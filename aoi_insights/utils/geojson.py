"""
GeoJSON serialization for drawn regions.

This is the only place where coordinates change axis order: the domain
keeps (lat, lon) and GeoJSON carries [lon, lat].
"""
from typing import Any, Dict, List, Sequence

from shapely.geometry import LineString, MultiPoint, Polygon, mapping

from aoi_insights.domain.models import Point, RegionKind, RegionOfInterest


def to_lon_lat(points: Sequence[Point]) -> List[tuple[float, float]]:
    """Convert domain points to (lon, lat) tuples."""
    return [(p.lon, p.lat) for p in points]


def _as_lists(coords: Any) -> Any:
    # shapely's mapping() nests tuples; JSON payloads use lists
    if isinstance(coords, (list, tuple)):
        if coords and isinstance(coords[0], (int, float)):
            return [float(c) for c in coords]
        return [_as_lists(c) for c in coords]
    return coords


def region_geometry(region: RegionOfInterest) -> Dict[str, Any]:
    """
    Build the GeoJSON geometry of a region.

    Args:
        region: Finished region of interest

    Returns:
        LineString geometry for lines, single-ring Polygon for polygons
    """
    coords = to_lon_lat(region.ring)
    if region.kind is RegionKind.LINE:
        shape = LineString(coords)
    else:
        shape = Polygon(coords)
    geometry = mapping(shape)
    return {"type": geometry["type"], "coordinates": _as_lists(geometry["coordinates"])}


def region_to_feature(region: RegionOfInterest) -> Dict[str, Any]:
    """
    Serialize a region to its wire record.

    Args:
        region: Finished region of interest

    Returns:
        GeoJSON Feature with drawingType, createdAt and optional name properties
    """
    properties: Dict[str, Any] = {
        "drawingType": region.drawing_type.value,
        "createdAt": region.created_at.isoformat(),
    }
    if region.name is not None:
        properties["name"] = region.name
    return {
        "type": "Feature",
        "id": region.id,
        "geometry": region_geometry(region),
        "properties": properties,
    }


def regions_to_feature_collection(regions: Sequence[RegionOfInterest]) -> Dict[str, Any]:
    """Serialize regions, oldest first, to a FeatureCollection for export."""
    return {
        "type": "FeatureCollection",
        "features": [region_to_feature(r) for r in regions],
    }


def sketch_to_feature(points: Sequence[Point], mode: str) -> Dict[str, Any]:
    """
    Serialize an in-progress drawing for preview on a drawing surface.

    A single point is a MultiPoint, anything longer an open LineString.
    """
    coords = to_lon_lat(points)
    shape = MultiPoint(coords) if len(coords) < 2 else LineString(coords)
    geometry = mapping(shape)
    return {
        "type": "Feature",
        "geometry": {"type": geometry["type"], "coordinates": _as_lists(geometry["coordinates"])},
        "properties": {"drawingType": mode, "sketch": True},
    }
