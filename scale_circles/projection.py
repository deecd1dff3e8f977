import math
from functools import lru_cache
from typing import Tuple
from pyproj import CRS, Geod, Transformer
from scale_circles.project_types import (
    Coord,
    PointResolutionFunc,
    ProjectionHandle,
    UnitSystem,
    ViewportState,
)
from scale_circles.scale import METERS_PER_UNIT
from scale_circles.logger import logger

GEOD = Geod(ellps="WGS84")
WGS84 = CRS.from_epsg(4326)


@lru_cache(maxsize=32)
def get_crs(projection: ProjectionHandle) -> CRS:
    return CRS.from_user_input(projection)


@lru_cache(maxsize=32)
def get_transformer_to_wgs84(crs: CRS) -> Transformer:
    return Transformer.from_crs(crs, WGS84, always_xy=True)


def _is_valid_lon_lat(lon: float, lat: float) -> bool:
    return math.isfinite(lon) and math.isfinite(lat) and -90 <= lat <= 90


def _geodesic_distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    """Distance in meters between two lon/lat points on the WGS84 ellipsoid"""
    _, _, distance = GEOD.inv(a[0], a[1], b[0], b[1])
    return distance


def get_point_resolution(
    projection: ProjectionHandle,
    resolution: float,
    coordinate: Coord,
    units: str = "m",
) -> float:
    """
    Ground distance covered by one pixel at a coordinate

    The resolution (projection units per pixel) is measured as the mean geodesic
    length of a horizontal and a vertical one pixel segment centred on the
    coordinate, so projections that distort with latitude report the true local
    distance.

    Args:
        projection: Anything pyproj.CRS.from_user_input accepts
        resolution: Map units per pixel
        coordinate: (x, y) in the projection's units
        units: "m" for meters or "degrees" for angular degrees

    Returns:
        Distance per pixel in the requested units, or nan where the projection
        is undefined at the coordinate
    """
    x, y = coordinate
    if not (math.isfinite(resolution) and math.isfinite(x) and math.isfinite(y)):
        return math.nan

    crs = get_crs(projection)
    if units == "degrees" and crs.is_geographic:
        return resolution

    half = resolution / 2
    xs = [x - half, x + half, x, x]
    ys = [y, y, y - half, y + half]
    lons, lats = get_transformer_to_wgs84(crs).transform(xs, ys, errcheck=False)
    vertices = list(zip(lons, lats))
    if not all(_is_valid_lon_lat(lon, lat) for lon, lat in vertices):
        return math.nan

    width = _geodesic_distance(vertices[0], vertices[1])
    height = _geodesic_distance(vertices[2], vertices[3])
    point_resolution = (width + height) / 2

    meters_per_unit = METERS_PER_UNIT.get(units)
    if meters_per_unit is None:
        raise ValueError(f"Unsupported point resolution units: {units}")
    return point_resolution / meters_per_unit


def normalize_resolution(
    viewport: ViewportState,
    units: UnitSystem,
    point_resolution: PointResolutionFunc = get_point_resolution,
) -> float | None:
    """
    Ground distance per pixel at the viewport center

    Degrees are requested for the degrees unit system and meters for all others.
    Returns None when the projection service yields no usable value.
    """
    target_units = "degrees" if units == UnitSystem.DEGREES else "m"
    value = point_resolution(
        viewport["projection"],
        viewport["resolution"],
        viewport["center"],
        target_units,
    )
    if value is None or not math.isfinite(value) or value <= 0:
        logger.warning(
            f"Invalid point resolution {value} at {viewport['center']} "
            f"(resolution {viewport['resolution']})"
        )
        return None
    return value
