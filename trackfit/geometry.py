"""
Geometry Primitives for Track Shape Inference

This module provides the spherical-Earth geometry used by every stage of the
pipeline: great-circle distance, bearings, midpoints, destination projection
and point-to-line distances. Coordinates are (longitude, latitude) pairs in
decimal degrees.
"""

import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .constants import EARTH_RADIUS_M

Coordinate = Tuple[float, float]


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula to compute distance along the surface of a sphere.

    Args:
        lat1, lon1: Latitude and longitude of first point in degrees.
        lat2, lon2: Latitude and longitude of second point in degrees.

    Returns:
        Distance in meters between the two points.
    """
    lat1_rad, lon1_rad = np.deg2rad(lat1), np.deg2rad(lon1)
    lat2_rad, lon2_rad = np.deg2rad(lat2), np.deg2rad(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def latlon_to_xy(lat, lon, ref_lat_rad: float, ref_lon_rad: float):
    """
    Convert latitude/longitude to local Cartesian coordinates (x, y).

    Uses a simple equirectangular projection approximation, suitable for
    the few hundred meters covered by a running track.

    Args:
        lat: Latitude value(s) in degrees (scalar or array).
        lon: Longitude value(s) in degrees (scalar or array).
        ref_lat_rad: Reference latitude in radians.
        ref_lon_rad: Reference longitude in radians.

    Returns:
        Tuple of (x_m, y_m) in meters, where x is east and y is north.
    """
    lat_rad = np.deg2rad(lat)
    lon_rad = np.deg2rad(lon)

    x = (lon_rad - ref_lon_rad) * np.cos(ref_lat_rad) * EARTH_RADIUS_M
    y = (lat_rad - ref_lat_rad) * EARTH_RADIUS_M

    return x, y


def distance(p1: Coordinate, p2: Coordinate) -> float:
    """Great-circle distance in meters between two (lon, lat) coordinates."""
    return float(haversine_m(p1[1], p1[0], p2[1], p2[0]))


def bearing_degrees(p1: Coordinate, p2: Coordinate) -> float:
    """
    Initial great-circle bearing from p1 to p2.

    Returns:
        Bearing in degrees within [-180, 180], clockwise from north.
    """
    lon1, lat1 = np.deg2rad(p1[0]), np.deg2rad(p1[1])
    lon2, lat2 = np.deg2rad(p2[0]), np.deg2rad(p2[1])
    dlon = lon2 - lon1

    y = np.sin(dlon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(dlon)
    return float(np.rad2deg(np.arctan2(y, x)))


def bearing(p1: Coordinate, p2: Coordinate) -> float:
    """
    Direction-agnostic bearing from p1 to p2 in radians.

    Negative raw bearings are shifted by 180 degrees so that a line and its
    reverse share the same value. Due south folds onto due north, so the
    result lies in [0, pi).
    """
    raw = bearing_degrees(p1, p2)
    if raw < 0:
        raw += 180.0
    elif raw >= 180.0:
        raw -= 180.0
    return raw / 180.0 * math.pi


def angle_difference(a1: float, a2: float) -> float:
    """Smallest unsigned angle between two bearings in radians."""
    return abs(math.atan2(math.sin(a1 - a2), math.cos(a1 - a2)))


def normalize_bearing_degrees(bearing_deg: float) -> float:
    """Wrap a bearing in degrees into [-180, 180]."""
    while bearing_deg < -180:
        bearing_deg += 360
    while bearing_deg > 180:
        bearing_deg -= 360
    return bearing_deg


def destination(point: Coordinate, bearing_deg: float, meters: float) -> Coordinate:
    """
    Project a coordinate along a great circle.

    Args:
        point: Origin (lon, lat) in degrees.
        bearing_deg: Direction of travel in degrees clockwise from north.
            Values outside [-180, 180] are wrapped first.
        meters: Distance to travel. Negative values travel backwards.

    Returns:
        Destination (lon, lat) in degrees.
    """
    theta = np.deg2rad(normalize_bearing_degrees(bearing_deg))
    delta = meters / EARTH_RADIUS_M
    lon1, lat1 = np.deg2rad(point[0]), np.deg2rad(point[1])

    lat2 = np.arcsin(
        np.sin(lat1) * np.cos(delta) + np.cos(lat1) * np.sin(delta) * np.cos(theta)
    )
    lon2 = lon1 + np.arctan2(
        np.sin(theta) * np.sin(delta) * np.cos(lat1),
        np.cos(delta) - np.sin(lat1) * np.sin(lat2),
    )
    return (float(np.rad2deg(lon2)), float(np.rad2deg(lat2)))


def midpoint(p1: Coordinate, p2: Coordinate) -> Coordinate:
    """Point halfway along the great circle from p1 to p2."""
    return destination(p1, bearing_degrees(p1, p2), distance(p1, p2) / 2)


def points_to_line_distances(points: np.ndarray, a: Coordinate, b: Coordinate) -> np.ndarray:
    """
    Distance in meters from each point to the segment a-b.

    Points are projected into a local equirectangular frame anchored at a, and
    the distance is measured to the closest point of the segment (clamped to
    its endpoints).

    Args:
        points: Array of shape (n, 2) holding (lon, lat) rows.
        a: Segment start (lon, lat).
        b: Segment end (lon, lat).

    Returns:
        Array of n distances in meters.
    """
    points = np.asarray(points, dtype=float).reshape(-1, 2)
    ref_lat, ref_lon = np.deg2rad(a[1]), np.deg2rad(a[0])
    px, py = latlon_to_xy(points[:, 1], points[:, 0], ref_lat, ref_lon)
    bx, by = latlon_to_xy(b[1], b[0], ref_lat, ref_lon)

    seg_len_sq = bx * bx + by * by
    if seg_len_sq == 0:
        return np.hypot(px, py)

    t = np.clip((px * bx + py * by) / seg_len_sq, 0.0, 1.0)
    return np.hypot(px - t * bx, py - t * by)


def point_to_line_distance(p: Coordinate, a: Coordinate, b: Coordinate) -> float:
    """Distance in meters from point p to the segment a-b."""
    return float(points_to_line_distances(np.array([p]), a, b)[0])


def get_center(coords: Sequence[Coordinate]) -> Optional[Coordinate]:
    """Arithmetic mean of the coordinates, or None when there are none."""
    if len(coords) == 0:
        return None
    arr = np.asarray(coords, dtype=float)
    return (float(arr[:, 0].mean()), float(arr[:, 1].mean()))


def get_bounds(coords: Sequence[Coordinate]) -> Optional[List[List[float]]]:
    """
    Bounding box of the coordinates.

    Returns:
        [[min_lon, min_lat], [max_lon, max_lat]], or None for empty input.
    """
    if len(coords) == 0:
        return None
    arr = np.asarray(coords, dtype=float)
    return [
        [float(arr[:, 0].min()), float(arr[:, 1].min())],
        [float(arr[:, 0].max()), float(arr[:, 1].max())],
    ]
