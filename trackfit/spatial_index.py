"""
Spatial Index for Track Shape Inference

This module wraps the recorded coordinates in a k-d tree so the arc fitness
search can ask for the recorded points near a sample position.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy.spatial import cKDTree

from .constants import EARTH_RADIUS_M
from .geometry import Coordinate, haversine_m

logger = logging.getLogger(__name__)


def _to_cartesian(lon, lat) -> np.ndarray:
    """Project (lon, lat) degrees onto a sphere of radius EARTH_RADIUS_M."""
    lon_rad = np.deg2rad(lon)
    lat_rad = np.deg2rad(lat)
    cos_lat = np.cos(lat_rad)
    return np.column_stack([
        EARTH_RADIUS_M * cos_lat * np.cos(lon_rad),
        EARTH_RADIUS_M * cos_lat * np.sin(lon_rad),
        EARTH_RADIUS_M * np.sin(lat_rad),
    ])


class CoordinateIndex:
    """
    Nearest-neighbor index over a coordinate list, keyed by great-circle distance.

    Points are stored as 3-D positions on the sphere. Straight-line chord
    length grows monotonically with great-circle distance, so a ball query
    with the equivalent chord radius returns exactly the points within the
    requested surface distance. Distances reported back are haversine meters.

    The index is immutable after construction and may be shared between
    readers.

    Args:
        coords: Sequence of (lon, lat) coordinates in degrees.
    """

    def __init__(self, coords: Sequence[Coordinate]) -> None:
        self._coords = np.asarray(coords, dtype=float).reshape(-1, 2)
        if len(self._coords):
            self._tree: Optional[cKDTree] = cKDTree(
                _to_cartesian(self._coords[:, 0], self._coords[:, 1])
            )
        else:
            self._tree = None
        logger.debug("Built coordinate index over %d points", len(self._coords))

    def __len__(self) -> int:
        return len(self._coords)

    def nearest(
        self, point: Coordinate, k: Optional[int] = None, max_radius: float = math.inf
    ) -> List[Tuple[Coordinate, float]]:
        """
        Find up to k recorded coordinates within max_radius of point.

        Args:
            point: Query (lon, lat) in degrees.
            k: Maximum number of neighbors. None means no limit.
            max_radius: Search radius in meters (inclusive).

        Returns:
            List of (coordinate, distance_m) tuples, nearest first. Equal
            distances keep their original recording order.
        """
        if self._tree is None or (k is not None and k <= 0):
            return []

        query = _to_cartesian([point[0]], [point[1]])[0]
        if math.isinf(max_radius) or max_radius >= math.pi * EARTH_RADIUS_M:
            candidates = np.arange(len(self._coords))
        else:
            chord = 2 * EARTH_RADIUS_M * math.sin(max_radius / (2 * EARTH_RADIUS_M))
            # Widen slightly so rounding never drops a point on the boundary
            candidates = np.asarray(
                self._tree.query_ball_point(query, chord * (1 + 1e-9) + 1e-6), dtype=int
            )
        if candidates.size == 0:
            return []

        found = self._coords[candidates]
        distances = haversine_m(point[1], point[0], found[:, 1], found[:, 0])
        keep = distances <= max_radius
        candidates, distances = candidates[keep], distances[keep]

        order = np.lexsort((candidates, distances))
        if k is not None:
            order = order[:k]
        return [
            ((float(self._coords[i, 0]), float(self._coords[i, 1])), float(distances[j]))
            for j, i in zip(order, candidates[order])
        ]
