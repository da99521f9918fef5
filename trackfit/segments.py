"""
Line Segment Extraction for Track Shape Inference

This module scans a recorded path for near-straight runs whose length and
straightness make them plausible track straights.
"""

import logging
from typing import Callable, Iterator, Optional, Sequence

import numpy as np

from .config import DEFAULT_CONFIG, TrackConfig
from .geometry import Coordinate, distance, points_to_line_distances
from .models import LineSegment

logger = logging.getLogger(__name__)


def length_within_bounds(length_m: float, config: TrackConfig = DEFAULT_CONFIG) -> bool:
    """True if a chord length lies within the inclusive segment length bounds."""
    return config.min_line_segment_m <= length_m <= config.max_line_segment_m


def is_straight(mse: float, config: TrackConfig = DEFAULT_CONFIG) -> bool:
    """True if a run's mean squared deviation is within the inclusive ceiling."""
    return mse <= config.max_line_mse


def line_mse(points: np.ndarray, start_index: int, end_index: int) -> float:
    """
    Mean squared perpendicular deviation of a run from its chord.

    The squared distances of the interior points (start_index, end_index)
    are summed and divided by the inclusive point count of the run, which
    is at least 2 for any start_index < end_index.

    Args:
        points: Array of shape (n, 2) holding (lon, lat) rows.
        start_index: Index of the chord start.
        end_index: Index of the chord end.

    Returns:
        Mean squared deviation in m^2.
    """
    p1 = (points[start_index, 0], points[start_index, 1])
    p2 = (points[end_index, 0], points[end_index, 1])
    interior = points[start_index + 1:end_index]
    if len(interior) == 0:
        return 0.0
    total = float(np.sum(points_to_line_distances(interior, p1, p2) ** 2))
    return total / (end_index - start_index + 1)


def iter_line_segments(
    coords: Sequence[Coordinate],
    config: TrackConfig = DEFAULT_CONFIG,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Iterator[LineSegment]:
    """
    Lazily yield candidate straight segments from a coordinate sequence.

    For each start index the end index is extended one point at a time:

    - chords shorter than the minimum length are skipped;
    - once long enough, a chord whose MSE exceeds the ceiling ends the scan
      for this start, and scanning resumes just past the breaking point;
    - a chord within the maximum length replaces the retained candidate;
      a longer chord discards it and scanning continues for the break, so
      a start whose run outgrows the maximum yields nothing unless a later
      chord comes back within bounds.

    The retained candidate, if any, is yielded before moving to the next
    start. Each call performs a fresh scan.

    Args:
        coords: Ordered (lon, lat) coordinates.
        config: Thresholds to apply.
        should_stop: Optional callable polled before each start index; a
            truthy return ends the scan early.

    Yields:
        LineSegment candidates in order of their start index.
    """
    points = np.asarray(coords, dtype=float).reshape(-1, 2)
    n = len(points)

    start = 0
    while start < n - 1:
        if should_stop is not None and should_stop():
            return
        p1 = (float(points[start, 0]), float(points[start, 1]))
        contender = None
        next_start = start + 1

        for end in range(start + 1, n):
            p2 = (float(points[end, 0]), float(points[end, 1]))
            length = distance(p1, p2)
            if length < config.min_line_segment_m:
                continue

            mse = line_mse(points, start, end)
            if not is_straight(mse, config):
                next_start = end + 1
                break

            if not length_within_bounds(length, config):
                # Too long to be a straight; keep scanning for the break
                contender = None
                continue

            contender = LineSegment(
                start_index=start,
                end_index=end,
                p1=p1,
                p2=p2,
                length_m=length,
                mse=mse,
            )

        if contender is not None:
            logger.debug(
                "Segment %d-%d: %.1f m, mse %.2f",
                contender.start_index, contender.end_index, contender.length_m, contender.mse,
            )
            yield contender
        start = next_start
