"""
Parallel Segment Matching for Track Shape Inference

This module pairs extracted straight segments that could be the two opposite
straights of a running track: parallel, facing each other across the infield,
and separated by a plausible track width.
"""

import logging
import math
from typing import Callable, Iterator, List, Optional, Sequence

from . import geometry
from .config import DEFAULT_CONFIG, TrackConfig
from .geometry import Coordinate
from .models import LineSegment, ParallelSegmentCandidate
from .segments import iter_line_segments

logger = logging.getLogger(__name__)


def is_parallel(bearing_a: float, bearing_b: float, config: TrackConfig = DEFAULT_CONFIG) -> bool:
    """True if two bearings point the same or opposite way within the threshold."""
    angle = geometry.angle_difference(bearing_a, bearing_b)
    threshold = config.parallel_angle_threshold
    return angle <= threshold or angle >= math.pi - threshold


def match_segments(
    segment_a: LineSegment,
    segment_b: LineSegment,
    bearing_a: float,
    bearing_b: float,
    mid_a: Coordinate,
    mid_b: Coordinate,
    config: TrackConfig = DEFAULT_CONFIG,
) -> Optional[ParallelSegmentCandidate]:
    """
    Test whether two segments form the opposite straights of an oval.

    Gates, each a hard reject:

    1. the bearings are parallel or anti-parallel;
    2. the line joining the two segment midpoints is roughly perpendicular to
       the average segment bearing, so the segments sit side by side rather
       than end to end;
    3. the midpoints are between the minimum and maximum separation.

    Segment B's endpoints are paired with A's so that the nearer ends match;
    the midpoints of the paired ends become the candidate's ``mid``.

    Args:
        segment_a: Earlier segment.
        segment_b: Later segment.
        bearing_a: Direction-agnostic bearing of segment A, radians.
        bearing_b: Direction-agnostic bearing of segment B, radians.
        mid_a: Midpoint of segment A.
        mid_b: Midpoint of segment B.
        config: Thresholds to apply.

    Returns:
        A ParallelSegmentCandidate, or None if any gate rejects the pair.
    """
    if not is_parallel(bearing_a, bearing_b, config):
        return None

    same_dist = geometry.distance(segment_a.p1, segment_b.p1)
    swapped_dist = geometry.distance(segment_a.p1, segment_b.p2)
    should_swap = swapped_dist < same_dist
    cross_mid_1 = geometry.midpoint(segment_a.p1, segment_b.p2 if should_swap else segment_b.p1)
    cross_mid_2 = geometry.midpoint(segment_a.p2, segment_b.p1 if should_swap else segment_b.p2)

    average_bearing = (bearing_a + bearing_b) / 2
    tangent_angle = geometry.angle_difference(geometry.bearing(mid_a, mid_b), average_bearing)
    threshold = config.tangent_angle_threshold
    if tangent_angle < math.pi / 2 - threshold or tangent_angle > math.pi / 2 + threshold:
        return None

    separation = geometry.distance(mid_a, mid_b)
    if separation < config.min_parallel_distance_m or separation > config.max_parallel_distance_m:
        return None

    return ParallelSegmentCandidate(
        segments=(segment_a, segment_b),
        mid=(cross_mid_1, cross_mid_2),
        radius_m=separation / 2,
    )


def iter_parallel_segments(
    coords: Sequence[Coordinate],
    config: TrackConfig = DEFAULT_CONFIG,
    should_stop: Optional[Callable[[], bool]] = None,
) -> Iterator[ParallelSegmentCandidate]:
    """
    Lazily yield parallel segment pairs as segments are extracted.

    Every newly extracted segment is tested against each segment seen before
    it, in extraction order, so pairs are produced as soon as both members
    exist. ``should_stop`` is forwarded to the segment extractor.
    """
    segments: List[LineSegment] = []
    bearings: List[float] = []
    midpoints: List[Coordinate] = []

    for segment in iter_line_segments(coords, config, should_stop):
        new_bearing = geometry.bearing(segment.p1, segment.p2)
        new_mid = geometry.midpoint(segment.p1, segment.p2)

        for i in range(len(segments)):
            candidate = match_segments(
                segments[i], segment, bearings[i], new_bearing, midpoints[i], new_mid, config
            )
            if candidate is not None:
                logger.debug(
                    "Parallel pair %d-%d / %d-%d, radius %.1f m",
                    segments[i].start_index, segments[i].end_index,
                    segment.start_index, segment.end_index, candidate.radius_m,
                )
                yield candidate

        segments.append(segment)
        bearings.append(new_bearing)
        midpoints.append(new_mid)
