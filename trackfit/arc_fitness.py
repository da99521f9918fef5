"""
Arc Fitness Evaluation for Track Shape Inference

For a candidate pair of straights this module searches for the two turn
centers, scoring each proposed semicircle by how well the recorded points
cover it.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from . import geometry
from .config import DEFAULT_CONFIG, TrackConfig
from .geometry import Coordinate
from .models import ArcCandidate, ArcFitnessResult, ParallelSegmentCandidate
from .spatial_index import CoordinateIndex

logger = logging.getLogger(__name__)


def center_offsets(config: TrackConfig = DEFAULT_CONFIG) -> List[float]:
    """Evenly spaced center offsets across [-span, +span], endpoints included."""
    span = config.arc_center_span_m
    return [float(v) for v in np.linspace(-span, span, config.arc_center_steps)]


def arc_angles(config: TrackConfig = DEFAULT_CONFIG) -> List[float]:
    """Angular sample positions in degrees, relative to the outward baseline."""
    padding = config.arc_angle_padding_deg
    return [
        float(v)
        for v in np.linspace(-90 + padding, 90 - padding, config.arc_angle_steps)
    ]


def score_center(
    center: Coordinate,
    baseline_deg: float,
    radius_m: float,
    n_coords: int,
    index: CoordinateIndex,
    config: TrackConfig = DEFAULT_CONFIG,
) -> float:
    """
    Worst-case coverage of a semicircle by the recorded points.

    Each angular bin projects a point ``radius_m`` from ``center`` and sums
    ``1 - d / search_radius`` over the recorded points within the search
    radius. The score is the minimum over all bins, so a turn only scores
    well if points follow it along its whole length.
    """
    search_radius = config.arc_search_radius_m
    bins = []
    for angle in arc_angles(config):
        sample = geometry.destination(center, baseline_deg + angle, radius_m)
        nearest = index.nearest(sample, n_coords, search_radius)
        bins.append(sum(1 - dist / search_radius for _, dist in nearest))
    return min(bins)


def _best_center(
    candidate: ParallelSegmentCandidate,
    top: bool,
    n_coords: int,
    index: CoordinateIndex,
    config: TrackConfig,
) -> Tuple[Optional[ArcCandidate], float]:
    anchor, opposite = (candidate.mid[0], candidate.mid[1]) if top else (candidate.mid[1], candidate.mid[0])
    # Baseline points outward, away from the other turn
    baseline = geometry.bearing_degrees(opposite, anchor)

    best: Optional[ArcCandidate] = None
    best_fitness = 0.0
    for offset in center_offsets(config):
        center = geometry.destination(anchor, baseline, offset)
        fitness = score_center(center, baseline, candidate.radius_m, n_coords, index, config)
        if fitness > best_fitness:
            best = ArcCandidate(center=center, radius_m=candidate.radius_m, fitness=fitness)
            best_fitness = fitness
    return best, best_fitness


def evaluate_arcs(
    candidate: ParallelSegmentCandidate,
    n_coords: int,
    index: CoordinateIndex,
    config: TrackConfig = DEFAULT_CONFIG,
) -> ArcFitnessResult:
    """
    Find the best-scoring arc center at each end of a parallel pair.

    Args:
        candidate: Pair of straights to fit turns to.
        n_coords: Maximum neighbors per index query (the input size).
        index: Spatial index over the recorded coordinates.
        config: Search parameters.

    Returns:
        ArcFitnessResult; a side is None when no offset scored above zero.
    """
    top, top_fitness = _best_center(candidate, True, n_coords, index, config)
    bottom, bottom_fitness = _best_center(candidate, False, n_coords, index, config)
    logger.debug("Arc fitness top=%.3f bottom=%.3f", top_fitness, bottom_fitness)
    return ArcFitnessResult(
        top=top, bottom=bottom, top_fitness=top_fitness, bottom_fitness=bottom_fitness
    )
