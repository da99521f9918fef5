"""
Track Shape Assembly for Track Shape Inference

This module drives the full inference: it streams parallel segment pairs,
fits turns to each one and keeps the best oval, stopping as soon as a fit is
good enough.
"""

import logging
import time
from typing import Callable, List, Optional, Sequence

from . import geometry
from .arc_fitness import evaluate_arcs
from .config import DEFAULT_CONFIG, TrackConfig
from .geometry import Coordinate
from .models import ParallelSegmentCandidate, TrackInference, TrackShape
from .parallel import iter_parallel_segments
from .spatial_index import CoordinateIndex

logger = logging.getLogger(__name__)


class _SearchBudget:
    """Tracks the deadline, pair cap and cancellation for one inference call."""

    def __init__(self, config: TrackConfig, should_cancel: Optional[Callable[[], bool]]) -> None:
        self.config = config
        self.should_cancel = should_cancel
        self.started = time.monotonic()
        self.pairs = 0
        self.timed_out = False
        self.cancelled = False

    def exhausted(self) -> bool:
        if self.timed_out or self.cancelled:
            return True
        if self.should_cancel is not None and self.should_cancel():
            logger.warning("Track inference cancelled after %d pairs", self.pairs)
            self.cancelled = True
        elif (
            self.config.deadline_s is not None
            and time.monotonic() - self.started > self.config.deadline_s
        ):
            logger.warning(
                "Track inference exceeded %.2fs deadline after %d pairs",
                self.config.deadline_s, self.pairs,
            )
            self.timed_out = True
        return self.timed_out or self.cancelled

    def admit_pair(self) -> bool:
        """Count one more pair, or trip the cap if it would exceed it."""
        cap = self.config.max_parallel_candidates
        if cap is not None and self.pairs >= cap:
            logger.warning("Track inference stopped after %d parallel pairs", self.pairs)
            self.timed_out = True
            return False
        self.pairs += 1
        return True


def identify_track(
    coords: Sequence[Coordinate],
    config: Optional[TrackConfig] = None,
    *,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> TrackInference:
    """
    Infer a running-track oval from a recorded path.

    Parallel pairs are evaluated as they are discovered. A pair contributes a
    shape only when both of its turns scored; its combined fitness is the
    weaker of the two. The best shape so far is retained, and the search
    returns immediately once a combined fitness exceeds
    ``config.acceptance_fitness``. The first good-enough fit wins; the
    result is not a global optimum.

    The search can be bounded with ``config.deadline_s`` (wall-clock seconds)
    and ``config.max_parallel_candidates``, and interrupted by
    ``should_cancel``. The deadline and cancellation are checked during
    segment extraction and between pairs; the cap trips only when a pair
    beyond it arrives. Hitting a bound or cancelling yields ``arc=None`` ("no
    track detected") with the pairs collected so far; nothing is raised.

    Args:
        coords: Ordered (lon, lat) coordinates in decimal degrees. Records
            with missing positions must already be filtered out.
        config: Thresholds and bounds. Defaults to TrackConfig().
        should_cancel: Optional zero-argument callable; a truthy return
            stops the search.

    Returns:
        TrackInference with the best TrackShape (or None) and every parallel
        pair considered.
    """
    config = config or DEFAULT_CONFIG
    coords = [(float(c[0]), float(c[1])) for c in coords]
    if len(coords) < 2:
        logger.debug("Too few coordinates (%d) for track inference", len(coords))
        return TrackInference(arc=None, parallel_segments=[])

    logger.info("Identifying track from %d coordinates", len(coords))
    budget = _SearchBudget(config, should_cancel)
    best: Optional[TrackShape] = None
    best_fitness = 0.0
    parallel_segments: List[ParallelSegmentCandidate] = []

    n_coords = len(coords)
    index = CoordinateIndex(coords)

    for candidate in iter_parallel_segments(coords, config, should_stop=budget.exhausted):
        if budget.exhausted() or not budget.admit_pair():
            break

        parallel_segments.append(candidate)
        result = evaluate_arcs(candidate, n_coords, index, config)
        if not result.complete:
            continue

        fitness = min(result.top_fitness, result.bottom_fitness)
        if fitness > best_fitness:
            best = TrackShape(
                mid=(result.top.center, result.bottom.center),
                bearing_degrees=geometry.bearing_degrees(result.top.center, result.bottom.center),
                radii=(result.top.radius_m, result.bottom.radius_m),
                fitness=(result.top.fitness, result.bottom.fitness),
            )
            best_fitness = fitness
        if fitness > config.acceptance_fitness:
            logger.info(
                "Accepted track with fitness %.3f after %d pairs", fitness, len(parallel_segments)
            )
            return TrackInference(arc=best, parallel_segments=parallel_segments)

    if budget.timed_out or budget.cancelled:
        return TrackInference(
            arc=None,
            parallel_segments=parallel_segments,
            timed_out=budget.timed_out,
            cancelled=budget.cancelled,
        )

    if best is None:
        logger.info("No track detected (%d parallel pairs)", len(parallel_segments))
    else:
        logger.info(
            "Best track fitness %.3f below acceptance (%d parallel pairs)",
            best_fitness, len(parallel_segments),
        )
    return TrackInference(arc=best, parallel_segments=parallel_segments)
