"""
Data Model for Track Shape Inference

Immutable value types passed between the pipeline stages. None of them
outlive a single inference call; to_dict() renders each one in the
camelCase layout consumed by the map frontend.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from . import utils
from .geometry import Coordinate


@dataclass(frozen=True)
class LineSegment:
    """A near-straight run of the recorded path."""

    start_index: int
    """Index of the first coordinate of the run."""

    end_index: int
    """Index of the last coordinate of the run (always > start_index)."""

    p1: Coordinate
    p2: Coordinate

    length_m: float
    """Great-circle length of the chord p1-p2."""

    mse: float
    """Mean squared perpendicular deviation of interior points, m^2."""

    def to_dict(self) -> Dict:
        return {
            "start": self.start_index,
            "end": self.end_index,
            "p1": utils.coord_to_list(self.p1),
            "p2": utils.coord_to_list(self.p2),
            "dist": utils.round_float(self.length_m),
            "mse": utils.round_float(self.mse),
        }


@dataclass(frozen=True)
class ParallelSegmentCandidate:
    """Two segments judged to be the opposite straights of an oval."""

    segments: Tuple[LineSegment, LineSegment]

    mid: Tuple[Coordinate, Coordinate]
    """Cross midpoints: one at each turn end of the pair."""

    radius_m: float
    """Half the separation between the two segment midpoints."""

    def to_dict(self) -> Dict:
        return {
            "segments": [segment.to_dict() for segment in self.segments],
            "mid": [utils.coord_to_list(point) for point in self.mid],
            "radius": utils.round_float(self.radius_m),
        }


@dataclass(frozen=True)
class ArcCandidate:
    """Best arc center found for one turn of a parallel pair."""

    center: Coordinate
    radius_m: float
    fitness: float


@dataclass(frozen=True)
class ArcFitnessResult:
    """Per-side outcome of the arc search for one parallel pair."""

    top: Optional[ArcCandidate]
    bottom: Optional[ArcCandidate]
    top_fitness: float = 0.0
    bottom_fitness: float = 0.0

    @property
    def complete(self) -> bool:
        return self.top is not None and self.bottom is not None


@dataclass(frozen=True)
class TrackShape:
    """
    Idealized oval: two arc centers sharing one orientation.

    ``bearing_degrees`` is the bearing from ``mid[0]`` (top arc) to
    ``mid[1]`` (bottom arc).
    """

    mid: Tuple[Coordinate, Coordinate]
    bearing_degrees: float
    radii: Tuple[float, float]
    fitness: Tuple[float, float]

    @property
    def combined_fitness(self) -> float:
        return min(self.fitness)

    def to_dict(self) -> Dict:
        return {
            "mid": [utils.coord_to_list(point) for point in self.mid],
            "bearingDegrees": utils.round_float(self.bearing_degrees, digits=4),
            "radii": [utils.round_float(radius) for radius in self.radii],
            "fitness": [utils.round_float(value) for value in self.fitness],
        }


@dataclass(frozen=True)
class TrackInference:
    """Result of identify_track: best shape plus every candidate considered."""

    arc: Optional[TrackShape]
    parallel_segments: List[ParallelSegmentCandidate] = field(default_factory=list)
    timed_out: bool = False
    cancelled: bool = False

    @property
    def detected(self) -> bool:
        return self.arc is not None

    def to_dict(self) -> Dict:
        return {
            "arc": self.arc.to_dict() if self.arc is not None else None,
            "parallelSegments": [candidate.to_dict() for candidate in self.parallel_segments],
            "timedOut": self.timed_out,
            "cancelled": self.cancelled,
        }
