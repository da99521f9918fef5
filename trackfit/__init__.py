"""
Track Shape Inference

Detects whether a recorded GPS path traces a standard running-track oval and
builds an idealized model of that oval for rendering.

This package re-exports the public functions of its modules so callers can
import everything from ``trackfit`` directly.
"""

# Configuration
from .config import (
    DEFAULT_CONFIG,
    TrackConfig,
    TrackConfigError,
    load_track_config,
    track_config_from_mapping,
)

# Data model
from .models import (
    ArcCandidate,
    ArcFitnessResult,
    LineSegment,
    ParallelSegmentCandidate,
    TrackInference,
    TrackShape,
)

# Geometry
from .geometry import (
    angle_difference,
    bearing,
    bearing_degrees,
    destination,
    distance,
    get_bounds,
    get_center,
    midpoint,
    point_to_line_distance,
)

# Pipeline stages
from .spatial_index import CoordinateIndex
from .segments import iter_line_segments
from .parallel import iter_parallel_segments
from .arc_fitness import evaluate_arcs
from .track_shape import identify_track
from .polyline import track_to_line

# Ingestion and output
from .data_loading import Workout, coordinates_from_records
from .geojson import route_to_geojson, track_to_geojson
from .session import build_track_payload

__all__ = [
    # Configuration
    "DEFAULT_CONFIG",
    "TrackConfig",
    "TrackConfigError",
    "load_track_config",
    "track_config_from_mapping",
    # Data model
    "ArcCandidate",
    "ArcFitnessResult",
    "LineSegment",
    "ParallelSegmentCandidate",
    "TrackInference",
    "TrackShape",
    # Geometry
    "angle_difference",
    "bearing",
    "bearing_degrees",
    "destination",
    "distance",
    "get_bounds",
    "get_center",
    "midpoint",
    "point_to_line_distance",
    # Pipeline stages
    "CoordinateIndex",
    "iter_line_segments",
    "iter_parallel_segments",
    "evaluate_arcs",
    "identify_track",
    "track_to_line",
    # Ingestion and output
    "Workout",
    "coordinates_from_records",
    "route_to_geojson",
    "track_to_geojson",
    "build_track_payload",
]
