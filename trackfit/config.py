"""
Configuration for Track Shape Inference

TrackConfig gathers every threshold the pipeline uses so callers and tests
can vary them without touching the algorithms. Defaults come from
constants.py. Configurations can also be loaded from a YAML mapping.
"""

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from . import constants


class TrackConfigError(ValueError):
    """Raised when a track inference configuration is invalid."""


@dataclass(frozen=True)
class TrackConfig:
    """
    Thresholds for segment extraction, pair matching, arc search and output.

    Args:
        min_line_segment_m: Shortest chord accepted as a straight (inclusive).
        max_line_segment_m: Longest chord accepted as a straight (inclusive).
        max_line_mse: Largest mean squared deviation, in m^2, for a run to
            still count as straight (inclusive).
        parallel_angle_threshold: Radians two segment bearings may differ from
            0 or pi and still be parallel.
        tangent_angle_threshold: Radians the line between segment midpoints
            may deviate from perpendicular.
        min_parallel_distance_m: Smallest accepted straight separation.
        max_parallel_distance_m: Largest accepted straight separation.
        acceptance_fitness: Combined fitness above which the search stops.
        arc_center_span_m: Half-width of the arc center offset search.
        arc_center_steps: Number of center offsets tried per side.
        arc_angle_padding_deg: Wedge skipped next to each tangent point.
        arc_angle_steps: Number of angular bins sampled per center.
        arc_search_radius_m: Neighbor search radius around each sample.
        polyline_arc_steps: Subdivisions per semicircle in the output line.
        deadline_s: Optional wall-clock budget for one inference call.
        max_parallel_candidates: Optional cap on parallel pairs evaluated.
    """

    min_line_segment_m: float = constants.MIN_LINE_SEGMENT_M
    max_line_segment_m: float = constants.MAX_LINE_SEGMENT_M
    max_line_mse: float = constants.MAX_LINE_MSE
    parallel_angle_threshold: float = constants.PARALLEL_LINE_ANGLE_THRESHOLD
    tangent_angle_threshold: float = constants.TANGENT_LINE_ANGLE_THRESHOLD
    min_parallel_distance_m: float = constants.MIN_PARALLEL_LINE_DISTANCE_M
    max_parallel_distance_m: float = constants.MAX_PARALLEL_LINE_DISTANCE_M
    acceptance_fitness: float = constants.ACCEPTANCE_FITNESS
    arc_center_span_m: float = constants.ARC_CENTER_SPAN_M
    arc_center_steps: int = constants.ARC_CENTER_STEPS
    arc_angle_padding_deg: float = constants.ARC_ANGLE_PADDING_DEG
    arc_angle_steps: int = constants.ARC_ANGLE_STEPS
    arc_search_radius_m: float = constants.ARC_SEARCH_RADIUS_M
    polyline_arc_steps: int = constants.POLYLINE_ARC_STEPS
    deadline_s: Optional[float] = None
    max_parallel_candidates: Optional[int] = None

    def __post_init__(self) -> None:
        if self.min_line_segment_m <= 0:
            raise TrackConfigError("'min_line_segment_m' must be > 0.")
        if self.max_line_segment_m < self.min_line_segment_m:
            raise TrackConfigError("'max_line_segment_m' must be >= 'min_line_segment_m'.")
        if self.max_line_mse < 0:
            raise TrackConfigError("'max_line_mse' must be >= 0.")
        for name in ("parallel_angle_threshold", "tangent_angle_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= math.pi / 2:
                raise TrackConfigError(f"'{name}' must be within [0, pi/2].")
        if self.min_parallel_distance_m < 0:
            raise TrackConfigError("'min_parallel_distance_m' must be >= 0.")
        if self.max_parallel_distance_m < self.min_parallel_distance_m:
            raise TrackConfigError(
                "'max_parallel_distance_m' must be >= 'min_parallel_distance_m'."
            )
        if self.arc_center_span_m < 0:
            raise TrackConfigError("'arc_center_span_m' must be >= 0.")
        if self.arc_center_steps < 2 or self.arc_angle_steps < 2:
            raise TrackConfigError("'arc_center_steps' and 'arc_angle_steps' must be >= 2.")
        if not 0 <= self.arc_angle_padding_deg < 90:
            raise TrackConfigError("'arc_angle_padding_deg' must be within [0, 90).")
        if self.arc_search_radius_m <= 0:
            raise TrackConfigError("'arc_search_radius_m' must be > 0.")
        if self.polyline_arc_steps < 1:
            raise TrackConfigError("'polyline_arc_steps' must be >= 1.")
        if self.deadline_s is not None and self.deadline_s < 0:
            raise TrackConfigError("'deadline_s' must be >= 0.")
        if self.max_parallel_candidates is not None and self.max_parallel_candidates < 0:
            raise TrackConfigError("'max_parallel_candidates' must be >= 0.")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_CONFIG = TrackConfig()


def track_config_from_mapping(data: Mapping[str, Any]) -> TrackConfig:
    """
    Build a TrackConfig from a plain mapping, filling in defaults.

    Raises:
        TrackConfigError: If a key is unknown or a value is not numeric.
    """
    if not isinstance(data, Mapping):
        raise TrackConfigError("Track config must be a mapping.")

    known = {f.name for f in fields(TrackConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise TrackConfigError(f"Unknown track config keys: {', '.join(unknown)}.")

    d = DEFAULT_CONFIG
    return TrackConfig(
        min_line_segment_m=_read_float(data, "min_line_segment_m", default=d.min_line_segment_m),
        max_line_segment_m=_read_float(data, "max_line_segment_m", default=d.max_line_segment_m),
        max_line_mse=_read_float(data, "max_line_mse", default=d.max_line_mse),
        parallel_angle_threshold=_read_float(
            data, "parallel_angle_threshold", default=d.parallel_angle_threshold
        ),
        tangent_angle_threshold=_read_float(
            data, "tangent_angle_threshold", default=d.tangent_angle_threshold
        ),
        min_parallel_distance_m=_read_float(
            data, "min_parallel_distance_m", default=d.min_parallel_distance_m
        ),
        max_parallel_distance_m=_read_float(
            data, "max_parallel_distance_m", default=d.max_parallel_distance_m
        ),
        acceptance_fitness=_read_float(data, "acceptance_fitness", default=d.acceptance_fitness),
        arc_center_span_m=_read_float(data, "arc_center_span_m", default=d.arc_center_span_m),
        arc_center_steps=_read_int(data, "arc_center_steps", default=d.arc_center_steps),
        arc_angle_padding_deg=_read_float(
            data, "arc_angle_padding_deg", default=d.arc_angle_padding_deg
        ),
        arc_angle_steps=_read_int(data, "arc_angle_steps", default=d.arc_angle_steps),
        arc_search_radius_m=_read_float(data, "arc_search_radius_m", default=d.arc_search_radius_m),
        polyline_arc_steps=_read_int(data, "polyline_arc_steps", default=d.polyline_arc_steps),
        deadline_s=_read_optional_float(data, "deadline_s"),
        max_parallel_candidates=_read_optional_int(data, "max_parallel_candidates"),
    )


def load_track_config(path: Path) -> TrackConfig:
    """Load a track inference configuration from a YAML file."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    if data is None:
        return TrackConfig()
    if not isinstance(data, dict):
        raise TrackConfigError("Track config must be a YAML mapping.")
    return track_config_from_mapping(data)


def _read_float(data: Mapping[str, Any], key: str, *, default: float) -> float:
    raw = data.get(key, default)
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise TrackConfigError(f"'{key}' must be a number.") from exc
    if math.isnan(value):
        raise TrackConfigError(f"'{key}' must be a number.")
    return value


def _read_int(data: Mapping[str, Any], key: str, *, default: int) -> int:
    raw = data.get(key, default)
    if isinstance(raw, bool):
        raise TrackConfigError(f"'{key}' must be an integer.")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise TrackConfigError(f"'{key}' must be an integer.") from exc


def _read_optional_float(data: Mapping[str, Any], key: str) -> Optional[float]:
    if data.get(key) is None:
        return None
    return _read_float(data, key, default=0.0)


def _read_optional_int(data: Mapping[str, Any], key: str) -> Optional[int]:
    if data.get(key) is None:
        return None
    return _read_int(data, key, default=0)


__all__ = [
    "DEFAULT_CONFIG",
    "TrackConfig",
    "TrackConfigError",
    "load_track_config",
    "track_config_from_mapping",
]
