"""
Polyline Generation for Track Shape Inference

Renders an inferred track shape as a closed outline of coordinates that the
map layer can draw as a single line.
"""

from typing import List, Optional, Union

from . import geometry
from .config import DEFAULT_CONFIG, TrackConfig
from .geometry import Coordinate
from .models import TrackInference, TrackShape


def track_to_line(
    track: Union[TrackInference, TrackShape, None], config: Optional[TrackConfig] = None
) -> Optional[List[Coordinate]]:
    """
    Sweep both turns of a track shape into a closed coordinate loop.

    The top turn is swept around ``mid[0]`` starting at ``bearing + 90``
    degrees, the bottom turn around ``mid[1]`` starting at ``bearing - 90``,
    each through 180 degrees in ``polyline_arc_steps`` increments. The first
    point is repeated at the end, so the default output has 103 points; the
    straights are the implicit joins between the two arcs.

    Args:
        track: An inference result or a bare TrackShape.
        config: Supplies ``polyline_arc_steps``. Defaults to TrackConfig().

    Returns:
        List of (lon, lat) coordinates, or None if there is no track.
    """
    shape = track.arc if isinstance(track, TrackInference) else track
    if shape is None:
        return None

    steps = (config or DEFAULT_CONFIG).polyline_arc_steps

    def project(center: Coordinate, radius: float, top: bool, percent: float) -> Coordinate:
        base_degrees = shape.bearing_degrees + (90 if top else -90)
        return geometry.destination(center, base_degrees + 180 * percent, radius)

    line = [project(shape.mid[0], shape.radii[0], True, i / steps) for i in range(steps + 1)]
    line.extend(project(shape.mid[1], shape.radii[1], False, i / steps) for i in range(steps + 1))
    line.append(line[0])
    return line
