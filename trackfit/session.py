"""
Payload Builder for Track Shape Inference

This module runs the complete pipeline for one recording and assembles every
result the map frontend needs into a single payload.
"""

import logging
from typing import Callable, Dict, Optional

from . import geojson
from . import utils
from .config import TrackConfig
from .data_loading import Records, Workout

logger = logging.getLogger(__name__)


def build_track_payload(
    records: Records,
    config: Optional[TrackConfig] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> Dict:
    """
    Build the complete track payload for one recording.
    
    Main entry point that orchestrates the pipeline:
    1. Extracts coordinates from the decoded records
    2. Computes the route center and bounds for framing
    3. Converts the route to GeoJSON
    4. Infers the track shape
    5. Renders the track outline, if one was found
    
    Args:
        records: Decoded recording records (DataFrame or iterable of dicts).
        config: Inference thresholds. Defaults to TrackConfig().
        should_cancel: Optional cancellation callable for the inference.
        
    Returns:
        Dictionary containing:
        - route: GeoJSON FeatureCollection of the recorded path
        - center: [lon, lat] mean position
        - bounds: [[min_lon, min_lat], [max_lon, max_lat]]
        - track: inference result (arc, parallel segments, flags)
        - trackLine: GeoJSON LineString feature of the oval, or None
        
    Raises:
        ValueError: If no record carries a valid position.
    """
    workout = Workout.from_records(records)
    
    if not workout.coords:
        raise ValueError("Recording has no valid positions. Check the record fields.")
    
    inference = workout.identify_track(config, should_cancel)
    if inference.detected:
        logger.info("Track detected with fitness %.3f", inference.arc.combined_fitness)
    
    return {
        "route": geojson.route_to_geojson(workout.coords),
        "center": utils.coord_to_list(workout.center),
        "bounds": workout.bounds,
        "track": inference.to_dict(),
        "trackLine": geojson.track_to_geojson(inference, config),
    }
