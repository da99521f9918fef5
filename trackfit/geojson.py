"""
GeoJSON Conversion for Track Shape Inference

This module converts recorded routes and inferred track outlines into GeoJSON
structures suitable for the map renderer and API responses.
"""

from typing import Dict, Optional, Sequence, Union

from . import utils
from .config import TrackConfig
from .geometry import Coordinate
from .models import TrackInference, TrackShape
from .polyline import track_to_line


def route_to_geojson(coords: Sequence[Coordinate]) -> Dict:
    """
    Convert a recorded route to a GeoJSON FeatureCollection.
    
    Creates a LineString feature representing the recorded path and a Point
    feature marking where the recording started.
    
    Args:
        coords: Ordered (lon, lat) coordinates.
        
    Returns:
        GeoJSON FeatureCollection with:
        - LineString feature: the complete route
        - Point feature: start marker
        
    Raises:
        ValueError: If coords is empty.
    """
    coordinates = [utils.coord_to_list(coord) for coord in coords]
    
    if not coordinates:
        raise ValueError("No valid coordinates were found in the recording.")
    
    line_feature = {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": coordinates,
        },
        "properties": {
            "sampleCount": len(coordinates),
        },
    }
    
    start_feature = {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": coordinates[0],
        },
        "properties": {"marker": "start"},
    }
    
    return {
        "type": "FeatureCollection",
        "features": [line_feature, start_feature],
    }


def track_to_geojson(
    track: Union[TrackInference, TrackShape, None], config: Optional[TrackConfig] = None
) -> Optional[Dict]:
    """
    Convert an inferred track outline to a GeoJSON LineString feature.
    
    Args:
        track: Inference result or TrackShape.
        config: Passed through to track_to_line.
        
    Returns:
        GeoJSON Feature, or None when no track was detected.
    """
    line = track_to_line(track, config)
    if line is None:
        return None
    
    shape = track.arc if isinstance(track, TrackInference) else track
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [utils.coord_to_list(coord) for coord in line],
        },
        "properties": {
            "radii": [utils.round_float(radius) for radius in shape.radii],
            "fitness": utils.round_float(shape.combined_fitness),
        },
    }
