"""
Record Ingestion for Track Shape Inference

This module turns decoded recording records into the coordinate list the
inference pipeline consumes, and wraps a recording as a Workout.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from . import geometry
from . import utils
from .config import TrackConfig
from .geometry import Coordinate
from .models import TrackInference
from .track_shape import identify_track

logger = logging.getLogger(__name__)

# (longitude, latitude) column pairs recognized when no keys are given
POSITION_KEYS: List[Tuple[str, str]] = [
    ("position_long", "position_lat"),
    ("lon", "lat"),
    ("longitude", "latitude"),
]

Records = Union[pd.DataFrame, Iterable[Dict]]


def detect_position_keys(columns: Iterable[str]) -> Optional[Tuple[str, str]]:
    """
    Identify which longitude/latitude field names a set of records uses.
    
    Args:
        columns: Field names present in the records.
        
    Returns:
        The first matching (lon_key, lat_key) pair from POSITION_KEYS, or
        None if the records carry no recognizable position fields.
    """
    available = set(columns)
    for lon_key, lat_key in POSITION_KEYS:
        if lon_key in available and lat_key in available:
            return lon_key, lat_key
    return None


def coordinates_from_records(
    records: Records, lon_key: Optional[str] = None, lat_key: Optional[str] = None
) -> List[Coordinate]:
    """
    Extract (lon, lat) coordinates from decoded recording records.
    
    Records whose longitude or latitude is missing, null, or not a finite
    number are dropped, preserving the order of the remaining records.
    
    Args:
        records: DataFrame or iterable of dicts, one per recorded sample.
        lon_key: Longitude field name. Auto-detected when omitted.
        lat_key: Latitude field name. Auto-detected when omitted.
        
    Returns:
        List of (lon, lat) tuples in decimal degrees.
        
    Raises:
        ValueError: If explicit keys are given but absent from the records.
    """
    df = records if isinstance(records, pd.DataFrame) else pd.DataFrame(list(records))
    if df.empty:
        return []
    
    if lon_key is None or lat_key is None:
        keys = detect_position_keys(df.columns)
        if keys is None:
            logger.warning("Records carry no position fields; columns: %s", list(df.columns))
            return []
        lon_key, lat_key = keys
    elif lon_key not in df.columns or lat_key not in df.columns:
        raise ValueError(f"Records have no '{lon_key}'/'{lat_key}' fields.")
    
    lon = df[lon_key].map(utils.safe_float).to_numpy(dtype=float)
    lat = df[lat_key].map(utils.safe_float).to_numpy(dtype=float)
    valid = np.isfinite(lon) & np.isfinite(lat)
    
    dropped = int((~valid).sum())
    if dropped:
        logger.debug("Dropped %d of %d records without a position", dropped, len(df))
    
    return [(float(x), float(y)) for x, y in zip(lon[valid], lat[valid])]


@dataclass
class Workout:
    """A decoded recording and the coordinates extracted from it."""

    records: Records
    coords: List[Coordinate] = field(default_factory=list)

    @classmethod
    def from_records(
        cls, records: Records, lon_key: Optional[str] = None, lat_key: Optional[str] = None
    ) -> "Workout":
        if not isinstance(records, pd.DataFrame):
            records = list(records)
        return cls(records=records, coords=coordinates_from_records(records, lon_key, lat_key))

    @property
    def center(self) -> Optional[Coordinate]:
        return geometry.get_center(self.coords)

    @property
    def bounds(self) -> Optional[List[List[float]]]:
        return geometry.get_bounds(self.coords)

    def identify_track(
        self,
        config: Optional[TrackConfig] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> TrackInference:
        return identify_track(self.coords, config, should_cancel=should_cancel)
