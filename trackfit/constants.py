"""
Constants for Track Shape Inference

This module defines the default thresholds used throughout the track
inference pipeline. TrackConfig reads its defaults from here.
"""

import math

# Earth radius in meters (spherical model, matches haversine_m)
EARTH_RADIUS_M = 6371000.0

# Line segment extraction
MIN_LINE_SEGMENT_M = 65.0
MAX_LINE_SEGMENT_M = 140.0
MAX_LINE_MSE = 5.0  # mean squared perpendicular deviation, m^2

# Parallel segment matching
PARALLEL_LINE_ANGLE_THRESHOLD = math.pi / 6
TANGENT_LINE_ANGLE_THRESHOLD = math.pi / 6
MIN_PARALLEL_LINE_DISTANCE_M = 50.0
MAX_PARALLEL_LINE_DISTANCE_M = 100.0

# Arc fitness search
ARC_CENTER_SPAN_M = 35.0
ARC_CENTER_STEPS = 15
ARC_ANGLE_PADDING_DEG = 20.0
ARC_ANGLE_STEPS = 15
ARC_SEARCH_RADIUS_M = 7.0

# Combined fitness above which the first fit is accepted
ACCEPTANCE_FITNESS = 5.0

# Polyline rendering
POLYLINE_ARC_STEPS = 50
