"""Tests for GeoJSON conversion, result serialization and the payload builder."""

from __future__ import annotations

import json

import pytest

from trackfit.geojson import route_to_geojson, track_to_geojson
from trackfit.models import TrackInference, TrackShape
from trackfit.session import build_track_payload
from conftest import local_to_lonlat


def make_shape() -> TrackShape:
    return TrackShape(
        mid=(local_to_lonlat(0.0, 35.0), local_to_lonlat(100.0, 35.0)),
        bearing_degrees=90.0,
        radii=(35.0, 34.0),
        fitness=(6.25, 5.5),
    )


# ---------------------------------------------------------------------------
# GeoJSON
# ---------------------------------------------------------------------------

class TestRouteToGeojson:
    def test_feature_collection(self):
        coords = [(-74.0, 40.0), (-74.001, 40.001), (-74.002, 40.0)]
        collection = route_to_geojson(coords)

        assert collection["type"] == "FeatureCollection"
        line, start = collection["features"]
        assert line["geometry"]["type"] == "LineString"
        assert line["geometry"]["coordinates"] == [list(c) for c in coords]
        assert line["properties"]["sampleCount"] == 3
        assert start["geometry"] == {"type": "Point", "coordinates": [-74.0, 40.0]}

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            route_to_geojson([])


class TestTrackToGeojson:
    def test_line_feature(self):
        feature = track_to_geojson(make_shape())
        assert feature["type"] == "Feature"
        assert feature["geometry"]["type"] == "LineString"
        assert len(feature["geometry"]["coordinates"]) == 103
        assert feature["properties"]["radii"] == [35.0, 34.0]
        assert feature["properties"]["fitness"] == 5.5

    def test_no_track(self):
        assert track_to_geojson(None) is None
        assert track_to_geojson(TrackInference(arc=None)) is None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

class TestToDict:
    def test_track_shape(self):
        data = make_shape().to_dict()
        assert data["bearingDegrees"] == 90.0
        assert data["radii"] == [35.0, 34.0]
        assert data["fitness"] == [6.25, 5.5]
        assert len(data["mid"]) == 2

    def test_inference_is_json_ready(self, oval_inference):
        data = oval_inference.to_dict()
        encoded = json.loads(json.dumps(data))
        assert encoded["arc"] is not None
        assert len(encoded["parallelSegments"]) == len(oval_inference.parallel_segments)
        first = encoded["parallelSegments"][0]
        assert set(first) == {"segments", "mid", "radius"}
        assert set(first["segments"][0]) == {"start", "end", "p1", "p2", "dist", "mse"}
        assert encoded["timedOut"] is False

    def test_empty_inference(self):
        assert TrackInference(arc=None).to_dict() == {
            "arc": None,
            "parallelSegments": [],
            "timedOut": False,
            "cancelled": False,
        }


# ---------------------------------------------------------------------------
# Payload builder
# ---------------------------------------------------------------------------

class TestBuildTrackPayload:
    def test_oval_payload(self, oval_coords):
        records = [{"position_long": lon, "position_lat": lat} for lon, lat in oval_coords]
        records.insert(5, {"position_long": None, "position_lat": None})
        payload = build_track_payload(records)

        assert set(payload) == {"route", "center", "bounds", "track", "trackLine"}
        assert payload["route"]["features"][0]["properties"]["sampleCount"] == len(oval_coords)
        assert payload["track"]["arc"] is not None
        assert payload["trackLine"]["geometry"]["type"] == "LineString"
        (min_lon, min_lat), (max_lon, max_lat) = payload["bounds"]
        assert min_lon <= payload["center"][0] <= max_lon
        assert min_lat <= payload["center"][1] <= max_lat
        json.dumps(payload)

    def test_no_track_payload(self):
        records = [{"lon": -74.0 + i * 1e-5, "lat": 40.0} for i in range(30)]
        payload = build_track_payload(records)
        assert payload["track"]["arc"] is None
        assert payload["trackLine"] is None

    def test_no_positions_raise(self):
        with pytest.raises(ValueError):
            build_track_payload([{"heart_rate": 150}])
