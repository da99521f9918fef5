"""Tests for near-straight line segment extraction."""

from __future__ import annotations

import math

import numpy as np
import pytest

from trackfit.config import TrackConfig
from trackfit.geometry import distance
from trackfit.segments import is_straight, iter_line_segments, length_within_bounds, line_mse
from conftest import local_to_lonlat

# ---------------------------------------------------------------------------
# Test-data helpers
# ---------------------------------------------------------------------------

def make_straight_line(n: int = 200, spacing_m: float = 1.0) -> list[tuple[float, float]]:
    """Points due north at a fixed spacing."""
    return [local_to_lonlat(0.0, i * spacing_m) for i in range(n)]


def make_l_shape() -> list[tuple[float, float]]:
    """100 m north then 100 m east, 2 m spacing; the corner is index 50."""
    north = [local_to_lonlat(0.0, y) for y in range(0, 101, 2)]
    east = [local_to_lonlat(x, 100.0) for x in range(2, 101, 2)]
    return north + east


# ---------------------------------------------------------------------------
# Gate boundaries
# ---------------------------------------------------------------------------

class TestSegmentGates:
    def test_length_boundaries_are_inclusive(self):
        assert length_within_bounds(65.0)
        assert length_within_bounds(140.0)
        assert not length_within_bounds(64.99)
        assert not length_within_bounds(140.01)

    def test_mse_boundary_is_inclusive(self):
        assert is_straight(5.0)
        assert is_straight(0.0)
        assert not is_straight(5.01)

    def test_gates_follow_config(self):
        config = TrackConfig(min_line_segment_m=10.0, max_line_segment_m=20.0, max_line_mse=1.0)
        assert length_within_bounds(10.0, config)
        assert not length_within_bounds(65.0, config)
        assert is_straight(1.0, config)
        assert not is_straight(1.01, config)


class TestSegmentBoundaries:
    """The inclusive gates as applied by the extractor itself."""

    @staticmethod
    def three_point_run(offset_m: float = 3.0) -> list[tuple[float, float]]:
        return [local_to_lonlat(0, 0), local_to_lonlat(offset_m, 32.5), local_to_lonlat(0, 65)]

    def test_chord_at_minimum_length_is_accepted(self):
        coords = self.three_point_run()
        chord = distance(coords[0], coords[2])

        segments = list(iter_line_segments(coords, TrackConfig(min_line_segment_m=chord)))
        assert [(s.start_index, s.end_index) for s in segments] == [(0, 2)]

        too_long = TrackConfig(min_line_segment_m=chord + 0.01)
        assert list(iter_line_segments(coords, too_long)) == []

    def test_mse_at_ceiling_is_accepted(self):
        coords = self.three_point_run()
        mse = line_mse(np.array(coords), 0, 2)
        config = TrackConfig(min_line_segment_m=60.0, max_line_mse=mse)

        segments = list(iter_line_segments(coords, config))
        assert len(segments) == 1
        assert segments[0].mse == mse

        strict = TrackConfig(min_line_segment_m=60.0, max_line_mse=mse - 0.01)
        assert list(iter_line_segments(coords, strict)) == []


class TestLineMse:
    def test_collinear_points_have_zero_mse(self):
        points = np.array(make_straight_line(20))
        assert line_mse(points, 0, 19) == pytest.approx(0.0, abs=1e-6)

    def test_adjacent_points_have_no_interior(self):
        points = np.array(make_straight_line(5))
        assert line_mse(points, 1, 2) == 0.0

    def test_divides_by_inclusive_point_count(self):
        """One interior point 3 m off the chord: 9 m^2 over 3 points."""
        points = np.array([local_to_lonlat(0, 0), local_to_lonlat(3, 10), local_to_lonlat(0, 20)])
        assert line_mse(points, 0, 2) == pytest.approx(3.0, abs=0.01)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class TestLineSegmentExtraction:
    def test_straight_line_yields_segment_per_start(self):
        """Starts whose run outgrows the maximum length yield nothing."""
        coords = make_straight_line()
        segments = list(iter_line_segments(coords))

        assert 74 <= len(segments) <= 76
        assert segments[0].start_index in (59, 60)
        starts = [s.start_index for s in segments]
        assert starts == list(range(starts[0], starts[0] + len(segments)))
        for segment in segments:
            assert segment.end_index == len(coords) - 1
            assert 65.0 <= segment.length_m <= 140.0
            assert segment.mse <= 5.0

    def test_over_length_run_is_discarded(self):
        """A start whose chord passes the maximum drops its earlier candidate."""
        coords = make_straight_line(n=200)
        assert all(s.start_index >= 59 for s in iter_line_segments(coords))
        short = make_straight_line(n=120)
        assert next(iter_line_segments(short)).start_index == 0

    def test_segments_carry_their_endpoints(self):
        coords = make_straight_line()
        segment = next(iter_line_segments(coords))
        assert segment.p1 == coords[segment.start_index]
        assert segment.p2 == coords[segment.end_index]

    def test_corner_breaks_the_run(self):
        coords = make_l_shape()
        segments = list(iter_line_segments(coords))

        assert len(segments) >= 2
        first, second = segments[0], segments[1]
        assert first.start_index == 0
        assert 50 <= first.end_index <= 52
        assert first.mse <= 5.0
        # Scanning resumes past the point where straightness broke
        assert second.start_index > first.end_index
        assert second.end_index == len(coords) - 1

    def test_too_short_path_yields_nothing(self):
        assert list(iter_line_segments(make_straight_line(n=60))) == []

    def test_duplicate_points_yield_nothing(self):
        coords = [local_to_lonlat(5.0, 5.0)] * 50
        assert list(iter_line_segments(coords)) == []

    def test_empty_and_single_point(self):
        assert list(iter_line_segments([])) == []
        assert list(iter_line_segments([local_to_lonlat(0, 0)])) == []

    def test_restartable(self):
        coords = make_l_shape()
        assert list(iter_line_segments(coords)) == list(iter_line_segments(coords))

    def test_custom_length_bounds(self):
        config = TrackConfig(min_line_segment_m=20.0, max_line_segment_m=40.0)
        segments = list(iter_line_segments(make_straight_line(n=60), config))
        assert segments
        assert all(20.0 <= s.length_m <= 40.0 for s in segments)

    def test_should_stop_ends_scan(self):
        calls = []

        def stop() -> bool:
            calls.append(1)
            return len(calls) > 3

        segments = list(iter_line_segments(make_straight_line(n=120), should_stop=stop))
        assert len(segments) == 3

    def test_lazy(self):
        """The extractor yields before scanning the whole input."""
        iterator = iter_line_segments(make_straight_line(n=120))
        first = next(iterator)
        assert first.start_index == 0
        assert math.isfinite(first.length_m)
