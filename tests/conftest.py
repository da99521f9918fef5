"""Shared test-data builders and fixtures for track inference tests."""

from __future__ import annotations

import math
import random

import pytest

from trackfit.constants import EARTH_RADIUS_M
from trackfit.track_shape import identify_track

ORIGIN = (-74.0, 40.0)


def local_to_lonlat(x: float, y: float, origin: tuple[float, float] = ORIGIN) -> tuple[float, float]:
    """Convert local east/north meters around *origin* to (lon, lat) degrees."""
    lon0, lat0 = origin
    lat = lat0 + math.degrees(y / EARTH_RADIUS_M)
    lon = lon0 + math.degrees(x / (EARTH_RADIUS_M * math.cos(math.radians(lat0))))
    return (lon, lat)


def make_oval(
    straight_m: float = 100.0,
    separation_m: float = 70.0,
    spacing_m: float = 2.0,
    laps: int = 3,
    noise_m: float = 0.0,
    seed: int = 0,
) -> list[tuple[float, float]]:
    """Return coordinates sampled around an ideal track oval with east-west straights.

    The path starts at the west end of the south straight, runs east, turns
    counterclockwise around the east turn, runs west along the north straight
    and closes around the west turn.
    """
    rng = random.Random(seed)
    r = separation_m / 2
    turn_len = math.pi * r
    perimeter = 2 * straight_m + 2 * turn_len

    def position(s: float) -> tuple[float, float]:
        if s < straight_m:
            return (s, 0.0)
        s -= straight_m
        if s < turn_len:
            phi = -math.pi / 2 + s / r
            return (straight_m + r * math.cos(phi), r + r * math.sin(phi))
        s -= turn_len
        if s < straight_m:
            return (straight_m - s, separation_m)
        s -= straight_m
        phi = math.pi / 2 + s / r
        return (r * math.cos(phi), r + r * math.sin(phi))

    coords = []
    n = int(laps * perimeter / spacing_m)
    for i in range(n):
        x, y = position((i * spacing_m) % perimeter)
        if noise_m:
            x += rng.gauss(0, noise_m)
            y += rng.gauss(0, noise_m)
        coords.append(local_to_lonlat(x, y))
    return coords


def make_random_walk(n: int = 300, step_m: float = 3.0, seed: int = 7) -> list[tuple[float, float]]:
    """Return a random walk with an independent random heading at every step."""
    rng = random.Random(seed)
    x = y = 0.0
    coords = [local_to_lonlat(x, y)]
    for _ in range(n - 1):
        heading = rng.uniform(0, 2 * math.pi)
        x += step_m * math.cos(heading)
        y += step_m * math.sin(heading)
        coords.append(local_to_lonlat(x, y))
    return coords


@pytest.fixture(scope="session")
def oval_coords() -> list[tuple[float, float]]:
    return make_oval()


@pytest.fixture(scope="session")
def oval_inference(oval_coords):
    return identify_track(oval_coords)
