"""Pytest fixtures for scale circles tests."""
import math
import pytest

from scale_circles.scale import METERS_PER_UNIT


class FakePointResolution:
    """Projection service where one map unit is one meter everywhere.

    Records every call so tests can check which units were requested.
    """

    def __init__(self):
        self.calls = []

    def __call__(self, projection, resolution, coordinate, units):
        self.calls.append((projection, resolution, coordinate, units))
        if not math.isfinite(resolution):
            return math.nan
        if units == "degrees":
            return resolution / METERS_PER_UNIT["degrees"]
        return resolution


@pytest.fixture
def point_resolution():
    """Fake projection service."""
    return FakePointResolution()


@pytest.fixture
def viewport():
    """Viewport at 100 meters per pixel."""
    return {
        "center": (0.0, 0.0),
        "resolution": 100.0,
        "projection": "EPSG:3857",
    }


@pytest.fixture
def invalid_viewport():
    """Viewport the projection service cannot resolve."""
    return {
        "center": (0.0, 0.0),
        "resolution": math.nan,
        "projection": "EPSG:3857",
    }


@pytest.fixture
def control(point_resolution):
    """Control with default config and the fake projection service."""
    from scale_circles.control import ScaleCirclesControl
    return ScaleCirclesControl(point_resolution=point_resolution)


@pytest.fixture
def km_scale():
    """Nice scale of 50 km over 500 pixels."""
    return {
        "chosen_distance": 50.0,
        "pixel_width": 500,
        "decimal_exponent": 1,
        "suffix": "km",
        "point_resolution": 0.1,
    }
