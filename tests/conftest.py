import os
from datetime import datetime, timedelta, timezone

import pytest

from ride_card.models import Coordinate, RideStats, Track, TrackPoint

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "functional", "data", "sample_ride.gpx"
)

BASE_TIME = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)


def make_point(lat, lon, elevation=None, seconds=0):
    """TrackPoint at BASE_TIME + seconds (no timestamp if seconds is None)."""
    time = BASE_TIME + timedelta(seconds=seconds) if seconds is not None else None
    return TrackPoint(coord=Coordinate(lat=lat, lon=lon, elevation=elevation), time=time)


FULL_TEMPLATE = """<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink"
     xmlns:sodipodi="http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"
     width="1080" height="1080" viewBox="0 0 285.75 285.75">
  <text id="text_distance"><tspan id="value_distance">132</tspan></text>
  <text><tspan id="value_time">0</tspan></text>
  <text><tspan id="value_moving_time">0</tspan></text>
  <text><tspan id="value_speed">0</tspan></text>
  <text><tspan id="value_speed_moving">0</tspan></text>
  <text><tspan id="value_speed_max">0</tspan></text>
  <text><tspan id="value_uphill">0</tspan></text>
  <text><tspan id="value_downhill">0</tspan></text>
  <text><tspan id="value_elevation_max">0</tspan></text>
  <text><tspan id="value_elevation_min">0</tspan></text>
  <text><tspan id="value_track_name">name</tspan></text>
  <text><tspan id="label_distance">Distance</tspan></text>
  <path id="path_elevation" d="M 5.2,174.6 137.5,140.2" style="fill:none;stroke:#2db192;stroke-width:1"/>
  <path id="decoration" d="M 0,0 10,10"/>
  <image id="image_map" width="158.75" height="190.5" xlink:href="map.png" sodipodi:absref="/tmp/map.png"/>
</svg>"""


@pytest.fixture
def point():
    """Factory for TrackPoints, see make_point."""
    return make_point


@pytest.fixture
def full_template_svg():
    return FULL_TEMPLATE


@pytest.fixture
def flat_track():
    """Flat track, three points ~139m apart, 20s per segment."""
    return Track.from_points(
        [
            make_point(37.7749, -122.4194, 10.0, 0),
            make_point(37.7758, -122.4183, 10.0, 20),
            make_point(37.7767, -122.4172, 10.0, 40),
        ],
        name="Flat ride",
    )


@pytest.fixture
def hilly_track():
    """Up 25m then down 40m."""
    return Track.from_points(
        [
            make_point(37.7749, -122.4194, 10.0, 0),
            make_point(37.7758, -122.4183, 20.0, 30),
            make_point(37.7767, -122.4172, 35.0, 60),
            make_point(37.7776, -122.4161, 15.0, 75),
            make_point(37.7785, -122.4150, -5.0, 90),
        ]
    )


@pytest.fixture
def stats_fixture():
    return RideStats(
        total_distance=12345.6,
        total_time=timedelta(hours=1, minutes=2, seconds=3),
        moving_time=timedelta(minutes=55, seconds=30),
        avg_speed=3.3,
        avg_moving_speed=3.7,
        max_speed=12.5,
        elevation_gain=432.4,
        elevation_loss=398.6,
        elevation_max=812.0,
        elevation_min=120.4,
        point_count=500,
    )
