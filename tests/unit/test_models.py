import base64
import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from ride_card.models import Coordinate, MapImage, ProfilePath, RideStats, Track, TrackPoint


class TestTrackPoint:
    def test_construction(self):
        pt = TrackPoint(coord=Coordinate(lat=37.7749, lon=-122.4194, elevation=10.0), time=None)
        assert pt.lat == 37.7749
        assert pt.lon == -122.4194
        assert pt.elevation == 10.0
        assert pt.time is None

    def test_with_time(self):
        t = datetime(2024, 6, 15, 8, 0, 0, tzinfo=timezone.utc)
        pt = TrackPoint(coord=Coordinate(lat=0.0, lon=0.0), time=t)
        assert pt.time == t
        assert pt.elevation is None

    def test_immutable(self):
        pt = TrackPoint(coord=Coordinate(lat=0.0, lon=0.0), time=None)
        with pytest.raises(dataclasses.FrozenInstanceError):
            pt.time = datetime.now(timezone.utc)


class TestTrack:
    def test_from_points_copies_into_tuple(self, point):
        points = [point(0.0, 0.0, seconds=0), point(0.0, 0.001, seconds=10)]
        track = Track.from_points(points, name="Test")
        points.append(point(0.0, 0.002, seconds=20))
        assert len(track) == 2
        assert isinstance(track.points, tuple)
        assert track.name == "Test"

    def test_sequence_access(self, flat_track):
        assert flat_track[0].lat == 37.7749
        assert [pt.elevation for pt in flat_track] == [10.0, 10.0, 10.0]

    def test_empty(self):
        track = Track()
        assert len(track) == 0
        assert track.name is None


class TestRideStats:
    def test_is_degenerate(self):
        stats = RideStats(
            total_distance=0.0,
            total_time=timedelta(),
            moving_time=timedelta(),
            avg_speed=0.0,
            avg_moving_speed=0.0,
            max_speed=0.0,
            elevation_gain=0.0,
            elevation_loss=0.0,
            elevation_max=0.0,
            elevation_min=0.0,
            point_count=1,
        )
        assert stats.is_degenerate
        assert not dataclasses.replace(stats, point_count=2).is_degenerate


class TestProfilePath:
    def test_empty(self):
        assert ProfilePath().is_empty
        assert ProfilePath(points=((0.0, 0.0),)).is_empty
        assert ProfilePath().to_svg_d() == ""

    def test_to_svg_d(self):
        path = ProfilePath(points=((0.0, 10.0), (5.0, 2.5), (10.0, 0.0)))
        assert path.to_svg_d() == "M 0.000,10.000 L 5.000,2.500 L 10.000,0.000"

    def test_to_svg_d_closed(self):
        path = ProfilePath(points=((1.0, 8.0), (4.0, 2.0)))
        assert path.to_svg_d(baseline=10.0, precision=1) == "M 1.0,8.0 L 4.0,2.0 L 4.0,10.0 L 1.0,10.0 Z"


class TestMapImage:
    def test_data_uri(self):
        image = MapImage(data=b"\x89PNG fake", mime_type="image/png")
        uri = image.to_data_uri()
        assert uri.startswith("data:image/png;base64,")
        assert base64.b64decode(uri.split(",", 1)[1]) == b"\x89PNG fake"
