import os
import tempfile

import pytest

from ride_card.parser import parse_gpx

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "..", "functional", "data", "sample_ride.gpx"
)


def _write_gpx(body):
    """Write a GPX document to a temp file and return its path."""
    content = f"""<?xml version="1.0"?>
    <gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">
      {body}
    </gpx>"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".gpx", delete=False) as f:
        f.write(content)
    return f.name


class TestParseGpx:
    def test_parse_sample_file(self):
        track = parse_gpx(SAMPLE_GPX_PATH)
        assert len(track) == 20
        assert track.name == "Morning Ride"
        assert track[0].lat == pytest.approx(37.7749)
        assert track[0].lon == pytest.approx(-122.4194)
        assert track[0].elevation == pytest.approx(10.0)
        assert track[0].time is not None

    def test_all_points_have_elevation_and_time(self):
        track = parse_gpx(SAMPLE_GPX_PATH)
        for pt in track:
            assert pt.elevation is not None
            assert pt.time is not None

    def test_missing_elevation(self):
        path = _write_gpx("""<trk><trkseg>
            <trkpt lat="37.0" lon="-122.0"><time>2024-06-15T08:00:00Z</time></trkpt>
          </trkseg></trk>""")
        track = parse_gpx(path)
        os.unlink(path)
        assert len(track) == 1
        assert track[0].elevation is None

    def test_missing_time(self):
        path = _write_gpx("""<trk><trkseg>
            <trkpt lat="37.0" lon="-122.0"><ele>100</ele></trkpt>
          </trkseg></trk>""")
        track = parse_gpx(path)
        os.unlink(path)
        assert track[0].time is None
        assert track[0].elevation == pytest.approx(100.0)

    def test_segments_joined_in_order(self):
        path = _write_gpx("""<trk>
            <trkseg><trkpt lat="1.0" lon="1.0"/><trkpt lat="2.0" lon="2.0"/></trkseg>
            <trkseg><trkpt lat="3.0" lon="3.0"/></trkseg>
          </trk>
          <trk><trkseg><trkpt lat="4.0" lon="4.0"/></trkseg></trk>""")
        track = parse_gpx(path)
        os.unlink(path)
        assert [pt.lat for pt in track] == [1.0, 2.0, 3.0, 4.0]

    def test_empty_gpx(self):
        path = _write_gpx("<trk><trkseg></trkseg></trk>")
        track = parse_gpx(path)
        os.unlink(path)
        assert len(track) == 0

    def test_name_falls_back_to_file_stem(self, tmp_path):
        path = tmp_path / "evening_loop.gpx"
        path.write_text("""<?xml version="1.0"?>
        <gpx version="1.1" xmlns="http://www.topografix.com/GPX/1/1">
          <trk><trkseg><trkpt lat="1.0" lon="1.0"/></trkseg></trk>
        </gpx>""")
        assert parse_gpx(str(path)).name == "evening_loop"

    def test_first_named_track_wins(self):
        path = _write_gpx("""<trk><trkseg><trkpt lat="1.0" lon="1.0"/></trkseg></trk>
          <trk><name> Col du Galibier </name><trkseg><trkpt lat="2.0" lon="2.0"/></trkseg></trk>""")
        track = parse_gpx(path)
        os.unlink(path)
        assert track.name == "Col du Galibier"

    def test_file_not_found(self):
        with pytest.raises(FileNotFoundError):
            parse_gpx("/nonexistent/path/file.gpx")
