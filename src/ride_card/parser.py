from pathlib import Path

import gpxpy

from ride_card.models import Coordinate, Track, TrackPoint


def _track_name(gpx, filepath: str) -> str:
    """Name of the first named GPX track, else the file stem."""
    for track in gpx.tracks:
        if track.name and track.name.strip():
            return track.name.strip()
    return Path(filepath).stem or "track"


def parse_gpx(filepath: str) -> Track:
    """Parse a GPX file into a Track, joining all tracks and segments in order."""
    with open(filepath, "r") as f:
        gpx = gpxpy.parse(f)

    points: list[TrackPoint] = []
    for track in gpx.tracks:
        for segment in track.segments:
            for pt in segment.points:
                points.append(
                    TrackPoint(
                        coord=Coordinate(lat=pt.latitude, lon=pt.longitude, elevation=pt.elevation),
                        time=pt.time,
                    )
                )
    return Track.from_points(points, name=_track_name(gpx, filepath))
