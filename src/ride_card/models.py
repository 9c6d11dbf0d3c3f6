import base64
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable


@dataclass(frozen=True)
class Coordinate:
    lat: float  # degrees
    lon: float  # degrees
    elevation: float | None = None  # meters


@dataclass(frozen=True)
class TrackPoint:
    coord: Coordinate
    time: datetime | None  # UTC

    @property
    def lat(self) -> float:
        return self.coord.lat

    @property
    def lon(self) -> float:
        return self.coord.lon

    @property
    def elevation(self) -> float | None:
        return self.coord.elevation


@dataclass(frozen=True)
class Track:
    """Ordered, immutable sequence of track points for one ride."""

    points: tuple[TrackPoint, ...] = ()
    name: str | None = None

    @classmethod
    def from_points(cls, points: Iterable[TrackPoint], name: str | None = None) -> "Track":
        return cls(points=tuple(points), name=name)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index: int) -> TrackPoint:
        return self.points[index]


@dataclass(frozen=True)
class RideStats:
    total_distance: float  # meters
    total_time: timedelta
    moving_time: timedelta
    avg_speed: float  # m/s (based on total time)
    avg_moving_speed: float  # m/s (based on moving time)
    max_speed: float  # m/s
    elevation_gain: float  # meters
    elevation_loss: float  # meters
    elevation_max: float  # meters
    elevation_min: float  # meters
    point_count: int = 0

    @property
    def is_degenerate(self) -> bool:
        """True when the track had too few points to measure anything."""
        return self.point_count < 2


@dataclass(frozen=True)
class ProfilePath:
    """Elevation curve as drawing-space points, in ride order."""

    points: tuple[tuple[float, float], ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.points) < 2

    def to_svg_d(self, baseline: float | None = None, precision: int = 3) -> str:
        """Build an SVG path description: move to the first point, line to the rest.

        With a baseline the path drops to it at both ends and closes, so the
        template can fill the area under the curve.
        """
        if not self.points:
            return ""

        def fmt(x: float, y: float) -> str:
            return f"{x:.{precision}f},{y:.{precision}f}"

        first_x, first_y = self.points[0]
        parts = [f"M {fmt(first_x, first_y)}"]
        parts.extend(f"L {fmt(x, y)}" for x, y in self.points[1:])
        if baseline is not None:
            last_x, _ = self.points[-1]
            parts.append(f"L {fmt(last_x, baseline)}")
            parts.append(f"L {fmt(first_x, baseline)}")
            parts.append("Z")
        return " ".join(parts)


@dataclass(frozen=True)
class MapImage:
    """Raw map snapshot payload supplied by a map source."""

    data: bytes = field(repr=False)
    mime_type: str = "image/png"

    def to_data_uri(self) -> str:
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"
