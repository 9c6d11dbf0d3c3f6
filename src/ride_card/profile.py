"""Elevation profile path generation for summary cards."""

import logging

from ride_card.config import RideConfig
from ride_card.distance import geo_distance, scale
from ride_card.models import ProfilePath, RideStats, Track

logger = logging.getLogger(__name__)


def _elevation_range(stats: RideStats, min_span: float) -> tuple[float, float]:
    """Elevation range mapped onto the drawing height, widened upward to min_span."""
    low, high = stats.elevation_min, stats.elevation_max
    if high - low < min_span:
        high = low + min_span
    return low, high


def build_profile(
    track: Track,
    stats: RideStats,
    width: float,
    height: float,
    origin: tuple[float, float] = (0.0, 0.0),
    config: RideConfig | None = None,
) -> ProfilePath:
    """Build the elevation-over-distance polyline for a track.

    The horizontal axis is cumulative ride distance scaled onto [0, width], so
    spacing follows the ground covered rather than the sampling rate. The
    vertical axis maps [elevation_min, elevation_max] onto [height, 0] since
    drawing coordinates grow downward. All points are then shifted by origin.

    Points without elevation are dropped (their distance still counts). With
    fewer than two usable points the returned path is empty.
    """
    if config is None:
        config = RideConfig()

    ox, oy = origin
    low, high = _elevation_range(stats, config.min_elevation_span)

    cum_dist = 0.0
    samples: list[tuple[float, float]] = []
    for i, pt in enumerate(track.points):
        if i > 0:
            cum_dist += geo_distance(track[i - 1].coord, pt.coord, config.distance_method)
        if pt.elevation is not None:
            samples.append((cum_dist, pt.elevation))

    if len(samples) < 2:
        logger.debug("Only %d point(s) with elevation, profile is empty", len(samples))
        return ProfilePath()

    # Stats may come from a different distance method; scale against what was walked here.
    total = cum_dist
    points = tuple(
        (
            ox + scale(d, 0.0, total, 0.0, width),
            oy + scale(e, low, high, height, 0.0),
        )
        for d, e in samples
    )
    return ProfilePath(points=points)
