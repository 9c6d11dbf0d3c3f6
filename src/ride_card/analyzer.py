import logging
from datetime import timedelta

from ride_card.config import RideConfig
from ride_card.distance import geo_distance
from ride_card.errors import InvalidTrackError
from ride_card.models import RideStats, Track

logger = logging.getLogger(__name__)


def _degenerate_stats(track: Track) -> RideStats:
    """Stats for a track with fewer than two points: nothing moved."""
    elevation = track[0].elevation if len(track) == 1 else None
    elevation = elevation if elevation is not None else 0.0
    return RideStats(
        total_distance=0.0,
        total_time=timedelta(),
        moving_time=timedelta(),
        avg_speed=0.0,
        avg_moving_speed=0.0,
        max_speed=0.0,
        elevation_gain=0.0,
        elevation_loss=0.0,
        elevation_max=elevation,
        elevation_min=elevation,
        point_count=len(track),
    )


def compute_stats(track: Track, config: RideConfig | None = None) -> RideStats:
    """Derive distance, time, speed and elevation statistics for a track.

    Single pass over consecutive point pairs. A segment counts as moving when
    its speed exceeds config.moving_threshold_mps. Segments without timestamps
    on both ends contribute distance but no time. Points without elevation
    are skipped for elevation metrics.

    Raises:
        InvalidTrackError: If timestamps decrease along the track.
    """
    if config is None:
        config = RideConfig()

    if len(track) < 2:
        return _degenerate_stats(track)

    total_distance = 0.0
    moving_seconds = 0.0
    max_speed = 0.0
    elevation_gain = 0.0
    elevation_loss = 0.0
    elevation_max = None
    elevation_min = None
    first_time = None
    last_time = None

    for i, pt in enumerate(track.points):
        if pt.time is not None:
            if last_time is not None and pt.time < last_time:
                raise InvalidTrackError(
                    f"Timestamp goes backwards at point {i}: {pt.time.isoformat()} < {last_time.isoformat()}"
                )
            if first_time is None:
                first_time = pt.time
            last_time = pt.time

        if pt.elevation is not None:
            if elevation_max is None or pt.elevation > elevation_max:
                elevation_max = pt.elevation
            if elevation_min is None or pt.elevation < elevation_min:
                elevation_min = pt.elevation

        if i == 0:
            continue

        prev = track[i - 1]
        dist = geo_distance(prev.coord, pt.coord, config.distance_method)
        total_distance += dist

        if prev.time is not None and pt.time is not None:
            elapsed = (pt.time - prev.time).total_seconds()
            if elapsed > 0:
                speed = dist / elapsed
                if speed > max_speed:
                    max_speed = speed
                if speed > config.moving_threshold_mps:
                    moving_seconds += elapsed

        if prev.elevation is not None and pt.elevation is not None:
            delta = pt.elevation - prev.elevation
            if delta > 0:
                elevation_gain += delta
            else:
                elevation_loss += abs(delta)

    if first_time is not None and last_time is not None:
        total_time = last_time - first_time
    else:
        total_time = timedelta()
    total_seconds = total_time.total_seconds()

    stats = RideStats(
        total_distance=total_distance,
        total_time=total_time,
        moving_time=timedelta(seconds=moving_seconds),
        avg_speed=total_distance / total_seconds if total_seconds > 0 else 0.0,
        avg_moving_speed=total_distance / moving_seconds if moving_seconds > 0 else 0.0,
        max_speed=max_speed,
        elevation_gain=elevation_gain,
        elevation_loss=elevation_loss,
        elevation_max=elevation_max if elevation_max is not None else 0.0,
        elevation_min=elevation_min if elevation_min is not None else 0.0,
        point_count=len(track),
    )
    logger.debug(
        "Computed stats for %d points: %.0f m, %s total, %s moving",
        len(track), stats.total_distance, stats.total_time, stats.moving_time,
    )
    return stats
