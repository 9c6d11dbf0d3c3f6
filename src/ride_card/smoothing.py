from bisect import bisect_left, bisect_right
from dataclasses import replace

from ride_card.distance import geo_distance
from ride_card.models import Track


def _fit_at(distances: list[float], elevations: list[float], target: float) -> float:
    """Least-squares line through (distance, elevation), evaluated at target."""
    n = len(distances)
    if n == 1:
        return elevations[0]

    x_mean = sum(distances) / n
    y_mean = sum(elevations) / n
    denominator = sum((x - x_mean) ** 2 for x in distances)
    if denominator == 0:
        return y_mean

    slope = sum((x - x_mean) * (y - y_mean) for x, y in zip(distances, elevations)) / denominator
    return y_mean + slope * (target - x_mean)


def smooth_elevations(track: Track, radius_m: float = 50.0, method: str = "haversine") -> Track:
    """Smooth track elevations using local linear regression over distance.

    Each elevation is replaced by the value of a line fitted through every
    elevation within radius_m meters (along the track) of that point. Local
    slopes survive while GPS elevation jitter is flattened out. Points
    without elevation are kept as they are.

    Returns a new Track; the input is not modified.
    """
    if len(track) < 2 or radius_m <= 0:
        return track

    cum_dist = [0.0]
    for prev, curr in zip(track.points, track.points[1:]):
        cum_dist.append(cum_dist[-1] + geo_distance(prev.coord, curr.coord, method))

    with_elev = [i for i, pt in enumerate(track.points) if pt.elevation is not None]
    elev_dists = [cum_dist[i] for i in with_elev]
    elev_values = [track.points[i].elevation for i in with_elev]

    points = []
    for i, pt in enumerate(track.points):
        if pt.elevation is None:
            points.append(pt)
            continue
        d = cum_dist[i]
        lo = bisect_left(elev_dists, d - radius_m)
        hi = bisect_right(elev_dists, d + radius_m)
        fitted = _fit_at(elev_dists[lo:hi], elev_values[lo:hi], d)
        points.append(replace(pt, coord=replace(pt.coord, elevation=fitted)))

    return Track.from_points(points, name=track.name)
