"""Track snapshot rendering for the map placeholder.

Draws the ride as a cased line on a plain background. Base map tiles are not
fetched; callers with a real map renderer can pass its output as a MapImage
instead.
"""

import io
import logging
import math

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend, no display needed
import matplotlib.pyplot as plt

from ride_card.errors import MapRenderError
from ride_card.models import MapImage, Track

logger = logging.getLogger(__name__)

DPI = 100
DEFAULT_TRACK_COLOR = '#ff2d55'
CASING_COLOR = (0, 0, 0, 200 / 255)
BACKGROUND_COLOR = '#f2efe9'
CASING_WIDTH_PX = 10.0
TRACK_WIDTH_PX = 6.0
PADDING = 0.1  # fraction of the track extent left around it
MIN_EXTENT_DEG = 0.001  # ~100 m, keeps very short tracks from filling the frame


def _px_to_points(px: float) -> float:
    return px * 72.0 / DPI


def _dedupe_consecutive(coords: list[tuple[float, float]]) -> list[tuple[float, float]]:
    out: list[tuple[float, float]] = []
    for c in coords:
        if out and out[-1] == c:
            continue
        out.append(c)
    return out


def _fit_limits(
    xs: list[float], ys: list[float], width_px: int, height_px: int
) -> tuple[tuple[float, float], tuple[float, float]]:
    """Axis limits that contain the track, padded, at the image's aspect ratio."""
    x_min, x_max = min(xs), max(xs)
    y_min, y_max = min(ys), max(ys)
    span_x = max(x_max - x_min, MIN_EXTENT_DEG) * (1 + 2 * PADDING)
    span_y = max(y_max - y_min, MIN_EXTENT_DEG) * (1 + 2 * PADDING)

    aspect = width_px / height_px
    if span_x / span_y < aspect:
        span_x = span_y * aspect
    else:
        span_y = span_x / aspect

    cx, cy = (x_min + x_max) / 2, (y_min + y_max) / 2
    return (cx - span_x / 2, cx + span_x / 2), (cy - span_y / 2, cy + span_y / 2)


def render_track_snapshot(
    track: Track,
    width_px: int,
    height_px: int,
    track_color: str | None = None,
) -> MapImage:
    """Render the track outline as a PNG of the given pixel size.

    Longitudes are scaled by cos(mean latitude) so the shape is not
    stretched east-west.

    Raises:
        MapRenderError: If the track has no points or the size is empty.
    """
    if len(track) == 0:
        raise MapRenderError("error building map: no coordinates")
    if width_px <= 0 or height_px <= 0:
        raise MapRenderError(f"error building map: invalid image size {width_px}x{height_px}")

    coords = _dedupe_consecutive([(pt.lon, pt.lat) for pt in track.points])
    mean_lat = sum(lat for _, lat in coords) / len(coords)
    lon_factor = math.cos(math.radians(mean_lat))
    xs = [lon * lon_factor for lon, _ in coords]
    ys = [lat for _, lat in coords]

    fig, ax = plt.subplots(figsize=(width_px / DPI, height_px / DPI), facecolor=BACKGROUND_COLOR)
    try:
        fig.subplots_adjust(left=0, right=1, bottom=0, top=1)
        ax.set_facecolor(BACKGROUND_COLOR)
        ax.set_axis_off()

        line_style = dict(solid_capstyle='round', solid_joinstyle='round')
        ax.plot(xs, ys, color=CASING_COLOR, linewidth=_px_to_points(CASING_WIDTH_PX), **line_style)
        ax.plot(xs, ys, color=track_color or DEFAULT_TRACK_COLOR,
                linewidth=_px_to_points(TRACK_WIDTH_PX), **line_style)

        xlim, ylim = _fit_limits(xs, ys, width_px, height_px)
        ax.set_xlim(*xlim)
        ax.set_ylim(*ylim)

        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=DPI, facecolor=BACKGROUND_COLOR, edgecolor='none')
    finally:
        plt.close(fig)
    buf.seek(0)
    logger.debug("Rendered %dx%d track snapshot from %d points", width_px, height_px, len(coords))
    return MapImage(data=buf.getvalue(), mime_type='image/png')
