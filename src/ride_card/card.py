"""One-track pipeline: stats, profile, composition."""

import logging
from dataclasses import dataclass

from ride_card.analyzer import compute_stats
from ride_card.compositor import PROFILE_PLACEHOLDER, compose
from ride_card.config import RideConfig
from ride_card.errors import TemplateError
from ride_card.models import MapImage, ProfilePath, RideStats, Track
from ride_card.profile import build_profile
from ride_card.smoothing import smooth_elevations
from ride_card.template import TemplateDocument

logger = logging.getLogger(__name__)


@dataclass
class CardResult:
    document: TemplateDocument
    stats: RideStats
    profile: ProfilePath


def render_card(
    track: Track,
    document: TemplateDocument,
    config: RideConfig | None = None,
    map_image: MapImage | None = None,
    strict: bool | None = None,
) -> CardResult:
    """Compute a track's stats and elevation profile and fill the template.

    The profile is drawn into the box spanned by the template's own
    path_elevation geometry. The document is modified in place.

    Raises:
        InvalidTrackError: If the track's timestamps go backwards.
        TemplateError: In strict mode, if path_elevation geometry cannot be
            read. Lenient mode leaves that path unchanged instead.
        UnboundRequiredPlaceholderError: In strict mode, if the template
            lacks a required placeholder.
    """
    if config is None:
        config = RideConfig()
    if strict is None:
        strict = config.strict

    if config.elevation_smoothing > 0:
        track = smooth_elevations(track, config.elevation_smoothing, config.distance_method)

    stats = compute_stats(track, config)
    if stats.is_degenerate:
        logger.warning("Track has %d point(s); the card will show zero stats", stats.point_count)

    try:
        box = document.path_box(PROFILE_PLACEHOLDER)
    except TemplateError as e:
        if strict:
            raise
        logger.warning("Skipping the elevation profile: %s", e)
        box = None

    if box is not None:
        profile = build_profile(track, stats, box.width, box.height, origin=box.origin, config=config)
    else:
        profile = ProfilePath()

    compose(document, stats, profile, map_image, config=config, strict=strict, track_name=track.name)
    return CardResult(document=document, stats=stats, profile=profile)
