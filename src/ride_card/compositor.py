"""Placeholder substitution of ride statistics into SVG templates."""

import logging
from dataclasses import dataclass
from typing import Callable

from ride_card.config import RideConfig
from ride_card.errors import TemplateError, UnboundRequiredPlaceholderError
from ride_card.formatters import (
    format_distance,
    format_elevation,
    format_hhmmss,
    format_speed,
    truncate_ellipsis,
)
from ride_card.models import MapImage, ProfilePath, RideStats
from ride_card.template import ElementKind, TemplateDocument

logger = logging.getLogger(__name__)

PROFILE_PLACEHOLDER = "path_elevation"
MAP_PLACEHOLDER = "image_map"
TRACK_NAME_PLACEHOLDER = "value_track_name"
MAX_TRACK_NAME_CHARS = 32


def _distance(meters: float, config: RideConfig) -> str:
    return format_distance(meters, config.distance_unit, config.decimal_places)


def _speed(mps: float, config: RideConfig) -> str:
    return format_speed(mps, config.speed_unit, config.decimal_places)


def _elevation(meters: float, config: RideConfig) -> str:
    return format_elevation(meters, config.elevation_unit)


def _duration(duration, config: RideConfig) -> str:
    return format_hhmmss(duration)


@dataclass(frozen=True)
class PlaceholderBinding:
    """Ties a template element id to the value that replaces it."""

    id: str
    field: str
    kind: ElementKind
    formatter: Callable[..., str] | None = None

    def format(self, stats: RideStats, config: RideConfig) -> str:
        return self.formatter(getattr(stats, self.field), config)


TEXT_BINDINGS = (
    PlaceholderBinding("value_distance", "total_distance", ElementKind.TEXT, _distance),
    PlaceholderBinding("value_time", "total_time", ElementKind.TEXT, _duration),
    PlaceholderBinding("value_moving_time", "moving_time", ElementKind.TEXT, _duration),
    PlaceholderBinding("value_speed", "avg_speed", ElementKind.TEXT, _speed),
    PlaceholderBinding("value_speed_moving", "avg_moving_speed", ElementKind.TEXT, _speed),
    PlaceholderBinding("value_speed_max", "max_speed", ElementKind.TEXT, _speed),
    PlaceholderBinding("value_uphill", "elevation_gain", ElementKind.TEXT, _elevation),
    PlaceholderBinding("value_downhill", "elevation_loss", ElementKind.TEXT, _elevation),
    PlaceholderBinding("value_elevation_max", "elevation_max", ElementKind.TEXT, _elevation),
    PlaceholderBinding("value_elevation_min", "elevation_min", ElementKind.TEXT, _elevation),
)

PLACEHOLDER_BINDINGS = TEXT_BINDINGS + (
    PlaceholderBinding(PROFILE_PLACEHOLDER, "profile", ElementKind.PATH),
    PlaceholderBinding(MAP_PLACEHOLDER, "map_image", ElementKind.IMAGE),
    PlaceholderBinding(TRACK_NAME_PLACEHOLDER, "track_name", ElementKind.TEXT),
)


def format_values(stats: RideStats, config: RideConfig | None = None) -> dict[str, str]:
    """Formatted text for every stats placeholder, keyed by element id."""
    if config is None:
        config = RideConfig()
    return {binding.id: binding.format(stats, config) for binding in TEXT_BINDINGS}


def missing_placeholders(document: TemplateDocument, config: RideConfig) -> list[str]:
    """Required placeholder ids with no element of the bound kind in the document."""
    return [
        binding.id
        for binding in PLACEHOLDER_BINDINGS
        if binding.id in config.required_placeholders and document.get(binding.id, binding.kind) is None
    ]


def compose(
    document: TemplateDocument,
    stats: RideStats,
    profile: ProfilePath,
    map_image: MapImage | None,
    config: RideConfig | None = None,
    strict: bool | None = None,
    track_name: str | None = None,
) -> TemplateDocument:
    """Fill a template's placeholders in place and return it.

    Text placeholders get formatted stats, path_elevation gets the profile
    geometry and image_map gets the map payload inlined as a data URI.
    Elements with other ids are untouched. strict defaults to config.strict.

    Raises:
        UnboundRequiredPlaceholderError: In strict mode, if any required
            placeholder is missing from the document.
        TemplateError: In strict mode, if the profile is to be closed and
            the path_elevation geometry cannot be read.

    The document is not modified when an exception is raised.
    """
    if config is None:
        config = RideConfig()
    if strict is None:
        strict = config.strict

    missing = missing_placeholders(document, config)
    if missing:
        if strict:
            raise UnboundRequiredPlaceholderError(missing)
        for element_id in missing:
            logger.warning("Template has no %r placeholder, skipping it", element_id)

    baseline = _profile_baseline(document, profile, config, strict)

    for element_id, text in format_values(stats, config).items():
        element = document.get(element_id, ElementKind.TEXT)
        if element is not None:
            element.set_text(text)

    if track_name is not None:
        element = document.get(TRACK_NAME_PLACEHOLDER, ElementKind.TEXT)
        if element is not None:
            element.set_text(truncate_ellipsis(track_name.strip(), MAX_TRACK_NAME_CHARS))

    _apply_profile(document, profile, baseline)
    _apply_map(document, map_image)
    return document


def _profile_baseline(
    document: TemplateDocument, profile: ProfilePath, config: RideConfig, strict: bool
) -> float | None:
    """Y the closed profile drops to, None for an open path."""
    if not config.close_profile or profile.is_empty:
        return None
    try:
        box = document.path_box(PROFILE_PLACEHOLDER)
    except TemplateError:
        if strict:
            raise
        logger.warning("Cannot read %r geometry, closing the profile at its lowest point", PROFILE_PLACEHOLDER)
        box = None
    if box is None:
        return max(y for _, y in profile.points)
    return box.baseline


def _apply_profile(document: TemplateDocument, profile: ProfilePath, baseline: float | None) -> None:
    element = document.get(PROFILE_PLACEHOLDER, ElementKind.PATH)
    if element is None:
        return
    if profile.is_empty:
        logger.warning("Elevation profile is empty, leaving %r unchanged", PROFILE_PLACEHOLDER)
        return
    element.set_path_d(profile.to_svg_d(baseline=baseline))


def _apply_map(document: TemplateDocument, map_image: MapImage | None) -> None:
    element = document.get(MAP_PLACEHOLDER, ElementKind.IMAGE)
    if element is None:
        return
    if map_image is None:
        logger.warning("No map image supplied, leaving %r unchanged", MAP_PLACEHOLDER)
        return
    element.set_image_href(map_image.to_data_uri())
