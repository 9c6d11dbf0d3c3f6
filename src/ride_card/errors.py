"""Exception hierarchy for ride-card.

Callers can catch RideCardError (broad) or a specific subclass (narrow).
Degenerate tracks are not errors: see RideStats.is_degenerate and
ProfilePath.is_empty.
"""


class RideCardError(RuntimeError):
    """Base class for all ride-card errors."""


class InvalidTrackError(RideCardError):
    """Track is structurally inconsistent (e.g. timestamps go backwards)."""


class TemplateError(RideCardError):
    """SVG template could not be parsed or has unusable placeholder geometry."""


class UnboundRequiredPlaceholderError(TemplateError):
    """A required placeholder id is missing from the template (strict mode)."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Template is missing required placeholder(s): " + ", ".join(self.missing)
        )


class MapRenderError(RideCardError):
    """Map snapshot could not be rendered."""


class ConfigError(RideCardError):
    """Configuration value is unknown or out of range."""
