"""SVG card templates shipped with the package."""

from importlib import resources
from pathlib import Path

from ride_card.template import TemplateDocument

DEFAULT_TEMPLATE = "story"


def list_templates() -> list[str]:
    """Names of the packaged templates, sorted."""
    return sorted(
        Path(entry.name).stem
        for entry in resources.files(__name__).iterdir()
        if entry.name.endswith(".svg")
    )


def get_template(name: str) -> str | None:
    """SVG text of a packaged template, or None if there is no such template."""
    if name not in list_templates():
        return None
    return resources.files(__name__).joinpath(f"{name}.svg").read_text(encoding="utf-8")


def load_template(name_or_path: str) -> TemplateDocument:
    """Load a packaged template by name, falling back to a file path.

    Raises:
        TemplateError: If the SVG cannot be parsed.
        OSError: If it is not a packaged name and the file cannot be read.
    """
    content = get_template(name_or_path)
    if content is not None:
        return TemplateDocument.from_string(content)
    return TemplateDocument.from_file(name_or_path)
