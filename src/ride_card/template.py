"""
SVG template documents.

A template is an ordinary SVG (typically drawn in Inkscape) whose placeholder
elements carry well-known ids. This module parses it with ElementTree, tags
every identified element with its kind, and offers the small geometry
helpers the compositor needs:

- the box a placeholder path spans (where the elevation profile goes)
- the stroke color of that path (reused for the map track line)
- the output pixel size of an image placeholder
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree as ET

from svgpathtools import parse_path

from ride_card.errors import TemplateError

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"
SODIPODI_NS = "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd"
INKSCAPE_NS = "http://www.inkscape.org/namespaces/inkscape"

XLINK_HREF = f"{{{XLINK_NS}}}href"
SODIPODI_ABSREF = f"{{{SODIPODI_NS}}}absref"

for _prefix, _uri in (("", SVG_NS), ("xlink", XLINK_NS), ("sodipodi", SODIPODI_NS), ("inkscape", INKSCAPE_NS)):
    ET.register_namespace(_prefix, _uri)

# CSS pixels per unit; unitless lengths are px
_UNIT_TO_PX = {
    "": 1.0,
    "px": 1.0,
    "mm": 96.0 / 25.4,
    "cm": 96.0 / 2.54,
    "in": 96.0,
    "pt": 96.0 / 72.0,
}

_LENGTH_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-z]*)\s*$")
_STROKE_STYLE_RE = re.compile(r"(?:^|;)\s*stroke\s*:\s*#([0-9a-fA-F]+)")


class ElementKind(enum.Enum):
    TEXT = "text"
    PATH = "path"
    IMAGE = "image"
    OTHER = "other"


_KIND_BY_TAG = {
    "text": ElementKind.TEXT,
    "tspan": ElementKind.TEXT,
    "path": ElementKind.PATH,
    "image": ElementKind.IMAGE,
}


def local_name(tag: str) -> str:
    """Strip an ElementTree '{namespace}' prefix from a tag."""
    return tag.rsplit("}", 1)[-1]


@dataclass(frozen=True)
class PathBox:
    """Rectangle spanned by the first two points of a path."""

    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> tuple[float, float]:
        return self.x, self.y

    @property
    def baseline(self) -> float:
        return self.y + self.height


@dataclass
class TemplateElement:
    id: str
    kind: ElementKind
    element: ET.Element

    def set_text(self, value: str) -> None:
        """Replace the visible text, keeping any tspan structure Inkscape wrote.

        With child elements the value goes into the first child; every other
        text run of this element (its own leading text, the other children,
        text between children) is cleared.
        """
        target = self.element
        children = list(self.element)
        if children:
            target = children[0]
            self.element.text = None
            for child in children:
                child.tail = None
            for child in children[1:]:
                child.text = None
        target.text = value

    def set_path_d(self, d: str) -> None:
        self.element.set("d", d)

    def set_image_href(self, href: str) -> None:
        """Point the image at href, dropping any external file reference."""
        if "href" in self.element.attrib:
            self.element.set("href", href)
            self.element.attrib.pop(XLINK_HREF, None)
        else:
            self.element.set(XLINK_HREF, href)
        self.element.attrib.pop(SODIPODI_ABSREF, None)


def parse_svg_length(value: str | None) -> float | None:
    """Convert an SVG length such as '1080', '285.75mm' or '72pt' to pixels."""
    if value is None:
        return None
    match = _LENGTH_RE.match(value)
    if not match or match.group(2) not in _UNIT_TO_PX:
        return None
    return float(match.group(1)) * _UNIT_TO_PX[match.group(2)]


def parse_viewbox(value: str | None) -> tuple[float, float, float, float] | None:
    if value is None:
        return None
    parts = [p for p in re.split(r"[\s,]+", value.strip()) if p]
    if len(parts) != 4:
        return None
    try:
        return tuple(float(p) for p in parts)
    except ValueError:
        return None


def read_path_box(d: str) -> PathBox:
    """Read the box a placeholder path spans.

    Templates draw path_elevation as a segment from the bottom-left to the
    top-right of the area the profile should fill, e.g.
    'M 5.2,174.6 137.5,140.2' or 'm 2.6,169.3 10.6,-31.75'. The box spans
    the first segment's end points; when that segment is flat in either
    direction (e.g. an 'H' then 'V' outline) the whole path's bounding box
    is used instead.

    Raises:
        TemplateError: If d is not valid path data or has no segments.
    """
    if not d.lstrip().startswith(("M", "m")):
        raise TemplateError(f"Path must start with a move-to: {d!r}")
    try:
        path = parse_path(d)
    except (ValueError, IndexError) as e:
        raise TemplateError(f"Invalid path data {d!r}: {e}") from e
    if len(path) == 0:
        raise TemplateError(f"Placeholder path needs two points: {d!r}")

    first = path[0]
    x_min, x_max = sorted((first.start.real, first.end.real))
    y_min, y_max = sorted((first.start.imag, first.end.imag))
    if x_min == x_max or y_min == y_max:
        x_min, x_max, y_min, y_max = path.bbox()
    return PathBox(x=x_min, y=y_min, width=x_max - x_min, height=y_max - y_min)


class TemplateDocument:
    """Mutable SVG template with its identified elements indexed by id."""

    def __init__(self, root: ET.Element):
        self.root = root
        self._index: dict[str, TemplateElement] | None = None

    @classmethod
    def from_string(cls, svg: str | bytes) -> "TemplateDocument":
        try:
            return cls(ET.fromstring(svg))
        except ET.ParseError as e:
            raise TemplateError(f"Failed to parse SVG template: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "TemplateDocument":
        """Read an SVG template from disk.

        Raises:
          TemplateError, OSError
        """
        try:
            return cls(ET.parse(path).getroot())
        except ET.ParseError as e:
            raise TemplateError(f"Failed to parse SVG template {path}: {e}") from e

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def write(self, path: str | Path) -> None:
        """Write the document as UTF-8 with an XML declaration."""
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        ET.ElementTree(self.root).write(out_path, encoding="utf-8", xml_declaration=True)

    def index(self) -> dict[str, TemplateElement]:
        """Map every element id to its element, walking the tree once.

        The first element wins when an id is repeated.
        """
        if self._index is None:
            index: dict[str, TemplateElement] = {}
            for el in self.root.iter():
                el_id = el.get("id")
                if el_id is None:
                    continue
                if el_id in index:
                    logger.debug("Duplicate element id %r in template, keeping the first", el_id)
                    continue
                kind = _KIND_BY_TAG.get(local_name(el.tag), ElementKind.OTHER)
                index[el_id] = TemplateElement(id=el_id, kind=kind, element=el)
            self._index = index
        return self._index

    def get(self, element_id: str, kind: ElementKind | None = None) -> TemplateElement | None:
        """Look up an element by id, optionally requiring a kind."""
        found = self.index().get(element_id)
        if found is None or (kind is not None and found.kind is not kind):
            return None
        return found

    def path_box(self, element_id: str = "path_elevation") -> PathBox | None:
        found = self.get(element_id, ElementKind.PATH)
        if found is None or not found.element.get("d"):
            return None
        return read_path_box(found.element.get("d"))

    def track_color(self, element_id: str = "path_elevation") -> str | None:
        """Hex stroke color of a path, from its stroke attribute or style."""
        found = self.get(element_id, ElementKind.PATH)
        if found is None:
            return None

        stroke = found.element.get("stroke")
        if stroke and stroke.startswith("#") and len(stroke) in (7, 9):
            return stroke

        match = _STROKE_STYLE_RE.search(found.element.get("style", ""))
        if match and len(match.group(1)) in (6, 8):
            return "#" + match.group(1)
        return None

    def image_pixel_size(self, element_id: str = "image_map") -> tuple[int, int] | None:
        """Pixel size an image placeholder occupies in the rendered output.

        Uses the root width/height and viewBox to convert the image's user
        units. Without usable root metrics the image is assumed 1000 px wide,
        keeping its aspect ratio.
        """
        found = self.get(element_id, ElementKind.IMAGE)
        if found is None:
            return None
        w_units = parse_svg_length(found.element.get("width"))
        h_units = parse_svg_length(found.element.get("height"))
        if not w_units or not h_units:
            return None

        svg_w = parse_svg_length(self.root.get("width"))
        svg_h = parse_svg_length(self.root.get("height"))
        if svg_w and svg_h:
            viewbox = parse_viewbox(self.root.get("viewBox")) or (0.0, 0.0, svg_w, svg_h)
            vb_w, vb_h = viewbox[2], viewbox[3]
            if vb_w > 0 and vb_h > 0:
                w_px = w_units * svg_w / vb_w
                h_px = h_units * svg_h / vb_h
                return max(1, round(w_px)), max(1, round(h_px))

        aspect = max(w_units / h_units, 0.0001)
        return 1000, max(1, round(1000 / aspect))
