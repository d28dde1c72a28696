"""Parse GPX documents into normalized :class:`~geodrink.models.Route` objects."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Iterator, List, Optional, Union
from xml.etree.ElementTree import Element

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as ET

from .errors import TrackParseError
from .geometry import bounds_of, polyline_length_m
from .models import LonLat, Route

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _local_name(element: Element) -> str:
    """Return the tag without its ``{namespace}`` prefix (GPX 1.0 and 1.1)."""

    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _iter_named(root: Element, name: str) -> Iterator[Element]:
    for element in root.iter():
        if _local_name(element) == name:
            yield element


def _parse_coordinate(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _child_text(parent: Element, name: str) -> Optional[str]:
    for child in parent:
        if _local_name(child) == name and child.text and child.text.strip():
            return child.text.strip()
    return None


def _extract_name(root: Element) -> Optional[str]:
    """Return the first non-empty track, route or metadata name."""

    for container in ("trk", "rte", "metadata"):
        for element in _iter_named(root, container):
            text = _child_text(element, "name")
            if text:
                return text
    return None


def parse_gpx(text: Union[str, bytes]) -> Route:
    """Build a :class:`Route` from GPX text or raw bytes.

    Track points (``trkpt``) are preferred; route points (``rtept``) are used
    only when the document has no track points. Points whose ``lat``/``lon``
    attributes are missing or not finite numbers are skipped.

    Raises:
        TrackParseError: If the XML is malformed, contains no point elements,
            or none of the points carry usable coordinates.
    """

    try:
        root = ET.fromstring(text)
    except (ET.ParseError, DefusedXmlException, ValueError) as exc:
        raise TrackParseError(
            f"Invalid XML format: {exc}", reason=TrackParseError.MALFORMED
        ) from exc

    points = list(_iter_named(root, "trkpt"))
    if not points:
        points = list(_iter_named(root, "rtept"))
    if not points:
        raise TrackParseError(
            "No track or route points found", reason=TrackParseError.NO_POINTS
        )

    coordinates: List[LonLat] = []
    skipped = 0
    for point in points:
        lat = _parse_coordinate(point.get("lat"))
        lon = _parse_coordinate(point.get("lon"))
        if lat is None or lon is None:
            skipped += 1
            continue
        coordinates.append((lon, lat))

    if not coordinates:
        raise TrackParseError(
            "No valid coordinates found", reason=TrackParseError.NO_COORDINATES
        )
    if skipped:
        LOGGER.warning("Skipped %d GPX points without valid coordinates", skipped)

    route = Route(
        coordinates=tuple(coordinates),
        bounds=bounds_of(coordinates),
        total_distance_m=polyline_length_m(coordinates),
        name=_extract_name(root),
    )
    LOGGER.debug(
        "Parsed GPX route name=%s points=%d length=%.1fm",
        route.name,
        route.point_count,
        route.total_distance_m,
    )
    return route


def load_gpx(path: PathLike) -> Route:
    """Read a GPX file from disk and parse it.

    The raw bytes go to the XML parser so the document's own encoding
    declaration (e.g. ISO-8859-1) is honoured.
    """

    return parse_gpx(Path(path).read_bytes())


__all__ = ["parse_gpx", "load_gpx"]
