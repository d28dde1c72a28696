"""Overpass API access: query building, HTTP session and client."""

from .client import OverpassClient
from .query import build_overpass_query, format_bbox, pad_bounds
from .session import create_default_session, get_default_session

__all__ = [
    "OverpassClient",
    "build_overpass_query",
    "format_bbox",
    "pad_bounds",
    "create_default_session",
    "get_default_session",
]
