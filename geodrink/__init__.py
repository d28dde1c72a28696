"""GeoDrink: drinking water sources along a GPX route."""

from .main import main
from .models import Bounds, CurrentPosition, Route, WaterPoint
from .errors import GeoDrinkError, OverpassAPIError, TrackParseError

__all__ = [
    "main",
    "Bounds",
    "CurrentPosition",
    "Route",
    "WaterPoint",
    "GeoDrinkError",
    "OverpassAPIError",
    "TrackParseError",
]
