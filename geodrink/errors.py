"""Central error types used across the application."""

from __future__ import annotations


class GeoDrinkError(RuntimeError):
    """Base error for GeoDrink failures."""


class TrackParseError(GeoDrinkError):
    """Raised when a GPX document cannot be turned into a route."""

    MALFORMED = "malformed"
    NO_POINTS = "no_points"
    NO_COORDINATES = "no_coordinates"

    def __init__(self, message: str, *, reason: str = MALFORMED) -> None:
        super().__init__(message)
        self.reason = reason


class OverpassAPIError(GeoDrinkError):
    """Raised when the Overpass API is unreachable or returns an unusable reply."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheStorageError(GeoDrinkError):
    """Raised by cache storage backends on read, write or decode failures."""


class GeolocationError(GeoDrinkError):
    """Raised when a device location fix cannot be obtained."""

    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"

    def __init__(self, message: str, *, reason: str = UNAVAILABLE) -> None:
        super().__init__(message)
        self.reason = reason


class ExportError(GeoDrinkError):
    """Raised when water points cannot be exported."""


__all__ = [
    "GeoDrinkError",
    "TrackParseError",
    "OverpassAPIError",
    "CacheStorageError",
    "GeolocationError",
    "ExportError",
]
