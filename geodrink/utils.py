"""General utility helpers shared across modules."""

from __future__ import annotations


def format_distance(meters: float) -> str:
    """Format metres as ``850 m`` or ``12.35 km``."""

    if meters < 1000:
        return f"{meters:.0f} m"
    return f"{meters / 1000:.2f} km"


def format_bytes(size: int) -> str:
    """Format a byte count using binary units."""

    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    if index == 0:
        return f"{int(value)} Bytes"
    return f"{value:.2f} {units[index]}"

