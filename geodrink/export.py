"""Tabular export of water points (CSV and Excel)."""

from __future__ import annotations

import logging
from datetime import date
from os import PathLike
from pathlib import Path
from typing import Sequence

import pandas as pd
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from .config import (
    EXCEL_AUTOSIZE_COLUMNS,
    EXCEL_AUTOSIZE_MAX_WIDTH,
    EXCEL_AUTOSIZE_MIN_WIDTH,
    EXCEL_AUTOSIZE_PADDING,
    EXPORT_COLUMN_ORDER,
)
from .errors import ExportError
from .geojson import water_point_label
from .models import WaterPoint

LOGGER = logging.getLogger(__name__)

PathInput = str | Path | PathLike[str]
SHEET_NAME = "Water Points"
HEADER_FONT = Font(bold=True)
HEADER_FILL = PatternFill(patternType="solid", fgColor="FFBDD7EE")
HEADER_BORDER = Border(
    left=Side(style="thin", color="000000"),
    right=Side(style="thin", color="000000"),
    top=Side(style="thin", color="000000"),
    bottom=Side(style="thin", color="000000"),
)


def default_export_name(suffix: str = ".csv", today: date | None = None) -> str:
    """Return ``water-points-YYYY-MM-DD`` with the given suffix."""

    stamp = (today or date.today()).isoformat()
    return f"water-points-{stamp}{suffix}"


def water_points_dataframe(points: Sequence[WaterPoint]) -> pd.DataFrame:
    """Build one row per water point, in the given order."""

    rows = [
        {
            "Distance (km)": round(point.distance_from_start_m / 1000, 2),
            "Type": point.type,
            "Name": water_point_label(point),
            "Latitude": round(point.lat, 6),
            "Longitude": round(point.lon, 6),
            "Access": point.access or "Unknown",
            "Potable": point.potability or "Unknown",
            "Fee": point.fee or "No",
        }
        for point in points
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMN_ORDER)


def _require_points(points: Sequence[WaterPoint]) -> None:
    if not points:
        raise ExportError("No water points to export")


def write_csv(points: Sequence[WaterPoint], path: PathInput) -> Path:
    """Write ``points`` as CSV with fixed decimal places; return the path."""

    _require_points(points)
    df = water_points_dataframe(points)
    df["Distance (km)"] = df["Distance (km)"].map(lambda v: f"{v:.2f}")
    df["Latitude"] = df["Latitude"].map(lambda v: f"{v:.6f}")
    df["Longitude"] = df["Longitude"].map(lambda v: f"{v:.6f}")
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index=False)
    LOGGER.info("Exported %d water points to %s", len(df), output)
    return output


def _style_header_row(ws: Worksheet, max_col: int) -> None:
    for col_idx in range(1, max_col + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.border = HEADER_BORDER


def _autosize(ws: Worksheet) -> None:
    if not EXCEL_AUTOSIZE_COLUMNS:
        return
    try:
        for col_cells in ws.columns:
            max_len = 0
            col_letter = getattr(col_cells[0], "column_letter", None)
            for cell in col_cells:
                if cell.value is None:
                    continue
                max_len = max(max_len, len(str(cell.value)))
            width = min(
                EXCEL_AUTOSIZE_MAX_WIDTH,
                max(EXCEL_AUTOSIZE_MIN_WIDTH, max_len + EXCEL_AUTOSIZE_PADDING),
            )
            if col_letter:
                ws.column_dimensions[col_letter].width = width
    except Exception as exc:  # pragma: no cover - autosize is best-effort
        LOGGER.debug("Autosize failed for sheet %s: %s", getattr(ws, "title", "?"), exc)


def write_excel(points: Sequence[WaterPoint], path: PathInput) -> Path:
    """Write ``points`` to a single-sheet workbook; return the path."""

    _require_points(points)
    df = water_points_dataframe(points)
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        ws = writer.sheets[SHEET_NAME]
        _style_header_row(ws, len(df.columns))
        _autosize(ws)
    LOGGER.info("Exported %d water points to %s", len(df), output)
    return output


def export_water_points(points: Sequence[WaterPoint], path: PathInput) -> Path:
    """Dispatch on the file suffix (``.csv`` or ``.xlsx``)."""

    suffix = Path(path).suffix.lower()
    if suffix == ".csv":
        return write_csv(points, path)
    if suffix == ".xlsx":
        return write_excel(points, path)
    raise ExportError(f"Unsupported export format: {suffix or '(none)'}")


__all__ = [
    "default_export_name",
    "water_points_dataframe",
    "write_csv",
    "write_excel",
    "export_water_points",
]
