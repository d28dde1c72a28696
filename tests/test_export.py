"""Tests for CSV and Excel export of water points."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pandas as pd
import pytest
from openpyxl import load_workbook

from geodrink.config import EXPORT_COLUMN_ORDER
from geodrink.errors import ExportError
from geodrink.export import (
    default_export_name,
    export_water_points,
    water_points_dataframe,
    write_csv,
    write_excel,
)


@pytest.fixture
def points(water_point_factory):
    return [
        water_point_factory(
            "1", lat=48.0001234567, lon=2.01, name="Fontaine", drinking_water="yes"
        ),
        water_point_factory("2", lon=2.05, point_type="tap", access="private", fee="yes"),
    ]


def test_default_export_name():
    assert default_export_name(today=date(2024, 6, 1)) == "water-points-2024-06-01.csv"
    assert default_export_name(".xlsx", date(2024, 6, 1)).endswith(".xlsx")


def test_dataframe_rows(points):
    df = water_points_dataframe(points)
    assert list(df.columns) == EXPORT_COLUMN_ORDER
    first = df.iloc[0]
    assert first["Name"] == "Fontaine"
    assert first["Potable"] == "yes"
    assert first["Access"] == "Unknown"
    assert first["Fee"] == "No"
    assert first["Latitude"] == pytest.approx(48.000123)
    second = df.iloc[1]
    assert second["Name"] == "Tap Point"
    assert second["Access"] == "private"
    assert second["Fee"] == "yes"
    assert second["Potable"] == "Unknown"


def test_write_csv(points, tmp_path: Path):
    output = write_csv(points, tmp_path / "out" / "water.csv")
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == ",".join(EXPORT_COLUMN_ORDER)
    assert lines[1].startswith("0.74,fountain,Fontaine,48.000123,2.010000,")
    assert len(lines) == 3


def test_write_excel(points, tmp_path: Path):
    output = write_excel(points, tmp_path / "water.xlsx")
    wb = load_workbook(output)
    ws = wb["Water Points"]
    assert [c.value for c in ws[1]] == EXPORT_COLUMN_ORDER
    assert ws["A1"].font.bold
    assert ws.max_row == 3
    df = pd.read_excel(output, sheet_name="Water Points")
    assert list(df["Type"]) == ["fountain", "tap"]


def test_export_dispatches_on_suffix(points, tmp_path: Path):
    assert export_water_points(points, tmp_path / "a.CSV").exists()
    assert export_water_points(points, tmp_path / "a.xlsx").exists()
    with pytest.raises(ExportError, match="Unsupported export format"):
        export_water_points(points, tmp_path / "a.json")


def test_export_requires_points(tmp_path: Path):
    with pytest.raises(ExportError, match="No water points"):
        export_water_points([], tmp_path / "empty.csv")
    assert not (tmp_path / "empty.csv").exists()
