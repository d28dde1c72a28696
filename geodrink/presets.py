"""Fixed catalogue of water filter presets."""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from .config import DEFAULT_FILTER_PRESET
from .models import FilterPreset, FilterRules

LOGGER = logging.getLogger(__name__)

FILTER_PRESETS: Tuple[FilterPreset, ...] = (
    FilterPreset(
        id="potable-only",
        name="Potable Water Only",
        description="Safe drinking water sources only",
        rules=FilterRules(drinking_water=("yes",), exclude_tags=("fee=yes",)),
    ),
    FilterPreset(
        id="free-potable",
        name="Free Potable Water",
        description="Free drinking water only",
        rules=FilterRules(drinking_water=("yes",), exclude_tags=("fee=yes",)),
    ),
    FilterPreset(
        id="all-potable",
        name="All Potable Water",
        description="All drinking water (including paid)",
        rules=FilterRules(drinking_water=("yes",)),
    ),
    FilterPreset(
        id="emergency-sources",
        name="Emergency Sources",
        description="All water sources including wells/springs",
        rules=FilterRules(
            include_types=("fountain", "well", "spring", "tap"),
            access=("public", "yes"),
        ),
    ),
    FilterPreset(
        id="all-sources",
        name="All Water Sources",
        description="All water points (including non-potable)",
        rules=FilterRules(),
    ),
)

_PRESETS_BY_ID: Dict[str, FilterPreset] = {p.id: p for p in FILTER_PRESETS}

DEFAULT_PRESET_ID = (
    DEFAULT_FILTER_PRESET
    if DEFAULT_FILTER_PRESET in _PRESETS_BY_ID
    else FILTER_PRESETS[0].id
)


def preset_ids() -> Tuple[str, ...]:
    return tuple(_PRESETS_BY_ID)


def get_preset(preset_id: str | None) -> FilterPreset:
    """Return the preset with ``preset_id``, falling back to the first preset."""

    if preset_id is None:
        return _PRESETS_BY_ID[DEFAULT_PRESET_ID]
    preset = _PRESETS_BY_ID.get(preset_id)
    if preset is None:
        LOGGER.warning(
            "Unknown filter preset '%s'; using '%s'", preset_id, FILTER_PRESETS[0].id
        )
        return FILTER_PRESETS[0]
    return preset


__all__ = ["FILTER_PRESETS", "DEFAULT_PRESET_ID", "get_preset", "preset_ids"]
