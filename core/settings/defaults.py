"""Canonical default settings for the panel grid.

Single source of truth for every key the application reads. SettingsManager
applies these on construction without overwriting stored values.
"""
from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from core.constants.sizes import (
    DEFAULT_GRID_COLUMNS,
    DEFAULT_GRID_GAP,
    DEFAULT_ROW_HEIGHT,
    MIN_PANEL_SIZE,
)

# Seed layout shown on first start. Read-only: the layout is never written
# back to settings.
DEFAULT_PANELS = [
    {'id': 1, 'column': 1, 'row': 1, 'column_span': 3, 'row_span': 2},
    {'id': 2, 'column': 4, 'row': 1, 'column_span': 2, 'row_span': 1},
    {'id': 3, 'column': 7, 'row': 2, 'column_span': 4, 'row_span': 2},
]

_DEFAULTS: Dict[str, Any] = {
    # Grid geometry
    'grid.columns': DEFAULT_GRID_COLUMNS,
    'grid.row_height': DEFAULT_ROW_HEIGHT,
    'grid.min_panel_size': MIN_PANEL_SIZE,
    'grid.gap': DEFAULT_GRID_GAP,

    # Selecting a panel while another is in free-form mode discards the
    # other panel's edits unless this is enabled, in which case they are
    # snapped first.
    'selection.commit_on_reselect': False,

    # Input
    'input.escape_cancels_drag': False,

    # Layout seed
    'layout.panels': DEFAULT_PANELS,
}


def get_default_settings() -> Dict[str, Any]:
    """Return a deep copy of the default settings map."""
    return deepcopy(_DEFAULTS)
