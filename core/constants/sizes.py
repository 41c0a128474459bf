"""Size constants for the panel grid.

These are the built-in defaults behind the ``grid.*`` settings keys. Runtime
code reads the effective values from GridConfig rather than importing these
directly, so a settings override always wins.
"""

# =============================================================================
# Grid Geometry
# =============================================================================

DEFAULT_GRID_COLUMNS = 10
"""Number of columns in the fixed-column grid."""

DEFAULT_ROW_HEIGHT = 80
"""Height of one grid row in pixels."""

DEFAULT_GRID_GAP = 8
"""Visual gutter between grid cells in pixels. Rendering only."""

# =============================================================================
# Free-form Geometry
# =============================================================================

MIN_PANEL_SIZE = 40
"""Minimum width/height of a free-form panel rectangle in pixels."""

RESIZE_HANDLE_SIZE = 12
"""Edge length of the square resize handle in a panel's bottom-right corner."""
