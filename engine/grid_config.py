"""Grid configuration resolved from settings."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.constants.sizes import (
    DEFAULT_GRID_COLUMNS,
    DEFAULT_GRID_GAP,
    DEFAULT_ROW_HEIGHT,
    MIN_PANEL_SIZE,
)
from core.logging.logger import get_logger
from core.logging.tags import TAG_FALLBACK

if TYPE_CHECKING:
    from core.settings.settings_manager import SettingsManager

logger = get_logger(__name__)


@dataclass(frozen=True)
class GridConfig:
    """Effective grid parameters.

    ``columns`` is the fixed column count, ``row_height`` and
    ``min_panel_size`` are in pixels. ``gap`` only affects how grid-mode
    panels are drawn, never the snapping arithmetic.
    """
    columns: int = DEFAULT_GRID_COLUMNS
    row_height: int = DEFAULT_ROW_HEIGHT
    min_panel_size: int = MIN_PANEL_SIZE
    gap: int = DEFAULT_GRID_GAP
    commit_on_reselect: bool = False
    escape_cancels_drag: bool = False

    def __post_init__(self):
        if self.columns < 1:
            raise ValueError(f"columns must be >= 1, got {self.columns}")
        if self.row_height <= 0:
            raise ValueError(f"row_height must be > 0, got {self.row_height}")
        if self.min_panel_size < 1:
            raise ValueError(f"min_panel_size must be >= 1, got {self.min_panel_size}")
        if self.gap < 0:
            raise ValueError(f"gap must be >= 0, got {self.gap}")

    @classmethod
    def from_settings(cls, settings: "SettingsManager") -> "GridConfig":
        """Build a config from settings, replacing out-of-range values with defaults."""
        defaults = cls()

        def _positive(key: str, fallback: int, minimum: int) -> int:
            value = settings.get_int(key, fallback)
            if value < minimum:
                logger.warning("%s %s=%r below %d, using %d", TAG_FALLBACK, key, value, minimum, fallback)
                return fallback
            return value

        return cls(
            columns=_positive('grid.columns', defaults.columns, 1),
            row_height=_positive('grid.row_height', defaults.row_height, 1),
            min_panel_size=_positive('grid.min_panel_size', defaults.min_panel_size, 1),
            gap=_positive('grid.gap', defaults.gap, 0),
            commit_on_reselect=settings.get_bool('selection.commit_on_reselect', False),
            escape_cancels_drag=settings.get_bool('input.escape_cancels_drag', False),
        )
