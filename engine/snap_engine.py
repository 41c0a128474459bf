"""
Snap Engine - re-quantizes free-form rectangles onto the grid.

Given the cached container width, every selected panel's pixel rectangle is
converted to the nearest valid grid placement and committed in one step.
Panels may end up overlapping; no collision resolution is attempted.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from PySide6.QtCore import QRectF

from core.logging.logger import get_logger
from core.logging.tags import TAG_SKIPPED, TAG_SNAP
from engine.grid_config import GridConfig
from engine.layout_model import GridPlacement, LayoutModel

logger = get_logger(__name__)


def grid_round(value: float) -> int:
    """Round a cell ratio to the nearest integer, ties to even.

    ``grid_round(2.5) == 2`` and ``grid_round(3.5) == 4``, so a rect edge that
    lands exactly halfway between two grid lines snaps to the even one.
    """
    return round(value)


@dataclass(frozen=True)
class ContainerGeometry:
    """Last measured container rectangle, in the same space as panel measurements."""
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_rect(cls, rect: QRectF) -> "ContainerGeometry":
        return cls(rect.x(), rect.y(), rect.width(), rect.height())

    def to_local(self, rect: QRectF) -> QRectF:
        """Translate a measured rect into container-relative coordinates."""
        return rect.translated(-self.x, -self.y)


class SnapEngine:
    """Pixel/grid conversions for one grid configuration."""

    def __init__(self, config: Optional[GridConfig] = None):
        self._config = config if config is not None else GridConfig()

    @property
    def config(self) -> GridConfig:
        return self._config

    def column_width(self, container: Optional[ContainerGeometry]) -> float:
        """Width of one column, or 0.0 when the container is unmeasured."""
        if container is None or container.width <= 0:
            return 0.0
        return container.width / self._config.columns

    def snap_rect(self, rect: QRectF, column_width: float) -> GridPlacement:
        """Nearest valid placement for a free-form rect.

        Raises:
            ValueError: If ``column_width`` is not positive.
        """
        if column_width <= 0:
            raise ValueError(f"column_width must be > 0, got {column_width}")

        row_height = self._config.row_height
        raw = GridPlacement(
            column=grid_round(rect.x() / column_width) + 1,
            row=grid_round(rect.y() / row_height) + 1,
            column_span=max(1, grid_round(rect.width() / column_width)),
            row_span=max(1, grid_round(rect.height() / row_height)),
        )
        return raw.clamped(self._config.columns)

    def grid_rect(self, placement: GridPlacement, column_width: float) -> QRectF:
        """Pixel rect covered by a placement; the inverse of snap_rect."""
        row_height = self._config.row_height
        return QRectF(
            (placement.column - 1) * column_width,
            (placement.row - 1) * row_height,
            placement.column_span * column_width,
            placement.row_span * row_height,
        )

    def commit_all_selected(self, model: LayoutModel, container: Optional[ContainerGeometry]) -> bool:
        """Snap every selected panel and return all panels to grid mode.

        When the container is unmeasured the whole commit is skipped, so no
        panel is ever left half-snapped.

        Returns:
            True if the commit was applied.
        """
        column_width = self.column_width(container)
        if column_width == 0:
            logger.debug("%s %s Commit: container geometry unavailable", TAG_SNAP, TAG_SKIPPED)
            return False

        placements: Dict[int, GridPlacement] = {}
        for panel in model.panels():
            if not panel.selected or panel.rect is None:
                continue
            placement = self.snap_rect(panel.rect, column_width)
            placements[panel.panel_id] = placement
            logger.debug(
                "%s Panel %s (%.1f, %.1f, %.1f x %.1f) -> col=%d row=%d span=%dx%d",
                TAG_SNAP,
                panel.panel_id,
                panel.rect.x(),
                panel.rect.y(),
                panel.rect.width(),
                panel.rect.height(),
                placement.column,
                placement.row,
                placement.column_span,
                placement.row_span,
            )

        model.commit_placements(placements)
        return True
