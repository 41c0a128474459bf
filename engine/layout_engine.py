"""
Panel layout engine.

Composes the layout model, drag controller and snap engine behind the
commands the host surface calls: selection, pointer routing, snap commit and
container refresh. Measurement is supplied by the host as two callables that
return rects in one shared coordinate space (typically global screen
coordinates), or None when the thing cannot be measured.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable, Optional, Tuple

from PySide6.QtCore import QPointF, QRectF

from core.events import EventSystem, EventType
from core.logging.logger import get_logger
from core.logging.tags import TAG_CONTAINER, TAG_LAYOUT, TAG_SKIPPED
from engine.drag_controller import DragController, DragKind
from engine.grid_config import GridConfig
from engine.layout_model import LayoutModel, Panel
from engine.snap_engine import ContainerGeometry, SnapEngine

logger = get_logger(__name__)

MeasureContainer = Callable[[], Optional[QRectF]]
MeasurePanel = Callable[[int], Optional[QRectF]]


class PointerTarget(Enum):
    """What a pointer-down landed on."""
    BODY = "body"
    RESIZE_HANDLE = "resize_handle"
    OUTSIDE = "outside"


class PanelLayoutEngine:
    """Single owner of layout state for one container."""

    def __init__(
        self,
        measure_container: MeasureContainer,
        measure_panel: MeasurePanel,
        config: Optional[GridConfig] = None,
        panels: Iterable[Panel] = (),
        event_system: Optional[EventSystem] = None,
        model: Optional[LayoutModel] = None,
    ):
        self._measure_container = measure_container
        self._measure_panel = measure_panel
        self._config = config if config is not None else GridConfig()
        self._events = event_system if event_system is not None else EventSystem()
        if model is None:
            model = LayoutModel(panels, columns=self._config.columns, event_system=self._events)
        self._model = model
        self._snap = SnapEngine(self._config)
        self._drag = DragController(self._model, self._events, min_size=self._config.min_panel_size)
        self._container: Optional[ContainerGeometry] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def config(self) -> GridConfig:
        return self._config

    @property
    def event_system(self) -> EventSystem:
        return self._events

    @property
    def model(self) -> LayoutModel:
        return self._model

    @property
    def snap_engine(self) -> SnapEngine:
        return self._snap

    @property
    def drag_controller(self) -> DragController:
        return self._drag

    @property
    def container(self) -> Optional[ContainerGeometry]:
        """Cached container geometry from the last refresh."""
        return self._container

    def column_width(self) -> float:
        return self._snap.column_width(self._container)

    def panels(self) -> Tuple[Panel, ...]:
        return self._model.panels()

    # ------------------------------------------------------------------
    # External commands
    # ------------------------------------------------------------------

    def refresh_container(self) -> Optional[ContainerGeometry]:
        """Re-measure the container; call on viewport resize.

        A failed measurement keeps the previous cached geometry.
        """
        rect = self._measure_container()
        if rect is None:
            logger.debug("%s %s Refresh: container not measurable", TAG_CONTAINER, TAG_SKIPPED)
            return self._container

        geometry = ContainerGeometry.from_rect(rect)
        if geometry != self._container:
            self._container = geometry
            logger.debug(
                "%s Container at (%.1f, %.1f) size %.1f x %.1f",
                TAG_CONTAINER, geometry.x, geometry.y, geometry.width, geometry.height,
            )
            self._events.publish(EventType.CONTAINER_RESIZED, data=geometry, source=self)
        return self._container

    def select_panel(self, panel_id: int) -> bool:
        """Move a panel into free-form mode at its current on-screen rect."""
        if self._drag.is_dragging:
            logger.debug("%s %s Select %s: drag in progress", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False

        container_rect = self._measure_container()
        if container_rect is None:
            logger.debug("%s %s Select %s: container not measurable", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False

        panel_rect = self._measure_panel(panel_id)
        if panel_rect is None:
            logger.debug("%s %s Select %s: panel not measurable", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False

        if self._config.commit_on_reselect and any(
            p.selected and p.panel_id != panel_id for p in self._model.panels()
        ):
            self.commit_all_selected()

        local_rect = ContainerGeometry.from_rect(container_rect).to_local(panel_rect)
        return self._model.select_panel(panel_id, local_rect)

    def commit_all_selected(self) -> bool:
        """Snap every free-form panel back onto the grid.

        Any active drag session is ended first.
        """
        if self._drag.is_dragging:
            self._drag.end()
        return self._snap.commit_all_selected(self._model, self._container)

    def cancel_drag(self) -> bool:
        return self._drag.cancel()

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------

    def pointer_down(self, target: PointerTarget, panel_id: Optional[int], pointer: QPointF) -> bool:
        """Route a pointer-down.

        Outside every panel commits; a grid-mode body selects; a free-form
        body starts a move; a resize handle starts a resize.
        """
        if target is PointerTarget.OUTSIDE:
            return self.commit_all_selected()

        panel = self._model.get(panel_id) if panel_id is not None else None
        if panel is None:
            logger.debug("%s %s Pointer-down on unknown panel %s", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False

        if target is PointerTarget.RESIZE_HANDLE:
            return self._drag.begin(panel_id, DragKind.RESIZE, pointer)
        if panel.selected:
            return self._drag.begin(panel_id, DragKind.MOVE, pointer)
        return self.select_panel(panel_id)

    def pointer_move(self, pointer: QPointF) -> None:
        self._events.publish(EventType.POINTER_MOVE, data=QPointF(pointer), source=self)

    def pointer_up(self, pointer: Optional[QPointF] = None) -> None:
        self._events.publish(EventType.POINTER_UP, data=pointer, source=self)
