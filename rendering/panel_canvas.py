"""
Panel Canvas - Qt host surface for the layout engine.

The canvas is the fixed-width container. It supplies the engine's two
measurement capabilities, turns Qt mouse events into the engine's pointer
stream and re-lays out its panel widgets whenever the model publishes
``layout.changed``.

Grid-mode panels are drawn inside their grid cells inset by half the gap;
free-form panels are drawn at their rect and raised above the grid.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from PySide6.QtCore import QPoint, QPointF, QRect, QRectF, QSizeF, Qt
from PySide6.QtGui import QColor, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QResizeEvent, QShowEvent
from PySide6.QtWidgets import QFrame, QLabel, QVBoxLayout, QWidget

from core.constants.sizes import RESIZE_HANDLE_SIZE
from core.events import Event, EventSystem, EventType
from core.logging.logger import get_logger
from engine.grid_config import GridConfig
from engine.layout_engine import PanelLayoutEngine, PointerTarget
from engine.layout_model import LayoutModel, Panel

logger = get_logger(__name__)


_GRID_STYLE = (
    "PanelWidget { background-color: #e5e7eb; border: 1px solid #6b7280; border-radius: 4px; }"
    "QLabel { color: black; font-size: 13px; }"
)
_FREEFORM_STYLE = (
    "PanelWidget { background-color: #dbeafe; border: 1px solid #2563eb; border-radius: 4px; }"
    "QLabel { color: black; font-size: 11px; font-weight: bold; }"
)


class PanelWidget(QFrame):
    """One panel. Classifies presses into body vs resize handle."""

    HANDLE_SIZE = RESIZE_HANDLE_SIZE
    HANDLE_MARGIN = 4

    def __init__(self, panel: Panel, canvas: "PanelCanvas"):
        super().__init__(canvas)
        self._canvas = canvas
        self._panel = panel

        self._label = QLabel(self)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addWidget(self._label)

        self.set_panel(panel)

    @property
    def panel_id(self) -> int:
        return self._panel.panel_id

    @property
    def panel(self) -> Panel:
        return self._panel

    def set_panel(self, panel: Panel) -> None:
        self._panel = panel
        if panel.selected:
            self._label.setText(f"Panel {panel.panel_id} (selected)")
            self._label.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
            self.setStyleSheet(_FREEFORM_STYLE)
            self.setCursor(Qt.CursorShape.SizeAllCursor)
        else:
            self._label.setText(f"Panel {panel.panel_id}")
            self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            self.setStyleSheet(_GRID_STYLE)
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.update()

    def handle_rect(self) -> QRect:
        """Resize handle in local coordinates (bottom-right corner)."""
        size = self.HANDLE_SIZE
        return QRect(
            self.width() - size - self.HANDLE_MARGIN,
            self.height() - size - self.HANDLE_MARGIN,
            size,
            size,
        )

    def classify(self, local_pos: QPoint) -> PointerTarget:
        if self._panel.selected and self.handle_rect().contains(local_pos):
            return PointerTarget.RESIZE_HANDLE
        return PointerTarget.BODY

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        target = self.classify(event.position().toPoint())
        self._canvas.engine.pointer_down(target, self.panel_id, event.globalPosition())
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        # The implicit mouse grab keeps delivering here until release,
        # wherever the pointer goes.
        self._canvas.engine.pointer_move(event.globalPosition())
        event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self._canvas.engine.pointer_up(event.globalPosition())
        event.accept()

    def paintEvent(self, event: QPaintEvent) -> None:
        super().paintEvent(event)
        if not self._panel.selected:
            return
        painter = QPainter(self)
        painter.setPen(QColor(29, 78, 216))
        painter.setBrush(QColor(255, 255, 255))
        painter.drawRect(self.handle_rect())
        painter.end()


class PanelCanvas(QWidget):
    """Fixed-width container hosting every panel."""

    MIN_HEIGHT = 600

    def __init__(
        self,
        config: Optional[GridConfig] = None,
        model: Optional[LayoutModel] = None,
        event_system: Optional[EventSystem] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setObjectName("panelCanvas")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet("#panelCanvas { background-color: white; border: 1px solid #d1d5db; }")
        self.setMinimumHeight(self.MIN_HEIGHT)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        config = config if config is not None else GridConfig()
        if event_system is None:
            event_system = model.event_system if model is not None else EventSystem()
        self._engine = PanelLayoutEngine(
            self.measure_container,
            self.measure_panel,
            config=config,
            event_system=event_system,
            model=model,
        )
        self._panel_widgets: Dict[int, PanelWidget] = {}
        self._layout_sub = event_system.subscribe(EventType.LAYOUT_CHANGED, self._on_layout_changed)

        self._sync_panels(self._engine.panels())

    @property
    def engine(self) -> PanelLayoutEngine:
        return self._engine

    def panel_widget(self, panel_id: int) -> Optional[PanelWidget]:
        return self._panel_widgets.get(panel_id)

    # ------------------------------------------------------------------
    # Measurement capabilities
    # ------------------------------------------------------------------

    def measure_container(self) -> Optional[QRectF]:
        """Container rect in global coordinates."""
        return QRectF(QPointF(self.mapToGlobal(QPoint(0, 0))), QSizeF(self.size()))

    def measure_panel(self, panel_id: int) -> Optional[QRectF]:
        """Rendered rect of a panel in global coordinates."""
        widget = self._panel_widgets.get(panel_id)
        if widget is None or widget.isHidden():
            return None
        return QRectF(QPointF(widget.mapToGlobal(QPoint(0, 0))), QSizeF(widget.size()))

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self._engine.refresh_container()
        self._sync_panels(self._engine.panels())

    def showEvent(self, event: QShowEvent) -> None:
        super().showEvent(event)
        self._engine.refresh_container()
        self._sync_panels(self._engine.panels())

    def mousePressEvent(self, event: QMouseEvent) -> None:
        # Panel widgets accept their own presses, so anything reaching the
        # canvas landed outside every panel.
        if event.button() == Qt.MouseButton.LeftButton:
            self.setFocus(Qt.FocusReason.MouseFocusReason)
            self._engine.pointer_down(PointerTarget.OUTSIDE, None, event.globalPosition())
            event.accept()
            return
        super().mousePressEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Escape and self._engine.config.escape_cancels_drag:
            if self._engine.cancel_drag():
                event.accept()
                return
        super().keyPressEvent(event)

    def shutdown(self) -> None:
        """Detach from the event system; the canvas stops re-rendering."""
        if self._layout_sub is not None:
            self._engine.cancel_drag()
            self._engine.event_system.unsubscribe(self._layout_sub)
            self._layout_sub = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _on_layout_changed(self, event: Event) -> None:
        self._sync_panels(event.data)

    def _sync_panels(self, panels: Iterable[Panel]) -> None:
        panels = tuple(panels)
        live_ids = {p.panel_id for p in panels}
        for panel_id in list(self._panel_widgets):
            if panel_id not in live_ids:
                widget = self._panel_widgets.pop(panel_id)
                widget.hide()
                widget.deleteLater()

        column_width = self._engine.column_width()
        half_gap = self._engine.config.gap / 2.0
        for panel in panels:
            widget = self._panel_widgets.get(panel.panel_id)
            if widget is None:
                widget = PanelWidget(panel, self)
                self._panel_widgets[panel.panel_id] = widget
            elif widget.panel != panel:
                widget.set_panel(panel)

            if panel.selected:
                widget.setGeometry(panel.rect.toRect())
                widget.raise_()
            else:
                cell = self._engine.snap_engine.grid_rect(panel.placement, column_width)
                widget.setGeometry(cell.adjusted(half_gap, half_gap, -half_gap, -half_gap).toRect())
            widget.setVisible(panel.selected or column_width > 0)
