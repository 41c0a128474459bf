"""Main window: title, snap button and the panel canvas."""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QPushButton, QVBoxLayout, QWidget

from core.events import EventSystem
from core.logging.logger import get_logger
from engine.grid_config import GridConfig
from engine.layout_model import LayoutModel
from rendering.panel_canvas import PanelCanvas
from versioning import APP_NAME

logger = get_logger(__name__)


class LayoutWindow(QMainWindow):
    """Top-level window hosting one panel canvas."""

    CANVAS_MAX_WIDTH = 1024

    def __init__(
        self,
        config: GridConfig,
        model: LayoutModel,
        event_system: Optional[EventSystem] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setWindowTitle(APP_NAME)

        central = QWidget(self)
        central.setStyleSheet("background-color: #e2e8f0;")
        layout = QVBoxLayout(central)
        layout.setContentsMargins(24, 24, 24, 24)
        layout.setSpacing(16)

        self._title = QLabel(f"Interactive Grid System ({config.columns} Columns)", central)
        self._title.setStyleSheet("color: #111827; font-size: 22px; font-weight: bold;")
        layout.addWidget(self._title, alignment=Qt.AlignmentFlag.AlignHCenter)

        self._snap_button = QPushButton("Snap selected panels to grid", central)
        self._snap_button.setStyleSheet(
            "QPushButton { background-color: #2563eb; color: white; padding: 8px 16px; border-radius: 4px; }"
        )
        # Keep focus on the canvas so Escape still reaches it after a click
        self._snap_button.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        layout.addWidget(self._snap_button, alignment=Qt.AlignmentFlag.AlignHCenter)

        self._canvas = PanelCanvas(config=config, model=model, event_system=event_system, parent=central)
        self._canvas.setMaximumWidth(self.CANVAS_MAX_WIDTH)
        layout.addWidget(self._canvas, stretch=1)

        self._snap_button.clicked.connect(self._on_snap_clicked)

        self.setCentralWidget(central)
        self.resize(self.CANVAS_MAX_WIDTH + 48, PanelCanvas.MIN_HEIGHT + 160)

    @property
    def canvas(self) -> PanelCanvas:
        return self._canvas

    @property
    def snap_button(self) -> QPushButton:
        return self._snap_button

    def _on_snap_clicked(self) -> None:
        if not self._canvas.engine.commit_all_selected():
            logger.debug("Snap button: nothing committed")

    def closeEvent(self, event: QCloseEvent) -> None:
        self._canvas.shutdown()
        super().closeEvent(event)
