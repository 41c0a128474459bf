"""
Shared pytest fixtures for panel grid tests.
"""
import os
import sys

import pytest

# Headless runs: must be set before the first QApplication is created.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QRectF
from PySide6.QtWidgets import QApplication

from core.events import EventSystem
from engine.grid_config import GridConfig
from engine.layout_model import GridPlacement, LayoutModel, Panel


@pytest.fixture(scope='session')
def qt_app():
    """Create QApplication instance for tests."""
    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    yield app
    # Don't quit - causes issues with pytest


@pytest.fixture
def settings_manager():
    """Create SettingsManager instance for testing."""
    from core.settings import SettingsManager
    manager = SettingsManager(organization="Test", application="PanelGridTest")
    yield manager
    # Clear test settings
    manager.clear()


@pytest.fixture
def event_system():
    """Create EventSystem instance for testing."""
    system = EventSystem()
    yield system
    system.clear()


@pytest.fixture
def grid_config():
    """Default 10-column, 80px-row grid."""
    return GridConfig()


@pytest.fixture
def seed_panels():
    """The three-panel seed layout."""
    return [
        Panel(1, GridPlacement(column=1, row=1, column_span=3, row_span=2)),
        Panel(2, GridPlacement(column=4, row=1, column_span=2, row_span=1)),
        Panel(3, GridPlacement(column=7, row=2, column_span=4, row_span=2)),
    ]


@pytest.fixture
def layout_model(seed_panels, event_system):
    """LayoutModel seeded with three grid-mode panels."""
    return LayoutModel(seed_panels, columns=10, event_system=event_system)


class FakeSurface:
    """Stand-in for the host surface's measurement capabilities.

    The container sits at (100, 50) in global coordinates; panel rects are
    stored in global coordinates too.
    """

    def __init__(self, width=1000.0, height=600.0, origin=(100.0, 50.0)):
        self.container = QRectF(origin[0], origin[1], width, height)
        self.panel_rects = {}
        self.container_available = True

    def measure_container(self):
        if not self.container_available:
            return None
        return QRectF(self.container)

    def measure_panel(self, panel_id):
        rect = self.panel_rects.get(panel_id)
        return QRectF(rect) if rect is not None else None

    def place(self, panel_id, x, y, width, height):
        """Register a panel rect given in container-relative coordinates."""
        self.panel_rects[panel_id] = QRectF(
            self.container.x() + x, self.container.y() + y, width, height
        )


@pytest.fixture
def fake_surface():
    return FakeSurface()
