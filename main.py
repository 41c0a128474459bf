"""
Panel Grid - Main Entry Point

Interactive fixed-column panel layout: click a panel to detach it, drag or
resize it freely, then click outside (or press the snap button) to snap it
back onto the grid.

Usage:
    python main.py [--debug|-d] [--verbose|-v]
"""
import sys

from PySide6.QtWidgets import QApplication

from core.events import EventSystem
from core.logging.logger import setup_logging, get_logger
from core.settings.settings_manager import SettingsManager
from engine.grid_config import GridConfig
from engine.layout_model import LayoutModel
from ui.layout_window import LayoutWindow
from versioning import APP_NAME, APP_ORGANIZATION, APP_VERSION

logger = get_logger(__name__)


def main() -> int:
    """Main entry point for the panel grid application."""
    # Setup logging first
    debug_mode = '--debug' in sys.argv or '-d' in sys.argv
    verbose_mode = '--verbose' in sys.argv or '-v' in sys.argv
    setup_logging(debug=debug_mode, verbose=verbose_mode)

    logger.info("%s %s starting", APP_NAME, APP_VERSION)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)
    app.setApplicationVersion(APP_VERSION)

    settings = SettingsManager(organization=APP_ORGANIZATION, application=APP_NAME)
    config = GridConfig.from_settings(settings)
    logger.info(
        "Grid: %d columns, row height %dpx, min panel %dpx",
        config.columns,
        config.row_height,
        config.min_panel_size,
    )

    event_system = EventSystem()
    model = LayoutModel.from_config(
        settings.get_list('layout.panels'),
        columns=config.columns,
        event_system=event_system,
    )

    window = LayoutWindow(config, model, event_system)
    window.show()

    exit_code = app.exec()
    logger.info("%s exiting with code %s", APP_NAME, exit_code)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
