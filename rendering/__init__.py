"""Qt rendering of the panel grid."""

from .panel_canvas import PanelCanvas, PanelWidget

__all__ = ['PanelCanvas', 'PanelWidget']
