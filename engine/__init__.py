"""Layout engine: panel model, drag state machine and snap-to-grid."""

from .grid_config import GridConfig
from .layout_model import GridPlacement, LayoutModel, Panel, PanelMode
from .drag_controller import DragController, DragKind, DragSession, compute_rect
from .snap_engine import ContainerGeometry, SnapEngine, grid_round
from .layout_engine import PanelLayoutEngine, PointerTarget

__all__ = [
    'GridConfig',
    'GridPlacement',
    'LayoutModel',
    'Panel',
    'PanelMode',
    'DragController',
    'DragKind',
    'DragSession',
    'compute_rect',
    'ContainerGeometry',
    'SnapEngine',
    'grid_round',
    'PanelLayoutEngine',
    'PointerTarget',
]
