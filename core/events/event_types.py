"""
Event type definitions for the panel grid.
"""
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional


@dataclass
class Event:
    """Base event class."""
    event_type: str
    data: Any = None
    source: Any = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timestamp: float = field(default_factory=time.time)
    is_handled: bool = False

    def mark_handled(self):
        """Stop delivery to lower-priority subscribers."""
        self.is_handled = True


@dataclass
class Subscription:
    """Subscription to an event type."""
    callback: Callable[[Event], None]
    event_type: str
    priority: int = 0
    filter_fn: Optional[Callable[[Event], bool]] = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    active: bool = True

    def __call__(self, event: Event) -> None:
        if not self.active:
            return
        if self.filter_fn is None or self.filter_fn(event):
            self.callback(event)

    def __lt__(self, other: 'Subscription') -> bool:
        """Sort by priority (higher first)."""
        return self.priority > other.priority


class EventType:
    """Event type constants."""
    # Layout model
    LAYOUT_CHANGED = "layout.changed"
    PANEL_SELECTED = "panel.selected"
    LAYOUT_COMMITTED = "layout.committed"

    # Drag sessions
    DRAG_STARTED = "drag.started"
    DRAG_ENDED = "drag.ended"
    DRAG_CANCELLED = "drag.cancelled"

    # Pointer stream, only subscribed while a drag session is active
    POINTER_MOVE = "pointer.move"
    POINTER_UP = "pointer.up"

    # Container
    CONTAINER_RESIZED = "container.resized"
