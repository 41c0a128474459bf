"""
Drag Controller - pointer-driven move/resize of the selected panel.

Two states: idle and dragging. A session freezes the pointer position and
the panel rect at pointer-down; every pointer-move recomputes the rect from
that snapshot, so repeated frames never accumulate drift. Pointer-up ends the
session without snapping.

The pointer stream is consumed through the EventSystem, and the controller
only holds subscriptions for ``pointer.move``/``pointer.up`` while a session
is active.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from PySide6.QtCore import QPointF, QRectF

from core.constants.sizes import MIN_PANEL_SIZE
from core.events import Event, EventSystem, EventType
from core.logging.logger import get_logger, is_verbose_logging
from core.logging.tags import TAG_DRAG, TAG_SKIPPED
from engine.layout_model import LayoutModel

logger = get_logger(__name__)


class DragKind(Enum):
    """What a drag session does to the panel rect."""
    MOVE = "move"
    RESIZE = "resize"


@dataclass(frozen=True)
class DragSession:
    """Frozen start state of one pointer gesture."""
    panel_id: int
    kind: DragKind
    start_pointer: QPointF
    start_rect: QRectF


def compute_rect(session: DragSession, pointer: QPointF, min_size: float = MIN_PANEL_SIZE) -> QRectF:
    """Rect for ``pointer`` given the session's start snapshot.

    Moves translate the rect without clamping to the container. Resizes keep
    the top-left corner fixed and floor both dimensions at ``min_size``.
    """
    dx = pointer.x() - session.start_pointer.x()
    dy = pointer.y() - session.start_pointer.y()
    start = session.start_rect

    if session.kind is DragKind.MOVE:
        return QRectF(start.x() + dx, start.y() + dy, start.width(), start.height())

    return QRectF(
        start.x(),
        start.y(),
        max(min_size, start.width() + dx),
        max(min_size, start.height() + dy),
    )


class _PointerSubscription:
    """Pointer-stream subscriptions scoped to one drag session."""

    def __init__(self, events: EventSystem, on_move, on_up):
        self._events = events
        self._ids: List[str] = [
            events.subscribe(EventType.POINTER_MOVE, on_move),
            events.subscribe(EventType.POINTER_UP, on_up),
        ]

    def release(self) -> None:
        for sub_id in self._ids:
            self._events.unsubscribe(sub_id)
        self._ids = []


class DragController:
    """Idle/dragging state machine for a single pointer."""

    def __init__(
        self,
        model: LayoutModel,
        event_system: Optional[EventSystem] = None,
        min_size: float = MIN_PANEL_SIZE,
    ):
        self._model = model
        self._events = event_system if event_system is not None else model.event_system
        self._min_size = min_size
        self._session: Optional[DragSession] = None
        self._subscription: Optional[_PointerSubscription] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    def begin(self, panel_id: int, kind: DragKind, pointer: QPointF) -> bool:
        """Start a session on a panel in free-form mode.

        Ignored when the panel has no rect or another session is active.
        """
        if self._session is not None:
            logger.debug(
                "%s %s Begin %s on %s: session for %s already active",
                TAG_DRAG, TAG_SKIPPED, kind.value, panel_id, self._session.panel_id,
            )
            return False

        panel = self._model.get(panel_id)
        if panel is None or panel.rect is None:
            logger.debug("%s %s Begin %s on %s: no free-form geometry", TAG_DRAG, TAG_SKIPPED, kind.value, panel_id)
            return False

        self._session = DragSession(
            panel_id=panel_id,
            kind=kind,
            start_pointer=QPointF(pointer),
            start_rect=QRectF(panel.rect),
        )
        self._subscription = _PointerSubscription(self._events, self._on_pointer_move, self._on_pointer_up)
        logger.debug(
            "%s Started %s on panel %s at (%.1f, %.1f)",
            TAG_DRAG, kind.value, panel_id, pointer.x(), pointer.y(),
        )
        self._events.publish(EventType.DRAG_STARTED, data=self._session, source=self)
        return True

    def update(self, pointer: QPointF) -> Optional[QRectF]:
        """Apply a pointer position to the dragged panel.

        Returns:
            The new rect, or None when idle.
        """
        session = self._session
        if session is None:
            return None

        rect = compute_rect(session, pointer, self._min_size)
        self._model.set_rect(session.panel_id, rect)
        if is_verbose_logging():
            logger.debug(
                "%s Panel %s -> (%.1f, %.1f, %.1f x %.1f)",
                TAG_DRAG, session.panel_id, rect.x(), rect.y(), rect.width(), rect.height(),
            )
        return rect

    def end(self) -> bool:
        """Pointer-up. The panel keeps its last rect and stays in free-form mode."""
        session = self._finish()
        if session is None:
            return False
        logger.debug("%s Ended %s on panel %s", TAG_DRAG, session.kind.value, session.panel_id)
        self._events.publish(EventType.DRAG_ENDED, data=session, source=self)
        return True

    def cancel(self) -> bool:
        """Abort the session and restore the rect captured at pointer-down."""
        session = self._finish()
        if session is None:
            return False
        self._model.set_rect(session.panel_id, session.start_rect)
        logger.debug("%s Cancelled %s on panel %s", TAG_DRAG, session.kind.value, session.panel_id)
        self._events.publish(EventType.DRAG_CANCELLED, data=session, source=self)
        return True

    def _finish(self) -> Optional[DragSession]:
        session = self._session
        self._session = None
        if self._subscription is not None:
            self._subscription.release()
            self._subscription = None
        return session

    def _on_pointer_move(self, event: Event) -> None:
        self.update(event.data)

    def _on_pointer_up(self, event: Event) -> None:
        self.end()
