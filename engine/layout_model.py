"""
Layout Model - authoritative panel collection.

Every panel is either in grid mode (placement authoritative, no rect) or in
free-form mode (selected, pixel rect authoritative, placement frozen at its
last committed value). The model is the single writer: the drag controller
and the snap engine mutate panels only through the command methods here, and
every mutation swaps in a new immutable tuple and publishes
``layout.changed``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from PySide6.QtCore import QRectF

from core.constants.sizes import DEFAULT_GRID_COLUMNS
from core.events import EventSystem, EventType
from core.logging.logger import get_logger
from core.logging.tags import TAG_FALLBACK, TAG_LAYOUT, TAG_SKIPPED

logger = get_logger(__name__)


class PanelMode(Enum):
    """Rendering mode of a panel."""
    GRID = "grid"
    FREEFORM = "freeform"


@dataclass(frozen=True)
class GridPlacement:
    """1-indexed grid coordinates of a panel."""
    column: int
    row: int
    column_span: int = 1
    row_span: int = 1

    def is_valid(self, columns: int) -> bool:
        """True when the placement satisfies the at-rest grid invariant."""
        return (
            self.column >= 1
            and self.column_span >= 1
            and self.column + self.column_span - 1 <= columns
            and self.row >= 1
            and self.row_span >= 1
        )

    def clamped(self, columns: int) -> "GridPlacement":
        """Coerce into a valid placement.

        The column is clamped first and the span is then fitted into the
        columns remaining to its right.
        """
        column = max(1, min(columns, self.column))
        column_span = max(1, min(columns - column + 1, self.column_span))
        return GridPlacement(
            column=column,
            row=max(1, self.row),
            column_span=column_span,
            row_span=max(1, self.row_span),
        )


@dataclass(frozen=True)
class Panel:
    """A panel on the grid.

    ``rect`` is container-relative and present if and only if ``selected``.
    """
    panel_id: int
    placement: GridPlacement
    selected: bool = False
    rect: Optional[QRectF] = None

    def __post_init__(self):
        if self.selected != (self.rect is not None):
            raise ValueError(
                f"Panel {self.panel_id}: free-form rect must be present iff selected "
                f"(selected={self.selected}, rect={self.rect})"
            )
        if self.rect is not None:
            # Own a private copy; QRectF is mutable.
            object.__setattr__(self, "rect", QRectF(self.rect))

    @property
    def mode(self) -> PanelMode:
        return PanelMode.FREEFORM if self.selected else PanelMode.GRID

    def to_freeform(self, rect: QRectF) -> "Panel":
        return replace(self, selected=True, rect=rect)

    def to_grid(self, placement: Optional[GridPlacement] = None) -> "Panel":
        return replace(
            self,
            placement=placement if placement is not None else self.placement,
            selected=False,
            rect=None,
        )


class LayoutModel:
    """Owns the panel collection and exposes explicit mutation commands."""

    def __init__(
        self,
        panels: Iterable[Panel] = (),
        columns: int = DEFAULT_GRID_COLUMNS,
        event_system: Optional[EventSystem] = None,
    ):
        self._columns = columns
        self._events = event_system if event_system is not None else EventSystem()
        self._panels: Tuple[Panel, ...] = ()
        for panel in panels:
            self._check_new_panel(panel, self._panels)
            self._panels = self._panels + (panel,)

    @classmethod
    def from_config(
        cls,
        entries: Iterable[Mapping[str, Any]],
        columns: int = DEFAULT_GRID_COLUMNS,
        event_system: Optional[EventSystem] = None,
    ) -> "LayoutModel":
        """Build a model from layout entries such as the ``layout.panels`` setting.

        Entries look like ``{'id': 1, 'column': 1, 'row': 1, 'column_span': 3,
        'row_span': 2}``. Malformed entries or duplicate ids are skipped with a
        warning; out-of-range placements are clamped onto the grid.
        """
        model = cls(columns=columns, event_system=event_system)
        panels = []
        seen = set()
        for entry in entries:
            try:
                panel_id = int(entry['id'])
                placement = GridPlacement(
                    column=int(entry['column']),
                    row=int(entry['row']),
                    column_span=int(entry.get('column_span', 1)),
                    row_span=int(entry.get('row_span', 1)),
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("%s Ignoring malformed layout entry: %r", TAG_FALLBACK, entry)
                continue
            if panel_id in seen:
                logger.warning("%s Ignoring duplicate panel id %s", TAG_FALLBACK, panel_id)
                continue
            if not placement.is_valid(columns):
                logger.warning("%s Clamping panel %s placement %s onto the grid", TAG_FALLBACK, panel_id, placement)
                placement = placement.clamped(columns)
            seen.add(panel_id)
            panels.append(Panel(panel_id, placement))
        model._panels = tuple(panels)
        logger.debug("%s Seeded %d panels", TAG_LAYOUT, len(panels))
        return model

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def event_system(self) -> EventSystem:
        return self._events

    def panels(self) -> Tuple[Panel, ...]:
        return self._panels

    def get(self, panel_id: int) -> Optional[Panel]:
        for panel in self._panels:
            if panel.panel_id == panel_id:
                return panel
        return None

    def selected_panels(self) -> Tuple[Panel, ...]:
        return tuple(p for p in self._panels if p.selected)

    def __len__(self) -> int:
        return len(self._panels)

    def __iter__(self) -> Iterator[Panel]:
        return iter(self._panels)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def select_panel(self, panel_id: int, rect: Optional[QRectF]) -> bool:
        """Put one panel into free-form mode with ``rect`` as its geometry.

        Every other panel leaves free-form mode without being snapped; its
        placement keeps the last committed value and its rect is dropped.

        Returns:
            False (and no change) when the panel is unknown or ``rect`` is
            missing or empty.
        """
        if rect is None or rect.width() <= 0 or rect.height() <= 0:
            logger.debug("%s %s Select %s: panel rect unavailable", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False
        if self.get(panel_id) is None:
            logger.debug("%s %s Select %s: unknown panel", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False

        discarded = [p.panel_id for p in self._panels if p.selected and p.panel_id != panel_id]
        if discarded:
            logger.debug("%s Discarding free-form edits of %s", TAG_LAYOUT, discarded)

        self._replace(tuple(
            p.to_freeform(rect) if p.panel_id == panel_id else p.to_grid()
            for p in self._panels
        ))
        logger.debug(
            "%s Selected %s at (%.1f, %.1f, %.1f x %.1f)",
            TAG_LAYOUT, panel_id, rect.x(), rect.y(), rect.width(), rect.height(),
        )
        self._events.publish(EventType.PANEL_SELECTED, data=panel_id, source=self)
        return True

    def deselect_all(self) -> None:
        """Return every panel to grid mode without touching placements."""
        if not any(p.selected for p in self._panels):
            return
        self._replace(tuple(p.to_grid() for p in self._panels))

    def set_rect(self, panel_id: int, rect: QRectF) -> bool:
        """Replace the free-form rect of a selected panel."""
        panel = self.get(panel_id)
        if panel is None or not panel.selected:
            logger.debug("%s %s set_rect %s: panel not in free-form mode", TAG_LAYOUT, TAG_SKIPPED, panel_id)
            return False
        self._replace(tuple(
            p.to_freeform(rect) if p.panel_id == panel_id else p
            for p in self._panels
        ))
        return True

    def commit_placements(self, placements: Mapping[int, GridPlacement]) -> None:
        """Write computed placements and return every panel to grid mode.

        Raises:
            ValueError: If a placement violates the grid invariant.
        """
        for panel_id, placement in placements.items():
            if not placement.is_valid(self._columns):
                raise ValueError(f"Invalid placement for panel {panel_id}: {placement}")

        self._replace(tuple(p.to_grid(placements.get(p.panel_id)) for p in self._panels))
        logger.info("%s Committed %d panel(s) to the grid", TAG_LAYOUT, len(placements))
        self._events.publish(EventType.LAYOUT_COMMITTED, data=dict(placements), source=self)

    def add_panel(self, panel: Panel) -> None:
        """Add a panel.

        Raises:
            ValueError: On a duplicate id or an invalid placement.
        """
        self._check_new_panel(panel, self._panels)
        self._replace(self._panels + (panel,))

    def remove_panel(self, panel_id: int) -> bool:
        remaining = tuple(p for p in self._panels if p.panel_id != panel_id)
        if len(remaining) == len(self._panels):
            return False
        self._replace(remaining)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_new_panel(self, panel: Panel, existing: Iterable[Panel]) -> None:
        if any(p.panel_id == panel.panel_id for p in existing):
            raise ValueError(f"Duplicate panel id: {panel.panel_id}")
        if not panel.placement.is_valid(self._columns):
            raise ValueError(f"Invalid placement for panel {panel.panel_id}: {panel.placement}")

    def _replace(self, panels: Tuple[Panel, ...]) -> None:
        self._panels = panels
        self._events.publish(EventType.LAYOUT_CHANGED, data=panels, source=self)
