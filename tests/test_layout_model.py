"""
Tests for LayoutModel.

Covers:
- GridPlacement validity and clamping
- Panel mode invariant (rect iff selected)
- Exclusive selection and deselection
- Placement commits and layout.changed notifications
- Seeding from layout config entries
"""
import pytest
from PySide6.QtCore import QRectF

from core.events import EventType
from engine.layout_model import GridPlacement, LayoutModel, Panel, PanelMode


# ---------------------------------------------------------------------------
# GridPlacement Tests
# ---------------------------------------------------------------------------

class TestGridPlacement:
    """Test GridPlacement invariant helpers."""

    def test_valid_placement(self):
        assert GridPlacement(1, 1, 10, 1).is_valid(10)
        assert GridPlacement(10, 99, 1, 5).is_valid(10)

    @pytest.mark.parametrize(
        "placement",
        [
            GridPlacement(0, 1, 1, 1),
            GridPlacement(1, 0, 1, 1),
            GridPlacement(1, 1, 0, 1),
            GridPlacement(1, 1, 1, 0),
            GridPlacement(9, 1, 3, 1),
            GridPlacement(11, 1, 1, 1),
        ],
    )
    def test_invalid_placements(self, placement):
        assert not placement.is_valid(10)

    def test_clamped_fits_span_after_column(self):
        """Span is clamped using the already-clamped column."""
        assert GridPlacement(9, 1, 5, 1).clamped(10) == GridPlacement(9, 1, 2, 1)
        assert GridPlacement(14, 1, 3, 1).clamped(10) == GridPlacement(10, 1, 1, 1)

    def test_clamped_raises_low_values(self):
        assert GridPlacement(-2, -4, 0, -1).clamped(10) == GridPlacement(1, 1, 1, 1)


# ---------------------------------------------------------------------------
# Panel Tests
# ---------------------------------------------------------------------------

class TestPanel:
    """Test Panel mode invariant."""

    def test_grid_mode_panel(self):
        panel = Panel(1, GridPlacement(1, 1, 2, 2))

        assert panel.mode is PanelMode.GRID
        assert panel.rect is None

    def test_selected_requires_rect(self):
        with pytest.raises(ValueError):
            Panel(1, GridPlacement(1, 1), selected=True)

    def test_rect_requires_selected(self):
        with pytest.raises(ValueError):
            Panel(1, GridPlacement(1, 1), rect=QRectF(0, 0, 50, 50))

    def test_rect_is_copied(self):
        rect = QRectF(10, 20, 100, 80)
        panel = Panel(1, GridPlacement(1, 1), selected=True, rect=rect)
        rect.setWidth(5)

        assert panel.rect.width() == 100
        assert panel.mode is PanelMode.FREEFORM

    def test_to_grid_keeps_placement(self):
        placement = GridPlacement(3, 2, 2, 1)
        panel = Panel(1, placement, selected=True, rect=QRectF(0, 0, 50, 50))

        grid_panel = panel.to_grid()

        assert grid_panel.placement == placement
        assert grid_panel.selected is False
        assert grid_panel.rect is None


# ---------------------------------------------------------------------------
# LayoutModel Tests
# ---------------------------------------------------------------------------

class TestLayoutModelSelection:
    """Test exclusive selection."""

    def test_select_panel_enters_freeform(self, layout_model):
        rect = QRectF(0, 0, 300, 160)

        assert layout_model.select_panel(1, rect) is True

        panel = layout_model.get(1)
        assert panel.selected is True
        assert panel.rect == rect
        assert panel.placement == GridPlacement(1, 1, 3, 2)

    def test_selection_is_exclusive(self, layout_model):
        layout_model.select_panel(1, QRectF(0, 0, 300, 160))
        layout_model.select_panel(2, QRectF(300, 0, 200, 80))

        assert [p.panel_id for p in layout_model.selected_panels()] == [2]
        assert layout_model.get(1).rect is None

    def test_reselect_discards_edits_without_snapping(self, layout_model):
        """The previously selected panel keeps its last committed placement."""
        layout_model.select_panel(1, QRectF(0, 0, 300, 160))
        layout_model.set_rect(1, QRectF(650, 400, 90, 90))

        layout_model.select_panel(3, QRectF(600, 80, 400, 160))

        panel = layout_model.get(1)
        assert panel.selected is False
        assert panel.placement == GridPlacement(1, 1, 3, 2)

    @pytest.mark.parametrize("rect", [None, QRectF(), QRectF(0, 0, 0, 40)])
    def test_select_unmeasurable_is_ignored(self, layout_model, rect):
        before = layout_model.panels()

        assert layout_model.select_panel(1, rect) is False
        assert layout_model.panels() is before

    def test_select_unknown_panel_is_ignored(self, layout_model):
        before = layout_model.panels()

        assert layout_model.select_panel(42, QRectF(0, 0, 50, 50)) is False
        assert layout_model.panels() is before

    def test_deselect_all(self, layout_model):
        layout_model.select_panel(2, QRectF(300, 0, 200, 80))

        layout_model.deselect_all()

        assert layout_model.selected_panels() == ()
        assert all(p.rect is None for p in layout_model)
        assert layout_model.get(2).placement == GridPlacement(4, 1, 2, 1)

    def test_set_rect_only_for_selected(self, layout_model):
        assert layout_model.set_rect(1, QRectF(0, 0, 50, 50)) is False

        layout_model.select_panel(1, QRectF(0, 0, 300, 160))
        assert layout_model.set_rect(1, QRectF(5, 5, 50, 50)) is True
        assert layout_model.get(1).rect == QRectF(5, 5, 50, 50)


class TestLayoutModelCommands:
    """Test commits, seeding and notifications."""

    def test_commit_placements_clears_freeform(self, layout_model):
        layout_model.select_panel(1, QRectF(0, 0, 300, 160))

        layout_model.commit_placements({1: GridPlacement(5, 3, 2, 1)})

        panel = layout_model.get(1)
        assert panel.placement == GridPlacement(5, 3, 2, 1)
        assert panel.mode is PanelMode.GRID

    def test_commit_publishes_layout_committed(self, layout_model, event_system):
        received = []
        event_system.subscribe(EventType.LAYOUT_COMMITTED, received.append)
        layout_model.select_panel(1, QRectF(0, 0, 300, 160))

        layout_model.commit_placements({1: GridPlacement(5, 3, 2, 1)})

        assert len(received) == 1
        assert received[0].data == {1: GridPlacement(5, 3, 2, 1)}
        assert received[0].source is layout_model

    def test_commit_rejects_invalid_placement(self, layout_model):
        with pytest.raises(ValueError):
            layout_model.commit_placements({1: GridPlacement(9, 1, 5, 1)})

    def test_mutations_publish_layout_changed(self, layout_model, event_system):
        received = []
        event_system.subscribe(EventType.LAYOUT_CHANGED, received.append)

        layout_model.select_panel(1, QRectF(0, 0, 300, 160))
        layout_model.set_rect(1, QRectF(10, 0, 300, 160))
        layout_model.deselect_all()

        assert len(received) == 3
        assert received[-1].data is layout_model.panels()

    def test_select_publishes_panel_selected(self, layout_model, event_system):
        received = []
        event_system.subscribe(EventType.PANEL_SELECTED, received.append)

        layout_model.select_panel(3, QRectF(600, 80, 400, 160))

        assert [e.data for e in received] == [3]

    def test_add_panel_rejects_duplicates_and_invalid(self, layout_model):
        with pytest.raises(ValueError):
            layout_model.add_panel(Panel(1, GridPlacement(1, 4)))
        with pytest.raises(ValueError):
            layout_model.add_panel(Panel(9, GridPlacement(10, 1, 2, 1)))

        layout_model.add_panel(Panel(9, GridPlacement(10, 5)))
        assert len(layout_model) == 4

    def test_remove_panel(self, layout_model):
        assert layout_model.remove_panel(2) is True
        assert layout_model.remove_panel(2) is False
        assert layout_model.get(2) is None

    def test_from_config(self):
        model = LayoutModel.from_config(
            [
                {'id': 1, 'column': 1, 'row': 1, 'column_span': 3, 'row_span': 2},
                {'id': '2', 'column': '9', 'row': 1, 'column_span': 5},
                {'id': 1, 'column': 2, 'row': 2},
                {'column': 1},
                "garbage",
            ],
            columns=10,
        )

        assert [p.panel_id for p in model] == [1, 2]
        assert model.get(2).placement == GridPlacement(9, 1, 2, 1)
