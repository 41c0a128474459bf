"""
Integration tests for SettingsManager.

Tests the core settings functionality including:
- Default seeding
- Get/set operations
- Type normalisation helpers
- Change notifications
"""
import logging

import pytest
from unittest.mock import patch
from PySide6.QtCore import QSettings

from core.logging.tags import TAG_FALLBACK
from core.settings import get_default_settings
from core.settings.defaults import DEFAULT_PANELS
from core.settings.settings_manager import SettingsManager


@pytest.fixture
def stored():
    """In-memory backing store standing in for QSettings."""
    store = {}

    def mock_set(key, value):
        store[key] = value

    def mock_get(key, default=None):
        return store.get(key, default)

    def mock_contains(key):
        return key in store

    with patch.object(QSettings, 'setValue', side_effect=mock_set):
        with patch.object(QSettings, 'value', side_effect=mock_get):
            with patch.object(QSettings, 'contains', side_effect=mock_contains):
                yield store


@pytest.fixture
def manager(stored):
    return SettingsManager(organization="TestOrg", application="TestApp")


class TestSettingsManagerBasics:
    """Basic get/set operations."""

    def test_defaults_seeded(self, manager, stored):
        for key, value in get_default_settings().items():
            assert stored[key] == value

    def test_defaults_do_not_overwrite_stored_values(self, stored):
        stored['grid.columns'] = 12

        manager = SettingsManager(organization="TestOrg", application="TestApp")

        assert manager.get('grid.columns') == 12

    def test_set_and_get(self, manager):
        manager.set("test.key", "test_value")

        assert manager.get("test.key") == "test_value"

    def test_get_returns_default_for_missing_key(self, manager):
        assert manager.get("nonexistent.key", "default_value") == "default_value"

    def test_default_panels_copied(self, manager):
        """Mutating a returned defaults map never leaks into the canonical one."""
        defaults = get_default_settings()
        defaults['layout.panels'][0]['column'] = 99

        assert DEFAULT_PANELS[0]['column'] == 1


class TestSettingsManagerConversions:
    """Type normalisation helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [(True, True), ("true", True), ("1", True), ("on", True),
         (False, False), ("false", False), ("0", False), ("off", False)],
    )
    def test_get_bool(self, manager, raw, expected):
        manager.set("test.flag", raw)

        assert manager.get_bool("test.flag") is expected

    def test_get_bool_unparseable_uses_default(self, manager):
        manager.set("test.flag", "maybe")

        assert manager.get_bool("test.flag", True) is True

    @pytest.mark.parametrize("raw,expected", [(12, 12), ("12", 12), ("7.0", 7), (True, 1)])
    def test_get_int(self, manager, raw, expected):
        manager.set("grid.columns", raw)

        assert manager.get_int("grid.columns") == expected

    def test_get_int_fallback(self, manager):
        manager.set("grid.columns", "twelve")

        assert manager.get_int("grid.columns", 10) == 10

    def test_get_list_wraps_single_value(self, manager):
        manager.set("test.list", {'id': 1})

        assert manager.get_list("test.list") == [{'id': 1}]
        assert manager.get_list("missing.list") == []


class TestSettingsManagerNotifications:
    """Change notifications."""

    def test_on_changed_receives_new_and_old(self, manager):
        calls = []
        manager.on_changed("grid.gap", lambda new, old: calls.append((new, old)))

        manager.set("grid.gap", 4)

        assert calls == [(4, 8)]

    def test_settings_changed_signal(self, manager):
        emitted = []
        manager.settings_changed.connect(lambda key, value: emitted.append((key, value)))

        manager.set("grid.row_height", 100)

        assert emitted == [("grid.row_height", 100)]

    def test_failing_handler_does_not_block_set(self, manager):
        def broken(new, old):
            raise RuntimeError("boom")

        manager.on_changed("grid.gap", broken)
        manager.set("grid.gap", 2)

        assert manager.get("grid.gap") == 2


@pytest.mark.qt
class TestSettingsManagerPersistence:
    """Round trips through a real QSettings store."""

    def test_defaults_readable_as_grid_values(self, qt_app, settings_manager):
        assert settings_manager.get_int('grid.columns') == 10
        assert settings_manager.get_bool('selection.commit_on_reselect') is False
        assert len(settings_manager.get_list('layout.panels')) == 3

    def test_set_then_get(self, qt_app, settings_manager):
        settings_manager.set('grid.columns', 3)

        assert settings_manager.get_int('grid.columns') == 3

    def test_clear_drops_stored_values(self, qt_app, settings_manager):
        settings_manager.set('test.key', 'x')

        settings_manager.clear()

        assert settings_manager.get('test.key') is None


def test_get_int_fallback_is_tagged(manager, caplog):
    manager.set("grid.columns", "twelve")

    with caplog.at_level(logging.WARNING):
        manager.get_int("grid.columns", 10)

    assert any(r.getMessage().startswith(TAG_FALLBACK) for r in caplog.records)
