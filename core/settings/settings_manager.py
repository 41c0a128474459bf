"""
Settings manager implementation for the panel grid.

Uses QSettings for persistent storage of configuration only; the panel layout
itself is never written back.
"""
from typing import Any, Callable, Dict, List
import threading
from PySide6.QtCore import QSettings, QObject, Signal
from core.logging.logger import get_logger, is_verbose_logging
from core.logging.tags import TAG_FALLBACK
from core.settings.defaults import get_default_settings

logger = get_logger(__name__)


class SettingsManager(QObject):
    """
    Centralized settings management.

    Uses QSettings for persistent storage with organization/application name.
    Thread-safe with change notifications.
    """

    # Signal emitted when settings change
    settings_changed = Signal(str, object)  # key, new_value

    def __init__(self, organization: str = "PanelGrid",
                 application: str = "PanelGrid"):
        """
        Initialize the settings manager.

        Args:
            organization: Organization name for QSettings
            application: Application name for QSettings
        """
        super().__init__()

        self._settings = QSettings(organization, application)
        self._organization = organization
        self._application = application
        self._lock = threading.RLock()
        self._change_handlers: Dict[str, List[Callable]] = {}

        self._set_defaults()

        logger.info("SettingsManager initialized (%s/%s)", organization, application)

    def _set_defaults(self) -> None:
        """Set default values if not already present."""
        with self._lock:
            for key, value in get_default_settings().items():
                if not self._settings.contains(key):
                    self._settings.setValue(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key in dot notation (e.g., 'grid.columns')
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        with self._lock:
            return self._settings.value(key, default)

    @staticmethod
    def to_bool(value: Any, default: bool = False) -> bool:
        """Normalize a stored setting value to bool.

        INI-backed QSettings hand values back as strings, so "true"/"1"/"yes"/
        "on" and "false"/"0"/"no"/"off" are accepted as well as real bools.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("true", "1", "yes", "on"):
                return True
            if v in ("false", "0", "no", "off"):
                return False
            return default
        if value is None:
            return default
        return bool(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Convenience wrapper around get() that normalizes to bool."""
        return self.to_bool(self.get(key, default), default)

    def get_int(self, key: str, default: int = 0) -> int:
        """Convenience wrapper around get() that normalizes to int.

        Falls back to ``default`` when the stored value cannot be parsed.
        """
        raw = self.get(key, default)
        if isinstance(raw, bool):
            return int(raw)
        try:
            return int(float(raw))
        except (TypeError, ValueError):
            logger.warning("%s Setting %s=%r is not an integer, using %r", TAG_FALLBACK, key, raw, default)
            return default

    def get_list(self, key: str) -> List[Any]:
        """Return a list-valued setting, normalising QSettings' single-item quirk."""
        raw = self.get(key, None)
        if raw is None:
            return []
        if isinstance(raw, (list, tuple)):
            return list(raw)
        return [raw]

    def set(self, key: str, value: Any) -> None:
        """
        Set a setting value.

        Args:
            key: Setting key in dot notation
            value: Value to set
        """
        with self._lock:
            old_value = self._settings.value(key)
            self._settings.setValue(key, value)

            self.settings_changed.emit(key, value)

            for handler in self._change_handlers.get(key, []):
                try:
                    handler(value, old_value)
                except Exception as e:
                    logger.error("Error in change handler for %s: %s", key, e)

        if is_verbose_logging():
            logger.debug("Setting changed: %s: %r -> %r", key, old_value, value)
        else:
            logger.debug("Setting changed: %s", key)

    def on_changed(self, key: str, handler: Callable[[Any, Any], None]) -> None:
        """
        Register a handler for when a specific setting changes.

        Args:
            key: Setting key to watch
            handler: Callback function(new_value, old_value)
        """
        with self._lock:
            self._change_handlers.setdefault(key, []).append(handler)

        logger.debug("Registered change handler for %s", key)

    def clear(self) -> None:
        """Clear all settings (use with caution)."""
        with self._lock:
            self._settings.clear()
        logger.warning("All settings cleared")
