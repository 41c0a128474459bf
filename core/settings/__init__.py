"""Settings management for the panel grid."""

from .settings_manager import SettingsManager
from .defaults import get_default_settings

__all__ = ['SettingsManager', 'get_default_settings']
