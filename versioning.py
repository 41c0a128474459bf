"""Centralised version and naming information.

Single source of truth for the application name and version shown in the
window title, the Qt application metadata and the startup log banner.
"""
from __future__ import annotations


APP_NAME: str = "Panel Grid"
APP_ORGANIZATION: str = "PanelGrid"
APP_VERSION: str = "0.1.0"


__all__ = [
    "APP_NAME",
    "APP_ORGANIZATION",
    "APP_VERSION",
]
