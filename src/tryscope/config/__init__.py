"""Configuration package.

Usage:
    from tryscope.config import get_settings

    settings = get_settings()
    if settings.attach_notes:
        ...
"""

from .release_order import ReleaseOrder
from .settings import TryscopeSettings, configure, get_settings, reset_settings

__all__ = [
    "ReleaseOrder",
    "TryscopeSettings",
    "configure",
    "get_settings",
    "reset_settings",
]
