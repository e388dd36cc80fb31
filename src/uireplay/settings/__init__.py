"""Runtime configuration for uireplay."""

from uireplay.settings.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
