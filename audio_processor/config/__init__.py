"""Configuration package."""

from .settings import Settings, ensure_credentials, settings

__all__ = ["Settings", "ensure_credentials", "settings"]
