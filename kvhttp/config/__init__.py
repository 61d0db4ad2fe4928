"""Configuration module for KV-HTTP."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
