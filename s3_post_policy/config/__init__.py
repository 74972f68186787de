"""
Application configuration using Pydantic settings.

Only services and scripts that issue policies read these settings; the
signer itself takes everything as arguments.
"""

from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
