"""
Configuration for WebBLE.
"""

from .manager import ConfigSection, WebbleConfig

__all__ = ["ConfigSection", "WebbleConfig"]
