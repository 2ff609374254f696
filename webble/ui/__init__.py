"""
Qt adapters for WebBLE.
"""

from .scroll_bridge import ScrollChromeBridge

__all__ = ["ScrollChromeBridge"]
