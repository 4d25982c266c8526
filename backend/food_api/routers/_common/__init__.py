"""
Common dependencies shared across routers.
"""

from .dependencies import get_guard, get_pricing

__all__ = [
    "get_guard",
    "get_pricing",
]
