"""
Common utilities shared across routers.
"""

from .payload import read_payload

__all__ = [
    "read_payload",
]
