"""Durable key/value storage for gemchat.

Holds the serialized conversation collection under a single key.
"""

from .base import KeyValueStorage
from .factory import create_storage

__all__ = [
    "KeyValueStorage",
    "create_storage",
]
