"""
Domain utilities.

Only id generation lives here: entity ids are UUIDv7 so that creation order,
storage order and lock order coincide.
"""

from .uuid7 import uuid7

__all__ = ["uuid7"]
