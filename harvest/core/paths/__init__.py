"""
Filesystem Constants Package.

Exposes the logger identity and the default cache root used when no
explicit configuration is supplied.
"""

from .constants import DEFAULT_CACHE_ROOT, DEFAULT_CHUNK_SIZE, LOGGER_NAME

__all__ = [
    "DEFAULT_CACHE_ROOT",
    "DEFAULT_CHUNK_SIZE",
    "LOGGER_NAME",
]
