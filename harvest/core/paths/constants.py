"""
Project-wide Path Constants.

Single source of truth for the on-disk cache layout and the logger identity
shared by every module.

Module Attributes:
    LOGGER_NAME: Global logger identity used by all modules for log synchronization.
    DEFAULT_CACHE_ROOT: Default root under which dataset families are cached.
    DEFAULT_CHUNK_SIZE: Streaming chunk size in bytes for transfers and checksums.
"""

from pathlib import Path
from typing import Final

# GLOBAL CONSTANTS
# Global logger identity used by all modules to ensure log synchronization
LOGGER_NAME: Final[str] = "Harvest"

# Relative to the working directory, matching the conventional ./data cache
DEFAULT_CACHE_ROOT: Final[Path] = Path("./data")

DEFAULT_CHUNK_SIZE: Final[int] = 8192
