"""
Logging Package.

Centralizes logger initialization and the shared style constants used to
format pipeline messages.

Available Components:

- Logger: Stream and rotating-file logging initialization.
- LogStyle: Unified logging style constants.
"""

from .logger import ColorFormatter, Logger
from .styles import LogStyle

__all__ = [
    "ColorFormatter",
    "Logger",
    "LogStyle",
]
