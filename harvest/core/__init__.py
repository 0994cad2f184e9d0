"""
Core Utilities Package

Exposes configuration, logging, integrity helpers and filesystem constants
shared by the acquisition pipeline.
"""

# Configuration
from .config import HarvestConfig, ValidatedPath

# Input/Output Utilities
from .io import digest, load_config_from_yaml, md5_checksum

# Logging
from .logger import Logger, LogStyle

# Constants & Paths
from .paths import DEFAULT_CACHE_ROOT, DEFAULT_CHUNK_SIZE, LOGGER_NAME

__all__ = [
    # Configuration
    "HarvestConfig",
    "ValidatedPath",
    # Constants & Paths
    "DEFAULT_CACHE_ROOT",
    "DEFAULT_CHUNK_SIZE",
    "LOGGER_NAME",
    # Logging
    "Logger",
    "LogStyle",
    # I/O
    "digest",
    "md5_checksum",
    "load_config_from_yaml",
]
