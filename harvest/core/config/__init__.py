"""
Configuration Package.

Flat public API for the pipeline configuration model and its validated
field types.
"""

from .harvest_config import HarvestConfig
from .types import LogLevel, Md5Digest, NonNegativeInt, PositiveFloat, PositiveInt, ValidatedPath

__all__ = [
    "HarvestConfig",
    "LogLevel",
    "Md5Digest",
    "NonNegativeInt",
    "PositiveFloat",
    "PositiveInt",
    "ValidatedPath",
]
