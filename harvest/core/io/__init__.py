"""
Input/Output Utilities.

Content digests for cache and download validation, and YAML loading for
configuration manifests.
"""

from .data_io import digest, md5_checksum
from .serialization import load_config_from_yaml

__all__ = [
    "digest",
    "md5_checksum",
    "load_config_from_yaml",
]
