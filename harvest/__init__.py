"""
Harvest: integrity-checked acquisition and decoding of binary ML benchmarks.

Downloads dataset archives once, validates them by size and MD5, and
decodes fixed-width record files into label and feature matrices.

Example:
    >>> from harvest import prepare_dataset
    >>> cifar = prepare_dataset("cifar10")
    >>> labels, images = cifar.get_train_data()
"""

from .core import HarvestConfig, Logger, digest, md5_checksum
from .data_handler import (
    DATASET_REGISTRY,
    DatasetLayout,
    DatasetPreparer,
    DecodedDataset,
    RemoteArtifact,
    TarArchiveUnpacker,
    Unpacker,
    decode_records,
    fetch,
    get_layout,
    prepare_dataset,
    read_label_names,
    register_layout,
)
from .exceptions import (
    DatasetLayoutError,
    HarvestError,
    HttpStatusError,
    IntegrityError,
    MalformedRecordError,
    MalformedUrlError,
    SizeMismatchError,
)

__all__ = [
    "__version__",
    # Configuration & logging
    "HarvestConfig",
    "Logger",
    # Integrity
    "digest",
    "md5_checksum",
    # Acquisition
    "RemoteArtifact",
    "fetch",
    "DatasetLayout",
    "DATASET_REGISTRY",
    "get_layout",
    "register_layout",
    "DatasetPreparer",
    "DecodedDataset",
    "prepare_dataset",
    "Unpacker",
    "TarArchiveUnpacker",
    # Decoding
    "decode_records",
    "read_label_names",
    # Errors
    "HarvestError",
    "MalformedUrlError",
    "HttpStatusError",
    "SizeMismatchError",
    "MalformedRecordError",
    "IntegrityError",
    "DatasetLayoutError",
]

__version__ = "0.1.0"
