"""
Dataset Acquisition & Decoding Package.

Remote artifact descriptors, the streaming transfer engine, declarative
dataset layouts, the preparer that ties them together, and the fixed-width
binary record decoder.
"""

from .decoder import count_records, decode_records, read_label_names, read_label_set
from .layouts import (
    CIFAR10,
    CIFAR100,
    DATASET_REGISTRY,
    DatasetLayout,
    get_layout,
    register_layout,
)
from .preparer import DatasetPreparer, DecodedDataset, prepare_dataset
from .remote import RemoteArtifact
from .transfer import fetch
from .unpack import TarArchiveUnpacker, Unpacker

__all__ = [
    # Remote artifacts
    "RemoteArtifact",
    "fetch",
    # Layouts
    "DatasetLayout",
    "DATASET_REGISTRY",
    "CIFAR10",
    "CIFAR100",
    "get_layout",
    "register_layout",
    # Preparation
    "DatasetPreparer",
    "DecodedDataset",
    "prepare_dataset",
    "Unpacker",
    "TarArchiveUnpacker",
    # Decoding
    "decode_records",
    "count_records",
    "read_label_names",
    "read_label_set",
]
