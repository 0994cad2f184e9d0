"""
Declarative Dataset Layouts and Registry.

A ``DatasetLayout`` captures everything that distinguishes one binary
benchmark from another: where its artifacts live remotely, which files the
unpacked archive must contain, and the record geometry of its binary
files. A single preparer handles every layout, so adding a dataset means
registering data rather than writing a new class.

On-disk shape: ``<cache_root>/<family>/<subdir>/<file name>``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Final

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.config import NonNegativeInt, PositiveInt
from .remote import RemoteArtifact

# CIFAR geometry: 32x32 pixels, 3 channel-major planes
CIFAR_FEATURE_SIZE: Final[int] = 32 * 32 * 3


class DatasetLayout(BaseModel):
    """
    Immutable description of one dataset family's remote and local shape.

    Attributes:
        name: Registry key (e.g. ``'cifar10'``).
        display_name: Human-readable name for reporting.
        family: Cache subdirectory shared by related datasets (e.g. ``'cifar'``).
        subdir: Directory created by the archive inside the family directory.
        remotes: Artifacts to download; fetched concurrently.
        label_files: Plain-text label-name files, read in order.
        train_files: Binary record files of the training split, in row order.
        test_files: Binary record files of the test split, in row order.
        label_byte_count: Label bytes leading each record.
        feature_size: Feature bytes following the labels in each record.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Identity
    name: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)

    # Local layout
    family: str = Field(..., min_length=1)
    subdir: str = Field(default="", description="Empty when files sit directly in the family dir")

    # Source
    remotes: tuple[RemoteArtifact, ...] = Field(..., min_length=1)

    # Expected files
    label_files: tuple[str, ...] = Field(default=())
    train_files: tuple[str, ...] = Field(default=())
    test_files: tuple[str, ...] = Field(default=())

    # Record geometry
    label_byte_count: NonNegativeInt = Field(...)
    feature_size: PositiveInt = Field(...)

    @model_validator(mode="after")
    def _check_file_names(self) -> "DatasetLayout":
        """Rejects file names that would escape the dataset directory."""
        for file_name in self.all_files:
            parts = Path(file_name).parts
            if not parts or Path(file_name).is_absolute() or ".." in parts:
                raise ValueError(f"Layout file name {file_name!r} must be a relative path")
        return self

    @property
    def record_size(self) -> int:
        """Total bytes per record."""
        return self.label_byte_count + self.feature_size

    @property
    def all_files(self) -> tuple[str, ...]:
        """Label, train and test file names, in that order."""
        return self.label_files + self.train_files + self.test_files

    def family_dir(self, cache_root: Path) -> Path:
        """Directory receiving downloaded artifacts."""
        return Path(cache_root) / self.family

    def base_dir(self, cache_root: Path) -> Path:
        """Directory holding the unpacked dataset files."""
        family_dir = self.family_dir(cache_root)
        return family_dir / self.subdir if self.subdir else family_dir

    def expected_paths(self, cache_root: Path) -> list[Path]:
        """Every file that must exist before decoding can start."""
        base = self.base_dir(cache_root)
        return [base / file_name for file_name in self.all_files]

    def __repr__(self) -> str:
        return (
            f"<DatasetLayout: {self.display_name} "
            f"({len(self.train_files)} train / {len(self.test_files)} test files, "
            f"{self.record_size}-byte records)>"
        )


# BUILT-IN LAYOUTS
CIFAR10: Final[DatasetLayout] = DatasetLayout(
    name="cifar10",
    display_name="CIFAR-10",
    family="cifar",
    subdir="cifar-10-batches-bin",
    remotes=(
        RemoteArtifact(
            url="https://www.cs.toronto.edu/~kriz/cifar-10-binary.tar.gz",
            expected_size=170052171,
            expected_digest="c32a1d4ab5d03f1284b67883e8d87530",
        ),
    ),
    label_files=("batches.meta.txt",),
    train_files=(
        "data_batch_1.bin",
        "data_batch_2.bin",
        "data_batch_3.bin",
        "data_batch_4.bin",
        "data_batch_5.bin",
    ),
    test_files=("test_batch.bin",),
    label_byte_count=1,
    feature_size=CIFAR_FEATURE_SIZE,
)

# Records carry a coarse label byte followed by a fine label byte
CIFAR100: Final[DatasetLayout] = DatasetLayout(
    name="cifar100",
    display_name="CIFAR-100",
    family="cifar",
    subdir="cifar-100-binary",
    remotes=(
        RemoteArtifact(
            url="https://www.cs.toronto.edu/~kriz/cifar-100-binary.tar.gz",
            expected_size=168513733,
            expected_digest="03b5dce01913d631647c71ecec9e9cb8",
        ),
    ),
    label_files=("coarse_label_names.txt", "fine_label_names.txt"),
    train_files=("train.bin",),
    test_files=("test.bin",),
    label_byte_count=2,
    feature_size=CIFAR_FEATURE_SIZE,
)


# REGISTRY
DATASET_REGISTRY: Dict[str, DatasetLayout] = {
    CIFAR10.name: CIFAR10,
    CIFAR100.name: CIFAR100,
}


def register_layout(layout: DatasetLayout) -> None:
    """Adds (or replaces) a layout in the global registry."""
    DATASET_REGISTRY[layout.name] = layout


def get_layout(name: str) -> DatasetLayout:
    """
    Retrieves a registered layout by name.

    Raises:
        KeyError: If no layout is registered under ``name``.
    """
    if name not in DATASET_REGISTRY:
        available = sorted(DATASET_REGISTRY)
        raise KeyError(f"Dataset '{name}' not found. Available: {available}")
    return DATASET_REGISTRY[name]
