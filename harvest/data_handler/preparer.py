"""
Dataset Preparation Module

Ensures a dataset's files exist locally and binds them to a lazily decoded
dataset object. Preparation is all-or-nothing: the first failing artifact
aborts it, and nothing is decoded until every expected file is present.

Flow:
    layout → expected files present? ── yes ──────────────────────┐
                     │ no                                          ▼
                     └─▶ fetch all remotes concurrently ─▶ unpack ─▶ read labels ─▶ DecodedDataset
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

import numpy as np

from ..core import DEFAULT_CACHE_ROOT, DEFAULT_CHUNK_SIZE, LOGGER_NAME, HarvestConfig, LogStyle
from ..exceptions import DatasetLayoutError
from .decoder import count_records, decode_records, read_label_set
from .layouts import DatasetLayout, get_layout
from .unpack import TarArchiveUnpacker, Unpacker

logger = logging.getLogger(LOGGER_NAME)

Split = Literal["train", "test"]


# DATA CONTAINERS
@dataclass(frozen=True)
class DecodedDataset:
    """
    Prepared dataset bound to its local record files and label names.

    Matrices are decoded from disk on every call and never cached, so
    memory is only held while the caller keeps the returned arrays.

    Attributes:
        labels: One tuple of category names per label file, in file order.
        train_files: Training record files, in row order.
        test_files: Test record files, in row order.
        label_byte_count: Label bytes leading each record.
        feature_size: Feature bytes following the labels in each record.
    """

    labels: tuple[tuple[str, ...], ...]
    train_files: tuple[Path, ...]
    test_files: tuple[Path, ...]
    label_byte_count: int
    feature_size: int

    @classmethod
    def from_files(
        cls,
        label_files: list[Path],
        train_files: list[Path],
        test_files: list[Path],
        label_byte_count: int,
        feature_size: int,
    ) -> "DecodedDataset":
        """Reads the label files and binds the record files."""
        return cls(
            labels=read_label_set(label_files),
            train_files=tuple(train_files),
            test_files=tuple(test_files),
            label_byte_count=label_byte_count,
            feature_size=feature_size,
        )

    @property
    def record_size(self) -> int:
        return self.label_byte_count + self.feature_size

    def get_train_data(self) -> tuple[np.ndarray, np.ndarray]:
        """Decodes the training split into (labels, features)."""
        return decode_records(self.train_files, self.label_byte_count, self.record_size)

    def get_test_data(self) -> tuple[np.ndarray, np.ndarray]:
        """Decodes the test split into (labels, features)."""
        return decode_records(self.test_files, self.label_byte_count, self.record_size)

    def count_records(self, split: Split) -> int:
        """Row count of a split, computed from file sizes without decoding."""
        files = self.train_files if split == "train" else self.test_files
        return count_records(files, self.record_size)


# PREPARER
class DatasetPreparer:
    """
    Acquires and binds any dataset described by a ``DatasetLayout``.

    Args:
        layout: Declarative description of the dataset.
        cache_root: Root directory of the local cache.
        unpacker: Archive collaborator applied to every downloaded artifact,
            or None when artifacts are the dataset files themselves.
        chunk_size: Streaming and hashing chunk size in bytes.
        timeout: Per-request timeout in seconds, or None.
    """

    def __init__(
        self,
        layout: DatasetLayout,
        cache_root: Path = DEFAULT_CACHE_ROOT,
        unpacker: Unpacker | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = None,
    ) -> None:
        self.layout = layout
        self.cache_root = Path(cache_root)
        self.unpacker = unpacker
        self.chunk_size = chunk_size
        self.timeout = timeout

    @classmethod
    def from_config(
        cls,
        layout: DatasetLayout,
        cfg: HarvestConfig,
        unpacker: Unpacker | None = None,
    ) -> "DatasetPreparer":
        """Builds a preparer using the cache root and transfer policy of ``cfg``."""
        return cls(
            layout,
            cache_root=cfg.cache_root,
            unpacker=unpacker,
            chunk_size=cfg.chunk_size,
            timeout=cfg.request_timeout,
        )

    def is_cached(self) -> bool:
        """True when every expected file already exists locally."""
        return all(path.exists() for path in self.layout.expected_paths(self.cache_root))

    async def acquire(self) -> list[Path]:
        """
        Ensures every remote artifact is present, fetching them concurrently.

        Waits for all artifacts; the first failure propagates and the
        results of the remaining transfers are discarded.

        Returns:
            Local paths of the artifacts, in ``layout.remotes`` order.
        """
        family_dir = self.layout.family_dir(self.cache_root)
        return list(
            await asyncio.gather(
                *(
                    remote.ensure_local(
                        family_dir, chunk_size=self.chunk_size, timeout=self.timeout
                    )
                    for remote in self.layout.remotes
                )
            )
        )

    async def prepare(self) -> DecodedDataset:
        """
        Ensures the dataset files exist locally and returns the bound dataset.

        Raises:
            DatasetLayoutError: If expected files are still missing after acquisition.
            HarvestError subclasses and OSError: From acquisition, unchanged.
        """
        layout = self.layout
        LogStyle.log_phase_header(logger, f"PREPARING {layout.display_name.upper()}")

        if self.is_cached():
            logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Cache':<18}: all files present")
        else:
            archives = await self.acquire()
            if self.unpacker is not None:
                family_dir = layout.family_dir(self.cache_root)
                for archive in archives:
                    self.unpacker.unpack(archive.read_bytes(), family_dir)
            self._check_layout()

        base = layout.base_dir(self.cache_root)
        dataset = DecodedDataset.from_files(
            label_files=[base / name for name in layout.label_files],
            train_files=[base / name for name in layout.train_files],
            test_files=[base / name for name in layout.test_files],
            label_byte_count=layout.label_byte_count,
            feature_size=layout.feature_size,
        )

        logger.info(
            f"{LogStyle.INDENT}{LogStyle.SUCCESS} {'Ready':<18}: {layout.display_name} "
            f"({len(dataset.train_files)} train / {len(dataset.test_files)} test files, "
            f"{[len(names) for names in dataset.labels]} label names)"
        )
        return dataset

    def _check_layout(self) -> None:
        missing = [p for p in self.layout.expected_paths(self.cache_root) if not p.exists()]
        if missing:
            names = [str(p) for p in missing]
            logger.error(f"Dataset layout incomplete after acquisition: {names}")
            raise DatasetLayoutError(
                f"{self.layout.display_name}: expected files missing after acquisition: {names}"
            )


# CONVENIENCE INTERFACE
def prepare_dataset(
    name: str,
    cfg: HarvestConfig | None = None,
    unpacker: Unpacker | None = None,
    raw_artifacts: bool = False,
) -> DecodedDataset:
    """
    Prepares a registered dataset synchronously.

    The configuration's ``log_level`` and ``log_dir`` are applied to the
    pipeline logger before any work starts.

    Args:
        name: Registry key (e.g. ``'cifar10'``).
        cfg: Pipeline configuration; defaults apply when None.
        unpacker: Archive collaborator; a ``TarArchiveUnpacker`` when None.
        raw_artifacts: Skip unpacking because the remotes are the dataset files.

    Raises:
        DatasetLayoutError: If ``name`` is not registered.
    """
    try:
        layout = get_layout(name)
    except KeyError as e:
        raise DatasetLayoutError(str(e.args[0])) from e

    cfg = cfg if cfg is not None else HarvestConfig()
    cfg.configure_logging()

    if raw_artifacts:
        unpacker = None
    elif unpacker is None:
        unpacker = TarArchiveUnpacker()

    preparer = DatasetPreparer.from_config(layout, cfg, unpacker=unpacker)
    return asyncio.run(preparer.prepare())
