"""
Pytest test suite for dataset preparation.

Exercises the full acquire → unpack → label read → decode path on a toy
layout served from memory, plus cache short-circuiting, concurrent
fan-out and all-or-nothing failure semantics. No real network calls.
"""

import asyncio
import io
import tarfile
import threading

import numpy as np
import pytest

from harvest.core.config import HarvestConfig
from harvest.core.io import digest
from harvest.data_handler import preparer as preparer_module
from harvest.data_handler import remote as remote_module
from harvest.data_handler.layouts import DatasetLayout
from harvest.data_handler.preparer import DatasetPreparer, DecodedDataset, prepare_dataset
from harvest.data_handler.remote import RemoteArtifact
from harvest.data_handler.unpack import TarArchiveUnpacker
from harvest.exceptions import DatasetLayoutError, HttpStatusError, IntegrityError

TRAIN_1 = bytes([0, 1, 1, 1, 1, 2, 2, 2])
TRAIN_2 = bytes([2, 3, 3, 3])
TEST = bytes([1, 9, 9, 9])
LABELS = b"cat\n\ndog\nbird\n"


def _tar_gz(members):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, payload in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(payload)
            archive.addfile(info, io.BytesIO(payload))
    return buffer.getvalue()


ARCHIVE = _tar_gz(
    {
        "toy-bin/labels.txt": LABELS,
        "toy-bin/train_1.bin": TRAIN_1,
        "toy-bin/train_2.bin": TRAIN_2,
        "toy-bin/test.bin": TEST,
    }
)
ARCHIVE_URL = "https://example.com/toy-binary.tar.gz"


def _toy_layout(**overrides):
    fields = dict(
        name="toy",
        display_name="Toy",
        family="toy",
        subdir="toy-bin",
        remotes=(
            RemoteArtifact(url=ARCHIVE_URL, expected_size=len(ARCHIVE), expected_digest=digest(ARCHIVE)),
        ),
        label_files=("labels.txt",),
        train_files=("train_1.bin", "train_2.bin"),
        test_files=("test.bin",),
        label_byte_count=1,
        feature_size=3,
    )
    fields.update(overrides)
    return DatasetLayout(**fields)


# FIXTURES
@pytest.fixture
def served(monkeypatch):
    """Serves URL → bytes from a dict in place of the transfer engine."""
    calls = []
    content = {ARCHIVE_URL: ARCHIVE}

    def fetch(url, expected_size=None, chunk_size=8192, timeout=None, session=None):
        calls.append(url)
        payload = content.get(url)
        if payload is None:
            raise HttpStatusError(url, 404, "Not Found")
        return payload

    monkeypatch.setattr(remote_module, "fetch", fetch)
    return content, calls


# PREPARE: FULL PATH
@pytest.mark.integration
def test_prepare_downloads_unpacks_and_decodes(served, tmp_path):
    """A cold cache is filled and the dataset decodes as laid out."""
    _, calls = served
    preparer = DatasetPreparer(_toy_layout(), cache_root=tmp_path, unpacker=TarArchiveUnpacker())

    dataset = asyncio.run(preparer.prepare())

    assert calls == [ARCHIVE_URL]
    assert (tmp_path / "toy" / "toy-binary.tar.gz").read_bytes() == ARCHIVE
    assert dataset.labels == (("cat", "dog", "bird"),)
    assert dataset.train_files == (
        tmp_path / "toy" / "toy-bin" / "train_1.bin",
        tmp_path / "toy" / "toy-bin" / "train_2.bin",
    )

    train_labels, train_features = dataset.get_train_data()
    np.testing.assert_array_equal(train_labels, [[0], [1], [2]])
    np.testing.assert_array_equal(train_features, [[1, 1, 1], [2, 2, 2], [3, 3, 3]])

    test_labels, test_features = dataset.get_test_data()
    np.testing.assert_array_equal(test_labels, [[1]])
    np.testing.assert_array_equal(test_features, [[9, 9, 9]])


@pytest.mark.integration
def test_prepare_skips_network_when_cached(served, tmp_path):
    """A second preparation finds every file and performs no fetch."""
    _, calls = served
    preparer = DatasetPreparer(_toy_layout(), cache_root=tmp_path, unpacker=TarArchiveUnpacker())

    asyncio.run(preparer.prepare())
    assert preparer.is_cached() is True

    dataset = asyncio.run(preparer.prepare())

    assert len(calls) == 1
    assert dataset.count_records("train") == 3


@pytest.mark.integration
def test_prepare_with_existing_layout_never_fetches(served, tmp_path):
    """Pre-populated layouts are used as-is, even without the archive."""
    _, calls = served
    base = tmp_path / "toy" / "toy-bin"
    base.mkdir(parents=True)
    (base / "labels.txt").write_bytes(LABELS)
    (base / "train_1.bin").write_bytes(TRAIN_1)
    (base / "train_2.bin").write_bytes(TRAIN_2)
    (base / "test.bin").write_bytes(TEST)

    dataset = asyncio.run(DatasetPreparer(_toy_layout(), cache_root=tmp_path).prepare())

    assert calls == []
    assert dataset.count_records("test") == 1


# PREPARE: FAN-OUT
@pytest.mark.integration
def test_prepare_fetches_raw_remotes_concurrently(monkeypatch, tmp_path):
    """Several artifacts are in flight at the same time before the join."""
    train, test = bytes([4, 5, 6, 7]), bytes([8, 9, 10, 11])
    payloads = {
        "https://example.com/raw/train.bin": train,
        "https://example.com/raw/test.bin": test,
    }
    both_started = threading.Barrier(2, timeout=5)

    def fetch(url, expected_size=None, chunk_size=8192, timeout=None, session=None):
        # Each transfer waits for its sibling, which only succeeds if both run concurrently
        both_started.wait()
        return payloads[url]

    monkeypatch.setattr(remote_module, "fetch", fetch)
    layout = _toy_layout(
        subdir="",
        remotes=tuple(
            RemoteArtifact(url=url, expected_size=len(data), expected_digest=digest(data))
            for url, data in payloads.items()
        ),
        label_files=(),
        train_files=("train.bin",),
        test_files=("test.bin",),
    )

    dataset = asyncio.run(DatasetPreparer(layout, cache_root=tmp_path, unpacker=None).prepare())

    labels, features = dataset.get_train_data()
    np.testing.assert_array_equal(labels, [[4]])
    np.testing.assert_array_equal(features, [[5, 6, 7]])
    assert dataset.labels == ()


@pytest.mark.integration
def test_acquire_returns_paths_in_remote_order(served, tmp_path):
    """acquire() returns artifact paths aligned with layout.remotes."""
    content, _ = served
    content["https://example.com/second.tar.gz"] = ARCHIVE
    layout = _toy_layout(
        remotes=(
            RemoteArtifact(url="https://example.com/second.tar.gz", expected_size=len(ARCHIVE)),
            RemoteArtifact(url=ARCHIVE_URL, expected_size=len(ARCHIVE)),
        )
    )

    paths = asyncio.run(DatasetPreparer(layout, cache_root=tmp_path).acquire())

    assert [p.name for p in paths] == ["second.tar.gz", "toy-binary.tar.gz"]


# PREPARE: FAILURES
@pytest.mark.integration
def test_prepare_fails_if_any_remote_fails(served, tmp_path):
    """One failing artifact aborts the whole preparation."""
    layout = _toy_layout(
        remotes=(
            RemoteArtifact(url=ARCHIVE_URL, expected_size=len(ARCHIVE)),
            RemoteArtifact(url="https://example.com/missing.tar.gz", expected_size=1),
        )
    )
    preparer = DatasetPreparer(layout, cache_root=tmp_path, unpacker=TarArchiveUnpacker())

    with pytest.raises(HttpStatusError):
        asyncio.run(preparer.prepare())

    assert not (tmp_path / "toy" / "toy-bin").exists()


@pytest.mark.integration
def test_prepare_integrity_failure(served, tmp_path):
    """A corrupted download aborts preparation before unpacking."""
    content, _ = served
    content[ARCHIVE_URL] = bytes(len(ARCHIVE))
    preparer = DatasetPreparer(_toy_layout(), cache_root=tmp_path, unpacker=TarArchiveUnpacker())

    with pytest.raises(IntegrityError):
        asyncio.run(preparer.prepare())

    assert not (tmp_path / "toy" / "toy-binary.tar.gz").exists()


@pytest.mark.integration
def test_prepare_missing_files_after_unpack(served, tmp_path):
    """An archive lacking expected files raises DatasetLayoutError."""
    layout = _toy_layout(test_files=("test.bin", "extra_test.bin"))
    preparer = DatasetPreparer(layout, cache_root=tmp_path, unpacker=TarArchiveUnpacker())

    with pytest.raises(DatasetLayoutError, match="extra_test.bin"):
        asyncio.run(preparer.prepare())


# DECODED DATASET
@pytest.mark.unit
def test_decoded_dataset_decodes_lazily(tmp_path):
    """Files are read on each call, so on-disk changes are visible."""
    train = tmp_path / "train.bin"
    train.write_bytes(bytes([1, 2, 3]))
    dataset = DecodedDataset.from_files([], [train], [], label_byte_count=1, feature_size=2)

    first, _ = dataset.get_train_data()
    train.write_bytes(bytes([7, 8, 9, 5, 6, 6]))
    second, _ = dataset.get_train_data()

    np.testing.assert_array_equal(first, [[1]])
    np.testing.assert_array_equal(second, [[7], [5]])
    assert dataset.record_size == 3


# CONVENIENCE INTERFACE
@pytest.mark.integration
def test_prepare_dataset_by_name(served, monkeypatch, tmp_path):
    """prepare_dataset resolves the registry and honours the config."""
    monkeypatch.setattr(preparer_module, "get_layout", lambda name: _toy_layout(name=name))
    cfg = HarvestConfig(cache_root=tmp_path)

    dataset = prepare_dataset("toy", cfg)

    assert dataset.train_files[0].parent == tmp_path.resolve() / "toy" / "toy-bin"
    assert dataset.count_records("train") == 3


@pytest.mark.integration
def test_prepare_dataset_applies_logging_config(served, monkeypatch, tmp_path):
    """prepare_dataset configures logging from cfg and unpacks tar by default."""
    monkeypatch.setattr(preparer_module, "get_layout", lambda name: _toy_layout(name=name))
    applied = []
    monkeypatch.setattr(HarvestConfig, "configure_logging", lambda self: applied.append(self))
    cfg = HarvestConfig(cache_root=tmp_path, log_level="DEBUG", log_dir=tmp_path / "logs")

    dataset = prepare_dataset("toy", cfg)

    assert applied == [cfg]
    assert dataset.count_records("test") == 1


@pytest.mark.integration
def test_prepare_dataset_raw_artifacts(monkeypatch, tmp_path):
    """raw_artifacts=True writes downloads as the dataset files, unpacking nothing."""
    train, test = bytes([4, 5, 6, 7]), bytes([8, 9, 10, 11])
    payloads = {
        "https://example.com/raw/train.bin": train,
        "https://example.com/raw/test.bin": test,
    }
    monkeypatch.setattr(remote_module, "fetch", lambda url, *args, **kwargs: payloads[url])
    layout = _toy_layout(
        subdir="",
        remotes=tuple(RemoteArtifact(url=url, expected_size=4) for url in payloads),
        label_files=(),
        train_files=("train.bin",),
        test_files=("test.bin",),
    )
    monkeypatch.setattr(preparer_module, "get_layout", lambda name: layout)

    dataset = prepare_dataset("toy", HarvestConfig(cache_root=tmp_path), raw_artifacts=True)

    labels, _ = dataset.get_test_data()
    np.testing.assert_array_equal(labels, [[8]])


@pytest.mark.unit
def test_prepare_dataset_unknown_name(tmp_path):
    """Unknown dataset names raise DatasetLayoutError."""
    with pytest.raises(DatasetLayoutError, match="not found"):
        prepare_dataset("imagenet", HarvestConfig(cache_root=tmp_path))


@pytest.mark.unit
def test_from_config_copies_transfer_policy(tmp_path):
    """from_config carries cache root, chunk size and timeout."""
    cfg = HarvestConfig(cache_root=tmp_path, chunk_size=1024, request_timeout=12.0)

    preparer = DatasetPreparer.from_config(_toy_layout(), cfg)

    assert preparer.cache_root == tmp_path.resolve()
    assert preparer.chunk_size == 1024
    assert preparer.timeout == 12.0
    assert preparer.unpacker is None
