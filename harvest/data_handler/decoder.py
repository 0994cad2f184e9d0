"""
Binary Record Decoder

Turns fixed-width record files into row-aligned label and feature matrices.
Each record is ``label_byte_count`` label bytes followed by a feature block;
records are packed back to back with no header or separator. The decoder
slices by byte offset only and never interprets pixel layout.

Also reads the plain-text label-name files that accompany binary datasets.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import numpy as np

from ..exceptions import MalformedRecordError


def decode_records(
    file_paths: Sequence[Path],
    label_byte_count: int,
    record_size: int,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Decodes concatenated record files into label and feature matrices.

    Files are read in the given order, so rows of ``file_paths[i]`` precede
    rows of ``file_paths[i + 1]``.

    Args:
        file_paths: Record files to concatenate.
        label_byte_count: Leading bytes of each record holding labels.
        record_size: Total bytes per record (labels + features).

    Returns:
        tuple of (labels, features): ``uint8`` arrays shaped
        ``(N, label_byte_count)`` and ``(N, record_size - label_byte_count)``,
        each owning its memory.

    Raises:
        ValueError: If the record geometry is impossible.
        MalformedRecordError: If the total byte length is not a multiple of
            ``record_size``.
        OSError: If a file cannot be read.
    """
    if record_size <= 0:
        raise ValueError(f"record_size must be positive, got {record_size}")
    if not 0 <= label_byte_count <= record_size:
        raise ValueError(
            f"label_byte_count must lie in [0, {record_size}], got {label_byte_count}"
        )

    raw = b"".join(Path(path).read_bytes() for path in file_paths)

    if len(raw) % record_size:
        raise MalformedRecordError(
            f"Record data of {len(raw)} bytes is not a multiple of the "
            f"{record_size}-byte record size ({len(raw) % record_size} trailing bytes)"
        )

    rows = np.frombuffer(raw, dtype=np.uint8).reshape(-1, record_size)

    labels = rows[:, :label_byte_count].copy()
    features = rows[:, label_byte_count:].copy()
    return labels, features


def count_records(file_paths: Sequence[Path], record_size: int) -> int:
    """
    Number of records across ``file_paths`` computed from file sizes alone.

    Raises:
        MalformedRecordError: If the combined size is not a multiple of ``record_size``.
    """
    total = sum(Path(path).stat().st_size for path in file_paths)
    if total % record_size:
        raise MalformedRecordError(
            f"Record files total {total} bytes, not a multiple of {record_size}"
        )
    return total // record_size


def read_label_names(path: Path) -> list[str]:
    """
    Reads one category name per line, skipping blank lines.

    Surrounding whitespace (including ``\\r`` from CRLF files) is stripped.
    """
    text = Path(path).read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def read_label_set(paths: Sequence[Path]) -> tuple[tuple[str, ...], ...]:
    """Reads every label file in order, one tuple of names per file."""
    return tuple(tuple(read_label_names(path)) for path in paths)
