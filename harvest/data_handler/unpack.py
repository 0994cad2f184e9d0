"""
Archive Unpacking Collaborators.

The preparer hands downloaded archive bytes to an ``Unpacker`` and only
relies on the expected file layout existing afterwards. The default
implementation delegates to the standard library ``tarfile`` module.
"""

from __future__ import annotations

import io
import logging
import tarfile
from pathlib import Path
from typing import Protocol

from ..core import LOGGER_NAME, LogStyle

logger = logging.getLogger(LOGGER_NAME)


class Unpacker(Protocol):
    """Structural contract for anything that can expand an archive into a directory."""

    def unpack(self, archive_bytes: bytes, destination_dir: Path) -> None:
        """
        Expand ``archive_bytes`` into ``destination_dir``.

        Args:
            archive_bytes: Raw archive content.
            destination_dir: Directory receiving the archive members.
        """
        ...  # pragma: no cover


class TarArchiveUnpacker:
    """
    Unpacks tar archives, detecting gzip/bz2/xz compression transparently.

    Members are extracted with the ``data`` filter, which rejects absolute
    paths, parent-directory escapes and special files.
    """

    def unpack(self, archive_bytes: bytes, destination_dir: Path) -> None:
        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)

        with tarfile.open(fileobj=io.BytesIO(archive_bytes), mode="r:*") as archive:
            members = archive.getmembers()
            archive.extractall(destination_dir, filter="data")

        logger.info(
            f"{LogStyle.INDENT}{LogStyle.ARROW} {'Unpacked':<18}: "
            f"{len(members)} members into {destination_dir}"
        )
