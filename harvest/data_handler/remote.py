"""
Remote Artifact Descriptor

Describes one downloadable file (URL, expected size, optional MD5 digest)
and materializes it inside a destination directory. A local copy is reused
whenever its size, and digest when one is declared, still match; otherwise
the artifact is fetched again and the stale file is overwritten.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from ..core import DEFAULT_CHUNK_SIZE, LOGGER_NAME, LogStyle, digest, md5_checksum
from ..core.config import Md5Digest, NonNegativeInt
from ..exceptions import IntegrityError, MalformedUrlError
from .transfer import fetch

logger = logging.getLogger(LOGGER_NAME)


class RemoteArtifact(BaseModel):
    """
    Immutable description of a single remote file.

    Attributes:
        url: HTTP(S) address of the file; its last path segment names the local copy.
        expected_size: Exact size in bytes the server must advertise and deliver.
        expected_digest: Optional MD5 hex digest the content must match.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = Field(..., description="Source URL")
    expected_size: NonNegativeInt = Field(..., description="Exact size in bytes")
    expected_digest: Md5Digest | None = Field(default=None, description="MD5 of the content")

    def resolve_local_path(self, destination_dir: Path) -> Path:
        """
        Derives the local file path from the URL's final path segment.

        Args:
            destination_dir: Directory the file belongs in.

        Returns:
            ``destination_dir / <file name>``

        Raises:
            MalformedUrlError: If the URL cannot be parsed or names no file.
        """
        try:
            parts = urlsplit(self.url)
        except ValueError as e:
            raise MalformedUrlError(f"Cannot parse artifact URL {self.url!r}: {e}") from e

        if not parts.scheme or not parts.netloc:
            raise MalformedUrlError(f"Artifact URL {self.url!r} is not absolute")

        # Last raw segment, decoded; an empty or separator-bearing name is not a file
        name = unquote(parts.path.rsplit("/", 1)[-1])
        if name in ("", ".", "..") or "/" in name or "\\" in name:
            raise MalformedUrlError(f"Artifact URL {self.url!r} has no file name segment")

        return Path(destination_dir) / name

    def local_file_is_valid(self, path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bool:
        """
        Checks whether ``path`` already satisfies this descriptor.

        Size is compared first; the digest, when declared, is only computed
        for files of the right size.
        """
        path = Path(path)
        if not path.is_file():
            return False

        if path.stat().st_size != self.expected_size:
            return False

        if self.expected_digest is not None:
            return md5_checksum(path, chunk_size=chunk_size) == self.expected_digest

        return True

    async def ensure_local(
        self,
        destination_dir: Path,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        timeout: float | None = None,
    ) -> Path:
        """
        Makes sure a valid copy of the artifact exists in ``destination_dir``.

        A valid local copy is returned without touching the network. Otherwise
        the artifact is fetched, its digest verified, and the bytes written
        atomically (temporary file, then rename). Content failing verification
        is discarded and never reaches the target path.

        Args:
            destination_dir: Directory to place the file in (created if needed).
            chunk_size: Streaming and hashing chunk size in bytes.
            timeout: Per-request timeout in seconds, or None.

        Returns:
            Path to the validated local file.

        Raises:
            MalformedUrlError: If the URL names no file.
            HttpStatusError, SizeMismatchError: From the transfer.
            IntegrityError: If the downloaded digest does not match.
            OSError: Filesystem failures, unchanged.
        """
        target = self.resolve_local_path(destination_dir)

        if self.local_file_is_valid(target, chunk_size=chunk_size):
            logger.debug(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Cached':<18}: {target.name}")
            return target

        if target.exists():
            logger.warning(f"Stale or corrupted copy found, re-downloading: {target}")

        logger.info(f"{LogStyle.INDENT}{LogStyle.ARROW} {'Downloading':<18}: {self.url}")
        payload = await asyncio.to_thread(
            fetch, self.url, self.expected_size, chunk_size=chunk_size, timeout=timeout
        )

        if self.expected_digest is not None:
            actual = digest(payload)
            if actual != self.expected_digest:
                logger.error(f"MD5 mismatch: expected {self.expected_digest}, got {actual}")
                raise IntegrityError(
                    f"Digest mismatch for {self.url}: expected {self.expected_digest}, got {actual}"
                )

        _write_atomic(target, payload)
        logger.info(f"{LogStyle.INDENT}{LogStyle.SUCCESS} {'Verified':<18}: {target.name}")
        return target


# PRIVATE HELPERS
def _write_atomic(target: Path, payload: bytes) -> None:
    """Writes ``payload`` next to ``target`` and renames it into place."""
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = target.with_name(f"{target.name}.tmp")
    try:
        tmp_path.write_bytes(payload)
        tmp_path.replace(target)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
