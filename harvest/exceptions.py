"""
Harvest Exception Hierarchy.

HarvestError (base, Exception)
├── MalformedUrlError(HarvestError, ValueError)       ← artifact URL cannot name a file
├── HttpStatusError(HarvestError)                     ← non-success HTTP response
├── SizeMismatchError(HarvestError)                   ← advertised/received size disagreement
│   └── MalformedRecordError(SizeMismatchError, ValueError)  ← decode-time misalignment
├── IntegrityError(HarvestError)                      ← digest mismatch after download
└── DatasetLayoutError(HarvestError)                  ← expected dataset files missing

Filesystem failures are not wrapped: ``OSError`` reaches the caller as raised.
"""


class HarvestError(Exception):
    """Base exception for all Harvest errors."""


class MalformedUrlError(HarvestError, ValueError):
    """Artifact URL cannot be parsed or has no final path segment."""


class HttpStatusError(HarvestError):
    """Remote server answered with a non-success status code."""

    def __init__(self, url: str, status_code: int, reason: str = "") -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        detail = f" {reason}" if reason else ""
        super().__init__(f"GET {url} failed with HTTP {status_code}{detail}")


class SizeMismatchError(HarvestError):
    """Byte count disagrees with the size the caller expected."""


class MalformedRecordError(SizeMismatchError, ValueError):
    """Record buffer length is not a whole multiple of the record size."""


class IntegrityError(HarvestError):
    """Downloaded content digest does not match the expected digest."""


class DatasetLayoutError(HarvestError):
    """Dataset files required by a layout are missing after acquisition."""
